"""
VisitVisitor Entity

Join between a visit and each invited visitor with per-visitor progress.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.clock import utcnow

from .enums import VisitorStatus


class VisitVisitor(SQLModel, table=True):
    """
    VisitVisitor entity - (visit, visitor) pair.

    Business Rules:
    - status only moves forward: expected -> arrived -> entered -> exited
    - forward-only is enforced by the state machine, not by the column type
    """

    __tablename__ = "visit_visitors"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    visit_id: UUID = Field(foreign_key="visits.id", nullable=False, index=True)
    visitor_id: UUID = Field(foreign_key="visitors.id", nullable=False, index=True)

    status: VisitorStatus = Field(default=VisitorStatus.expected)
    arrival_time: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    departure_time: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    added_at: datetime = Field(
        default_factory=utcnow, sa_column=Column(DateTime)
    )

    __table_args__ = (
        UniqueConstraint("visit_id", "visitor_id", name="uq_visit_visitor"),
    )
