"""
VisitLog Entity

Immutable record of every accepted gate scan and visitor status change.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel

from src.domain.clock import utcnow


class VisitLog(SQLModel, table=True):
    """
    VisitLog entity - scan audit trail.

    Business Rules:
    - Immutable (never updated or deleted)
    - Written in the same transaction as the transition it records
    """

    __tablename__ = "visit_logs"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    visit_id: UUID = Field(foreign_key="visits.id", nullable=False)

    action: str = Field(max_length=50)  # "entry", "exit", "completed", "visitor_arrived", "visitor_exited"
    officer_id: UUID = Field(nullable=False)
    gate_label: Optional[str] = Field(default=None, max_length=100)

    latitude: Optional[float] = Field(default=None)
    longitude: Optional[float] = Field(default=None)
    address: Optional[str] = Field(default=None, max_length=255)

    visitors_affected: Optional[list] = Field(default=None, sa_column=Column(JSON))
    notes: Optional[str] = Field(default=None)

    scanned_at: datetime = Field(
        default_factory=utcnow, sa_column=Column(DateTime)
    )

    __table_args__ = (Index("idx_visit_log_visit_scanned", "visit_id", "scanned_at"),)
