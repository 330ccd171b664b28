"""
Visitor Entity

Visitor identity deduplicated per building by normalized phone.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.clock import utcnow


class Visitor(SQLModel, table=True):
    """
    Visitor entity - one row per (building, phone).

    Business Rules:
    - Created on first reference by a visit, never deleted (only deactivated)
    - Display fields are refreshed when a host re-invites with new values
    - is_frequent flips on once visit_count reaches the configured threshold
    """

    __tablename__ = "visitors"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    building_id: UUID = Field(foreign_key="buildings.id", nullable=False)

    name: str = Field(max_length=255)
    phone: str = Field(max_length=20, nullable=False)  # +E.164
    email: Optional[str] = Field(default=None, max_length=255)
    company: Optional[str] = Field(default=None, max_length=255)

    # Aggregate stats
    visit_count: int = Field(default=0)
    is_frequent: bool = Field(default=False)
    rating: Optional[float] = Field(default=None)  # rounded average, derived from rating_total
    rating_total: int = Field(default=0)
    total_ratings: int = Field(default=0)
    last_visit: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    is_active: bool = Field(default=True)

    # Timestamps
    created_at: datetime = Field(
        default_factory=utcnow, sa_column=Column(DateTime)
    )
    updated_at: datetime = Field(
        default_factory=utcnow, sa_column=Column(DateTime)
    )

    __table_args__ = (
        UniqueConstraint("building_id", "phone", name="uq_visitor_building_phone"),
    )
