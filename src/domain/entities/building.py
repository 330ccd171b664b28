"""
Building Entity

Tenant boundary owning the admission license counters.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint
from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.clock import utcnow


class Building(SQLModel, table=True):
    """
    Building entity - tenant boundary and license pool.

    Business Rules:
    - used_licenses <= total_licenses at all times (rejected, never clamped)
    - used_licenses is only written by the visit creation/cancel transactions
    """

    __tablename__ = "buildings"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255)

    total_licenses: int = Field(default=250, nullable=False)
    used_licenses: int = Field(default=0, nullable=False)

    is_active: bool = Field(default=True)

    # Timestamps
    created_at: datetime = Field(
        default_factory=utcnow, sa_column=Column(DateTime)
    )

    __table_args__ = (
        CheckConstraint("used_licenses >= 0", name="ck_building_used_licenses_positive"),
        CheckConstraint(
            "used_licenses <= total_licenses", name="ck_building_used_within_total"
        ),
    )
