"""
Resident Entity

Read model of a host living in a building. Owned by the external user
management workflow; the visit engine only reads it.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.clock import utcnow


class Resident(SQLModel, table=True):
    """
    Resident entity - host profile used by visit creation and ban blockers.

    id is the identity provider's user id.
    """

    __tablename__ = "residents"

    id: UUID = Field(primary_key=True)
    building_id: UUID = Field(foreign_key="buildings.id", nullable=False)

    full_name: str = Field(max_length=255)
    apartment_number: Optional[str] = Field(default=None, max_length=50)

    # Visits hosted by this resident consume a building license
    uses_license: bool = Field(default=True)
    is_active: bool = Field(default=True)

    created_at: datetime = Field(
        default_factory=utcnow, sa_column=Column(DateTime)
    )

    __table_args__ = (Index("idx_resident_building", "building_id"),)
