"""
Visit Entity

Aggregate root of the access-control engine.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.clock import utcnow

from .enums import VisitStatus, VisitType


class Visit(SQLModel, table=True):
    """
    Visit entity - host-created invitation bound to one QR code.

    Business Rules:
    - entry/exit are the ground truth for physical presence
    - status is derived from entry/exit (plus cancel/expiry) at write time
    - exit implies entry
    - completed, cancelled and expired are terminal
    """

    __tablename__ = "visits"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    building_id: UUID = Field(foreign_key="buildings.id", nullable=False)
    host_id: UUID = Field(nullable=False)

    title: str = Field(max_length=255)
    description: Optional[str] = Field(default=None)
    purpose: Optional[str] = Field(default=None, max_length=255)
    visit_type: VisitType = Field(default=VisitType.single)

    # Scheduling
    expected_start: datetime = Field(sa_column=Column(DateTime, nullable=False))
    expected_end: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    actual_start: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    actual_end: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    # QR binding
    qr_code: Optional[str] = Field(default=None, unique=True, max_length=64)
    qr_issued_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    qr_expires_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    max_visitors: int = Field(default=1)
    current_visitors: int = Field(default=0)

    # Lifecycle
    status: VisitStatus = Field(default=VisitStatus.pending)
    entry: bool = Field(default=False)
    exit: bool = Field(default=False)

    # Whether creation consumed a building license
    uses_license: bool = Field(default=False)

    cancelled_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    cancellation_reason: Optional[str] = Field(default=None)

    # Timestamps
    created_at: datetime = Field(
        default_factory=utcnow, sa_column=Column(DateTime)
    )
    updated_at: datetime = Field(
        default_factory=utcnow, sa_column=Column(DateTime)
    )

    __table_args__ = (
        Index("idx_visit_building_status", "building_id", "status"),
        Index("idx_visit_host", "host_id"),
        Index("idx_visit_expected_start", "expected_start"),
    )
