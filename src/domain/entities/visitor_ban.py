"""
VisitorBan Entity

Resident-level or building-wide block on a phone number.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.clock import utcnow

from .enums import BanSeverity, BanType


class VisitorBan(SQLModel, table=True):
    """
    VisitorBan entity - one ban per (owner, phone) while active.

    Business Rules:
    - user_id is the banning resident; null means a building-wide ban
    - many residents may ban the same phone; any active ban blocks entry
    - a ban whose expires_at has passed no longer blocks, even while
      is_active is still true (the flag is swept lazily)
    """

    __tablename__ = "visitor_bans"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    building_id: UUID = Field(foreign_key="buildings.id", nullable=False)
    user_id: Optional[UUID] = Field(default=None)
    banned_by: UUID = Field(nullable=False)

    phone: str = Field(max_length=20, nullable=False)
    name: Optional[str] = Field(default=None, max_length=255)
    reason: Optional[str] = Field(default=None)

    severity: BanSeverity = Field(default=BanSeverity.medium)
    ban_type: BanType = Field(default=BanType.manual)

    is_active: bool = Field(default=True)
    expires_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    banned_at: datetime = Field(
        default_factory=utcnow, sa_column=Column(DateTime)
    )
    unbanned_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    unban_reason: Optional[str] = Field(default=None)

    __table_args__ = (
        Index("idx_ban_building_phone_active", "building_id", "phone", "is_active"),
        Index("idx_ban_user_active", "user_id", "is_active"),
    )
