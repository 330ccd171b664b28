"""
Ban Use Case DTOs (Data Transfer Objects)
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from src.app.services.ban_guard import BanBlocker
from src.domain.entities import BanSeverity, VisitorBan


# ============================================================================
# Command DTOs
# ============================================================================


class BanVisitorCommand(BaseModel):
    phone: str = Field(min_length=1, max_length=32)
    name: Optional[str] = Field(default=None, max_length=255)
    reason: Optional[str] = None
    severity: BanSeverity = BanSeverity.medium
    expires_at: Optional[datetime] = None
    building_wide: bool = False
    building_id: Optional[UUID] = None


# ============================================================================
# Response DTOs
# ============================================================================


class BanResponse(BaseModel):
    id: str
    building_id: str
    phone: str
    name: Optional[str] = None
    reason: Optional[str] = None
    severity: str
    building_wide: bool
    is_active: bool
    expires_at: Optional[str] = None
    banned_at: str

    @classmethod
    def from_entity(cls, ban: VisitorBan) -> "BanResponse":
        return cls(
            id=str(ban.id),
            building_id=str(ban.building_id),
            phone=ban.phone,
            name=ban.name,
            reason=ban.reason,
            severity=ban.severity.value,
            building_wide=ban.user_id is None,
            is_active=ban.is_active,
            expires_at=ban.expires_at.isoformat() if ban.expires_at else None,
            banned_at=ban.banned_at.isoformat(),
        )


class UnbanResponse(BaseModel):
    id: str
    is_active: bool
    unbanned_at: str


class ListBansResponse(BaseModel):
    bans: List[BanResponse]
    total: int


class CheckBanResponse(BaseModel):
    phone: str
    is_banned: bool
    blockers: List[BanBlocker]


class ExpireBansResponse(BaseModel):
    expired_count: int
