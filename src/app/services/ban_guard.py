"""
Ban Guard

Answers "is this phone forbidden from entering this building, and by whom".
Every active ban on the phone counts: resident bans and building-wide bans
are OR-aggregated, so a single blocker is enough to refuse admission.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from pydantic import BaseModel

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import VisitorBan


class BanBlocker(BaseModel):
    """One active ban contributing to a block"""

    ban_id: str
    resident_apartment: Optional[str] = None
    severity: str
    reason: Optional[str] = None
    building_wide: bool


class BanCheck(BaseModel):
    """Aggregated ban status of a phone in a building"""

    blocked: bool
    blockers: List[BanBlocker] = []


def is_ban_in_force(ban: VisitorBan, now: datetime) -> bool:
    """A stale is_active flag never blocks once expires_at has passed"""
    if not ban.is_active:
        return False
    return ban.expires_at is None or ban.expires_at > now


class BanGuard:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def is_banned(self, building_id: UUID, phone: str, now: datetime) -> BanCheck:
        """
        Check a normalized phone against every active ban in the building.

        Must be called inside an open unit of work.
        """
        bans = await self.uow.visitor_bans.get_active_for_phone(building_id, phone)
        bans = [ban for ban in bans if is_ban_in_force(ban, now)]
        if not bans:
            return BanCheck(blocked=False)

        owner_ids = list({ban.user_id for ban in bans if ban.user_id is not None})
        apartments: Dict[UUID, Optional[str]] = {}
        if owner_ids:
            residents = await self.uow.residents.get_by_ids(owner_ids)
            apartments = {resident.id: resident.apartment_number for resident in residents}

        blockers = [
            BanBlocker(
                ban_id=str(ban.id),
                resident_apartment=apartments.get(ban.user_id) if ban.user_id else None,
                severity=ban.severity.value,
                reason=ban.reason,
                building_wide=ban.user_id is None,
            )
            for ban in bans
        ]
        return BanCheck(blocked=True, blockers=blockers)

    async def banned_phones(
        self, building_id: UUID, phones: Iterable[str], now: datetime
    ) -> Dict[str, BanCheck]:
        """Return the BanCheck of every blocked phone"""
        blocked = {}
        for phone in phones:
            check = await self.is_banned(building_id, phone, now)
            if check.blocked:
                blocked[phone] = check
        return blocked
