import logging
from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.clock import utcnow
from src.domain.entities import AuditEvent
from src.domain.errors import ErrorCode
from src.domain.principal import Principal

from .dtos import UnbanResponse

logger = logging.getLogger(__name__)


class UnbanVisitorUseCase:
    """
    Use case for lifting a ban.

    Business Rules:
    - Resident bans are lifted by their owner or a building admin
    - Building-wide bans are lifted by a building admin
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def execute(
        self, principal: Principal, ban_id: UUID, reason: Optional[str] = None
    ) -> Result[UnbanResponse]:
        now = self.clock()

        async with self.uow:
            ban = await self.uow.visitor_bans.get_by_id(ban_id)
            if ban is None or not ban.is_active:
                return Return.err(Error(ErrorCode.BAN_NOT_FOUND, "Active ban not found"))

            is_owner = ban.user_id is not None and ban.user_id == principal.user_id
            if not (is_owner or principal.is_admin_of(ban.building_id)):
                return Return.err(Error(ErrorCode.FORBIDDEN, "You cannot lift this ban"))

            ban.is_active = False
            ban.unbanned_at = now
            ban.unban_reason = reason
            await self.uow.visitor_bans.update(ban)

            await self.uow.audit_events.create(
                AuditEvent(
                    building_id=ban.building_id,
                    user_id=principal.user_id,
                    action="visitor_unbanned",
                    event_metadata={"ban_id": str(ban.id), "phone": ban.phone, "reason": reason},
                    created_at=now,
                )
            )

            await self.uow.commit()

            logger.info("Ban %s lifted by %s", ban.id, principal.user_id)
            return Return.ok(
                UnbanResponse(id=str(ban.id), is_active=False, unbanned_at=now.isoformat())
            )
