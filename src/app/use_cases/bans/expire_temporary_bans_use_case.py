import logging
from datetime import datetime
from typing import Callable

from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.clock import utcnow

from .ban_visitor_use_case import AUTOMATIC_EXPIRATION
from .dtos import ExpireBansResponse

logger = logging.getLogger(__name__)


class ExpireTemporaryBansUseCase:
    """
    Periodic sweep clearing the is_active flag of lapsed bans.

    The ban guard already ignores lapsed bans; this only brings the flag in
    line for readers that look at it directly.
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def execute(self) -> Result[ExpireBansResponse]:
        now = self.clock()

        async with self.uow:
            bans = await self.uow.visitor_bans.get_active_expired(now)
            for ban in bans:
                ban.is_active = False
                ban.unbanned_at = now
                ban.unban_reason = AUTOMATIC_EXPIRATION
                await self.uow.visitor_bans.update(ban)
            await self.uow.commit()

        logger.info("Expired %d temporary ban(s)", len(bans))
        return Return.ok(ExpireBansResponse(expired_count=len(bans)))
