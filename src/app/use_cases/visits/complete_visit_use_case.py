"""
Complete Visit Use Case

Manual close of an active visit when no exit scan happened.
"""

import logging
from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.event_publisher import IEventPublisher, NullEventPublisher
from src.app.services.unit_of_work import UnitOfWork
from src.domain import visit_state_machine as machine
from src.domain.clock import utcnow
from src.domain.entities import ScanAction, VisitLog
from src.domain.errors import ErrorCode
from src.domain.events import VisitorExited
from src.domain.principal import Principal

from .dtos import VisitStatusResponse

logger = logging.getLogger(__name__)


class CompleteVisitUseCase:
    """
    Use case for completing an active visit.

    Same effects as an exit scan (every remaining visitor exits). The
    license is kept.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        publisher: Optional[IEventPublisher] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.publisher = publisher or NullEventPublisher()
        self.clock = clock

    async def execute(self, principal: Principal, visit_id: UUID) -> Result[VisitStatusResponse]:
        now = self.clock()

        async with self.uow:
            visit = await self.uow.visits.get_by_id(visit_id, for_update=True)
            if visit is None:
                return Return.err(Error(ErrorCode.VISIT_NOT_FOUND, "Visit not found"))

            if not principal.can_manage_visit(visit):
                return Return.err(
                    Error(ErrorCode.FORBIDDEN, "Only the host or a building admin can complete")
                )

            error = machine.check_complete(visit)
            if error:
                return Return.err(error)

            if not await self.uow.visits.claim_scan(visit.id, ScanAction.exit):
                return Return.err(
                    Error(ErrorCode.DUPLICATE_EXIT, "Exit has already been recorded")
                )

            links = await self.uow.visit_visitors.get_by_visit(visit.id)
            affected = machine.apply_exit(visit, links, now)
            for link in affected:
                await self.uow.visit_visitors.update(link)
            await self.uow.visits.update(visit)

            await self.uow.visit_logs.create(
                VisitLog(
                    visit_id=visit.id,
                    action="completed",
                    officer_id=principal.user_id,
                    visitors_affected=[str(link.visitor_id) for link in affected],
                    notes="Closed manually",
                    scanned_at=now,
                )
            )

            await self.uow.commit()

        logger.info("Visit %s completed manually by %s", visit.id, principal.user_id)
        self.publisher.publish(
            VisitorExited(
                visit_id=visit.id,
                building_id=visit.building_id,
                officer_id=principal.user_id,
                visitor_ids=[link.visitor_id for link in affected],
                visit_completed=True,
            )
        )

        return Return.ok(VisitStatusResponse(visit_id=str(visit.id), status=visit.status.value))
