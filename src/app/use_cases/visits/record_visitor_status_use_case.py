"""
Record Visitor Status Use Case

Per-visitor gate tracking inside a group visit: an officer can mark one
visitor as arrived, or let one visitor leave while the others stay. When
the last present visitor leaves, the visit itself is exited.
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
from src.domain.entities import ScanAction, VisitLog, VisitorStatus
from src.domain.errors import ErrorCode
from src.domain.events import VisitorExited
from src.domain.principal import Principal

from .dtos import VisitorStatusResponse

logger = logging.getLogger(__name__)


class RecordVisitorStatusUseCase:
    def __init__(
        self,
        uow: UnitOfWork,
        publisher: Optional[IEventPublisher] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.publisher = publisher or NullEventPublisher()
        self.clock = clock

    async def execute(
        self,
        principal: Principal,
        visit_id: UUID,
        visitor_id: UUID,
        status: VisitorStatus,
    ) -> Result[VisitorStatusResponse]:
        now = self.clock()
        visit_completed = False

        async with self.uow:
            visit = await self.uow.visits.get_by_id(visit_id, for_update=True)
            if visit is None:
                return Return.err(Error(ErrorCode.VISIT_NOT_FOUND, "Visit not found"))

            if not principal.can_scan_in(visit.building_id):
                return Return.err(
                    Error(ErrorCode.FORBIDDEN, "You cannot update visitors in this building")
                )

            link = await self.uow.visit_visitors.get(visit_id, visitor_id)
            if link is None:
                return Return.err(
                    Error(ErrorCode.VISITOR_NOT_IN_VISIT, "Visitor is not part of this visit")
                )

            error = machine.advance_visitor(visit, link, status, now)
            if error:
                return Return.err(error)
            await self.uow.visit_visitors.update(link)

            links = await self.uow.visit_visitors.get_by_visit(visit.id)
            present = machine.recount_visitors(visit, links)

            if status == VisitorStatus.exited and present == 0:
                if not await self.uow.visits.claim_scan(visit.id, ScanAction.exit):
                    return Return.err(
                        Error(ErrorCode.DUPLICATE_EXIT, "Exit has already been recorded")
                    )
                machine.apply_exit(visit, links, now)
                visit_completed = True

            await self.uow.visits.update(visit)

            await self.uow.visit_logs.create(
                VisitLog(
                    visit_id=visit.id,
                    action=f"visitor_{status.value}",
                    officer_id=principal.user_id,
                    visitors_affected=[str(visitor_id)],
                    scanned_at=now,
                )
            )

            await self.uow.commit()

        logger.info(
            "Visitor %s marked %s on visit %s", visitor_id, status.value, visit.id
        )
        if status == VisitorStatus.exited:
            self.publisher.publish(
                VisitorExited(
                    visit_id=visit.id,
                    building_id=visit.building_id,
                    officer_id=principal.user_id,
                    visitor_ids=[visitor_id],
                    visit_completed=visit_completed,
                )
            )

        return Return.ok(
            VisitorStatusResponse(
                visit_id=str(visit.id),
                visitor_id=str(visitor_id),
                visitor_status=link.status,
                visit_status=visit.status.value,
                current_visitors=visit.current_visitors,
            )
        )
