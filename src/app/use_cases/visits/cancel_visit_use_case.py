"""
Cancel Visit Use Case

Host or building admin withdraws an invitation that has not started.
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
from src.domain.entities import AuditEvent
from src.domain.errors import ErrorCode
from src.domain.events import VisitCancelled
from src.domain.principal import Principal

from .dtos import VisitStatusResponse

logger = logging.getLogger(__name__)


class CancelVisitUseCase:
    """
    Use case for cancelling a visit.

    Business Rules:
    - Only pending/confirmed visits can be cancelled
    - The license is returned only if the visit consumed one; a visit that
      was entered keeps its license
    - Shares the visit row lock with scans: whichever commits first wins
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

    async def execute(
        self, principal: Principal, visit_id: UUID, reason: Optional[str] = None
    ) -> Result[VisitStatusResponse]:
        now = self.clock()

        async with self.uow:
            visit = await self.uow.visits.get_by_id(visit_id, for_update=True)
            if visit is None:
                return Return.err(Error(ErrorCode.VISIT_NOT_FOUND, "Visit not found"))

            if not principal.can_manage_visit(visit):
                return Return.err(
                    Error(ErrorCode.FORBIDDEN, "Only the host or a building admin can cancel")
                )

            error = machine.check_cancel(visit)
            if error:
                return Return.err(error)

            machine.apply_cancel(visit, now, reason)
            await self.uow.visits.update(visit)

            released = False
            if visit.uses_license:
                released = await self.uow.buildings.release_license(visit.building_id)
                if not released:
                    logger.warning(
                        "License counter of building %s already at zero", visit.building_id
                    )

            await self.uow.audit_events.create(
                AuditEvent(
                    building_id=visit.building_id,
                    user_id=principal.user_id,
                    action="visit_cancelled",
                    event_metadata={
                        "visit_id": str(visit.id),
                        "reason": reason,
                        "license_released": released,
                    },
                    created_at=now,
                )
            )

            await self.uow.commit()

        logger.info("Visit %s cancelled by %s", visit.id, principal.user_id)
        self.publisher.publish(
            VisitCancelled(
                visit_id=visit.id,
                building_id=visit.building_id,
                cancelled_by=principal.user_id,
                reason=reason,
                license_released=released,
            )
        )

        return Return.ok(
            VisitStatusResponse(
                visit_id=str(visit.id),
                status=visit.status.value,
                license_released=released,
            )
        )
