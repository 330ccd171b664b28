from datetime import datetime
from typing import Callable
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain import visit_state_machine as machine
from src.domain.clock import utcnow
from src.domain.errors import ErrorCode
from src.domain.principal import Principal

from .dtos import VisitStatusResponse


class ConfirmVisitUseCase:
    """Use case for moving a pending visit to confirmed"""

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def execute(self, principal: Principal, visit_id: UUID) -> Result[VisitStatusResponse]:
        now = self.clock()

        async with self.uow:
            visit = await self.uow.visits.get_by_id(visit_id, for_update=True)
            if visit is None:
                return Return.err(Error(ErrorCode.VISIT_NOT_FOUND, "Visit not found"))

            if not principal.can_manage_visit(visit):
                return Return.err(
                    Error(ErrorCode.FORBIDDEN, "Only the host or a building admin can confirm")
                )

            error = machine.check_confirm(visit)
            if error:
                return Return.err(error)

            machine.apply_confirm(visit, now)
            await self.uow.visits.update(visit)
            await self.uow.commit()

            return Return.ok(
                VisitStatusResponse(visit_id=str(visit.id), status=visit.status.value)
            )
