"""
Expire Stale Visits Use Case

Periodic sweep: visits that were never entered and whose expected start is
more than the grace period in the past move to expired. Licenses stay
consumed (no-shows are billable).
"""

import logging
from datetime import datetime, timedelta
from typing import Callable

from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain import visit_state_machine as machine
from src.domain.clock import utcnow
from src.domain.entities import AuditEvent

from .dtos import ExpireVisitsResponse

logger = logging.getLogger(__name__)


class ExpireStaleVisitsUseCase:
    def __init__(
        self,
        uow: UnitOfWork,
        grace_hours: int = 48,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.grace_hours = grace_hours
        self.clock = clock

    async def execute(self) -> Result[ExpireVisitsResponse]:
        now = self.clock()
        cutoff = now - timedelta(hours=self.grace_hours)
        expired = []

        async with self.uow:
            candidates = await self.uow.visits.get_open_started_before(cutoff)
            for visit in candidates:
                if not (machine.can_expire(visit) and machine.is_past_grace(visit, now, self.grace_hours)):
                    continue
                machine.apply_expire(visit, now)
                await self.uow.visits.update(visit)
                await self.uow.audit_events.create(
                    AuditEvent(
                        building_id=visit.building_id,
                        action="visit_expired",
                        event_metadata={"visit_id": str(visit.id)},
                        created_at=now,
                    )
                )
                expired.append(visit)

            await self.uow.commit()

        logger.info("Expired %d stale visit(s)", len(expired))
        return Return.ok(
            ExpireVisitsResponse(
                expired_count=len(expired),
                visit_ids=[str(visit.id) for visit in expired],
            )
        )
