"""
Scan Visit Use Case

Gate entry point: resolves a scanned code to its visit and drives the
entry/exit transition under the visit's row lock.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.ban_guard import BanGuard
from src.app.services.event_publisher import IEventPublisher, NullEventPublisher
from src.app.services.qr_code_issuer import QrCodeIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.domain import visit_state_machine as machine
from src.domain.clock import utcnow
from src.domain.entities import ScanAction, Visit, VisitLog, VisitVisitor
from src.domain.errors import ErrorCode
from src.domain.events import AdmissionDenied, VisitorEntered, VisitorExited
from src.domain.principal import Principal

from .dtos import ScanCommand, ScanResponse

logger = logging.getLogger(__name__)


class ScanVisitUseCase:
    """
    Use case for processing a gate scan.

    Guards, in order (first failure wins, no state change):
    - officer identity present and code well-formed (before any lookup)
    - code resolves to a visit (CODE_NOT_FOUND)
    - code not expired (CODE_EXPIRED, flips an unstarted visit to expired)
    - visit not terminal (VISIT_ALREADY_CLOSED)
    - entry: not entered yet, and no visitor banned since issuance
    - exit: entered and not exited yet
    """

    def __init__(
        self,
        uow: UnitOfWork,
        qr_issuer: QrCodeIssuer,
        publisher: Optional[IEventPublisher] = None,
        frequent_threshold: int = 5,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.qr_issuer = qr_issuer
        self.publisher = publisher or NullEventPublisher()
        self.frequent_threshold = frequent_threshold
        self.clock = clock

    def _validate(self, command: ScanCommand) -> Optional[Error]:
        if not command.officer_id:
            return Error(ErrorCode.VALIDATION_ERROR, "Officer identity is required")
        try:
            UUID(str(command.officer_id))
        except ValueError:
            return Error(
                ErrorCode.VALIDATION_ERROR,
                "Officer identity is invalid",
                {"officer_id": command.officer_id},
            )
        if not self.qr_issuer.is_valid_format(command.code):
            return Error(ErrorCode.VALIDATION_ERROR, "Malformed QR code")
        return None

    async def _expire_on_scan(self, visit: Visit, now: datetime) -> None:
        if not machine.can_expire(visit):
            return
        machine.apply_expire(visit, now)
        await self.uow.visits.update(visit)
        await self.uow.commit()
        logger.info("Visit %s expired on scan of an out-of-date code", visit.id)

    async def _check_bans(
        self, visit: Visit, links: List[VisitVisitor], now: datetime
    ) -> Optional[Error]:
        visitors = await self.uow.visitors.get_by_ids([link.visitor_id for link in links])
        banned = await BanGuard(self.uow).banned_phones(
            visit.building_id, [visitor.phone for visitor in visitors], now
        )
        if not banned:
            return None

        return Error(
            ErrorCode.ADMISSION_DENIED,
            "One or more visitors are banned from this building",
            {
                "phones": list(banned.keys()),
                "blockers": {
                    phone: [b.model_dump() for b in check.blockers]
                    for phone, check in banned.items()
                },
            },
        )

    async def _record_visitor_stats(self, links: List[VisitVisitor], now: datetime) -> None:
        visitors = await self.uow.visitors.get_by_ids([link.visitor_id for link in links])
        for visitor in visitors:
            visitor.visit_count += 1
            visitor.last_visit = now
            visitor.is_frequent = visitor.visit_count >= self.frequent_threshold
            visitor.updated_at = now
            await self.uow.visitors.update(visitor)

    async def execute(self, principal: Principal, command: ScanCommand) -> Result[ScanResponse]:
        """
        Execute scan visit use case.

        Args:
            principal: Authenticated gate officer (security or building admin)
            command: Scanned code, action and gate metadata

        Returns:
            Result with ScanResponse DTO, or Error
        """
        error = self._validate(command)
        if error:
            return Return.err(error)

        officer_id = UUID(str(command.officer_id))
        now = self.clock()
        denied: Optional[AdmissionDenied] = None

        async with self.uow:
            visit = await self.uow.visits.get_by_qr_code(command.code, for_update=True)
            if visit is None:
                return Return.err(Error(ErrorCode.CODE_NOT_FOUND, "QR code not found"))

            if not principal.can_scan_in(visit.building_id):
                return Return.err(
                    Error(ErrorCode.FORBIDDEN, "You cannot scan visits in this building")
                )

            error = machine.check_scan(visit, command.action, now)
            if error:
                if error.code == ErrorCode.CODE_EXPIRED:
                    await self._expire_on_scan(visit, now)
                logger.warning("Scan rejected for visit %s: %s", visit.id, error.code)
                return Return.err(error)

            links = await self.uow.visit_visitors.get_by_visit(visit.id)

            if command.action == ScanAction.entry:
                error = await self._check_bans(visit, links, now)
                if error:
                    logger.warning("Admission denied for visit %s: banned visitor", visit.id)
                    denied = AdmissionDenied(
                        visit_id=visit.id,
                        building_id=visit.building_id,
                        officer_id=officer_id,
                        phones=error.details["phones"],
                        gate_label=command.gate_label,
                    )

            if denied is None:
                claimed = await self.uow.visits.claim_scan(visit.id, command.action)
                if not claimed:
                    # Another transaction won the race for this flag
                    code = (
                        ErrorCode.DUPLICATE_ENTRY
                        if command.action == ScanAction.entry
                        else ErrorCode.DUPLICATE_EXIT
                    )
                    logger.warning("Scan lost race for visit %s: %s", visit.id, code)
                    return Return.err(
                        Error(code, f"{command.action.value.capitalize()} has already been recorded")
                    )

                if command.action == ScanAction.entry:
                    affected = machine.apply_entry(visit, links, now)
                else:
                    affected = machine.apply_exit(visit, links, now)

                for link in affected:
                    await self.uow.visit_visitors.update(link)
                if command.action == ScanAction.entry:
                    await self._record_visitor_stats(affected, now)

                await self.uow.visits.update(visit)

                geo = command.geo
                await self.uow.visit_logs.create(
                    VisitLog(
                        visit_id=visit.id,
                        action=command.action.value,
                        officer_id=officer_id,
                        gate_label=command.gate_label,
                        latitude=geo.lat if geo else None,
                        longitude=geo.lng if geo else None,
                        address=geo.address if geo else None,
                        visitors_affected=[str(link.visitor_id) for link in affected],
                        scanned_at=now,
                    )
                )

                await self.uow.commit()

        if denied is not None:
            self.publisher.publish(denied)
            return Return.err(error)

        visitor_ids = [link.visitor_id for link in affected]
        logger.info(
            "Scan %s accepted for visit %s by officer %s (%d visitor(s))",
            command.action.value,
            visit.id,
            officer_id,
            len(visitor_ids),
        )

        if command.action == ScanAction.entry:
            event = VisitorEntered(
                visit_id=visit.id,
                building_id=visit.building_id,
                officer_id=officer_id,
                visitor_ids=visitor_ids,
                gate_label=command.gate_label,
            )
        else:
            event = VisitorExited(
                visit_id=visit.id,
                building_id=visit.building_id,
                officer_id=officer_id,
                visitor_ids=visitor_ids,
                visit_completed=True,
                gate_label=command.gate_label,
            )
        self.publisher.publish(event)

        return Return.ok(
            ScanResponse(
                visit_id=str(visit.id),
                action=command.action.value,
                visitors_affected=[str(visitor_id) for visitor_id in visitor_ids],
                new_status=visit.status.value,
                scanned_at=now.isoformat(),
                officer_id=str(officer_id),
            )
        )
