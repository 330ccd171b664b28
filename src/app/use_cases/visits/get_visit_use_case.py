from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import ErrorCode
from src.domain.principal import Principal

from .dtos import ScanLogInfo, VisitDetailResponse, VisitVisitorInfo


def _iso(value):
    return value.isoformat() if value else None


class GetVisitUseCase:
    """Read-only view of a visit with its visitors and scan trail"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, principal: Principal, visit_id: UUID) -> Result[VisitDetailResponse]:
        async with self.uow:
            visit = await self.uow.visits.get_by_id(visit_id)
            if visit is None:
                return Return.err(Error(ErrorCode.VISIT_NOT_FOUND, "Visit not found"))

            if not (principal.can_manage_visit(visit) or principal.can_scan_in(visit.building_id)):
                return Return.err(Error(ErrorCode.FORBIDDEN, "You cannot view this visit"))

            links = await self.uow.visit_visitors.get_by_visit(visit.id)
            visitors = await self.uow.visitors.get_by_ids([link.visitor_id for link in links])
            by_id = {visitor.id: visitor for visitor in visitors}
            logs = await self.uow.visit_logs.get_by_visit(visit.id)

            return Return.ok(
                VisitDetailResponse(
                    id=str(visit.id),
                    building_id=str(visit.building_id),
                    host_id=str(visit.host_id),
                    title=visit.title,
                    description=visit.description,
                    purpose=visit.purpose,
                    visit_type=visit.visit_type.value,
                    status=visit.status.value,
                    entry=visit.entry,
                    exit=visit.exit,
                    expected_start=visit.expected_start.isoformat(),
                    expected_end=_iso(visit.expected_end),
                    actual_start=_iso(visit.actual_start),
                    actual_end=_iso(visit.actual_end),
                    qr_code=visit.qr_code,
                    qr_expires_at=_iso(visit.qr_expires_at),
                    max_visitors=visit.max_visitors,
                    current_visitors=visit.current_visitors,
                    cancellation_reason=visit.cancellation_reason,
                    visitors=[
                        VisitVisitorInfo(
                            visitor_id=str(link.visitor_id),
                            name=by_id[link.visitor_id].name,
                            phone=by_id[link.visitor_id].phone,
                            email=by_id[link.visitor_id].email,
                            company=by_id[link.visitor_id].company,
                            status=link.status.value,
                            arrival_time=_iso(link.arrival_time),
                            departure_time=_iso(link.departure_time),
                        )
                        for link in links
                        if link.visitor_id in by_id
                    ],
                    scans=[
                        ScanLogInfo(
                            action=log.action,
                            officer_id=str(log.officer_id),
                            gate_label=log.gate_label,
                            visitors_affected=log.visitors_affected or [],
                            scanned_at=log.scanned_at.isoformat(),
                        )
                        for log in logs
                    ],
                )
            )
