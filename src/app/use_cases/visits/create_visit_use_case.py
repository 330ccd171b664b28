"""
Create Visit Use Case

Host-facing invitation: one transaction covers ban screening, license
reservation, visitor upsert, visit and visitor rows, and QR binding.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional, Tuple
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.ban_guard import BanGuard
from src.app.services.event_publisher import IEventPublisher, NullEventPublisher
from src.app.services.qr_code_issuer import QrCodeIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.domain.clock import to_naive_utc, utcnow
from src.domain.entities import (
    AuditEvent,
    Visit,
    VisitStatus,
    VisitType,
    Visitor,
    VisitVisitor,
)
from src.domain.errors import ErrorCode
from src.domain.events import VisitCreated
from src.domain.phone import normalize_phone
from src.domain.principal import Principal

from .dtos import CreateVisitCommand, CreateVisitResponse, VisitorInput

logger = logging.getLogger(__name__)


class CreateVisitUseCase:
    """
    Use case for creating a visit with its visitors and QR code.

    Business Rules:
    - 1..max_visitors visitors, phones unique after normalization
    - a single visit carries exactly one visitor
    - expected_end, when given, must be after expected_start
    - no visitor phone may be banned in the building (whole batch rejected)
    - license-consuming hosts need a free building license
    - nothing persists unless everything does
    """

    def __init__(
        self,
        uow: UnitOfWork,
        qr_issuer: QrCodeIssuer,
        publisher: Optional[IEventPublisher] = None,
        max_visitors: int = 10,
        default_country_code: str = "234",
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.qr_issuer = qr_issuer
        self.publisher = publisher or NullEventPublisher()
        self.max_visitors = max_visitors
        self.default_country_code = default_country_code
        self.clock = clock

    def _validate(
        self, command: CreateVisitCommand
    ) -> Tuple[List[Tuple[str, VisitorInput]], Optional[Error]]:
        count = len(command.visitors)
        if count < 1 or count > self.max_visitors:
            return [], Error(
                ErrorCode.VALIDATION_ERROR,
                f"A visit must have between 1 and {self.max_visitors} visitors",
                {"visitor_count": count},
            )

        if command.visit_type == VisitType.single and count != 1:
            return [], Error(
                ErrorCode.VALIDATION_ERROR,
                "A single visit must have exactly one visitor",
                {"visitor_count": count},
            )

        if command.expected_end is not None and to_naive_utc(
            command.expected_end
        ) <= to_naive_utc(command.expected_start):
            return [], Error(
                ErrorCode.VALIDATION_ERROR,
                "expected_end must be after expected_start",
            )

        normalized = []
        seen = set()
        for visitor in command.visitors:
            try:
                phone = normalize_phone(visitor.phone, self.default_country_code)
            except ValueError as e:
                return [], Error(ErrorCode.VALIDATION_ERROR, str(e), {"phone": visitor.phone})
            if phone in seen:
                return [], Error(
                    ErrorCode.VALIDATION_ERROR,
                    "Duplicate visitor phone in request",
                    {"phone": phone},
                )
            seen.add(phone)
            normalized.append((phone, visitor))

        return normalized, None

    async def _upsert_visitor(
        self, building_id: UUID, phone: str, data: VisitorInput, now: datetime
    ) -> Visitor:
        visitor = await self.uow.visitors.get_by_building_and_phone(building_id, phone)
        if visitor is None:
            return await self.uow.visitors.create(
                Visitor(
                    building_id=building_id,
                    name=data.name,
                    phone=phone,
                    email=data.email,
                    company=data.company,
                    created_at=now,
                    updated_at=now,
                )
            )

        changed = False
        for field in ("name", "email", "company"):
            value = getattr(data, field)
            if value and getattr(visitor, field) != value:
                setattr(visitor, field, value)
                changed = True
        if not visitor.is_active:
            visitor.is_active = True
            changed = True

        if changed:
            visitor.updated_at = now
            visitor = await self.uow.visitors.update(visitor)
        return visitor

    async def execute(
        self, principal: Principal, building_id: UUID, command: CreateVisitCommand
    ) -> Result[CreateVisitResponse]:
        """
        Execute create visit use case.

        Args:
            principal: Authenticated host (resident or building admin)
            building_id: Building the visit belongs to
            command: Visit details and visitor list

        Returns:
            Result with CreateVisitResponse DTO, or Error
        """
        visitors, error = self._validate(command)
        if error:
            return Return.err(error)

        if not principal.belongs_to(building_id):
            return Return.err(
                Error(ErrorCode.FORBIDDEN, "You cannot create visits in this building")
            )

        now = self.clock()

        async with self.uow:
            building = await self.uow.buildings.get_by_id(building_id)
            if building is None or not building.is_active:
                return Return.err(Error(ErrorCode.BUILDING_NOT_FOUND, "Building not found"))

            host = await self.uow.residents.get_by_id(principal.user_id)
            if host is None or host.building_id != building_id or not host.is_active:
                return Return.err(
                    Error(ErrorCode.HOST_NOT_FOUND, "Host has no resident profile in this building")
                )

            banned = await BanGuard(self.uow).banned_phones(
                building_id, [phone for phone, _ in visitors], now
            )
            if banned:
                phone, check = next(iter(banned.items()))
                logger.warning(
                    "Visit creation rejected: banned visitor %s in building %s", phone, building_id
                )
                return Return.err(
                    Error(
                        ErrorCode.VISITOR_BANNED,
                        f"Visitor {phone} is banned from this building",
                        {
                            "phone": phone,
                            "banned_phones": list(banned.keys()),
                            "blockers": [b.model_dump() for b in check.blockers],
                        },
                    )
                )

            if host.uses_license:
                reserved = await self.uow.buildings.try_reserve_license(building_id)
                if not reserved:
                    logger.warning("Visit creation rejected: building %s out of licenses", building_id)
                    return Return.err(
                        Error(
                            ErrorCode.CAPACITY_EXCEEDED,
                            "Building has no available licenses",
                            {"total_licenses": building.total_licenses},
                        )
                    )

            visitor_rows = [
                await self._upsert_visitor(building_id, phone, data, now)
                for phone, data in visitors
            ]

            visit = Visit(
                building_id=building_id,
                host_id=principal.user_id,
                title=command.title,
                description=command.description,
                purpose=command.purpose,
                visit_type=command.visit_type,
                expected_start=to_naive_utc(command.expected_start),
                expected_end=to_naive_utc(command.expected_end) if command.expected_end else None,
                max_visitors=len(visitor_rows),
                current_visitors=len(visitor_rows),
                status=VisitStatus.pending,
                entry=False,
                exit=False,
                uses_license=host.uses_license,
                created_at=now,
                updated_at=now,
            )

            issued = await self.qr_issuer.issue(self.uow, visit, now)
            if issued.is_err():
                return Return.err(issued.error)

            await self.uow.visits.create(visit)

            for visitor in visitor_rows:
                await self.uow.visit_visitors.create(
                    VisitVisitor(visit_id=visit.id, visitor_id=visitor.id, added_at=now)
                )

            # QR rendering happens before commit so a failure leaves nothing behind
            qr_image = self.qr_issuer.render_data_url(issued.value.code)

            await self.uow.audit_events.create(
                AuditEvent(
                    building_id=building_id,
                    user_id=principal.user_id,
                    action="visit_created",
                    event_metadata={
                        "visit_id": str(visit.id),
                        "visitor_count": len(visitor_rows),
                        "uses_license": host.uses_license,
                    },
                    created_at=now,
                )
            )

            await self.uow.commit()

        logger.info(
            "Visit %s created in building %s with %d visitor(s)",
            visit.id,
            building_id,
            len(visitor_rows),
        )
        self.publisher.publish(
            VisitCreated(
                visit_id=visit.id,
                building_id=building_id,
                host_id=principal.user_id,
                qr_code=issued.value.code,
                visitor_ids=[visitor.id for visitor in visitor_rows],
            )
        )

        return Return.ok(
            CreateVisitResponse(
                visit_id=str(visit.id),
                qr_code=issued.value.code,
                qr_image=qr_image,
                visitor_count=len(visitor_rows),
                expires_at=issued.value.expires_at.isoformat(),
                status=visit.status.value,
            )
        )
