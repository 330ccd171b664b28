"""
Ban Visitor Use Case

Residents block a phone for their own building; building admins may also
issue building-wide bans. Bans from different owners on the same phone are
independent and all of them block.
"""

import logging
from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.ban_guard import is_ban_in_force
from src.app.services.unit_of_work import UnitOfWork
from src.domain.clock import to_naive_utc, utcnow
from src.domain.entities import AuditEvent, BanType, VisitorBan
from src.domain.errors import ErrorCode
from src.domain.phone import normalize_phone
from src.domain.principal import Principal

from .dtos import BanResponse, BanVisitorCommand

logger = logging.getLogger(__name__)

AUTOMATIC_EXPIRATION = "Automatic expiration"


class BanVisitorUseCase:
    def __init__(
        self,
        uow: UnitOfWork,
        default_country_code: str = "234",
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.default_country_code = default_country_code
        self.clock = clock

    async def execute(self, principal: Principal, command: BanVisitorCommand) -> Result[BanResponse]:
        """
        Execute ban visitor use case.

        Returns:
            Result with BanResponse DTO, or Error (ALREADY_BANNED when the same
            owner already has an active ban on the phone)
        """
        building_id = command.building_id or principal.building_id
        if building_id is None:
            return Return.err(Error(ErrorCode.VALIDATION_ERROR, "building_id is required"))

        if not principal.belongs_to(building_id):
            return Return.err(Error(ErrorCode.FORBIDDEN, "You cannot ban visitors in this building"))

        if command.building_wide and not principal.is_admin_of(building_id):
            return Return.err(
                Error(ErrorCode.FORBIDDEN, "Only building admins can issue building-wide bans")
            )

        try:
            phone = normalize_phone(command.phone, self.default_country_code)
        except ValueError as e:
            return Return.err(Error(ErrorCode.VALIDATION_ERROR, str(e), {"phone": command.phone}))

        now = self.clock()
        expires_at = to_naive_utc(command.expires_at) if command.expires_at else None
        if expires_at is not None and expires_at <= now:
            return Return.err(
                Error(ErrorCode.VALIDATION_ERROR, "expires_at must be in the future")
            )

        owner_id: Optional[UUID] = None if command.building_wide else principal.user_id

        async with self.uow:
            building = await self.uow.buildings.get_by_id(building_id)
            if building is None:
                return Return.err(Error(ErrorCode.BUILDING_NOT_FOUND, "Building not found"))

            existing = await self.uow.visitor_bans.get_active_by_owner_and_phone(
                building_id, owner_id, phone
            )
            if existing is not None:
                if is_ban_in_force(existing, now):
                    return Return.err(
                        Error(
                            ErrorCode.ALREADY_BANNED,
                            "This visitor is already banned",
                            {"ban_id": str(existing.id)},
                        )
                    )
                # Lapsed ban whose flag was never swept
                existing.is_active = False
                existing.unbanned_at = now
                existing.unban_reason = AUTOMATIC_EXPIRATION
                await self.uow.visitor_bans.update(existing)

            name = command.name
            if not name:
                visitor = await self.uow.visitors.get_by_building_and_phone(building_id, phone)
                name = visitor.name if visitor else None

            ban = await self.uow.visitor_bans.create(
                VisitorBan(
                    building_id=building_id,
                    user_id=owner_id,
                    banned_by=principal.user_id,
                    phone=phone,
                    name=name,
                    reason=command.reason,
                    severity=command.severity,
                    ban_type=BanType.manual,
                    expires_at=expires_at,
                    banned_at=now,
                )
            )

            await self.uow.audit_events.create(
                AuditEvent(
                    building_id=building_id,
                    user_id=principal.user_id,
                    action="visitor_banned",
                    event_metadata={
                        "ban_id": str(ban.id),
                        "phone": phone,
                        "severity": command.severity.value,
                        "building_wide": command.building_wide,
                    },
                    created_at=now,
                )
            )

            await self.uow.commit()

            logger.info("Phone %s banned in building %s by %s", phone, building_id, principal.user_id)
            return Return.ok(BanResponse.from_entity(ban))
