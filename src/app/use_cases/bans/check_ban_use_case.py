from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.ban_guard import BanGuard
from src.app.services.unit_of_work import UnitOfWork
from src.domain.clock import utcnow
from src.domain.errors import ErrorCode
from src.domain.phone import normalize_phone
from src.domain.principal import Principal

from .dtos import CheckBanResponse


class CheckBanUseCase:
    """Read-only ban lookup for dashboards and search"""

    def __init__(
        self,
        uow: UnitOfWork,
        default_country_code: str = "234",
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.default_country_code = default_country_code
        self.clock = clock

    async def execute(
        self, principal: Principal, phone: str, building_id: Optional[UUID] = None
    ) -> Result[CheckBanResponse]:
        building_id = building_id or principal.building_id
        if building_id is None:
            return Return.err(Error(ErrorCode.VALIDATION_ERROR, "building_id is required"))
        if not principal.belongs_to(building_id):
            return Return.err(Error(ErrorCode.FORBIDDEN, "You cannot query this building"))

        try:
            normalized = normalize_phone(phone, self.default_country_code)
        except ValueError as e:
            return Return.err(Error(ErrorCode.VALIDATION_ERROR, str(e), {"phone": phone}))

        async with self.uow:
            check = await BanGuard(self.uow).is_banned(building_id, normalized, self.clock())

        return Return.ok(
            CheckBanResponse(phone=normalized, is_banned=check.blocked, blockers=check.blockers)
        )
