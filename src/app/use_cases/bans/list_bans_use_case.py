from datetime import datetime
from typing import Callable

from libs.result import Error, Result, Return
from src.app.services.ban_guard import is_ban_in_force
from src.app.services.unit_of_work import UnitOfWork
from src.domain.clock import utcnow
from src.domain.errors import ErrorCode
from src.domain.principal import Principal

from .dtos import BanResponse, ListBansResponse


class ListBansUseCase:
    """Active bans owned by the caller, or the building-wide list for admins"""

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def execute(
        self, principal: Principal, building_wide: bool = False
    ) -> Result[ListBansResponse]:
        building_id = principal.building_id
        if building_id is None:
            return Return.err(Error(ErrorCode.VALIDATION_ERROR, "Caller has no building"))

        if building_wide and not principal.is_admin_of(building_id):
            return Return.err(
                Error(ErrorCode.FORBIDDEN, "Only building admins can list building-wide bans")
            )

        now = self.clock()
        owner_id = None if building_wide else principal.user_id

        async with self.uow:
            bans = await self.uow.visitor_bans.get_active_by_owner(building_id, owner_id)

        bans = [BanResponse.from_entity(ban) for ban in bans if is_ban_in_force(ban, now)]
        return Return.ok(ListBansResponse(bans=bans, total=len(bans)))
