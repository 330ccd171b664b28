from uuid import UUID

from pydantic import BaseModel

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import ErrorCode
from src.domain.principal import Principal


class LicenseUsageResponse(BaseModel):
    building_id: str
    total_licenses: int
    used_licenses: int
    available_licenses: int
    utilization_percentage: float


class GetLicenseUsageUseCase:
    """License counters of a building, for its admins"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, principal: Principal, building_id: UUID) -> Result[LicenseUsageResponse]:
        if not principal.is_admin_of(building_id):
            return Return.err(Error(ErrorCode.FORBIDDEN, "Only building admins can view licenses"))

        async with self.uow:
            building = await self.uow.buildings.get_by_id(building_id)
            if building is None:
                return Return.err(Error(ErrorCode.BUILDING_NOT_FOUND, "Building not found"))

            total = building.total_licenses
            used = building.used_licenses
            percentage = round(used / total * 100, 2) if total else 0.0

            return Return.ok(
                LicenseUsageResponse(
                    building_id=str(building.id),
                    total_licenses=total,
                    used_licenses=used,
                    available_licenses=max(total - used, 0),
                    utilization_percentage=percentage,
                )
            )
