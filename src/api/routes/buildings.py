from uuid import UUID

from fastapi import APIRouter, Depends, status

from src.api.error import raise_for_error
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.buildings import GetLicenseUsageUseCase
from src.app.use_cases.buildings.get_license_usage_use_case import LicenseUsageResponse
from src.depends import get_unit_of_work, require_roles
from src.domain.entities import UserRole
from src.domain.principal import Principal

router = APIRouter(prefix="/buildings", tags=["Buildings"])


@router.get(
    "/{building_id}/licenses",
    status_code=status.HTTP_200_OK,
    response_model=LicenseUsageResponse,
)
async def get_license_usage(
    building_id: UUID,
    principal: Principal = Depends(
        require_roles(UserRole.building_admin, UserRole.super_admin)
    ),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """License counters of a building"""
    result = await GetLicenseUsageUseCase(uow).execute(principal, building_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
