from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from src.api.error import raise_for_error
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.bans import (
    BanVisitorCommand,
    BanVisitorUseCase,
    CheckBanUseCase,
    ListBansUseCase,
    UnbanVisitorUseCase,
)
from src.app.use_cases.bans.dtos import (
    BanResponse,
    CheckBanResponse,
    ListBansResponse,
    UnbanResponse,
)
from src.depends import get_current_principal, get_unit_of_work, require_roles
from src.domain.entities import UserRole
from src.domain.principal import Principal
from config import ApplicationConfig

router = APIRouter(prefix="/bans", tags=["Bans"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=BanResponse)
async def ban_visitor(
    request: BanVisitorCommand,
    principal: Principal = Depends(
        require_roles(UserRole.resident, UserRole.building_admin, UserRole.super_admin)
    ),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Ban Visitor

    Blocks a phone number from being invited or admitted.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR
        - 403 Forbidden: FORBIDDEN (building-wide ban by a non-admin)
        - 409 Conflict: ALREADY_BANNED
    """
    use_case = BanVisitorUseCase(uow, default_country_code=ApplicationConfig.DEFAULT_COUNTRY_CODE)
    result = await use_case.execute(principal, request)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get("", status_code=status.HTTP_200_OK, response_model=ListBansResponse)
async def list_bans(
    building_wide: bool = Query(False, description="List building-wide bans (admins)"),
    principal: Principal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """List the caller's active bans"""
    result = await ListBansUseCase(uow).execute(principal, building_wide)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get("/check", status_code=status.HTTP_200_OK, response_model=CheckBanResponse)
async def check_ban(
    phone: str = Query(..., min_length=1),
    building_id: Optional[UUID] = Query(None),
    principal: Principal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Read-only ban lookup: is this phone blocked, and by whom"""
    use_case = CheckBanUseCase(uow, default_country_code=ApplicationConfig.DEFAULT_COUNTRY_CODE)
    result = await use_case.execute(principal, phone, building_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.delete("/{ban_id}", status_code=status.HTTP_200_OK, response_model=UnbanResponse)
async def unban_visitor(
    ban_id: UUID,
    reason: Optional[str] = Query(None, max_length=500),
    principal: Principal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Lift a ban

    Raises:
        - 403 Forbidden: FORBIDDEN
        - 404 Not Found: BAN_NOT_FOUND
    """
    result = await UnbanVisitorUseCase(uow).execute(principal, ban_id, reason)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
