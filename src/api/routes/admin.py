"""
Admin API Routes - Maintenance Endpoints

These endpoints are called by the scheduler that runs the periodic sweeps.
Authentication is via Admin API Key, not user JWTs.
"""

from fastapi import APIRouter, Depends, status

from src.api.error import raise_for_error
from src.api.utils.admin_auth import verify_admin_api_key
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.bans import ExpireTemporaryBansUseCase
from src.app.use_cases.bans.dtos import ExpireBansResponse
from src.app.use_cases.visits import ExpireStaleVisitsUseCase
from src.app.use_cases.visits.dtos import ExpireVisitsResponse
from src.depends import get_unit_of_work
from config import ApplicationConfig

router = APIRouter(prefix="/admin/maintenance", tags=["Admin"])


@router.post(
    "/expire-visits",
    status_code=status.HTTP_200_OK,
    response_model=ExpireVisitsResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def expire_visits(uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    Expire Stale Visits

    Moves never-entered visits past their grace period to expired.

    Requires: X-Admin-API-Key header
    """
    use_case = ExpireStaleVisitsUseCase(uow, grace_hours=ApplicationConfig.VISIT_EXPIRY_GRACE_HOURS)
    result = await use_case.execute()

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/expire-bans",
    status_code=status.HTTP_200_OK,
    response_model=ExpireBansResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def expire_bans(uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    Expire Temporary Bans

    Clears the active flag of bans past their expiry.

    Requires: X-Admin-API-Key header
    """
    result = await ExpireTemporaryBansUseCase(uow).execute()

    if result.is_err():
        raise_for_error(result.error)

    return result.value
