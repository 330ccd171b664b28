from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.api.error import raise_for_error
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.visitors import RateVisitorUseCase
from src.app.use_cases.visitors.rate_visitor_use_case import RateVisitorResponse
from src.depends import get_current_principal, get_unit_of_work
from src.domain.principal import Principal

router = APIRouter(prefix="/visitors", tags=["Visitors"])


class RateVisitorRequest(BaseModel):
    rating: int = Field(..., description="Rating from 1 to 5")


@router.post(
    "/{visitor_id}/rating", status_code=status.HTTP_200_OK, response_model=RateVisitorResponse
)
async def rate_visitor(
    visitor_id: UUID,
    request: RateVisitorRequest,
    principal: Principal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Rate a visitor; the stored rating is the running average"""
    result = await RateVisitorUseCase(uow).execute(principal, visitor_id, request.rating)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
