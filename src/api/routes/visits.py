from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field

from libs.result import Error
from src.api.error import ClientError, raise_for_error
from src.app.services.event_publisher import IEventPublisher
from src.app.services.qr_code_issuer import QrCodeIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.visits import (
    CancelVisitUseCase,
    CompleteVisitUseCase,
    ConfirmVisitUseCase,
    CreateVisitCommand,
    CreateVisitResponse,
    CreateVisitUseCase,
    GetVisitUseCase,
    RecordVisitorStatusUseCase,
    VisitDetailResponse,
    VisitorStatusResponse,
    VisitStatusResponse,
)
from src.depends import (
    get_current_principal,
    get_event_publisher,
    get_qr_code_issuer,
    get_unit_of_work,
    require_roles,
)
from src.domain.entities import UserRole, VisitorStatus
from src.domain.errors import ErrorCode
from src.domain.principal import Principal
from config import ApplicationConfig

router = APIRouter(prefix="/visits", tags=["Visits"])


class CreateVisitRequest(CreateVisitCommand):
    """
    Create visit HTTP request payload

    building_id defaults to the caller's building.
    """

    building_id: Optional[UUID] = Field(default=None, description="Target building")


class CancelVisitRequest(BaseModel):
    reason: Optional[str] = Field(default=None, max_length=500)


class VisitorStatusRequest(BaseModel):
    status: VisitorStatus = Field(..., description="arrived or exited")


@router.post("", status_code=status.HTTP_201_CREATED, response_model=CreateVisitResponse)
async def create_visit(
    request: CreateVisitRequest,
    principal: Principal = Depends(
        require_roles(UserRole.resident, UserRole.building_admin, UserRole.super_admin)
    ),
    uow: UnitOfWork = Depends(get_unit_of_work),
    qr_issuer: QrCodeIssuer = Depends(get_qr_code_issuer),
    publisher: IEventPublisher = Depends(get_event_publisher),
):
    """
    Create Visit

    Invites one or more visitors and returns the visit's QR code.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR
        - 403 Forbidden: VISITOR_BANNED, FORBIDDEN
        - 404 Not Found: BUILDING_NOT_FOUND, HOST_NOT_FOUND
        - 409 Conflict: CAPACITY_EXCEEDED
        - 503 Service Unavailable: STORAGE_ERROR
    """
    building_id = request.building_id or principal.building_id
    if building_id is None:
        raise ClientError(
            Error(ErrorCode.VALIDATION_ERROR, "building_id is required"),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    use_case = CreateVisitUseCase(
        uow,
        qr_issuer,
        publisher,
        max_visitors=ApplicationConfig.MAX_VISITORS_PER_VISIT,
        default_country_code=ApplicationConfig.DEFAULT_COUNTRY_CODE,
    )
    command = CreateVisitCommand(**request.model_dump(exclude={"building_id"}))
    result = await use_case.execute(principal, building_id, command)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get("/{visit_id}", status_code=status.HTTP_200_OK, response_model=VisitDetailResponse)
async def get_visit(
    visit_id: UUID,
    principal: Principal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Get a visit with its visitors and scan history"""
    result = await GetVisitUseCase(uow).execute(principal, visit_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get("/{visit_id}/qr-image", response_class=Response)
async def get_visit_qr_image(
    visit_id: UUID,
    principal: Principal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
    qr_issuer: QrCodeIssuer = Depends(get_qr_code_issuer),
):
    """Render the visit's QR code as a PNG image"""
    result = await GetVisitUseCase(uow).execute(principal, visit_id)

    if result.is_err():
        raise_for_error(result.error)

    code = result.value.qr_code
    if not code:
        raise ClientError(
            Error(ErrorCode.CODE_NOT_FOUND, "Visit has no QR code"),
            status_code=status.HTTP_404_NOT_FOUND,
        )

    return Response(content=qr_issuer.render_png(code), media_type="image/png")


@router.post(
    "/{visit_id}/cancel", status_code=status.HTTP_200_OK, response_model=VisitStatusResponse
)
async def cancel_visit(
    visit_id: UUID,
    request: CancelVisitRequest,
    principal: Principal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
    publisher: IEventPublisher = Depends(get_event_publisher),
):
    """
    Cancel Visit

    Only visits that have not started can be cancelled. Returns the
    building license if the visit consumed one.

    Raises:
        - 403 Forbidden: FORBIDDEN
        - 404 Not Found: VISIT_NOT_FOUND
        - 409 Conflict: VISIT_IN_PROGRESS, VISIT_ALREADY_CLOSED
    """
    result = await CancelVisitUseCase(uow, publisher).execute(principal, visit_id, request.reason)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/{visit_id}/confirm", status_code=status.HTTP_200_OK, response_model=VisitStatusResponse
)
async def confirm_visit(
    visit_id: UUID,
    principal: Principal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Confirm a pending visit"""
    result = await ConfirmVisitUseCase(uow).execute(principal, visit_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/{visit_id}/complete", status_code=status.HTTP_200_OK, response_model=VisitStatusResponse
)
async def complete_visit(
    visit_id: UUID,
    principal: Principal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
    publisher: IEventPublisher = Depends(get_event_publisher),
):
    """Close an active visit without an exit scan"""
    result = await CompleteVisitUseCase(uow, publisher).execute(principal, visit_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/{visit_id}/visitors/{visitor_id}/status",
    status_code=status.HTTP_200_OK,
    response_model=VisitorStatusResponse,
)
async def record_visitor_status(
    visit_id: UUID,
    visitor_id: UUID,
    request: VisitorStatusRequest,
    principal: Principal = Depends(
        require_roles(UserRole.security, UserRole.building_admin, UserRole.super_admin)
    ),
    uow: UnitOfWork = Depends(get_unit_of_work),
    publisher: IEventPublisher = Depends(get_event_publisher),
):
    """
    Record a single visitor's arrival or departure

    Raises:
        - 404 Not Found: VISIT_NOT_FOUND, VISITOR_NOT_IN_VISIT
        - 409 Conflict: INVALID_VISITOR_TRANSITION, VISIT_ALREADY_CLOSED
    """
    use_case = RecordVisitorStatusUseCase(uow, publisher)
    result = await use_case.execute(principal, visit_id, visitor_id, request.status)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
