from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.api.error import raise_for_error
from src.app.services.event_publisher import IEventPublisher
from src.app.services.qr_code_issuer import QrCodeIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.visits import ScanCommand, ScanResponse, ScanVisitUseCase
from src.app.use_cases.visits.dtos import GeoLocation
from src.depends import get_event_publisher, get_qr_code_issuer, get_unit_of_work, require_roles
from src.domain.entities import ScanAction, UserRole
from src.domain.principal import Principal
from config import ApplicationConfig

router = APIRouter(prefix="/scans", tags=["Scans"])


class ScanRequest(BaseModel):
    """
    Gate scan HTTP request payload

    The officer is the authenticated caller.
    """

    code: str = Field(..., description="Scanned QR code string")
    action: ScanAction = Field(..., description="entry or exit")
    gate_label: Optional[str] = Field(default=None, max_length=100)
    geo: Optional[GeoLocation] = None


@router.post("", status_code=status.HTTP_200_OK, response_model=ScanResponse)
async def scan(
    request: ScanRequest,
    principal: Principal = Depends(
        require_roles(UserRole.security, UserRole.building_admin, UserRole.super_admin)
    ),
    uow: UnitOfWork = Depends(get_unit_of_work),
    qr_issuer: QrCodeIssuer = Depends(get_qr_code_issuer),
    publisher: IEventPublisher = Depends(get_event_publisher),
):
    """
    Process Gate Scan

    Raises:
        - 400 Bad Request: VALIDATION_ERROR (malformed code)
        - 403 Forbidden: ADMISSION_DENIED, FORBIDDEN
        - 404 Not Found: CODE_NOT_FOUND
        - 409 Conflict: VISIT_ALREADY_CLOSED, DUPLICATE_ENTRY, DUPLICATE_EXIT,
                        EXIT_WITHOUT_ENTRY
        - 410 Gone: CODE_EXPIRED
        - 503 Service Unavailable: STORAGE_ERROR
    """
    command = ScanCommand(
        code=request.code,
        action=request.action,
        officer_id=str(principal.user_id),
        gate_label=request.gate_label,
        geo=request.geo,
    )
    use_case = ScanVisitUseCase(
        uow,
        qr_issuer,
        publisher,
        frequent_threshold=ApplicationConfig.FREQUENT_VISITOR_THRESHOLD,
    )
    result = await use_case.execute(principal, command)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
