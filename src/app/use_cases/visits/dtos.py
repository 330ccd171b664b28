"""
Visit Use Case DTOs (Data Transfer Objects)

All Command and Response classes for the visit domain.
Provides type safety and clear contracts between layers.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from src.domain.entities import ScanAction, VisitorStatus, VisitType


# ============================================================================
# Command DTOs
# ============================================================================


class VisitorInput(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    phone: str = Field(min_length=1, max_length=32)
    email: Optional[EmailStr] = None
    company: Optional[str] = Field(default=None, max_length=255)


class CreateVisitCommand(BaseModel):
    """Visit invitation submitted by a host"""

    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    purpose: Optional[str] = Field(default=None, max_length=255)
    expected_start: datetime
    expected_end: Optional[datetime] = None
    visit_type: VisitType = VisitType.single
    visitors: List[VisitorInput]


class GeoLocation(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)
    address: Optional[str] = Field(default=None, max_length=255)


class ScanCommand(BaseModel):
    """Gate scan submitted by a security officer"""

    code: str
    action: ScanAction
    officer_id: Optional[str] = None
    gate_label: Optional[str] = Field(default=None, max_length=100)
    geo: Optional[GeoLocation] = None


# ============================================================================
# Response DTOs
# ============================================================================


class CreateVisitResponse(BaseModel):
    """Response for create visit use case"""

    visit_id: str
    qr_code: str
    qr_image: str
    visitor_count: int
    expires_at: str
    status: str


class ScanResponse(BaseModel):
    """Response for scan visit use case"""

    visit_id: str
    action: str
    visitors_affected: List[str]
    new_status: str
    scanned_at: str
    officer_id: str


class VisitStatusResponse(BaseModel):
    """Response for cancel/confirm/complete use cases"""

    visit_id: str
    status: str
    license_released: bool = False


class VisitorStatusResponse(BaseModel):
    """Response for record visitor status use case"""

    visit_id: str
    visitor_id: str
    visitor_status: VisitorStatus
    visit_status: str
    current_visitors: int


class VisitVisitorInfo(BaseModel):
    visitor_id: str
    name: str
    phone: str
    email: Optional[str] = None
    company: Optional[str] = None
    status: str
    arrival_time: Optional[str] = None
    departure_time: Optional[str] = None


class ScanLogInfo(BaseModel):
    action: str
    officer_id: str
    gate_label: Optional[str] = None
    visitors_affected: List[str] = []
    scanned_at: str


class VisitDetailResponse(BaseModel):
    """Response for get visit use case"""

    id: str
    building_id: str
    host_id: str
    title: str
    description: Optional[str] = None
    purpose: Optional[str] = None
    visit_type: str
    status: str
    entry: bool
    exit: bool
    expected_start: str
    expected_end: Optional[str] = None
    actual_start: Optional[str] = None
    actual_end: Optional[str] = None
    qr_code: Optional[str] = None
    qr_expires_at: Optional[str] = None
    max_visitors: int
    current_visitors: int
    cancellation_reason: Optional[str] = None
    visitors: List[VisitVisitorInfo]
    scans: List[ScanLogInfo]


class ExpireVisitsResponse(BaseModel):
    """Response for the stale visit sweep"""

    expired_count: int
    visit_ids: List[str]
