"""
Visit use cases - creation, gate scans and lifecycle operations
"""

from .cancel_visit_use_case import CancelVisitUseCase
from .complete_visit_use_case import CompleteVisitUseCase
from .confirm_visit_use_case import ConfirmVisitUseCase
from .create_visit_use_case import CreateVisitUseCase
from .dtos import (
    CreateVisitCommand,
    CreateVisitResponse,
    ScanCommand,
    ScanResponse,
    VisitDetailResponse,
    VisitorInput,
    VisitorStatusResponse,
    VisitStatusResponse,
)
from .expire_stale_visits_use_case import ExpireStaleVisitsUseCase
from .get_visit_use_case import GetVisitUseCase
from .record_visitor_status_use_case import RecordVisitorStatusUseCase
from .scan_visit_use_case import ScanVisitUseCase

__all__ = [
    "CancelVisitUseCase",
    "CompleteVisitUseCase",
    "ConfirmVisitUseCase",
    "CreateVisitUseCase",
    "ExpireStaleVisitsUseCase",
    "GetVisitUseCase",
    "RecordVisitorStatusUseCase",
    "ScanVisitUseCase",
    "CreateVisitCommand",
    "CreateVisitResponse",
    "ScanCommand",
    "ScanResponse",
    "VisitDetailResponse",
    "VisitorInput",
    "VisitorStatusResponse",
    "VisitStatusResponse",
]
