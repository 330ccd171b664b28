"""
Visit Access-Control Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    OPEN_VISIT_STATUSES,
    TERMINAL_VISIT_STATUSES,
    VISITOR_STATUS_ORDER,
    BanSeverity,
    BanType,
    ScanAction,
    UserRole,
    VisitorStatus,
    VisitStatus,
    VisitType,
)

# Export all entities
from .building import Building
from .resident import Resident
from .visitor import Visitor
from .visit import Visit
from .visit_visitor import VisitVisitor
from .visitor_ban import VisitorBan
from .visit_log import VisitLog
from .audit_event import AuditEvent

__all__ = [
    # Enums
    "OPEN_VISIT_STATUSES",
    "TERMINAL_VISIT_STATUSES",
    "VISITOR_STATUS_ORDER",
    "BanSeverity",
    "BanType",
    "ScanAction",
    "UserRole",
    "VisitorStatus",
    "VisitStatus",
    "VisitType",
    # Entities
    "Building",
    "Resident",
    "Visitor",
    "Visit",
    "VisitVisitor",
    "VisitorBan",
    "VisitLog",
    "AuditEvent",
]
