"""
Visit Access-Control Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class UserRole(str, Enum):
    """Role carried by an authenticated principal"""

    super_admin = "super_admin"
    building_admin = "building_admin"
    resident = "resident"
    security = "security"


class VisitStatus(str, Enum):
    """Visit lifecycle status (derived from entry/exit plus time)"""

    pending = "pending"
    confirmed = "confirmed"
    active = "active"
    completed = "completed"
    cancelled = "cancelled"
    expired = "expired"


TERMINAL_VISIT_STATUSES = frozenset(
    {VisitStatus.completed, VisitStatus.cancelled, VisitStatus.expired}
)
OPEN_VISIT_STATUSES = frozenset({VisitStatus.pending, VisitStatus.confirmed})


class VisitType(str, Enum):
    """Single visitor or group invitation"""

    single = "single"
    group = "group"


class VisitorStatus(str, Enum):
    """Per-visitor progress within a visit (forward only)"""

    expected = "expected"
    arrived = "arrived"
    entered = "entered"
    exited = "exited"


VISITOR_STATUS_ORDER = (
    VisitorStatus.expected,
    VisitorStatus.arrived,
    VisitorStatus.entered,
    VisitorStatus.exited,
)


class ScanAction(str, Enum):
    """Gate scan direction"""

    entry = "entry"
    exit = "exit"


class BanSeverity(str, Enum):
    """Ban severity"""

    low = "low"
    medium = "medium"
    high = "high"


class BanType(str, Enum):
    """How the ban was created"""

    manual = "manual"
    automatic = "automatic"
