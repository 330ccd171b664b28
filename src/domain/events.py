"""
Domain events emitted by the visit engine after a transaction commits.

Consumers (notifications, dashboards) subscribe through the event publisher
and receive these as plain immutable values.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.domain.clock import utcnow


@dataclass(frozen=True)
class DomainEvent:
    visit_id: UUID
    building_id: UUID
    occurred_at: datetime = field(default_factory=utcnow, kw_only=True)

    @property
    def name(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class VisitCreated(DomainEvent):
    host_id: UUID
    qr_code: str
    visitor_ids: List[UUID]


@dataclass(frozen=True)
class VisitorEntered(DomainEvent):
    officer_id: UUID
    visitor_ids: List[UUID]
    gate_label: Optional[str] = None


@dataclass(frozen=True)
class VisitorExited(DomainEvent):
    officer_id: UUID
    visitor_ids: List[UUID]
    visit_completed: bool
    gate_label: Optional[str] = None


@dataclass(frozen=True)
class AdmissionDenied(DomainEvent):
    officer_id: UUID
    phones: List[str]
    gate_label: Optional[str] = None


@dataclass(frozen=True)
class VisitCancelled(DomainEvent):
    cancelled_by: UUID
    reason: Optional[str] = None
    license_released: bool = False
