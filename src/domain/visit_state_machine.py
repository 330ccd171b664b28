"""
Visit State Machine

The only place visit lifecycle fields and per-visitor statuses are mutated.
All functions are pure over the entities passed in (no I/O), so the guard
order can be unit-tested without a database.

Transitions:
    pending/confirmed --entry scan--> active     (entry=True)
    active            --exit scan---> completed  (exit=True)
    pending/confirmed --cancel------> cancelled  (terminal)
    pending/confirmed --grace-------> expired    (terminal)
"""

from datetime import datetime, timedelta
from typing import List, Optional

from libs.result import Error
from src.domain.entities import (
    OPEN_VISIT_STATUSES,
    TERMINAL_VISIT_STATUSES,
    VISITOR_STATUS_ORDER,
    ScanAction,
    Visit,
    VisitorStatus,
    VisitStatus,
    VisitVisitor,
)
from src.domain.errors import ErrorCode


def derive_status(visit: Visit) -> VisitStatus:
    """Project entry/exit onto status; terminal statuses are sticky."""
    if visit.status in (VisitStatus.cancelled, VisitStatus.expired):
        return visit.status
    if visit.exit:
        return VisitStatus.completed
    if visit.entry:
        return VisitStatus.active
    if visit.status == VisitStatus.confirmed:
        return VisitStatus.confirmed
    return VisitStatus.pending


def is_terminal(visit: Visit) -> bool:
    return visit.status in TERMINAL_VISIT_STATUSES


def is_code_expired(visit: Visit, now: datetime) -> bool:
    return visit.qr_expires_at is not None and now > visit.qr_expires_at


def check_scan(visit: Visit, action: ScanAction, now: datetime) -> Optional[Error]:
    """
    Evaluate the scan guards in order, stopping at the first failure.

    Code resolution happens before this call and the ban re-check after it,
    because both need I/O.
    """
    if is_code_expired(visit, now):
        return Error(
            ErrorCode.CODE_EXPIRED,
            "QR code has expired",
            {"expires_at": visit.qr_expires_at.isoformat()},
        )

    # A repeated exit on a completed visit is reported as a duplicate exit
    if action == ScanAction.exit and visit.exit:
        return Error(
            ErrorCode.DUPLICATE_EXIT,
            "Exit has already been recorded for this visit",
        )

    if is_terminal(visit):
        return Error(
            ErrorCode.VISIT_ALREADY_CLOSED,
            f"Visit is already {visit.status.value}",
            {"status": visit.status.value},
        )

    if action == ScanAction.entry:
        if visit.entry:
            return Error(
                ErrorCode.DUPLICATE_ENTRY,
                "Entry has already been recorded for this visit",
            )
        return None

    if not visit.entry:
        return Error(
            ErrorCode.EXIT_WITHOUT_ENTRY,
            "Cannot record exit before entry",
        )
    return None


def _step_to(link: VisitVisitor, target: VisitorStatus, now: datetime) -> bool:
    """
    Walk a visitor row forward to target, one status at a time.

    Returns False (and leaves the row untouched) if target is behind the
    row's current status.
    """
    current = VISITOR_STATUS_ORDER.index(link.status)
    wanted = VISITOR_STATUS_ORDER.index(target)
    if wanted <= current:
        return False

    for status in VISITOR_STATUS_ORDER[current + 1 : wanted + 1]:
        if status == VisitorStatus.arrived and link.arrival_time is None:
            link.arrival_time = now
        if status == VisitorStatus.exited:
            link.departure_time = now
        link.status = status
    return True


def _present_count(links: List[VisitVisitor]) -> int:
    return sum(1 for link in links if link.status != VisitorStatus.exited)


def apply_entry(
    visit: Visit, links: List[VisitVisitor], now: datetime
) -> List[VisitVisitor]:
    """
    Record the visit-level entry and move every waiting visitor to entered.

    Returns the visitor rows that advanced.
    """
    visit.entry = True
    if visit.actual_start is None:
        visit.actual_start = now
    visit.status = derive_status(visit)
    visit.updated_at = now

    affected = [
        link
        for link in links
        if link.status in (VisitorStatus.expected, VisitorStatus.arrived)
        and _step_to(link, VisitorStatus.entered, now)
    ]
    visit.current_visitors = _present_count(links)
    return affected


def apply_exit(
    visit: Visit, links: List[VisitVisitor], now: datetime
) -> List[VisitVisitor]:
    """
    Record the visit-level exit and move every remaining visitor to exited.

    Visitors who already departed individually are left as they are.
    """
    visit.exit = True
    visit.actual_end = now
    visit.status = derive_status(visit)
    visit.updated_at = now

    affected = [
        link
        for link in links
        if link.status != VisitorStatus.exited
        and _step_to(link, VisitorStatus.exited, now)
    ]
    visit.current_visitors = _present_count(links)
    return affected


def advance_visitor(
    visit: Visit, link: VisitVisitor, target: VisitorStatus, now: datetime
) -> Optional[Error]:
    """
    Move a single visitor one step forward.

    Only "arrived" (waiting visit) and "exited" (visit in progress) can be
    recorded per visitor; "entered" is reached through the entry scan.
    """
    if is_terminal(visit):
        return Error(
            ErrorCode.VISIT_ALREADY_CLOSED,
            f"Visit is already {visit.status.value}",
        )

    if target == VisitorStatus.arrived:
        allowed = link.status == VisitorStatus.expected
    elif target == VisitorStatus.exited:
        allowed = visit.entry and link.status == VisitorStatus.entered
    else:
        allowed = False

    if not allowed:
        return Error(
            ErrorCode.INVALID_VISITOR_TRANSITION,
            f"Cannot move visitor from {link.status.value} to {target.value}",
            {"from": link.status.value, "to": target.value},
        )

    _step_to(link, target, now)
    visit.updated_at = now
    return None


def recount_visitors(visit: Visit, links: List[VisitVisitor]) -> int:
    visit.current_visitors = _present_count(links)
    return visit.current_visitors


def check_cancel(visit: Visit) -> Optional[Error]:
    if is_terminal(visit):
        return Error(
            ErrorCode.VISIT_ALREADY_CLOSED,
            f"Visit is already {visit.status.value}",
        )
    if visit.entry:
        return Error(
            ErrorCode.VISIT_IN_PROGRESS,
            "Visit has already started and cannot be cancelled",
        )
    return None


def apply_cancel(visit: Visit, now: datetime, reason: Optional[str] = None) -> None:
    visit.status = VisitStatus.cancelled
    visit.cancelled_at = now
    visit.cancellation_reason = reason
    visit.updated_at = now


def check_confirm(visit: Visit) -> Optional[Error]:
    if visit.status != VisitStatus.pending:
        return Error(
            ErrorCode.INVALID_VISIT_STATE,
            f"Only pending visits can be confirmed (visit is {visit.status.value})",
        )
    return None


def apply_confirm(visit: Visit, now: datetime) -> None:
    visit.status = VisitStatus.confirmed
    visit.updated_at = now


def check_complete(visit: Visit) -> Optional[Error]:
    if is_terminal(visit):
        return Error(
            ErrorCode.VISIT_ALREADY_CLOSED,
            f"Visit is already {visit.status.value}",
        )
    if not visit.entry:
        return Error(
            ErrorCode.EXIT_WITHOUT_ENTRY,
            "Only active visits can be completed",
        )
    return None


def can_expire(visit: Visit) -> bool:
    return visit.status in OPEN_VISIT_STATUSES and not visit.entry


def apply_expire(visit: Visit, now: datetime) -> None:
    visit.status = VisitStatus.expired
    visit.updated_at = now


def is_past_grace(visit: Visit, now: datetime, grace_hours: int) -> bool:
    return visit.expected_start + timedelta(hours=grace_hours) < now
