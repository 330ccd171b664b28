from datetime import datetime, timedelta
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from src.app.use_cases.visits import (
    CancelVisitUseCase,
    CompleteVisitUseCase,
    ConfirmVisitUseCase,
    RecordVisitorStatusUseCase,
)
from src.domain.entities import (
    ScanAction,
    UserRole,
    VisitorStatus,
    VisitStatus,
    VisitVisitor,
)
from src.domain.errors import ErrorCode
from src.domain.events import VisitCancelled, VisitorExited
from src.domain.principal import Principal

NOW = datetime(2026, 3, 2, 9, 0, 0)


@pytest.fixture
def publisher():
    return MagicMock()


@pytest.fixture
def visit_uow(mock_uow, visit, link):
    mock_uow.visits.get_by_id.return_value = visit
    mock_uow.visit_visitors.get_by_visit.return_value = [link]
    mock_uow.visit_visitors.get.return_value = link
    return mock_uow


# ============================================================================
# Cancel
# ============================================================================


@pytest.mark.asyncio
async def test_host_cancels_and_releases_license(
    visit_uow, publisher, resident_principal, visit
):
    """Cancelling a license-consuming visit hands the license back"""
    use_case = CancelVisitUseCase(visit_uow, publisher, clock=lambda: NOW)

    result = await use_case.execute(resident_principal, visit.id, "Plans changed")

    assert result.is_ok()
    assert result.value.status == VisitStatus.cancelled.value
    assert result.value.license_released is True
    assert visit.cancelled_at == NOW
    assert visit.cancellation_reason == "Plans changed"
    visit_uow.visits.get_by_id.assert_awaited_once_with(visit.id, for_update=True)
    visit_uow.buildings.release_license.assert_awaited_once_with(visit.building_id)
    audit = visit_uow.audit_events.create.call_args[0][0]
    assert audit.action == "visit_cancelled"
    visit_uow.commit.assert_awaited_once()

    event = publisher.publish.call_args[0][0]
    assert isinstance(event, VisitCancelled)
    assert event.license_released is True


@pytest.mark.asyncio
async def test_cancel_without_license_does_not_release(visit_uow, resident_principal, visit):
    visit.uses_license = False

    result = await CancelVisitUseCase(visit_uow).execute(resident_principal, visit.id)

    assert result.is_ok()
    assert result.value.license_released is False
    visit_uow.buildings.release_license.assert_not_awaited()


@pytest.mark.asyncio
async def test_building_admin_can_cancel(visit_uow, building, visit):
    admin = Principal(user_id=uuid4(), role=UserRole.building_admin, building_id=building.id)

    result = await CancelVisitUseCase(visit_uow).execute(admin, visit.id)

    assert result.is_ok()


@pytest.mark.asyncio
async def test_other_resident_cannot_cancel(visit_uow, building, visit):
    neighbour = Principal(user_id=uuid4(), role=UserRole.resident, building_id=building.id)

    result = await CancelVisitUseCase(visit_uow).execute(neighbour, visit.id)

    assert result.error.code == ErrorCode.FORBIDDEN
    visit_uow.visits.update.assert_not_awaited()


@pytest.mark.asyncio
async def test_cancel_active_visit_refused(visit_uow, resident_principal, visit):
    visit.entry = True
    visit.status = VisitStatus.active

    result = await CancelVisitUseCase(visit_uow).execute(resident_principal, visit.id)

    assert result.error.code == ErrorCode.VISIT_IN_PROGRESS
    visit_uow.buildings.release_license.assert_not_awaited()
    visit_uow.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_cancel_twice_refused(visit_uow, resident_principal, visit):
    visit.status = VisitStatus.cancelled

    result = await CancelVisitUseCase(visit_uow).execute(resident_principal, visit.id)

    assert result.error.code == ErrorCode.VISIT_ALREADY_CLOSED
    visit_uow.buildings.release_license.assert_not_awaited()


@pytest.mark.asyncio
async def test_cancel_unknown_visit(visit_uow, resident_principal):
    visit_uow.visits.get_by_id.return_value = None

    result = await CancelVisitUseCase(visit_uow).execute(resident_principal, uuid4())

    assert result.error.code == ErrorCode.VISIT_NOT_FOUND


# ============================================================================
# Confirm / complete
# ============================================================================


@pytest.mark.asyncio
async def test_confirm_pending_visit(visit_uow, resident_principal, visit):
    result = await ConfirmVisitUseCase(visit_uow, clock=lambda: NOW).execute(
        resident_principal, visit.id
    )

    assert result.is_ok()
    assert result.value.status == VisitStatus.confirmed.value
    visit_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_confirm_twice_refused(visit_uow, resident_principal, visit):
    visit.status = VisitStatus.confirmed

    result = await ConfirmVisitUseCase(visit_uow).execute(resident_principal, visit.id)

    assert result.error.code == ErrorCode.INVALID_VISIT_STATE


@pytest.mark.asyncio
async def test_complete_active_visit(visit_uow, publisher, resident_principal, visit, link):
    visit.entry = True
    visit.status = VisitStatus.active
    link.status = VisitorStatus.entered

    result = await CompleteVisitUseCase(visit_uow, publisher, clock=lambda: NOW).execute(
        resident_principal, visit.id
    )

    assert result.is_ok()
    assert result.value.status == VisitStatus.completed.value
    assert link.status == VisitorStatus.exited
    visit_uow.visits.claim_scan.assert_awaited_once_with(visit.id, ScanAction.exit)
    assert visit_uow.visit_logs.create.call_args[0][0].action == "completed"
    visit_uow.buildings.release_license.assert_not_awaited()
    assert publisher.publish.call_args[0][0].visit_completed is True


@pytest.mark.asyncio
async def test_complete_unstarted_visit_refused(visit_uow, resident_principal, visit):
    result = await CompleteVisitUseCase(visit_uow).execute(resident_principal, visit.id)

    assert result.error.code == ErrorCode.EXIT_WITHOUT_ENTRY
    visit_uow.visits.claim_scan.assert_not_awaited()


# ============================================================================
# Per-visitor status
# ============================================================================


@pytest.mark.asyncio
async def test_mark_visitor_arrived(visit_uow, officer_principal, visit, visitor, link):
    use_case = RecordVisitorStatusUseCase(visit_uow, clock=lambda: NOW)

    result = await use_case.execute(officer_principal, visit.id, visitor.id, VisitorStatus.arrived)

    assert result.is_ok()
    assert result.value.visitor_status == VisitorStatus.arrived
    assert result.value.visit_status == VisitStatus.pending.value
    assert link.arrival_time == NOW
    log = visit_uow.visit_logs.create.call_args[0][0]
    assert log.action == "visitor_arrived"
    assert log.officer_id == officer_principal.user_id


@pytest.mark.asyncio
async def test_partial_exit_keeps_visit_active(
    visit_uow, publisher, officer_principal, visit, visitor, link
):
    """One visitor leaves, the other stays inside"""
    # Arrange
    visit.entry = True
    visit.status = VisitStatus.active
    link.status = VisitorStatus.entered
    other = VisitVisitor(visit_id=visit.id, visitor_id=uuid4(), status=VisitorStatus.entered)
    visit_uow.visit_visitors.get_by_visit.return_value = [link, other]
    use_case = RecordVisitorStatusUseCase(visit_uow, publisher, clock=lambda: NOW)

    # Act
    result = await use_case.execute(officer_principal, visit.id, visitor.id, VisitorStatus.exited)

    # Assert
    assert result.is_ok()
    assert result.value.current_visitors == 1
    assert result.value.visit_status == VisitStatus.active.value
    assert visit.exit is False
    visit_uow.visits.claim_scan.assert_not_awaited()
    event = publisher.publish.call_args[0][0]
    assert isinstance(event, VisitorExited)
    assert event.visit_completed is False


@pytest.mark.asyncio
async def test_last_visitor_exit_completes_visit(
    visit_uow, publisher, officer_principal, visit, visitor, link
):
    visit.entry = True
    visit.status = VisitStatus.active
    link.status = VisitorStatus.entered
    use_case = RecordVisitorStatusUseCase(visit_uow, publisher, clock=lambda: NOW)

    result = await use_case.execute(officer_principal, visit.id, visitor.id, VisitorStatus.exited)

    assert result.is_ok()
    assert result.value.visit_status == VisitStatus.completed.value
    assert result.value.current_visitors == 0
    assert visit.exit is True
    visit_uow.visits.claim_scan.assert_awaited_once_with(visit.id, ScanAction.exit)
    assert publisher.publish.call_args[0][0].visit_completed is True


@pytest.mark.asyncio
async def test_visitor_not_in_visit(visit_uow, officer_principal, visit):
    visit_uow.visit_visitors.get.return_value = None

    result = await RecordVisitorStatusUseCase(visit_uow).execute(
        officer_principal, visit.id, uuid4(), VisitorStatus.arrived
    )

    assert result.error.code == ErrorCode.VISITOR_NOT_IN_VISIT


@pytest.mark.asyncio
async def test_visitor_cannot_go_backwards(visit_uow, officer_principal, visit, visitor, link):
    link.status = VisitorStatus.arrived
    link.arrival_time = NOW - timedelta(minutes=5)

    result = await RecordVisitorStatusUseCase(visit_uow).execute(
        officer_principal, visit.id, visitor.id, VisitorStatus.arrived
    )

    assert result.error.code == ErrorCode.INVALID_VISITOR_TRANSITION
    visit_uow.commit.assert_not_awaited()
