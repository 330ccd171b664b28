"""
Storage failure tests: a database error part-way through a transaction
rolls back every write made before it and surfaces as a storage error.
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from config import ApplicationConfig
from src.adapter.repositories.audit_event_repository import AuditEventRepository
from src.app.services.qr_code_issuer import QrCodeIssuer
from src.app.services.unit_of_work import StorageError
from src.app.use_cases.visits import CreateVisitCommand, CreateVisitUseCase, VisitorInput
from src.domain.clock import utcnow
from src.domain.entities import AuditEvent, Building, UserRole, Visit, Visitor, VisitVisitor
from src.domain.principal import Principal


@pytest.fixture
def failing_audit_trail(monkeypatch):
    """Make the audit write, the last step before commit, fail like a locked database"""

    async def create(self, event):
        raise OperationalError("INSERT INTO audit_events", {}, Exception("database is locked"))

    monkeypatch.setattr(AuditEventRepository, "create", create)
    return monkeypatch


def _command():
    return CreateVisitCommand(
        title="Dinner",
        expected_start=utcnow() + timedelta(hours=1),
        visitors=[
            VisitorInput(name="Ada Obi", phone="08123456789"),
            VisitorInput(name="Emeka Eze", phone="08030001111"),
        ],
    )


async def _assert_nothing_written(building, fetch, count_rows):
    assert await count_rows(Visit) == 0
    assert await count_rows(Visitor) == 0
    assert await count_rows(VisitVisitor) == 0
    assert await count_rows(AuditEvent) == 0
    stored = await fetch(Building, building.id)
    assert stored.used_licenses == 0


@pytest.mark.asyncio
async def test_failed_write_rolls_back_visit_creation(
    failing_audit_trail, run_use_case, host, building, fetch, count_rows
):
    principal = Principal(user_id=host.id, role=UserRole.resident, building_id=building.id)
    issuer = QrCodeIssuer.from_config(ApplicationConfig)

    with pytest.raises(StorageError):
        await run_use_case(
            lambda uow: CreateVisitUseCase(uow, issuer), principal, building.id, _command()
        )

    await _assert_nothing_written(building, fetch, count_rows)

    # Same request succeeds once storage recovers
    failing_audit_trail.undo()
    result = await run_use_case(
        lambda uow: CreateVisitUseCase(uow, issuer), principal, building.id, _command()
    )

    assert result.is_ok()
    assert await count_rows(Visit) == 1
    assert await count_rows(Visitor) == 2
    stored = await fetch(Building, building.id)
    assert stored.used_licenses == 1


@pytest.mark.asyncio
async def test_failed_write_returns_service_unavailable(
    failing_audit_trail,
    client: AsyncClient,
    host_headers,
    visit_payload,
    building,
    fetch,
    count_rows,
    published,
):
    response = await client.post("/visits", json=visit_payload(), headers=host_headers)

    assert response.status_code == 503
    assert response.json()["error"]["code"] == "STORAGE_ERROR"
    await _assert_nothing_written(building, fetch, count_rows)
    assert published == []
