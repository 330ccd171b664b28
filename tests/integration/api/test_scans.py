"""
Integration tests for the gate scan API
"""

from datetime import timedelta
from uuid import UUID, uuid4

import pytest
from httpx import AsyncClient

from src.depends import qr_code_issuer
from src.domain.clock import utcnow
from src.domain.entities import (
    UserRole,
    Visit,
    VisitLog,
    Visitor,
    VisitorStatus,
    VisitStatus,
)
from src.domain.events import AdmissionDenied, VisitorEntered, VisitorExited


async def _create_visit(client, headers, payload):
    response = await client.post("/visits", json=payload, headers=headers)
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_entry_and_exit_lifecycle(
    client: AsyncClient,
    host_headers,
    officer_headers,
    officer_id,
    visit_payload,
    scan_payload,
    fetch,
    count_rows,
    event_bus,
    published,
):
    """Entry once, exit once; every repeat is reported as a duplicate"""
    created = await _create_visit(client, host_headers, visit_payload())
    code = created["qr_code"]
    visit_id = UUID(created["visit_id"])

    # Entry
    response = await client.post("/scans", json=scan_payload(code), headers=officer_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["new_status"] == "active"
    assert data["officer_id"] == str(officer_id)
    assert len(data["visitors_affected"]) == 1

    visit = await fetch(Visit, visit_id)
    assert visit.entry is True
    assert visit.status == VisitStatus.active

    # Entry again
    response = await client.post("/scans", json=scan_payload(code), headers=officer_headers)
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "DUPLICATE_ENTRY"

    # Exit
    response = await client.post(
        "/scans", json=scan_payload(code, "exit_scan"), headers=officer_headers
    )
    assert response.status_code == 200
    assert response.json()["new_status"] == "completed"

    visit = await fetch(Visit, visit_id)
    assert visit.exit is True
    assert visit.status == VisitStatus.completed
    assert visit.current_visitors == 0

    # Exit again
    response = await client.post(
        "/scans", json=scan_payload(code, "exit_scan"), headers=officer_headers
    )
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "DUPLICATE_EXIT"

    assert await count_rows(VisitLog) == 2
    visitor_id = UUID(data["visitors_affected"][0])
    visitor = await fetch(Visitor, visitor_id)
    assert visitor.visit_count == 1
    assert visitor.last_visit is not None

    await event_bus.drain()
    assert [type(event) for event in published[1:]] == [VisitorEntered, VisitorExited]


@pytest.mark.asyncio
async def test_scan_log_carries_gate_and_geo(
    client: AsyncClient, host_headers, officer_headers, visit_payload, scan_payload
):
    created = await _create_visit(client, host_headers, visit_payload())
    await client.post("/scans", json=scan_payload(created["qr_code"]), headers=officer_headers)

    response = await client.get(f"/visits/{created['visit_id']}", headers=officer_headers)

    assert response.status_code == 200
    scans = response.json()["scans"]
    assert len(scans) == 1
    assert scans[0]["action"] == "entry"
    assert scans[0]["gate_label"] == "Main Gate"
    assert response.json()["visitors"][0]["status"] == "entered"


@pytest.mark.asyncio
async def test_exit_before_entry(
    client: AsyncClient, host_headers, officer_headers, visit_payload, scan_payload
):
    created = await _create_visit(client, host_headers, visit_payload())

    response = await client.post(
        "/scans", json=scan_payload(created["qr_code"], "exit_scan"), headers=officer_headers
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "EXIT_WITHOUT_ENTRY"


@pytest.mark.asyncio
async def test_expired_code_expires_visit(
    client: AsyncClient, seed, building, host, officer_headers, scan_payload, fetch
):
    """Scanning a code past its expiry refuses entry and expires the visit"""
    # Arrange
    now = utcnow()
    visit = Visit(
        building_id=building.id,
        host_id=host.id,
        title="Late guest",
        expected_start=now - timedelta(hours=3),
        qr_code=qr_code_issuer.generate_code(),
        qr_issued_at=now - timedelta(hours=3),
        qr_expires_at=now - timedelta(seconds=1),
        max_visitors=1,
        current_visitors=1,
    )
    await seed(visit)

    # Act
    response = await client.post(
        "/scans", json=scan_payload(visit.qr_code), headers=officer_headers
    )

    # Assert
    assert response.status_code == 410
    assert response.json()["error"]["code"] == "CODE_EXPIRED"
    stored = await fetch(Visit, visit.id)
    assert stored.status == VisitStatus.expired
    assert stored.entry is False


@pytest.mark.asyncio
async def test_ban_after_issuance_denies_admission(
    client: AsyncClient,
    host_headers,
    officer_headers,
    visit_payload,
    scan_payload,
    ban_payload,
    fetch,
    event_bus,
    published,
):
    """A valid code does not override a ban created after the visit"""
    created = await _create_visit(client, host_headers, visit_payload())
    response = await client.post("/bans", json=ban_payload(), headers=host_headers)
    assert response.status_code == 201

    response = await client.post(
        "/scans", json=scan_payload(created["qr_code"]), headers=officer_headers
    )

    assert response.status_code == 403
    error = response.json()["error"]
    assert error["code"] == "ADMISSION_DENIED"
    assert error["details"]["phones"] == ["+2348123456789"]
    visit = await fetch(Visit, UUID(created["visit_id"]))
    assert visit.entry is False
    assert visit.status == VisitStatus.pending

    await event_bus.drain()
    assert isinstance(published[-1], AdmissionDenied)


@pytest.mark.asyncio
async def test_unknown_and_malformed_codes(
    client: AsyncClient, officer_headers, scan_payload, building
):
    response = await client.post(
        "/scans", json=scan_payload(qr_code_issuer.generate_code()), headers=officer_headers
    )
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "CODE_NOT_FOUND"

    response = await client.post(
        "/scans", json=scan_payload("SG_ABCDEF123456"), headers=officer_headers
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_officer_of_other_building_forbidden(
    client: AsyncClient, host_headers, visit_payload, scan_payload, headers_for
):
    created = await _create_visit(client, host_headers, visit_payload())
    stranger = headers_for(uuid4(), UserRole.security, building_id=uuid4())

    response = await client.post("/scans", json=scan_payload(created["qr_code"]), headers=stranger)

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"


@pytest.mark.asyncio
async def test_cancelled_visit_cannot_be_scanned(
    client: AsyncClient, host_headers, officer_headers, visit_payload, scan_payload
):
    created = await _create_visit(client, host_headers, visit_payload())
    await client.post(f"/visits/{created['visit_id']}/cancel", json={}, headers=host_headers)

    response = await client.post(
        "/scans", json=scan_payload(created["qr_code"]), headers=officer_headers
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "VISIT_ALREADY_CLOSED"


@pytest.mark.asyncio
async def test_active_visit_cannot_be_cancelled(
    client: AsyncClient, host_headers, officer_headers, visit_payload, scan_payload
):
    created = await _create_visit(client, host_headers, visit_payload())
    await client.post("/scans", json=scan_payload(created["qr_code"]), headers=officer_headers)

    response = await client.post(
        f"/visits/{created['visit_id']}/cancel", json={}, headers=host_headers
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "VISIT_IN_PROGRESS"


@pytest.mark.asyncio
async def test_group_partial_exit(
    client: AsyncClient,
    host_headers,
    officer_headers,
    visit_payload,
    scan_payload,
    fetch,
):
    """Visitors leave one by one; the last departure completes the visit"""
    created = await _create_visit(client, host_headers, visit_payload("group_visit"))
    visit_id = created["visit_id"]
    entry = await client.post(
        "/scans", json=scan_payload(created["qr_code"]), headers=officer_headers
    )
    visitor_ids = entry.json()["visitors_affected"]
    assert len(visitor_ids) == 3

    for remaining, visitor_id in zip((2, 1, 0), visitor_ids):
        response = await client.post(
            f"/visits/{visit_id}/visitors/{visitor_id}/status",
            json={"status": "exited"},
            headers=officer_headers,
        )
        assert response.status_code == 200
        assert response.json()["current_visitors"] == remaining

    visit = await fetch(Visit, UUID(visit_id))
    assert visit.exit is True
    assert visit.status == VisitStatus.completed

    response = await client.post(
        f"/visits/{visit_id}/visitors/{visitor_ids[0]}/status",
        json={"status": "exited"},
        headers=officer_headers,
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_visitor_arrival_before_entry(
    client: AsyncClient, host_headers, officer_headers, visit_payload, fetch
):
    created = await _create_visit(client, host_headers, visit_payload())
    detail = await client.get(f"/visits/{created['visit_id']}", headers=host_headers)
    visitor_id = detail.json()["visitors"][0]["visitor_id"]

    response = await client.post(
        f"/visits/{created['visit_id']}/visitors/{visitor_id}/status",
        json={"status": "arrived"},
        headers=officer_headers,
    )

    assert response.status_code == 200
    assert response.json()["visitor_status"] == VisitorStatus.arrived.value
    assert response.json()["visit_status"] == "pending"


@pytest.mark.asyncio
async def test_host_completes_visit(
    client: AsyncClient, host_headers, officer_headers, visit_payload, scan_payload, fetch
):
    created = await _create_visit(client, host_headers, visit_payload())
    await client.post("/scans", json=scan_payload(created["qr_code"]), headers=officer_headers)

    response = await client.post(f"/visits/{created['visit_id']}/complete", headers=host_headers)

    assert response.status_code == 200
    assert response.json()["status"] == "completed"

    response = await client.post(
        "/scans", json=scan_payload(created["qr_code"], "exit_scan"), headers=officer_headers
    )
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "DUPLICATE_EXIT"
