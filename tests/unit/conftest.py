from datetime import datetime
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.app.services.qr_code_issuer import QrCodeIssuer
from src.domain.entities import (
    Building,
    Resident,
    UserRole,
    Visit,
    VisitStatus,
    Visitor,
    VisitVisitor,
)
from src.domain.principal import Principal

NOW = datetime(2026, 3, 2, 9, 0, 0)

REPOSITORY_METHODS = {
    "buildings": ["get_by_id", "try_reserve_license", "release_license"],
    "residents": ["get_by_id", "get_by_ids"],
    "visitors": ["get_by_id", "get_by_ids", "get_by_building_and_phone", "create", "update"],
    "visits": [
        "get_by_id",
        "get_by_qr_code",
        "qr_code_exists",
        "claim_scan",
        "get_open_started_before",
        "create",
        "update",
    ],
    "visit_visitors": ["get_by_visit", "get", "create", "update"],
    "visitor_bans": [
        "get_by_id",
        "get_active_for_phone",
        "get_active_by_owner_and_phone",
        "get_active_by_owner",
        "get_active_expired",
        "create",
        "update",
    ],
    "visit_logs": ["create", "get_by_visit"],
    "audit_events": ["create"],
}


def _echo(entity):
    return entity


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with every repository method as an AsyncMock"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    for name, methods in REPOSITORY_METHODS.items():
        repository = MagicMock()
        for method in methods:
            setattr(repository, method, AsyncMock())
        setattr(uow, name, repository)

    # Sensible defaults: writes echo their argument, nothing is banned
    for name in ("visitors", "visits", "visit_visitors", "visitor_bans", "visit_logs", "audit_events"):
        getattr(uow, name).create.side_effect = _echo
    for name in ("visitors", "visits", "visit_visitors", "visitor_bans"):
        getattr(uow, name).update.side_effect = _echo
    uow.visitor_bans.get_active_for_phone.return_value = []
    uow.visitor_bans.get_active_by_owner_and_phone.return_value = None
    uow.residents.get_by_ids.return_value = []
    uow.visits.qr_code_exists.return_value = False
    uow.visits.claim_scan.return_value = True
    uow.buildings.try_reserve_license.return_value = True
    uow.buildings.release_license.return_value = True

    return uow


@pytest.fixture
def qr_issuer():
    return QrCodeIssuer(prefix="SG", length=12, expiry_hours=24, max_retries=3)


@pytest.fixture
def building():
    return Building(id=uuid4(), name="Marina Towers", total_licenses=10, used_licenses=0)


@pytest.fixture
def host(building):
    return Resident(
        id=uuid4(),
        building_id=building.id,
        full_name="Ngozi Okafor",
        apartment_number="12B",
        uses_license=True,
    )


@pytest.fixture
def resident_principal(host, building):
    return Principal(user_id=host.id, role=UserRole.resident, building_id=building.id)


@pytest.fixture
def officer_principal(building):
    return Principal(user_id=uuid4(), role=UserRole.security, building_id=building.id)


@pytest.fixture
def visitor(building):
    return Visitor(id=uuid4(), building_id=building.id, name="Ada Obi", phone="+2348123456789")


@pytest.fixture
def visit(building, host):
    return Visit(
        id=uuid4(),
        building_id=building.id,
        host_id=host.id,
        title="Lunch",
        expected_start=NOW,
        qr_code="SG_ABCDEF123456",
        qr_issued_at=NOW,
        qr_expires_at=datetime(2026, 3, 3, 9, 0, 0),
        max_visitors=1,
        current_visitors=1,
        status=VisitStatus.pending,
        uses_license=True,
    )


@pytest.fixture
def link(visit, visitor):
    return VisitVisitor(id=uuid4(), visit_id=visit.id, visitor_id=visitor.id)


@pytest.fixture
def now():
    return NOW
