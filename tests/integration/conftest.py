from datetime import timedelta
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select

from config import ApplicationConfig
from src.adapter.services.database import create_engine, create_session_factory, create_tables
from src.adapter.services.event_bus import InProcessEventBus
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.app import create_app
from src.api.utils.jwt import generate_jwt
from src.depends import get_event_publisher, get_session, get_unit_of_work
from src.domain.clock import utcnow
from src.domain.entities import Building, Resident, UserRole
from src.domain.events import DomainEvent
from tests.fixtures.json_loader import PayloadLoader


@pytest_asyncio.fixture
async def engine(tmp_path):
    # File database so concurrent sessions use separate connections
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", busy_timeout=30)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def seed(session_factory):
    """Persist entities in their own committed transaction"""

    async def _seed(*entities):
        async with session_factory() as session:
            for entity in entities:
                session.add(entity)
            await session.commit()
        return entities

    return _seed


@pytest.fixture
def fetch(session_factory):
    """Read a fresh copy of a row outside any request transaction"""

    async def _fetch(model, entity_id):
        async with session_factory() as session:
            return await session.get(model, entity_id)

    return _fetch


@pytest.fixture
def count_rows(session_factory):
    async def _count(model):
        async with session_factory() as session:
            result = await session.execute(select(func.count()).select_from(model))
            return result.scalar_one()

    return _count


@pytest.fixture
def run_use_case(session_factory):
    """Run a use case on its own session, as a separate request would"""

    async def _run(build, *args, **kwargs):
        async with session_factory() as session:
            return await build(SqlAlchemyUnitOfWork(session)).execute(*args, **kwargs)

    return _run


@pytest.fixture
def published():
    return []


@pytest.fixture
def event_bus(published):
    bus = InProcessEventBus()

    async def record(event):
        published.append(event)

    bus.subscribe(DomainEvent, record)
    return bus


@pytest_asyncio.fixture
async def client(session_factory, event_bus):
    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        async with session_factory() as session:
            yield SqlAlchemyUnitOfWork(session)

    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_event_publisher] = lambda: event_bus

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await event_bus.drain()


@pytest_asyncio.fixture
async def building(seed):
    building = Building(id=uuid4(), name="Marina Towers", total_licenses=3, used_licenses=0)
    await seed(building)
    return building


@pytest_asyncio.fixture
async def host(seed, building):
    host = Resident(
        id=uuid4(),
        building_id=building.id,
        full_name="Ngozi Okafor",
        apartment_number="12B",
        uses_license=True,
    )
    await seed(host)
    return host


def _headers(user_id, role, building_id):
    token = generate_jwt(user_id, role.value, building_id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def host_headers(host, building):
    return _headers(host.id, UserRole.resident, building.id)


@pytest.fixture
def officer_id():
    return uuid4()


@pytest.fixture
def officer_headers(officer_id, building):
    return _headers(officer_id, UserRole.security, building.id)


@pytest.fixture
def admin_headers(building):
    return _headers(uuid4(), UserRole.building_admin, building.id)


@pytest.fixture
def headers_for(building):
    """Token headers for an arbitrary principal in the test building"""

    def _for(user_id, role=UserRole.resident, building_id=None):
        return _headers(user_id, role, building_id or building.id)

    return _for


@pytest.fixture
def visit_payload():
    """Visit request starting an hour from now"""

    def _payload(key="single_visit", **overrides):
        overrides.setdefault("expected_start", (utcnow() + timedelta(hours=1)).isoformat())
        return PayloadLoader.get(key, **overrides)

    return _payload


@pytest.fixture
def scan_payload():
    def _payload(code, key="entry_scan", **overrides):
        return PayloadLoader.get(key, code=code, **overrides)

    return _payload


@pytest.fixture
def ban_payload():
    def _payload(key="resident_ban", **overrides):
        return PayloadLoader.get(key, **overrides)

    return _payload
