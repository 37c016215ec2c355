"""Service test fixtures — async SQLite DB, controllable clock, FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test DB
    - get_dispatchers overridden with dispatchers bound to the test clock
    - The test clock only moves when a test advances it

Design Decisions:
    - StaticPool: one shared connection so every session sees the same in-memory DB
    - Registry built from real Settings so tests exercise the production wiring
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

import pizzeria.models  # noqa: F401
from pizzeria.api.routes.resources import get_dispatchers
from pizzeria.config import Settings
from pizzeria.db.base import Base
from pizzeria.infrastructure.database import get_db
from pizzeria.infrastructure.menu_seed import seed_menu
from pizzeria.main import app
from pizzeria.services.model_registry import build_registry
from pizzeria.services.resource_bindings import build_dispatchers

from tests.services.fakes import USER, FakeClock


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return Settings(
        password_hash_secret="test-secret",
        password_hash_iterations=1000,
        token_ttl_seconds=3600,
    )


@pytest.fixture
def registry(settings, clock):
    return build_registry(settings, clock)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def menu(test_db):
    """Seed the default menu and return its items ordered by id."""
    from sqlalchemy import select
    from pizzeria.models.menu_item import MenuItem

    await seed_menu(test_db)
    result = await test_db.execute(select(MenuItem).order_by(MenuItem.id))
    items = list(result.scalars().all())
    await test_db.commit()
    return items


@pytest.fixture
async def client(test_session_factory, registry, clock):
    """FastAPI test client with DB and dispatchers overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    dispatchers = build_dispatchers(registry, clock=clock)
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_dispatchers] = lambda: dispatchers

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
async def registered_user(client):
    res = await client.post("/api/v1/users", json=USER)
    assert res.status_code == 200
    return dict(USER)


@pytest.fixture
async def token(client, registered_user):
    """A freshly issued token entity for the registered user."""
    res = await client.post(
        "/api/v1/tokens",
        json={"email": USER["email"], "password": USER["password"]},
    )
    assert res.status_code == 200
    return res.json()
