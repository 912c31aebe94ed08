"""Service test fixtures - async DB, FastAPI test client and domain factories.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test DB
    - db_manager patched so the readiness probe sees the test engine
    - Pushes are collected by RecordingDispatcher instead of being sent

Design Decisions:
    - SQLite in-memory with StaticPool: fixtures and requests share one
      connection, so rows committed by a fixture are visible to the app
"""

import datetime

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)
from sqlalchemy.pool import StaticPool

import plub.infrastructure.database as db_module
import plub.models  # noqa: F401
from plub.config import get_settings
from plub.db.base import Base
from plub.infrastructure.database import DatabaseSessionManager, get_db
from plub.infrastructure.jwt_provider import JwtProvider
from plub.main import app
from plub.models.account import Account
from plub.models.category import Category, SubCategory
from plub.models.plubbing import Plubbing
from plub.services.plubbing_service import PlubbingService
from tests.services.factories import (
    RecordingDispatcher, join, make_account, plubbing_request,
)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
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
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def jwt_provider():
    return JwtProvider.from_settings(get_settings())


@pytest.fixture
def auth_header(jwt_provider):
    """Bearer header for an account."""
    def _header(account: Account) -> dict:
        token = jwt_provider.create_access_token(account.email, account.role)
        return {"Authorization": f"Bearer {token}"}
    return _header


@pytest.fixture
async def sub_category(test_db):
    category = Category(name="Sports", sort_order=0)
    test_db.add(category)
    await test_db.flush()
    sub = SubCategory(category_id=category.id, name="Running", sort_order=0)
    test_db.add(sub)
    await test_db.commit()
    return sub


@pytest.fixture
async def host(test_db):
    return await make_account(test_db, "host")


@pytest.fixture
async def member(test_db):
    return await make_account(test_db, "member")


@pytest.fixture
async def outsider(test_db):
    return await make_account(test_db, "outsider")


@pytest.fixture
async def plubbing(test_db, host, member, sub_category):
    """A plubbing hosted by `host` with `member` already joined."""
    plubbing_id = await PlubbingService(test_db).create(
        host, plubbing_request(sub_category.id),
    )
    created = await test_db.get(Plubbing, plubbing_id)
    await join(test_db, member, created)
    return created


@pytest.fixture
def today():
    return datetime.date(2026, 10, 19)
