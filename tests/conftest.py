"""Shared test fixtures: in-memory async SQLite + FastAPI test client.

Invariants:
    - Environment is pinned before anchor_service is imported (no migrations,
      no real database file)
    - Every test gets a fresh in-memory SQLite database with foreign keys on
    - get_db dependency overridden to use the test database
    - db_manager patched so the readiness check sees the test engine
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("RUN_MIGRATIONS", "false")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient  # noqa: E402

from anchor_service.db.base import Base  # noqa: E402
from anchor_service.infrastructure.database import (  # noqa: E402
    DatabaseSessionManager, enable_sqlite_foreign_keys, get_db,
)
import anchor_service.infrastructure.database as db_module  # noqa: E402
import anchor_service.models  # noqa: E402,F401
from anchor_service.main import app  # noqa: E402
from anchor_service.repositories.anchor_repository import AnchorRepository  # noqa: E402


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    enable_sqlite_foreign_keys(engine)
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
def repository(test_db):
    return AnchorRepository(test_db)


@pytest.fixture
def test_manager(test_engine, test_session_factory):
    """DatabaseSessionManager bound to the test engine (skips __init__)."""
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    return manager


@pytest.fixture
async def client(test_manager):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_manager.session() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    db_module.db_manager = test_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
