"""Database Session Manager: async connection pool with automatic rollback and health checks.

Invariants:
    - Every session rolls back on exception (no partial commits leak)
    - Connection pool uses pool_pre_ping for stale connection detection
    - SQLAlchemy exceptions escaping a session are mapped to core/errors.py types
    - SQLite connections always run with foreign keys enforced

Design Decisions:
    - Module-level db_manager initialized in the FastAPI lifespan; routes reach it
      only through the get_db dependency
    - expire_on_commit=False: prevents lazy-load issues in async context
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy import event, select, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)

from anchor_service.core.errors import (
    AnchorServiceError, InvariantViolationError, StorageUnavailableError,
)
from anchor_service.models.anchor import Anchor
from anchor_service.models.asset import Asset

logger = logging.getLogger(__name__)


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """SQLite ignores FOREIGN KEY clauses unless the pragma is set per connection."""

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        is_sqlite = make_url(database_url).get_backend_name() == "sqlite"
        engine_kwargs: dict[str, Any] = {"pool_pre_ping": True}
        if not is_sqlite:
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        if is_sqlite:
            enable_sqlite_foreign_keys(self.engine)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except AnchorServiceError:
            await session.rollback()
            raise
        except IntegrityError as e:
            await session.rollback()
            logger.critical(
                f"DB integrity error: {e}",
                extra={"error_code": "INVARIANT_VIOLATION"},
            )
            raise InvariantViolationError("Integrity constraint violated")
        except OperationalError as e:
            await session.rollback()
            logger.error(f"DB operational error: {e}")
            raise StorageUnavailableError("Connection or operational error", "execute")
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"DB driver error: {e}")
            raise StorageUnavailableError("Database driver error", "query")
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise StorageUnavailableError("Database operation failed", "unknown")
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except (AnchorServiceError, OSError) as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def schema_check(self) -> bool:
        """Check that the anchors and assets tables exist and are queryable."""
        try:
            async with self.session() as db:
                await db.execute(select(Anchor.id).limit(1))
                await db.execute(select(Asset.id).limit(1))
            return True
        except AnchorServiceError as e:
            logger.error(f"DB schema check failed: {e}")
            return False

    async def close(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def close_db() -> None:
    global db_manager
    if db_manager is None:
        return
    await db_manager.close()
    db_manager = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
