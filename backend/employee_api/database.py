"""
Employee Manager API — Database Engine & Session Management
============================================================

What:  Async SQLAlchemy engine, session factory, schema bootstrap, and the
       FastAPI session dependency.
Why:   Centralizes all connection logic in one place.
How:   `Database` wraps an async engine built from `Settings`. The app factory
       stores one instance on `app.state`; the lifespan handler connects it
       on startup and disposes it on shutdown.

Connection Pooling:
    The async engine's pool is the only state shared between concurrent
    requests. Each request checks out its own AsyncSession through
    `get_db_session`, so handlers never share a connection.

    SQLite (used by the test suite) manages its own pool class, so the
    pool-size arguments are only passed for server databases.
"""

import logging
from typing import Any, AsyncGenerator, Dict

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from employee_api.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, which `Database.connect()` uses to
    create missing tables at startup.
    """
    pass


class Database:
    """
    Owns the engine and session factory for one application instance.

    Lifecycle:
        db = Database(settings)   # engine created, no connection yet
        await db.connect()        # ping + create table if absent
        ...                       # sessions handed out per request
        await db.dispose()        # close pooled connections
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.engine: AsyncEngine = create_async_engine(
            settings.database_url, **self._engine_options(settings)
        )
        # expire_on_commit=False: ORM objects stay readable after the service
        # commits, without a lazy reload outside the session
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @staticmethod
    def _engine_options(settings: Settings) -> Dict[str, Any]:
        options: Dict[str, Any] = {
            "pool_pre_ping": settings.db_pool_pre_ping,
            # SQL echo only in DEBUG mode
            "echo": settings.log_level == "DEBUG",
        }
        if not settings.is_sqlite:
            options.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_recycle=3600,
            )
        return options

    async def connect(self) -> None:
        """
        Verify connectivity and make sure the schema exists.

        Raises whatever the driver raises on failure. The lifespan handler
        lets it propagate so startup aborts.
        """
        # Import registers the model on Base.metadata
        from employee_api.models.employee import Employee  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database reachable; schema ensured")

    async def ping(self) -> bool:
        """Lightweight connectivity check for the health endpoint."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Database ping failed: %s", str(e))
            return False

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the app's session factory
        2. Yields it to the route handler
        3. On error: rolls back anything left uncommitted
        4. Always: closes the session (returns connection to pool)

    Commits are issued by the storage layer after each write, so a success
    response is never sent for a write that has not been committed.
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
