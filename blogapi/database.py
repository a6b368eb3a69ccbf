"""
Blog API — Database Connection Management
===========================================

What:  Async SQLAlchemy engine, session factory, and FastAPI session dependency.
How:   A `Database` object owns one pooled engine for the life of the process.
       `run_server` opens it before binding the listener and disposes it on
       shutdown; each request borrows an `AsyncSession` from it.
Who:   Created by `blogapi.main`; sessions are injected into route handlers.

Connection Pooling Strategy:
    PostgreSQL (asyncpg):  pool_size / max_overflow / pre_ping from settings,
                           connections recycled every hour.
    SQLite (aiosqlite):    driver defaults; pool sizing arguments are not
                           passed because SQLite pools reject some of them.
"""

import logging
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from blogapi.config import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Holds the shared metadata that `Database.connect()` uses to create the
    `blogs` table on first start.
    """
    pass


def _engine_options(database_url: str) -> dict:
    """Engine keyword arguments appropriate for the target backend."""
    options = {"echo": settings.log_level == "DEBUG"}
    if make_url(database_url).get_backend_name() != "sqlite":
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


class Database:
    """
    Owns the engine and session factory for a single connection string.

    Lifecycle:
        db = Database(url)
        await db.connect()     # engine created, ping succeeds, tables exist
        async with db.session() as session: ...
        await db.dispose()     # all pooled connections closed
    """

    def __init__(self, database_url: str):
        self.database_url = database_url
        self.engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def is_connected(self) -> bool:
        return self.engine is not None

    async def connect(self) -> None:
        """
        Open the engine and make sure the store is usable.

        Raises whatever the driver raises when the database is unreachable;
        in that case the half-built engine is disposed before re-raising.
        """
        if self.engine is not None:
            return

        engine = create_async_engine(self.database_url, **_engine_options(self.database_url))
        try:
            # Importing the models registers them with Base.metadata
            from blogapi.models import blog  # noqa: F401

            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except Exception:
            await engine.dispose()
            raise

        self.engine = engine
        # expire_on_commit=False: serialized records stay readable after commit
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        logger.info("Connected to database (%s)", make_url(self.database_url).get_backend_name())

    def session(self) -> AsyncSession:
        """Create a new session; use as `async with database.session() as s`."""
        if self._session_factory is None:
            raise RuntimeError("Database is not connected")
        return self._session_factory()

    async def ping(self) -> bool:
        """Run `SELECT 1`; returns False instead of raising when unreachable."""
        if self.engine is None:
            return False
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.warning("Database ping failed: %s", str(e))
            return False
        return True

    async def dispose(self) -> None:
        """Close every pooled connection. Safe to call more than once."""
        if self.engine is None:
            return
        engine, self.engine, self._session_factory = self.engine, None, None
        await engine.dispose()
        logger.info("Database connections closed")


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a session from the app's Database
        2. Yields it to the route handler (the service commits explicitly)
        3. On error: rolls back anything left pending
        4. Always: closes the session (returns connection to pool)
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
