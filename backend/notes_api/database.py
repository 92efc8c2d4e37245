"""
Notes API Backend - Database Handle & Session Management
=========================================================

What:  The storage handle (async engine + session factory), schema applier,
       and the FastAPI session dependency.
How:   `Database` wraps an async SQLAlchemy engine over aiosqlite. It is
       created in the application lifespan, stored on `app.state.database`,
       and disposed on shutdown. Requests receive a session through
       `get_db_session`, which commits on success and rolls back on error.
Who:   main.py (lifecycle), route handlers (via Depends), tests, the CLI.

SQLite Settings:
    journal_mode=WAL:    readers do not block the single writer
    synchronous=NORMAL:  fsync at checkpoints only (relaxed durability)
    lower():             replaced by a Unicode-aware version for search
    Writes are serialized by the engine itself; the application adds no
    locking or transaction boundaries of its own.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object used by `Database.migrate()` and by
    Alembic's autogenerate.
    """
    pass


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def _apply_sqlite_pragmas(dbapi_connection, connection_record) -> None:
    """Runs on every new DBAPI connection opened by the pool."""
    # Built-in lower() folds ASCII only; search must match "Добро" for "добро"
    dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA synchronous=NORMAL")
    finally:
        cursor.close()


class Database:
    """
    Long-lived storage handle shared by all requests.

    Lifecycle:
        database = Database(settings.database_url)
        await database.migrate()      # startup
        async with database.session() as session: ...
        await database.dispose()      # shutdown
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, echo=echo)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _apply_sqlite_pragmas)

        # expire_on_commit=False: rows stay readable after the request commits
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def migrate(self) -> None:
        """
        Ensure the notes table exists.

        Equivalent to CREATE TABLE IF NOT EXISTS; safe to call on every
        startup. Managed deployments can use the Alembic revisions instead.
        """
        # Registers the Note mapping on Base.metadata
        from notes_api.models import note  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Schema applied to %s", self.url)

    async def ping(self) -> bool:
        """Executes SELECT 1; returns False instead of raising when unreachable."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.warning("Database unreachable: %s", str(e))
            return False
        return True

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Session scope: commit on success, roll back on any error.

        The exception is re-raised after rollback so the global handlers
        can map it to a response.
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def dispose(self) -> None:
        """Closes all pooled connections. Called from the lifespan on shutdown."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    The handle is the one created by the lifespan and stored on
    `request.app.state.database`.

    Example usage in a route:
        @router.get("/notes/{note_id}")
        async def get_note(note_id: int, db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
