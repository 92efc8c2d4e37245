"""
Alembic Migration Environment
==============================

What:  Runs the notes schema revisions against the configured SQLite file.
How:   Takes the URL from notes_api.config (DATABASE_FILE), opens an async
       aiosqlite engine and runs the revisions inside `run_sync`.
       Batch mode is on because SQLite cannot ALTER most column properties
       in place; Alembic rebuilds the table instead.
Who:   `alembic -c backend/alembic.ini upgrade head`
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from notes_api.config import settings
from notes_api.database import Base
from notes_api.models.note import Note  # noqa: F401  (registers the table)

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata
database_url = settings.database_url


def run_migrations_offline() -> None:
    """Emit the SQL to stdout instead of executing it (`alembic upgrade --sql`)."""
    context.configure(
        url=database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        render_as_batch=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def _run_with_connection(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        render_as_batch=True,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    # NullPool: the migration run opens exactly one connection
    engine = create_async_engine(database_url, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_run_with_connection)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
