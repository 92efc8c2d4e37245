"""
Notes API Backend - Command Line Entry Point
=============================================

Usage:
    python -m notes_api            Serve the API with uvicorn on HOST:PORT
    python -m notes_api --init     Apply the schema, insert welcome notes, exit
"""

import argparse
import asyncio
import logging
from typing import Optional, Sequence

import uvicorn

from notes_api.config import Settings, settings
from notes_api.database import Database
from notes_api.exceptions import DatabaseError
from notes_api.main import setup_logging
from notes_api.schemas.note import NoteCreate
from notes_api.services.note_service import note_service

logger = logging.getLogger("notes_api")

WELCOME_NOTES = (
    NoteCreate(title="Welcome", content="This is your first note 🎉"),
    NoteCreate(title="Shortcuts", content="Create, edit, delete: it is all simple."),
)


async def seed(app_settings: Settings) -> int:
    """Insert the welcome notes into the configured database. Returns the count."""
    database = Database(app_settings.database_url)
    try:
        if not await database.ping():
            raise DatabaseError(
                message=f"Cannot open database file '{app_settings.database_file}'",
                context={"database_url": app_settings.database_url},
            )
        await database.migrate()
        async with database.session() as session:
            for payload in WELCOME_NOTES:
                await note_service.create_note(session, payload)
    finally:
        await database.dispose()
    return len(WELCOME_NOTES)


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="notes_api", description="Notes API server")
    parser.add_argument(
        "--init",
        action="store_true",
        help="seed the database with welcome notes and exit",
    )
    args = parser.parse_args(argv)

    if args.init:
        setup_logging(settings.log_level)
        count = asyncio.run(seed(settings))
        logger.info("Seeded %d notes into %s. Run the server normally now.", count, settings.database_file)
        return

    uvicorn.run(
        "notes_api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
