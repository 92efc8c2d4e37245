"""
Notes API Backend - Note SQLAlchemy Model
==========================================

What:  ORM model representing the `notes` table.
How:   Inherits from the shared DeclarativeBase; `Database.migrate()` and
       Alembic both read its metadata.
Who:   Used by NoteService for CRUD operations.

Table Design:
    - INTEGER primary key, auto-assigned by SQLite, never reused while the row lives
    - title:   at most 200 characters (validated in the schema layer too)
    - content: unbounded TEXT
    - created_at / updated_at: UTC, microsecond precision

    Indexes on created_at and updated_at back the two sortable columns.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from notes_api.database import Base


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """
    Stores naive UTC, returns aware UTC.

    SQLite has no timezone-aware column type; values are normalized to UTC
    on the way in and tagged as UTC on the way out. The stored text form
    ("YYYY-MM-DD HH:MM:SS.ffffff") sorts chronologically.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


class Note(Base):
    """
    A single note.

    Lifecycle:
        1. Created with created_at == updated_at
        2. Patched any number of times; each patch moves updated_at forward
        3. Hard-deleted (no tombstone)
    """

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    title: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    # ── Timestamps ────────────────────────────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=utcnow,
    )

    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=utcnow,
    )

    __table_args__ = (
        Index("idx_notes_created_at", "created_at"),
        Index("idx_notes_updated_at", "updated_at"),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r}, updated_at='{self.updated_at}')>"
