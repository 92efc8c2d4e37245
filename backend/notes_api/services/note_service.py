"""
Notes API Backend - Note Service (Query Layer)
===============================================

What:  Builds and executes the parameterized SQL behind every note endpoint.
How:   SQLAlchemy Core/ORM statements executed on the request's AsyncSession.
Who:   Called by route handlers; calls the database only.

Operations:
    create_note   INSERT, then re-fetch by the generated id
    get_note      SELECT ... WHERE id = :id
    update_note   UPDATE ... SET col = COALESCE(:col, col), updated_at = :now
    delete_note   DELETE ... WHERE id = :id (row count decides 404)
    list_notes    SELECT ... [WHERE q] ORDER BY col dir, id dir LIMIT OFFSET

List query composition:
    Sort column and direction arrive as enum variants (SortColumn /
    SortOrder) and are looked up in fixed tables of SQLAlchemy constructs.
    The search term is bound as a parameter. No user input is ever
    formatted into SQL text.

Error Handling:
    Missing rows raise NotFoundError. Any SQLAlchemyError is logged and
    re-raised as DatabaseError, which the global handler maps to 500.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import Select, String, asc, bindparam, delete, desc, func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notes_api.exceptions import DatabaseError, NotFoundError
from notes_api.models.note import Note, utcnow
from notes_api.schemas.note import (
    MAX_SQLITE_INTEGER,
    NoteCreate,
    NoteListParams,
    NoteResponse,
    NoteUpdate,
    SortColumn,
    SortOrder,
)

logger = logging.getLogger(__name__)

# ── Enum variant → SQL fragment tables ────────────────────────────────────
_SORT_COLUMNS = {
    SortColumn.CREATED_AT: Note.created_at,
    SortColumn.UPDATED_AT: Note.updated_at,
}

_DIRECTIONS = {
    SortOrder.ASC: asc,
    SortOrder.DESC: desc,
}


def build_list_query(params: NoteListParams) -> Select:
    """
    Compose the SELECT for GET /api/notes from normalized parameters.

    Produces, for q="milk", sort=updated_at, order=ASC, limit=10, offset=0:

        SELECT ... FROM notes
        WHERE lower(notes.title) LIKE '%' || lower(:q) || '%' ESCAPE '/'
           OR lower(notes.content) LIKE '%' || lower(:q) || '%' ESCAPE '/'
        ORDER BY notes.updated_at ASC, notes.id ASC
        LIMIT :limit OFFSET :offset

    `%` and `_` inside q are escaped (autoescape) and match literally.
    """
    column = _SORT_COLUMNS[params.sort]
    direction = _DIRECTIONS[params.order]

    query = select(Note)
    if params.q:
        query = query.where(
            or_(
                Note.title.icontains(params.q, autoescape=True),
                Note.content.icontains(params.q, autoescape=True),
            )
        )

    # id breaks ties between equal timestamps so pages don't overlap
    return (
        query.order_by(direction(column), direction(Note.id))
        .limit(params.limit)
        .offset(params.offset)
    )


def _storable_id(note_id: int) -> bool:
    # ids outside SQLite's INTEGER range cannot exist and cannot be bound
    return -MAX_SQLITE_INTEGER - 1 <= note_id <= MAX_SQLITE_INTEGER


def next_updated_at(previous: Optional[datetime], now: Optional[datetime] = None) -> datetime:
    """
    Timestamp for a patch: the current time, nudged one microsecond past the
    stored value when the clock hasn't moved beyond it.
    """
    now = now or utcnow()
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now


class NoteService:
    """
    Query layer for the notes table.

    Stateless: every method receives the session to run on, so the same
    instance serves all requests.
    """

    async def create_note(self, db: AsyncSession, payload: NoteCreate) -> NoteResponse:
        """
        Insert a note and return the stored row.

        title/content arrive already trimmed by NoteCreate. Both timestamps
        are set to the same instant.

        Raises:
            DatabaseError: Insert failed (e.g. NOT NULL violation)
        """
        now = utcnow()
        note = Note(
            title=payload.title,
            content=payload.content,
            created_at=now,
            updated_at=now,
        )
        try:
            db.add(note)
            await db.flush()  # Assigns the autoincrement id
        except SQLAlchemyError as e:
            logger.error("Database error creating note: %s", str(e))
            raise DatabaseError(
                message="Could not create the note. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Note created: %s", note.id)
        return await self.get_note(db, note.id)

    async def _fetch(self, db: AsyncSession, note_id: int) -> Note:
        if not _storable_id(note_id):
            raise NotFoundError(resource="note", resource_id=note_id)
        try:
            # populate_existing: reload even if the row is already in the identity map
            result = await db.execute(
                select(Note)
                .where(Note.id == note_id)
                .execution_options(populate_existing=True)
            )
            note = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the note. Please try again.",
                context={"note_id": note_id},
            )

        if note is None:
            raise NotFoundError(resource="note", resource_id=note_id)
        return note

    async def get_note(self, db: AsyncSession, note_id: int) -> NoteResponse:
        """
        Retrieve a single note by ID.

        Raises:
            NotFoundError: No row with this id (→ 404)
            DatabaseError: Query execution failed (→ 500)
        """
        note = await self._fetch(db, note_id)
        return NoteResponse.model_validate(note)

    async def update_note(
        self, db: AsyncSession, note_id: int, changes: NoteUpdate
    ) -> NoteResponse:
        """
        Apply a partial update and return the re-fetched row.

        Existence is checked first (read-then-write). Fields the client did
        not send bind as NULL and COALESCE keeps the stored value; since the
        schema rejects explicit nulls, NULL always means "not supplied".
        updated_at is refreshed even when no field was supplied.

        Raises:
            NotFoundError: No row with this id
            DatabaseError: Update failed
        """
        existing = await self._fetch(db, note_id)
        supplied = changes.supplied()
        touched_at = next_updated_at(existing.updated_at)

        statement = (
            update(Note)
            .where(Note.id == note_id)
            .values(
                title=func.coalesce(
                    bindparam("new_title", supplied.get("title"), type_=String), Note.title
                ),
                content=func.coalesce(
                    bindparam("new_content", supplied.get("content"), type_=String),
                    Note.content,
                ),
                updated_at=touched_at,
            )
            .execution_options(synchronize_session=False)
        )
        try:
            await db.execute(statement)
        except SQLAlchemyError as e:
            logger.error("Database error updating note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Could not update the note. Please try again.",
                context={"note_id": note_id},
            )

        logger.info("Note %s updated (fields: %s)", note_id, sorted(supplied) or "none")
        return await self.get_note(db, note_id)

    async def delete_note(self, db: AsyncSession, note_id: int) -> None:
        """
        Hard-delete a note.

        Raises:
            NotFoundError: Zero rows affected
            DatabaseError: Delete failed
        """
        if not _storable_id(note_id):
            raise NotFoundError(resource="note", resource_id=note_id)

        try:
            result = await db.execute(
                delete(Note)
                .where(Note.id == note_id)
                .execution_options(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            logger.error("Database error deleting note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Could not delete the note. Please try again.",
                context={"note_id": note_id},
            )

        if result.rowcount == 0:
            raise NotFoundError(resource="note", resource_id=note_id)
        logger.info("Note %s deleted", note_id)

    async def list_notes(self, db: AsyncSession, params: NoteListParams) -> List[NoteResponse]:
        """
        Return one page of notes, possibly empty.

        A clamped limit of 0 short-circuits to an empty page without a query.
        """
        if params.limit == 0:
            return []

        try:
            result = await db.execute(build_list_query(params))
            notes = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve notes. Please try again.",
                context={"error_type": type(e).__name__},
            )

        return [NoteResponse.model_validate(note) for note in notes]


note_service = NoteService()
