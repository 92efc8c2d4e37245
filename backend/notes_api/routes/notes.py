"""
Notes API Backend - Notes Route Handlers
=========================================

What:  CRUD endpoints under /api/notes.
How:   FastAPI validates bodies and parameters, the handler delegates to
       NoteService, and the global exception handlers turn NotFoundError
       and ValidationError into 404 / 400 responses.
Who:   Called by the notes frontend.

Every handler is stateless; the only shared resource is the database
handle reached through the get_db_session dependency.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from notes_api.database import get_db_session
from notes_api.schemas.note import (
    ErrorResponse,
    NoteCreate,
    NoteListParams,
    NoteResponse,
    NoteUpdate,
)
from notes_api.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Notes"])

_NOT_FOUND = {404: {"description": "Note not found", "model": ErrorResponse}}
_INVALID = {400: {"description": "Validation failed", "model": ErrorResponse}}


@router.post(
    "/notes",
    status_code=status.HTTP_201_CREATED,
    response_model=NoteResponse,
    responses={**_INVALID},
    summary="Create a note",
)
async def create_note(
    payload: NoteCreate,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.create_note(db, payload)


@router.get(
    "/notes",
    response_model=List[NoteResponse],
    responses={**_INVALID},
    summary="List notes with search, sorting and pagination",
    description=(
        "Case-insensitive substring search over title and content (q), "
        "sorting by created_at or updated_at, and limit/offset pagination. "
        "Unknown sort values fall back to created_at; limit is capped at 100."
    ),
)
async def list_notes(
    request: Request,
    q: Optional[str] = Query(default=None, description="Search term for title or content"),
    sort: Optional[str] = Query(default=None, description="created_at (default) or updated_at"),
    order: Optional[str] = Query(default=None, description="asc or desc (default)"),
    limit: Optional[int] = Query(default=None, description="Page size, clamped to [0, 100]"),
    offset: int = Query(default=0, description="Rows to skip, clamped to >= 0"),
    db: AsyncSession = Depends(get_db_session),
) -> List[NoteResponse]:
    """
    Example client usage:
        GET /api/notes?q=groceries&sort=updated_at&order=asc&limit=20&offset=40
    """
    if limit is None:
        limit = request.app.state.settings.default_page_size
    params = NoteListParams(q=q, sort=sort, order=order, limit=limit, offset=offset)
    return await note_service.list_notes(db, params)


@router.get(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={**_NOT_FOUND},
    summary="Get a single note by ID",
)
async def get_note(
    note_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.get_note(db, note_id)


@router.patch(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={**_INVALID, **_NOT_FOUND},
    summary="Partially update a note",
    description="Fields left out of the body keep their stored value; updated_at always moves forward.",
)
async def update_note(
    note_id: int,
    changes: NoteUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.update_note(db, note_id, changes)


@router.delete(
    "/notes/{note_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={**_NOT_FOUND},
    summary="Delete a note",
)
async def delete_note(
    note_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await note_service.delete_note(db, note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
