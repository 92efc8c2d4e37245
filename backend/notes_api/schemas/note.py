"""
Notes API Backend - Pydantic Request/Response Schemas
======================================================

What:  Pydantic models defining the API contract (the validation layer).
How:   FastAPI validates request bodies against NoteCreate / NoteUpdate
       before the route handler runs, so invalid input never reaches the
       database. Responses are serialized through NoteResponse.
Who:   Route handlers and NoteService.

Validation rules:
    title:    trimmed, then 1-200 characters
    content:  trimmed, then at least 1 character
    Whitespace-only values therefore fail validation instead of being
    stored as empty strings.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, Optional

from pydantic import BaseModel, Field, StringConstraints, field_validator

TITLE_MAX_LENGTH = 200

# Hard ceiling for ?limit=; larger requests are capped, not rejected
MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 10

# Largest value SQLite can bind as INTEGER; offsets and ids beyond it overflow
MAX_SQLITE_INTEGER = 2**63 - 1

Title = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=TITLE_MAX_LENGTH)
]
Content = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


# ══════════════════════════════════════════════════════════════════════════
# Request Bodies
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """Body of POST /api/notes. Both fields are required."""

    title: Title = Field(description="Note title (1-200 characters)")
    content: Content = Field(description="Note body (non-empty)")


class NoteUpdate(BaseModel):
    """
    Body of PATCH /api/notes/{id}.

    Both fields are optional, but a supplied field obeys the same bounds as
    on create. "Omitted" and "supplied" are told apart through
    `supplied()` (Pydantic's set of explicitly provided fields), so an
    explicit JSON null is rejected rather than read as "leave unchanged".
    """

    title: Optional[Title] = Field(default=None, description="New title (1-200 characters)")
    content: Optional[Content] = Field(default=None, description="New body (non-empty)")

    @field_validator("title", "content")
    @classmethod
    def reject_null(cls, v: Optional[str]) -> str:
        # Defaults are not validated, so this only fires on an explicit null
        if v is None:
            raise ValueError("Field may be omitted but not null")
        return v

    def supplied(self) -> Dict[str, Any]:
        """Only the fields the client actually sent, already trimmed."""
        return self.model_dump(exclude_unset=True)


# ══════════════════════════════════════════════════════════════════════════
# List Query Parameters
# ══════════════════════════════════════════════════════════════════════════


class SortColumn(str, Enum):
    """Columns the list endpoint may order by."""

    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"

    @classmethod
    def resolve(cls, raw: Optional[str]) -> "SortColumn":
        """Allow-list resolution: unknown or missing values fall back to created_at."""
        for member in cls:
            if raw == member.value:
                return member
        return cls.CREATED_AT


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"

    @classmethod
    def resolve(cls, raw: Optional[str]) -> "SortOrder":
        """Case-insensitive; anything other than "asc" means DESC."""
        if raw is not None and raw.strip().upper() == cls.ASC.value:
            return cls.ASC
        return cls.DESC


def clamp_limit(limit: int) -> int:
    return max(0, min(limit, MAX_PAGE_SIZE))


def clamp_offset(offset: int) -> int:
    return max(0, min(offset, MAX_SQLITE_INTEGER))


class NoteListParams(BaseModel):
    """
    Normalized parameters for GET /api/notes.

    Every field is coerced into its safe form instead of rejected:
        q:       trimmed; blank means "no filter"
        sort:    SortColumn.resolve (allow-list)
        order:   SortOrder.resolve
        limit:   clamped to [0, 100]
        offset:  clamped to >= 0
    """

    q: Optional[str] = None
    sort: SortColumn = SortColumn.CREATED_AT
    order: SortOrder = SortOrder.DESC
    limit: int = DEFAULT_PAGE_SIZE
    offset: int = 0

    @field_validator("q", mode="before")
    @classmethod
    def normalize_q(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator("sort", mode="before")
    @classmethod
    def resolve_sort(cls, v: Any) -> SortColumn:
        if isinstance(v, SortColumn):
            return v
        return SortColumn.resolve(v)

    @field_validator("order", mode="before")
    @classmethod
    def resolve_order(cls, v: Any) -> SortOrder:
        if isinstance(v, SortOrder):
            return v
        return SortOrder.resolve(v)

    @field_validator("limit")
    @classmethod
    def apply_limit_bounds(cls, v: int) -> int:
        return clamp_limit(v)

    @field_validator("offset")
    @classmethod
    def apply_offset_bounds(cls, v: int) -> int:
        return clamp_offset(v)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """Row representation returned by every note endpoint."""

    id: int = Field(description="Note identifier")
    title: str
    content: str
    created_at: datetime = Field(description="Creation time (UTC ISO 8601)")
    updated_at: datetime = Field(description="Last modification time (UTC ISO 8601)")

    model_config = {"from_attributes": True}


class ErrorResponse(BaseModel):
    """
    Standardized error body.

    Fields:
        error: Machine-readable code ("validation_error", "not_found", ...)
        message: Human-readable description
        details: Field-level report for validation errors
        request_id: Correlation ID for tracing this error in server logs
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Always 'ok' while the process is serving")
