"""
Notes API Backend - Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions for the error scenarios of the API.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the right status code.
Who:   Raised by schemas conversion, services and routes; caught by handlers.

Exception Hierarchy:
    NotesApiError (base)
    ├── ValidationError   → 400 Bad Request (per-field report)
    ├── NotFoundError     → 404 Not Found
    └── DatabaseError     → 500 Internal Server Error
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional

# Locations FastAPI prefixes to every validation error
_REQUEST_SECTIONS = {"body", "query", "path", "header", "cookie"}


class NotesApiError(Exception):
    """
    Base exception for all Notes API application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NotesApiError):
    """
    Raised when client input fails validation.

    HTTP:    400 Bad Request

    Every violated field is reported, not just the first one:
        {
            "error": "validation_error",
            "message": "Request validation failed",
            "details": {
                "field_errors": {"title": ["String should have at least 1 character"]},
                "form_errors": []
            }
        }

    `form_errors` carries problems that do not belong to a single field,
    such as a missing or malformed request body.
    """

    def __init__(
        self,
        message: str = "Request validation failed",
        field_errors: Optional[Dict[str, List[str]]] = None,
        form_errors: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.field_errors = field_errors or {}
        self.form_errors = form_errors or []

    @property
    def details(self) -> Dict[str, Any]:
        return {"field_errors": self.field_errors, "form_errors": self.form_errors}

    @classmethod
    def from_errors(cls, errors: Iterable[Mapping[str, Any]]) -> "ValidationError":
        """
        Build a ValidationError from Pydantic / FastAPI error dicts.

        The request section prefix ("body", "query", ...) is stripped from
        each `loc`; what remains names the field. Errors with nothing left
        (e.g. a missing body) become form errors.
        """
        field_errors: Dict[str, List[str]] = {}
        form_errors: List[str] = []
        for error in errors:
            loc = list(error.get("loc", ()))
            if loc and loc[0] in _REQUEST_SECTIONS:
                loc = loc[1:]
            message = str(error.get("msg", "Invalid value"))
            # Malformed JSON is located by character offset, not by field
            if error.get("type") == "json_invalid":
                loc = []
            if loc:
                field = ".".join(str(part) for part in loc)
                field_errors.setdefault(field, []).append(message)
            else:
                form_errors.append(message)
        return cls(field_errors=field_errors, form_errors=form_errors)


class NotFoundError(NotesApiError):
    """
    Raised when a requested resource does not exist.

    HTTP:    404 Not Found

    SQLAlchemy returns None (or a zero row count) for missing records; the
    service layer converts that into this exception so routes stay free of
    existence checks.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(NotesApiError):
    """
    Raised when a database operation fails unexpectedly.

    When:    Constraint violation, locked database file, I/O error.
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. Constraint
    names and SQL text stay in the server log.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
