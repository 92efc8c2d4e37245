"""
Notes API Backend - Application Package Initializer
====================================================

What: Marks the `notes_api` directory as a Python package.
Who:  Imported by uvicorn (`notes_api.main:app`), Alembic and pytest.

Architecture Note:
    The backend is layered:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │      Services (Query Layer)         │  ← Parameterized SQL composition
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy over SQLite
    └─────────────────────────────────────┘

    Routes translate HTTP to service calls, services own the SQL,
    schemas own validation, and the database handle owns the engine.
"""

__version__ = "1.0.0"
