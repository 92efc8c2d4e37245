"""
Notes API Backend - Application Configuration
==============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a module-level `settings` object.
Who:   Imported by main.py, the CLI entry point and Alembic.
When:  Loaded once at module import time; validated before the app starts.

Environment variables (case-insensitive):
    DATABASE_FILE      SQLite file backing the notes table
    HOST / PORT        Bind address for `python -m notes_api`
    CORS_ORIGINS       Comma-separated allowed origins (CORS_ORIGIN also accepted)
    LOG_LEVEL          DEBUG, INFO, WARNING, ERROR, CRITICAL
    DEFAULT_PAGE_SIZE  Page size used when ?limit= is omitted
"""

from typing import List

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have development defaults; `create_app()` also accepts
    an explicit instance so tests can point at a temporary database.
    """

    # ── Database ──────────────────────────────────────────────────────────
    # Path to the SQLite file. Relative paths resolve against the CWD.
    database_file: str = Field(
        default="./notes.db",
        description="SQLite database file backing the notes table",
    )

    @property
    def database_url(self) -> str:
        """Async SQLAlchemy URL for the configured SQLite file."""
        return f"sqlite+aiosqlite:///{self.database_file}"

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated URLs (parsed by cors_origins_list below)
    cors_origins: str = Field(
        default="http://127.0.0.1:5173,http://localhost:5173",
        validation_alias=AliasChoices("cors_origins", "cors_origin"),
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list, dropping blanks."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000, ge=1, le=65535)

    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pagination ────────────────────────────────────────────────────────
    # Used when the client omits ?limit=; requested limits are still clamped
    # to [0, 100] by the list query.
    default_page_size: int = Field(default=10, ge=0, le=100)

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )


# Module-level instance used by the ASGI entry point and the CLI
settings = Settings()
