"""Runtime settings for bookquery.

Settings are read from ``BOOKQUERY_``-prefixed environment variables and an
optional ``.env`` file.  CLI flags override individual fields via
:meth:`BookQuerySettings.with_overrides`.

Examples:
    >>> import os
    >>> os.environ["BOOKQUERY_MONGO_URI"] = "mongodb://db.internal:27017"
    >>> BookQuerySettings().mongo_uri
    'mongodb://db.internal:27017'
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BookQuerySettings(BaseSettings):
    """Connection and logging settings.

    Fields
    ──────
    mongo_uri                  : Document store address (``mongodb://``,
                                 ``mongodb+srv://`` or ``mongomock://``)
    database                   : Database holding the books collection
    collection                 : Collection queried by the catalog
    server_selection_timeout_ms: How long to wait for a reachable server
    log_level                  : Structlog log level
    json_logs                  : JSON logs (``None`` = auto-detect from tty)
    """

    model_config = SettingsConfigDict(
        env_prefix="BOOKQUERY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Store ────────────────────────────────────────────────────
    mongo_uri: str = "mongodb://localhost:27017"
    database: str = "plp_bookstore"
    collection: str = "books"
    server_selection_timeout_ms: int = Field(default=5000, ge=1)

    # ── Observability ────────────────────────────────────────────
    log_level: str = "WARNING"
    json_logs: bool | None = None

    @field_validator("log_level")
    @classmethod
    def _normalise_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value!r}")
        return level

    def with_overrides(self, **overrides: Any) -> BookQuerySettings:
        """Return a copy with every non-``None`` override applied."""
        update = {k: v for k, v in overrides.items() if v is not None}
        if not update:
            return self
        return self.model_validate({**self.model_dump(), **update})
