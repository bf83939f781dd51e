# cyclemig/config.py
"""
Central configuration for the Cycle data migration.

All settings come from the environment (a local .env file is loaded on import),
so the migration can be pointed at any pair of databases without code changes.

Databases:
- SOURCE_DATABASE_URL: legacy database (tables users, cycles, likes, comments)
- DEST_DATABASE_URL: new database (tables "User", "Cycle", "Like", "Comment")

Both connections use TLS without certificate verification (sslmode=require),
which is what the hosted databases accept.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class ConfigurationError(ValueError):
    """Raised when a required setting is missing or invalid."""


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


@dataclass(frozen=True)
class MigrationConfig:
    # -----------------------------
    # Connection strings
    # -----------------------------
    SOURCE_DATABASE_URL: Optional[str] = field(default_factory=lambda: _env("SOURCE_DATABASE_URL"))
    DEST_DATABASE_URL: Optional[str] = field(default_factory=lambda: _env("DEST_DATABASE_URL"))

    # TLS mode for both connections ("require" = encrypted, certificate not verified)
    DB_SSLMODE: str = field(default_factory=lambda: _env("DB_SSLMODE", "require"))

    # -----------------------------
    # Schemas
    # -----------------------------
    SOURCE_SCHEMA: str = field(default_factory=lambda: _env("SOURCE_SCHEMA", "public"))
    DEST_SCHEMA: str = field(default_factory=lambda: _env("DEST_SCHEMA", "public"))

    # -----------------------------
    # Logging
    # -----------------------------
    LOG_LEVEL: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO").upper())

    def __post_init__(self):
        missing = [
            name
            for name in ("SOURCE_DATABASE_URL", "DEST_DATABASE_URL")
            if not getattr(self, name)
        ]
        if missing:
            raise ConfigurationError(
                f"Missing required setting(s): {', '.join(missing)}. "
                "Set them in the environment or in a .env file."
            )
