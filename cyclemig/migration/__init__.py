# cyclemig/migration/__init__.py
"""
Migration of the Cycle app data from the legacy schema to the new one.
"""

from .context import MigrationContext, MigrationState
from .migrator import DataMigrator, open_connections
from .stats import MigrationStats, PhaseStats

__all__ = [
    "DataMigrator",
    "open_connections",
    "MigrationContext",
    "MigrationState",
    "MigrationStats",
    "PhaseStats",
]
