# cyclemig/database/__init__.py
"""
Database module for the Cycle migration.

Provides PostgreSQL connections plus typed readers/writers for the legacy and
new schemas.
"""

from .connection import DatabaseConnection, describe_dsn, qualified_table
from .destination import DEST_TABLES, DestinationWriter
from .schema import RecycledLink, SourceComment, SourceCycle, SourceLike, SourceUser
from .source import SOURCE_TABLES, SourceReader

__all__ = [
    "DatabaseConnection",
    "describe_dsn",
    "qualified_table",
    "DestinationWriter",
    "DEST_TABLES",
    "SourceReader",
    "SOURCE_TABLES",
    "SourceUser",
    "SourceCycle",
    "RecycledLink",
    "SourceLike",
    "SourceComment",
]
