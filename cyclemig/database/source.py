# cyclemig/database/source.py
"""
Read-only access to the legacy tables.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from psycopg2.sql import SQL

from cyclemig.database.connection import DatabaseConnection, qualified_table
from cyclemig.database.schema import (
    RecycledLink,
    SourceComment,
    SourceCycle,
    SourceLike,
    SourceUser,
)

logger = logging.getLogger(__name__)

SOURCE_TABLES = ("users", "cycles", "likes", "comments")


class SourceReader:
    """Loads every row of the legacy tables, in primary-key order where there is one."""

    def __init__(self, db: DatabaseConnection, schema: str = "public"):
        self.db = db
        self.schema = schema

    def _select_all(self, table: str, order_by: Optional[str] = None):
        query = SQL("SELECT * FROM {}").format(qualified_table(self.schema, table))
        if order_by:
            query = SQL("{} ORDER BY {}").format(query, SQL(order_by))
        rows = self.db.fetch_all(query)
        logger.debug(f"Read {len(rows)} rows from {self.schema}.{table}")
        return rows

    def fetch_users(self) -> List[SourceUser]:
        return [SourceUser.from_row(row) for row in self._select_all("users", order_by="id")]

    def fetch_cycles(self) -> List[SourceCycle]:
        return [SourceCycle.from_row(row) for row in self._select_all("cycles", order_by="id")]

    def fetch_recycled_links(self) -> List[RecycledLink]:
        query = SQL("SELECT id, recycled_from FROM {} WHERE recycled_from IS NOT NULL ORDER BY id").format(
            qualified_table(self.schema, "cycles")
        )
        return [RecycledLink.from_row(row) for row in self.db.fetch_all(query)]

    def fetch_likes(self) -> List[SourceLike]:
        return [SourceLike.from_row(row) for row in self._select_all("likes")]

    def fetch_comments(self) -> List[SourceComment]:
        return [SourceComment.from_row(row) for row in self._select_all("comments")]

    def count_rows(self, table: str) -> Optional[int]:
        return self.db.count_rows(self.schema, table)

    def close(self) -> None:
        self.db.close()
