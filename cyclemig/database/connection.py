# cyclemig/database/connection.py
"""
Database connection management for PostgreSQL.

One plain psycopg2 connection per database. The migration needs exactly one
long-lived transaction on the destination, so there is no pooling here.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Sequence, Union

import psycopg2
import psycopg2.errors
from psycopg2.extensions import parse_dsn
from psycopg2.extras import RealDictCursor
from psycopg2.sql import SQL, Composable, Identifier

logger = logging.getLogger(__name__)

Query = Union[str, Composable]


def describe_dsn(dsn: str) -> str:
    """Render a connection string for logs, with the password masked."""
    try:
        params = parse_dsn(dsn)
    except psycopg2.ProgrammingError:
        return "<invalid connection string>"

    user = params.get("user", "")
    if "password" in params:
        user = f"{user}:***"
    host = params.get("host", "localhost")
    port = params.get("port", "5432")
    dbname = params.get("dbname", "")
    prefix = f"{user}@" if user else ""
    return f"{prefix}{host}:{port}/{dbname}"


def qualified_table(schema: str, table: str) -> Composable:
    """Schema-qualified, quoted table name (e.g. "public"."User")."""
    return SQL("{}.{}").format(Identifier(schema), Identifier(table))


class DatabaseConnection:
    """
    A single PostgreSQL connection returning rows as dicts.

    psycopg2 opens a transaction implicitly on the first statement; it stays
    open until commit() or rollback() is called.
    """

    def __init__(
        self,
        dsn: str,
        *,
        name: str,
        sslmode: str = "require",
        readonly: bool = False,
    ):
        self.name = name
        self.readonly = readonly
        self._conn = None
        self._connect(dsn, sslmode)

    def _connect(self, dsn: str, sslmode: str) -> None:
        try:
            self._conn = psycopg2.connect(dsn, sslmode=sslmode, cursor_factory=RealDictCursor)
            if self.readonly:
                self._conn.set_session(readonly=True)
        except psycopg2.Error as e:
            logger.error(f"Failed to connect to {self.name} database ({describe_dsn(dsn)}): {e}")
            raise

        mode = "read-only" if self.readonly else "read-write"
        logger.info(f"Connected to {self.name} database {describe_dsn(dsn)} ({mode}, sslmode={sslmode})")

    @property
    def closed(self) -> bool:
        return self._conn is None or bool(self._conn.closed)

    @property
    def server_version(self) -> int:
        return self._conn.server_version

    @contextmanager
    def get_cursor(self):
        """Get a cursor with automatic cleanup."""
        cursor = self._conn.cursor()
        try:
            yield cursor
        finally:
            cursor.close()

    def fetch_all(self, query: Query, params: Optional[Sequence[Any]] = None) -> List[Dict[str, Any]]:
        """Execute a query and return every row."""
        with self.get_cursor() as cursor:
            cursor.execute(query, params)
            return [dict(row) for row in cursor.fetchall()]

    def fetch_one(self, query: Query, params: Optional[Sequence[Any]] = None) -> Optional[Dict[str, Any]]:
        """Execute a query and return the first row, if any."""
        with self.get_cursor() as cursor:
            cursor.execute(query, params)
            row = cursor.fetchone()
            return dict(row) if row is not None else None

    def execute(self, query: Query, params: Optional[Sequence[Any]] = None) -> int:
        """Execute a statement and return the affected row count."""
        with self.get_cursor() as cursor:
            cursor.execute(query, params)
            return cursor.rowcount

    def count_rows(self, schema: str, table: str) -> Optional[int]:
        """
        Count rows of a table.

        Returns None when the table does not exist; the failed statement is
        rolled back so the connection stays usable.
        """
        query = SQL("SELECT COUNT(*) AS total FROM {}").format(qualified_table(schema, table))
        try:
            row = self.fetch_one(query)
        except psycopg2.errors.UndefinedTable:
            logger.warning(f"Table {schema}.{table} not found in {self.name} database")
            self._conn.rollback()
            return None
        return int(row["total"]) if row else 0

    def commit(self) -> None:
        self._conn.commit()
        logger.info(f"{self.name.capitalize()} transaction committed")

    def rollback(self) -> None:
        self._conn.rollback()
        logger.warning(f"{self.name.capitalize()} transaction rolled back")

    def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        if self._conn is not None and not self._conn.closed:
            self._conn.close()
            logger.info(f"{self.name.capitalize()} connection closed")
