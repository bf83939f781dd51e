# cyclemig/database/destination.py
"""
Writes into the new tables ("User", "Cycle", "Like", "Comment").

Every statement runs inside the destination connection's open transaction;
nothing is visible to other sessions until commit().
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from psycopg2.sql import SQL

from cyclemig.database.connection import DatabaseConnection, qualified_table
from cyclemig.database.schema import SourceCycle, SourceUser, time_as_text

DEST_TABLES = ("User", "Cycle", "Like", "Comment")


class DestinationWriter:
    def __init__(self, db: DatabaseConnection, schema: str = "public"):
        self.db = db
        self.schema = schema

    def _table(self, name: str):
        return qualified_table(self.schema, name)

    def _insert_returning_id(self, query, params) -> int:
        row = self.db.fetch_one(query, params)
        if row is None:
            raise RuntimeError("INSERT ... RETURNING id returned no row")
        return int(row["id"])

    def insert_user(self, user: SourceUser) -> int:
        """Insert a user and return its new id. createdAt is set by the server."""
        query = SQL(
            'INSERT INTO {} (username, password, why, mediums, "createdAt") '
            "VALUES (%s, %s, %s, %s, CURRENT_TIMESTAMP) "
            "RETURNING id"
        ).format(self._table("User"))
        return self._insert_returning_id(query, (user.username, user.password, user.why, user.medium))

    def insert_cycle(self, cycle: SourceCycle, user_id: int, recycled_from_id: Optional[int]) -> int:
        """Insert a cycle owned by the (new) user_id and return its new id."""
        query = SQL(
            'INSERT INTO {} ("userId", reflection, medium, "imageUrl", "createdAt", '
            '"eventDescription", "eventDate", "eventStartTime", "eventEndTime", "eventLocation", "recycledFromId") '
            "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s) "
            "RETURNING id"
        ).format(self._table("Cycle"))
        params = (
            user_id,
            cycle.reflection_text,
            cycle.medium,
            cycle.img_url,
            cycle.created_at,
            cycle.event_description,
            cycle.event_date,
            time_as_text(cycle.event_start_time),
            time_as_text(cycle.event_end_time),
            cycle.event_location,
            recycled_from_id,
        )
        return self._insert_returning_id(query, params)

    def update_recycled_from(self, cycle_id: int, recycled_from_id: int) -> int:
        query = SQL('UPDATE {} SET "recycledFromId" = %s WHERE id = %s').format(self._table("Cycle"))
        return self.db.execute(query, (recycled_from_id, cycle_id))

    def insert_like(self, user_id: int, cycle_id: int, created_at: Optional[datetime]) -> None:
        query = SQL('INSERT INTO {} ("userId", "cycleId", "createdAt") VALUES (%s, %s, %s)').format(
            self._table("Like")
        )
        self.db.execute(query, (user_id, cycle_id, created_at))

    def insert_comment(self, content: str, user_id: int, cycle_id: int, created_at: Optional[datetime]) -> None:
        query = SQL(
            'INSERT INTO {} (content, "userId", "cycleId", "createdAt") VALUES (%s, %s, %s, %s)'
        ).format(self._table("Comment"))
        self.db.execute(query, (content, user_id, cycle_id, created_at))

    def count_rows(self, table: str) -> Optional[int]:
        return self.db.count_rows(self.schema, table)

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

    def close(self) -> None:
        self.db.close()
