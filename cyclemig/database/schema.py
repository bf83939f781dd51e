# cyclemig/database/schema.py
"""
Row definitions for the legacy (source) tables.

Each record mirrors one row of the old schema, keyed by its old primary key.
Destination ids are never stored here; they live in the migration ID maps.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Dict, List, Optional, Union


def time_as_text(value: Optional[Union[time, datetime, str]]) -> Optional[str]:
    """Event times are stored as text in the new schema."""
    if value is None or value == "":
        return None
    return str(value)


@dataclass
class SourceUser:
    """Row of the legacy users table."""

    id: int
    username: str
    password: Optional[str] = None
    why: Optional[str] = None
    medium: Optional[Union[str, List[str]]] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "SourceUser":
        return cls(
            id=row["id"],
            username=row["username"],
            password=row.get("password"),
            why=row.get("why"),
            medium=row.get("medium"),
        )


@dataclass
class SourceCycle:
    """Row of the legacy cycles table."""

    id: int
    user_id: int
    medium: Optional[str] = None
    img_url: Optional[str] = None
    reflection: Optional[str] = None
    created_at: Optional[datetime] = None
    event_description: Optional[str] = None
    event_date: Optional[date] = None
    event_start_time: Optional[Union[time, str]] = None
    event_end_time: Optional[Union[time, str]] = None
    event_location: Optional[str] = None
    recycled_from: Optional[int] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "SourceCycle":
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            medium=row.get("medium"),
            img_url=row.get("img_url"),
            reflection=row.get("reflection"),
            created_at=row.get("created_at"),
            event_description=row.get("event_description"),
            event_date=row.get("event_date"),
            event_start_time=row.get("event_start_time"),
            event_end_time=row.get("event_end_time"),
            event_location=row.get("event_location"),
            recycled_from=row.get("recycled_from"),
        )

    @property
    def reflection_text(self) -> str:
        return self.reflection or ""


@dataclass
class RecycledLink:
    """A cycle and the cycle it was recycled from (both old ids)."""

    cycle_id: int
    recycled_from: int

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "RecycledLink":
        return cls(cycle_id=row["id"], recycled_from=row["recycled_from"])


@dataclass
class SourceLike:
    """Row of the legacy likes table."""

    user_id: int
    cycle_id: int
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "SourceLike":
        return cls(
            user_id=row["user_id"],
            cycle_id=row["cycle_id"],
            created_at=row.get("created_at"),
        )


@dataclass
class SourceComment:
    """Row of the legacy comments table."""

    content: str
    user_id: int
    cycle_id: int
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "SourceComment":
        return cls(
            content=row["content"],
            user_id=row["user_id"],
            cycle_id=row["cycle_id"],
            created_at=row.get("created_at"),
        )
