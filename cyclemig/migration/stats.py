# cyclemig/migration/stats.py
"""
Statistics collected while the migration runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class PhaseStats:
    """Counters for one migration phase."""

    name: str
    read: int = 0
    written: int = 0
    skipped: int = 0
    warnings: List[str] = field(default_factory=list)

    def skip(self, message: str) -> None:
        """Record a row left out because a parent id has no mapping."""
        self.skipped += 1
        self.warnings.append(message)


@dataclass
class MigrationStats:
    """Statistics from a whole migration run."""

    users: PhaseStats = field(default_factory=lambda: PhaseStats("users"))
    cycles: PhaseStats = field(default_factory=lambda: PhaseStats("cycles"))
    recycled_links: PhaseStats = field(default_factory=lambda: PhaseStats("recycled_links"))
    likes: PhaseStats = field(default_factory=lambda: PhaseStats("likes"))
    comments: PhaseStats = field(default_factory=lambda: PhaseStats("comments"))
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @property
    def phases(self) -> List[PhaseStats]:
        return [self.users, self.cycles, self.recycled_links, self.likes, self.comments]

    @property
    def total_skipped(self) -> int:
        return sum(phase.skipped for phase in self.phases)

    @property
    def duration_seconds(self) -> Optional[float]:
        """Duration of migration in seconds."""
        if self.start_time and self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return None
