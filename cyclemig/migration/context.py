# cyclemig/migration/context.py
"""
State shared by the migration phases.

The context is created once per run and handed to every phase explicitly. It
owns the two ID maps (old id -> new id) and tracks where the run is in its
lifecycle:

    NotStarted -> ConnectionsOpen -> TransactionOpen
        -> UsersDone -> CyclesDone -> FixupDone -> LikesDone -> CommentsDone
        -> Committed | RolledBack -> ConnectionsClosed

A failure in any phase jumps straight to RolledBack.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from cyclemig.database.destination import DestinationWriter
from cyclemig.database.source import SourceReader
from cyclemig.migration.stats import MigrationStats

logger = logging.getLogger(__name__)


class MigrationState(str, Enum):
    NOT_STARTED = "NotStarted"
    CONNECTIONS_OPEN = "ConnectionsOpen"
    TRANSACTION_OPEN = "TransactionOpen"
    USERS_DONE = "UsersDone"
    CYCLES_DONE = "CyclesDone"
    FIXUP_DONE = "FixupDone"
    LIKES_DONE = "LikesDone"
    COMMENTS_DONE = "CommentsDone"
    COMMITTED = "Committed"
    ROLLED_BACK = "RolledBack"
    CONNECTIONS_CLOSED = "ConnectionsClosed"


@dataclass
class MigrationContext:
    source: SourceReader
    destination: DestinationWriter
    user_ids: Dict[int, int] = field(default_factory=dict)
    cycle_ids: Dict[int, int] = field(default_factory=dict)
    stats: MigrationStats = field(default_factory=MigrationStats)
    state: MigrationState = MigrationState.NOT_STARTED
    history: List[MigrationState] = field(default_factory=lambda: [MigrationState.NOT_STARTED])
    error: Optional[str] = None

    def advance(self, state: MigrationState) -> None:
        logger.debug(f"Migration state: {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    @property
    def committed(self) -> bool:
        return MigrationState.COMMITTED in self.history
