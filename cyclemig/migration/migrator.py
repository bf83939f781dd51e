# cyclemig/migration/migrator.py
"""
Runs the full migration inside a single destination transaction.

Provides:
- Connection setup for source (read-only) and destination
- Ordered execution of the migration phases
- Commit on success, rollback on any error (or on dry run)
- Connections closed in every case
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional, Tuple

import psycopg2

from cyclemig.config import MigrationConfig
from cyclemig.database.connection import DatabaseConnection
from cyclemig.database.destination import DestinationWriter
from cyclemig.database.source import SourceReader
from cyclemig.migration.context import MigrationContext, MigrationState
from cyclemig.migration.stats import MigrationStats
from cyclemig.migration.steps import (
    fix_recycled_from,
    migrate_comments,
    migrate_cycles,
    migrate_likes,
    migrate_users,
)

logger = logging.getLogger(__name__)

Phase = Callable[[MigrationContext], None]
Connector = Callable[[MigrationConfig], Tuple[SourceReader, DestinationWriter]]

PHASES: List[Tuple[Phase, MigrationState]] = [
    (migrate_users, MigrationState.USERS_DONE),
    (migrate_cycles, MigrationState.CYCLES_DONE),
    (fix_recycled_from, MigrationState.FIXUP_DONE),
    (migrate_likes, MigrationState.LIKES_DONE),
    (migrate_comments, MigrationState.COMMENTS_DONE),
]


def open_connections(cfg: MigrationConfig) -> Tuple[SourceReader, DestinationWriter]:
    """Open the source (read-only) and destination connections."""
    source_db = DatabaseConnection(
        cfg.SOURCE_DATABASE_URL, name="source", sslmode=cfg.DB_SSLMODE, readonly=True
    )
    try:
        dest_db = DatabaseConnection(cfg.DEST_DATABASE_URL, name="destination", sslmode=cfg.DB_SSLMODE)
    except Exception:
        source_db.close()
        raise
    return SourceReader(source_db, cfg.SOURCE_SCHEMA), DestinationWriter(dest_db, cfg.DEST_SCHEMA)


class DataMigrator:
    """
    Migrates users, cycles, likes and comments from the legacy database.

    The run is all-or-nothing: every write happens in one destination
    transaction. Rows skipped for missing parents do not fail the run.
    Running it twice inserts every row twice.
    """

    def __init__(self, cfg: MigrationConfig, dry_run: bool = False, connector: Optional[Connector] = None):
        self.cfg = cfg
        self.dry_run = dry_run
        self._connector = connector or open_connections
        self.context: Optional[MigrationContext] = None

    def run(self) -> MigrationContext:
        """
        Execute every phase and commit.

        Returns:
            The final migration context (ID maps, stats, state history)

        Raises:
            Whatever the failing phase raised, after the rollback
        """
        mode = " (dry run)" if self.dry_run else ""
        logger.info(f"Starting migration{mode}")
        stats = MigrationStats(start_time=datetime.now())

        source, destination = self._connector(self.cfg)
        ctx = MigrationContext(source=source, destination=destination, stats=stats)
        self.context = ctx
        ctx.advance(MigrationState.CONNECTIONS_OPEN)

        try:
            ctx.advance(MigrationState.TRANSACTION_OPEN)
            for phase, done_state in PHASES:
                phase(ctx)
                ctx.advance(done_state)

            if self.dry_run:
                destination.rollback()
                ctx.advance(MigrationState.ROLLED_BACK)
                logger.info("Dry run finished; all changes rolled back")
            else:
                destination.commit()
                ctx.advance(MigrationState.COMMITTED)
                logger.info("Data migration completed successfully")

        except Exception as e:
            ctx.error = f"{type(e).__name__}: {e}"
            logger.error(f"Migration failed during {ctx.state.value}: {e}", exc_info=True)
            self._rollback(destination)
            ctx.advance(MigrationState.ROLLED_BACK)
            raise

        finally:
            source.close()
            destination.close()
            ctx.advance(MigrationState.CONNECTIONS_CLOSED)
            stats.end_time = datetime.now()
            logger.info(
                f"Migration finished in state {ctx.history[-2].value}: "
                f"{len(ctx.user_ids)} users, {len(ctx.cycle_ids)} cycles mapped, "
                f"{stats.total_skipped} rows skipped"
            )

        return ctx

    @staticmethod
    def _rollback(destination: DestinationWriter) -> None:
        try:
            destination.rollback()
        except psycopg2.Error as e:
            # Closing the connection without commit discards the transaction anyway.
            logger.error(f"Rollback failed: {e}")
