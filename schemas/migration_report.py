# schemas/migration_report.py
"""
Output schema of a migration run, printed by the CLI with --json.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from cyclemig.migration.context import MigrationContext, MigrationState
from cyclemig.migration.stats import PhaseStats


class PhaseReport(BaseModel):
    name: str
    read: int = Field(default=0, ge=0, description="Source rows read.")
    written: int = Field(default=0, ge=0, description="Destination rows inserted or updated.")
    skipped: int = Field(default=0, ge=0, description="Rows left out for a missing parent mapping.")
    warnings: List[str] = Field(default_factory=list)

    @classmethod
    def from_stats(cls, phase: PhaseStats) -> "PhaseReport":
        return cls(
            name=phase.name,
            read=phase.read,
            written=phase.written,
            skipped=phase.skipped,
            warnings=list(phase.warnings),
        )


class MigrationReport(BaseModel):
    """
    Summary of one migration run.

    status:
    - committed: every phase ran and the destination transaction was committed
    - dry_run: every phase ran and the transaction was rolled back on purpose
    - rolled_back: a phase failed; nothing was written
    - failed: the run never got a destination transaction (config/connection error)
    """

    status: Literal["committed", "dry_run", "rolled_back", "failed"]
    final_state: str = MigrationState.NOT_STARTED.value
    users_mapped: int = 0
    cycles_mapped: int = 0
    phases: List[PhaseReport] = Field(default_factory=list)
    duration_seconds: Optional[float] = None
    error_message: Optional[str] = None

    @classmethod
    def from_context(
        cls,
        ctx: Optional[MigrationContext],
        *,
        dry_run: bool = False,
        error: Optional[BaseException] = None,
    ) -> "MigrationReport":
        error_message = f"{type(error).__name__}: {error}" if error is not None else None
        if ctx is None:
            return cls(status="failed", error_message=error_message)

        if ctx.committed:
            status = "committed"
        elif dry_run and ctx.error is None:
            status = "dry_run"
        else:
            status = "rolled_back"

        return cls(
            status=status,
            final_state=ctx.state.value,
            users_mapped=len(ctx.user_ids),
            cycles_mapped=len(ctx.cycle_ids),
            phases=[PhaseReport.from_stats(phase) for phase in ctx.stats.phases],
            duration_seconds=ctx.stats.duration_seconds,
            error_message=ctx.error or error_message,
        )
