#!/usr/bin/env python3
"""
CLI for the Cycle data migration.

Usage:
    python -m cli.migrate                 # run the migration
    python -m cli.migrate run --dry-run   # run everything, then roll back
    python -m cli.migrate run --json      # print the report as JSON
    python -m cli.migrate check           # connectivity and row counts
"""

import logging
import sys
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from cyclemig.config import ConfigurationError, MigrationConfig
from cyclemig.database.connection import DatabaseConnection, describe_dsn
from cyclemig.database.destination import DEST_TABLES
from cyclemig.database.source import SOURCE_TABLES
from cyclemig.migration.migrator import DataMigrator
from schemas.migration_report import MigrationReport

app = typer.Typer(help="Migrate Cycle app data from the legacy database to the new schema")
console = Console()


def setup_logging(verbose: bool = False, level: str = "INFO"):
    """Setup logging configuration."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )


def _load_config() -> MigrationConfig:
    try:
        return MigrationConfig()
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        sys.exit(1)


def print_report(report: MigrationReport):
    """Print migration statistics in a table."""
    table = Table(title="Migration Statistics")

    table.add_column("Phase", style="cyan")
    table.add_column("Read", style="green", justify="right")
    table.add_column("Written", style="green", justify="right")
    table.add_column("Skipped", style="yellow", justify="right")

    for phase in report.phases:
        table.add_row(phase.name, str(phase.read), str(phase.written), str(phase.skipped))

    console.print(table)
    console.print(f"Users mapped: {report.users_mapped}  Cycles mapped: {report.cycles_mapped}")
    if report.duration_seconds is not None:
        console.print(f"Duration: {report.duration_seconds:.1f}s")


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context):
    """Runs the migration when no command is given."""
    if ctx.invoked_subcommand is None:
        run(dry_run=False, json_output=False, verbose=False)


@app.command()
def run(
    dry_run: bool = typer.Option(False, "--dry-run", help="Roll back instead of committing"),
    json_output: bool = typer.Option(False, "--json", help="Print the report as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
):
    """Migrate users, cycles, likes and comments in one transaction."""
    cfg = _load_config()
    setup_logging(verbose, cfg.LOG_LEVEL)

    migrator = DataMigrator(cfg, dry_run=dry_run)
    error: Optional[Exception] = None
    try:
        migrator.run()
    except Exception as e:
        error = e

    report = MigrationReport.from_context(migrator.context, dry_run=dry_run, error=error)

    if json_output:
        print(report.model_dump_json(indent=2))
    else:
        if report.phases:
            print_report(report)
        if error is not None:
            console.print(f"[red]Migration failed and was rolled back: {error}[/red]")
        elif dry_run:
            console.print("[yellow]Dry run completed; no changes were kept[/yellow]")
        else:
            console.print("[green]Migration completed successfully![/green]")

    if error is not None:
        sys.exit(1)


@app.command()
def check(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
):
    """Check both connections and show table row counts."""
    cfg = _load_config()
    setup_logging(verbose, cfg.LOG_LEVEL)

    targets = [
        ("source", cfg.SOURCE_DATABASE_URL, cfg.SOURCE_SCHEMA, SOURCE_TABLES),
        ("destination", cfg.DEST_DATABASE_URL, cfg.DEST_SCHEMA, DEST_TABLES),
    ]

    table = Table(title="Database Check")
    table.add_column("Database", style="cyan")
    table.add_column("Table", style="cyan")
    table.add_column("Rows", style="green", justify="right")

    for name, dsn, schema, tables in targets:
        try:
            db = DatabaseConnection(dsn, name=name, sslmode=cfg.DB_SSLMODE, readonly=True)
        except Exception as e:
            console.print(f"[red]✗ {name} ({describe_dsn(dsn)}): {e}[/red]")
            sys.exit(1)

        try:
            console.print(f"[green]✓ {name}: {describe_dsn(dsn)} (server {db.server_version})[/green]")
            for table_name in tables:
                total = db.count_rows(schema, table_name)
                table.add_row(name, f"{schema}.{table_name}", "missing" if total is None else str(total))
        finally:
            db.close()

    console.print(table)


if __name__ == "__main__":
    app()
