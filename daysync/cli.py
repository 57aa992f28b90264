"""CLI interface for daysync."""

import logging
import sys
from datetime import date, datetime
from pathlib import Path
from typing import NoReturn

import click

from daysync.config import Config
from daysync.database import CatalogStore, Database
from daysync.pipeline import ImportPipeline, ImportResult
from daysync.scanner import EnumerationError, ImportBatch, LocalFileSource, Scanner
from daysync.sync import LiveSync
from daysync.writer import WriteAccessError, WriteCapability

database_option = click.option(
    "--database", type=click.Path(path_type=Path), help="Path to database file"
)
root_argument = click.argument(
    "root", type=click.Path(file_okay=False, path_type=Path)
)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option("--workers", type=int, default=None, help="Parallel setup file reads")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, workers: int | None) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    config = Config()
    if workers is not None:
        config.scanner.setup_read_workers = workers
    ctx.obj["config"] = config


@cli.command()
@root_argument
@click.pass_context
def scan(ctx: click.Context, root: Path) -> None:
    """List test days, runs and setups found under ROOT without importing."""
    config: Config = ctx.obj["config"]
    source = LocalFileSource(root, config.scanner.max_path_length)

    scanner = Scanner(config.scanner)

    try:
        batch = scanner.scan(source)
    except EnumerationError as e:
        _fail_unreadable(e)

    stats = scanner.stats
    click.echo(f"Scanned {stats.files_seen:,} files in {stats.elapsed_seconds:.2f}s")

    if not batch.test_days and not batch.setups:
        click.echo("No test-day folders found.")
    else:
        _echo_batch(batch)
    _echo_diagnostics(batch)


@cli.command("import")
@root_argument
@database_option
@click.pass_context
def import_cmd(ctx: click.Context, root: Path, database: Path | None) -> None:
    """Scan ROOT and merge what was found into the catalog."""
    config: Config = ctx.obj["config"]
    db_path = database or config.database_path

    try:
        with Database(db_path) as db:
            result = _build_pipeline(config, root, db).run()
    except EnumerationError as e:
        _fail_unreadable(e)
    except KeyboardInterrupt:
        sys.exit(130)

    _echo_import_result(result)


@cli.command()
@root_argument
@database_option
@click.option(
    "--interval",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds between scans",
)
@click.pass_context
def watch(ctx: click.Context, root: Path, database: Path | None, interval: float | None) -> None:
    """Re-import ROOT on a fixed interval until interrupted."""
    config: Config = ctx.obj["config"]
    db_path = database or config.database_path
    if interval is None:
        interval = config.sync.interval_seconds

    def run_import() -> ImportResult:
        with Database(db_path) as db:
            return _build_pipeline(config, root, db).run()

    def on_result(result: ImportResult) -> None:
        if result.summary.total_added or result.batch.diagnostics:
            _echo_import_result(result)

    def on_error(error: Exception) -> None:
        click.echo(f"Error: {error}", err=True)

    click.echo(f"Watching {root} every {interval:g}s. Press Ctrl-C to stop.")
    live = LiveSync(run_import, interval, on_result=on_result, on_error=on_error)
    live.start()
    try:
        while not live.wait(1.0):
            pass
    except KeyboardInterrupt:
        live.stop()
        click.echo("\nStopped watching.")
        sys.exit(130)


@cli.command()
@database_option
@click.option("--limit", type=int, default=10, help="Number of import sessions to show")
@click.pass_context
def status(ctx: click.Context, database: Path | None, limit: int) -> None:
    """Show catalog totals and recent imports."""
    config: Config = ctx.obj["config"]
    db_path = database or config.database_path

    if not db_path.exists():
        click.echo("No database found. Run 'daysync import' first.")
        return

    with Database(db_path) as db:
        store = CatalogStore(db)
        dataset = store.load()
        sessions = store.recent_sessions(limit)

    click.echo("Catalog:")
    click.echo(f"  Test days: {len(dataset.test_days):,}")
    click.echo(f"  Runs: {len(dataset.runs):,}")
    click.echo(f"  Setups: {len(dataset.setups):,}")
    click.echo(f"  Tire sets: {len(dataset.tire_sets):,}")

    if not sessions:
        click.echo("\nNo imports yet.")
        return

    click.echo("\nRecent imports:")
    click.echo("-" * 80)
    header = "Source".ljust(35) + "Status".ljust(12)
    header += "Days".rjust(6) + "Runs".rjust(6) + "Setups".rjust(8) + "  Started"
    click.echo(header)
    click.echo("-" * 80)

    for session in sessions:
        source = _truncate(session.source_root, 34)
        click.echo(
            f"{source:<35}"
            f"{session.status.value:<12}"
            f"{session.test_days_added:>6}"
            f"{session.runs_added:>6}"
            f"{session.setups_added:>8}"
            f"  {_format_relative_time(session.started_at)}"
        )


@cli.command("new-day")
@root_argument
@click.option(
    "--date",
    "day",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Test day date (YYYY-MM-DD), defaults to today",
)
@click.option("--venue", required=True, help="Track or venue name")
@click.pass_context
def new_day(ctx: click.Context, root: Path, day: datetime | None, venue: str) -> None:
    """Create a test-day folder under ROOT, ready for telemetry files."""
    config: Config = ctx.obj["config"]
    test_date = day.date() if day else date.today()

    try:
        capability = WriteCapability.acquire(root, config.scanner)
        day_dir = capability.create_test_day(test_date, venue)
    except (WriteAccessError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Created test day folder: {day_dir}")


@cli.command("export-setup")
@root_argument
@click.argument("key")
@database_option
@click.pass_context
def export_setup(ctx: click.Context, root: Path, key: str, database: Path | None) -> None:
    """Write the catalog setup KEY into ROOT's setup folder."""
    config: Config = ctx.obj["config"]
    db_path = database or config.database_path

    if not db_path.exists():
        click.echo("Error: No database found. Run 'daysync import' first.", err=True)
        sys.exit(1)

    with Database(db_path) as db:
        setup = CatalogStore(db).get_setup(key)

    if setup is None:
        click.echo(f"Error: No setup named {key!r} in the catalog.", err=True)
        sys.exit(1)

    try:
        path = WriteCapability.acquire(root, config.scanner).write_setup(setup)
    except (WriteAccessError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Exported setup to: {path}")


def _build_pipeline(config: Config, root: Path, db: Database) -> ImportPipeline:
    return ImportPipeline(
        LocalFileSource(root, config.scanner.max_path_length),
        CatalogStore(db),
        Scanner(config.scanner),
        source_label=str(root),
    )


def _fail_unreadable(error: EnumerationError) -> NoReturn:
    click.echo(f"Error: Could not read the selected location. {error}", err=True)
    sys.exit(1)


def _echo_batch(batch: ImportBatch) -> None:
    click.echo(
        f"Found {len(batch.test_days)} test day folders "
        f"with {batch.telemetry_file_count} XRK files"
    )
    for day in batch.test_days:
        marker = "" if day.telemetry_files else " (no telemetry yet)"
        click.echo(f"  {day.name}: {len(day.telemetry_files)} runs{marker}")
    if batch.setups:
        click.echo(f"Found {len(batch.setups)} setups")
        for setup in batch.setups:
            click.echo(f"  {setup.key}: {setup.name}")


def _echo_diagnostics(batch: ImportBatch) -> None:
    if not batch.diagnostics:
        return
    click.echo(f"{len(batch.diagnostics)} files were skipped due to invalid content:", err=True)
    for diagnostic in batch.diagnostics:
        click.echo(f"  {diagnostic.path}: {diagnostic.reason}", err=True)


def _echo_import_result(result: ImportResult) -> None:
    summary = result.summary
    if not result.batch.test_days and not result.batch.setups:
        click.echo("No test-day folders found.")
    click.echo("Import complete:")
    click.echo(f"  Files scanned: {result.files_seen:,}")
    click.echo(f"  New test days: {summary.test_days_added:,}")
    click.echo(f"  New runs: {summary.runs_added:,}")
    click.echo(f"  New setups: {summary.setups_added:,}")
    _echo_diagnostics(result.batch)


def _format_relative_time(unix_timestamp: int | None) -> str:
    if not unix_timestamp:
        return "unknown"

    now = datetime.now()
    then = datetime.fromtimestamp(unix_timestamp)
    delta = now - then

    if delta.days > 1:
        return f"{delta.days} days ago"
    if delta.days == 1:
        return "yesterday"
    if delta.seconds > 3600:
        hours = delta.seconds // 3600
        return f"{hours}h ago"
    if delta.seconds > 60:
        minutes = delta.seconds // 60
        return f"{minutes}m ago"
    return "just now"


def _truncate(text: str, max_len: int) -> str:
    if len(text) <= max_len:
        return text
    return "..." + text[-(max_len - 3) :]


def main() -> None:
    """Entry point for the CLI."""
    cli(standalone_mode=True)  # pylint: disable=no-value-for-parameter


if __name__ == "__main__":
    main()
