"""Command line interface for checking and running model syncs.

Usage:
    nlusync sync [--config PATH] [--production] [--dry-run] [--verbose]
    nlusync status [--config PATH]
"""

from __future__ import annotations

import signal
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from nlusync.errors import NLUSyncError
from nlusync.sync.engine import SyncEngine
from nlusync.sync.results import SyncReport
from nlusync.sync.training import CancellationToken, PollScheduler
from nlusync.utils.config import Config, load_config
from nlusync.utils.logging_setup import setup_logging

app = typer.Typer(help="Sync a local intent corpus to a hosted LUIS model.")

console = Console(color_system=None, force_terminal=False, width=120)

DEFAULT_CONFIG = Path("config/config.yaml")


def _load(config_path: Path) -> Config:
    try:
        return load_config(config_path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"Failed to load configuration: {e}")
        raise typer.Exit(code=1) from e


def _install_signal_handlers(token: CancellationToken) -> None:
    def _cancel(signum, _frame) -> None:
        logger.warning(f"Received signal {signum}, cancelling sync")
        token.cancel()

    signal.signal(signal.SIGINT, _cancel)
    signal.signal(signal.SIGTERM, _cancel)


def _render_report(report: SyncReport) -> None:
    table = Table(title="Sync")
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("State", report.state.value)
    table.add_row("Needs sync", "yes" if report.needs_sync else "no")
    table.add_row("Content hash", report.content_hash[:12])
    table.add_row("Remote timestamp", report.remote_timestamp_after or report.remote_timestamp_before or "-")
    table.add_row("Intents", str(report.intent_count))
    if report.degraded:
        table.add_row("Degraded", "; ".join(report.degraded))
    if report.error:
        table.add_row("Error", report.error)
    console.print(table)


@app.command()
def sync(
    config_path: Path = typer.Option(DEFAULT_CONFIG, "--config", "-c", help="Path to config YAML"),
    production: bool = typer.Option(False, "--production", help="Publish to the production slot"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Only report whether a sync is needed"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Sync the remote model if the corpus or remote version changed."""
    config = _load(config_path)
    setup_logging(config.logging, verbose=verbose)
    if production:
        config.sync.is_production = True

    token = CancellationToken()
    _install_signal_handlers(token)
    engine = SyncEngine.from_config(config, scheduler=PollScheduler(token))

    try:
        report = engine.check() if dry_run else engine.sync()
    except NLUSyncError as e:
        logger.error(f"Sync aborted: {e}")
        raise typer.Exit(code=1) from e

    logger.info(report.summary())
    _render_report(report)
    raise typer.Exit(code=0 if dry_run or report.succeeded else 1)


@app.command()
def status(
    config_path: Path = typer.Option(DEFAULT_CONFIG, "--config", "-c", help="Path to config YAML"),
) -> None:
    """Show the stored fingerprint next to the local hash and remote version."""
    config = _load(config_path)
    setup_logging(config.logging)
    engine = SyncEngine.from_config(config)

    try:
        report = engine.check()
    except NLUSyncError as e:
        logger.error(f"Status check failed: {e}")
        raise typer.Exit(code=1) from e
    stored = engine.fingerprints.get(config.sync.fingerprint_key)

    table = Table(title="Sync status")
    table.add_column("Field")
    table.add_column("Local")
    table.add_column("Stored")
    table.add_row("Content hash", report.content_hash[:12], stored.content_hash[:12] if stored else "-")
    table.add_row(
        "Remote timestamp",
        report.remote_timestamp_before or "-",
        (stored.remote_timestamp or "-") if stored else "-",
    )
    console.print(table)
    console.print("Up to date" if not report.needs_sync else "Sync needed")


if __name__ == "__main__":
    app()
