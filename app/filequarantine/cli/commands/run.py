"""Run command implementation.

Executes one maintenance pass: optional log truncation, quarantine of
aged files and expiry of old quarantine.
"""

import json
import signal
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated, Any

import typer

from filequarantine.cli.display import print_report
from filequarantine.core.config import load_config
from filequarantine.core.sizes import format_size, parse_size
from filequarantine.errors import ConfigurationError, InvalidSizeFormatError
from filequarantine.notify.mailer import EmailNotifier
from filequarantine.quarantine.orchestrator import RunOrchestrator
from filequarantine.quarantine.report import RunReport
from filequarantine.utils.formatting import print_error, print_info, print_warning

app = typer.Typer(
    help="Run one quarantine maintenance pass.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def run_maintenance(
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would happen without modifying files."),
    ] = False,
    truncate_logs: Annotated[
        bool,
        typer.Option("--truncate-logs", help="Truncate oversized .log files first."),
    ] = False,
    truncate_size: Annotated[
        str | None,
        typer.Option(
            "--truncate-size",
            "-s",
            help="Truncation threshold, e.g. 5MB, 500KB, 1GB.",
        ),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to the config file.",
        ),
    ] = None,
    workers: Annotated[
        int,
        typer.Option(
            "--workers",
            "-w",
            min=1,
            help="Worker threads per sweep.",
        ),
    ] = 1,
    export_path: Annotated[
        Path | None,
        typer.Option(
            "--export",
            "-e",
            help="Export the run report to a JSON file.",
        ),
    ] = None,
    no_email: Annotated[
        bool,
        typer.Option("--no-email", help="Do not send the e-mail report."),
    ] = False,
) -> None:
    """Quarantine aged files and expire old quarantine.

    Exits with code 1 when the configuration is missing or invalid.
    Per-file failures are reported but do not change the exit code.
    """
    try:
        app_config = load_config(config_path)
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    overrides: dict[str, Any] = {"dry_run": dry_run}
    if truncate_logs:
        overrides["truncate_logs"] = True
    if truncate_size is not None:
        try:
            overrides["truncate_size"] = parse_size(truncate_size)
        except InvalidSizeFormatError as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e

    config = app_config.quarantine.model_copy(update=overrides)

    notifier = None
    if app_config.email.enabled and not no_email:
        notifier = EmailNotifier(app_config.email)

    if config.dry_run:
        print_info("DRY-RUN MODE: no files will be modified.")
    if config.truncate_logs:
        print_info(f"Log truncation enabled (limit {format_size(config.truncate_size)})")

    cancel_event = threading.Event()
    orchestrator = RunOrchestrator(
        config,
        notifier=notifier,
        cancel_event=cancel_event,
        max_workers=workers,
    )

    try:
        with _cancel_on_interrupt(cancel_event):
            report = orchestrator.run()
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_report(report)

    if export_path is not None:
        _export_report(report, export_path)


# === Private helper functions ===


@contextmanager
def _cancel_on_interrupt(cancel_event: threading.Event) -> Iterator[None]:
    """Turn SIGINT into a cancellation request for the duration of a run."""

    def _handler(signum: int, frame: object) -> None:
        if cancel_event.is_set():
            raise KeyboardInterrupt
        print_warning(
            "Interrupt received, finishing the current file. Press Ctrl+C again to abort."
        )
        cancel_event.set()

    try:
        previous = signal.signal(signal.SIGINT, _handler)
    except ValueError:
        # Not on the main thread
        yield
        return

    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


def _export_report(report: RunReport, export_path: Path) -> None:
    """Write the run report to a JSON file."""
    export_path = export_path.resolve()
    if export_path.is_dir():
        print_error(f"Export path is a directory: {export_path}")
        raise typer.Exit(code=1)

    try:
        export_path.parent.mkdir(parents=True, exist_ok=True)
        export_path.write_text(json.dumps(report.to_dict(), indent=2))
        print_info(f"Report exported to {export_path}")
    except OSError as e:
        print_error(f"Failed to export: {e}")
        raise typer.Exit(code=1) from e
