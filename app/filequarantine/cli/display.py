"""Rich display functions for run reports."""

from rich.table import Table

from filequarantine.core.sizes import format_size
from filequarantine.quarantine.models import ActionOutcome
from filequarantine.quarantine.report import RunReport
from filequarantine.utils.formatting import console, print_info, print_success, print_warning


def create_outcomes_table(title: str, outcomes: list[ActionOutcome], style: str) -> Table:
    """Create a Rich table listing the files one action touched.

    Args:
        title: Table title.
        outcomes: Successful outcomes of a single action type.
        style: Theme style for the path column.

    Returns:
        Rich Table with Path, Size and Detail columns.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Path", style=style, no_wrap=True)
    table.add_column("Size", justify="right", width=10)
    table.add_column("Detail")

    for outcome in outcomes:
        if outcome.destination:
            detail = f"-> {outcome.destination}"
        elif outcome.size_after is not None:
            detail = f"now {format_size(outcome.size_after)}"
        else:
            detail = ""
        table.add_row(outcome.path, format_size(outcome.size_before), f"[muted]{detail}[/muted]")

    return table


def create_failures_table(failures: list[ActionOutcome]) -> Table:
    """Create a Rich table listing failed actions.

    Args:
        failures: Failed outcomes in the order they happened.

    Returns:
        Rich Table with Action, Path and Error columns.
    """
    table = Table(
        title="Failed Actions",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Action", width=10)
    table.add_column("Path", no_wrap=True)
    table.add_column("Error")

    for outcome in failures:
        table.add_row(
            f"[error]{outcome.action.value}[/error]",
            outcome.path,
            f"[muted]{outcome.error or 'Unknown error'}[/muted]",
        )

    return table


def print_report(report: RunReport) -> None:
    """Print the per-file tables and the closing summary of a run.

    Args:
        report: The finished run report.
    """
    suffix = " (Dry Run)" if report.dry_run else ""

    if report.truncated:
        console.print(
            create_outcomes_table(f"Truncated Logs{suffix}", report.truncated, "truncated")
        )
    if report.quarantined:
        console.print(
            create_outcomes_table(f"Quarantined Files{suffix}", report.quarantined, "quarantined")
        )
    if report.deleted:
        console.print(create_outcomes_table(f"Deleted Files{suffix}", report.deleted, "deleted"))
    if report.failures:
        console.print(create_failures_table(report.failures))

    print_run_summary(report)


def print_run_summary(report: RunReport) -> None:
    """Print run totals.

    Args:
        report: The finished run report.
    """
    console.print("\n[header]Summary[/header]")
    console.print(f"  Files scanned:     {report.files_scanned}")
    console.print(
        f"  Files quarantined: [quarantined]{report.count_quarantined}[/quarantined] "
        f"({format_size(report.total_size_quarantined)})"
    )
    console.print(
        f"  Files deleted:     [deleted]{report.count_deleted}[/deleted] "
        f"({format_size(report.total_size_deleted)})"
    )
    if report.context.truncate_logs:
        console.print(
            f"  Files truncated:   [truncated]{report.count_truncated}[/truncated] "
            f"(freed {format_size(report.total_size_freed)})"
        )

    if report.cancelled:
        print_warning("Run was cancelled; actions already applied were kept.")
    if report.dry_run:
        print_info("DRY-RUN MODE: no files were modified.")
    elif report.count_failed:
        print_warning(f"{report.count_failed} action(s) failed.")
    else:
        print_success("Run completed successfully.")
