"""HTML rendering of a run report for e-mail delivery."""

from html import escape

from filequarantine.core.sizes import format_size
from filequarantine.quarantine.models import ActionOutcome
from filequarantine.quarantine.report import RunReport

_STYLE = """
body { font-family: Arial, sans-serif; margin: 20px; background-color: #f5f5f5; }
.container { max-width: 1000px; margin: 0 auto; background-color: white; padding: 20px;
  border-radius: 5px; box-shadow: 0 2px 5px rgba(0,0,0,0.1); }
h1 { color: #333; border-bottom: 3px solid #4CAF50; padding-bottom: 10px; }
h2 { color: #555; margin-top: 30px; border-bottom: 2px solid #ddd; padding-bottom: 5px; }
.summary { background-color: #e8f5e9; padding: 15px; border-radius: 5px; margin: 20px 0;
  border-left: 4px solid #4CAF50; }
.summary-item { margin: 8px 0; font-size: 16px; }
.summary-label { font-weight: bold; color: #2e7d32; }
table { width: 100%; border-collapse: collapse; margin: 20px 0; }
th { background-color: #4CAF50; color: white; padding: 12px; text-align: left; }
td { padding: 10px; border-bottom: 1px solid #ddd; }
.no-files { color: #777; font-style: italic; padding: 20px; text-align: center; }
.footer { margin-top: 30px; padding-top: 20px; border-top: 2px solid #ddd; color: #777;
  font-size: 12px; text-align: center; }
.dry-run { background-color: #fff3cd; border-left: 4px solid #ffc107; padding: 15px;
  margin: 20px 0; border-radius: 5px; }
.dry-run-badge { color: #856404; font-weight: bold; font-size: 18px; }
"""

_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def _summary_item(label: str, value: str) -> str:
    return (
        f'<div class="summary-item"><span class="summary-label">{escape(label)}:</span> '
        f"{escape(value)}</div>"
    )


def _files_table(outcomes: list[ActionOutcome], empty_message: str) -> str:
    if not outcomes:
        return f'<div class="no-files">{escape(empty_message)}</div>'

    rows = []
    for outcome in outcomes:
        timestamp = "DRY-RUN" if outcome.dry_run else outcome.timestamp.strftime(_TIME_FORMAT)
        rows.append(
            f"<tr><td>{escape(outcome.path)}</td>"
            f"<td>{format_size(outcome.size_before)}</td>"
            f"<td>{escape(timestamp)}</td></tr>"
        )
    return (
        "<table><thead><tr><th>File Path</th><th>Size</th><th>Timestamp</th></tr></thead>"
        f"<tbody>{''.join(rows)}</tbody></table>"
    )


def render_report_html(report: RunReport) -> str:
    """Render a run report as a standalone HTML document.

    The layout lists the run context, a dry-run banner when applicable,
    the totals, and one table each for quarantined and deleted files.
    All paths are HTML-escaped.

    Args:
        report: The finished run report.

    Returns:
        Complete HTML document.
    """
    ctx = report.context
    generated = report.generated_at or report.started_at
    generated_str = generated.strftime(_TIME_FORMAT)

    parts: list[str] = [
        "<!DOCTYPE html>",
        '<html><head><meta charset="UTF-8">',
        f"<style>{_STYLE}</style></head>",
        '<body><div class="container">',
        "<h1>File Quarantine Report</h1>",
        '<div class="summary">',
        _summary_item("Date", generated_str),
        _summary_item("Hostname", ctx.hostname),
        _summary_item("Scan Directories", " ".join(ctx.scan_roots)),
        _summary_item("Quarantine Root", ctx.quarantine_root),
        _summary_item("Monitored Extensions", " ".join(ctx.extensions)),
        _summary_item("Retention Period", f"{ctx.retention_days} days"),
        "</div>",
    ]

    if report.dry_run:
        parts.append(
            '<div class="dry-run"><span class="dry-run-badge">&#9888; DRY-RUN MODE</span>'
            "<p>This was a simulation. No files were actually moved or deleted.</p></div>"
        )

    if report.cancelled:
        parts.append(
            '<div class="dry-run"><span class="dry-run-badge">RUN CANCELLED</span>'
            "<p>The run stopped early. Actions listed below were applied.</p></div>"
        )

    parts.extend(
        [
            "<h2>Summary</h2>",
            '<div class="summary">',
            _summary_item(
                "Files Quarantined",
                f"{report.count_quarantined} ({format_size(report.total_size_quarantined)})",
            ),
            _summary_item(
                "Files Deleted",
                f"{report.count_deleted} ({format_size(report.total_size_deleted)})",
            ),
        ]
    )
    if ctx.truncate_logs:
        parts.append(
            _summary_item(
                "Files Truncated",
                f"{report.count_truncated} (Space freed: {format_size(report.total_size_freed)})",
            )
        )
    if report.count_failed:
        parts.append(_summary_item("Failed Actions", str(report.count_failed)))
    parts.append("</div>")

    parts.append(f"<h2>Quarantined Files ({report.count_quarantined})</h2>")
    parts.append(_files_table(report.quarantined, "No files were quarantined."))
    parts.append(f"<h2>Deleted Files ({report.count_deleted})</h2>")
    parts.append(_files_table(report.deleted, "No files were deleted."))

    parts.append(
        f'<div class="footer">Generated by file-quarantine on {escape(ctx.hostname)} '
        f"at {generated_str}</div>"
    )
    parts.append("</div></body></html>")

    return "\n".join(parts)
