"""Rich rendering of the end-of-run summary.

Only the CLI calls into this module; the pipeline itself reports through
``logging``.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from grade_report.pipeline.report_generator.runner import RunSummary


def build_summary_table(summary: RunSummary) -> Table:
    """Return a two-column table with the counts of every phase."""
    table = Table(title="Grade report run")
    table.add_column("Step", style="cyan")
    table.add_column("Count", justify="right")
    table.add_row("Grade rows read", str(summary.grade_rows_read))
    table.add_row("Grade rows dropped", str(summary.grade_rows_dropped))
    table.add_row("Teacher rows read", str(summary.teacher_rows_read))
    table.add_row("Report groups", str(summary.report_groups))
    table.add_row("Unmatched rows", str(summary.unmatched_rows))
    table.add_row("Report files written", str(summary.reports_written))
    if summary.report_write_failures:
        table.add_row(
            "Report write failures", f"[red]{summary.report_write_failures}[/red]"
        )
    if summary.mail_enabled:
        table.add_row("Mails sent", str(summary.mails_sent))
        table.add_row("Mails failed", str(summary.mails_failed))
    return table


def render_run_summary(summary: RunSummary, console: Console | None = None) -> None:
    """Print the summary table, followed by the unmatched export location."""
    console = console or Console()
    console.print(build_summary_table(summary))
    if summary.unmatched_export is not None:
        console.print(
            f"[yellow]Rows without a teacher written to {escape(str(summary.unmatched_export))}[/yellow]"
        )
