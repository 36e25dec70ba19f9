"""Rich renderables for campaign outcomes."""

from __future__ import annotations

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from fuzztriage.models.outcome import FuzzOutcome, FuzzStatus

_STATUS_LABELS: dict[FuzzStatus, str] = {
    FuzzStatus.CLEAN: "[bold green]CLEAN[/bold green]",
    FuzzStatus.NO_ACTIONABLE_CORPUS: "[bold yellow]FAILED (no new corpus)[/bold yellow]",
    FuzzStatus.PUBLISHED: "[bold red]FAILED[/bold red] [green](published)[/green]",
    FuzzStatus.PUBLISH_FAILED: "[bold red]FAILED[/bold red] [red](publish failed)[/red]",
}

_BORDER_STYLES: dict[FuzzStatus, str] = {
    FuzzStatus.CLEAN: "green",
    FuzzStatus.NO_ACTIONABLE_CORPUS: "yellow",
    FuzzStatus.PUBLISHED: "red",
    FuzzStatus.PUBLISH_FAILED: "red",
}


def render_outcome(outcome: FuzzOutcome) -> Panel:
    """Summarize *outcome* as a Rich Panel."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("Status", _STATUS_LABELS[outcome.status])
    table.add_row("Exit code", str(outcome.exit_code))

    report = outcome.report
    if report is not None:
        table.add_row("Package", escape(report.artifact.package))
        table.add_row("Test", escape(report.artifact.test_func))
        table.add_row("Corpus", escape(report.artifact.corpus_id))
        table.add_row("Branch", escape(report.branch_name))
        if report.publish_result.errors:
            table.add_row("Errors", escape("\n".join(report.publish_result.errors)))
        table.add_row(
            "Reproduce",
            escape(f"go test -run={report.artifact.run_selector} {report.artifact.package_selector}"),
        )

    return Panel(
        table,
        title="[bold]Fuzz Campaign[/bold]",
        border_style=_BORDER_STYLES[outcome.status],
        padding=(1, 2),
    )
