"""
Rendering functions for librespot-setup output.

Core functions return data, this module makes it human-readable.
Everything is printed to stderr so stdout stays free for scripting.
"""

from rich.table import Table
from rich.console import Console
from rich import box

from .domain.step import RunSummary, StepStatus

console = Console(stderr=True)

STATUS_STYLES = {
    StepStatus.SUCCESS: "green",
    StepStatus.SKIPPED: "yellow",
    StepStatus.FAILED: "bold red",
}


def render_summary_table(summary: RunSummary, console: Console = console) -> None:
    """
    Render the steps of a run as a pretty table.

    Args:
        summary: Result of Installer.run()
        console: Console to print to
    """
    if not summary.results:
        console.print("[yellow]No steps were run.[/yellow]")
        return

    table = Table(
        title="librespot installation",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )

    table.add_column("Step", style="cyan")
    table.add_column("Status")
    table.add_column("Details", style="dim")

    for result in summary.results:
        style = STATUS_STYLES.get(result.status, "white")
        table.add_row(
            result.step.value,
            f"[{style}]{result.status.value}[/{style}]",
            result.message or "",
        )

    console.print(table)
