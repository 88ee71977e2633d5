"""Rich terminal reporter — selection summary and batch table."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.table import Table

from diffsieve.selection.models import BatchResult, ProcessResult


def _changes(insertions: int, deletions: int) -> str:
    return f"[green]+{insertions}[/green] [red]-{deletions}[/red]"


def render_split(result: ProcessResult, console: Optional[Console] = None) -> None:
    """Print a cap-and-trim summary to stderr."""
    console = console or Console(stderr=True)
    console.print(
        f"[bold green]✓[/bold green] {result.file_count} file(s) ready for review "
        f"({_changes(result.insertions, result.deletions)})"
    )
    if result.ignored_file_count:
        console.print(f"[dim]  - ignored by ignore_patterns:[/dim] {result.ignored_file_count}")
    if result.trimmed_file_count:
        console.print(f"[dim]  - trimmed over max_files:[/dim]    {result.trimmed_file_count}")


def render_batches(result: BatchResult, console: Optional[Console] = None) -> None:
    """Print a batching summary and per-batch table to stderr."""
    console = console or Console(stderr=True)
    console.print(
        f"[bold green]✓[/bold green] {result.total_file_count} file(s) in "
        f"{result.batch_count} batch(es) ({_changes(result.insertions, result.deletions)})"
    )
    if result.ignored_file_count:
        console.print(f"[dim]  - ignored by ignore_patterns:[/dim] {result.ignored_file_count}")

    if result.batch_count > 1:
        table = Table(title="Batches", title_style="bold", border_style="dim")
        table.add_column("#", justify="right", style="cyan")
        table.add_column("Files", justify="right")
        table.add_column("Changes")
        for idx, batch in enumerate(result.batches, 1):
            table.add_row(str(idx), str(batch.file_count), _changes(batch.insertions, batch.deletions))
        console.print(table)
