"""diffsieve CLI — Typer application with split, batch, and init commands."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from diffsieve import __version__

app = typer.Typer(
    name="diffsieve",
    help="Split, filter, and batch git diffs for AI code review.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _configure_logging(debug: bool) -> None:
    if not debug:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _resolve_repo_root(required: bool = True) -> Path:
    """Find the git repo root, exit 2 on failure unless *required* is False."""
    from diffsieve.git.adapter import GitError, get_repo_root

    try:
        return get_repo_root()
    except GitError as exc:
        if not required:
            return Path.cwd()
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _load(repo_root: Path, config: Optional[str], format: Optional[str]):
    from diffsieve.config.loader import ConfigError, load_config
    from diffsieve.config.schema import OUTPUT_FORMATS

    try:
        cfg = load_config(repo_root, config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if format:
        if format not in OUTPUT_FORMATS:
            console.print(f"[bold red]Invalid format:[/bold red] {format}")
            raise typer.Exit(code=2)
        cfg.output.format = format  # type: ignore[assignment]
    return cfg


def _read_diff(
    repo_root: Path,
    input: Optional[str],
    commits: Optional[List[str]],
    rev_range: Optional[str],
) -> str:
    """Return raw diff text from a file, stdin, commits, a range, or the index."""
    from diffsieve.git.adapter import GitError, get_commits_diff, get_range_diff, get_staged_diff

    if input == "-":
        return sys.stdin.read()
    if input:
        try:
            return Path(input).read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            console.print(f"[bold red]Error:[/bold red] cannot read {input}: {exc}")
            raise typer.Exit(code=2) from exc

    try:
        if commits:
            return get_commits_diff(repo_root, commits)
        if rev_range:
            return get_range_diff(repo_root, rev_range)
        return get_staged_diff(repo_root)
    except GitError as exc:
        console.print(f"[bold red]Git error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _emit(text: str, output: Optional[str]) -> None:
    if output:
        Path(output).write_text(text + "\n", encoding="utf-8")
        console.print(f"[dim]Written to {output}[/dim]")
    else:
        print(text)


def _nothing_left(ignored: int) -> None:
    console.print(
        f"[bold red]No files left to review[/bold red] "
        f"({ignored} ignored). Adjust ignore_patterns in .diffsieve.toml."
    )
    raise typer.Exit(code=1)


# ── split ─────────────────────────────────────────────────────────────────────


@app.command()
def split(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .diffsieve.toml"),
    input: Optional[str] = typer.Option(None, "--input", "-i", help="Read the diff from a file ('-' for stdin)"),
    commit: Optional[List[str]] = typer.Option(None, "--commit", "-C", help="Commit to review (repeatable)"),
    rev_range: Optional[str] = typer.Option(None, "--range", "-r", help="Revision range, e.g. main..HEAD"),
    max_files: Optional[int] = typer.Option(None, "--max-files", "-n", help="Keep the N most-changed files"),
    ignore: Optional[List[str]] = typer.Option(None, "--ignore", help="Extra ignore glob (repeatable)"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json | diff"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write the result to a file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug logging"),
    dry_run: bool = typer.Option(False, "--dry-run", help="List the files that would be kept"),
) -> None:
    """Build one review diff, trimming to the most-changed files."""
    from diffsieve.git.diff_parser import DiffParser
    from diffsieve.output import json_report, terminal
    from diffsieve.selection.models import DiffOptions
    from diffsieve.selection.selector import (
        filter_segments,
        normalize_bound,
        process_diff_for_review,
        select_top_changes,
    )

    _configure_logging(debug)
    repo_root = _resolve_repo_root(required=input is None)
    cfg = _load(repo_root, config, format)

    if max_files is not None:
        cfg.review.max_files = max_files
    if ignore:
        cfg.review.ignore_patterns.extend(ignore)

    if verbose or debug:
        console.print(f"[dim]Repo root: {repo_root}[/dim]")
        console.print(f"[dim]Ignore patterns: {', '.join(cfg.review.ignore_patterns) or '-'}[/dim]")
        console.print(f"[dim]max_files: {cfg.review.max_files}[/dim]")

    diff_text = _read_diff(repo_root, input, commit, rev_range)
    if not diff_text or not diff_text.strip():
        console.print("[dim]No changes to prepare.[/dim]")
        raise typer.Exit(code=0)

    if dry_run:
        kept, ignored = filter_segments(DiffParser(diff_text).parse(), cfg.review.ignore_patterns)
        limit = normalize_bound(cfg.review.max_files)
        selected = kept if limit is None else select_top_changes(kept, limit)
        console.print(f"[bold]Dry run — {len(selected)} file(s) would be reviewed:[/bold]")
        for seg in selected:
            console.print(f"  {seg.file_path}  [green]+{seg.insertions}[/green] [red]-{seg.deletions}[/red]")
        if ignored:
            console.print(f"[dim]{ignored} file(s) ignored[/dim]")
        raise typer.Exit(code=0)

    options = DiffOptions(
        ignore_patterns=cfg.review.ignore_patterns,
        max_files=cfg.review.max_files,
    )
    result = process_diff_for_review(diff_text, options)

    if result.file_count == 0:
        _nothing_left(result.ignored_file_count)

    if cfg.output.format == "json":
        _emit(json_report.render(result), output)
        return

    if cfg.output.format == "terminal" and cfg.output.show_summary:
        terminal.render_split(result, console)
    _emit(result.diff, output)


# ── batch ─────────────────────────────────────────────────────────────────────


@app.command()
def batch(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .diffsieve.toml"),
    input: Optional[str] = typer.Option(None, "--input", "-i", help="Read the diff from a file ('-' for stdin)"),
    commit: Optional[List[str]] = typer.Option(None, "--commit", "-C", help="Commit to review (repeatable)"),
    rev_range: Optional[str] = typer.Option(None, "--range", "-r", help="Revision range, e.g. main..HEAD"),
    batch_size: Optional[int] = typer.Option(None, "--batch-size", "-b", help="Files per batch"),
    ignore: Optional[List[str]] = typer.Option(None, "--ignore", help="Extra ignore glob (repeatable)"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json | diff"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write the result to a file"),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-d", help="Write one .diff file per batch"),
    debug: bool = typer.Option(False, "--debug", help="Debug logging"),
) -> None:
    """Split every non-ignored file into ordered review batches."""
    from diffsieve.output import json_report, terminal
    from diffsieve.selection.models import DiffOptions
    from diffsieve.selection.selector import create_diff_batches_for_review

    _configure_logging(debug)
    repo_root = _resolve_repo_root(required=input is None)
    cfg = _load(repo_root, config, format)

    if batch_size is not None:
        cfg.review.batch_size = batch_size
    if ignore:
        cfg.review.ignore_patterns.extend(ignore)

    diff_text = _read_diff(repo_root, input, commit, rev_range)
    if not diff_text or not diff_text.strip():
        console.print("[dim]No changes to prepare.[/dim]")
        raise typer.Exit(code=0)

    options = DiffOptions(
        ignore_patterns=cfg.review.ignore_patterns,
        max_files=cfg.review.effective_batch_size,
    )
    result = create_diff_batches_for_review(diff_text, options)

    if result.total_file_count == 0:
        _nothing_left(result.ignored_file_count)

    if output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)
        for idx, b in enumerate(result.batches, 1):
            (output_dir / f"batch-{idx:03d}.diff").write_text(b.diff + "\n", encoding="utf-8")
        console.print(f"[dim]Wrote {result.batch_count} batch file(s) to {output_dir}[/dim]")

    if cfg.output.format == "json":
        _emit(json_report.render(result), output)
        return

    if cfg.output.format == "terminal" and cfg.output.show_summary:
        terminal.render_batches(result, console)
    if output_dir is None:
        _emit("\n\n".join(b.diff for b in result.batches), output)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter .diffsieve.toml in the repo root."""
    from diffsieve.config.defaults import DEFAULT_TOML
    from diffsieve.config.loader import CONFIG_FILENAME

    repo_root = _resolve_repo_root()
    config_path = repo_root / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"diffsieve {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """diffsieve — prepare git diffs for AI code review."""
