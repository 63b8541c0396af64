"""linesplit CLI — Typer application with split, verify, summarize, and init commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from linesplit import __version__

app = typer.Typer(
    name="linesplit",
    help="Split text files into smaller files by line count, then audit the split.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_config(config: Optional[str]):
    from linesplit.config.loader import ConfigError, load_config

    try:
        return load_config(Path.cwd(), config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


# ── split ─────────────────────────────────────────────────────────────────────


@app.command()
def split(
    src: Optional[List[str]] = typer.Argument(None, help="Files, directories, or glob patterns to split"),
    lines: Optional[int] = typer.Option(None, "--lines", "-l", help="Maximum lines per output file (default 6000)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Echo every audit event"),
    debug: bool = typer.Option(False, "--debug", help="Debug logging"),
    strict: bool = typer.Option(False, "--strict", help="Exit 1 when any audit reports errors"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Files processed concurrently"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .linesplit.toml"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write JSON report to file"),
) -> None:
    """Split each input file, reassemble the pieces, and audit the result."""
    from linesplit.output import json_report, terminal
    from linesplit.pipeline.orchestrator import run_batch
    from linesplit.pipeline.summary import exit_code, summarize
    from linesplit.workspace.discovery import resolve_inputs

    _configure_logging(debug)
    cfg = _load_config(config)

    # --- CLI overrides ---
    if lines is not None:
        if lines < 1:
            console.print(f"[bold red]Invalid --lines:[/bold red] {lines}")
            raise typer.Exit(code=2)
        cfg.split.max_lines = lines
    if workers is not None:
        if workers < 1:
            console.print(f"[bold red]Invalid --workers:[/bold red] {workers}")
            raise typer.Exit(code=2)
        cfg.batch.max_workers = workers
    if format:
        if format not in ("terminal", "json"):
            console.print(f"[bold red]Invalid format:[/bold red] {format}")
            raise typer.Exit(code=2)
        cfg.output.format = format  # type: ignore[assignment]
    if verbose:
        cfg.output.verbose = True
    if strict:
        cfg.batch.fail_on_mismatch = True

    # --- Resolve inputs ---
    files = resolve_inputs(src or [], marker=cfg.split.dir_marker)
    if not files:
        console.print("[bold red]Error:[/bold red] source file(s) not specified or invalid.")
        raise typer.Exit(code=2)

    console.print(f"Splitting the following files: {', '.join(str(f) for f in files)}", markup=False)
    if debug:
        console.print(f"[dim]Max lines: {cfg.split.max_lines}, workers: {cfg.batch.max_workers}[/dim]")

    on_event = None
    if cfg.output.verbose:
        def on_event(result, event, entry):
            console.print(terminal.event_line(entry, prefix=result.source.name))

    results = run_batch(
        files,
        cfg,
        on_progress=lambda result, message: console.print(terminal.progress_line(result, message)),
        on_report=lambda result: console.print(terminal.file_report(result)),
        on_event=on_event,
    )
    summary = summarize(results)

    # --- Output ---
    report_text: Optional[str] = None
    if cfg.output.format == "terminal":
        terminal.render(console, results, summary, show_summary=cfg.output.show_summary)
    else:
        report_text = json_report.render(results, summary)
        print(report_text)

    if output:
        report_text = report_text or json_report.render(results, summary)
        Path(output).write_text(report_text, encoding="utf-8")
        if verbose or debug:
            console.print(f"[dim]Report written to {output}[/dim]")

    raise typer.Exit(code=exit_code(summary, fail_on_mismatch=cfg.batch.fail_on_mismatch))


# ── verify ────────────────────────────────────────────────────────────────────


@app.command()
def verify(
    working_set: Path = typer.Argument(..., help="Working set directory from an earlier split"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Echo every audit event"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .linesplit.toml"),
) -> None:
    """Rebuild the verification file from the manifest and audit it again."""
    from linesplit.output import terminal
    from linesplit.pipeline.orchestrator import Pipeline

    _configure_logging(False)
    cfg = _load_config(config)

    if not working_set.is_dir():
        console.print(f"[bold red]Error:[/bold red] not a directory: {working_set}")
        raise typer.Exit(code=2)

    on_event = None
    if verbose:
        def on_event(result, event, entry):
            console.print(terminal.event_line(entry))

    pipeline = Pipeline(
        cfg,
        on_progress=lambda result, message: console.print(terminal.progress_line(result, message)),
        on_report=lambda result: console.print(terminal.file_report(result)),
        on_event=on_event,
    )
    result = pipeline.verify(working_set)
    if result.failed:
        raise typer.Exit(code=1)
    if result.error_count and cfg.batch.fail_on_mismatch:
        raise typer.Exit(code=1)


# ── summarize ─────────────────────────────────────────────────────────────────


@app.command()
def summarize(
    log: Path = typer.Argument(..., help="Audit log to read"),
) -> None:
    """Count the outcomes in an audit log and report damaged lines."""
    from linesplit.audit.log_parser import summarize_log

    try:
        summary = summarize_log(log)
    except OSError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    console.print(str(log), style="bold", markup=False)
    for outcome, count in summary.counts.items():
        console.print(f"  {outcome.value:<26} {count}")
    console.print(f"  [dim]errors:[/dim] {summary.error_count}")

    if summary.is_corrupt:
        console.print(f"[bold yellow]⚠  {len(summary.problems)} problem(s) in log:[/bold yellow]")
        for problem in summary.problems[:20]:
            console.print(f"  line {problem.line_no}: {problem.reason}")
        raise typer.Exit(code=1)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter .linesplit.toml in the current directory."""
    from linesplit.config.defaults import CONFIG_FILENAME, DEFAULT_TOML

    config_path = Path.cwd() / CONFIG_FILENAME
    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"linesplit {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """linesplit — split text files by line count and verify the pieces."""
