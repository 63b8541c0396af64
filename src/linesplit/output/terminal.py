"""Rich terminal reporter — per-stage progress, per-file blocks, batch table."""

from __future__ import annotations

from rich.console import Console, Group
from rich.table import Table
from rich.text import Text

from linesplit.audit.auditor import format_event
from linesplit.pipeline.models import BatchSummary, FileResult, Stage

_STAGE_STYLE = {
    Stage.STAGING: "cyan",
    Stage.SPLITTING: "blue",
    Stage.REASSEMBLING: "magenta",
    Stage.AUDITING: "yellow",
    Stage.REPORTED: "green",
    Stage.FAILED: "bold red",
}

_OUTCOME_STYLE = {
    "MATCH": "dim",
    "MISMATCH": "bold red",
    "MISSING_IN_ORIGINAL": "yellow",
    "MISSING_IN_RECONSTRUCTED": "yellow",
}

_MAX_CONTEXT = 120
_MAX_SAMPLES = 5


def shorten(text: str, width: int = _MAX_CONTEXT) -> str:
    """Trim long audit context for the console; the log keeps it whole."""
    if len(text) <= width:
        return text
    return f"{text[: width - 3]}..."


def progress_line(result: FileResult, message: str) -> Text:
    style = _STAGE_STYLE.get(result.stage, "")
    line = Text()
    line.append(f"[{result.stage.value:>12}] ", style=style)
    line.append(str(result.source), style="bold")
    line.append(f" — {message}")
    return line


def event_line(entry: str, prefix: str = "") -> Text:
    outcome = entry.split(":", 1)[0]
    line = Text(f"{prefix} " if prefix else "", style="dim")
    line.append(shorten(entry), style=_OUTCOME_STYLE.get(outcome, ""))
    return line


def file_report(result: FileResult) -> Group:
    """All lines describing one finished file, printed as a single block."""
    lines = []
    if result.failed:
        stage = result.failed_stage.value if result.failed_stage else "unknown"
        lines.append(Text.assemble(
            ("✗ ", "bold red"), (str(result.source), "bold red"),
            " failed during ", (stage, "bold"),
        ))
        lines.append(Text(f"  {result.error}", style="red"))
        if result.segments:
            lines.append(Text(
                f"  {len(result.segments)} segment(s) completed before the failure",
                style="dim",
            ))
    else:
        clean = result.audit is None or result.audit.clean
        icon = ("✓ ", "green") if clean else ("⚠ ", "yellow")
        lines.append(Text.assemble(
            icon, (str(result.source), "bold"),
            f" split into {len(result.segments)} file(s), {result.error_count} audit error(s)",
        ))
    ws = result.working_set
    if ws is not None:
        lines.append(Text(f"  working set: {ws.root}", style="dim"))
        if result.audit is not None:
            lines.append(Text(f"  audit log:   {ws.audit_log}", style="dim"))
    if result.audit is not None:
        for sample in result.audit.samples[:_MAX_SAMPLES]:
            lines.append(Text(f"  {shorten(format_event(sample))}", style="yellow"))
    if result.log_warning:
        lines.append(Text(f"  warning: {result.log_warning}", style="bold yellow"))
    return Group(*lines)


def render(console: Console, results: list[FileResult], summary: BatchSummary,
           *, show_summary: bool = True) -> None:
    """Print the batch table and totals."""
    if not results:
        return
    console.print()
    table = Table(title="Split Results", title_style="bold", border_style="dim")
    table.add_column("File", style="magenta")
    table.add_column("State", justify="center")
    table.add_column("Lines", justify="right")
    table.add_column("Segments", justify="right")
    table.add_column("Errors", justify="right")
    table.add_column("Working set", style="dim")

    for r in results:
        state = Text(r.stage.value.upper(), style=_STAGE_STYLE.get(r.stage, ""))
        errors = "-" if r.audit is None else str(r.error_count)
        table.add_row(
            str(r.source),
            state,
            str(r.total_lines) if r.segments or not r.failed else "-",
            str(len(r.segments)),
            errors,
            str(r.working_set.root) if r.working_set else "-",
        )
    console.print(table)

    if show_summary:
        _print_summary(console, summary)


def _print_summary(console: Console, summary: BatchSummary) -> None:
    console.print()
    console.print(f"[dim]Files:[/dim]            {summary.files}")
    console.print(f"[dim]Completed:[/dim]        {summary.completed}")
    console.print(f"[dim]Failed:[/dim]           {len(summary.failed)}")
    console.print(f"[dim]With audit errors:[/dim] {len(summary.with_errors)}")
    console.print(f"[dim]Segments:[/dim]         {summary.total_segments}")
    console.print(f"[dim]Audit errors:[/dim]     {summary.total_errors}")
    console.print(f"[dim]Duration:[/dim]         {summary.duration_ms:.0f}ms")
