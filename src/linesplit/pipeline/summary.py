"""Fold per-file results into a batch summary."""

from __future__ import annotations

from typing import Iterable

from linesplit.pipeline.models import BatchSummary, FileResult


def summarize(results: Iterable[FileResult]) -> BatchSummary:
    """Build a BatchSummary from finished results.

    Failed files and files whose audit reported errors are listed separately;
    a failed file never contributes to the audit error total.
    """
    summary = BatchSummary()
    for result in results:
        summary.files += 1
        summary.duration_ms += result.duration_ms
        if result.failed:
            summary.failed.append(result)
            continue
        summary.completed += 1
        summary.total_segments += len(result.segments)
        if result.error_count:
            summary.with_errors.append(result)
            summary.total_errors += result.error_count
    return summary


def exit_code(summary: BatchSummary, *, fail_on_mismatch: bool = False) -> int:
    """0 when clean, 1 when any file failed (or had audit errors under strict)."""
    if summary.clean:
        return 0
    if summary.failed:
        return 1
    if fail_on_mismatch and summary.with_errors:
        return 1
    return 0
