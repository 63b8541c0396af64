"""JSON reporter for scripted use."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence

from linesplit.audit.auditor import format_event
from linesplit.pipeline.models import BatchSummary, FileResult


def file_to_dict(result: FileResult) -> Dict[str, Any]:
    ws = result.working_set
    audit = result.audit
    data: Dict[str, Any] = {
        "source": str(result.source),
        "state": result.stage.value,
        "working_set": str(ws.root) if ws else None,
        "line_ending": result.line_ending.value if result.line_ending else None,
        "segments": [
            {
                "index": s.index,
                "path": str(s.path),
                "start": s.start,
                "end": s.end,
                "lines": s.line_count,
            }
            for s in result.segments
        ],
        "duration_ms": result.duration_ms,
    }
    if result.failed:
        data["failed_stage"] = result.failed_stage.value if result.failed_stage else None
        data["error"] = result.error
    if result.reassembled is not None:
        data["verification_file"] = str(result.reassembled.path)
        data["normalized_joins"] = result.reassembled.normalized_joins
    if audit is not None:
        data["audit"] = {
            "log": str(audit.log_path) if audit.log_path else None,
            "error_count": audit.error_count,
            "events": audit.total_events,
            "counts": {o.value: n for o, n in audit.counts.items()},
            "samples": [format_event(e) for e in audit.samples],
        }
    if result.log_warning:
        data["log_warning"] = result.log_warning
    return data


def to_dict(results: Sequence[FileResult], summary: BatchSummary) -> Dict[str, Any]:
    files: List[Dict[str, Any]] = [file_to_dict(r) for r in results]
    return {
        "version": "1.0",
        "files": files,
        "summary": {
            "files": summary.files,
            "completed": summary.completed,
            "failed": [str(r.source) for r in summary.failed],
            "with_audit_errors": [str(r.source) for r in summary.with_errors],
            "total_segments": summary.total_segments,
            "total_errors": summary.total_errors,
        },
    }


def render(results: Sequence[FileResult], summary: BatchSummary) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(results, summary), indent=2)
