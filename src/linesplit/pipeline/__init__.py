"""Pipeline — per-file state machine and batch runner."""

from linesplit.pipeline.models import BatchSummary, FileResult, Stage
from linesplit.pipeline.orchestrator import Pipeline, run_batch
from linesplit.pipeline.summary import exit_code, summarize

__all__ = [
    "BatchSummary",
    "FileResult",
    "Pipeline",
    "Stage",
    "exit_code",
    "run_batch",
    "summarize",
]
