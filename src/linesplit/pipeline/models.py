"""Pipeline state and result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from linesplit.audit.models import AuditResult
from linesplit.reassembly.reassembler import ReassembledStream
from linesplit.splitter.models import LineEnding, Segment
from linesplit.workspace.staging import WorkingSet


class Stage(str, Enum):
    STAGING = "staging"
    SPLITTING = "splitting"
    REASSEMBLING = "reassembling"
    AUDITING = "auditing"
    REPORTED = "reported"
    FAILED = "failed"


@dataclass
class FileResult:
    """Everything known about one input file as it moves through the pipeline."""

    source: Path
    stage: Stage = Stage.STAGING
    working_set: Optional[WorkingSet] = None
    line_ending: Optional[LineEnding] = None
    segments: List[Segment] = field(default_factory=list)
    reassembled: Optional[ReassembledStream] = None
    audit: Optional[AuditResult] = None
    failed_stage: Optional[Stage] = None
    error: Optional[str] = None
    log_warning: Optional[str] = None
    duration_ms: float = 0.0

    @property
    def failed(self) -> bool:
        return self.stage is Stage.FAILED

    @property
    def error_count(self) -> int:
        return self.audit.error_count if self.audit else 0

    @property
    def total_lines(self) -> int:
        return sum(s.line_count for s in self.segments)


@dataclass
class BatchSummary:
    """Aggregate view over a finished batch."""

    files: int = 0
    completed: int = 0
    failed: List[FileResult] = field(default_factory=list)
    with_errors: List[FileResult] = field(default_factory=list)
    total_segments: int = 0
    total_errors: int = 0
    duration_ms: float = 0.0

    @property
    def clean(self) -> bool:
        return not self.failed and not self.with_errors
