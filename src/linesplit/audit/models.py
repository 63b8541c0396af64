"""Data models for the line audit."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional


class AuditOutcome(str, Enum):
    MATCH = "MATCH"
    MISMATCH = "MISMATCH"
    MISSING_IN_ORIGINAL = "MISSING_IN_ORIGINAL"  # only in reconstructed
    MISSING_IN_RECONSTRUCTED = "MISSING_IN_RECONSTRUCTED"  # only in original


@dataclass(frozen=True, slots=True)
class AuditEvent:
    """One classified comparison step.

    ``a_line`` / ``b_line`` are 1-based positions in the original and the
    reconstructed stream; ``None`` where that side contributed no line.
    """

    outcome: AuditOutcome
    a_line: Optional[int] = None
    b_line: Optional[int] = None
    a_text: Optional[bytes] = None
    b_text: Optional[bytes] = None

    @property
    def is_error(self) -> bool:
        if self.outcome is AuditOutcome.MATCH:
            return False
        if self.outcome is AuditOutcome.MISMATCH:
            # Two empty sides carry no information
            return bool(_content(self.a_text) or _content(self.b_text))
        return True


def _content(text: Optional[bytes]) -> bytes:
    return text.rstrip(b"\r\n") if text else b""


@dataclass
class AuditResult:
    """Aggregate outcome of one audit run."""

    log_path: Optional[Path] = None
    error_count: int = 0
    counts: Dict[AuditOutcome, int] = field(
        default_factory=lambda: {o: 0 for o in AuditOutcome}
    )
    samples: List[AuditEvent] = field(default_factory=list)  # first divergences

    @property
    def total_events(self) -> int:
        return sum(self.counts.values())

    @property
    def clean(self) -> bool:
        return self.error_count == 0
