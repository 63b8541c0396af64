"""Boundary normalizers — collapse doubled terminators at segment joins."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from linesplit.splitter.models import LineEnding


@dataclass(frozen=True)
class BoundaryNormalizer:
    """Collapse one doubled terminator at the tail of a segment.

    A tail is an artifact only when the segment holds more lines on disk than
    were recorded for it and the surplus line is a bare terminator. Blank
    lines that belong to the content are counted in the recorded total, so
    they are never removed.
    """

    line_ending: LineEnding

    @property
    def doubled(self) -> bytes:
        return self.line_ending.terminator * 2

    def is_artifact(self, last_line: bytes, previous_line: Optional[bytes]) -> bool:
        term = self.line_ending.terminator
        if last_line != term or previous_line is None:
            return False
        return (previous_line + last_line).endswith(self.doubled)

    def trim(self, lines_on_disk: int, expected_lines: int, last_line: bytes,
             previous_line: Optional[bytes]) -> bool:
        """Return True if *last_line* should be dropped at this join."""
        if lines_on_disk <= expected_lines:
            return False
        return self.is_artifact(last_line, previous_line)


_NORMALIZERS: Dict[LineEnding, BoundaryNormalizer] = {
    ending: BoundaryNormalizer(ending) for ending in LineEnding
}


def normalizer_for(line_ending: LineEnding) -> BoundaryNormalizer:
    return _NORMALIZERS[line_ending]
