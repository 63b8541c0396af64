"""Data models for line splitting."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class LineEnding(str, Enum):
    CRLF = "crlf"
    LF = "lf"
    CR = "cr"

    @property
    def terminator(self) -> bytes:
        return _TERMINATORS[self]


_TERMINATORS = {
    LineEnding.CRLF: b"\r\n",
    LineEnding.LF: b"\n",
    LineEnding.CR: b"\r",
}


@dataclass(frozen=True, slots=True)
class Segment:
    """One materialized chunk of a source file.

    ``start`` and ``end`` are 0-based line offsets into the source, half-open.
    """

    index: int
    source: Path
    start: int
    end: int
    path: Path

    @property
    def line_count(self) -> int:
        return self.end - self.start
