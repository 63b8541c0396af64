"""Reassembler — concatenates segments into a single verification file."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from linesplit.reassembly.normalizer import BoundaryNormalizer
from linesplit.splitter.line_endings import iter_lines
from linesplit.splitter.models import LineEnding, Segment

logger = logging.getLogger(__name__)


class ReassemblyError(OSError):
    """Raised when a segment or the destination cannot be read / written."""


@dataclass
class ReassembledStream:
    """The materialized concatenation of a segment list."""

    path: Path
    join_offsets: List[int] = field(default_factory=list)  # byte offset of each segment start
    total_lines: int = 0
    normalized_joins: List[int] = field(default_factory=list)  # segment indexes trimmed

    @property
    def segment_count(self) -> int:
        return len(self.join_offsets)


def reassemble(
    segments: Sequence[Segment],
    destination: Path,
    *,
    line_ending: LineEnding = LineEnding.LF,
    normalizer: Optional[BoundaryNormalizer] = None,
) -> ReassembledStream:
    """Concatenate *segments* in the order given into *destination*.

    The caller's order is authoritative. When *normalizer* is supplied it is
    consulted only for segments that are followed by another segment.
    """
    stream = ReassembledStream(path=destination)
    offset = 0
    last = len(segments) - 1

    try:
        out = destination.open("wb")
    except OSError as exc:
        raise ReassemblyError(f"cannot create {destination}: {exc}") from exc

    with out:
        for pos, segment in enumerate(segments):
            stream.join_offsets.append(offset)
            at_join = pos < last and normalizer is not None
            try:
                with segment.path.open("rb") as src:
                    written, lines, trimmed = _copy_segment(
                        src, out, segment, line_ending, normalizer if at_join else None
                    )
            except OSError as exc:
                raise ReassemblyError(
                    f"failed copying segment {segment.index} ({segment.path}): {exc}"
                ) from exc
            if trimmed:
                stream.normalized_joins.append(segment.index)
                logger.debug("collapsed doubled terminator after segment %d", segment.index)
            offset += written
            stream.total_lines += lines

    return stream


def _copy_segment(src, out, segment: Segment, line_ending: LineEnding,
                  normalizer: Optional[BoundaryNormalizer]):
    """Copy one segment, holding back its final line until the join is decided."""
    written = 0
    lines = 0
    previous: Optional[bytes] = None
    held: Optional[bytes] = None

    for line in iter_lines(src, line_ending):
        if held is not None:
            out.write(held)
            written += len(held)
            lines += 1
        previous, held = held, line

    trimmed = False
    if held is not None:
        if normalizer is not None and normalizer.trim(
            lines + 1, segment.line_count, held, previous
        ):
            trimmed = True
        else:
            out.write(held)
            written += len(held)
            lines += 1
    return written, lines, trimmed
