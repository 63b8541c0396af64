"""Line splitter — partitions a source file into bounded segment files.

Segments are written byte-for-byte: every line keeps its original
terminator, so concatenating the segment files in index order reproduces the
source exactly. Order is carried by the returned list, never by file names.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, List, Optional

from linesplit.splitter.line_endings import detect_line_ending, iter_lines
from linesplit.splitter.models import LineEnding, Segment

logger = logging.getLogger(__name__)


class SplitError(OSError):
    """Raised when the source cannot be read or a segment cannot be written.

    ``segments`` holds every segment completed before the failure; partially
    written files are left in place for the caller to inspect.
    """

    def __init__(self, message: str, *, segments: List[Segment]) -> None:
        self.segments = list(segments)
        self.last_completed_index: Optional[int] = (
            segments[-1].index if segments else None
        )
        last = (
            f"segment {self.last_completed_index}"
            if self.last_completed_index is not None
            else "none"
        )
        super().__init__(f"{message} (last completed: {last})")


def segment_name(prefix: str, index: int, width: int, suffix: str = "") -> str:
    """Deterministic file name for segment *index* (1-based)."""
    return f"{prefix}{index:0{width}d}{suffix}"


class LineSplitter:
    """Write a source file out as consecutive segments of at most *max_lines*."""

    def __init__(
        self,
        max_lines: int,
        *,
        prefix: str = "file-",
        index_width: int = 4,
    ) -> None:
        if max_lines < 1:
            raise ValueError("max_lines must be at least 1")
        self.max_lines = max_lines
        self.prefix = prefix
        self.index_width = index_width

    def split(
        self,
        source: Path,
        dest_dir: Path,
        *,
        line_ending: Optional[LineEnding] = None,
    ) -> List[Segment]:
        """Split *source* into segment files under *dest_dir*.

        An empty source produces no segments.
        """
        segments: List[Segment] = []
        suffix = source.suffix

        try:
            if line_ending is None:
                line_ending = detect_line_ending(source)
            src = source.open("rb")
        except OSError as exc:
            raise SplitError(f"cannot open {source}: {exc}", segments=segments) from exc

        out: Optional[BinaryIO] = None
        out_path: Optional[Path] = None
        start = 0
        count = 0
        line_no = 0

        with src:
            try:
                for line in iter_lines(src, line_ending):
                    if out is None:
                        index = len(segments) + 1
                        out_path = dest_dir / segment_name(
                            self.prefix, index, self.index_width, suffix
                        )
                        out = out_path.open("xb")
                        start = line_no
                        count = 0
                    out.write(line)
                    count += 1
                    line_no += 1
                    if count == self.max_lines:
                        out.close()
                        out = None
                        segments.append(self._finish(segments, source, start, line_no, out_path))
                if out is not None:
                    out.close()
                    out = None
                    segments.append(self._finish(segments, source, start, line_no, out_path))
            except OSError as exc:
                if out is not None:
                    out.close()
                raise SplitError(
                    f"failed writing {out_path or dest_dir}: {exc}", segments=segments
                ) from exc

        logger.debug("split %s into %d segment(s)", source, len(segments))
        return segments

    @staticmethod
    def _finish(
        segments: List[Segment], source: Path, start: int, end: int, path: Optional[Path]
    ) -> Segment:
        assert path is not None
        return Segment(index=len(segments) + 1, source=source, start=start, end=end, path=path)


def split(
    source: Path,
    max_lines: int,
    dest_dir: Path,
    *,
    line_ending: Optional[LineEnding] = None,
    prefix: str = "file-",
    index_width: int = 4,
) -> List[Segment]:
    """Convenience wrapper around :class:`LineSplitter`."""
    splitter = LineSplitter(max_lines, prefix=prefix, index_width=index_width)
    return splitter.split(source, dest_dir, line_ending=line_ending)
