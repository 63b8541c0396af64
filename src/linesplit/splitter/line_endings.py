"""Line-ending detection and terminator-preserving line iteration."""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Iterator, List

from linesplit.splitter.models import LineEnding

_DEFAULT_SAMPLE = 65_536
_CHUNK_SIZE = 1_048_576


def detect_line_ending(path: Path, *, sample_size: int = _DEFAULT_SAMPLE) -> LineEnding:
    """Guess the line-ending convention from the head of *path*.

    The most frequent terminator wins; ties prefer CRLF, then LF. A file with
    no terminator at all is reported as LF.
    """
    with path.open("rb") as handle:
        sample = handle.read(max(2, sample_size))
        # Don't cut a CRLF in half at the sample edge
        if sample.endswith(b"\r"):
            sample += handle.read(1)

    crlf = sample.count(b"\r\n")
    lf = sample.count(b"\n") - crlf
    cr = sample.count(b"\r") - crlf
    if crlf == lf == cr == 0:
        return LineEnding.LF
    best = max(crlf, lf, cr)
    if crlf == best:
        return LineEnding.CRLF
    if lf == best:
        return LineEnding.LF
    return LineEnding.CR


def iter_lines(
    handle: BinaryIO,
    line_ending: LineEnding = LineEnding.LF,
    *,
    chunk_size: int = _CHUNK_SIZE,
) -> Iterator[bytes]:
    """Yield raw lines from *handle* with their terminator bytes attached.

    LF and CRLF both split on ``\\n`` so a mixed file is reproduced exactly.
    The final line is yielded without a terminator if the file lacks one.
    """
    if line_ending is not LineEnding.CR:
        yield from handle
        return

    sep = b"\r"
    pending: List[bytes] = []
    while True:
        chunk = handle.read(chunk_size)
        if not chunk:
            break
        parts = chunk.split(sep)
        for part in parts[:-1]:
            pending.append(part)
            yield b"".join(pending) + sep
            pending = []
        if parts[-1]:
            pending.append(parts[-1])
    if pending:
        yield b"".join(pending)


def strip_terminator(line: bytes) -> bytes:
    """Return *line* without any trailing CR / LF bytes."""
    return line.rstrip(b"\r\n")
