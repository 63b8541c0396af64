"""Streaming line auditor.

Both inputs are read lazily. While the heads agree the streams advance in
lockstep; on divergence a bounded lookahead searches for the nearest point
where they agree again. Lines skipped on both sides are paired as
MISMATCH, the surplus on one side is reported as missing from the other.
Every input line ends up in exactly one event, in input order.
"""

from __future__ import annotations

import json
import logging
from collections import deque
from contextlib import ExitStack
from pathlib import Path
from typing import Callable, Deque, Dict, Iterator, List, Optional, Tuple

from linesplit.audit.models import AuditEvent, AuditOutcome, AuditResult
from linesplit.splitter.line_endings import iter_lines, strip_terminator
from linesplit.splitter.models import LineEnding

logger = logging.getLogger(__name__)

TRAILER_PREFIX = "# errors="


class AuditError(OSError):
    """Raised when either input or the audit log cannot be streamed."""


class _Lookahead:
    """A line stream that can be peeked up to an arbitrary depth."""

    def __init__(self, lines: Iterator[bytes]) -> None:
        self._lines = lines
        self._buffer: Deque[bytes] = deque()
        self._done = False
        self.consumed = 0

    def fill(self, n: int) -> int:
        while len(self._buffer) < n and not self._done:
            try:
                self._buffer.append(next(self._lines))
            except StopIteration:
                self._done = True
        return len(self._buffer)

    def peek(self, i: int) -> bytes:
        return self._buffer[i]

    def pop(self) -> Tuple[int, bytes]:
        self.consumed += 1
        return self.consumed, self._buffer.popleft()

    def exhausted(self) -> bool:
        return self.fill(1) == 0


class DiffAuditor:
    """Compare two line streams and classify every line."""

    def __init__(self, *, resync_window: int = 64, confirm_lines: int = 2) -> None:
        self.resync_window = max(1, resync_window)
        self.confirm_lines = max(1, confirm_lines)

    # ---- event stream ----

    def iter_events(self, a_lines: Iterator[bytes], b_lines: Iterator[bytes]) -> Iterator[AuditEvent]:
        a = _Lookahead(a_lines)
        b = _Lookahead(b_lines)

        while True:
            a_end = a.exhausted()
            b_end = b.exhausted()
            if a_end and b_end:
                return
            if b_end:
                n, line = a.pop()
                yield AuditEvent(AuditOutcome.MISSING_IN_RECONSTRUCTED, a_line=n, a_text=line)
                continue
            if a_end:
                n, line = b.pop()
                yield AuditEvent(AuditOutcome.MISSING_IN_ORIGINAL, b_line=n, b_text=line)
                continue

            if a.peek(0) == b.peek(0):
                an, line = a.pop()
                bn, _ = b.pop()
                yield AuditEvent(AuditOutcome.MATCH, a_line=an, b_line=bn, a_text=line, b_text=line)
                continue

            skip_a, skip_b = self._resync(a, b)
            paired = min(skip_a, skip_b)
            for _ in range(paired):
                an, a_text = a.pop()
                bn, b_text = b.pop()
                yield AuditEvent(AuditOutcome.MISMATCH, an, bn, a_text, b_text)
            for _ in range(skip_a - paired):
                an, a_text = a.pop()
                yield AuditEvent(AuditOutcome.MISSING_IN_RECONSTRUCTED, a_line=an, a_text=a_text)
            for _ in range(skip_b - paired):
                bn, b_text = b.pop()
                yield AuditEvent(AuditOutcome.MISSING_IN_ORIGINAL, b_line=bn, b_text=b_text)

    def _resync(self, a: _Lookahead, b: _Lookahead) -> Tuple[int, int]:
        """Find the nearest (skip_a, skip_b) after which both streams agree.

        Candidates are ordered by total lines skipped, then by fewer lines
        skipped in *a*. Only positions whose lines are equal are confirmed, so
        streams that share nothing cost one pass over each window. If nothing
        within the window agrees, the two heads are treated as one altered line.
        """
        window = self.resync_window
        a_len = a.fill(window + self.confirm_lines)
        b_len = b.fill(window + self.confirm_lines)

        positions: Dict[bytes, List[int]] = {}
        for j in range(min(b_len, window + 1)):
            positions.setdefault(b.peek(j), []).append(j)

        best: Optional[Tuple[int, int]] = None
        for i in range(min(a_len, window + 1)):
            if best is not None and i >= best[0] + best[1]:
                break
            for j in positions.get(a.peek(i), ()):
                if i + j == 0:
                    continue
                if best is not None and i + j >= best[0] + best[1]:
                    break
                if self._agrees(a, b, i, j, a_len, b_len):
                    best = (i, j)
                    break
        if best is not None:
            return best
        # No anchor: drain whichever side ran out, else pair the heads
        if a_len == 0 or b_len == 0:
            return a_len, b_len
        return 1, 1

    def _agrees(self, a: _Lookahead, b: _Lookahead, i: int, j: int, a_len: int, b_len: int) -> bool:
        span = min(self.confirm_lines, a_len - i, b_len - j)
        return all(a.peek(i + k) == b.peek(j + k) for k in range(span))

    # ---- file audit ----

    def audit(
        self,
        original: Path,
        reconstructed: Path,
        log_path: Optional[Path] = None,
        *,
        line_ending: LineEnding = LineEnding.LF,
        encoding: str = "utf-8",
        sample_size: int = 20,
        on_event: Optional[Callable[[AuditEvent, str], None]] = None,
    ) -> AuditResult:
        """Audit *reconstructed* against *original*, writing *log_path*."""
        result = AuditResult(log_path=log_path)
        with ExitStack() as stack:
            try:
                a_handle = stack.enter_context(original.open("rb"))
                b_handle = stack.enter_context(reconstructed.open("rb"))
            except OSError as exc:
                raise AuditError(f"cannot open audit input: {exc}") from exc

            try:
                log = (
                    stack.enter_context(log_path.open("w", encoding="utf-8", newline="\n"))
                    if log_path is not None
                    else None
                )
                events = self.iter_events(
                    iter_lines(a_handle, line_ending), iter_lines(b_handle, line_ending)
                )
                for event in events:
                    result.counts[event.outcome] += 1
                    if event.is_error:
                        result.error_count += 1
                        if len(result.samples) < sample_size:
                            result.samples.append(event)
                    entry = format_event(event, encoding=encoding)
                    if log is not None:
                        log.write(entry + "\n")
                    if on_event is not None:
                        on_event(event, entry)
                if log is not None:
                    log.write(f"{TRAILER_PREFIX}{result.error_count} events={result.total_events}\n")
            except OSError as exc:
                raise AuditError(f"audit of {reconstructed} failed: {exc}") from exc

        logger.debug(
            "audited %s: %d event(s), %d error(s)",
            reconstructed, result.total_events, result.error_count,
        )
        return result


def _render(text: Optional[bytes], encoding: str) -> str:
    if text is None:
        return json.dumps("")
    return json.dumps(strip_terminator(text).decode(encoding, errors="backslashreplace"))


def format_event(event: AuditEvent, *, encoding: str = "utf-8") -> str:
    """Render *event* as one audit log line: ``<OUTCOME>: a=<n> b=<n> <context>``."""
    a_no = str(event.a_line) if event.a_line is not None else "-"
    b_no = str(event.b_line) if event.b_line is not None else "-"
    if event.outcome is AuditOutcome.MISMATCH:
        context = f"{_render(event.a_text, encoding)} != {_render(event.b_text, encoding)}"
    elif event.outcome is AuditOutcome.MISSING_IN_ORIGINAL:
        context = _render(event.b_text, encoding)
    else:
        context = _render(event.a_text, encoding)
    return f"{event.outcome.value}: a={a_no} b={b_no} {context}"


def audit(
    original: Path,
    reconstructed: Path,
    log_path: Optional[Path] = None,
    **kwargs,
) -> AuditResult:
    """Convenience wrapper around :meth:`DiffAuditor.audit` with defaults."""
    return DiffAuditor().audit(original, reconstructed, log_path, **kwargs)
