"""Audit log parser — reads back the ``<OUTCOME>: <context>`` format.

Yields LoggedEvent and LogCorruption objects. A log without its trailer is
reported as truncated; a trailer that disagrees with the events above it is
reported as corrupt. Neither raises: callers decide what to do with them.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Generator, List, Optional

from linesplit.audit.models import AuditOutcome

# --- Regex patterns for log parsing ---

_EVENT_RE = re.compile(
    r"^(?P<outcome>[A-Z_]+): a=(?P<a>\d+|-) b=(?P<b>\d+|-) (?P<context>.*)$"
)
_TRAILER_RE = re.compile(r"^# errors=(?P<errors>\d+) events=(?P<events>\d+)$")
_MISMATCH_SEP = " != "

_decoder = json.JSONDecoder()


@dataclass(frozen=True, slots=True)
class LoggedEvent:
    """A single event read back from an audit log."""

    outcome: AuditOutcome
    a_line: Optional[int]
    b_line: Optional[int]
    a_text: Optional[str]
    b_text: Optional[str]

    @property
    def is_error(self) -> bool:
        if self.outcome is AuditOutcome.MATCH:
            return False
        if self.outcome is AuditOutcome.MISMATCH:
            return bool(self.a_text or self.b_text)
        return True


@dataclass(frozen=True)
class LogCorruption:
    """Record of a log line that could not be understood."""

    line_no: int
    reason: str  # 'unparseable', 'unknown_outcome', 'truncated', 'trailer_mismatch'
    raw: str = ""


@dataclass
class LogSummary:
    path: Path
    counts: Dict[AuditOutcome, int] = field(
        default_factory=lambda: {o: 0 for o in AuditOutcome}
    )
    error_count: int = 0
    problems: List[LogCorruption] = field(default_factory=list)

    @property
    def total_events(self) -> int:
        return sum(self.counts.values())

    @property
    def is_corrupt(self) -> bool:
        return bool(self.problems)


def _line_no(value: str) -> Optional[int]:
    return None if value == "-" else int(value)


def _parse_context(outcome: AuditOutcome, context: str):
    """Decode the JSON string literal(s) in *context*. Raises ValueError."""
    first, end = _decoder.raw_decode(context)
    rest = context[end:]
    if outcome is AuditOutcome.MISMATCH:
        if not rest.startswith(_MISMATCH_SEP):
            raise ValueError("mismatch without second side")
        second, end2 = _decoder.raw_decode(rest[len(_MISMATCH_SEP):])
        if rest[len(_MISMATCH_SEP) + end2:]:
            raise ValueError("trailing data")
        return first, second
    if rest:
        raise ValueError("trailing data")
    return first, None


class AuditLogParser:
    """Parse an audit log file line by line.

    Usage::

        for item in AuditLogParser(path).parse():
            if isinstance(item, LogCorruption):
                ...
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def parse(self) -> Generator[LoggedEvent | LogCorruption, None, None]:
        events = 0
        errors = 0
        trailer_seen = False

        with self.path.open("r", encoding="utf-8", errors="replace", newline="\n") as handle:
            for idx, raw in enumerate(handle, start=1):
                line = raw.rstrip("\n")

                # --- trailer ---
                tm = _TRAILER_RE.match(line)
                if tm:
                    trailer_seen = True
                    if int(tm.group("errors")) != errors or int(tm.group("events")) != events:
                        yield LogCorruption(idx, "trailer_mismatch", line)
                    continue

                if trailer_seen:
                    yield LogCorruption(idx, "unparseable", line)
                    continue

                m = _EVENT_RE.match(line)
                if not m:
                    yield LogCorruption(idx, "unparseable", line)
                    continue

                try:
                    outcome = AuditOutcome(m.group("outcome"))
                except ValueError:
                    yield LogCorruption(idx, "unknown_outcome", line)
                    continue

                try:
                    first, second = _parse_context(outcome, m.group("context"))
                except ValueError:
                    yield LogCorruption(idx, "unparseable", line)
                    continue

                if outcome is AuditOutcome.MISSING_IN_ORIGINAL:
                    a_text, b_text = None, first
                elif outcome is AuditOutcome.MISMATCH:
                    a_text, b_text = first, second
                elif outcome is AuditOutcome.MATCH:
                    a_text, b_text = first, first
                else:
                    a_text, b_text = first, None

                event = LoggedEvent(
                    outcome=outcome,
                    a_line=_line_no(m.group("a")),
                    b_line=_line_no(m.group("b")),
                    a_text=a_text,
                    b_text=b_text,
                )
                events += 1
                if event.is_error:
                    errors += 1
                yield event

        if not trailer_seen:
            yield LogCorruption(events + 1, "truncated")


def summarize_log(path: Path) -> LogSummary:
    """Fold an audit log into outcome counts plus any problems found.

    Raises OSError only if the log cannot be opened at all.
    """
    summary = LogSummary(path=path)
    for item in AuditLogParser(path).parse():
        if isinstance(item, LogCorruption):
            summary.problems.append(item)
            continue
        summary.counts[item.outcome] += 1
        if item.is_error:
            summary.error_count += 1
    return summary
