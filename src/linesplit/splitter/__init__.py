"""Line splitting — models, line-ending handling, splitter."""

from linesplit.splitter.line_endings import detect_line_ending, iter_lines, strip_terminator
from linesplit.splitter.line_splitter import LineSplitter, SplitError, segment_name, split
from linesplit.splitter.models import LineEnding, Segment

__all__ = [
    "LineEnding",
    "LineSplitter",
    "Segment",
    "SplitError",
    "detect_line_ending",
    "iter_lines",
    "segment_name",
    "split",
    "strip_terminator",
]
