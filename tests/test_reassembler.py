"""Tests for reassembly and boundary normalization."""

from pathlib import Path

import pytest

from linesplit.reassembly.normalizer import normalizer_for
from linesplit.reassembly.reassembler import ReassemblyError, reassemble
from linesplit.splitter.line_splitter import split
from linesplit.splitter.models import LineEnding, Segment


def _segment(tmp_path: Path, index: int, data: bytes, start: int, end: int) -> Segment:
    path = tmp_path / f"seg-{index}"
    path.write_bytes(data)
    return Segment(index=index, source=tmp_path / "src", start=start, end=end, path=path)


class TestConcatenation:
    def test_round_trip(self, tmp_path, blank_lines_file):
        out = tmp_path / "out"
        out.mkdir()
        segments = split(blank_lines_file, 2, out)
        stream = reassemble(
            segments, tmp_path / "verify.txt", normalizer=normalizer_for(LineEnding.LF)
        )
        assert stream.path.read_bytes() == blank_lines_file.read_bytes()
        assert stream.normalized_joins == []
        assert stream.total_lines == 7

    def test_caller_order_is_kept(self, tmp_path):
        first = _segment(tmp_path, 1, b"one\n", 0, 1)
        second = _segment(tmp_path, 2, b"two\n", 1, 2)
        stream = reassemble([second, first], tmp_path / "v.txt")
        assert stream.path.read_bytes() == b"two\none\n"

    def test_join_offsets(self, tmp_path):
        segs = [
            _segment(tmp_path, 1, b"abc\n", 0, 1),
            _segment(tmp_path, 2, b"de\nf\n", 1, 3),
            _segment(tmp_path, 3, b"g", 3, 4),
        ]
        stream = reassemble(segs, tmp_path / "v.txt")
        assert stream.join_offsets == [0, 4, 9]
        assert stream.segment_count == 3

    def test_empty_segment_list(self, tmp_path):
        stream = reassemble([], tmp_path / "v.txt")
        assert stream.path.read_bytes() == b""
        assert stream.total_lines == 0


class TestBoundaryNormalization:
    @pytest.mark.parametrize("ending", list(LineEnding))
    def test_doubled_terminator_collapsed_at_join(self, tmp_path, ending):
        t = ending.terminator
        segs = [
            _segment(tmp_path, 1, b"a" + t + b"b" + t + t, 0, 2),
            _segment(tmp_path, 2, b"c" + t, 2, 3),
        ]
        stream = reassemble(
            segs, tmp_path / "v.txt", line_ending=ending, normalizer=normalizer_for(ending)
        )
        assert stream.path.read_bytes() == b"a" + t + b"b" + t + b"c" + t
        assert stream.normalized_joins == [1]

    def test_recorded_blank_line_is_kept(self, tmp_path):
        # The trailing blank line is part of the content: line_count says 3
        segs = [
            _segment(tmp_path, 1, b"a\nb\n\n", 0, 3),
            _segment(tmp_path, 2, b"c\n", 3, 4),
        ]
        stream = reassemble(segs, tmp_path / "v.txt", normalizer=normalizer_for(LineEnding.LF))
        assert stream.path.read_bytes() == b"a\nb\n\nc\n"
        assert stream.normalized_joins == []

    def test_only_one_terminator_removed(self, tmp_path):
        segs = [
            _segment(tmp_path, 1, b"a\n\n\n", 0, 2),
            _segment(tmp_path, 2, b"c\n", 2, 3),
        ]
        stream = reassemble(segs, tmp_path / "v.txt", normalizer=normalizer_for(LineEnding.LF))
        assert stream.path.read_bytes() == b"a\n\nc\n"

    def test_last_segment_untouched(self, tmp_path):
        segs = [_segment(tmp_path, 1, b"a\n\n", 0, 1)]
        stream = reassemble(segs, tmp_path / "v.txt", normalizer=normalizer_for(LineEnding.LF))
        assert stream.path.read_bytes() == b"a\n\n"

    def test_without_normalizer_bytes_are_verbatim(self, tmp_path):
        segs = [
            _segment(tmp_path, 1, b"a\n\n", 0, 1),
            _segment(tmp_path, 2, b"c\n", 1, 2),
        ]
        stream = reassemble(segs, tmp_path / "v.txt")
        assert stream.path.read_bytes() == b"a\n\nc\n"


class TestFailures:
    def test_missing_segment(self, tmp_path):
        seg = Segment(index=1, source=tmp_path / "s", start=0, end=1, path=tmp_path / "gone")
        with pytest.raises(ReassemblyError) as info:
            reassemble([seg], tmp_path / "v.txt")
        assert isinstance(info.value, OSError)
        assert "segment 1" in str(info.value)

    def test_unwritable_destination(self, tmp_path):
        with pytest.raises(ReassemblyError):
            reassemble([], tmp_path / "no-such-dir" / "v.txt")
