"""Tests for line-ending detection and terminator-preserving iteration."""

import io

from linesplit.splitter.line_endings import detect_line_ending, iter_lines, strip_terminator
from linesplit.splitter.models import LineEnding


class TestDetection:
    def test_lf(self, lf_file):
        assert detect_line_ending(lf_file) is LineEnding.LF

    def test_crlf(self, crlf_file):
        assert detect_line_ending(crlf_file) is LineEnding.CRLF

    def test_cr(self, cr_file):
        assert detect_line_ending(cr_file) is LineEnding.CR

    def test_no_terminator_defaults_to_lf(self, write_file):
        path = write_file("one.txt", "single line")
        assert detect_line_ending(path) is LineEnding.LF

    def test_empty_file(self, write_file):
        assert detect_line_ending(write_file("empty.txt", b"")) is LineEnding.LF

    def test_majority_wins(self, write_file):
        path = write_file("mixed.txt", b"a\r\nb\r\nc\nd\r\n")
        assert detect_line_ending(path) is LineEnding.CRLF

    def test_crlf_not_split_at_sample_edge(self, write_file):
        path = write_file("edge.txt", b"abc\r\n")
        assert detect_line_ending(path, sample_size=4) is LineEnding.CRLF


class TestIterLines:
    def test_keeps_lf_terminators(self):
        lines = list(iter_lines(io.BytesIO(b"a\nb\n"), LineEnding.LF))
        assert lines == [b"a\n", b"b\n"]

    def test_keeps_crlf_terminators(self):
        lines = list(iter_lines(io.BytesIO(b"a\r\nb\r\n"), LineEnding.CRLF))
        assert lines == [b"a\r\n", b"b\r\n"]

    def test_cr_split(self):
        lines = list(iter_lines(io.BytesIO(b"a\rb\r\rc"), LineEnding.CR, chunk_size=2))
        assert lines == [b"a\r", b"b\r", b"\r", b"c"]

    def test_cr_line_spanning_many_chunks(self):
        data = b"x" * 1000 + b"\r" + b"y" * 7 + b"\rz"
        lines = list(iter_lines(io.BytesIO(data), LineEnding.CR, chunk_size=3))
        assert lines == [b"x" * 1000 + b"\r", b"y" * 7 + b"\r", b"z"]
        assert b"".join(lines) == data

    def test_last_line_without_terminator(self):
        lines = list(iter_lines(io.BytesIO(b"a\nb"), LineEnding.LF))
        assert lines == [b"a\n", b"b"]

    def test_join_is_byte_identical(self):
        data = b"x\r\ny\n\nz"
        assert b"".join(iter_lines(io.BytesIO(data), LineEnding.CRLF)) == data

    def test_strip_terminator(self):
        assert strip_terminator(b"abc\r\n") == b"abc"
        assert strip_terminator(b"\n") == b""
