"""Shared test fixtures — sample text files in each line-ending style."""

from __future__ import annotations

from pathlib import Path

import pytest

from linesplit.config.schema import LineSplitConfig


def make_lines(count: int, *, terminator: str = "\n", prefix: str = "line") -> str:
    return "".join(f"{prefix} {i}{terminator}" for i in range(1, count + 1))


@pytest.fixture
def write_file(tmp_path: Path):
    """Write bytes or text under tmp_path and return the path."""

    def _write(name: str, content: str | bytes) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        data = content.encode("utf-8") if isinstance(content, str) else content
        path.write_bytes(data)
        return path

    return _write


@pytest.fixture
def lf_file(write_file) -> Path:
    return write_file("sample.txt", make_lines(10))


@pytest.fixture
def crlf_file(write_file) -> Path:
    return write_file("sample_crlf.txt", make_lines(7, terminator="\r\n"))


@pytest.fixture
def cr_file(write_file) -> Path:
    return write_file("sample_cr.txt", make_lines(5, terminator="\r"))


@pytest.fixture
def blank_lines_file(write_file) -> Path:
    """Blank lines placed exactly at segment boundaries for max_lines=2."""
    return write_file("blanks.txt", "a\n\n\nb\n\n\nc\n")


@pytest.fixture
def config() -> LineSplitConfig:
    return LineSplitConfig()
