"""Tests for input discovery, working sets, and manifests."""

from pathlib import Path

import pytest

from linesplit.splitter.line_splitter import split
from linesplit.splitter.models import LineEnding
from linesplit.workspace.discovery import resolve_inputs
from linesplit.workspace.manifest import Manifest, ManifestError, load_manifest, write_manifest
from linesplit.workspace.staging import WorkspaceError, create_working_set


class TestDiscovery:
    def test_glob_and_directory(self, tmp_path, write_file):
        a = write_file("data/a.txt", "a\n")
        b = write_file("data/b.txt", "b\n")
        c = write_file("c.log", "c\n")
        (tmp_path / "data" / "nested").mkdir()

        files = resolve_inputs([str(tmp_path / "data"), str(tmp_path / "*.log")])
        assert files == [a, b, c]

    def test_skips_previous_output(self, tmp_path, write_file):
        src = write_file("big.txt", "x\n")
        write_file("big.txt-split/original.txt", "x\n")
        write_file("big.txt-split-1/file-0001.txt", "x\n")

        files = resolve_inputs([str(tmp_path / "*")])
        assert files == [src]

    def test_deduplicates(self, lf_file):
        assert resolve_inputs([str(lf_file), str(lf_file)]) == [lf_file]

    def test_missing_literal_kept(self, tmp_path):
        missing = tmp_path / "nope.txt"
        assert resolve_inputs([str(missing)]) == [missing]

    def test_unmatched_glob_dropped(self, tmp_path):
        assert resolve_inputs([str(tmp_path / "*.nothing")]) == []

    def test_custom_marker(self, tmp_path, write_file):
        write_file("a.txt-parts/x.txt", "x\n")
        keep = write_file("a.txt", "a\n")
        assert resolve_inputs([str(tmp_path / "*")], marker="-parts") == [keep]


class TestWorkingSet:
    def test_creates_and_copies(self, lf_file):
        ws = create_working_set(lf_file)
        assert ws.root == lf_file.with_name("sample.txt-split")
        assert ws.original.read_bytes() == lf_file.read_bytes()
        assert ws.original.name == "original.txt"

    def test_second_run_is_suffixed(self, lf_file):
        first = create_working_set(lf_file)
        marker = first.root / "keep.me"
        marker.write_text("untouched")

        second = create_working_set(lf_file)
        third = create_working_set(lf_file)
        assert second.root.name == "sample.txt-split-1"
        assert third.root.name == "sample.txt-split-2"
        assert marker.read_text() == "untouched"

    def test_existing_file_at_candidate_name(self, lf_file):
        lf_file.with_name("sample.txt-split").write_text("not a dir")
        ws = create_working_set(lf_file)
        assert ws.root.name == "sample.txt-split-1"

    def test_missing_source(self, tmp_path):
        with pytest.raises(WorkspaceError):
            create_working_set(tmp_path / "nope.txt")
        assert not (tmp_path / "nope.txt-split").exists()


class TestManifest:
    def test_round_trip(self, tmp_path, lf_file):
        ws = create_working_set(lf_file)
        segments = split(ws.original, 4, ws.root)
        write_manifest(ws.manifest, Manifest(lf_file, LineEnding.LF, 4, segments))

        loaded = load_manifest(ws.manifest)
        assert loaded.source == lf_file
        assert loaded.line_ending is LineEnding.LF
        assert [s.path for s in loaded.segments] == [s.path for s in segments]
        assert [(s.start, s.end) for s in loaded.segments] == [(0, 4), (4, 8), (8, 10)]
        assert loaded.total_lines == 10

    def test_order_comes_from_manifest(self, tmp_path):
        root = tmp_path / "ws"
        root.mkdir()
        (root / "manifest.yaml").write_text(
            "source: src.txt\nline_ending: crlf\nmax_lines: 2\nsegments:\n"
            "- {index: 2, file: b.txt, start: 2, end: 4}\n"
            "- {index: 1, file: a.txt, start: 0, end: 2}\n"
        )
        loaded = load_manifest(root / "manifest.yaml")
        assert [s.path.name for s in loaded.segments] == ["b.txt", "a.txt"]
        assert loaded.line_ending is LineEnding.CRLF

    def test_missing(self, tmp_path):
        with pytest.raises(ManifestError):
            load_manifest(tmp_path / "manifest.yaml")

    def test_malformed(self, tmp_path):
        path: Path = tmp_path / "manifest.yaml"
        path.write_text("segments: [{index: one}]\n")
        with pytest.raises(ManifestError):
            load_manifest(path)
