"""Working set manifest — the persisted, authoritative segment order."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

import yaml

from linesplit.splitter.models import LineEnding, Segment

MANIFEST_VERSION = 1


class ManifestError(Exception):
    """Raised when a manifest is missing or malformed."""


@dataclass
class Manifest:
    source: Path
    line_ending: LineEnding
    max_lines: int
    segments: List[Segment] = field(default_factory=list)

    @property
    def total_lines(self) -> int:
        return sum(s.line_count for s in self.segments)


def write_manifest(path: Path, manifest: Manifest) -> None:
    root = path.parent
    data = {
        "version": MANIFEST_VERSION,
        "source": str(manifest.source),
        "line_ending": manifest.line_ending.value,
        "max_lines": manifest.max_lines,
        "segments": [
            {
                "index": s.index,
                "file": s.path.relative_to(root).as_posix(),
                "start": s.start,
                "end": s.end,
            }
            for s in manifest.segments
        ],
    }
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, sort_keys=False)


def load_manifest(path: Path) -> Manifest:
    """Read a manifest; segment paths are resolved against its directory."""
    if not path.is_file():
        raise ManifestError(f"Manifest not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise ManifestError(f"Failed to read {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ManifestError(f"{path}: expected a mapping")

    try:
        source = Path(data["source"])
        segments = [
            Segment(
                index=int(entry["index"]),
                source=source,
                start=int(entry["start"]),
                end=int(entry["end"]),
                path=path.parent / entry["file"],
            )
            for entry in data.get("segments") or []
        ]
        manifest = Manifest(
            source=source,
            line_ending=LineEnding(data.get("line_ending", "lf")),
            max_lines=int(data["max_lines"]),
            segments=segments,
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ManifestError(f"{path}: malformed manifest ({exc})") from exc
    return manifest
