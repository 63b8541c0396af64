"""Input discovery — expand paths, globs, and directories into files."""

from __future__ import annotations

import glob
from pathlib import Path
from typing import Iterable, List

from linesplit.config.schema import DEFAULT_DIR_MARKER


def _expand(entry: str) -> List[Path]:
    if glob.has_magic(entry):
        return [Path(p) for p in sorted(glob.glob(entry))]
    # Literal paths are kept even when missing so the failure is reported
    return [Path(entry)]


def _is_derived(path: Path, marker: str) -> bool:
    """True for a working set or a file directly inside one."""
    return marker in path.name or marker in path.parent.name


def resolve_inputs(patterns: Iterable[str], *, marker: str = DEFAULT_DIR_MARKER) -> List[Path]:
    """Return the ordered, de-duplicated list of files to split.

    Directories expand to the files directly inside them. Working sets from
    earlier runs (names containing *marker*) and their contents are skipped.
    """
    seen: set[Path] = set()
    files: List[Path] = []

    for entry in patterns:
        for path in _expand(entry):
            if _is_derived(path, marker):
                continue
            if path.is_dir():
                candidates = sorted(p for p in path.iterdir() if p.is_file())
            else:
                candidates = [path]
            for candidate in candidates:
                if _is_derived(candidate, marker) or candidate in seen:
                    continue
                seen.add(candidate)
                files.append(candidate)
    return files
