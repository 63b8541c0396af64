"""Working set allocation and staging of the original file."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from linesplit.config.schema import DEFAULT_DIR_MARKER

logger = logging.getLogger(__name__)

_MAX_ATTEMPTS = 10_000


class WorkspaceError(OSError):
    """Raised when a working set cannot be created or populated."""


class CollisionError(FileExistsError):
    """A candidate working set directory is already taken."""


@dataclass(frozen=True)
class WorkingSet:
    """Per-run directory owning the copy of the source and all artifacts."""

    source: Path
    root: Path

    @property
    def original(self) -> Path:
        return self.root / f"original{self.source.suffix}"

    @property
    def verification(self) -> Path:
        return self.root / f"verification{self.source.suffix}"

    @property
    def audit_log(self) -> Path:
        return self.root / "audit.log"

    @property
    def manifest(self) -> Path:
        return self.root / "manifest.yaml"


def candidate_dir(source: Path, marker: str, attempt: int) -> Path:
    name = f"{source.name}{marker}" if attempt == 0 else f"{source.name}{marker}-{attempt}"
    return source.with_name(name)


def _claim(path: Path) -> None:
    try:
        path.mkdir()
    except FileExistsError as exc:
        raise CollisionError(str(path)) from exc


def create_working_set(source: Path, *, marker: str = DEFAULT_DIR_MARKER) -> WorkingSet:
    """Create a fresh working set next to *source* and copy the source into it.

    An existing directory is never reused: ``<name>-split`` is tried first,
    then ``<name>-split-1``, ``-2``, and so on.
    """
    if not source.is_file():
        raise WorkspaceError(f"source is not a readable file: {source}")

    for attempt in range(_MAX_ATTEMPTS):
        root = candidate_dir(source, marker, attempt)
        try:
            _claim(root)
        except CollisionError:
            continue
        except OSError as exc:
            raise WorkspaceError(f"cannot create {root}: {exc}") from exc
        break
    else:
        raise WorkspaceError(f"no free working set name for {source}")

    ws = WorkingSet(source=source, root=root)
    try:
        shutil.copyfile(source, ws.original)
    except OSError as exc:
        raise WorkspaceError(f"cannot copy {source} into {root}: {exc}") from exc
    logger.debug("staged %s in %s", source, root)
    return ws
