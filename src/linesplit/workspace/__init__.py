"""Workspace — input discovery, working sets, manifests."""

from linesplit.workspace.discovery import resolve_inputs
from linesplit.workspace.manifest import Manifest, ManifestError, load_manifest, write_manifest
from linesplit.workspace.staging import (
    CollisionError,
    WorkingSet,
    WorkspaceError,
    create_working_set,
)

__all__ = [
    "CollisionError",
    "Manifest",
    "ManifestError",
    "WorkingSet",
    "WorkspaceError",
    "create_working_set",
    "load_manifest",
    "resolve_inputs",
    "write_manifest",
]
