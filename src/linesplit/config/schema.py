"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

OutputFormat = Literal["terminal", "json"]

DEFAULT_MAX_LINES = 6000
DEFAULT_DIR_MARKER = "-split"


@dataclass
class SplitConfig:
    max_lines: int = DEFAULT_MAX_LINES
    segment_prefix: str = "file-"
    index_width: int = 4  # zero padding for segment numbers
    dir_marker: str = DEFAULT_DIR_MARKER  # inputs containing this are skipped


@dataclass
class ReassemblyConfig:
    normalize_boundaries: bool = True


@dataclass
class AuditConfig:
    resync_window: int = 64  # lines of lookahead per side on divergence
    confirm_lines: int = 2  # lines that must agree to accept a resync point
    encoding: str = "utf-8"  # used only to render log context
    sample_size: int = 20  # divergences kept in memory for reporting


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"
    verbose: bool = False
    show_summary: bool = True


@dataclass
class BatchConfig:
    max_workers: int = 2
    fail_on_mismatch: bool = False


@dataclass
class LineSplitConfig:
    version: str = "1.0"
    split: SplitConfig = field(default_factory=SplitConfig)
    reassembly: ReassemblyConfig = field(default_factory=ReassemblyConfig)
    audit: AuditConfig = field(default_factory=AuditConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    batch: BatchConfig = field(default_factory=BatchConfig)
