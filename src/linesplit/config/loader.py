"""Load and merge configuration from .linesplit.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from linesplit.config.defaults import CONFIG_FILENAME
from linesplit.config.schema import (
    AuditConfig,
    BatchConfig,
    LineSplitConfig,
    OutputConfig,
    ReassemblyConfig,
    SplitConfig,
)


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(base_dir: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = base_dir / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _positive_int(val: str) -> Optional[int]:
    try:
        n = int(val)
    except ValueError:
        return None
    return n if n > 0 else None


def _merge_env_overrides(cfg: LineSplitConfig) -> None:
    """Apply LINESPLIT_* environment variable overrides."""
    if val := os.environ.get("LINESPLIT_LINES"):
        if (n := _positive_int(val)) is not None:
            cfg.split.max_lines = n
    if val := os.environ.get("LINESPLIT_MAX_WORKERS"):
        if (n := _positive_int(val)) is not None:
            cfg.batch.max_workers = n
    if val := os.environ.get("LINESPLIT_FORMAT"):
        if val in ("terminal", "json"):
            cfg.output.format = val  # type: ignore[assignment]
    if val := os.environ.get("LINESPLIT_FAIL_ON_MISMATCH"):
        cfg.batch.fail_on_mismatch = val.lower() in ("1", "true", "yes")


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


def _validate(cfg: LineSplitConfig) -> None:
    if not isinstance(cfg.split.max_lines, int) or cfg.split.max_lines < 1:
        raise ConfigError("split.max_lines must be a positive integer")
    if not cfg.split.dir_marker:
        raise ConfigError("split.dir_marker must not be empty")
    if cfg.batch.max_workers < 1:
        raise ConfigError("batch.max_workers must be at least 1")
    if cfg.audit.resync_window < 1 or cfg.audit.confirm_lines < 1:
        raise ConfigError("audit.resync_window and audit.confirm_lines must be positive")
    if cfg.output.format not in ("terminal", "json"):
        raise ConfigError(f"Unknown output.format: {cfg.output.format}")


def load_config(
    base_dir: Path,
    config_override: Optional[str] = None,
) -> LineSplitConfig:
    """Load, validate, and return a LineSplitConfig."""
    config_path = find_config_file(base_dir, config_override)

    if config_path is None:
        cfg = LineSplitConfig()
    else:
        raw = _parse_toml(config_path)
        cfg = LineSplitConfig(
            version=raw.get("version", "1.0"),
            split=_build_section(raw, SplitConfig, "split"),
            reassembly=_build_section(raw, ReassemblyConfig, "reassembly"),
            audit=_build_section(raw, AuditConfig, "audit"),
            output=_build_section(raw, OutputConfig, "output"),
            batch=_build_section(raw, BatchConfig, "batch"),
        )

    _merge_env_overrides(cfg)
    _validate(cfg)
    return cfg
