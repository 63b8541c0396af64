"""Configuration loading, schema, and defaults."""

from linesplit.config.loader import ConfigError, load_config
from linesplit.config.schema import LineSplitConfig, OutputFormat

__all__ = [
    "ConfigError",
    "LineSplitConfig",
    "OutputFormat",
    "load_config",
]
