"""Configuration loading, schema, and defaults."""

from sastmerge.config.loader import ConfigError, load_config
from sastmerge.config.schema import SastMergeConfig, ToolConfig

__all__ = [
    "ConfigError",
    "SastMergeConfig",
    "ToolConfig",
    "load_config",
]
