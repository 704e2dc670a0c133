"""Load and merge configuration from .sastmerge.toml and env vars."""

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

from sastmerge.config.schema import (
    CustomRulesConfig,
    OutputConfig,
    ProvenanceConfig,
    SastMergeConfig,
    ScanConfig,
    ToolConfig,
)

CONFIG_FILENAME = ".sastmerge.toml"


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(project_root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = project_root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


def _build_tools(data: Dict[str, Any]) -> Dict[str, ToolConfig]:
    tools = data.get("tools", {})
    if not isinstance(tools, dict):
        raise ConfigError("[tools] must be a table")
    return {name: _build_section(tools, ToolConfig, name) for name in tools}


def _truthy(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes")


def _merge_env_overrides(cfg: SastMergeConfig) -> None:
    """Apply SASTMERGE_* environment variable overrides."""
    if val := os.environ.get("SASTMERGE_FORMAT"):
        if val in ("terminal", "json"):
            cfg.output.format = val  # type: ignore[assignment]
    if val := os.environ.get("SASTMERGE_ENABLE_COMMIT_AUTHOR"):
        cfg.provenance.enabled = _truthy(val)
    if val := os.environ.get("SASTMERGE_IGNORED_TOOLS"):
        for name in (t.strip() for t in val.split(",")):
            if name:
                cfg.tools.setdefault(name, ToolConfig()).ignore = True
    if val := os.environ.get("SASTMERGE_CUSTOM_RULES"):
        sep = ":" if os.name != "nt" else ";"
        cfg.custom_rules.paths.extend(p.strip() for p in val.split(sep) if p.strip())


def load_config(
    project_root: Path,
    config_override: Optional[str] = None,
) -> SastMergeConfig:
    """Load, validate, and return a SastMergeConfig."""
    config_path = find_config_file(project_root, config_override)

    if config_path is None:
        cfg = SastMergeConfig()
    else:
        raw = _parse_toml(config_path)
        try:
            cfg = SastMergeConfig(
                version=str(raw.get("version", "1.0")),
                scan=_build_section(raw, ScanConfig, "scan"),
                custom_rules=_build_section(raw, CustomRulesConfig, "custom_rules"),
                provenance=_build_section(raw, ProvenanceConfig, "provenance"),
                output=_build_section(raw, OutputConfig, "output"),
                tools=_build_tools(raw),
            )
        except TypeError as exc:
            raise ConfigError(f"Invalid configuration in {config_path}: {exc}") from exc

    _merge_env_overrides(cfg)
    return cfg
