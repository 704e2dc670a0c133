"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional

SEVERITY_LEVELS = ("info", "low", "medium", "high", "critical")
CONFIDENCE_LEVELS = ("low", "medium", "high")


@dataclass
class ScanConfig:
    ignore: List[str] = field(default_factory=list)  # glob patterns, relative to project root
    workers: int = 4


@dataclass
class CustomRulesConfig:
    paths: List[str] = field(default_factory=list)  # files or directories


@dataclass
class ProvenanceConfig:
    enabled: bool = False


@dataclass
class OutputConfig:
    format: Literal["terminal", "json"] = "terminal"
    show_summary: bool = True


@dataclass
class ToolConfig:
    ignore: bool = False
    image: Optional[str] = None  # overrides the tool's default image


@dataclass
class SastMergeConfig:
    version: str = "1.0"
    scan: ScanConfig = field(default_factory=ScanConfig)
    custom_rules: CustomRulesConfig = field(default_factory=CustomRulesConfig)
    provenance: ProvenanceConfig = field(default_factory=ProvenanceConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    tools: Dict[str, ToolConfig] = field(default_factory=dict)

    def tool(self, name: str) -> ToolConfig:
        """Return the config for tool *name* (defaults when unconfigured)."""
        return self.tools.get(name) or ToolConfig()
