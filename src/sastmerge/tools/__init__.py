"""Tool output normalizers — one variant per integrated tool."""

from sastmerge.tools import bandit, gitleaks, scs  # noqa: F401  (registration)
from sastmerge.tools.base import ToolNormalizer, ToolOutcome, run_tool
from sastmerge.tools.registry import available_tools, get_tool, register_tool
from sastmerge.tools.sandbox import (
    CapturedOutputRunner,
    SandboxError,
    SandboxRunner,
    SandboxTimeout,
)

__all__ = [
    "CapturedOutputRunner",
    "SandboxError",
    "SandboxRunner",
    "SandboxTimeout",
    "ToolNormalizer",
    "ToolOutcome",
    "available_tools",
    "get_tool",
    "register_tool",
    "run_tool",
]
