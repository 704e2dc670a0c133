"""Tool registry — one normalizer class per integrated tool."""

from __future__ import annotations

from typing import Dict, List, Type, TypeVar

from sastmerge.tools.base import ToolNormalizer

_TOOLS: Dict[str, Type[ToolNormalizer]] = {}

T = TypeVar("T", bound=Type[ToolNormalizer])


def register_tool(cls: T) -> T:
    """Class decorator adding a normalizer to the registry."""
    if cls.name in _TOOLS:
        raise ValueError(f"tool {cls.name!r} is already registered")
    _TOOLS[cls.name] = cls
    return cls


def get_tool(name: str) -> ToolNormalizer:
    try:
        return _TOOLS[name]()
    except KeyError:
        raise KeyError(f"unknown tool {name!r}; available: {', '.join(available_tools())}") from None


def available_tools() -> List[str]:
    return sorted(_TOOLS)
