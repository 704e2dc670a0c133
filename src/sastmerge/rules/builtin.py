"""Identifiers reserved by the bundled engine rule packs.

Custom rules may not reuse any of these ids. Each pack numbers its rules
contiguously from 1.
"""

from __future__ import annotations

from typing import Dict, FrozenSet

BUILTIN_RULE_COUNTS: Dict[str, int] = {
    "LEAKS": 28,
    "CSHARP": 76,
    "DART": 22,
    "JAVA": 150,
    "KOTLIN": 40,
    "KUBERNETES": 9,
    "JAVASCRIPT": 46,
    "NGINX": 4,
    "SWIFT": 29,
    "JVM": 13,
}


def _expand(counts: Dict[str, int]) -> FrozenSet[str]:
    return frozenset(
        f"HS-{tag}-{n}" for tag, total in counts.items() for n in range(1, total + 1)
    )


BUILTIN_RULE_IDS: FrozenSet[str] = _expand(BUILTIN_RULE_COUNTS)

__all__ = ["BUILTIN_RULE_COUNTS", "BUILTIN_RULE_IDS"]
