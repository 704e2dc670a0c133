"""Rule id registry — every rule id known to the current run.

The registry is filled once per load batch (built-in ids first, then each
custom rule that validates) and is read-only while matching.
"""

from __future__ import annotations

from typing import FrozenSet, Iterable, List, Optional, Set

from sastmerge.rules.builtin import BUILTIN_RULE_IDS


class RuleIdRegistry:
    """Every rule id known to the current run, built-in and custom."""

    def __init__(self, builtin_ids: Optional[Iterable[str]] = None) -> None:
        self._builtin: FrozenSet[str] = frozenset(
            BUILTIN_RULE_IDS if builtin_ids is None else builtin_ids
        )
        self._custom: Set[str] = set()

    # ---- registration ----

    def claim(self, rule_id: str) -> None:
        self._custom.add(rule_id)

    # ---- queries ----

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._builtin or rule_id in self._custom

    def __len__(self) -> int:
        return len(self._builtin) + len(self._custom)

    def is_builtin(self, rule_id: str) -> bool:
        return rule_id in self._builtin

    @property
    def custom_ids(self) -> List[str]:
        return sorted(self._custom)
