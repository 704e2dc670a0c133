"""Custom rule data model — user-authored, immutable once loaded."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from sastmerge.matching.compiler import CompileResult, compile_expressions
from sastmerge.matching.evaluator import MATCH_MODE_ALIASES, MatchMode


@dataclass(frozen=True)
class CustomRule:
    """A detection rule defined in a custom rules file.

    ``match_mode`` keeps the raw configured value so the validator can
    reject unknown modes; ``rule_type`` is the resolved :class:`MatchMode`.
    """

    id: str = ""
    name: str = ""
    description: str = ""
    severity: str = ""
    confidence: str = ""
    language: str = ""
    expressions: Tuple[str, ...] = ()
    match_mode: Optional[str] = None

    @property
    def rule_type(self) -> MatchMode:
        if not self.match_mode:
            return MatchMode.REGULAR
        try:
            return MATCH_MODE_ALIASES[self.match_mode]
        except KeyError:
            raise ValueError(f"unknown match mode {self.match_mode!r} for rule {self.id!r}") from None

    def compile(self) -> CompileResult:
        return compile_expressions(self.expressions, owner=self.id)

    def __str__(self) -> str:
        return (
            f"{self.id or '<no id>'} ({self.language or '?'}, {self.severity or '?'}): "
            f"{self.name or '<unnamed>'} [{self.match_mode or MatchMode.REGULAR.value}, "
            f"{len(self.expressions)} expression(s)]"
        )
