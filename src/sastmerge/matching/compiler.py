"""Pattern compiler — expression strings to reusable matchers.

A failing expression is dropped with a warning; the rule keeps whatever
did compile.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompiledMatcher:
    """One compiled expression, owned by the rule that declared it."""

    expression: str
    pattern: re.Pattern[str]


@dataclass(frozen=True)
class CompileFailure:
    expression: str
    error: str


@dataclass(frozen=True)
class CompileResult:
    matchers: Tuple[CompiledMatcher, ...] = ()
    failures: Tuple[CompileFailure, ...] = ()

    @property
    def dropped(self) -> int:
        return len(self.failures)

    @property
    def declared(self) -> int:
        return len(self.matchers) + len(self.failures)


def compile_expressions(
    expressions: Iterable[str],
    *,
    flags: int = re.MULTILINE,
    owner: str = "",
) -> CompileResult:
    """Compile every expression, folding failures into the result."""
    matchers = []
    failures = []
    for expression in expressions:
        try:
            matchers.append(CompiledMatcher(expression, re.compile(expression, flags)))
        except re.error as exc:
            logger.warning(
                "Dropping expression %r%s: %s",
                expression,
                f" of rule {owner}" if owner else "",
                exc,
            )
            failures.append(CompileFailure(expression, str(exc)))
    return CompileResult(tuple(matchers), tuple(failures))
