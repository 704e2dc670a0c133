"""Match evaluator — combines a rule's matchers over one text sample.

==========  ==========================================  ==============
Mode        Matched when                                No matchers
==========  ==========================================  ==============
Regular     the first matcher matches                   not matched
OrMatch     at least one matcher matches                not matched
AndMatch    every matcher matches                       not matched
NotMatch    no matcher matches anywhere                 matched
==========  ==========================================  ==============
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence, Tuple

from sastmerge.matching.compiler import CompiledMatcher

Span = Tuple[int, int]


class MatchMode(str, Enum):
    REGULAR = "Regular"
    OR = "OrMatch"
    AND = "AndMatch"
    NOT = "NotMatch"


MATCH_MODE_ALIASES: dict[str, MatchMode] = {
    "Regular": MatchMode.REGULAR,
    "OrMatch": MatchMode.OR,
    "Or": MatchMode.OR,
    "AndMatch": MatchMode.AND,
    "And": MatchMode.AND,
    "NotMatch": MatchMode.NOT,
    "Not": MatchMode.NOT,
}


@dataclass(frozen=True)
class MatchResult:
    matched: bool
    spans: Tuple[Span, ...] = ()


NO_MATCH = MatchResult(False)


def _spans(matcher: CompiledMatcher, text: str) -> List[Span]:
    return [m.span() for m in matcher.pattern.finditer(text)]


def evaluate(mode: MatchMode, matchers: Sequence[CompiledMatcher], text: str) -> MatchResult:
    """Decide whether *text* matches under *mode*."""
    if mode is MatchMode.NOT:
        for matcher in matchers:
            if matcher.pattern.search(text) is not None:
                return NO_MATCH
        return MatchResult(True)

    if not matchers:
        return NO_MATCH

    if mode is MatchMode.REGULAR:
        spans = _spans(matchers[0], text)
        return MatchResult(True, tuple(spans)) if spans else NO_MATCH

    collected: set[Span] = set()
    if mode is MatchMode.OR:
        for matcher in matchers:
            collected.update(_spans(matcher, text))
    elif mode is MatchMode.AND:
        for matcher in matchers:
            spans = _spans(matcher, text)
            if not spans:
                return NO_MATCH
            collected.update(spans)
    else:
        raise ValueError(f"unknown match mode: {mode!r}")

    if not collected:
        return NO_MATCH
    return MatchResult(True, tuple(sorted(collected)))
