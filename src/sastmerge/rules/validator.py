"""Custom rule validation — identity, metadata, language scope, expressions.

Checks run in a fixed order so that a rule always fails with the most
basic problem first. Neither the rule nor the registry is modified.
"""

from __future__ import annotations

import re

from sastmerge.config.schema import CONFIDENCE_LEVELS, SEVERITY_LEVELS
from sastmerge.errors import (
    DuplicateIDError,
    EmptyFieldError,
    InvalidIDFormatError,
    InvalidMatchModeError,
    UnsupportedLanguageError,
)
from sastmerge.matching.evaluator import MATCH_MODE_ALIASES
from sastmerge.rules.ids import RuleIdRegistry
from sastmerge.rules.languages import tag_for
from sastmerge.rules.models import CustomRule

RULE_ID_RE = re.compile(r"HS-(?P<tag>[A-Z]+)-(?P<ordinal>\d+)")


def _is_blank(value: str) -> bool:
    return not isinstance(value, str) or not value.strip()


def _check_required(rule: CustomRule) -> None:
    for name in ("id", "name", "description"):
        if _is_blank(getattr(rule, name)):
            raise EmptyFieldError(name, rule.id)
    if rule.severity not in SEVERITY_LEVELS:
        raise EmptyFieldError("severity", rule.id)
    if rule.confidence not in CONFIDENCE_LEVELS:
        raise EmptyFieldError("confidence", rule.id)
    if not rule.expressions:
        raise EmptyFieldError("expressions", rule.id)
    if _is_blank(rule.language):
        raise EmptyFieldError("language", rule.id)


def validate(rule: CustomRule, registry: RuleIdRegistry) -> None:
    """Raise a ValidationError subclass if *rule* may not be used."""
    _check_required(rule)

    if rule.match_mode and rule.match_mode not in MATCH_MODE_ALIASES:
        raise InvalidMatchModeError(
            f"unknown match mode {rule.match_mode!r}; expected one of "
            f"{', '.join(sorted(MATCH_MODE_ALIASES))}",
            rule.id,
        )

    m = RULE_ID_RE.fullmatch(rule.id)
    if m is None:
        raise InvalidIDFormatError("id must look like HS-<TAG>-<number>", rule.id)

    expected_tag = tag_for(rule.language)
    if expected_tag is None:
        raise UnsupportedLanguageError(
            f"language {rule.language!r} does not support custom rules", rule.id
        )
    if m.group("tag") != expected_tag:
        raise InvalidIDFormatError(
            f"id tag {m.group('tag')!r} does not match language {rule.language!r} "
            f"(expected HS-{expected_tag}-<number>)",
            rule.id,
        )

    if rule.id in registry:
        kind = "built-in" if registry.is_builtin(rule.id) else "custom"
        raise DuplicateIDError(f"id already used by a {kind} rule", rule.id)

