"""Custom rule loading — YAML/JSON rule files validated into CustomRules."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Tuple

import yaml

from sastmerge.errors import RuleFileError, ValidationError
from sastmerge.rules.ids import RuleIdRegistry
from sastmerge.rules.models import CustomRule
from sastmerge.rules.validator import validate

logger = logging.getLogger(__name__)

RULE_FILE_SUFFIXES = (".yaml", ".yml", ".json")


def _as_text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def rule_from_dict(entry: Dict[str, Any]) -> CustomRule:
    """Build a CustomRule from one decoded YAML/JSON mapping.

    Severity and confidence are lower-cased; everything else is kept as
    written so the validator sees the user's input.
    """
    expressions = entry.get("expressions") or []
    if isinstance(expressions, str):
        expressions = [expressions]
    mode = entry.get("type", entry.get("match_mode"))
    return CustomRule(
        id=_as_text(entry.get("id")),
        name=_as_text(entry.get("name")),
        description=_as_text(entry.get("description")),
        severity=_as_text(entry.get("severity")).lower(),
        confidence=_as_text(entry.get("confidence")).lower(),
        language=_as_text(entry.get("language")),
        expressions=tuple(str(e) for e in expressions),
        match_mode=str(mode) if mode else None,
    )


def _read_entries(path: Path) -> List[Dict[str, Any]]:
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text) if path.suffix == ".json" else yaml.safe_load(text)
    except (OSError, UnicodeDecodeError, ValueError, yaml.YAMLError) as exc:
        raise RuleFileError(f"cannot read rules from {path}: {exc}") from exc
    if data is None:
        return []
    if not isinstance(data, list):
        data = [data]
    if not all(isinstance(entry, dict) for entry in data):
        raise RuleFileError(f"{path}: every rule must be a mapping")
    return data


def iter_rule_files(paths: Iterable[Path]) -> List[Path]:
    """Expand directories into their rule files, sorted by name."""
    files: List[Path] = []
    for path in paths:
        if path.is_dir():
            files.extend(
                p for p in sorted(path.iterdir())
                if p.is_file() and p.suffix in RULE_FILE_SUFFIXES
            )
        else:
            files.append(path)
    return files


def load_custom_rules(
    paths: Iterable[Path],
    registry: RuleIdRegistry,
) -> Tuple[List[CustomRule], List[ValidationError]]:
    """Load, validate, and register custom rules from *paths*.

    An invalid rule is reported and skipped; the rest of the batch still
    loads. Ids are unique across every file of the batch.
    """
    rules: List[CustomRule] = []
    errors: List[ValidationError] = []

    for path in iter_rule_files(paths):
        try:
            entries = _read_entries(path)
        except RuleFileError as exc:
            logger.warning("%s", exc)
            errors.append(exc)
            continue

        for entry in entries:
            rule = rule_from_dict(entry)
            try:
                validate(rule, registry)
            except ValidationError as exc:
                logger.warning("Skipping custom rule from %s: %s", path, exc)
                errors.append(exc)
                continue
            registry.claim(rule.id)
            rules.append(rule)

    return rules, errors
