"""Custom rule engine — applies validated rules to source files.

Each rule is compiled once; a rule whose expressions partly fail to
compile keeps running with the matchers that survived.
"""

from __future__ import annotations

import bisect
import logging
import os
from fnmatch import fnmatch
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple

from sastmerge.findings.models import CUSTOM_RULES, Finding
from sastmerge.matching.compiler import CompileResult
from sastmerge.matching.evaluator import MatchMode, evaluate
from sastmerge.rules.languages import file_globs_for
from sastmerge.rules.models import CustomRule

logger = logging.getLogger(__name__)

_SKIP_DIRS = {".git", ".hg", ".svn"}
_BINARY_SNIFF_BYTES = 8192


class _LineIndex:
    """Offset → (line, column) conversion for one text, both 1-based."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._starts = [0]
        for i, ch in enumerate(text):
            if ch == "\n":
                self._starts.append(i + 1)

    def position(self, offset: int) -> Tuple[int, int]:
        idx = bisect.bisect_right(self._starts, offset) - 1
        return idx + 1, offset - self._starts[idx] + 1

    def line_text(self, line: int) -> str:
        start = self._starts[line - 1]
        end = self._starts[line] - 1 if line < len(self._starts) else len(self._text)
        return self._text[start:end].rstrip("\r")


class RuleMatcher:
    """A validated rule together with its compiled matchers."""

    def __init__(self, rule: CustomRule) -> None:
        self.rule = rule
        self.mode: MatchMode = rule.rule_type
        self.compiled: CompileResult = rule.compile()
        if self.compiled.dropped:
            logger.warning(
                "Rule %s: %d of %d expression(s) failed to compile",
                rule.id, self.compiled.dropped, self.compiled.declared,
            )

    def applies_to(self, relpath: str) -> bool:
        basename = relpath.rsplit("/", 1)[-1]
        return any(fnmatch(basename, g) for g in file_globs_for(self.rule.language))

    def _finding(self, relpath: str, **location) -> Finding:
        return Finding(
            rule_id=self.rule.id,
            severity=self.rule.severity,
            confidence=self.rule.confidence,
            file=relpath,
            detected_by=CUSTOM_RULES,
            message=self.rule.name,
            details=self.rule.description,
            **location,
        )

    def scan_text(self, relpath: str, text: str) -> List[Finding]:
        """Match the rule against one file's text.

        One finding per matching line (the first span on that line wins);
        a NotMatch hit is reported once for the whole file at line 0.
        """
        result = evaluate(self.mode, self.compiled.matchers, text)
        if not result.matched:
            return []
        if not result.spans:
            return [self._finding(relpath, line=0)]

        index = _LineIndex(text)
        findings: List[Finding] = []
        seen_lines: set[int] = set()
        for start, end in result.spans:
            line, column = index.position(start)
            if line in seen_lines:
                continue
            seen_lines.add(line)
            end_line, end_column = index.position(max(end, start))
            findings.append(
                self._finding(
                    relpath,
                    line=line,
                    column=column,
                    end_line=end_line,
                    end_column=end_column,
                    code=index.line_text(line).strip(),
                )
            )
        return findings


def _iter_files(root: Path, ignore: Sequence[str]) -> Iterator[Tuple[Path, str]]:
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in _SKIP_DIRS)
        for name in sorted(filenames):
            path = Path(dirpath) / name
            relpath = path.relative_to(root).as_posix()
            if any(fnmatch(relpath, g) for g in ignore):
                continue
            yield path, relpath


def _read_text(path: Path) -> Optional[str]:
    try:
        data = path.read_bytes()
    except OSError as exc:
        logger.debug("Cannot read %s: %s", path, exc)
        return None
    if b"\x00" in data[:_BINARY_SNIFF_BYTES]:
        return None
    return data.decode("utf-8", errors="replace")


def scan_directory(
    root: Path,
    rules: Sequence[CustomRule],
    ignore: Sequence[str] = (),
) -> List[Finding]:
    """Run every rule over the files under *root* its language covers."""
    matchers = [RuleMatcher(rule) for rule in rules]
    findings: List[Finding] = []
    if not matchers:
        return findings

    for path, relpath in _iter_files(root, ignore):
        applicable = [m for m in matchers if m.applies_to(relpath)]
        if not applicable:
            continue
        text = _read_text(path)
        if text is None:
            continue
        for matcher in applicable:
            findings.extend(matcher.scan_text(relpath, text))
    return findings
