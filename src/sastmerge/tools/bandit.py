"""Bandit (Python) — JSON report output."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

from sastmerge.findings.models import Finding
from sastmerge.tools.base import ToolNormalizer
from sastmerge.tools.registry import register_tool

_SEVERITY = {"LOW": "low", "MEDIUM": "medium", "HIGH": "high", "UNDEFINED": "info"}
_CONFIDENCE = {"LOW": "low", "MEDIUM": "medium", "HIGH": "high", "UNDEFINED": "low"}


def _int(value: Any) -> int:
    return value if isinstance(value, int) and not isinstance(value, bool) else 0


@register_tool
class Bandit(ToolNormalizer):
    name = "bandit"
    image = "sastmerge/bandit:1.7"
    description = "Bandit security linter for Python (JSON)"
    failure_markers = ("Traceback (most recent call last)",)

    def parse(self, output: str, work_dir: Path) -> List[Finding]:
        data = self.load_json(output)
        if not isinstance(data, dict) or not isinstance(data.get("results", []), list):
            raise self.parse_error("output is not a Bandit JSON report")

        findings = []
        for result in data.get("results", []):
            if not isinstance(result, dict):
                raise self.parse_error("Bandit result entry is not an object")
            findings.append(self._to_finding(result, work_dir))
        return findings

    def _to_finding(self, result: Dict[str, Any], work_dir: Path) -> Finding:
        line_range = result.get("line_range") or []
        if not isinstance(line_range, list):
            raise self.parse_error("'line_range' is not a list")
        line_range = [n for n in line_range if isinstance(n, int) and not isinstance(n, bool)]
        details = str(result.get("test_name") or "")
        if result.get("more_info"):
            details = f"{details}\n{result['more_info']}".strip()
        return Finding(
            rule_id=str(result.get("test_id") or ""),
            severity=_SEVERITY.get(str(result.get("issue_severity", "")).upper(), "info"),
            confidence=_CONFIDENCE.get(str(result.get("issue_confidence", "")).upper(), "low"),
            file=self.relative_path(str(result.get("filename") or ""), work_dir),
            line=_int(result.get("line_number")),
            column=_int(result.get("col_offset")),
            end_line=max(line_range) if line_range else 0,
            end_column=_int(result.get("end_col_offset")),
            message=str(result.get("issue_text") or ""),
            details=details,
            code=str(result.get("code") or "").strip(),
            detected_by=self.name,
        )
