"""Security Code Scan (C#) — SARIF 2.1.0 output."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List

from sastmerge.errors import MissingArtifactError
from sastmerge.findings.models import Finding
from sastmerge.tools.base import ToolNormalizer
from sastmerge.tools.registry import register_tool

BUILD_FAILED_OUTPUT = "Msbuild failed when processing the file"

_LEVEL_TO_SEVERITY = {
    "error": "high",
    "warning": "medium",
    "note": "low",
    "none": "info",
}


def _dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _int(value: Any) -> int:
    return value if isinstance(value, int) and not isinstance(value, bool) else 0


def _text(value: Any) -> str:
    return str(_dict(value).get("text") or "")


@register_tool
class SecurityCodeScan(ToolNormalizer):
    name = "scs"
    image = "sastmerge/security-code-scan:5.6"
    description = "Security Code Scan for .NET solutions (SARIF)"
    failure_markers = (BUILD_FAILED_OUTPUT, "MSBUILD : error")

    def check_preconditions(self, work_dir: Path) -> None:
        for _dirpath, dirnames, filenames in os.walk(work_dir):
            dirnames[:] = [d for d in dirnames if d != ".git"]
            if any(f.endswith(".sln") for f in filenames):
                return
        raise MissingArtifactError(self.name, f"no .sln solution file found under {work_dir}")

    def parse(self, output: str, work_dir: Path) -> List[Finding]:
        data = self.load_json(output)
        if not isinstance(data, dict) or not isinstance(data.get("runs", []), list):
            raise self.parse_error("output is not a SARIF log")

        findings: List[Finding] = []
        for run in data.get("runs", []):
            run = _dict(run)
            rules = _dict(_dict(run.get("tool")).get("driver")).get("rules") or []
            if not isinstance(rules, list):
                raise self.parse_error("'tool.driver.rules' is not a list")
            results = run.get("results") or []
            if not isinstance(results, list):
                raise self.parse_error("'results' is not a list")
            for result in results:
                if not isinstance(result, dict):
                    raise self.parse_error("SARIF result entry is not an object")
                findings.append(self._to_finding(result, rules, work_dir))
        return findings

    def _rule_for(self, result: Dict[str, Any], rules: List[Any]) -> Dict[str, Any]:
        rule_id = result.get("ruleId") or ""
        index = result.get("ruleIndex")
        if rule_id:
            for rule in rules:
                if _dict(rule).get("id") == rule_id:
                    return _dict(rule)
        if isinstance(index, int) and 0 <= index < len(rules):
            return _dict(rules[index])
        return {}

    def _to_finding(self, result: Dict[str, Any], rules: List[Any], work_dir: Path) -> Finding:
        rule = self._rule_for(result, rules)
        locations = result.get("locations") or [{}]
        if not isinstance(locations, list):
            raise self.parse_error("'locations' is not a list")
        physical = _dict(_dict(locations[0]).get("physicalLocation"))
        region = _dict(physical.get("region"))
        uri = str(_dict(physical.get("artifactLocation")).get("uri") or "")

        details = _text(rule.get("fullDescription"))
        if rule.get("helpUri"):
            details = f"{details}\n{rule['helpUri']}".strip()

        return Finding(
            rule_id=result.get("ruleId") or rule.get("id") or "",
            severity=_LEVEL_TO_SEVERITY.get(str(result.get("level", "warning")), "medium"),
            confidence="medium",
            file=self.relative_path(uri, work_dir),
            line=_int(region.get("startLine")),
            column=_int(region.get("startColumn")),
            end_line=_int(region.get("endLine")),
            end_column=_int(region.get("endColumn")),
            message=_text(result.get("message")) or _text(rule.get("shortDescription")),
            details=details,
            code=_text(region.get("snippet")),
            detected_by=self.name,
        )
