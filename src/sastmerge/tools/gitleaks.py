"""Gitleaks (secrets) — JSON report output.

The secret itself is never copied into a finding; the matched snippet is
kept with the secret redacted.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from sastmerge.findings.models import Finding
from sastmerge.git.models import CommitAuthor
from sastmerge.tools.base import ToolNormalizer
from sastmerge.tools.registry import register_tool

REDACTED = "[REDACTED]"


def _int(value: Any) -> int:
    return value if isinstance(value, int) and not isinstance(value, bool) else 0


@register_tool
class Gitleaks(ToolNormalizer):
    name = "gitleaks"
    image = "sastmerge/gitleaks:8"
    description = "Gitleaks secret detection (JSON)"
    failure_markers = ("level=fatal", "FTL ")

    def parse(self, output: str, work_dir: Path) -> List[Finding]:
        data = self.load_json(output)
        if data is None:
            return []
        if not isinstance(data, list):
            raise self.parse_error("output is not a Gitleaks JSON array")

        findings = []
        for leak in data:
            if not isinstance(leak, dict):
                raise self.parse_error("Gitleaks entry is not an object")
            findings.append(self._to_finding(leak, work_dir))
        return findings

    def _provenance(self, leak: Dict[str, Any]) -> Optional[CommitAuthor]:
        commit = str(leak.get("Commit") or "")
        if not commit:
            return None
        return CommitAuthor(
            author=str(leak.get("Author") or "-"),
            email=str(leak.get("Email") or "-"),
            commit_hash=commit,
            message=str(leak.get("Message") or "-").strip() or "-",
            date=str(leak.get("Date") or "-"),
        )

    def _to_finding(self, leak: Dict[str, Any], work_dir: Path) -> Finding:
        secret = str(leak.get("Secret") or "")
        snippet = str(leak.get("Match") or "")
        if secret:
            snippet = snippet.replace(secret, REDACTED)
        return Finding(
            rule_id=str(leak.get("RuleID") or ""),
            severity="critical",
            confidence="high",
            file=self.relative_path(str(leak.get("File") or ""), work_dir),
            line=_int(leak.get("StartLine")),
            column=_int(leak.get("StartColumn")),
            end_line=_int(leak.get("EndLine")),
            end_column=_int(leak.get("EndColumn")),
            message=str(leak.get("Description") or "Secret detected"),
            code=snippet,
            detected_by=self.name,
            provenance=self._provenance(leak),
        )
