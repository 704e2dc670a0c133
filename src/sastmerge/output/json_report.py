"""JSON reporter for CI pipelines and uploads."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from sastmerge import __version__
from sastmerge.findings.models import Finding, ScanResult


def _finding_dict(f: Finding) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "rule": f.rule_id,
        "severity": f.severity,
        "confidence": f.confidence,
        "file": f.file,
        "line": f.line,
        "column": f.column,
        "end_line": f.end_line,
        "end_column": f.end_column,
        "message": f.message,
        "details": f.details,
        "detected_by": f.detected_by,
        **({"code": f.code} if f.code else {}),
    }
    if f.provenance is not None:
        data["commit"] = {
            "author": f.provenance.author,
            "email": f.provenance.email,
            "hash": f.provenance.commit_hash,
            "message": f.provenance.message,
            "date": f.provenance.date,
        }
    return data


def to_dict(result: ScanResult) -> Dict[str, Any]:
    """Convert ScanResult to a JSON-serialisable dict."""
    findings_list: List[Dict[str, Any]] = [_finding_dict(f) for f in result.findings]
    return {
        "version": __version__,
        "total_findings": result.total_findings,
        "findings": findings_list,
        "errors": result.warnings,
        "tools": result.tools_run,
        "custom_rules": result.rules_loaded,
        "scan_duration_ms": result.scan_duration_ms,
    }


def render(result: ScanResult) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(result), indent=2)
