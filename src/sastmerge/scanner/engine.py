"""Core scan pipeline — custom rules, tools, provenance.

One failing signal source never suppresses the others: rule and tool
errors are collected on the ScanResult next to the findings.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional, Sequence

from sastmerge.config.schema import SastMergeConfig
from sastmerge.errors import ToolExecutionError
from sastmerge.findings.models import ScanResult
from sastmerge.git.provenance import ProvenanceEnricher
from sastmerge.matching.engine import scan_directory
from sastmerge.rules.ids import RuleIdRegistry
from sastmerge.rules.registry import load_custom_rules
from sastmerge.tools.base import ToolOutcome, run_tool
from sastmerge.tools.registry import get_tool
from sastmerge.tools.sandbox import SandboxRunner

logger = logging.getLogger(__name__)


def _resolve_rule_paths(project_root: Path, paths: Sequence[str]) -> list[Path]:
    resolved = []
    for p in paths:
        path = Path(p)
        resolved.append(path if path.is_absolute() else project_root / path)
    return resolved


def analyze(
    project_root: Path,
    config: SastMergeConfig,
    *,
    runner: Optional[SandboxRunner] = None,
    tools: Sequence[str] = (),
    registry: Optional[RuleIdRegistry] = None,
) -> ScanResult:
    """Run custom rules and *tools* over *project_root*. Returns a ScanResult."""
    start = time.perf_counter()
    result = ScanResult()
    registry = registry or RuleIdRegistry()
    workers = max(1, config.scan.workers)

    # --- Custom rules ---
    rule_paths = _resolve_rule_paths(project_root, config.custom_rules.paths)
    rules, rule_errors = load_custom_rules(rule_paths, registry)
    result.rules_loaded = len(rules)
    result.add_errors(rule_errors)
    result.add_findings(scan_directory(project_root, rules, config.scan.ignore))

    # --- Tools ---
    if runner is not None and tools:
        def _run(name: str) -> ToolOutcome:
            try:
                tool = get_tool(name)
            except KeyError:
                logger.warning("Unknown tool: %s", name)
                return ToolOutcome(name, errors=[ToolExecutionError(name, "unknown tool")])
            return run_tool(tool, runner, project_root, config.tool(name))

        with ThreadPoolExecutor(max_workers=workers) as pool:
            outcomes = list(pool.map(_run, tools))
        for outcome in outcomes:
            if outcome.skipped:
                continue
            result.tools_run.append(outcome.tool)
            result.add_findings(outcome.findings)
            result.add_errors(outcome.errors)

    # --- Provenance ---
    if config.provenance.enabled:
        enricher = ProvenanceEnricher(project_root, enabled=True)
        result.findings = enricher.enrich_all(result.findings, workers=workers)

    result.scan_duration_ms = round((time.perf_counter() - start) * 1000, 2)
    logger.debug(
        "Scan finished: %d findings, %d errors in %.0fms",
        result.total_findings, len(result.errors), result.scan_duration_ms,
    )
    return result
