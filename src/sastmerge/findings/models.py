"""Finding data models."""

from __future__ import annotations

import dataclasses
import threading
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from sastmerge.errors import SastMergeError
from sastmerge.git.models import CommitAuthor

CUSTOM_RULES = "custom-rules"


@dataclass(frozen=True)
class Finding:
    """Canonical, tool-agnostic vulnerability record.

    Lines and columns are 1-based; ``line == 0`` marks a whole-file finding.
    """

    rule_id: str
    severity: str
    confidence: str
    file: str
    line: int
    detected_by: str
    message: str
    column: int = 0
    end_line: int = 0
    end_column: int = 0
    details: str = ""
    code: str = ""
    provenance: Optional[CommitAuthor] = None

    def with_provenance(self, author: CommitAuthor) -> "Finding":
        return dataclasses.replace(self, provenance=author)


@dataclass
class ScanResult:
    """Complete result of a run: findings plus one error per affected tool or rule."""

    findings: List[Finding] = field(default_factory=list)
    errors: List[SastMergeError] = field(default_factory=list)
    tools_run: List[str] = field(default_factory=list)
    rules_loaded: int = 0
    scan_duration_ms: float = 0.0
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def add_findings(self, findings: Iterable[Finding]) -> None:
        with self._lock:
            self.findings.extend(findings)

    def add_error(self, error: SastMergeError) -> None:
        with self._lock:
            self.errors.append(error)

    def add_errors(self, errors: Iterable[SastMergeError]) -> None:
        with self._lock:
            self.errors.extend(errors)

    @property
    def total_findings(self) -> int:
        return len(self.findings)

    @property
    def warnings(self) -> List[str]:
        return [str(e) for e in self.errors]
