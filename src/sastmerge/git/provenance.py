"""Commit provenance — who last touched the line a finding points at.

Resolution is best effort: every failure (git missing, path outside the
repository, untracked file, unparsable output) yields the ``"-"`` sentinel.
"""

from __future__ import annotations

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import TYPE_CHECKING, Callable, List, Optional, Sequence, Tuple

from sastmerge.git.adapter import GitError, blame_line
from sastmerge.git.models import NOT_FOUND, CommitAuthor

if TYPE_CHECKING:
    from sastmerge.findings.models import Finding

logger = logging.getLogger(__name__)

# Earliest-revision marker: resolve line 1 to the commit that introduced it.
EARLIEST_MARKER = "0"

_LINE_SPEC_RE = re.compile(r"^(\d+)(?:-(\d+))?$")
_RECORD_RE = re.compile(
    r"\x1e(?P<hash>[0-9a-f]{40,64})\x1f(?P<author>[^\x1f]*)\x1f(?P<email>[^\x1f]*)"
    r"\x1f(?P<date>[^\x1f]*)\x1f(?P<message>[^\x1f]*)\x1f"
)

BlameFn = Callable[..., str]


def parse_line_spec(line: str) -> Optional[Tuple[int, int, bool]]:
    """Parse ``"N"``, ``"N-M"`` or the earliest marker into (start, end, earliest)."""
    line = line.strip()
    if line == EARLIEST_MARKER:
        return 1, 1, True
    m = _LINE_SPEC_RE.match(line)
    if m is None:
        return None
    start = int(m.group(1))
    end = int(m.group(2)) if m.group(2) else start
    if start < 1 or end < start:
        return None
    return start, end, False


def parse_blame_output(raw: str, *, earliest: bool = False) -> CommitAuthor:
    """Decode ``git log`` output produced with BLAME_FORMAT.

    The first record is the newest commit; *earliest* picks the last one.
    """
    records = list(_RECORD_RE.finditer(raw or ""))
    if not records:
        return CommitAuthor.not_found()
    m = records[-1] if earliest else records[0]

    def _field(name: str) -> str:
        return m.group(name).strip() or NOT_FOUND

    return CommitAuthor(
        author=_field("author"),
        email=_field("email"),
        commit_hash=m.group("hash"),
        message=_field("message"),
        date=_field("date"),
    )


class ProvenanceEnricher:
    """Resolves commit authors for findings inside one repository."""

    def __init__(
        self,
        repo_root: Path,
        *,
        enabled: bool = True,
        blame: BlameFn = blame_line,
    ) -> None:
        self.repo_root = Path(repo_root).resolve()
        self.enabled = enabled
        self._blame = blame

    def _relative_path(self, file_path: str) -> Optional[str]:
        candidate = Path(file_path)
        if not candidate.is_absolute():
            candidate = self.repo_root / candidate
        candidate = candidate.resolve()
        try:
            rel = candidate.relative_to(self.repo_root)
        except ValueError:
            return None
        if not candidate.is_file():
            return None
        return rel.as_posix()

    def resolve(self, line: str, file_path: str) -> CommitAuthor:
        """Return the commit that last changed *line* of *file_path*, or the sentinel."""
        if not self.enabled or not line or not line.strip() or not file_path or not file_path.strip():
            return CommitAuthor.not_found()

        spec = parse_line_spec(line)
        if spec is None:
            return CommitAuthor.not_found()
        start, end, earliest = spec

        relpath = self._relative_path(file_path)
        if relpath is None:
            return CommitAuthor.not_found()

        try:
            raw = self._blame(self.repo_root, relpath, start, end, latest_only=not earliest)
        except GitError as exc:
            logger.debug("No provenance for %s:%s: %s", relpath, line, exc)
            return CommitAuthor.not_found()
        return parse_blame_output(raw, earliest=earliest)

    def enrich(self, finding: Finding) -> Finding:
        if finding.provenance is not None:
            return finding
        line = str(finding.line) if finding.line > 0 else EARLIEST_MARKER
        if finding.end_line > finding.line > 0:
            line = f"{finding.line}-{finding.end_line}"
        return finding.with_provenance(self.resolve(line, finding.file))

    def enrich_all(self, findings: Sequence[Finding], workers: int = 4) -> List[Finding]:
        """Enrich *findings* concurrently, preserving their order."""
        if not self.enabled or not findings:
            return list(findings)
        with ThreadPoolExecutor(max_workers=max(1, workers)) as pool:
            return list(pool.map(self.enrich, findings))
