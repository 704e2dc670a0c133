"""Git interface layer — adapter, provenance, models."""

from sastmerge.git.adapter import GitError, blame_line, get_repo_root
from sastmerge.git.models import NOT_FOUND, CommitAuthor
from sastmerge.git.provenance import ProvenanceEnricher, parse_blame_output

__all__ = [
    "NOT_FOUND",
    "CommitAuthor",
    "GitError",
    "ProvenanceEnricher",
    "blame_line",
    "get_repo_root",
    "parse_blame_output",
]
