"""Data models for commit provenance."""

from __future__ import annotations

from dataclasses import dataclass

NOT_FOUND = "-"


@dataclass(frozen=True)
class CommitAuthor:
    """Commit metadata attached to a finding's location.

    Every field is ``"-"`` when the commit could not be resolved.
    """

    author: str = NOT_FOUND
    email: str = NOT_FOUND
    commit_hash: str = NOT_FOUND
    message: str = NOT_FOUND
    date: str = NOT_FOUND

    @classmethod
    def not_found(cls) -> "CommitAuthor":
        return cls()

    @property
    def resolved(self) -> bool:
        return self.commit_hash != NOT_FOUND
