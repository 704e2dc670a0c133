"""Git subprocess wrapper — repository root and line history queries."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Optional

# One record per commit: \x1e hash \x1f author \x1f email \x1f date \x1f subject \x1f
BLAME_FORMAT = "%x1e%H%x1f%an%x1f%ae%x1f%ci%x1f%s%x1f"


class GitError(Exception):
    """Raised when git is unavailable or returns an unexpected error."""


def _run_git(args: list[str], cwd: Path, timeout: int = 30) -> str:
    """Run a git command and return stdout. Raises GitError on failure."""
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError:
        raise GitError("git is not installed or not on PATH")
    except NotADirectoryError:
        raise GitError(f"not a directory: {cwd}")
    except subprocess.TimeoutExpired:
        raise GitError(f"git command timed out after {timeout}s: git {' '.join(args)}")

    if result.returncode != 0:
        stderr = result.stderr.strip()
        raise GitError(f"git error: {stderr or f'exit status {result.returncode}'}")
    return result.stdout


def get_repo_root(cwd: Optional[Path] = None) -> Path:
    """Return the root of the git repository containing *cwd*."""
    cwd = cwd or Path.cwd()
    out = _run_git(["rev-parse", "--show-toplevel"], cwd=cwd)
    return Path(out.strip())


def blame_line(
    repo_root: Path,
    file_path: str,
    start: int,
    end: int,
    *,
    latest_only: bool = True,
) -> str:
    """Return raw ``git log -L`` metadata for lines *start*..*end* of *file_path*.

    Commits come newest first; with *latest_only* only the newest is listed.
    """
    args = ["log", "--no-color", f"--format={BLAME_FORMAT}", "-L", f"{start},{end}:{file_path}"]
    if latest_only:
        args.insert(1, "-1")
    return _run_git(args, cwd=repo_root)
