"""Sandbox runner interface — executes a tool image over a mounted directory."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Protocol


class SandboxError(Exception):
    """The sandbox could not run the image or the run failed."""


class SandboxTimeout(SandboxError):
    """The run exceeded the deadline owned by the sandbox."""


class SandboxRunner(Protocol):
    def run(self, image: str, work_dir: Path) -> str:
        """Run *image* with *work_dir* mounted at ``/src``; return stdout."""
        ...


class CapturedOutputRunner:
    """Replays tool output captured earlier, keyed by image reference."""

    def __init__(self, outputs: Mapping[str, Path]) -> None:
        self._outputs = dict(outputs)
        self.calls: list[str] = []

    def run(self, image: str, work_dir: Path) -> str:
        self.calls.append(image)
        path = self._outputs.get(image)
        if path is None:
            raise SandboxError(f"no captured output for image {image}")
        try:
            return path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise SandboxError(f"cannot read captured output {path}: {exc}") from exc
