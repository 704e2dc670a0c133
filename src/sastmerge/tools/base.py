"""Tool normalizer base — shared parsing helpers and the run sequence.

Order of a tool run: ignore check, precondition probe, sandbox, parse.
Each step may end the run with a classified error; nothing raises past
:func:`run_tool`.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any, ClassVar, List, Tuple
from urllib.parse import unquote, urlsplit

from sastmerge.config.schema import ToolConfig
from sastmerge.errors import (
    MissingArtifactError,
    OutputParseError,
    ToolError,
    ToolExecutionError,
)
from sastmerge.findings.models import Finding
from sastmerge.tools.sandbox import SandboxRunner, SandboxTimeout

logger = logging.getLogger(__name__)

CONTAINER_ROOT = "/src"


class ToolNormalizer(ABC):
    """Turns one third-party tool's native report into canonical Findings."""

    name: ClassVar[str]
    image: ClassVar[str]
    description: ClassVar[str] = ""
    failure_markers: ClassVar[Tuple[str, ...]] = ()

    def check_preconditions(self, work_dir: Path) -> None:
        """Raise MissingArtifactError if the tool cannot run on *work_dir*."""

    def check_failure(self, output: str) -> None:
        for marker in self.failure_markers:
            if marker in output:
                raise ToolExecutionError(self.name, f"tool reported a failure ({marker!r})")

    def normalize(self, output: str, work_dir: Path) -> List[Finding]:
        self.check_failure(output)
        if not output.strip():
            return []
        return self.parse(output, work_dir)

    @abstractmethod
    def parse(self, output: str, work_dir: Path) -> List[Finding]:
        """Decode non-empty *output*, one Finding per result, in output order."""

    # ---- helpers ----

    def load_json(self, output: str) -> Any:
        try:
            return json.loads(output)
        except ValueError as exc:
            raise OutputParseError(self.name, f"output is not valid JSON: {exc}") from exc

    def parse_error(self, message: str) -> OutputParseError:
        return OutputParseError(self.name, message)

    def relative_path(self, uri: str, work_dir: Path) -> str:
        """Map a tool-reported file URI to a path relative to the scanned root."""
        if not uri:
            return ""
        path = unquote(urlsplit(uri).path) if uri.startswith("file:") else uri
        posix = PurePosixPath(path)
        root = PurePosixPath(CONTAINER_ROOT)
        if posix.is_absolute():
            for base in (root, PurePosixPath(Path(work_dir).resolve().as_posix())):
                try:
                    return posix.relative_to(base).as_posix()
                except ValueError:
                    continue
            return posix.as_posix()
        text = posix.as_posix()
        return text[2:] if text.startswith("./") else text


@dataclass
class ToolOutcome:
    tool: str
    findings: List[Finding] = field(default_factory=list)
    errors: List[ToolError] = field(default_factory=list)
    skipped: bool = False


def run_tool(
    tool: ToolNormalizer,
    runner: SandboxRunner,
    work_dir: Path,
    config: ToolConfig,
) -> ToolOutcome:
    """Run *tool* through *runner* and normalize its output."""
    if config.ignore:
        logger.debug("Tool %s is ignored by configuration", tool.name)
        return ToolOutcome(tool.name, skipped=True)

    try:
        tool.check_preconditions(work_dir)
    except MissingArtifactError as exc:
        logger.warning("%s", exc)
        return ToolOutcome(tool.name, errors=[exc])

    image = config.image or tool.image
    try:
        output = runner.run(image, work_dir)
    except SandboxTimeout as exc:
        logger.warning("Sandbox run of %s timed out: %s", image, exc)
        return ToolOutcome(tool.name, errors=[ToolExecutionError(tool.name, f"timed out: {exc}")])
    except Exception as exc:
        logger.warning("Sandbox run of %s failed: %s", image, exc)
        return ToolOutcome(tool.name, errors=[ToolExecutionError(tool.name, str(exc) or type(exc).__name__)])

    try:
        findings = tool.normalize(output, work_dir)
    except ToolError as exc:
        logger.warning("%s", exc)
        return ToolOutcome(tool.name, errors=[exc])
    except (KeyError, IndexError, TypeError, ValueError, AttributeError) as exc:
        error = OutputParseError(tool.name, f"unexpected report structure: {exc!r}")
        logger.warning("%s", error)
        return ToolOutcome(tool.name, errors=[error])
    return ToolOutcome(tool.name, findings=findings)
