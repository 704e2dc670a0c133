"""Error taxonomy shared by the rule, tool, and scanner layers.

Validation errors block only the offending rule; tool errors are recorded
on the run result and never abort the other tools.
"""

from __future__ import annotations

from typing import Optional


class SastMergeError(Exception):
    """Base class for every classified error."""


# ---- custom rules ----


class ValidationError(SastMergeError):
    """A custom rule definition is malformed or conflicting."""

    def __init__(self, message: str, rule_id: Optional[str] = None) -> None:
        self.rule_id = rule_id or ""
        prefix = f"[{rule_id}] " if rule_id else ""
        super().__init__(f"{prefix}{message}")


class EmptyFieldError(ValidationError):
    def __init__(self, field_name: str, rule_id: Optional[str] = None) -> None:
        self.field_name = field_name
        super().__init__(f"field '{field_name}' is empty or invalid", rule_id)


class InvalidIDFormatError(ValidationError):
    pass


class UnsupportedLanguageError(ValidationError):
    pass


class DuplicateIDError(ValidationError):
    pass


class InvalidMatchModeError(ValidationError):
    pass


class RuleFileError(ValidationError):
    """A custom rule file could not be read or decoded."""


# ---- tools ----


class ToolError(SastMergeError):
    """Base for errors attributed to a single integrated tool."""

    def __init__(self, tool: str, message: str) -> None:
        self.tool = tool
        super().__init__(f"{tool}: {message}")


class ToolExecutionError(ToolError):
    """The sandbox or the tool itself failed."""


class MissingArtifactError(ToolError):
    """A precondition for running the tool is absent; the tool is skipped."""


class OutputParseError(ToolError):
    """The tool produced output that could not be decoded."""
