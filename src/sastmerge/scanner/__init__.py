"""Scanner — the pipeline tying rules, tools, and provenance together."""

from sastmerge.scanner.engine import analyze

__all__ = ["analyze"]
