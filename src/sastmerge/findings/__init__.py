"""Canonical finding and run result models."""

from sastmerge.findings.models import CUSTOM_RULES, Finding, ScanResult

__all__ = ["CUSTOM_RULES", "Finding", "ScanResult"]
