"""Custom rules — model, validation, id registry."""

from sastmerge.rules.models import CustomRule
from sastmerge.rules.ids import RuleIdRegistry
from sastmerge.rules.registry import load_custom_rules
from sastmerge.rules.validator import validate

__all__ = ["CustomRule", "RuleIdRegistry", "load_custom_rules", "validate"]
