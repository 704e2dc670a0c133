"""Pattern compilation, match evaluation, and the custom rule engine."""

from sastmerge.matching.compiler import CompiledMatcher, CompileResult, compile_expressions
from sastmerge.matching.evaluator import MatchMode, MatchResult, evaluate

__all__ = [
    "CompileResult",
    "CompiledMatcher",
    "MatchMode",
    "MatchResult",
    "compile_expressions",
    "evaluate",
]
