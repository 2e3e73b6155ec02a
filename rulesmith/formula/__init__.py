"""Restricted arithmetic formulas for derived stats.

Public surface::

    from rulesmith.formula import evaluate, EvalError
    evaluate("VIT * 10 + 50", snapshot)   # -> 200 or an EvalError marker
"""

from .errors import EvalError, FormulaError  # noqa: F401 re-export
from .evaluator import MAX_EXPRESSION_LENGTH, evaluate, substitute, validate_formula  # noqa: F401
from .parser import MAX_NESTING_DEPTH, compute  # noqa: F401

__all__ = [
    "EvalError",
    "FormulaError",
    "MAX_EXPRESSION_LENGTH",
    "MAX_NESTING_DEPTH",
    "compute",
    "evaluate",
    "substitute",
    "validate_formula",
]
