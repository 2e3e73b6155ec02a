from __future__ import annotations

from enum import Enum


class EvalError(Enum):
    """Per-cell marker for a formula that could not be evaluated."""

    INVALID_EXPRESSION = "invalid_expression"
    DIVISION_BY_ZERO = "division_by_zero"

    @property
    def code(self) -> str:
        return self.value

    def __str__(self) -> str:
        return "Err"


class FormulaError(Exception):
    def __init__(self, kind: EvalError, message: str, position: int | None = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.position = position


__all__ = ["EvalError", "FormulaError"]
