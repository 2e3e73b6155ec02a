"""Formula evaluation against stat snapshots.

Authors type formulas such as ``VIT * 10 + 50``. Evaluation runs in three
steps:

1. Substitution: each whole identifier naming a stat in the snapshot is
   replaced by that stat's value as a plain decimal literal.
2. Shape check: the substituted text may only contain digits, decimal points,
   whitespace, parentheses and ``+ - * /``. Anything else (leftover
   identifiers, ``;``, quotes) rejects the formula outright.
3. Arithmetic: the text is tokenized and evaluated by the recursive-descent
   parser in ``rulesmith.formula.parser``.

The shape check is a second line of defense only. The parser understands
nothing but numbers and the four operators, so there is no code path by which
formula text can reach Python's own evaluation machinery.

``evaluate`` never raises: failures come back as an ``EvalError`` marker so one
broken formula only blanks its own cell.
"""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Iterable, Optional, Union

from rulesmith.formula.errors import EvalError, FormulaError
from rulesmith.formula.parser import compute
from rulesmith.models.stats import STAT_NAMES, Number, StatSnapshot, snapshot_for

MAX_EXPRESSION_LENGTH = 512

# Standalone names only: a name glued to digits or a decimal point is left
# in place so the shape check rejects it.
_IDENTIFIER_RE = re.compile(r"(?<![\w.])[A-Za-z_][A-Za-z0-9_]*(?![\w.])")
_ALLOWED_RE = re.compile(r"^[\d\s+\-*/().]+$", re.ASCII)


def _literal(value: Number) -> str:
    """Render ``value`` as a decimal literal the tokenizer accepts.

    Negative values keep their sign (the parser handles unary minus); floats
    never use exponent notation.
    """
    if isinstance(value, bool):
        value = int(value)
    if isinstance(value, int):
        return str(value)
    text = format(Decimal(repr(float(value))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"


def substitute(expression: str, snapshot: StatSnapshot) -> str:
    """Replace whole-identifier stat names in ``expression`` with their values.

    Identifiers not present in ``snapshot`` are left as-is and fail the shape
    check afterwards.
    """

    def repl(m: re.Match) -> str:
        name = m.group(0)
        if name in snapshot:
            return _literal(snapshot[name])
        return name

    return _IDENTIFIER_RE.sub(repl, expression)


def evaluate(expression: str, snapshot: StatSnapshot) -> Union[Number, EvalError]:
    """Evaluate ``expression`` against ``snapshot``.

    Returns a finite int/float, or ``EvalError.INVALID_EXPRESSION`` /
    ``EvalError.DIVISION_BY_ZERO``.
    """
    if not isinstance(expression, str):
        return EvalError.INVALID_EXPRESSION
    try:
        text = substitute(expression, snapshot)
    except (TypeError, ValueError, ArithmeticError):
        # non-numeric snapshot values
        return EvalError.INVALID_EXPRESSION
    if len(text) > MAX_EXPRESSION_LENGTH or not _ALLOWED_RE.match(text):
        return EvalError.INVALID_EXPRESSION
    try:
        return compute(text)
    except FormulaError as e:
        return e.kind


def validate_formula(expression: str, names: Iterable[str] = STAT_NAMES) -> Optional[EvalError]:
    """Return the error a formula would produce, or None if it is well formed.

    The formula is checked against the level-1 preview values for ``names``.
    Division by zero is value dependent and is not reported here.
    """
    level_one = snapshot_for(1)
    snapshot = {name: level_one.get(name, 1) for name in names}
    result = evaluate(expression, snapshot)
    if result is EvalError.INVALID_EXPRESSION:
        return result
    return None


__all__ = ["MAX_EXPRESSION_LENGTH", "evaluate", "substitute", "validate_formula"]
