"""Formula tokenizer.

Splits a substituted formula into NUMBER and operator tokens. Only the
arithmetic alphabet is recognised; any other character raises
``FormulaError(INVALID_EXPRESSION)`` with its offset.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Union

from rulesmith.formula.errors import EvalError, FormulaError

NUMBER = "NUMBER"
PLUS = "+"
MINUS = "-"
STAR = "*"
SLASH = "/"
LPAREN = "("
RPAREN = ")"
END = "END"

OPERATORS = {PLUS, MINUS, STAR, SLASH, LPAREN, RPAREN}

_NUMBER_RE = re.compile(r"[0-9]+(?:\.[0-9]*)?|\.[0-9]+")


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    pos: int
    value: Union[int, float, None] = None


def _number_value(text: str) -> Union[int, float]:
    if "." in text:
        return float(text)
    return int(text)


def tokenize(source: str) -> List[Token]:
    """Return the token list for ``source`` terminated by an END token."""
    tokens: List[Token] = []
    i = 0
    n = len(source)
    while i < n:
        ch = source[i]
        if ch.isspace():
            i += 1
            continue
        if ch in OPERATORS:
            tokens.append(Token(ch, ch, i))
            i += 1
            continue
        m = _NUMBER_RE.match(source, i)
        if m:
            text = m.group(0)
            tokens.append(Token(NUMBER, text, i, _number_value(text)))
            i = m.end()
            continue
        raise FormulaError(EvalError.INVALID_EXPRESSION, f"unexpected character {ch!r}", i)
    tokens.append(Token(END, "", n))
    return tokens


__all__ = ["END", "LPAREN", "MINUS", "NUMBER", "PLUS", "RPAREN", "SLASH", "STAR", "Token", "tokenize"]
