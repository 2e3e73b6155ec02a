"""Recursive-descent parser and evaluator for formula arithmetic.

Grammar::

    expr   := term (("+" | "-") term)*
    term   := unary (("*" | "/") unary)*
    unary  := ("+" | "-") unary | atom
    atom   := NUMBER | "(" expr ")"

Parsing produces a small tuple tree which ``evaluate_tree`` then folds, so a
syntax error anywhere in the formula is reported before any arithmetic runs.
"""

from __future__ import annotations

import math
from typing import List, Tuple, Union

from rulesmith.formula.errors import EvalError, FormulaError
from rulesmith.formula.tokenizer import END, LPAREN, MINUS, NUMBER, PLUS, RPAREN, SLASH, STAR, Token, tokenize

MAX_NESTING_DEPTH = 64

Number = Union[int, float]
# ("num", value) | ("neg", node) | (op, left, right)
Node = Tuple


class Parser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.index = 0
        self.depth = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.index]

    def _advance(self) -> Token:
        tok = self.tokens[self.index]
        if tok.kind != END:
            self.index += 1
        return tok

    def _fail(self, message: str) -> FormulaError:
        return FormulaError(EvalError.INVALID_EXPRESSION, message, self.current.pos)

    def _enter(self):
        self.depth += 1
        if self.depth > MAX_NESTING_DEPTH:
            raise self._fail("formula nested too deeply")

    def parse(self) -> Node:
        if self.current.kind == END:
            raise self._fail("empty formula")
        node = self.expr()
        if self.current.kind != END:
            raise self._fail(f"unexpected {self.current.text!r}")
        return node

    def expr(self) -> Node:
        node = self.term()
        while self.current.kind in (PLUS, MINUS):
            op = self._advance().kind
            node = (op, node, self.term())
        return node

    def term(self) -> Node:
        node = self.unary()
        while self.current.kind in (STAR, SLASH):
            op = self._advance().kind
            node = (op, node, self.unary())
        return node

    def unary(self) -> Node:
        if self.current.kind in (PLUS, MINUS):
            op = self._advance().kind
            self._enter()
            operand = self.unary()
            self.depth -= 1
            return ("neg", operand) if op == MINUS else operand
        return self.atom()

    def atom(self) -> Node:
        tok = self.current
        if tok.kind == NUMBER:
            self._advance()
            return ("num", tok.value)
        if tok.kind == LPAREN:
            self._advance()
            self._enter()
            node = self.expr()
            if self.current.kind != RPAREN:
                raise self._fail("missing ')'")
            self._advance()
            self.depth -= 1
            return node
        if tok.kind == END:
            raise self._fail("formula ends unexpectedly")
        raise self._fail(f"unexpected {tok.text!r}")


def parse(source: str) -> Node:
    return Parser(tokenize(source)).parse()


def evaluate_tree(node: Node) -> Number:
    kind = node[0]
    if kind == "num":
        return node[1]
    if kind == "neg":
        return -evaluate_tree(node[1])
    left = evaluate_tree(node[1])
    right = evaluate_tree(node[2])
    if kind == PLUS:
        return left + right
    if kind == MINUS:
        return left - right
    if kind == STAR:
        return left * right
    if right == 0:
        raise FormulaError(EvalError.DIVISION_BY_ZERO, "division by zero")
    return left / right


def compute(source: str) -> Number:
    """Parse and evaluate ``source``; raises FormulaError on any failure.

    Integral float results come back as ``int``.
    """
    try:
        result = evaluate_tree(parse(source))
    except OverflowError:
        raise FormulaError(EvalError.INVALID_EXPRESSION, "numeric overflow") from None
    if isinstance(result, float):
        if not math.isfinite(result):
            raise FormulaError(EvalError.INVALID_EXPRESSION, "result is not finite")
        if result.is_integer():
            return int(result)
    return result


__all__ = ["MAX_NESTING_DEPTH", "Parser", "compute", "evaluate_tree", "parse"]
