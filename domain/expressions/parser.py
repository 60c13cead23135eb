# domain/expressions/parser.py
"""
Pratt parser for the template expression language.

The grammar has no identifiers other than a handful of literal keywords and
no call syntax, so an expression can only read values out of the context.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Dict, List

from domain.exceptions import ExpressionError
from domain.expressions.nodes import (
    ArrayLiteral,
    Binary,
    Conditional,
    Index,
    Literal,
    Logical,
    Member,
    Node,
    Reference,
    Unary,
)
from domain.expressions.tokens import EOF_KIND, IDENT, NUMBER, OP, STRING, TEMPLATE, Token, tokenize

KEYWORDS: Dict[str, object] = {
    "true": True,
    "false": False,
    "null": None,
    "undefined": None,
    "NaN": float("nan"),
    "Infinity": float("inf"),
}

BLOCKED_MEMBERS = frozenset({"constructor", "prototype", "__proto__"})

# left binding power
_LBP: Dict[str, int] = {
    "?": 1,
    "||": 2,
    "&&": 3,
    "==": 4, "!=": 4, "===": 4, "!==": 4,
    "<": 5, "<=": 5, ">": 5, ">=": 5,
    "+": 6, "-": 6,
    "*": 7, "/": 7, "%": 7,
    ".": 9, "[": 9, "(": 9,
}
_PREFIX_BP = 8


class _Parser:
    def __init__(self, source: str, tokens: List[Token]):
        self._source = source
        self._tokens = tokens
        self._i = 0

    def parse(self) -> Node:
        node = self._expression(0)
        tok = self._peek()
        if tok.kind != EOF_KIND:
            raise self._error(f"unexpected token {tok.value!r}", tok)
        return node

    def _peek(self) -> Token:
        return self._tokens[self._i]

    def _advance(self) -> Token:
        tok = self._tokens[self._i]
        if tok.kind != EOF_KIND:
            self._i += 1
        return tok

    def _expect(self, op: str) -> Token:
        tok = self._advance()
        if tok.kind != OP or tok.value != op:
            raise self._error(f"expected {op!r}", tok)
        return tok

    def _error(self, message: str, tok: Token) -> ExpressionError:
        return ExpressionError(f"{message} at {tok.pos}", self._source)

    def _lbp(self, tok: Token) -> int:
        if tok.kind != OP:
            return 0
        return _LBP.get(tok.value, 0)

    def _expression(self, rbp: int) -> Node:
        left = self._nud(self._advance())
        while rbp < self._lbp(self._peek()):
            left = self._led(self._advance(), left)
        return left

    def _nud(self, tok: Token) -> Node:
        if tok.kind == NUMBER:
            text = tok.value
            if any(c in text for c in ".eE"):
                return Literal(float(text))
            return Literal(int(text))
        if tok.kind == STRING:
            return Literal(tok.value)
        if tok.kind == TEMPLATE:
            return Reference(tok.value)
        if tok.kind == IDENT:
            if tok.value in KEYWORDS:
                return Literal(KEYWORDS[tok.value])
            raise self._error(f"unknown identifier {tok.value!r}", tok)
        if tok.kind == OP:
            if tok.value in ("!", "-", "+"):
                return Unary(tok.value, self._expression(_PREFIX_BP))
            if tok.value == "(":
                inner = self._expression(0)
                self._expect(")")
                return inner
            if tok.value == "[":
                return self._array()
        if tok.kind == EOF_KIND:
            raise self._error("unexpected end of expression", tok)
        raise self._error(f"unexpected token {tok.value!r}", tok)

    def _array(self) -> Node:
        items: List[Node] = []
        if self._peek().kind == OP and self._peek().value == "]":
            self._advance()
            return ArrayLiteral(())
        while True:
            items.append(self._expression(0))
            tok = self._advance()
            if tok.kind == OP and tok.value == "]":
                return ArrayLiteral(tuple(items))
            if tok.kind != OP or tok.value != ",":
                raise self._error("expected ',' or ']'", tok)

    def _led(self, tok: Token, left: Node) -> Node:
        op = tok.value
        if op == "?":
            consequent = self._expression(0)
            self._expect(":")
            # right associative
            alternate = self._expression(0)
            return Conditional(left, consequent, alternate)
        if op in ("&&", "||"):
            return Logical(op, left, self._expression(_LBP[op]))
        if op == ".":
            name_tok = self._advance()
            if name_tok.kind != IDENT:
                raise self._error("expected property name", name_tok)
            name = name_tok.value
            if name in BLOCKED_MEMBERS or name.startswith("__"):
                raise self._error(f"access to {name!r} is not allowed", name_tok)
            return Member(left, name)
        if op == "[":
            index = self._expression(0)
            self._expect("]")
            return Index(left, index)
        if op == "(":
            raise self._error("function calls are not allowed", tok)
        return Binary(op, left, self._expression(_LBP[op]))


@lru_cache(maxsize=512)
def parse_expression(source: str) -> Node:
    """Parse ``source`` into an AST. Raises ExpressionError."""
    return _Parser(source, tokenize(source)).parse()
