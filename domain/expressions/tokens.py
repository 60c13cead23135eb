# domain/expressions/tokens.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List

from domain.exceptions import ExpressionError

NUMBER = "number"
STRING = "string"
TEMPLATE = "template"
IDENT = "ident"
OP = "op"
EOF_KIND = "eof"


@dataclass(frozen=True)
class Token:
    kind: str
    value: str
    pos: int


_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
    |(?P<template>\{\{(?P<path>[^{}]*)\}\})
    |(?P<number>(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)
    |(?P<string>"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*')
    |(?P<ident>[A-Za-z_$][A-Za-z0-9_$]*)
    |(?P<op>===|!==|==|!=|<=|>=|&&|\|\||[<>!+\-*/%?:()\[\].,])
    """,
    re.VERBOSE | re.DOTALL,
)

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}


def _unescape(body: str, pos: int) -> str:
    out: List[str] = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch != "\\":
            out.append(ch)
            i += 1
            continue
        i += 1
        esc = body[i]
        if esc == "u":
            hex_digits = body[i + 1 : i + 5]
            if len(hex_digits) != 4 or not all(c in "0123456789abcdefABCDEF" for c in hex_digits):
                raise ExpressionError(f"invalid unicode escape at {pos + i}")
            out.append(chr(int(hex_digits, 16)))
            i += 5
            continue
        out.append(_ESCAPES.get(esc, esc))
        i += 1
    return "".join(out)


def tokenize(source: str) -> List[Token]:
    tokens: List[Token] = []
    pos = 0
    length = len(source)
    while pos < length:
        m = _TOKEN_RE.match(source, pos)
        if m is None:
            raise ExpressionError(f"unexpected character {source[pos]!r} at {pos}", source)
        kind = m.lastgroup
        if kind == "path":
            kind = "template"
        if kind == "template":
            path = m.group("path").strip()
            if not path:
                raise ExpressionError(f"empty template reference at {pos}", source)
            tokens.append(Token(TEMPLATE, path, pos))
        elif kind == "number":
            tokens.append(Token(NUMBER, m.group(), pos))
        elif kind == "string":
            raw = m.group()
            tokens.append(Token(STRING, _unescape(raw[1:-1], pos + 1), pos))
        elif kind == "ident":
            tokens.append(Token(IDENT, m.group(), pos))
        elif kind == "op":
            tokens.append(Token(OP, m.group(), pos))
        pos = m.end()
    tokens.append(Token(EOF_KIND, "", length))
    return tokens
