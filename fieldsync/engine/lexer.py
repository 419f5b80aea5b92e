#!/usr/bin/env python3
# Ticket: 0001_field_spec_scaffolding
# Design: DESIGN.md
"""
Field-Spec Tokenizer

Turns a field-spec string into a flat token list for the recursive-descent
parser in grammar.py:

    "age:integer:default(18)"
    → IDENT(age) COLON IDENT(integer) COLON IDENT(default) ARG(18) END

A parenthesized argument is a single ARG token. Parentheses nested inside it
are balanced but not interpreted, so "default(now())" yields ARG("now()") and
commas inside an argument never split clauses. Whitespace around tokens and
around a plain argument is dropped.

An argument may also be double-quoted, as in default(" x) "), in which case it
is taken verbatim (a backslash escapes the next character). format_argument()
quotes exactly the values the plain form cannot carry.
"""

import re
from dataclasses import dataclass


class TokenKind:
    IDENT = "ident"
    COLON = "colon"
    COMMA = "comma"
    ARG = "arg"
    OTHER = "other"     # any run of characters the grammar has no use for
    END = "end"


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    start: int
    end: int
    closed: bool = True     # ARG only: False when the closing ')' is missing


_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_OTHER_RE = re.compile(r"[^\s:,(A-Za-z_]+")


def _skip_space(source: str, i: int) -> int:
    while i < len(source) and source[i].isspace():
        i += 1
    return i


def _scan_quoted_argument(source: str, pos: int) -> Token | None:
    """
    Scan a '(' "..." ')' group starting at pos.

    Inside the quotes a backslash takes the next character literally. Returns
    None when the group does not have that shape, so the caller falls back to
    the balanced scan.
    """
    i = _skip_space(source, pos + 1)
    if i >= len(source) or source[i] != '"':
        return None
    i += 1
    chars: list[str] = []
    while i < len(source):
        ch = source[i]
        if ch == "\\" and i + 1 < len(source):
            chars.append(source[i + 1])
            i += 2
            continue
        if ch == '"':
            close = _skip_space(source, i + 1)
            if close < len(source) and source[close] == ")":
                return Token(TokenKind.ARG, "".join(chars), pos, close + 1)
            return None
        chars.append(ch)
        i += 1
    return None


def _scan_argument(source: str, pos: int) -> Token:
    """Scan a balanced '(' ... ')' group starting at pos."""
    depth = 0
    i = pos
    while i < len(source):
        ch = source[i]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return Token(TokenKind.ARG, source[pos + 1 : i].strip(), pos, i + 1)
        i += 1
    return Token(TokenKind.ARG, source[pos + 1 :].strip(), pos, len(source), closed=False)


def tokenize(source: str) -> list[Token]:
    """Tokenize a field-spec string. The list always ends with an END token."""
    tokens: list[Token] = []
    pos = 0
    while pos < len(source):
        ch = source[pos]
        if ch.isspace():
            pos += 1
            continue
        if ch == ":":
            tokens.append(Token(TokenKind.COLON, ch, pos, pos + 1))
            pos += 1
            continue
        if ch == ",":
            tokens.append(Token(TokenKind.COMMA, ch, pos, pos + 1))
            pos += 1
            continue
        if ch == "(":
            token = _scan_quoted_argument(source, pos) or _scan_argument(source, pos)
            tokens.append(token)
            pos = token.end
            continue

        match = _IDENT_RE.match(source, pos) or _OTHER_RE.match(source, pos)
        kind = TokenKind.IDENT if match.re is _IDENT_RE else TokenKind.OTHER
        tokens.append(Token(kind, match.group(0), pos, match.end()))
        pos = match.end()

    tokens.append(Token(TokenKind.END, "", len(source), len(source)))
    return tokens


def _balanced(value: str) -> bool:
    depth = 0
    for ch in value:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth < 0:
                return False
    return depth == 0


def format_argument(value: str) -> str:
    """
    Return argument text that tokenize() reads back as exactly value.

    Plain text is returned as-is. Text with unbalanced parentheses, edge
    whitespace or a leading double quote is wrapped in double quotes with
    backslash escapes.
    """
    if value == value.strip() and not value.startswith('"') and _balanced(value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'
