#!/usr/bin/env python3
# Ticket: 0001_field_spec_scaffolding
# Design: DESIGN.md
"""
Field Grammar Parser

Recursive-descent parser for the field-spec mini-language:

    FieldList   := Field (',' Field)*
    Field       := Name ':' Type (':' Modifier)*
    Name        := Identifier
    Type        := Identifier
    Modifier    := Identifier ['(' Argument ')']

Type and modifier keywords match case-insensitively. Parsing is best-effort:

- an empty clause (",," or a trailing comma) is ignored silently
- a clause without a valid "name:type" prefix is reported and dropped
- a clause whose type is not registered is reported and dropped
- a repeated field name is reported; both fields are kept in order

The inverse, render_field_spec(), produces the canonical form
"name:type[:modifier[(arg)]]*" joined with commas. An argument the plain form
cannot carry (unbalanced parentheses, edge whitespace) is rendered quoted.
Parsing a rendered string yields descriptors equal to the ones rendered.
"""

import logging

from . import registry
from .lexer import Token, TokenKind, format_argument, tokenize
from .modifiers import fold_modifiers, scan_modifiers
from .models import Diagnostic, FieldDescriptor, Modifier, ModifierValue, ParseResult

logger = logging.getLogger(__name__)


class _ClauseError(Exception):
    """Internal: the clause does not match Name ':' Type."""


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class FieldSpecParser:
    """Parse one field-spec string into descriptors and diagnostics."""

    def __init__(self, source: str):
        self.source = source or ""
        self.tokens = tokenize(self.source)

    def parse(self) -> ParseResult:
        result = ParseResult()
        seen: set[str] = set()

        for clause_tokens in self._split_clauses():
            if not clause_tokens:
                continue
            clause = self._clause_text(clause_tokens)
            field, diagnostics = self._parse_field(clause_tokens, clause)
            result.diagnostics.extend(diagnostics)
            if field is None:
                continue
            if field.name in seen:
                result.diagnostics.append(
                    Diagnostic(clause, f"Duplicate field name '{field.name}'")
                )
            seen.add(field.name)
            result.fields.append(field)

        for diagnostic in result.diagnostics:
            logger.warning("%s", diagnostic)
        return result

    def _split_clauses(self) -> list[list[Token]]:
        """Split the token stream at top-level commas."""
        clauses: list[list[Token]] = [[]]
        for token in self.tokens:
            if token.kind == TokenKind.END:
                break
            if token.kind == TokenKind.COMMA:
                clauses.append([])
            else:
                clauses[-1].append(token)
        return clauses

    def _clause_text(self, tokens: list[Token]) -> str:
        return self.source[tokens[0].start : tokens[-1].end].strip()

    def _parse_field(
        self,
        tokens: list[Token],
        clause: str,
    ) -> tuple[FieldDescriptor | None, list[Diagnostic]]:
        """Field := Name ':' Type (':' Modifier)*"""
        try:
            name = self._expect(tokens, 0, TokenKind.IDENT)
            self._expect(tokens, 1, TokenKind.COLON)
            type_token = self._expect(tokens, 2, TokenKind.IDENT)
        except _ClauseError:
            return None, [Diagnostic(clause, "Invalid field format")]

        type_tag = registry.canonical_type(type_token.text)
        if type_tag is None:
            return None, [Diagnostic(clause, f"Unsupported type '{type_token.text}'")]

        pairs, diagnostics = scan_modifiers(tokens[3:], clause)
        field = FieldDescriptor(
            name=name.text,
            type=type_tag,
            modifiers=fold_modifiers(pairs),
        )
        return field, diagnostics

    @staticmethod
    def _expect(tokens: list[Token], index: int, kind: str) -> Token:
        if index >= len(tokens) or tokens[index].kind != kind:
            raise _ClauseError()
        return tokens[index]


def parse_field_spec(source: str) -> ParseResult:
    """Parse a comma-separated field-spec string."""
    return FieldSpecParser(source).parse()


def parse_single_field(source: str) -> tuple[FieldDescriptor | None, list[Diagnostic]]:
    """Parse one interactively entered field; None when the line is unusable."""
    result = parse_field_spec(source)
    if len(result.fields) > 1:
        diagnostic = Diagnostic(source.strip(), "Enter one field per line")
        logger.warning("%s", diagnostic)
        return None, result.diagnostics + [diagnostic]
    field = result.fields[0] if result.fields else None
    return field, result.diagnostics


# ---------------------------------------------------------------------------
# Canonical rendering
# ---------------------------------------------------------------------------


def _ordered_keys(modifiers: dict[str, ModifierValue]) -> list[str]:
    known = [key for key in Modifier.RENDER_ORDER if key in modifiers]
    extra = sorted(key for key in modifiers if key not in Modifier.RENDER_ORDER)
    return known + extra


def render_modifier(key: str, value: ModifierValue) -> str | None:
    """Render one modifier; None for an absent (False/None) value."""
    if value is True:
        return key
    if value is False or value is None:
        return None
    return f"{key}({format_argument(value)})"


def render_field(field: FieldDescriptor) -> str:
    parts = [field.name, field.type]
    for key in _ordered_keys(field.modifiers):
        rendered = render_modifier(key, field.modifiers[key])
        if rendered is not None:
            parts.append(rendered)
    return ":".join(parts)


def render_field_spec(fields: list[FieldDescriptor]) -> str:
    """Render descriptors in canonical form, accepted unchanged by the parser."""
    return ",".join(render_field(f) for f in fields)
