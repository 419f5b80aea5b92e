#!/usr/bin/env python3
# Ticket: 0001_field_spec_scaffolding
# Design: DESIGN.md
"""
Modifier Interpreter

Folds the modifier part of a field clause (everything after "name:type") into a
ModifierMap:

    ":nullable:default(18):INDEX"  → {"nullable": True, "default": "18", "index": True}

Rules:
- every Identifier['(' Argument ')'] occurrence counts, wherever it sits;
  colons and commas between them are separators
- a bare identifier is a present flag (True)
- keys are case-insensitive and stored in canonical spelling
- the last occurrence of a repeated key wins
- stray text is reported and ignored; it never drops the field
"""

from .lexer import Token, TokenKind, tokenize
from .models import Diagnostic, ModifierMap, ModifierValue, canonical_modifier_key


def scan_modifiers(
    tokens: list[Token],
    clause: str = "",
) -> tuple[list[tuple[str, ModifierValue]], list[Diagnostic]]:
    """
    Collect (key, value) pairs from a token run.

    Args:
        tokens: Tokens following the type identifier (no END token required).
        clause: Clause text used in diagnostics.

    Returns:
        Pairs in source order, and diagnostics for ignored text.
    """
    pairs: list[tuple[str, ModifierValue]] = []
    diagnostics: list[Diagnostic] = []
    i = 0

    while i < len(tokens):
        token = tokens[i]
        if token.kind in (TokenKind.COLON, TokenKind.COMMA, TokenKind.END):
            i += 1
            continue

        if token.kind == TokenKind.IDENT:
            value: ModifierValue = True
            nxt = tokens[i + 1] if i + 1 < len(tokens) else None
            if nxt is not None and nxt.kind == TokenKind.ARG:
                value = nxt.text
                if not nxt.closed:
                    diagnostics.append(
                        Diagnostic(clause, f"Unterminated argument for modifier '{token.text}'")
                    )
                i += 1
            pairs.append((token.text, value))
            i += 1
            continue

        shown = f"({token.text})" if token.kind == TokenKind.ARG else token.text
        diagnostics.append(Diagnostic(clause, f"Ignored text '{shown}' in modifiers"))
        i += 1

    return pairs, diagnostics


def fold_modifiers(pairs: list[tuple[str, ModifierValue]]) -> ModifierMap:
    """Fold (key, value) pairs into a ModifierMap, last write wins."""
    modifiers: ModifierMap = {}
    for key, value in pairs:
        modifiers[canonical_modifier_key(key)] = value
    return modifiers


def interpret_modifiers(remainder: str) -> tuple[ModifierMap, list[Diagnostic]]:
    """Interpret a standalone modifier string such as ":nullable:default(0)"."""
    pairs, diagnostics = scan_modifiers(tokenize(remainder), remainder.strip())
    return fold_modifiers(pairs), diagnostics
