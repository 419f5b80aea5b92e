"""
Tests for engine/modifiers.py

Validates:
- bare identifiers become True flags, identifier(arg) becomes a string value
- keys are canonicalised case-insensitively
- the last occurrence of a repeated key wins
- stray text and unterminated arguments are reported, not fatal
"""

from fieldsync.engine.lexer import tokenize
from fieldsync.engine.modifiers import fold_modifiers, interpret_modifiers, scan_modifiers


def test_interpret_flags_and_values():
    modifiers, diagnostics = interpret_modifiers(":nullable:default(18):INDEX")
    assert modifiers == {"nullable": True, "default": "18", "index": True}
    assert diagnostics == []


def test_interpret_without_leading_colon():
    modifiers, _ = interpret_modifiers("unique")
    assert modifiers == {"unique": True}


def test_interpret_empty_remainder():
    modifiers, diagnostics = interpret_modifiers("")
    assert modifiers == {}
    assert diagnostics == []


def test_interpret_canonical_keys():
    modifiers, _ = interpret_modifiers(":onupdate(restrict):ONDELETE(cascade)")
    assert modifiers == {"onUpdate": "restrict", "onDelete": "cascade"}


def test_unknown_keys_are_kept_lowercased():
    modifiers, _ = interpret_modifiers(":Comment(hello)")
    assert modifiers == {"comment": "hello"}


def test_last_occurrence_wins():
    modifiers, _ = interpret_modifiers(":default(1):nullable:default(2)")
    assert modifiers == {"default": "2", "nullable": True}


def test_argument_is_opaque_text():
    modifiers, _ = interpret_modifiers(":default(concat(a, b))")
    assert modifiers == {"default": "concat(a, b)"}


def test_stray_text_is_reported():
    modifiers, diagnostics = interpret_modifiers(":nullable:!!:index")
    assert modifiers == {"nullable": True, "index": True}
    assert len(diagnostics) == 1
    assert diagnostics[0].message == "Ignored text '!!' in modifiers"


def test_orphan_argument_is_reported():
    modifiers, diagnostics = interpret_modifiers(":(18)")
    assert modifiers == {}
    assert diagnostics[0].message == "Ignored text '(18)' in modifiers"


def test_unterminated_argument_is_reported_value_kept():
    modifiers, diagnostics = interpret_modifiers(":default(18")
    assert modifiers == {"default": "18"}
    assert diagnostics[0].message == "Unterminated argument for modifier 'default'"


def test_scan_modifiers_keeps_source_order():
    pairs, _ = scan_modifiers(tokenize(":b:a(1):b(2)"))
    assert pairs == [("b", True), ("a", "1"), ("b", "2")]
    assert fold_modifiers(pairs) == {"b": "2", "a": "1"}
