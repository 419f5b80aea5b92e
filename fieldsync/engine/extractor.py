#!/usr/bin/env python3
# Ticket: 0001_field_spec_scaffolding
# Design: DESIGN.md
"""
Reverse Schema Extractor

Recovers field descriptors from generated migration source so that a schema
edited by hand can be fed back through the forward pipeline.

    Schema::create('posts', function (Blueprint $table) {
        $table->id();
        $table->string('title');
        $table->text('body')->nullable();
        $table->foreignId('author_id')->constrained('authors')->onDelete('cascade');
        $table->timestamps();
    });

    → posts: title:string, body:text:nullable,
             author_id:foreign:constrained:onDelete(cascade)

Scanning is text based and line local: a modifier is recovered only when it is
chained on the same line as its column's builder call. Modifiers written on a
continuation line of a fluent chain are not detected. Callers depend on the
SchemaExtractor interface only, so a structured reader can replace
TextSchemaExtractor without touching the descriptor model.

Descriptors are returned in source order. Builder calls inside // or # line
comments are ignored.
"""

import re
from abc import ABC, abstractmethod

from . import registry
from .models import ExtractionResult, FieldDescriptor, Modifier, split_values
from .relationships import default_referenced_table


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

CREATE_TABLE_RE = re.compile(r"""Schema::create\s*\(\s*(['"])([^'"]+)\1""")
SOFT_DELETES_RE = re.compile(r"->softDeletes(?:Tz)?\s*\(")
REFERENCE_CALL_RE = re.compile(r"""->foreignId\s*\(\s*(['"])([^'"]+)\1""")

_MODIFIER_CALL_RE = re.compile(r"->([A-Za-z_][A-Za-z0-9_]*)\s*\(")

# Shorthand chain methods and the referential action they stand for
_SHORTHAND_ACTIONS = {
    "cascadeOnDelete": (Modifier.ON_DELETE, "cascade"),
    "restrictOnDelete": (Modifier.ON_DELETE, "restrict"),
    "nullOnDelete": (Modifier.ON_DELETE, "set null"),
    "noActionOnDelete": (Modifier.ON_DELETE, "no action"),
    "cascadeOnUpdate": (Modifier.ON_UPDATE, "cascade"),
    "restrictOnUpdate": (Modifier.ON_UPDATE, "restrict"),
    "noActionOnUpdate": (Modifier.ON_UPDATE, "no action"),
}


def _builder_pattern(method: str) -> re.Pattern:
    return re.compile(r"->" + re.escape(method) + r"""\s*\(\s*(['"])([^'"]+)\1""")


_SCALAR_PATTERNS = [
    (tag, _builder_pattern(registry.builder_method(tag)))
    for tag in registry.scalar_types()
]


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------


def _scan_balanced(text: str, open_index: int, opener: str, closer: str) -> int:
    """
    Return the index of the closer matching text[open_index], skipping quoted
    strings. Returns len(text) when unbalanced.
    """
    depth = 0
    quote: str | None = None
    i = open_index
    while i < len(text):
        ch = text[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == opener:
            depth += 1
        elif ch == closer:
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return len(text)


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        quote = value[0]
        return value[1:-1].replace("\\" + quote, quote).replace("\\\\", "\\")
    return value


def _is_commented(text: str, pos: int) -> bool:
    line_start = text.rfind("\n", 0, pos) + 1
    prefix = text[line_start:pos]
    return "//" in prefix or prefix.lstrip().startswith(("#", "*"))


def _same_line_chain(text: str, call_open: int) -> tuple[str, str]:
    """
    Split the builder call starting at call_open ('(' index) into its argument
    text and the chain that follows it on the same physical line, up to ';'.
    """
    call_close = _scan_balanced(text, call_open, "(", ")")
    arguments = text[call_open + 1 : call_close]

    line_end = text.find("\n", call_open)
    if line_end == -1:
        line_end = len(text)
    if call_close >= line_end:
        return arguments, ""

    chain = text[call_close + 1 : line_end]
    semicolon = chain.find(";")
    if semicolon != -1:
        chain = chain[:semicolon]
    return arguments, chain


# ---------------------------------------------------------------------------
# Table name and body
# ---------------------------------------------------------------------------


def extract_table_name(source_text: str) -> str | None:
    """Return the table named by the first Schema::create call, if any."""
    match = CREATE_TABLE_RE.search(source_text)
    return match.group(2) if match else None


def isolate_builder_body(source_text: str) -> str | None:
    """Return the text of the table-builder closure (from '{' to its '}')."""
    match = CREATE_TABLE_RE.search(source_text)
    if not match:
        return None
    open_brace = source_text.find("{", match.end())
    if open_brace == -1:
        return None
    close_brace = _scan_balanced(source_text, open_brace, "{", "}")
    return source_text[open_brace : close_brace + 1]


def soft_delete_field() -> FieldDescriptor:
    """The descriptor a ->softDeletes() call stands for."""
    return FieldDescriptor(
        name="deleted_at",
        type=registry.TypeTag.DATE_TIME,
        modifiers={Modifier.NULLABLE: True},
    )


# ---------------------------------------------------------------------------
# Extractors
# ---------------------------------------------------------------------------


class SchemaExtractor(ABC):
    """Boundary between schema sources and the field descriptor model."""

    @abstractmethod
    def extract(self, source_text: str, soft_deletes: bool = False) -> ExtractionResult | None:
        """
        Recover the table name and descriptors from one schema source.

        Returns:
            None when the source does not create a table.
        """


class TextSchemaExtractor(SchemaExtractor):
    """Line-local text scanner for Schema::create migration sources."""

    def extract(self, source_text: str, soft_deletes: bool = False) -> ExtractionResult | None:
        table_name = extract_table_name(source_text)
        if table_name is None:
            return None

        body = isolate_builder_body(source_text) or ""
        candidates: list[tuple[int, FieldDescriptor]] = []

        for tag, pattern in _SCALAR_PATTERNS:
            for match in pattern.finditer(body):
                if _is_commented(body, match.start()):
                    continue
                candidates.append((match.start(), self._build_field(body, match, tag)))

        for match in REFERENCE_CALL_RE.finditer(body):
            if _is_commented(body, match.start()):
                continue
            candidates.append(
                (match.start(), self._build_field(body, match, registry.TypeTag.FOREIGN))
            )

        candidates.sort(key=lambda item: item[0])
        fields = [field for _, field in candidates]

        if soft_deletes and SOFT_DELETES_RE.search(body):
            fields.append(soft_delete_field())

        return ExtractionResult(table_name=table_name, fields=fields)

    def _build_field(self, body: str, match: re.Match, tag: str) -> FieldDescriptor:
        name = match.group(2)
        call_open = body.find("(", match.start())
        arguments, chain = _same_line_chain(body, call_open)

        field = FieldDescriptor(name=name, type=tag, modifiers={})
        if tag == registry.TypeTag.ENUM:
            field = self._enum_values(field, arguments)
        return self._chain_modifiers(field, chain)

    @staticmethod
    def _enum_values(field: FieldDescriptor, arguments: str) -> FieldDescriptor:
        open_bracket = arguments.find("[")
        if open_bracket == -1:
            return field
        close_bracket = _scan_balanced(arguments, open_bracket, "[", "]")
        values = split_values(arguments[open_bracket : close_bracket + 1])
        if not values:
            return field
        return field.with_modifier(Modifier.VALUES, ",".join(values))

    @staticmethod
    def _chain_modifiers(field: FieldDescriptor, chain: str) -> FieldDescriptor:
        """Populate modifiers from the chained calls on the builder's line."""
        pos = 0
        while True:
            match = _MODIFIER_CALL_RE.search(chain, pos)
            if match is None:
                break
            method = match.group(1)
            open_paren = match.end() - 1
            close_paren = _scan_balanced(chain, open_paren, "(", ")")
            argument = chain[open_paren + 1 : close_paren].strip()
            pos = close_paren + 1

            if method in (Modifier.NULLABLE, Modifier.INDEX, Modifier.UNIQUE):
                field = field.with_modifier(method)
            elif method == Modifier.DEFAULT:
                field = field.with_modifier(Modifier.DEFAULT, _unquote(argument) if argument else "null")
            elif method in (Modifier.ON_DELETE, Modifier.ON_UPDATE):
                field = field.with_modifier(method, _unquote(argument) or "cascade")
            elif method in _SHORTHAND_ACTIONS:
                key, action = _SHORTHAND_ACTIONS[method]
                field = field.with_modifier(key, action)
            elif method == Modifier.CONSTRAINED:
                field = field.with_modifier(Modifier.CONSTRAINED)
                table = _unquote(argument.split(",")[0]) if argument else ""
                if table and table != default_referenced_table(field.name):
                    field = field.with_modifier(Modifier.ON, table)
        return field
