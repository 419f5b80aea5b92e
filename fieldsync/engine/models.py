#!/usr/bin/env python3
# Ticket: 0001_field_spec_scaffolding
# Design: DESIGN.md
"""
Scaffold Engine Data Models

Typed dataclasses representing the core domain objects of the scaffolding
engine. Field descriptors are produced by two independent paths (the field-spec
parser and the reverse schema extractor) and must compare equal when they
describe the same column, so every model here is a plain value object.

Design note: modifier values are either True (a present flag) or a str payload.
The raw list payload of values(...) stays a str and is split on demand with
split_values() so that rendering it back is lossless.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping


ModifierValue = bool | str
ModifierMap = dict[str, ModifierValue]


# ---------------------------------------------------------------------------
# Modifier keyword constants
# ---------------------------------------------------------------------------

class Modifier:
    NULLABLE = "nullable"
    INDEX = "index"
    UNIQUE = "unique"
    CONSTRAINED = "constrained"
    DEFAULT = "default"
    MIN = "min"
    MAX = "max"
    ON = "on"
    ON_DELETE = "onDelete"
    ON_UPDATE = "onUpdate"
    VALUES = "values"

    FLAGS = frozenset([NULLABLE, INDEX, UNIQUE, CONSTRAINED])
    VALUED = frozenset([DEFAULT, MIN, MAX, ON, ON_DELETE, ON_UPDATE, VALUES])
    ALL = FLAGS | VALUED

    # Canonical render order for the field-spec string
    RENDER_ORDER = (
        NULLABLE, DEFAULT, INDEX, UNIQUE, CONSTRAINED,
        ON, ON_DELETE, ON_UPDATE, MIN, MAX, VALUES,
    )


_CANONICAL_KEYS = {key.lower(): key for key in Modifier.ALL}


def canonical_modifier_key(key: str) -> str:
    """
    Normalize a modifier keyword to its canonical spelling.

    Known keywords are matched case-insensitively ("ONDELETE" → "onDelete").
    Unknown keywords are lower-cased and kept as-is.
    """
    lowered = key.strip().lower()
    return _CANONICAL_KEYS.get(lowered, lowered)


def split_values(raw: str) -> list[str]:
    """Split a values(...) payload into its items, dropping brackets and quotes."""
    cleaned = raw.strip().strip("[]")
    items = []
    for item in cleaned.split(","):
        item = item.strip().strip("'\"").strip()
        if item:
            items.append(item)
    return items


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class FieldSpecError(ValueError):
    """Raised when a field-spec cannot be used at all."""


class MissingFieldInputError(FieldSpecError):
    """Raised when no field-spec was supplied and prompting is not possible."""

    def __init__(self, record_type: str):
        self.record_type = record_type
        super().__init__(
            f"No fields provided for '{record_type}' and running in non-interactive mode."
        )


class SourceDirectoryNotFoundError(FileNotFoundError):
    """Raised when the schema source directory for a sync pass does not exist."""

    def __init__(self, path: Any):
        self.path = path
        super().__init__(f"Migrations directory not found: {path}")


class TemplateError(RuntimeError):
    """Raised when a template still carries unfilled placeholders."""


# ---------------------------------------------------------------------------
# Core dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FieldDescriptor:
    """
    One data column: name, canonical type tag, modifiers.

    The modifier map is stored as a read-only copy, so a descriptor is hashable
    and cannot be changed in place; use with_modifier() to derive a new one.
    """
    name: str
    type: str
    modifiers: Mapping[str, ModifierValue] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "modifiers", MappingProxyType(dict(self.modifiers)))

    def __hash__(self) -> int:
        return hash((self.name, self.type, frozenset(self.modifiers.items())))

    def has(self, key: str) -> bool:
        """Return True when the modifier is present (flag or payload)."""
        value = self.modifiers.get(canonical_modifier_key(key))
        return value is not None and value is not False

    def get(self, key: str, default: Any = None) -> Any:
        return self.modifiers.get(canonical_modifier_key(key), default)

    @property
    def is_nullable(self) -> bool:
        return self.has(Modifier.NULLABLE)

    def with_modifier(self, key: str, value: ModifierValue = True) -> "FieldDescriptor":
        """Return a copy carrying one more modifier (last write wins)."""
        modifiers = dict(self.modifiers)
        modifiers[canonical_modifier_key(key)] = value
        return replace(self, modifiers=modifiers)


@dataclass(frozen=True)
class Diagnostic:
    """Non-fatal message about one clause of a field-spec or one source line."""
    clause: str
    message: str

    def __str__(self) -> str:
        return f"{self.message}: {self.clause}" if self.clause else self.message


@dataclass
class ParseResult:
    """Outcome of parsing a field-spec string."""
    fields: list[FieldDescriptor] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics


@dataclass(frozen=True)
class RelationshipHint:
    """Derived link from a reference field to the record type it points at."""
    field_name: str
    referenced_table: str
    referenced_record_type: str
    inverse_accessor_name: str
    on_delete: str = "cascade"
    on_update: str = "cascade"


@dataclass(frozen=True)
class SchemaSourceUnit:
    """One discovered schema source (a migration file)."""
    table_name: str | None
    source_text: str
    origin_path: str
    creation_order_key: str         # file name, starts with a sortable timestamp


@dataclass
class ExtractionResult:
    """Table name and descriptors recovered from one schema source."""
    table_name: str
    fields: list[FieldDescriptor] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Sync pass results
# ---------------------------------------------------------------------------


class UnitAction:
    SCAFFOLDED = "scaffolded"
    SKIPPED = "skipped"
    REPORTED = "reported"

    ALL = frozenset([SCAFFOLDED, SKIPPED, REPORTED])


@dataclass
class UnitOutcome:
    """What one sync pass did with one schema source."""
    table_name: str
    record_type: str
    action: str
    origin_path: str
    field_spec: str | None = None


@dataclass
class SyncResult:
    """Summary of a synchronization pass."""
    outcomes: list[UnitOutcome] = field(default_factory=list)
    sources_found: int = 0
    dry_run: bool = False

    def _count(self, action: str) -> int:
        return sum(1 for o in self.outcomes if o.action == action)

    @property
    def scaffolded(self) -> int:
        return self._count(UnitAction.SCAFFOLDED)

    @property
    def skipped(self) -> int:
        return self._count(UnitAction.SKIPPED)

    @property
    def reported(self) -> int:
        return self._count(UnitAction.REPORTED)

    @property
    def has_changes(self) -> bool:
        """True when the pass scaffolded, or would have scaffolded, anything."""
        return self.scaffolded > 0 or self.reported > 0

    def record_types(self, action: str) -> list[str]:
        """Record types for one action, in processing order."""
        return [o.record_type for o in self.outcomes if o.action == action]


# ---------------------------------------------------------------------------
# Generation results
# ---------------------------------------------------------------------------


@dataclass
class InverseSuggestion:
    """An inverse collection accessor the user may add to a related model."""
    record_type: str                # model that should receive the accessor
    model_path: str
    snippet: str


@dataclass
class GeneratedArtifacts:
    """Files produced (or planned) for one record type."""
    record_type: str
    written: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    contents: dict[str, str] = field(default_factory=dict)  # path -> rendered text
    suggestions: list[InverseSuggestion] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
