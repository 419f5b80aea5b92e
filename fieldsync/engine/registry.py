#!/usr/bin/env python3
# Ticket: 0001_field_spec_scaffolding
# Design: DESIGN.md
"""
Field Type Registry

Static catalog of the column types the scaffolder understands. Each entry
carries the generation rules for its type:

- validation keyword: the rule keyword the controller's validator uses
- reference flag: whether the column links to another record type
- builder: the schema-builder method that declares the column

Type tags are matched case-insensitively and always returned in their
canonical spelling ("BIGINTEGER" → "bigInteger").
"""

from dataclasses import dataclass


# ---------------------------------------------------------------------------
# Type catalog
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TypeSpec:
    """Generation rules for one field type."""
    tag: str
    validation_keyword: str | None = None
    is_reference: bool = False
    builder: str | None = None      # defaults to tag


class TypeTag:
    STRING = "string"
    TEXT = "text"
    INTEGER = "integer"
    BIG_INTEGER = "bigInteger"
    SMALL_INTEGER = "smallInteger"
    TINY_INTEGER = "tinyInteger"
    FLOAT = "float"
    DOUBLE = "double"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    DATE_TIME = "dateTime"
    DATE = "date"
    TIME = "time"
    TIMESTAMP = "timestamp"
    ENUM = "enum"
    JSON = "json"
    BINARY = "binary"
    UUID = "uuid"
    IP_ADDRESS = "ipAddress"
    MAC_ADDRESS = "macAddress"
    FOREIGN = "foreign"


FIELD_TYPES: dict[str, TypeSpec] = {
    spec.tag: spec
    for spec in (
        TypeSpec(TypeTag.STRING, "string"),
        TypeSpec(TypeTag.TEXT, "string"),
        TypeSpec(TypeTag.INTEGER, "integer"),
        TypeSpec(TypeTag.BIG_INTEGER, "integer"),
        TypeSpec(TypeTag.SMALL_INTEGER, "integer"),
        TypeSpec(TypeTag.TINY_INTEGER, "integer"),
        TypeSpec(TypeTag.FLOAT, "numeric"),
        TypeSpec(TypeTag.DOUBLE, "numeric"),
        TypeSpec(TypeTag.DECIMAL, "numeric"),
        TypeSpec(TypeTag.BOOLEAN, "boolean"),
        TypeSpec(TypeTag.DATE_TIME, "date"),
        TypeSpec(TypeTag.DATE, "date"),
        TypeSpec(TypeTag.TIME),
        TypeSpec(TypeTag.TIMESTAMP, "date"),
        TypeSpec(TypeTag.ENUM),
        TypeSpec(TypeTag.JSON, "json"),
        TypeSpec(TypeTag.BINARY),
        TypeSpec(TypeTag.UUID, "uuid"),
        TypeSpec(TypeTag.IP_ADDRESS, "ip"),
        TypeSpec(TypeTag.MAC_ADDRESS, "mac_address"),
        TypeSpec(TypeTag.FOREIGN, is_reference=True, builder="foreignId"),
    )
}

_BY_LOWER = {tag.lower(): tag for tag in FIELD_TYPES}

# Textual tokens accepted as boolean defaults
TRUTHY_TOKENS = frozenset(["1", "true", "yes", "on"])
FALSY_TOKENS = frozenset(["0", "false", "no", "off", ""])

# Database drivers known to accept 1/0 literals as boolean column defaults
BOOLEAN_DEFAULT_DRIVERS = frozenset(["mysql"])


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def canonical_type(tag: str) -> str | None:
    """Return the canonical spelling of a type tag, or None if unknown."""
    if not tag:
        return None
    return _BY_LOWER.get(tag.strip().lower())


def is_known_type(tag: str) -> bool:
    return canonical_type(tag) is not None


def get_type_spec(tag: str) -> TypeSpec:
    """
    Return the TypeSpec for a tag.

    Raises:
        KeyError: if the tag is not a registered type
    """
    canonical = canonical_type(tag)
    if canonical is None:
        raise KeyError(f"Unknown field type: '{tag}'")
    return FIELD_TYPES[canonical]


def validation_keyword(tag: str) -> str | None:
    """Return the validator keyword for a type, or None when it has none."""
    canonical = canonical_type(tag)
    return FIELD_TYPES[canonical].validation_keyword if canonical else None


def is_reference_type(tag: str) -> bool:
    canonical = canonical_type(tag)
    return bool(canonical and FIELD_TYPES[canonical].is_reference)


def builder_method(tag: str) -> str:
    """Return the schema-builder method that declares a column of this type."""
    spec = get_type_spec(tag)
    return spec.builder or spec.tag


def scalar_types() -> list[str]:
    """All non-reference type tags, in catalog order."""
    return [tag for tag, spec in FIELD_TYPES.items() if not spec.is_reference]


def coerce_default(tag: str, raw: str) -> str:
    """
    Coerce a raw default value into the literal stored in the schema.

    Boolean columns map textual truthy/falsy tokens to "1"/"0". Any other
    value, and every other type, is returned unchanged.
    """
    value = raw.strip() if isinstance(raw, str) else str(raw)
    if canonical_type(tag) != TypeTag.BOOLEAN:
        return value
    token = value.strip("'\"").lower()
    if token in TRUTHY_TOKENS:
        return "1"
    if token in FALSY_TOKENS:
        return "0"
    return value


def supports_boolean_default_idiom(driver: str | None) -> bool:
    """Return True if the database driver accepts 1/0 boolean defaults."""
    return (driver or "").lower() in BOOLEAN_DEFAULT_DRIVERS
