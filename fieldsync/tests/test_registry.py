"""
Tests for engine/registry.py

Validates:
- Type tags are recognised case-insensitively and canonicalised
- Validation keywords per type (none for time/enum/binary/foreign)
- foreign is the only reference type and is built with foreignId
- coerce_default maps boolean truthy/falsy tokens to 1/0 and leaves others alone
- supports_boolean_default_idiom knows mysql only
"""

import pytest

from fieldsync.engine import registry
from fieldsync.engine.registry import TypeTag


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def test_registry_has_every_type():
    assert len(registry.FIELD_TYPES) == 21


@pytest.mark.parametrize("raw,expected", [
    ("string", "string"),
    ("STRING", "string"),
    ("biginteger", "bigInteger"),
    ("DateTime", "dateTime"),
    (" ipaddress ", "ipAddress"),
])
def test_canonical_type(raw, expected):
    assert registry.canonical_type(raw) == expected


def test_unknown_type_is_rejected():
    assert registry.is_known_type("money") is False
    assert registry.canonical_type("") is None
    with pytest.raises(KeyError):
        registry.get_type_spec("money")


@pytest.mark.parametrize("tag,keyword", [
    ("string", "string"),
    ("text", "string"),
    ("integer", "integer"),
    ("tinyInteger", "integer"),
    ("decimal", "numeric"),
    ("boolean", "boolean"),
    ("timestamp", "date"),
    ("json", "json"),
    ("uuid", "uuid"),
    ("ipAddress", "ip"),
    ("macAddress", "mac_address"),
    ("time", None),
    ("enum", None),
    ("binary", None),
    ("foreign", None),
    ("nope", None),
])
def test_validation_keyword(tag, keyword):
    assert registry.validation_keyword(tag) == keyword


def test_foreign_is_only_reference_type():
    references = [tag for tag in registry.FIELD_TYPES if registry.is_reference_type(tag)]
    assert references == [TypeTag.FOREIGN]
    assert registry.builder_method("foreign") == "foreignId"
    assert TypeTag.FOREIGN not in registry.scalar_types()


def test_builder_defaults_to_tag():
    assert registry.builder_method("STRING") == "string"
    assert registry.builder_method("dateTime") == "dateTime"


# ---------------------------------------------------------------------------
# Default coercion
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("raw", ["true", "TRUE", "1", "yes", "on", "'true'"])
def test_boolean_truthy_defaults_become_1(raw):
    assert registry.coerce_default("boolean", raw) == "1"


@pytest.mark.parametrize("raw", ["false", "0", "no", "off", ""])
def test_boolean_falsy_defaults_become_0(raw):
    assert registry.coerce_default("boolean", raw) == "0"


def test_boolean_unrecognised_default_unchanged():
    assert registry.coerce_default("boolean", "maybe") == "maybe"


def test_non_boolean_default_unchanged():
    assert registry.coerce_default("string", "true") == "true"
    assert registry.coerce_default("integer", " 18 ") == "18"


def test_boolean_default_idiom_drivers():
    assert registry.supports_boolean_default_idiom("mysql") is True
    assert registry.supports_boolean_default_idiom("MySQL") is True
    assert registry.supports_boolean_default_idiom("pgsql") is False
    assert registry.supports_boolean_default_idiom(None) is False
