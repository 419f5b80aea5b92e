#!/usr/bin/env python3
# Ticket: 0001_field_spec_scaffolding
# Design: DESIGN.md
"""
Relationship Resolver

Derives what a reference ("foreign") field points at from naming convention,
with on(table) as the explicit override:

    author_id:foreign            owner Post → table authors, record Author, inverse posts
    author_id:foreign:on(writers)           → table writers, record Writer

The record type always follows the table in effect, explicit or derived.
Missing onDelete/onUpdate default to "cascade".
"""

from . import registry
from .inflection import camel, pluralize, singularize, strip_suffix, studly
from .models import FieldDescriptor, Modifier, RelationshipHint

DEFAULT_REFERENTIAL_ACTION = "cascade"


def default_referenced_table(field_name: str) -> str:
    """author_id → authors"""
    return pluralize(strip_suffix(field_name, "_id"))


def referenced_table(field: FieldDescriptor) -> str:
    """Table named by on(...), else the conventional one."""
    explicit = field.get(Modifier.ON)
    if isinstance(explicit, str) and explicit.strip():
        return explicit.strip()
    return default_referenced_table(field.name)


def record_type_for_table(table: str) -> str:
    """blog_posts → BlogPost"""
    return studly(singularize(table))


def inverse_accessor_name(owner_record_type: str) -> str:
    """Post → posts, BlogPost → blogPosts"""
    return pluralize(camel(owner_record_type))


def resolve_relationship(field: FieldDescriptor, owner_record_type: str) -> RelationshipHint:
    """
    Build the RelationshipHint for one reference field.

    Raises:
        ValueError: if the field is not reference-typed
    """
    if not registry.is_reference_type(field.type):
        raise ValueError(f"Field '{field.name}' of type '{field.type}' is not a reference")

    table = referenced_table(field)
    on_delete = field.get(Modifier.ON_DELETE)
    on_update = field.get(Modifier.ON_UPDATE)
    return RelationshipHint(
        field_name=field.name,
        referenced_table=table,
        referenced_record_type=record_type_for_table(table),
        inverse_accessor_name=inverse_accessor_name(owner_record_type),
        on_delete=on_delete if isinstance(on_delete, str) and on_delete else DEFAULT_REFERENTIAL_ACTION,
        on_update=on_update if isinstance(on_update, str) and on_update else DEFAULT_REFERENTIAL_ACTION,
    )


def resolve_relationships(
    fields: list[FieldDescriptor],
    owner_record_type: str,
) -> list[RelationshipHint]:
    """Hints for every reference field, in field order."""
    return [
        resolve_relationship(f, owner_record_type)
        for f in fields
        if registry.is_reference_type(f.type)
    ]
