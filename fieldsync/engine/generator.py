#!/usr/bin/env python3
# Ticket: 0001_field_spec_scaffolding
# Design: DESIGN.md
"""
Scaffold Generation Pipeline

Turns a record type and its field descriptors into the four artifacts of a
REST resource:

1. Migration: database/migrations/<timestamp>_create_<table>_table.php
2. Model: app/Models/<Record>.php with $fillable and belongsTo accessors
3. Controller: app/Http/Controllers/<Record>Controller.php with validation rules
4. Route: one Route::resource line appended to routes/web.php

Every target is checked for existence immediately before it is written:
existing models and controllers are skipped unless force is set, a table that
already has a create-table migration gets no second one, and a route line is
never appended twice. This is a skip-if-exists guarantee, not a transactional
one.

The generated migration is the input format of extractor.TextSchemaExtractor:
every modifier the generator writes on a column's line is recovered from it.
"""

import logging
import re
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Callable

from . import registry
from .config import ScaffoldConfig
from .inflection import camel, pluralize, snake
from .models import (
    FieldDescriptor,
    GeneratedArtifacts,
    InverseSuggestion,
    Modifier,
    split_values,
)
from .relationships import resolve_relationship, resolve_relationships
from .templates import (
    BELONGS_TO_TEMPLATE,
    CONTROLLER_TEMPLATE,
    HAS_MANY_TEMPLATE,
    MIGRATION_TEMPLATE,
    MODEL_TEMPLATE,
    ROUTE_TEMPLATE,
    render_template,
)

logger = logging.getLogger(__name__)

_NUMERIC_RE = re.compile(r"^-?\d+(\.\d+)?$")
DECIMAL_PRECISION = "10, 2"
SOFT_DELETE_COLUMN = "deleted_at"


# ---------------------------------------------------------------------------
# Record store
# ---------------------------------------------------------------------------


class RecordStore(ABC):
    """Answers whether a record type has already been scaffolded."""

    @abstractmethod
    def exists(self, record_type: str) -> bool:
        ...


class FileRecordStore(RecordStore):
    """A record type exists when its model file exists."""

    def __init__(self, model_dir: str | Path):
        self.model_dir = Path(model_dir)

    def model_path(self, record_type: str) -> Path:
        return self.model_dir / f"{record_type}.php"

    def exists(self, record_type: str) -> bool:
        return self.model_path(record_type).exists()


# ---------------------------------------------------------------------------
# Naming
# ---------------------------------------------------------------------------


def table_name_for(record_type: str) -> str:
    """BlogPost → blog_posts"""
    return snake(pluralize(record_type))


def route_name_for(record_type: str) -> str:
    """BlogPost → blog_posts"""
    return pluralize(snake(record_type))


def is_soft_delete_field(field: FieldDescriptor) -> bool:
    return field.name == SOFT_DELETE_COLUMN and field.type in (
        registry.TypeTag.DATE_TIME,
        registry.TypeTag.TIMESTAMP,
    )


# ---------------------------------------------------------------------------
# Migration building
# ---------------------------------------------------------------------------


def _php_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def _php_literal(value: str) -> str:
    if _NUMERIC_RE.match(value) or value.lower() == "null":
        return value
    return _php_string(value)


def build_field_line(field: FieldDescriptor) -> str:
    """
    Return the schema-builder statement for one column.

    Reference columns carry no default; the pipeline warns when one is given.
    """
    if registry.is_reference_type(field.type):
        hint = resolve_relationship(field, owner_record_type="")
        line = f"$table->foreignId('{field.name}')->constrained('{hint.referenced_table}')"
        if field.is_nullable:
            line += "->nullable()"
        if field.has(Modifier.INDEX):
            line += "->index()"
        if field.has(Modifier.UNIQUE):
            line += "->unique()"
        line += f"->onDelete('{hint.on_delete}')->onUpdate('{hint.on_update}')"
        return line + ";"

    arguments = f"'{field.name}'"
    if field.type == registry.TypeTag.ENUM and isinstance(field.get(Modifier.VALUES), str):
        items = ", ".join(_php_string(v) for v in split_values(field.get(Modifier.VALUES)))
        arguments += f", [{items}]"
    elif field.type == registry.TypeTag.DECIMAL:
        arguments += f", {DECIMAL_PRECISION}"

    line = f"$table->{registry.builder_method(field.type)}({arguments})"

    if field.is_nullable:
        line += "->nullable()"

    default = field.get(Modifier.DEFAULT)
    if isinstance(default, str):
        line += f"->default({_php_literal(registry.coerce_default(field.type, default))})"

    if field.has(Modifier.INDEX):
        line += "->index()"
    if field.has(Modifier.UNIQUE):
        line += "->unique()"
    return line + ";"


def build_up_schema(table: str, fields: list[FieldDescriptor]) -> str:
    lines = [f"Schema::create('{table}', function (Blueprint $table) {{"]
    lines.append("    $table->id();")
    soft_deletes = False
    for field in fields:
        if is_soft_delete_field(field):
            soft_deletes = True
            continue
        lines.append("    " + build_field_line(field))
    lines.append("")
    lines.append("    $table->timestamps();")
    if soft_deletes:
        lines.append("    $table->softDeletes();")
    lines.append("});")
    return "\n".join(lines)


def build_down_schema(table: str) -> str:
    return f"Schema::dropIfExists('{table}');"


def _indent(text: str, spaces: int) -> str:
    pad = " " * spaces
    return "\n".join(pad + line if line else line for line in text.splitlines())


def build_migration(table: str, fields: list[FieldDescriptor]) -> str:
    return render_template(MIGRATION_TEMPLATE, {
        "up": _indent(build_up_schema(table, fields), 8),
        "down": _indent(build_down_schema(table), 8),
    })


# ---------------------------------------------------------------------------
# Validation rules
# ---------------------------------------------------------------------------


def build_validation_rules(field: FieldDescriptor) -> list[str]:
    """
    Rule list for one field:

        email:string:nullable      → ["nullable", "string"]
        age:integer:min(18)        → ["required", "integer", "min:18"]
        status:enum:values(a,b)    → ["required", "in:a,b"]
    """
    rules = ["nullable" if field.is_nullable else "required"]

    keyword = registry.validation_keyword(field.type)
    if keyword:
        rules.append(keyword)

    if registry.is_reference_type(field.type):
        hint = resolve_relationship(field, owner_record_type="")
        rules.append(f"exists:{hint.referenced_table},id")

    for key in (Modifier.MIN, Modifier.MAX):
        value = field.get(key)
        if isinstance(value, str) and value:
            rules.append(f"{key}:{value}")

    values = field.get(Modifier.VALUES)
    if field.type == registry.TypeTag.ENUM and isinstance(values, str):
        rules.append("in:" + ",".join(split_values(values)))
    return rules


def build_rules_block(fields: list[FieldDescriptor]) -> str:
    lines = [
        f"            '{f.name}' => '{'|'.join(build_validation_rules(f))}',"
        for f in fields
    ]
    return "\n".join(lines) if lines else "            // Add validation rules"


# ---------------------------------------------------------------------------
# Model / controller / route
# ---------------------------------------------------------------------------


def build_model(record_type: str, fields: list[FieldDescriptor], namespace: str) -> str:
    fillable = ", ".join(f"'{f.name}'" for f in fields if not is_soft_delete_field(f))
    relationships = "".join(
        render_template(BELONGS_TO_TEMPLATE, {
            "method": camel(hint.referenced_record_type),
            "related": hint.referenced_record_type,
            "foreign_key": hint.field_name,
        })
        for hint in resolve_relationships(fields, record_type)
    )
    soft_deletes = any(is_soft_delete_field(f) for f in fields)
    return render_template(MODEL_TEMPLATE, {
        "namespace": namespace,
        "class_name": record_type,
        "imports": "use Illuminate\\Database\\Eloquent\\SoftDeletes;\n" if soft_deletes else "",
        "traits": "HasFactory, SoftDeletes" if soft_deletes else "HasFactory",
        "fillable": fillable,
        "relationships": relationships,
    })


def build_controller(record_type: str, fields: list[FieldDescriptor], config: ScaffoldConfig) -> str:
    return render_template(CONTROLLER_TEMPLATE, {
        "namespace": config.namespaces.controller,
        "controller": f"{record_type}Controller",
        "modelNamespace": config.namespaces.model,
        "model": record_type,
        "modelVar": camel(record_type),
        "validation_rules": build_rules_block(fields),
    })


def build_route_line(record_type: str, config: ScaffoldConfig) -> str:
    return render_template(ROUTE_TEMPLATE, {
        "route": route_name_for(record_type),
        "controllerNamespace": config.namespaces.controller,
        "controller": f"{record_type}Controller",
    })


def build_inverse_suggestions(
    record_type: str,
    fields: list[FieldDescriptor],
    model_dir: Path,
) -> list[InverseSuggestion]:
    """hasMany accessors the referenced models could declare. Never written."""
    return [
        InverseSuggestion(
            record_type=hint.referenced_record_type,
            model_path=str(model_dir / f"{hint.referenced_record_type}.php"),
            snippet=render_template(HAS_MANY_TEMPLATE, {
                "method": hint.inverse_accessor_name,
                "related": record_type,
            }),
        )
        for hint in resolve_relationships(fields, record_type)
    ]


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class ScaffoldPipeline:
    """
    Forward generation pipeline.

    Args:
        config: Scaffold configuration (directories, namespaces, driver).
        force: Overwrite existing model and controller files.
        clock: Returns the timestamp used in migration file names.
    """

    def __init__(
        self,
        config: ScaffoldConfig,
        force: bool = False,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.config = config
        self.force = force
        self.clock = clock

    def boolean_default_warnings(self, fields: list[FieldDescriptor]) -> list[str]:
        driver = self.config.database.driver
        if registry.supports_boolean_default_idiom(driver):
            return []
        return [
            f"Boolean default on '{f.name}' is written as 1/0, which may not work on {driver}."
            for f in fields
            if f.type == registry.TypeTag.BOOLEAN and f.has(Modifier.DEFAULT)
        ]

    @staticmethod
    def ignored_default_warnings(fields: list[FieldDescriptor]) -> list[str]:
        """Reference columns are written without a default."""
        return [
            f"Default on reference field '{f.name}' is ignored."
            for f in fields
            if registry.is_reference_type(f.type) and f.has(Modifier.DEFAULT)
        ]

    def existing_migration(self, table: str) -> Path | None:
        migrations_dir = self.config.migrations_dir
        if not migrations_dir.exists():
            return None
        matches = sorted(migrations_dir.glob(f"*_create_{table}_table.php"))
        return matches[0] if matches else None

    def plan(self, record_type: str, fields: list[FieldDescriptor]) -> GeneratedArtifacts:
        """Render every artifact without touching the file system."""
        table = table_name_for(record_type)
        stamp = self.clock().strftime("%Y_%m_%d_%H%M%S")
        migration_path = self.config.migrations_dir / f"{stamp}_create_{table}_table.php"
        model_path = self.config.model_dir / f"{record_type}.php"
        controller_path = self.config.controller_dir / f"{record_type}Controller.php"

        artifacts = GeneratedArtifacts(record_type=record_type)
        artifacts.contents[str(migration_path)] = build_migration(table, fields)
        artifacts.contents[str(model_path)] = build_model(
            record_type, fields, self.config.namespaces.model
        )
        artifacts.contents[str(controller_path)] = build_controller(record_type, fields, self.config)
        artifacts.contents[str(self.config.routes_file)] = build_route_line(record_type, self.config)
        artifacts.suggestions = build_inverse_suggestions(record_type, fields, self.config.model_dir)
        artifacts.warnings = self.boolean_default_warnings(fields) + self.ignored_default_warnings(fields)
        return artifacts

    def generate(self, record_type: str, fields: list[FieldDescriptor]) -> GeneratedArtifacts:
        """Render and write the artifacts for one record type."""
        artifacts = self.plan(record_type, fields)
        for warning in artifacts.warnings:
            logger.warning("%s", warning)

        table = table_name_for(record_type)
        routes_file = str(self.config.routes_file)

        for path_str, content in artifacts.contents.items():
            path = Path(path_str)
            if path_str == routes_file:
                self._append_route(path, content, artifacts)
            elif path.name.endswith(f"_create_{table}_table.php"):
                existing = self.existing_migration(table)
                if existing is not None:
                    artifacts.skipped.append(str(existing))
                    logger.info("Migration for %s already exists: %s", table, existing)
                    continue
                self._write(path, content, artifacts)
            elif path.exists() and not self.force:
                artifacts.skipped.append(path_str)
                logger.info("%s already exists. Skipping.", path)
            else:
                self._write(path, content, artifacts)
        return artifacts

    @staticmethod
    def _write(path: Path, content: str, artifacts: GeneratedArtifacts) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        artifacts.written.append(str(path))
        logger.info("Wrote %s", path)

    @staticmethod
    def _append_route(path: Path, route_line: str, artifacts: GeneratedArtifacts) -> None:
        existing = path.read_text(encoding="utf-8") if path.exists() else "<?php\n"
        if route_line in existing:
            artifacts.skipped.append(str(path))
            logger.info("Route already registered in %s", path)
            return
        path.parent.mkdir(parents=True, exist_ok=True)
        separator = "" if existing.endswith("\n") else "\n"
        path.write_text(existing + separator + route_line + "\n", encoding="utf-8")
        artifacts.written.append(str(path))
        logger.info("Route registered: %s", route_line)
