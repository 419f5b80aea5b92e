#!/usr/bin/env python3
# Ticket: 0001_field_spec_scaffolding
# Design: DESIGN.md
"""
fieldsync CLI

Human-facing command-line interface for the scaffolder.

Usage:
    # All commands auto-detect the project root from .scaffold/ or artisan
    # in the current directory or its parents, or accept --project-root.

    fieldsync make Post --fields "title:string, body:text:nullable"
    fieldsync make Post                    # prompt for fields (TTY only)
    fieldsync make Post --fields ... --dry-run

    fieldsync sync                         # scaffold models missing for migrations
    fieldsync sync --dry-run --soft-deletes
    fieldsync sync --watch --poll 2        # re-sync when migrations appear

    fieldsync extract database/migrations/2024_01_01_000000_create_posts_table.php
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable

from fieldsync.engine.config import ScaffoldConfig, find_project_root, load_scaffold_config
from fieldsync.engine.extractor import TextSchemaExtractor
from fieldsync.engine.generator import FileRecordStore, ScaffoldPipeline
from fieldsync.engine.grammar import parse_field_spec, parse_single_field, render_field_spec
from fieldsync.engine.inflection import studly
from fieldsync.engine.models import (
    FieldDescriptor,
    FieldSpecError,
    GeneratedArtifacts,
    MissingFieldInputError,
    SourceDirectoryNotFoundError,
    SyncResult,
    UnitAction,
)
from fieldsync.engine.sync import SyncDriver

DONE_KEYWORD = "done"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_config(args: argparse.Namespace) -> ScaffoldConfig:
    """Load config from args or auto-discovery."""
    project_root = Path(args.project_root) if args.project_root else find_project_root()
    return load_scaffold_config(project_root, args.config)


# ---------------------------------------------------------------------------
# make
# ---------------------------------------------------------------------------


def prompt_for_fields(read_line: Callable[[str], str] | None = None) -> list[FieldDescriptor]:
    """Read one field per line until 'done' (or end of input)."""
    read_line = read_line or input
    print(f"Enter fields as name:type[:modifier...], one per line. Type '{DONE_KEYWORD}' to finish.")
    fields: list[FieldDescriptor] = []
    while True:
        try:
            line = read_line("Field: ").strip()
        except EOFError:
            break
        if line.lower() == DONE_KEYWORD:
            break
        if not line:
            continue
        field, diagnostics = parse_single_field(line)
        for diagnostic in diagnostics:
            print(f"  {diagnostic}")
        if field is not None:
            fields.append(field)
    return fields


def _collect_fields(args: argparse.Namespace) -> list[FieldDescriptor]:
    if args.fields is not None:
        result = parse_field_spec(args.fields)
        for diagnostic in result.diagnostics:
            print(f"Warning: {diagnostic}", file=sys.stderr)
        fields = result.fields
    elif sys.stdin.isatty():
        fields = prompt_for_fields()
    else:
        raise MissingFieldInputError(args.model)

    if not fields:
        raise FieldSpecError(f"No valid fields for '{args.model}'.")
    return fields


def _print_artifacts(artifacts: GeneratedArtifacts, dry_run: bool) -> None:
    if dry_run:
        for path, content in artifacts.contents.items():
            print(f"\n--- {path}")
            print(content.rstrip("\n"))
    else:
        for path in artifacts.written:
            print(f"  Created : {path}")
        for path in artifacts.skipped:
            print(f"  Skipped : {path} (already exists)")

    if artifacts.suggestions:
        print("\nConsider adding the inverse relationship(s):")
        for suggestion in artifacts.suggestions:
            print(f"\n  In {suggestion.model_path}:")
            print(suggestion.snippet)

    for warning in artifacts.warnings:
        print(f"Warning: {warning}", file=sys.stderr)


def cmd_make(args: argparse.Namespace) -> int:
    """Scaffold migration, model, controller and route for one record type."""
    try:
        fields = _collect_fields(args)
    except FieldSpecError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    config = _load_config(args)
    record_type = studly(args.model)
    pipeline = ScaffoldPipeline(config, force=args.force)

    if args.dry_run:
        artifacts = pipeline.plan(record_type, fields)
        print(f"Would scaffold {record_type}: {render_field_spec(fields)}")
    else:
        artifacts = pipeline.generate(record_type, fields)
        print(f"Scaffolded {record_type}:")

    _print_artifacts(artifacts, args.dry_run)
    return 0


# ---------------------------------------------------------------------------
# sync
# ---------------------------------------------------------------------------


def _print_sync_result(result: SyncResult) -> None:
    if result.sources_found == 0:
        print("No table-creating migrations found.")
        return

    print(f"Found {result.sources_found} table-creating migration(s).")
    for outcome in result.outcomes:
        if outcome.action == UnitAction.REPORTED:
            print(f"  Would scaffold: {outcome.record_type}")
            print(f"    Fields: {outcome.field_spec}")
        elif outcome.action == UnitAction.SCAFFOLDED:
            print(f"  Scaffolded: {outcome.record_type}")

    if result.dry_run:
        if result.has_changes:
            print("Dry run complete. No changes made.")
        else:
            print("No new models to scaffold.")
    elif not result.has_changes:
        print("All models are up to date.")


def _build_driver(config: ScaffoldConfig) -> SyncDriver:
    return SyncDriver(
        source_dir=config.migrations_dir,
        record_store=FileRecordStore(config.model_dir),
        pipeline=ScaffoldPipeline(config),
        extractor=TextSchemaExtractor(),
    )


def cmd_sync(args: argparse.Namespace) -> int:
    """Scaffold record types for migrations that have no model yet."""
    config = _load_config(args)
    driver = _build_driver(config)

    if args.watch:
        try:
            watcher = driver.make_watcher(
                interval=args.poll,
                dry_run=args.dry_run,
                soft_deletes=args.soft_deletes,
                on_new_sources=lambda new: print(f"New migration(s) detected: {', '.join(new)}"),
                on_pass=_print_sync_result,
            )
        except ValueError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        print(f"Watching {driver.source_dir} for new migrations... (Ctrl+C to stop)")
        try:
            watcher.run()
        except KeyboardInterrupt:
            print("\nStopped watching.")
        return 0

    try:
        result = driver.run_pass(dry_run=args.dry_run, soft_deletes=args.soft_deletes)
    except SourceDirectoryNotFoundError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    _print_sync_result(result)
    return 0


# ---------------------------------------------------------------------------
# extract
# ---------------------------------------------------------------------------


def cmd_extract(args: argparse.Namespace) -> int:
    """Print the table name and canonical field-spec recovered from one migration."""
    path = Path(args.migration)
    if not path.is_file():
        print(f"Error: file not found: {path}", file=sys.stderr)
        return 1

    try:
        source_text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        print(f"Error: cannot read {path}: {exc}", file=sys.stderr)
        return 1

    extraction = TextSchemaExtractor().extract(source_text, soft_deletes=args.soft_deletes)
    if extraction is None:
        print(f"No Schema::create call in {path}.", file=sys.stderr)
        return 1

    print(f"Table : {extraction.table_name}")
    print(f"Fields: {render_field_spec(extraction.fields)}")
    return 0


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fieldsync",
        description="Scaffold REST resources from field-specs and keep models in sync with migrations",
    )
    parser.add_argument(
        "--project-root",
        metavar="PATH",
        help="Path to the consuming project (default: auto-detect from .scaffold/ or artisan)",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Path to config.yaml (default: <project-root>/.scaffold/config.yaml)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # make
    p_make = subparsers.add_parser("make", help="Scaffold a model from a field-spec")
    p_make.add_argument("model", help="Record type name (e.g. Post)")
    p_make.add_argument("--fields", help='Field-spec, e.g. "title:string, body:text:nullable"')
    p_make.add_argument("--force", action="store_true", help="Overwrite existing model and controller")
    p_make.add_argument("--dry-run", action="store_true", help="Print the files instead of writing them")
    p_make.set_defaults(func=cmd_make)

    # sync
    p_sync = subparsers.add_parser("sync", help="Scaffold models for table-creating migrations")
    p_sync.add_argument("--dry-run", action="store_true", help="Report without writing")
    p_sync.add_argument("--soft-deletes", action="store_true", help="Map softDeletes() to deleted_at")
    p_sync.add_argument("--watch", action="store_true", help="Keep polling for new migrations")
    p_sync.add_argument("--poll", type=int, default=1, help="Seconds between polls in watch mode")
    p_sync.set_defaults(func=cmd_sync)

    # extract
    p_extract = subparsers.add_parser("extract", help="Show the field-spec recovered from a migration")
    p_extract.add_argument("migration", help="Path to a migration file")
    p_extract.add_argument("--soft-deletes", action="store_true", help="Map softDeletes() to deleted_at")
    p_extract.set_defaults(func=cmd_extract)

    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
