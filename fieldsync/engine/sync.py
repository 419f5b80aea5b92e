#!/usr/bin/env python3
# Ticket: 0001_field_spec_scaffolding
# Design: DESIGN.md
"""
Schema Synchronization Driver

Scans a directory of migration sources and scaffolds the record types that do
not exist yet:

1. Discover: *.php files in file-name order (names start with a sortable
   timestamp, so this is creation order), keeping those that create a table
2. Extract: recover table name and field descriptors from each source
3. Decide: record type = studly(singular(table)); skip it if the record
   store already has it
4. Act: in a dry run report the canonical field-spec that would be used;
   otherwise hand the canonical field-spec back through the parser to the
   generation pipeline

Each pass returns a SyncResult; nothing is carried between passes. Watch mode
wraps run_pass() in a PollingWatcher and runs a full pass whenever new source
files appear. A missing source directory aborts the pass; in watch mode the
error is logged and polling continues.
"""

import logging
import time
from pathlib import Path
from typing import Callable, Protocol

from .extractor import SchemaExtractor, TextSchemaExtractor, extract_table_name
from .generator import RecordStore
from .grammar import parse_field_spec, render_field_spec
from .models import (
    FieldDescriptor,
    GeneratedArtifacts,
    SchemaSourceUnit,
    SourceDirectoryNotFoundError,
    SyncResult,
    UnitAction,
    UnitOutcome,
)
from .relationships import record_type_for_table
from .state_machine import DriverState, validate_transition
from .watch import DEFAULT_POLL_INTERVAL, PollingWatcher

logger = logging.getLogger(__name__)

SOURCE_PATTERN = "*.php"
CREATE_MARKER = "Schema::create"
UP_MARKER = "up()"


class GenerationPipeline(Protocol):
    def generate(self, record_type: str, fields: list[FieldDescriptor]) -> GeneratedArtifacts:
        ...


class SyncDriver:
    """
    Drive one or more synchronization passes over a migrations directory.

    Args:
        source_dir: Directory holding the migration sources.
        record_store: Answers whether a record type was already scaffolded.
        pipeline: Forward generation pipeline used in live passes.
        extractor: Schema extractor (TextSchemaExtractor by default).
    """

    def __init__(
        self,
        source_dir: str | Path,
        record_store: RecordStore,
        pipeline: GenerationPipeline,
        extractor: SchemaExtractor | None = None,
    ):
        self.source_dir = Path(source_dir)
        self.record_store = record_store
        self.pipeline = pipeline
        self.extractor = extractor or TextSchemaExtractor()
        self.state = DriverState.IDLE

    def _transition(self, to_state: str) -> None:
        validate_transition(self.state, to_state)
        self.state = to_state

    # -----------------------------------------------------------------------
    # Discovery
    # -----------------------------------------------------------------------

    def source_names(self) -> set[str]:
        """Current source file names; empty when the directory is missing."""
        if not self.source_dir.is_dir():
            return set()
        return {p.name for p in self.source_dir.glob(SOURCE_PATTERN) if p.is_file()}

    def discover_sources(self) -> list[SchemaSourceUnit]:
        """
        Return table-creating sources in creation order.

        A file that cannot be read as UTF-8 text is logged and skipped; the
        rest of the directory is still scanned.

        Raises:
            SourceDirectoryNotFoundError: if the source directory does not exist
        """
        if not self.source_dir.is_dir():
            raise SourceDirectoryNotFoundError(self.source_dir)

        units = []
        for path in sorted(self.source_dir.glob(SOURCE_PATTERN), key=lambda p: p.name):
            if not path.is_file():
                continue
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning("Skipping unreadable migration %s: %s", path.name, exc)
                continue
            if CREATE_MARKER not in text or UP_MARKER not in text:
                continue
            units.append(SchemaSourceUnit(
                table_name=extract_table_name(text),
                source_text=text,
                origin_path=str(path),
                creation_order_key=path.name,
            ))
        return units

    # -----------------------------------------------------------------------
    # Pass
    # -----------------------------------------------------------------------

    def run_pass(self, dry_run: bool = False, soft_deletes: bool = False) -> SyncResult:
        """
        Run one synchronization pass.

        Raises:
            SourceDirectoryNotFoundError: if the source directory does not exist
        """
        self._transition(DriverState.SCANNING)
        try:
            units = self.discover_sources()
            result = SyncResult(sources_found=len(units), dry_run=dry_run)
            handled: set[str] = set()

            for unit in units:
                self._transition(DriverState.EXTRACTING)
                outcome = self._process_unit(unit, dry_run, soft_deletes, handled)
                if outcome is not None:
                    result.outcomes.append(outcome)

            self._transition(DriverState.IDLE)
            return result
        except Exception:
            self.state = DriverState.IDLE
            raise

    def _process_unit(
        self,
        unit: SchemaSourceUnit,
        dry_run: bool,
        soft_deletes: bool,
        handled: set[str],
    ) -> UnitOutcome | None:
        extraction = self.extractor.extract(unit.source_text, soft_deletes=soft_deletes)
        if extraction is None:
            return None

        record_type = record_type_for_table(extraction.table_name)
        self._transition(DriverState.DECIDING)

        def outcome(action: str, field_spec: str | None = None) -> UnitOutcome:
            return UnitOutcome(
                table_name=extraction.table_name,
                record_type=record_type,
                action=action,
                origin_path=unit.origin_path,
                field_spec=field_spec,
            )

        if record_type in handled or self.record_store.exists(record_type):
            self._transition(DriverState.SKIPPING)
            logger.info("%s already exists, skipping %s", record_type, unit.creation_order_key)
            return outcome(UnitAction.SKIPPED)

        handled.add(record_type)
        field_spec = render_field_spec(extraction.fields)

        if dry_run:
            self._transition(DriverState.REPORTING)
            return outcome(UnitAction.REPORTED, field_spec)

        self._transition(DriverState.GENERATING)
        parsed = parse_field_spec(field_spec)
        self.pipeline.generate(record_type, parsed.fields)
        logger.info("Scaffolded %s from %s", record_type, unit.creation_order_key)
        return outcome(UnitAction.SCAFFOLDED, field_spec)

    # -----------------------------------------------------------------------
    # Watch mode
    # -----------------------------------------------------------------------

    def make_watcher(
        self,
        interval: int = DEFAULT_POLL_INTERVAL,
        dry_run: bool = False,
        soft_deletes: bool = False,
        sleep: Callable[[float], None] = time.sleep,
        on_new_sources: Callable[[list[str]], None] | None = None,
        on_pass: Callable[[SyncResult], None] | None = None,
    ) -> PollingWatcher:
        """Build a PollingWatcher that runs a full pass when sources appear."""

        def handle_new(new_sources: list[str]) -> None:
            if on_new_sources is not None:
                on_new_sources(new_sources)
            try:
                result = self.run_pass(dry_run=dry_run, soft_deletes=soft_deletes)
            except SourceDirectoryNotFoundError as exc:
                logger.error("%s", exc)
                return
            if on_pass is not None:
                on_pass(result)

        return PollingWatcher(
            list_sources=self.source_names,
            on_new_sources=handle_new,
            interval=interval,
            sleep=sleep,
        )

    def watch(
        self,
        interval: int = DEFAULT_POLL_INTERVAL,
        dry_run: bool = False,
        soft_deletes: bool = False,
        sleep: Callable[[float], None] = time.sleep,
        max_cycles: int | None = None,
    ) -> PollingWatcher:
        """Poll until interrupted (or max_cycles); returns the watcher used."""
        watcher = self.make_watcher(interval, dry_run, soft_deletes, sleep)
        watcher.run(max_cycles=max_cycles)
        return watcher
