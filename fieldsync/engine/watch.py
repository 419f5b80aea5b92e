#!/usr/bin/env python3
# Ticket: 0001_field_spec_scaffolding
# Design: DESIGN.md
"""
Polling Watcher

A stoppable periodic task that notices new schema source files:

    known = {A.php}
    poll  → current = {A.php, B.php} → new = [B.php] → on_new_sources([B.php])
          → known = {A.php, B.php}

The known set is replaced by the current set only when something new appeared.
Sleep is injected so tests can drive many poll cycles without waiting. Passes
triggered from one poll always finish before the next sleep starts.
"""

import logging
import time
from typing import Callable, Iterable

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 1


def detect_new_sources(known: Iterable[str], current: Iterable[str]) -> list[str]:
    """Return names present in current but not in known, sorted."""
    return sorted(set(current) - set(known))


class PollingWatcher:
    """
    Re-check a source listing every interval seconds.

    Args:
        list_sources: Returns the current set of source identifiers.
        on_new_sources: Called with the sorted list of new identifiers.
        interval: Whole seconds between polls (minimum 1).
        sleep: Blocking sleep function, time.sleep by default.
        known: Initial known set; list_sources() is called when omitted.
    """

    def __init__(
        self,
        list_sources: Callable[[], set[str]],
        on_new_sources: Callable[[list[str]], None],
        interval: int = DEFAULT_POLL_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
        known: Iterable[str] | None = None,
    ):
        if int(interval) < 1:
            raise ValueError(f"Poll interval must be at least 1 second, got {interval}")
        self.list_sources = list_sources
        self.on_new_sources = on_new_sources
        self.interval = int(interval)
        self.sleep = sleep
        self.known: set[str] = set(known) if known is not None else set(list_sources())
        self.cycles = 0
        self._stopped = False

    def stop(self) -> None:
        """Ask the loop to exit after the current cycle."""
        self._stopped = True

    @property
    def stopped(self) -> bool:
        return self._stopped

    def poll_once(self) -> list[str]:
        """Run one poll: detect new sources and fire the callback if any."""
        current = set(self.list_sources())
        new = detect_new_sources(self.known, current)
        if new:
            logger.info("New source(s) detected: %s", ", ".join(new))
            self.on_new_sources(new)
            self.known = current
        self.cycles += 1
        return new

    def run(self, max_cycles: int | None = None) -> int:
        """
        Poll until stop() is called or max_cycles polls have run.

        Returns:
            Number of cycles executed by this call.
        """
        ran = 0
        while not self._stopped:
            if max_cycles is not None and ran >= max_cycles:
                break
            self.poll_once()
            ran += 1
            if self._stopped or (max_cycles is not None and ran >= max_cycles):
                break
            self.sleep(self.interval)
        return ran
