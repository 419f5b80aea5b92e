#!/usr/bin/env python3
# Ticket: 0001_field_spec_scaffolding
# Design: DESIGN.md
"""
Sync Driver State Machine

Defines the valid state transitions of one synchronization pass.

State diagram:
    idle       → scanning   (pass starts)
    scanning   → extracting (first source unit)
    scanning   → idle       (no sources, or directory missing)
    extracting → deciding   (table name recovered)
    extracting → extracting (unit excluded, next unit)
    extracting → idle       (unit excluded, pass done)
    deciding   → skipping | reporting | generating
    skipping   → extracting | idle
    reporting  → extracting | idle
    generating → extracting | idle

In watch mode the driver re-enters idle after every pass. Invalid transitions
raise InvalidTransitionError.
"""


class DriverState:
    IDLE = "idle"
    SCANNING = "scanning"
    EXTRACTING = "extracting"
    DECIDING = "deciding"
    SKIPPING = "skipping"
    REPORTING = "reporting"
    GENERATING = "generating"

    ALL = frozenset([
        IDLE, SCANNING, EXTRACTING, DECIDING,
        SKIPPING, REPORTING, GENERATING,
    ])

    # States that close out one unit
    UNIT_DONE = frozenset([SKIPPING, REPORTING, GENERATING])


VALID_TRANSITIONS: dict[str, frozenset[str]] = {
    DriverState.IDLE: frozenset([DriverState.SCANNING]),
    DriverState.SCANNING: frozenset([DriverState.EXTRACTING, DriverState.IDLE]),
    DriverState.EXTRACTING: frozenset([
        DriverState.DECIDING,
        DriverState.EXTRACTING,
        DriverState.IDLE,
    ]),
    DriverState.DECIDING: frozenset([
        DriverState.SKIPPING,
        DriverState.REPORTING,
        DriverState.GENERATING,
    ]),
    DriverState.SKIPPING: frozenset([DriverState.EXTRACTING, DriverState.IDLE]),
    DriverState.REPORTING: frozenset([DriverState.EXTRACTING, DriverState.IDLE]),
    DriverState.GENERATING: frozenset([DriverState.EXTRACTING, DriverState.IDLE]),
}


class InvalidTransitionError(ValueError):
    """Raised when a driver state transition is not allowed."""

    def __init__(self, from_state: str, to_state: str):
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid driver transition: '{from_state}' → '{to_state}'. "
            f"Valid transitions from '{from_state}': "
            f"{sorted(VALID_TRANSITIONS.get(from_state, frozenset()))}"
        )


class UnknownStateError(ValueError):
    """Raised when an unknown driver state is encountered."""

    def __init__(self, state: str):
        self.state = state
        super().__init__(
            f"Unknown driver state: '{state}'. Valid states: {sorted(DriverState.ALL)}"
        )


def validate_transition(from_state: str, to_state: str) -> None:
    """
    Validate that a driver state transition is allowed.

    Raises:
        UnknownStateError: if either state is not in DriverState.ALL
        InvalidTransitionError: if the transition is not in VALID_TRANSITIONS
    """
    if from_state not in DriverState.ALL:
        raise UnknownStateError(from_state)
    if to_state not in DriverState.ALL:
        raise UnknownStateError(to_state)
    if to_state not in VALID_TRANSITIONS[from_state]:
        raise InvalidTransitionError(from_state, to_state)


def can_transition(from_state: str, to_state: str) -> bool:
    return to_state in VALID_TRANSITIONS.get(from_state, frozenset())
