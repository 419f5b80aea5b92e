"""
Tests for engine/state_machine.py

Validates:
- All valid driver transitions are accepted
- Invalid transitions raise InvalidTransitionError
- Unknown states raise UnknownStateError
- Every state can eventually return to idle
"""

import pytest

from fieldsync.engine.state_machine import (
    VALID_TRANSITIONS,
    DriverState,
    InvalidTransitionError,
    UnknownStateError,
    can_transition,
    validate_transition,
)


# ---------------------------------------------------------------------------
# Valid transitions
# ---------------------------------------------------------------------------

VALID_TRANSITION_PAIRS = [
    (DriverState.IDLE, DriverState.SCANNING),
    (DriverState.SCANNING, DriverState.EXTRACTING),
    (DriverState.SCANNING, DriverState.IDLE),
    (DriverState.EXTRACTING, DriverState.DECIDING),
    (DriverState.EXTRACTING, DriverState.EXTRACTING),
    (DriverState.EXTRACTING, DriverState.IDLE),
    (DriverState.DECIDING, DriverState.SKIPPING),
    (DriverState.DECIDING, DriverState.REPORTING),
    (DriverState.DECIDING, DriverState.GENERATING),
    (DriverState.SKIPPING, DriverState.EXTRACTING),
    (DriverState.REPORTING, DriverState.IDLE),
    (DriverState.GENERATING, DriverState.EXTRACTING),
    (DriverState.GENERATING, DriverState.IDLE),
]


@pytest.mark.parametrize("from_state,to_state", VALID_TRANSITION_PAIRS)
def test_valid_transitions_do_not_raise(from_state, to_state):
    validate_transition(from_state, to_state)


@pytest.mark.parametrize("from_state,to_state", VALID_TRANSITION_PAIRS)
def test_can_transition_returns_true_for_valid(from_state, to_state):
    assert can_transition(from_state, to_state) is True


# ---------------------------------------------------------------------------
# Invalid transitions
# ---------------------------------------------------------------------------

INVALID_TRANSITION_PAIRS = [
    (DriverState.IDLE, DriverState.EXTRACTING),
    (DriverState.IDLE, DriverState.GENERATING),
    (DriverState.SCANNING, DriverState.DECIDING),
    (DriverState.DECIDING, DriverState.IDLE),
    (DriverState.DECIDING, DriverState.EXTRACTING),
    (DriverState.SKIPPING, DriverState.GENERATING),
    (DriverState.GENERATING, DriverState.SCANNING),
]


@pytest.mark.parametrize("from_state,to_state", INVALID_TRANSITION_PAIRS)
def test_invalid_transitions_raise(from_state, to_state):
    with pytest.raises(InvalidTransitionError) as exc_info:
        validate_transition(from_state, to_state)
    assert exc_info.value.from_state == from_state
    assert exc_info.value.to_state == to_state


@pytest.mark.parametrize("from_state,to_state", INVALID_TRANSITION_PAIRS)
def test_can_transition_returns_false_for_invalid(from_state, to_state):
    assert can_transition(from_state, to_state) is False


# ---------------------------------------------------------------------------
# Unknown states
# ---------------------------------------------------------------------------


def test_unknown_from_state_raises():
    with pytest.raises(UnknownStateError):
        validate_transition("sleeping", DriverState.IDLE)


def test_unknown_to_state_raises():
    with pytest.raises(UnknownStateError):
        validate_transition(DriverState.IDLE, "sleeping")


def test_can_transition_unknown_state_is_false():
    assert can_transition("sleeping", DriverState.IDLE) is False


# ---------------------------------------------------------------------------
# Structure
# ---------------------------------------------------------------------------


def test_every_state_has_transitions():
    assert set(VALID_TRANSITIONS) == set(DriverState.ALL)


def test_every_state_reaches_idle():
    for start in DriverState.ALL:
        seen = {start}
        frontier = [start]
        while frontier:
            state = frontier.pop()
            for nxt in VALID_TRANSITIONS[state]:
                if nxt not in seen:
                    seen.add(nxt)
                    frontier.append(nxt)
        assert DriverState.IDLE in seen or start == DriverState.IDLE


def test_unit_done_states_return_to_extracting_or_idle():
    for state in DriverState.UNIT_DONE:
        assert VALID_TRANSITIONS[state] == {DriverState.EXTRACTING, DriverState.IDLE}
