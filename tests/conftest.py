"""
Pytest fixtures for Spy party tests.
"""

import itertools
from datetime import datetime
from typing import List

import pytest

from spy_party.config.game_config import GameConfig
from spy_party.core import (
    ConfirmRoster,
    EndRound,
    Randomizer,
    RevealNext,
    SelectWord,
    SessionMachine,
    SessionState,
    SubmitRoster,
    View,
)

ROSTER_INPUT = "Ana, Luis, Sofia, Leo"
WORD_BANK = ["Beach", "Castle", "Zoo"]


class ScriptedRandom:
    """Random source returning preset indexes (0 once the script runs out)."""

    def __init__(self, values: List[int] = None):
        self.values = list(values or [])
        self.calls: List[int] = []

    def randrange(self, stop: int) -> int:
        self.calls.append(stop)
        value = self.values.pop(0) if self.values else 0
        assert 0 <= value < stop, f"scripted index {value} out of range for {stop}"
        return value


def apply_events(machine: SessionMachine, state: SessionState, *events) -> SessionState:
    """Dispatch events in order, failing the test on any rejection."""
    for event in events:
        result = machine.dispatch(state, event)
        assert result.accepted, f"{event!r} rejected: {result.message}"
        state = result.state
    return state


def play_reveal(machine: SessionMachine, state: SessionState) -> SessionState:
    """Reveal and hide every card."""
    for _ in range(2 * len(state.players)):
        state = apply_events(machine, state, RevealNext())
    assert state.view == View.IN_PROGRESS
    return state


@pytest.fixture
def game_config():
    """Test game configuration."""
    return GameConfig()


@pytest.fixture
def id_factory():
    """Sequential ids: id-1, id-2, ..."""
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2024, 5, 1, 20, 30)


@pytest.fixture
def scripted_random():
    return ScriptedRandom()


@pytest.fixture
def machine(game_config, scripted_random, id_factory, fixed_clock):
    """Session machine with scripted randomness, sequential ids and a fixed clock."""
    return SessionMachine(
        config=game_config,
        randomizer=Randomizer(scripted_random),
        word_bank=WORD_BANK,
        id_factory=id_factory,
        clock=fixed_clock,
    )


@pytest.fixture
def preview_state(machine):
    """Roster of Ana, Luis, Sofia, Leo (id-1..id-4) waiting for confirmation."""
    return apply_events(machine, SessionState(), SubmitRoster(ROSTER_INPUT))


@pytest.fixture
def word_select_state(machine, preview_state):
    return apply_events(machine, preview_state, ConfirmRoster())


@pytest.fixture
def reveal_state(machine, word_select_state, scripted_random):
    """Round on "Beach" with Luis (id-2) as the spy, first card face down."""
    scripted_random.values = [1]
    return apply_events(machine, word_select_state, SelectWord("Beach"))


@pytest.fixture
def results_state(machine, reveal_state):
    """Reveal finished and round ended, waiting for the verdict."""
    state = play_reveal(machine, reveal_state)
    return apply_events(machine, state, EndRound())
