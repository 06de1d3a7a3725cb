"""Shared test fixtures for Ninja Keyboard engine tests."""

import random

import pytest

from core.models import GamePhase, Keystroke
from core.typing_engine import process_keystroke


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start_ms: float = 1000.0):
        self.now_ms = start_ms

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, ms: float) -> None:
        self.now_ms += ms


@pytest.fixture
def clock():
    """Fake monotonic clock starting at 1000ms."""
    return FakeClock()


@pytest.fixture
def rng():
    """Seeded random source."""
    return random.Random(42)


def make_keystroke(expected: str, actual: str = None, code: str = "KeyA",
                   timestamp: float = 0.0) -> Keystroke:
    """Build a keystroke, correct unless actual is given."""
    return process_keystroke(expected, expected if actual is None else actual, code, timestamp)


def playing(state):
    """Put a word rain state into the playing phase."""
    return state.model_copy(update={"phase": GamePhase.PLAYING})
