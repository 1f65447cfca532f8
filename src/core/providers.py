"""
Clock and randomness providers.

Everything in the reward pipeline that needs "now" or a random draw takes
one of these explicitly, so a test can pin time and replay an exact
sequence of draws.

A draw is a single call to ``RandomSource.random()`` returning a float in
[0, 1). Callers document how many draws they consume and in what order.
"""

from __future__ import annotations

import random
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from typing import Protocol


# =============================================================================
# Clock
# =============================================================================


class Clock(Protocol):
    """Source of the current time."""

    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Clock pinned to a moment; ``advance`` moves it forward."""

    def __init__(self, moment: datetime):
        self._moment = moment

    def now(self) -> datetime:
        return self._moment

    def advance(self, **kwargs: float) -> datetime:
        """Move the clock by a ``timedelta(**kwargs)`` and return the new time."""
        self._moment = self._moment + timedelta(**kwargs)
        return self._moment


# =============================================================================
# Random Sources
# =============================================================================


class RandomSource(Protocol):
    """Supplies uniform draws in [0, 1)."""

    def random(self) -> float: ...


class SeededRandom:
    """Pseudo-random source backed by ``random.Random``."""

    def __init__(self, seed: int | None = None):
        self._rng = random.Random(seed)

    def random(self) -> float:
        return self._rng.random()


class SequenceRandom:
    """
    Replays a fixed list of draws.

    Raises IndexError when the sequence runs out, which makes a test fail
    loudly if code consumes more draws than documented.
    """

    def __init__(self, values: Iterable[float]):
        self._values = list(values)
        self._index = 0

    def random(self) -> float:
        if self._index >= len(self._values):
            raise IndexError(
                f"SequenceRandom exhausted after {self._index} draws"
            )
        value = self._values[self._index]
        self._index += 1
        return value

    @property
    def consumed(self) -> int:
        """Number of draws taken so far."""
        return self._index

    @property
    def remaining(self) -> int:
        return len(self._values) - self._index
