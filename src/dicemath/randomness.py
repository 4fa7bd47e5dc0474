"""Sources of dice outcomes.

Every source is a callable ``(low, high) -> int`` returning a value in the
inclusive range ``[low, high]``. Production code uses :class:`SystemRandomness`;
tests pin outcomes with :class:`FixedRandomness` or :class:`ScriptedRandomness`.
"""

from __future__ import annotations

import random
import secrets
import threading
from collections.abc import Iterable
from typing import Protocol


class RandomnessSource(Protocol):
    def __call__(self, low: int, high: int) -> int: ...


class SystemRandomness:
    """OS entropy via ``secrets.SystemRandom``. Safe for concurrent use."""

    def __init__(self) -> None:
        self._rng = secrets.SystemRandom()

    def __call__(self, low: int, high: int) -> int:
        return self._rng.randint(low, high)


class SeededRandomness:
    """Reproducible draws from a seeded ``random.Random``."""

    def __init__(self, seed: int | str | bytes | None = None) -> None:
        self._rng = random.Random(seed)
        self._lock = threading.Lock()

    def __call__(self, low: int, high: int) -> int:
        with self._lock:
            return self._rng.randint(low, high)


class FixedRandomness:
    """Returns the same value for every draw, regardless of range."""

    def __init__(self, value: int) -> None:
        self.value = value

    def __call__(self, low: int, high: int) -> int:
        return self.value


class ScriptedRandomness:
    def __init__(self, values: Iterable[int]) -> None:
        self._values = list(values)
        self.calls: list[tuple[int, int]] = []

    def __call__(self, low: int, high: int) -> int:
        if len(self.calls) >= len(self._values):
            raise LookupError(f"Scripted randomness exhausted after {len(self._values)} draws")
        value = self._values[len(self.calls)]
        self.calls.append((low, high))
        return value
