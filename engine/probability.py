"""Random draws shared by every stochastic decision in the engine.

All helpers take an explicit ``random.Random`` so a session can run on a
seeded or scripted source instead of the module-level generator.
"""

from __future__ import annotations

import random
from collections.abc import Iterable, Sequence
from typing import TypeVar

T = TypeVar("T")


def new_rng(seed: int | None = None) -> random.Random:
    return random.Random(seed)


def roll(rng: random.Random) -> float:
    """Uniform draw in [0, 1)."""
    return rng.random()


def chance(rng: random.Random, probability: float) -> bool:
    """Bernoulli trial: True when a uniform draw lands below ``probability``.

    Always consumes exactly one draw, even for a probability of 0.
    """
    return roll(rng) < probability


def pick(rng: random.Random, items: Sequence[T]) -> T:
    return rng.choice(items)


def pick_count(rng: random.Random, upper: int) -> int:
    """Uniform count in [1, upper], or 0 when there is nothing to take."""
    if upper <= 0:
        return 0
    return rng.randint(1, upper)


def shuffled(rng: random.Random, items: Iterable[T]) -> list[T]:
    out = list(items)
    rng.shuffle(out)
    return out
