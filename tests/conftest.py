"""Shared fixtures: a random source with scripted uniform draws."""

from __future__ import annotations

import random

import pytest

from catalog.loader import Catalog
from catalog.models import Event, NpcEncounter, NpcOption, Option


class ScriptedRandom(random.Random):
    """random.Random whose ``random()`` draws come from a queue.

    Integer draws (shuffle, choice, randint) keep using the seeded stream
    because ``getrandbits`` is defined here too. Once the queue is empty,
    ``random()`` returns 0.999, which passes every death and promotion roll.
    """

    def __init__(self, seed: int = 0):
        super().__init__(seed)
        self.draws: list[float] = []

    def random(self) -> float:
        if self.draws:
            return self.draws.pop(0)
        return 0.999

    def getrandbits(self, k: int) -> int:
        return super().getrandbits(k)


@pytest.fixture
def scripted():
    def _make(*draws: float, seed: int = 0) -> ScriptedRandom:
        rng = ScriptedRandom(seed)
        rng.draws.extend(draws)
        return rng

    return _make


def make_event(event_id: int, rewards=((60, 10), (1, 1), (-5, 2)), kind: str = "daily") -> Event:
    """Event whose authored options carry ``rewards`` in order."""
    return Event(
        id=event_id,
        name=f"{kind} {event_id}",
        description=f"{kind} event {event_id}",
        options=tuple(
            Option(skill, stress, label=f"option {i}", story=f"story {i}", origin_index=i)
            for i, (skill, stress) in enumerate(rewards)
        ),
        kind=kind,
    )


def make_npc(name: str, accept=(3, 1), reject=(-1, -3)) -> NpcEncounter:
    return NpcEncounter(
        name=name,
        description=f"{name} desc",
        model=f"{name} model",
        prompts=(f"{name} asks for help",),
        accept=NpcOption("配合", "一起上线", *accept),
        reject=NpcOption("拒绝", "凌晨被叫醒", *reject),
    )


@pytest.fixture
def small_catalog() -> Catalog:
    """One daily event, one weekly event and three NPCs, in authored order."""
    return Catalog(
        daily_events=[make_event(0)],
        weekly_events=[make_event(0, rewards=((10, 5), (0, 0), (-2, -2)), kind="weekly")],
        npcs=[make_npc("甲"), make_npc("乙"), make_npc("丙")],
    )
