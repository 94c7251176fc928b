"""Option shuffling and event draws."""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence

from catalog.models import Event

from .probability import pick, shuffled

logger = logging.getLogger(__name__)


def reshuffle(event: Event, rng: random.Random) -> Event:
    """Replace ``presented_options`` with a uniform permutation of the authored options."""
    event.presented_options = shuffled(rng, event.options)
    logger.debug("Reshuffled %s event %d: %s", event.kind, event.id, presented_slots(event))
    return event


def presented_slots(event: Event) -> str:
    """Authored slots in display order, e.g. ``"CAB"``."""
    return "".join(option.slot for option in event.presented_options)


def draw(templates: Sequence[Event], rng: random.Random) -> Event:
    """Clone a uniformly chosen template and reshuffle the copy."""
    event = pick(rng, templates).clone()
    return reshuffle(event, rng)
