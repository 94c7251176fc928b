"""Progression helpers for tiers, week boundaries and display labels."""

from __future__ import annotations

from enum import Enum


class Tier(Enum):
    """Cultivation realm derived from cumulative experience."""

    MORTAL = 1
    QI_REFINING = 2
    FOUNDATION = 3
    CORE_FORMATION = 4
    DEITY_TRANSFORMATION = 5

    @property
    def rank(self) -> int:
        return self.value

    @property
    def display_name(self) -> str:
        return _TIER_NAMES[self]

    def __str__(self) -> str:
        return self.display_name


_TIER_NAMES = {
    Tier.MORTAL: "凡人境",
    Tier.QI_REFINING: "炼气期",
    Tier.FOUNDATION: "筑基期",
    Tier.CORE_FORMATION: "结丹期",
    Tier.DEITY_TRANSFORMATION: "化神期",
}

# Inclusive experience ceiling of every tier but the last.
_TIER_CEILINGS = (
    (50, Tier.MORTAL),
    (150, Tier.QI_REFINING),
    (300, Tier.FOUNDATION),
    (500, Tier.CORE_FORMATION),
)


def tier_for_experience(experience: int) -> Tier:
    """Map an experience counter onto its realm band."""
    for ceiling, tier in _TIER_CEILINGS:
        if experience <= ceiling:
            return tier
    return Tier.DEITY_TRANSFORMATION


def is_week_boundary(day: int, days_per_week: int = 7) -> bool:
    """Return True on the last day of every week (day 7, 14, ...)."""
    return day % days_per_week == 0


def format_delta(value: int) -> str:
    """Signed label for a resource change: ``+3``, ``+0``, ``-2``."""
    if value >= 0:
        return f"+{value}"
    return str(value)


def format_elapsed(seconds: float) -> str:
    """Render a duration as ``H:MM:SS`` with unpadded hours."""
    total = max(0, int(seconds))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours}:{minutes:02d}:{secs:02d}"
