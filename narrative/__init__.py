"""Narrative progression: realms, week boundaries and display labels."""

from .progression import (
    Tier,
    format_delta,
    format_elapsed,
    is_week_boundary,
    tier_for_experience,
)

__all__ = [
    "Tier",
    "format_delta",
    "format_elapsed",
    "is_week_boundary",
    "tier_for_experience",
]
