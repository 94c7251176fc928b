"""Tests for realm bands and progression labels."""

from narrative import (
    Tier,
    format_delta,
    format_elapsed,
    is_week_boundary,
    tier_for_experience,
)


def test_tier_bands_match_boundaries():
    assert tier_for_experience(0) is Tier.MORTAL
    assert tier_for_experience(50) is Tier.MORTAL
    assert tier_for_experience(51) is Tier.QI_REFINING
    assert tier_for_experience(150) is Tier.QI_REFINING
    assert tier_for_experience(151) is Tier.FOUNDATION
    assert tier_for_experience(300) is Tier.FOUNDATION
    assert tier_for_experience(301) is Tier.CORE_FORMATION
    assert tier_for_experience(500) is Tier.CORE_FORMATION
    assert tier_for_experience(501) is Tier.DEITY_TRANSFORMATION
    assert tier_for_experience(2**32 - 1) is Tier.DEITY_TRANSFORMATION


def test_tier_is_monotonic_in_experience():
    ranks = [tier_for_experience(exp).rank for exp in range(0, 800)]
    assert ranks == sorted(ranks)
    assert set(ranks) == {1, 2, 3, 4, 5}
    assert all(
        tier_for_experience(e).rank <= tier_for_experience(e + 1).rank
        for e in range(0, 700)
    )


def test_tier_stays_top_rank_up_to_saturation():
    for exp in (501, 1_000, 10**6, 2**31, 2**32 - 2, 2**32 - 1):
        assert tier_for_experience(exp) is Tier.DEITY_TRANSFORMATION


def test_tier_display_names():
    assert Tier.MORTAL.display_name == "凡人境"
    assert Tier.QI_REFINING.display_name == "炼气期"
    assert str(Tier.DEITY_TRANSFORMATION) == "化神期"


def test_week_boundary_falls_on_every_seventh_day():
    assert is_week_boundary(7)
    assert is_week_boundary(14)
    assert not is_week_boundary(6)
    assert not is_week_boundary(8)
    assert is_week_boundary(5, days_per_week=5)


def test_format_delta_is_always_signed():
    assert format_delta(3) == "+3"
    assert format_delta(0) == "+0"
    assert format_delta(-2) == "-2"


def test_format_elapsed_uses_unpadded_hours():
    assert format_elapsed(0) == "0:00:00"
    assert format_elapsed(59.9) == "0:00:59"
    assert format_elapsed(3725) == "1:02:05"
    assert format_elapsed(36000) == "10:00:00"
    assert format_elapsed(-5) == "0:00:00"
