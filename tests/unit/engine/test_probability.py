"""Tests for the random draw helpers."""

import random

from engine.probability import chance, new_rng, pick, pick_count, shuffled


def test_chance_compares_draw_against_probability(scripted):
    rng = scripted(0.0, 0.5, 0.5)
    assert chance(rng, 0.0) is False
    assert chance(rng, 0.6) is True
    assert chance(rng, 0.5) is False


def test_chance_consumes_one_draw_even_at_zero(scripted):
    rng = scripted(0.3, 0.1)
    chance(rng, 0.0)
    assert rng.draws == [0.1]


def test_pick_count_range():
    rng = random.Random(5)
    seen = {pick_count(rng, 3) for _ in range(300)}
    assert seen == {1, 2, 3}
    assert pick_count(rng, 0) == 0
    assert pick_count(rng, 1) == 1


def test_shuffled_returns_new_list_with_same_items():
    items = [1, 2, 3, 4]
    out = shuffled(random.Random(2), items)
    assert sorted(out) == items
    assert items == [1, 2, 3, 4]


def test_seeded_sources_repeat():
    a, b = new_rng(11), new_rng(11)
    assert [pick(a, "abcdef") for _ in range(20)] == [pick(b, "abcdef") for _ in range(20)]
