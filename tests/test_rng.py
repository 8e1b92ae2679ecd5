"""Tests for the deterministic generator."""
from datetime import date, datetime, timezone

import pytest

from whodunit.util.rng import Rng, replay_seed, today_seed


def test_first_draw_matches_lcg():
    assert Rng(1).random() == 1103527590 / 2**31


def test_same_seed_same_stream():
    first = Rng(42)
    second = Rng(42)
    assert [first.random() for _ in range(50)] == [second.random() for _ in range(50)]


def test_draws_stay_in_unit_interval():
    rng = Rng(-17)
    for _ in range(1000):
        value = rng.random()
        assert 0.0 <= value < 1.0


def test_shuffle_consumes_one_draw_per_swap():
    shuffled = Rng(7)
    shuffled.shuffle(list(range(5)))
    counted = Rng(7)
    for _ in range(4):
        counted.random()
    assert shuffled.random() == counted.random()


def test_shuffle_keeps_members():
    items = list(range(10))
    result = Rng(3).shuffled(items)
    assert sorted(result) == items
    assert items == list(range(10))


def test_randint_is_inclusive():
    rng = Rng(11)
    seen = {rng.randint(1, 3) for _ in range(500)}
    assert seen == {1, 2, 3}


def test_choice_on_empty_sequence_raises():
    with pytest.raises(IndexError):
        Rng(1).choice([])


def test_weighted_choice_skips_zero_weight():
    rng = Rng(5)
    picks = {rng.weighted_choice([("a", 0.0), ("b", 1.0)]) for _ in range(100)}
    assert picks == {"b"}


def test_today_seed_is_calendar_date():
    assert today_seed(date(2024, 6, 15)) == 20240615


def test_replay_seed_uses_timestamp_millis():
    moment = datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert replay_seed(moment) == 1704067200000
