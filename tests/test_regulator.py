"""Tests for rating regulation and bot dampening."""

from __future__ import annotations

from datetime import datetime

import pytest

from domain.ratings.categories import Category
from domain.ratings.perf import Perf, Rating
from domain.ratings.regulator import RatingRegulator, dampen

GAME_TIME = datetime(2026, 1, 1, 12, 0, 0)
BEFORE = Perf(rating=Rating(1500.0, 200.0, 0.06), nb=5)
AFTER = BEFORE.add(Rating(1520.0, 190.0, 0.062), GAME_TIME)


def test_missing_factor_keeps_calculated_perf() -> None:
    regulator = RatingRegulator({})
    assert regulator.regulate(Category.BLITZ, BEFORE, AFTER) is AFTER


def test_factor_one_keeps_calculated_perf() -> None:
    regulator = RatingRegulator({Category.BLITZ: 1.0})
    assert regulator.regulate(Category.BLITZ, BEFORE, AFTER) is AFTER


def test_factor_zero_keeps_previous_perf() -> None:
    regulator = RatingRegulator({Category.BLITZ: 0.0})
    assert regulator.regulate(Category.BLITZ, BEFORE, AFTER) is BEFORE


def test_intermediate_factor_scales_the_change() -> None:
    regulator = RatingRegulator({Category.BLITZ: 0.5})
    regulated = regulator.regulate(Category.BLITZ, BEFORE, AFTER)

    assert regulated.rating.rating == pytest.approx(1510.0)
    assert regulated.rating.deviation == pytest.approx(195.0)
    assert regulated.rating.volatility == pytest.approx(0.061)
    assert regulated.nb == AFTER.nb
    assert regulated.latest == GAME_TIME


def test_factor_above_one_amplifies_the_change() -> None:
    regulator = RatingRegulator({Category.ATOMIC: 1.5})
    regulated = regulator.regulate(Category.ATOMIC, BEFORE, AFTER)
    assert regulated.rating.rating == pytest.approx(1530.0)


def test_factors_are_per_category() -> None:
    regulator = RatingRegulator({Category.ATOMIC: 0.0})
    assert regulator.regulate(Category.BLITZ, BEFORE, AFTER) is AFTER


def test_records_that_did_not_take_a_game_are_left_alone() -> None:
    regulator = RatingRegulator({Category.BLITZ: 0.0})
    assert regulator.regulate(Category.BLITZ, BEFORE, BEFORE) is BEFORE
    reset = Perf(rating=Rating(1600.0, 100.0, 0.06), nb=BEFORE.nb)
    assert regulator.regulate(Category.BLITZ, BEFORE, reset) is reset


def test_human_against_bot_is_halved() -> None:
    dampened = dampen(BEFORE, AFTER, player_is_bot=False, opponent_is_bot=True)

    assert dampened.rating.rating - BEFORE.rating.rating == pytest.approx(10.0)
    assert dampened.rating.deviation == pytest.approx(195.0)
    assert dampened.nb == AFTER.nb


@pytest.mark.parametrize(
    ("player_is_bot", "opponent_is_bot"),
    [(False, False), (True, True), (True, False)],
)
def test_other_pairings_are_not_dampened(player_is_bot: bool, opponent_is_bot: bool) -> None:
    dampened = dampen(BEFORE, AFTER, player_is_bot=player_is_bot, opponent_is_bot=opponent_is_bot)
    assert dampened is AFTER
