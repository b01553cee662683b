"""Tests for category selection and result encoding."""

from __future__ import annotations

import pytest

from domain.ratings.categories import (
    STANDARD_SPEED_CATEGORIES,
    Category,
    parse_category,
    select_category,
)
from domain.ratings.common import Outcome, Result, Speed, Variant, result_of


def test_there_are_fourteen_categories() -> None:
    assert len(Category) == 14
    assert len(STANDARD_SPEED_CATEGORIES) == 6


@pytest.mark.parametrize(
    ("speed", "expected"),
    [
        (Speed.ULTRA_BULLET, Category.ULTRA_BULLET),
        (Speed.BULLET, Category.BULLET),
        (Speed.BLITZ, Category.BLITZ),
        (Speed.RAPID, Category.RAPID),
        (Speed.CLASSICAL, Category.CLASSICAL),
        (Speed.CORRESPONDENCE, Category.CORRESPONDENCE),
    ],
)
def test_standard_games_are_rated_by_speed(speed: Speed, expected: Category) -> None:
    assert select_category(Variant.STANDARD, speed) is expected
    assert expected.is_standard_speed


def test_standard_game_without_speed_has_no_category() -> None:
    assert select_category(Variant.STANDARD, None) is None


@pytest.mark.parametrize("speed", [None, Speed.BULLET, Speed.CORRESPONDENCE])
def test_variants_ignore_speed(speed: Speed | None) -> None:
    assert select_category(Variant.ATOMIC, speed) is Category.ATOMIC
    assert select_category(Variant.CRAZYHOUSE, speed) is Category.CRAZYHOUSE
    assert not Category.ATOMIC.is_standard_speed


def test_every_rated_variant_has_its_own_category() -> None:
    selected = {
        select_category(variant, Speed.BLITZ)
        for variant in Variant
        if variant not in (Variant.STANDARD, Variant.FROM_POSITION)
    }
    assert len(selected) == 8
    assert selected.isdisjoint(STANDARD_SPEED_CATEGORIES)


def test_from_position_is_never_rated() -> None:
    assert select_category(Variant.FROM_POSITION, Speed.BLITZ) is None


def test_parse_category_rejects_unknown_keys() -> None:
    assert parse_category("kingOfTheHill") is Category.KING_OF_THE_HILL
    with pytest.raises(ValueError, match="Unknown rating category 'puzzle'"):
        parse_category("puzzle")


def test_result_of_orients_on_first_participant() -> None:
    assert result_of(Outcome.FIRST_WINS) is Result.WIN
    assert result_of(Outcome.SECOND_WINS) is Result.LOSS
    assert result_of(Outcome.DRAW) is Result.DRAW


def test_result_scores_and_inverse() -> None:
    assert Result.WIN.score == pytest.approx(1.0)
    assert Result.LOSS.score == pytest.approx(0.0)
    assert Result.DRAW.score == pytest.approx(0.5)
    assert Result.WIN.inverse is Result.LOSS
    assert Result.LOSS.inverse is Result.WIN
    assert Result.DRAW.inverse is Result.DRAW
