"""Rating categories and the variant/speed dispatch onto them."""

from __future__ import annotations

from enum import Enum
from typing import Final

from domain.ratings.common import Speed, Variant


class Category(str, Enum):
    """The fourteen independent rating buckets a player maintains."""

    CHESS960 = "chess960"
    KING_OF_THE_HILL = "kingOfTheHill"
    THREE_CHECK = "threeCheck"
    ANTICHESS = "antichess"
    ATOMIC = "atomic"
    HORDE = "horde"
    RACING_KINGS = "racingKings"
    CRAZYHOUSE = "crazyhouse"
    ULTRA_BULLET = "ultraBullet"
    BULLET = "bullet"
    BLITZ = "blitz"
    RAPID = "rapid"
    CLASSICAL = "classical"
    CORRESPONDENCE = "correspondence"

    @property
    def is_standard_speed(self) -> bool:
        return self in STANDARD_SPEED_CATEGORIES


# None marks variants that are never rated in any bucket.
VARIANT_CATEGORIES: Final[dict[Variant, Category | None]] = {
    Variant.CHESS960: Category.CHESS960,
    Variant.KING_OF_THE_HILL: Category.KING_OF_THE_HILL,
    Variant.THREE_CHECK: Category.THREE_CHECK,
    Variant.ANTICHESS: Category.ANTICHESS,
    Variant.ATOMIC: Category.ATOMIC,
    Variant.HORDE: Category.HORDE,
    Variant.RACING_KINGS: Category.RACING_KINGS,
    Variant.CRAZYHOUSE: Category.CRAZYHOUSE,
    Variant.FROM_POSITION: None,
}

SPEED_CATEGORIES: Final[dict[Speed, Category]] = {
    Speed.ULTRA_BULLET: Category.ULTRA_BULLET,
    Speed.BULLET: Category.BULLET,
    Speed.BLITZ: Category.BLITZ,
    Speed.RAPID: Category.RAPID,
    Speed.CLASSICAL: Category.CLASSICAL,
    Speed.CORRESPONDENCE: Category.CORRESPONDENCE,
}

STANDARD_SPEED_CATEGORIES: Final[frozenset[Category]] = frozenset(SPEED_CATEGORIES.values())


def select_category(variant: Variant, speed: Speed | None) -> Category | None:
    """Return the single category a game of this variant and speed is rated in."""
    if variant is Variant.STANDARD:
        if speed is None:
            return None
        return SPEED_CATEGORIES[speed]
    return VARIANT_CATEGORIES[variant]


def parse_category(value: str) -> Category:
    """Parse a category key, raising ``ValueError`` with the known keys listed."""
    try:
        return Category(value)
    except ValueError:
        known = ", ".join(category.value for category in Category)
        raise ValueError(f"Unknown rating category '{value}' (expected one of: {known})") from None


__all__ = [
    "Category",
    "SPEED_CATEGORIES",
    "STANDARD_SPEED_CATEGORIES",
    "VARIANT_CATEGORIES",
    "parse_category",
    "select_category",
]
