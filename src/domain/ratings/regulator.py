"""Post-calculation adjustments: bot dampening and per-category regulation."""

from __future__ import annotations

from collections.abc import Callable, Mapping

from domain.ratings.categories import Category
from domain.ratings.perf import Perf

RatingFactors = Mapping[Category, float]
RatingFactorsSource = Callable[[], RatingFactors]


def dampen(before: Perf, after: Perf, *, player_is_bot: bool, opponent_is_bot: bool) -> Perf:
    """Halve a human's rating change against a bot."""
    if not player_is_bot and opponent_is_bot:
        return after.average_rating(before)
    return after


class RatingRegulator:
    """Scale fresh rating changes per category.

    A factor of 1 (or no factor) keeps the calculated record, 0 keeps the
    previous record, and anything in between moves the rating triple that
    fraction of the way. Factors above 1 amplify the change.
    """

    def __init__(self, factors: RatingFactors) -> None:
        self.factors = dict(factors)

    def regulate(self, category: Category, before: Perf, after: Perf) -> Perf:
        factor = self.factors.get(category)
        if factor is None or factor == 1.0:
            return after
        if after.nb != before.nb + 1:
            return after
        if factor <= 0.0:
            return before
        return Perf(
            rating=before.rating.interpolate(after.rating, factor).cap(),
            nb=after.nb,
            recent=after.recent,
            latest=after.latest,
        )


__all__ = ["RatingFactors", "RatingFactorsSource", "RatingRegulator", "dampen"]
