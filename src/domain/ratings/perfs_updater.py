"""Fold one finished game into both players' performance records."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from domain.ratings.categories import Category, select_category
from domain.ratings.common import Game, Participant, result_of
from domain.ratings.glicko2.calculator import (
    CalculationFailure,
    RatingCalculator,
    RatingPair,
    calculate_expected_score,
)
from domain.ratings.perf import Perf, Perfs, Rating
from domain.ratings.regulator import RatingFactorsSource, RatingRegulator, dampen

logger = logging.getLogger(__name__)

FarmingPredicate = Callable[[Game], Awaitable[bool]]


@dataclass(frozen=True)
class RatingUpdate:
    """Updated records and signed main-category rating diffs for both sides."""

    category: Category
    first_perfs: Perfs
    second_perfs: Perfs
    first_diff: int
    second_diff: int

    def as_tuple(self) -> tuple[Perfs, Perfs, int, int]:
        return self.first_perfs, self.second_perfs, self.first_diff, self.second_diff


async def no_farming(game: Game) -> bool:
    return False


def _expected_score(player: Rating, opponent: Rating) -> float:
    try:
        return calculate_expected_score(
            rating=player.rating,
            rd=player.deviation,
            opponent_rating=opponent.rating,
            opponent_rd=opponent.deviation,
        )
    except ArithmeticError:
        return float("nan")


class PerfsUpdater:
    """Eligibility gate plus Glicko-2 update, dampening and regulation."""

    def __init__(
        self,
        calculator: RatingCalculator,
        *,
        rating_factors: RatingFactorsSource,
        bot_farming: FarmingPredicate = no_farming,
    ) -> None:
        self.calculator = calculator
        self.rating_factors = rating_factors
        self.bot_farming = bot_farming

    async def process(self, game: Game, first: Participant, second: Participant) -> RatingUpdate | None:
        """Return the rating update for ``game``, or None when it is not rated."""
        if not (game.rated and game.finished and game.accountable):
            logger.debug("game %s skipped: not rated, finished and accountable", game.game_id)
            return None
        if first.lame or second.lame:
            logger.debug("game %s skipped: lame participant", game.game_id)
            return None
        if await self._is_farming(game):
            logger.debug("game %s skipped: bot farming", game.game_id)
            return None

        category = select_category(game.variant, game.speed)
        if category is None:
            logger.debug(
                "game %s skipped: no rating category for variant=%s speed=%s",
                game.game_id,
                game.variant.value,
                None if game.speed is None else game.speed.value,
            )
            return None

        before_first = first.perfs.get(category)
        before_second = second.perfs.get(category)
        outcome = self.calculator.update(before_first.rating, before_second.rating, result_of(game.outcome))

        if isinstance(outcome, CalculationFailure):
            logger.error(
                "game %s: Glicko-2 update failed for %s (first expected score %.3f), ratings left unchanged: %s",
                game.game_id,
                category.value,
                _expected_score(before_first.rating, before_second.rating),
                outcome.reason,
            )
            after_first, after_second = before_first, before_second
        else:
            after_first, after_second = self._add_ratings(game, category, first, second, outcome)

        regulator = RatingRegulator(self.rating_factors())
        first_perfs = self._merge(regulator, category, first.perfs, after_first)
        second_perfs = self._merge(regulator, category, second.perfs, after_second)

        main_category = game.main_category or category
        return RatingUpdate(
            category=category,
            first_perfs=first_perfs,
            second_perfs=second_perfs,
            first_diff=first_perfs.get(main_category).int_rating - first.perfs.get(main_category).int_rating,
            second_diff=second_perfs.get(main_category).int_rating - second.perfs.get(main_category).int_rating,
        )

    async def _is_farming(self, game: Game) -> bool:
        try:
            return bool(await self.bot_farming(game))
        except Exception:
            logger.warning("game %s: bot farming check failed, not rating", game.game_id, exc_info=True)
            return True

    def _add_ratings(
        self,
        game: Game,
        category: Category,
        first: Participant,
        second: Participant,
        ratings: RatingPair,
    ) -> tuple[Perf, Perf]:
        default = self.calculator.default_rating()
        added: list[Perf] = []
        for player, opponent, rating in ((first, second, ratings.first), (second, first, ratings.second)):
            before = player.perfs.get(category)
            after = before.add_or_reset(
                rating,
                game.moved_at,
                context=f"game {game.game_id} user {player.user_id}",
                default=default,
            )
            added.append(dampen(before, after, player_is_bot=player.is_bot, opponent_is_bot=opponent.is_bot))
        return added[0], added[1]

    @staticmethod
    def _merge(regulator: RatingRegulator, category: Category, perfs: Perfs, updated: Perf) -> Perfs:
        added = perfs.with_perf(category, updated)
        merged = Perfs(
            records={each: regulator.regulate(each, perfs.get(each), after) for each, after in added.items()},
            standard=perfs.standard,
        )
        if category.is_standard_speed and merged.get(category) is not perfs.get(category):
            merged = merged.update_standard()
        return merged


__all__ = ["FarmingPredicate", "PerfsUpdater", "RatingUpdate", "no_farming"]
