"""Rating categories, performance records and the perfs updater."""

from domain.ratings.categories import Category, select_category
from domain.ratings.common import Game, Outcome, Participant, Result, Speed, Variant, result_of
from domain.ratings.perf import Perf, Perfs, Rating
from domain.ratings.perfs_updater import PerfsUpdater, RatingUpdate, no_farming
from domain.ratings.regulator import RatingRegulator, dampen

__all__ = [
    "Category",
    "Game",
    "Outcome",
    "Participant",
    "Perf",
    "Perfs",
    "PerfsUpdater",
    "Rating",
    "RatingRegulator",
    "RatingUpdate",
    "Result",
    "Speed",
    "Variant",
    "dampen",
    "no_farming",
    "result_of",
    "select_category",
]
