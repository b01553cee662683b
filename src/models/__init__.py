"""ORM models."""

from models.base import Base
from models.perfs import GameRatingDiff, RatingHistoryEntry, UserPerf

__all__ = [
    "Base",
    "GameRatingDiff",
    "RatingHistoryEntry",
    "UserPerf",
]
