"""Glicko-2 rating modules."""

from domain.ratings.glicko2.calculator import (
    CalculationFailure,
    Glicko2CalculationError,
    Glicko2OpponentResult,
    Glicko2Parameters,
    RatingCalculator,
    RatingPair,
    calculate_expected_score,
    update_glicko2_player,
)
from domain.ratings.glicko2.config import RatingSystemConfig, TomlRatingFactors, load_rating_config

__all__ = [
    "CalculationFailure",
    "Glicko2CalculationError",
    "Glicko2OpponentResult",
    "Glicko2Parameters",
    "RatingCalculator",
    "RatingPair",
    "RatingSystemConfig",
    "TomlRatingFactors",
    "calculate_expected_score",
    "load_rating_config",
    "update_glicko2_player",
]
