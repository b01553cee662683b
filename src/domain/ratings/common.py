"""Shared types for rating updates."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from domain.ratings.categories import Category
    from domain.ratings.perf import Perfs


class Variant(str, Enum):
    """Game variants known to the rating engine."""

    STANDARD = "standard"
    CHESS960 = "chess960"
    KING_OF_THE_HILL = "kingOfTheHill"
    THREE_CHECK = "threeCheck"
    ANTICHESS = "antichess"
    ATOMIC = "atomic"
    HORDE = "horde"
    RACING_KINGS = "racingKings"
    CRAZYHOUSE = "crazyhouse"
    FROM_POSITION = "fromPosition"


class Speed(str, Enum):
    """Time-control tiers of the standard variant."""

    ULTRA_BULLET = "ultraBullet"
    BULLET = "bullet"
    BLITZ = "blitz"
    RAPID = "rapid"
    CLASSICAL = "classical"
    CORRESPONDENCE = "correspondence"


class Outcome(str, Enum):
    """Raw game outcome, oriented on the first participant."""

    FIRST_WINS = "first_wins"
    SECOND_WINS = "second_wins"
    DRAW = "draw"


class Result(str, Enum):
    """Symmetric game result relative to the first participant."""

    WIN = "win"
    LOSS = "loss"
    DRAW = "draw"

    @property
    def score(self) -> float:
        return _SCORES[self]

    @property
    def inverse(self) -> Result:
        if self is Result.WIN:
            return Result.LOSS
        if self is Result.LOSS:
            return Result.WIN
        return Result.DRAW


_SCORES = {Result.WIN: 1.0, Result.LOSS: 0.0, Result.DRAW: 0.5}

_OUTCOME_RESULTS = {
    Outcome.FIRST_WINS: Result.WIN,
    Outcome.SECOND_WINS: Result.LOSS,
    Outcome.DRAW: Result.DRAW,
}


def result_of(outcome: Outcome) -> Result:
    """Encode a raw outcome as a result for the first participant."""
    return _OUTCOME_RESULTS[outcome]


def naive_utc(value: datetime) -> datetime:
    """Convert an aware timestamp to naive UTC; naive ones are taken as UTC already."""
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


@dataclass(frozen=True)
class Game:
    """Canonical finished-game payload consumed by the perfs updater."""

    game_id: str
    variant: Variant
    speed: Speed | None
    outcome: Outcome
    moved_at: datetime
    rated: bool = True
    finished: bool = True
    accountable: bool = True
    main_category: Category | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "moved_at", naive_utc(self.moved_at))


@dataclass(frozen=True)
class Participant:
    """One side of a game with its full set of performance records."""

    user_id: str
    perfs: Perfs
    is_bot: bool = False
    lame: bool = False
