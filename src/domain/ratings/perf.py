"""Performance records: one Glicko-2 rating per category plus play history."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime
from math import isfinite
from types import MappingProxyType
from typing import Final

from domain.ratings.categories import STANDARD_SPEED_CATEGORIES, Category
from domain.ratings.common import naive_utc

logger = logging.getLogger(__name__)

DEFAULT_RATING: Final[float] = 1500.0
DEFAULT_VOLATILITY: Final[float] = 0.06
MIN_RATING: Final[float] = 400.0
MIN_DEVIATION: Final[float] = 45.0
MAX_DEVIATION: Final[float] = 350.0
MAX_VOLATILITY: Final[float] = 0.1
PROVISIONAL_DEVIATION: Final[float] = 110.0
RECENT_MAX_SIZE: Final[int] = 12
RECENT_MIN_GAMES: Final[int] = 10


@dataclass(frozen=True)
class Rating:
    """Glicko-2 rating triple on the external (1500-centred) scale."""

    rating: float = DEFAULT_RATING
    deviation: float = MAX_DEVIATION
    volatility: float = DEFAULT_VOLATILITY

    @property
    def int_rating(self) -> int:
        return int(self.rating)

    @property
    def int_deviation(self) -> int:
        return int(self.deviation)

    @property
    def provisional(self) -> bool:
        return self.deviation >= PROVISIONAL_DEVIATION

    def cap(self) -> Rating:
        return Rating(
            rating=max(self.rating, MIN_RATING),
            deviation=min(max(self.deviation, MIN_DEVIATION), MAX_DEVIATION),
            volatility=min(self.volatility, MAX_VOLATILITY),
        )

    def sanity_check(self) -> bool:
        return (
            isfinite(self.rating)
            and isfinite(self.deviation)
            and isfinite(self.volatility)
            and 0.0 < self.rating < 4000.0
            and 0.0 < self.deviation < 1000.0
            and 0.0 < self.volatility < MAX_VOLATILITY * 2
        )

    def interpolate(self, other: Rating, factor: float) -> Rating:
        """Move ``factor`` of the way from this rating towards ``other``."""
        return Rating(
            rating=self.rating + factor * (other.rating - self.rating),
            deviation=self.deviation + factor * (other.deviation - self.deviation),
            volatility=self.volatility + factor * (other.volatility - self.volatility),
        )

    def average(self, other: Rating, weight: float = 0.5) -> Rating:
        if weight >= 1.0:
            return other
        if weight <= 0.0:
            return self
        return self.interpolate(other, weight)


@dataclass(frozen=True)
class Perf:
    """Persisted performance in one category."""

    rating: Rating = field(default_factory=Rating)
    nb: int = 0
    recent: tuple[int, ...] = ()
    latest: datetime | None = None

    def __post_init__(self) -> None:
        if self.latest is not None:
            object.__setattr__(self, "latest", naive_utc(self.latest))

    @property
    def int_rating(self) -> int:
        return self.rating.int_rating

    def add(self, rating: Rating, date: datetime) -> Perf:
        """Record one more game ending on ``rating``."""
        capped = rating.cap()
        return Perf(
            rating=capped,
            nb=self.nb + 1,
            recent=self._recent_with(capped),
            latest=date,
        )

    def add_or_reset(
        self,
        rating: Rating,
        date: datetime,
        *,
        context: str,
        default: Rating | None = None,
    ) -> Perf:
        """Like :meth:`add`, but fall back to ``default`` when ``rating`` is insane."""
        if rating.sanity_check():
            return self.add(rating, date)
        logger.error("Insane Glicko-2 rating %s for %s, resetting to default", rating, context)
        return self.add(default or Rating(), date)

    def average_rating(self, other: Perf) -> Perf:
        """Keep this record but halve the distance between both ratings."""
        return replace(self, rating=self.rating.average(other.rating))

    def _recent_with(self, rating: Rating) -> tuple[int, ...]:
        if self.nb < RECENT_MIN_GAMES:
            return self.recent
        return ((rating.int_rating,) + self.recent)[:RECENT_MAX_SIZE]


@dataclass(frozen=True)
class Perfs:
    """A player's fourteen category records plus the derived standard summary."""

    records: Mapping[Category, Perf] = field(default_factory=dict)
    standard: Perf = field(default_factory=Perf)

    def __post_init__(self) -> None:
        unknown = [key for key in self.records if not isinstance(key, Category)]
        if unknown:
            raise ValueError(f"Perfs keys must be Category members, got {unknown}")
        complete = {category: self.records.get(category, Perf()) for category in Category}
        object.__setattr__(self, "records", MappingProxyType(complete))

    def get(self, category: Category) -> Perf:
        return self.records[category]

    def items(self) -> Iterator[tuple[Category, Perf]]:
        return iter(self.records.items())

    def with_perf(self, category: Category, perf: Perf) -> Perfs:
        records = dict(self.records)
        records[category] = perf
        return Perfs(records=records, standard=self.standard)

    def update_standard(self) -> Perfs:
        """Recompute ``standard`` as the games-weighted mean of the six speed tiers."""
        tiers = [perf for category, perf in self.items() if category in STANDARD_SPEED_CATEGORIES]
        dated = [perf.latest for perf in tiers if perf.latest is not None]
        nb = sum(perf.nb for perf in tiers)
        if not dated or nb == 0:
            return self

        def weighted(attribute: str) -> float:
            return sum(getattr(perf.rating, attribute) * (perf.nb / nb) for perf in tiers)

        standard = Perf(
            rating=Rating(
                rating=weighted("rating"),
                deviation=weighted("deviation"),
                volatility=weighted("volatility"),
            ),
            nb=nb,
            recent=(),
            latest=max(dated),
        )
        return Perfs(records=self.records, standard=standard)


__all__ = [
    "DEFAULT_RATING",
    "DEFAULT_VOLATILITY",
    "MAX_DEVIATION",
    "MAX_VOLATILITY",
    "MIN_DEVIATION",
    "MIN_RATING",
    "Perf",
    "Perfs",
    "Rating",
]
