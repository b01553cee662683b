"""Persistence of performance records, rating diffs and rating history."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from domain.ratings.categories import Category
from domain.ratings.common import Game, naive_utc
from domain.ratings.perf import Perf, Perfs, Rating
from domain.ratings.perfs_updater import RatingUpdate
from models.perfs import GameRatingDiff, RatingHistoryEntry, UserPerf

STANDARD_PERF_KEY = "standard"


class PerfsRepository:
    """Read and write a user's full set of performance records."""

    def ensure_schema(self, engine: Engine) -> None:
        """Create required tables and indexes when missing."""
        with engine.begin() as connection:
            for model in (UserPerf, GameRatingDiff, RatingHistoryEntry):
                getattr(model, "__table__").create(bind=connection, checkfirst=True)

    def load_perfs(self, session: Session, user_id: str) -> Perfs:
        """Return stored perfs for ``user_id``; missing categories get default records."""
        rows = session.execute(select(UserPerf).where(UserPerf.user_id == user_id)).scalars().all()
        by_key = {row.perf_key: _row_to_perf(row) for row in rows}
        records = {category: by_key[category.value] for category in Category if category.value in by_key}
        return Perfs(records=records, standard=by_key.get(STANDARD_PERF_KEY, Perf()))

    def save_perfs(
        self,
        session: Session,
        user_id: str,
        perfs: Perfs,
        previous: Perfs | None = None,
    ) -> int:
        """Upsert the records that differ from ``previous``; returns rows written."""
        changed: dict[str, Perf] = {}
        for category, perf in perfs.items():
            if previous is None or previous.get(category) != perf:
                changed[category.value] = perf
        if previous is None or previous.standard != perfs.standard:
            changed[STANDARD_PERF_KEY] = perfs.standard
        if not changed:
            return 0

        existing = {
            row.perf_key: row
            for row in session.execute(
                select(UserPerf).where(UserPerf.user_id == user_id, UserPerf.perf_key.in_(list(changed)))
            ).scalars()
        }
        now = datetime.now(UTC).replace(tzinfo=None)
        for perf_key, perf in changed.items():
            row = existing.get(perf_key)
            if row is None:
                row = UserPerf(user_id=user_id, perf_key=perf_key)
                session.add(row)
            _fill_row(row, perf)
            row.updated_at = now
        session.flush()
        return len(changed)

    def set_rating_diffs(
        self,
        session: Session,
        *,
        game: Game,
        update: RatingUpdate,
        first_user_id: str,
        second_user_id: str,
    ) -> None:
        """Store the headline diffs of a rated game, replacing earlier ones."""
        row = session.get(GameRatingDiff, game.game_id)
        if row is None:
            row = GameRatingDiff(game_id=game.game_id)
            session.add(row)
        row.first_user_id = first_user_id
        row.second_user_id = second_user_id
        row.category = (game.main_category or update.category).value
        row.first_diff = update.first_diff
        row.second_diff = update.second_diff
        session.flush()

    def get_rating_diffs(self, session: Session, game_id: str) -> tuple[int, int] | None:
        row = session.get(GameRatingDiff, game_id)
        if row is None:
            return None
        return row.first_diff, row.second_diff

    def add_history(
        self,
        session: Session,
        *,
        user_id: str,
        game: Game,
        perfs: Perfs,
        category: Category,
    ) -> None:
        """Append the post-game integer rating of ``category``."""
        session.add(
            RatingHistoryEntry(
                user_id=user_id,
                perf_key=category.value,
                game_id=game.game_id,
                recorded_at=naive_utc(game.moved_at),
                int_rating=perfs.get(category).int_rating,
            )
        )
        session.flush()

    def rating_history(self, session: Session, user_id: str, category: Category) -> list[tuple[datetime, int]]:
        statement = (
            select(RatingHistoryEntry.recorded_at, RatingHistoryEntry.int_rating)
            .where(RatingHistoryEntry.user_id == user_id, RatingHistoryEntry.perf_key == category.value)
            .order_by(RatingHistoryEntry.recorded_at, RatingHistoryEntry.id)
        )
        return [(recorded_at, int_rating) for recorded_at, int_rating in session.execute(statement)]


def _row_to_perf(row: UserPerf) -> Perf:
    return Perf(
        rating=Rating(rating=row.rating, deviation=row.deviation, volatility=row.volatility),
        nb=row.nb,
        recent=tuple(int(value) for value in row.recent),
        latest=row.latest,
    )


def _fill_row(row: UserPerf, perf: Perf) -> None:
    row.rating = perf.rating.rating
    row.deviation = perf.rating.deviation
    row.volatility = perf.rating.volatility
    row.nb = perf.nb
    row.recent = list(perf.recent)
    row.latest = None if perf.latest is None else naive_utc(perf.latest)


__all__ = ["PerfsRepository", "STANDARD_PERF_KEY"]
