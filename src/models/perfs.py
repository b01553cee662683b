"""user_perfs, game_rating_diffs and rating_history table models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, CheckConstraint, DateTime, Float, Index, Integer, String, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base

JSONVariant = JSON().with_variant(JSONB(), "postgresql")


class UserPerf(Base):
    """Current performance record of one user in one category (or the standard summary)."""

    __tablename__ = "user_perfs"
    __table_args__ = (
        UniqueConstraint("user_id", "perf_key", name="uq_user_perfs_user_perf"),
        CheckConstraint("deviation > 0.0", name="ck_user_perfs_deviation"),
        CheckConstraint("volatility > 0.0", name="ck_user_perfs_volatility"),
        CheckConstraint("nb >= 0", name="ck_user_perfs_nb"),
        Index("idx_user_perfs_user", "user_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    perf_key: Mapped[str] = mapped_column(String(32), nullable=False)
    rating: Mapped[float] = mapped_column(Float, nullable=False)
    deviation: Mapped[float] = mapped_column(Float, nullable=False)
    volatility: Mapped[float] = mapped_column(Float, nullable=False)
    nb: Mapped[int] = mapped_column(Integer, nullable=False)
    recent: Mapped[list[int]] = mapped_column(JSONVariant, nullable=False)
    latest: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )


class GameRatingDiff(Base):
    """Headline rating diffs of one rated game."""

    __tablename__ = "game_rating_diffs"

    game_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    first_user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    second_user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False)
    first_diff: Mapped[int] = mapped_column(Integer, nullable=False)
    second_diff: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )


class RatingHistoryEntry(Base):
    """Integer rating of one user in one category after a rated game."""

    __tablename__ = "rating_history"
    __table_args__ = (
        Index("idx_rating_history_user_perf_date", "user_id", "perf_key", "recorded_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    perf_key: Mapped[str] = mapped_column(String(32), nullable=False)
    game_id: Mapped[str] = mapped_column(String(64), nullable=False)
    recorded_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    int_rating: Mapped[int] = mapped_column(Integer, nullable=False)
