"""Load a finished-game descriptor from a TOML file."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any
import tomllib

from domain.ratings.categories import Category, parse_category
from domain.ratings.common import Game, Outcome, Speed, Variant, naive_utc


@dataclass(frozen=True)
class PlayerDescriptor:
    """Who played one side; perfs are loaded separately."""

    user_id: str
    is_bot: bool = False
    lame: bool = False


@dataclass(frozen=True)
class GameDescriptor:
    game: Game
    first: PlayerDescriptor
    second: PlayerDescriptor


def load_game_file(file_path: Path) -> GameDescriptor:
    """Parse ``[game]``, ``[first]`` and ``[second]`` tables into a descriptor."""
    if not file_path.exists():
        raise FileNotFoundError(f"Game file not found: {file_path}")
    with file_path.open("rb") as file:
        raw = tomllib.load(file)

    game_raw = raw.get("game", {})
    game_id = str(game_raw.get("id", "")).strip()
    if not game_id:
        raise ValueError(f"{file_path}: [game].id is required")

    moved_at = game_raw.get("moved_at")
    if not isinstance(moved_at, datetime):
        raise ValueError(f"{file_path}: [game].moved_at must be a TOML datetime")

    speed_value = game_raw.get("speed")
    main_value = game_raw.get("main_category")
    game = Game(
        game_id=game_id,
        variant=_enum_value(file_path, "variant", Variant, game_raw.get("variant", Variant.STANDARD.value)),
        speed=None if speed_value is None else _enum_value(file_path, "speed", Speed, speed_value),
        outcome=_enum_value(file_path, "outcome", Outcome, game_raw.get("outcome")),
        moved_at=naive_utc(moved_at),
        rated=bool(game_raw.get("rated", True)),
        finished=bool(game_raw.get("finished", True)),
        accountable=bool(game_raw.get("accountable", True)),
        main_category=None if main_value is None else _main_category(file_path, main_value),
    )

    first = _player(file_path, "first", raw.get("first", {}))
    second = _player(file_path, "second", raw.get("second", {}))
    if first.user_id == second.user_id:
        raise ValueError(f"{file_path}: game {game_id} has identical players ({first.user_id})")

    return GameDescriptor(game=game, first=first, second=second)


def _enum_value(file_path: Path, key: str, enum_type: Any, value: Any) -> Any:
    try:
        return enum_type(str(value))
    except ValueError:
        known = ", ".join(member.value for member in enum_type)
        raise ValueError(f"{file_path}: [game].{key} must be one of: {known}") from None


def _main_category(file_path: Path, value: Any) -> Category:
    try:
        return parse_category(str(value))
    except ValueError as exc:
        raise ValueError(f"{file_path}: [game].main_category: {exc}") from exc


def _player(file_path: Path, section: str, player_raw: dict[str, Any]) -> PlayerDescriptor:
    user_id = str(player_raw.get("user_id", "")).strip()
    if not user_id:
        raise ValueError(f"{file_path}: [{section}].user_id is required")
    return PlayerDescriptor(
        user_id=user_id,
        is_bot=bool(player_raw.get("is_bot", False)),
        lame=bool(player_raw.get("lame", False)),
    )


__all__ = ["GameDescriptor", "PlayerDescriptor", "load_game_file"]
