"""Tests for loading finished-game descriptors."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from domain.ratings.categories import Category
from domain.ratings.common import Outcome, Speed, Variant
from domain.ratings.game_file import PlayerDescriptor, load_game_file

GAME_TOML = """
[game]
id = "abcd1234"
variant = "standard"
speed = "blitz"
outcome = "first_wins"
moved_at = 2026-01-01T12:00:00

[first]
user_id = "alice"

[second]
user_id = "bot"
is_bot = true
"""


def _write(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "game.toml"
    path.write_text(body.strip())
    return path


def test_load_game_file_reads_game_and_players(tmp_path: Path) -> None:
    descriptor = load_game_file(_write(tmp_path, GAME_TOML))

    game = descriptor.game
    assert game.game_id == "abcd1234"
    assert game.variant is Variant.STANDARD
    assert game.speed is Speed.BLITZ
    assert game.outcome is Outcome.FIRST_WINS
    assert game.moved_at == datetime(2026, 1, 1, 12, 0, 0)
    assert game.rated and game.finished and game.accountable
    assert game.main_category is None
    assert descriptor.first == PlayerDescriptor(user_id="alice")
    assert descriptor.second == PlayerDescriptor(user_id="bot", is_bot=True)


def test_optional_game_fields(tmp_path: Path) -> None:
    body = GAME_TOML.replace(
        'speed = "blitz"',
        'rated = false\naccountable = false\nmain_category = "atomic"',
    ).replace('variant = "standard"', 'variant = "atomic"')

    game = load_game_file(_write(tmp_path, body)).game

    assert game.variant is Variant.ATOMIC
    assert game.speed is None
    assert not game.rated
    assert not game.accountable
    assert game.main_category is Category.ATOMIC


@pytest.mark.parametrize(
    ("old", "new", "message"),
    [
        ('id = "abcd1234"', 'id = " "', r"\[game\]\.id is required"),
        ("moved_at = 2026-01-01T12:00:00", 'moved_at = "yesterday"', "TOML datetime"),
        ('speed = "blitz"', 'speed = "hyper"', r"\[game\]\.speed must be one of"),
        ('outcome = "first_wins"', 'outcome = "aborted"', r"\[game\]\.outcome must be one of"),
        ('variant = "standard"', 'variant = "shogi"', r"\[game\]\.variant must be one of"),
        ('user_id = "bot"', 'user_id = "alice"', "identical players"),
        ('user_id = "alice"', "is_bot = false", r"\[first\]\.user_id is required"),
    ],
)
def test_invalid_game_file_raises_error(tmp_path: Path, old: str, new: str, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        load_game_file(_write(tmp_path, GAME_TOML.replace(old, new)))


def test_unknown_main_category_raises_error(tmp_path: Path) -> None:
    body = GAME_TOML.replace('speed = "blitz"', 'speed = "blitz"\nmain_category = "puzzle"')
    with pytest.raises(ValueError, match="Unknown rating category 'puzzle'"):
        load_game_file(_write(tmp_path, body))


def test_missing_game_file_raises_error(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_game_file(tmp_path / "missing.toml")


def test_offset_timestamps_are_converted_to_naive_utc(tmp_path: Path) -> None:
    body = GAME_TOML.replace("moved_at = 2026-01-01T12:00:00", "moved_at = 2026-01-02T14:00:00+02:00")

    game = load_game_file(_write(tmp_path, body)).game

    assert game.moved_at == datetime(2026, 1, 2, 12, 0, 0)
    assert game.moved_at.tzinfo is None
