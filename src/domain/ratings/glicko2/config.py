"""Load Glicko-2 and rating-regulation settings from TOML files."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
import tomllib

from domain.ratings.categories import Category, parse_category
from domain.ratings.glicko2.calculator import Glicko2Parameters


@dataclass(frozen=True)
class RatingSystemConfig:
    """Calculator parameters plus the regulation factors read at load time."""

    file_path: Path
    parameters: Glicko2Parameters
    regulation: dict[Category, float] = field(default_factory=dict)

    def as_config_json(self) -> dict[str, Any]:
        return {
            "default_volatility": self.parameters.default_volatility,
            "tau": self.parameters.tau,
            "epsilon": self.parameters.epsilon,
            "max_iterations": self.parameters.max_iterations,
            "regulation": {category.value: factor for category, factor in self.regulation.items()},
        }


def load_rating_config(file_path: Path) -> RatingSystemConfig:
    """Load and validate one rating TOML file."""
    raw = _read_toml(file_path)
    glicko2_raw = raw.get("glicko2", {})

    parameters = Glicko2Parameters(
        default_volatility=float(glicko2_raw.get("default_volatility", 0.06)),
        tau=float(glicko2_raw.get("tau", 0.75)),
        epsilon=float(glicko2_raw.get("epsilon", 1e-6)),
        max_iterations=int(glicko2_raw.get("max_iterations", 100)),
    )
    _validate_parameters(file_path=file_path, parameters=parameters)

    return RatingSystemConfig(
        file_path=file_path,
        parameters=parameters,
        regulation=_parse_regulation(file_path, raw.get("regulation", {})),
    )


class TomlRatingFactors:
    """Regulation-factor supplier that re-reads its file on every call."""

    def __init__(self, file_path: Path) -> None:
        self.file_path = file_path

    def __call__(self) -> dict[Category, float]:
        raw = _read_toml(self.file_path)
        return _parse_regulation(self.file_path, raw.get("regulation", {}))


def _read_toml(file_path: Path) -> dict[str, Any]:
    if not file_path.exists():
        raise FileNotFoundError(f"Config file not found: {file_path}")
    if not file_path.is_file():
        raise ValueError(f"Config path is not a file: {file_path}")
    with file_path.open("rb") as file:
        return tomllib.load(file)


def _parse_regulation(file_path: Path, regulation_raw: Any) -> dict[Category, float]:
    if not isinstance(regulation_raw, dict):
        raise ValueError(f"{file_path}: [regulation] must be a table")

    factors: dict[Category, float] = {}
    for key, value in regulation_raw.items():
        try:
            category = parse_category(str(key))
        except ValueError as exc:
            raise ValueError(f"{file_path}: [regulation].{key}: {exc}") from exc
        factor = float(value)
        if factor < 0.0:
            raise ValueError(f"{file_path}: [regulation].{key} must be >= 0")
        factors[category] = factor
    return factors


def _validate_parameters(*, file_path: Path, parameters: Glicko2Parameters) -> None:
    if parameters.default_volatility <= 0.0:
        raise ValueError(f"{file_path}: [glicko2].default_volatility must be > 0")
    if parameters.tau <= 0.0:
        raise ValueError(f"{file_path}: [glicko2].tau must be > 0")
    if parameters.epsilon <= 0.0:
        raise ValueError(f"{file_path}: [glicko2].epsilon must be > 0")
    if parameters.max_iterations < 1:
        raise ValueError(f"{file_path}: [glicko2].max_iterations must be >= 1")
