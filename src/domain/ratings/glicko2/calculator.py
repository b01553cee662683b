"""Two-player Glicko-2 logic."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from math import exp, isfinite, log, pi, sqrt
from typing import Final

from domain.ratings.common import Result
from domain.ratings.perf import DEFAULT_RATING, DEFAULT_VOLATILITY, Rating

GLICKO2_SCALE: Final[float] = 173.7178


class Glicko2CalculationError(ArithmeticError):
    """Raised by the Glicko-2 equations on inputs they cannot rate."""


@dataclass(frozen=True)
class Glicko2Parameters:
    default_volatility: float = DEFAULT_VOLATILITY
    tau: float = 0.75
    epsilon: float = 1e-6
    max_iterations: int = 100


@dataclass(frozen=True)
class Glicko2OpponentResult:
    opponent_rating: float
    opponent_rd: float
    score: float


@dataclass(frozen=True)
class RatingPair:
    """Posterior ratings of both sides of one game."""

    first: Rating
    second: Rating


@dataclass(frozen=True)
class CalculationFailure:
    """The update could not be computed; both sides keep their prior ratings."""

    reason: str


def _to_mu(rating: float) -> float:
    return (rating - DEFAULT_RATING) / GLICKO2_SCALE


def _to_phi(rd: float) -> float:
    return rd / GLICKO2_SCALE


def _from_mu(mu: float) -> float:
    return (mu * GLICKO2_SCALE) + DEFAULT_RATING


def _from_phi(phi: float) -> float:
    return phi * GLICKO2_SCALE


def _g(phi: float) -> float:
    return 1.0 / sqrt(1.0 + ((3.0 * (phi**2)) / (pi**2)))


def _expected(mu: float, opp_mu: float, opp_phi: float) -> float:
    exponent = -_g(opp_phi) * (mu - opp_mu)
    if exponent >= 0.0:
        exp_term = exp(-exponent)
        return exp_term / (1.0 + exp_term)
    exp_term = exp(exponent)
    return 1.0 / (1.0 + exp_term)


def calculate_expected_score(
    *,
    rating: float,
    rd: float,
    opponent_rating: float,
    opponent_rd: float,
) -> float:
    """Compute expected score for one side under Glicko-2."""
    return _expected(
        _to_mu(rating),
        _to_mu(opponent_rating),
        _to_phi(opponent_rd),
    )


def _solve_volatility(
    *,
    phi: float,
    sigma: float,
    delta: float,
    v: float,
    tau: float,
    epsilon: float,
    max_iterations: int,
) -> float:
    a = log(sigma**2)

    def f(x: float) -> float:
        ex = exp(x)
        numerator = ex * ((delta**2) - (phi**2) - v - ex)
        denominator = 2.0 * ((phi**2) + v + ex) ** 2
        return (numerator / denominator) - ((x - a) / (tau**2))

    a_value = a
    if (delta**2) > ((phi**2) + v):
        b_value = log((delta**2) - (phi**2) - v)
    else:
        k = 1
        b_value = a_value - (k * tau)
        while f(b_value) < 0.0:
            k += 1
            if k > max_iterations:
                raise Glicko2CalculationError("Glicko-2 volatility solve failed to bracket root.")
            b_value = a_value - (k * tau)

    f_a = f(a_value)
    f_b = f(b_value)
    iterations = 0
    while abs(b_value - a_value) > epsilon:
        iterations += 1
        if iterations > max_iterations:
            raise Glicko2CalculationError(
                f"Glicko-2 volatility solve did not converge within {max_iterations} iterations."
            )
        if f_b == f_a:
            c_value = (a_value + b_value) / 2.0
        else:
            c_value = a_value + (((a_value - b_value) * f_a) / (f_b - f_a))
        f_c = f(c_value)
        if f_c * f_b < 0.0:
            a_value = b_value
            f_a = f_b
        else:
            f_a /= 2.0
        b_value = c_value
        f_b = f_c

    return exp(a_value / 2.0)


def _check_input(name: str, value: float, *, positive: bool) -> None:
    if not isfinite(value):
        raise Glicko2CalculationError(f"{name} must be finite, got {value}")
    if positive and value <= 0.0:
        raise Glicko2CalculationError(f"{name} must be > 0, got {value}")


def update_glicko2_player(
    *,
    rating: float,
    rd: float,
    volatility: float,
    results: Sequence[Glicko2OpponentResult],
    tau: float = 0.75,
    epsilon: float = 1e-6,
    max_iterations: int = 100,
) -> tuple[float, float, float]:
    """Update one player for one Glicko-2 rating period.

    Raises:
        Glicko2CalculationError: on non-positive deviations or volatility,
            an estimated variance that underflows to zero, a volatility solve
            that does not converge, or a non-finite result.
    """
    if not results:
        return rating, rd, volatility

    _check_input("rating", rating, positive=False)
    _check_input("rating deviation", rd, positive=True)
    _check_input("volatility", volatility, positive=True)

    mu = _to_mu(rating)
    phi = _to_phi(rd)

    g_terms: list[float] = []
    e_terms: list[float] = []
    score_minus_e_terms: list[float] = []
    for result in results:
        _check_input("opponent rating", result.opponent_rating, positive=False)
        _check_input("opponent rating deviation", result.opponent_rd, positive=True)
        opp_mu = _to_mu(result.opponent_rating)
        opp_phi = _to_phi(result.opponent_rd)
        g_term = _g(opp_phi)
        expected = _expected(mu, opp_mu, opp_phi)
        g_terms.append(g_term)
        e_terms.append(expected)
        score_minus_e_terms.append(result.score - expected)

    v_inverse = 0.0
    for g_term, expected in zip(g_terms, e_terms):
        v_inverse += (g_term**2) * expected * (1.0 - expected)
    if v_inverse <= 0.0:
        raise Glicko2CalculationError("Glicko-2 estimated variance is zero; rating gap too large.")

    v = 1.0 / v_inverse
    delta = v * sum(g_term * score_minus_e for g_term, score_minus_e in zip(g_terms, score_minus_e_terms))
    sigma_prime = _solve_volatility(
        phi=phi,
        sigma=volatility,
        delta=delta,
        v=v,
        tau=tau,
        epsilon=epsilon,
        max_iterations=max_iterations,
    )

    phi_star = sqrt((phi**2) + (sigma_prime**2))
    phi_prime = 1.0 / sqrt((1.0 / (phi_star**2)) + (1.0 / v))
    mu_prime = mu + (phi_prime**2) * sum(
        g_term * score_minus_e for g_term, score_minus_e in zip(g_terms, score_minus_e_terms)
    )

    updated = (_from_mu(mu_prime), _from_phi(phi_prime), sigma_prime)
    if not all(isfinite(value) for value in updated):
        raise Glicko2CalculationError(f"Glicko-2 update produced a non-finite result {updated}")
    return updated


class RatingCalculator:
    """Stateless single-game Glicko-2 calculator shared by every caller."""

    def __init__(self, params: Glicko2Parameters | None = None) -> None:
        self.params = params or Glicko2Parameters()

    def _update_side(self, player: Rating, opponent: Rating, score: float) -> Rating:
        rating, rd, volatility = update_glicko2_player(
            rating=player.rating,
            rd=player.deviation,
            volatility=player.volatility,
            results=[
                Glicko2OpponentResult(
                    opponent_rating=opponent.rating,
                    opponent_rd=opponent.deviation,
                    score=score,
                )
            ],
            tau=self.params.tau,
            epsilon=self.params.epsilon,
            max_iterations=self.params.max_iterations,
        )
        return Rating(rating=rating, deviation=rd, volatility=volatility)

    def update(self, first: Rating, second: Rating, result: Result) -> RatingPair | CalculationFailure:
        """Rate one game between ``first`` and ``second``.

        Both sides are computed from the other's pre-game rating. ``result``
        is relative to ``first``.
        """
        try:
            first_post = self._update_side(first, second, result.score)
            second_post = self._update_side(second, first, result.inverse.score)
        except (ArithmeticError, ValueError) as exc:
            return CalculationFailure(reason=str(exc))
        return RatingPair(first=first_post, second=second_post)

    def default_rating(self) -> Rating:
        return Rating(volatility=self.params.default_volatility)
