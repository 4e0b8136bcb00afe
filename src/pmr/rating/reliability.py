"""
Reliability curve and reliability-based volatility.

Reliability (0-100) measures how much rated experience a player has, not
how well they play. It follows a saturating curve of the number of rated
matches n:

    R(n) = 100 * (1 - exp(-n / tau)) ^ gamma

The curve is invertible below 100, so a stored reliability can be turned
back into an equivalent "virtual" match count, advanced by exactly one
match, and re-evaluated. Winners and losers advance identically.

Volatility turns reliability into a per-player multiplier on the team's
base rating change, so new players converge quickly:

    V(R) = 1 + (Vmax - 1) * (1 - R / 100) ^ vGamma

V(0) = Vmax, V(100) = 1.
"""

import math

from pmr.rating.constants import RELIABILITY_SCALE


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def reliability_from_matches(n: float, rel_tau: float, rel_curve_gamma: float) -> float:
    """
    Reliability after n rated matches.

    Examples (default tau=77, gamma=0.52):
        reliability_from_matches(5, 77, 0.52)    # -> ~23.7
        reliability_from_matches(30, 77, 0.52)   # -> ~55.5
        reliability_from_matches(100, 77, 0.52)  # -> ~84.7
    """
    if n <= 0:
        return 0.0
    if math.isinf(n):
        return RELIABILITY_SCALE
    base = 1.0 - math.exp(-n / rel_tau)
    return RELIABILITY_SCALE * base ** rel_curve_gamma


def matches_from_reliability(reliability: float, rel_tau: float, rel_curve_gamma: float) -> float:
    """
    Virtual match count implied by a reliability value.

    Inverse of reliability_from_matches(). A saturated reliability (>= 100)
    maps to infinity instead of taking the logarithm of zero.
    """
    if reliability <= 0:
        return 0.0
    if reliability >= RELIABILITY_SCALE:
        return math.inf

    x = (reliability / RELIABILITY_SCALE) ** (1.0 / rel_curve_gamma)
    one_minus_x = 1.0 - x
    # x can round up to 1.0 just below saturation
    if one_minus_x <= 0.0:
        return math.inf

    return -rel_tau * math.log(one_minus_x)


def advance_reliability(reliability: float, rel_tau: float, rel_curve_gamma: float) -> float:
    """
    Reliability after exactly one more rated match.

    Never lower than the input; stays at 100 once saturated.
    """
    n = matches_from_reliability(reliability, rel_tau, rel_curve_gamma)
    if math.isinf(n):
        return RELIABILITY_SCALE

    advanced = reliability_from_matches(n + 1.0, rel_tau, rel_curve_gamma)
    # The round trip through the inverse can lose a few ulps
    return max(reliability, advanced)


def volatility_multiplier(reliability: float, v_max: float, v_gamma: float) -> float:
    """
    Per-player multiplier on the team's base rating change.

    Examples (default Vmax=3.0, vGamma=1.2):
        volatility_multiplier(0, 3.0, 1.2)    # -> 3.0
        volatility_multiplier(50, 3.0, 1.2)   # -> ~1.87
        volatility_multiplier(100, 3.0, 1.2)  # -> 1.0
    """
    r = clamp(reliability, 0.0, RELIABILITY_SCALE) / RELIABILITY_SCALE
    return 1.0 + (v_max - 1.0) * (1.0 - r) ** v_gamma
