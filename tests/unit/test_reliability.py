"""
Unit tests for the reliability curve and volatility multiplier.
"""

import math

import pytest

from pmr.rating.reliability import (
    advance_reliability,
    clamp,
    matches_from_reliability,
    reliability_from_matches,
    volatility_multiplier,
)

TAU = 77.0
GAMMA = 0.52


class TestReliabilityCurve:
    """Tests for R(n) and its inverse."""

    def test_targets(self):
        assert reliability_from_matches(5, TAU, GAMMA) == pytest.approx(24.0, abs=0.5)
        assert reliability_from_matches(30, TAU, GAMMA) == pytest.approx(55.0, abs=1.0)
        assert reliability_from_matches(100, TAU, GAMMA) == pytest.approx(85.0, abs=0.5)

    def test_zero_matches(self):
        assert reliability_from_matches(0, TAU, GAMMA) == 0.0
        assert reliability_from_matches(-3, TAU, GAMMA) == 0.0

    def test_infinite_matches(self):
        assert reliability_from_matches(math.inf, TAU, GAMMA) == 100.0

    def test_increasing(self):
        values = [reliability_from_matches(n, TAU, GAMMA) for n in range(0, 300, 10)]
        assert values == sorted(values)
        assert all(v < 100.0 for v in values)

    def test_inverse_round_trip(self):
        for n in (1, 5, 30, 100, 250):
            r = reliability_from_matches(n, TAU, GAMMA)
            assert matches_from_reliability(r, TAU, GAMMA) == pytest.approx(n, rel=1e-9)

    def test_inverse_edges(self):
        assert matches_from_reliability(0.0, TAU, GAMMA) == 0.0
        assert matches_from_reliability(-5.0, TAU, GAMMA) == 0.0
        assert matches_from_reliability(100.0, TAU, GAMMA) == math.inf
        assert matches_from_reliability(120.0, TAU, GAMMA) == math.inf


class TestAdvanceReliability:
    """Tests for advancing reliability by exactly one match."""

    def test_one_match_from_zero(self):
        assert advance_reliability(0.0, TAU, GAMMA) == pytest.approx(
            reliability_from_matches(1, TAU, GAMMA)
        )

    def test_from_fifty(self):
        assert advance_reliability(50.0, TAU, GAMMA) == pytest.approx(50.9, abs=0.1)

    def test_strictly_increases_below_saturation(self):
        for r in (0.0, 0.5, 10.0, 50.0, 90.0, 99.0):
            assert advance_reliability(r, TAU, GAMMA) > r

    def test_saturated_stays_at_100(self):
        assert advance_reliability(100.0, TAU, GAMMA) == 100.0

    def test_near_saturation_never_decreases(self):
        r = 100.0 - 1e-12
        advanced = advance_reliability(r, TAU, GAMMA)
        assert r <= advanced <= 100.0

    def test_repeated_advance_matches_curve(self):
        """Ten single steps from zero land where R(10) is."""
        r = 0.0
        for _ in range(10):
            r = advance_reliability(r, TAU, GAMMA)
        assert r == pytest.approx(reliability_from_matches(10, TAU, GAMMA), rel=1e-9)


class TestVolatilityMultiplier:
    """Tests for the reliability -> volatility mapping."""

    def test_endpoints(self):
        assert volatility_multiplier(0.0, 3.0, 1.2) == 3.0
        assert volatility_multiplier(100.0, 3.0, 1.2) == 1.0

    def test_midpoint(self):
        assert volatility_multiplier(50.0, 3.0, 1.2) == pytest.approx(1.871, abs=1e-3)

    def test_decreasing(self):
        values = [volatility_multiplier(r, 3.0, 1.2) for r in range(0, 101, 5)]
        assert values == sorted(values, reverse=True)

    def test_out_of_range_is_clamped(self):
        assert volatility_multiplier(-10.0, 3.0, 1.2) == 3.0
        assert volatility_multiplier(150.0, 3.0, 1.2) == 1.0

    def test_clamp(self):
        assert clamp(9.5, 0.1, 8.9) == 8.9
        assert clamp(-1.0, 0.1, 8.9) == 0.1
        assert clamp(4.2, 0.1, 8.9) == 4.2
