"""
Unit tests for the expected outcome, margin and upset factors.

Tests that:
- Equal teams are a coin flip; stronger teams are favored
- The margin factor spans [marginMin, 1] and grows with the margin
- The upset factor is >= 1 and grows with the surprise
- Team base changes are exact negatives of each other
"""

import pytest

from pmr.rating.calculator import (
    calculate_base_delta,
    expected_win_probability,
    margin_factor,
    normalized_margin,
    team_rating,
    upset_factor,
)
from pmr.rating.params import RatingParameters


def base_delta(team1_pmr, team2_pmr, team1_won, games_team1, games_team2, params=None):
    p = params or RatingParameters()
    return calculate_base_delta(
        team1_pmr=team1_pmr,
        team2_pmr=team2_pmr,
        team1_won=team1_won,
        games_team1=games_team1,
        games_team2=games_team2,
        K=p.K,
        elo_scale=p.elo_scale,
        margin_min=p.margin_min,
        margin_gamma=p.margin_gamma,
        upset_beta=p.upset_beta,
        upset_gamma=p.upset_gamma,
    )


class TestExpectedWinProbability:
    """Tests for the logistic expected-outcome model."""

    def test_equal_teams(self):
        assert expected_win_probability(5.0, 5.0, 1.25) == 0.5

    def test_one_point_gap(self):
        assert expected_win_probability(6.0, 5.0, 1.25) == pytest.approx(0.8632, abs=1e-4)

    def test_complementary(self):
        """E1 for (a, b) and for (b, a) sum to 1."""
        e = expected_win_probability(4.2, 5.7, 1.25)
        e_reversed = expected_win_probability(5.7, 4.2, 1.25)
        assert e + e_reversed == pytest.approx(1.0)
        assert e < 0.5

    def test_extreme_gap_does_not_overflow(self):
        assert expected_win_probability(0.1, 8.9, 0.001) == 0.0
        assert expected_win_probability(8.9, 0.1, 0.001) == 1.0

    def test_team_rating_is_average(self):
        assert team_rating(4.5, 5.0) == 4.75


class TestMarginFactor:
    """Tests for the game-margin multiplier."""

    def test_normalized_margin(self):
        assert normalized_margin(12, 7) == pytest.approx(5 / 19)
        assert normalized_margin(7, 12) == pytest.approx(5 / 19)

    def test_no_games_is_zero_margin(self):
        assert normalized_margin(0, 0) == 0.0

    def test_whitewash_keeps_full_change(self):
        assert margin_factor(normalized_margin(12, 0), 0.25, 1.3) == pytest.approx(1.0)

    def test_zero_margin_is_floor(self):
        assert margin_factor(0.0, 0.25, 1.3) == 0.25

    def test_increases_with_margin(self):
        close = margin_factor(normalized_margin(13, 11), 0.25, 1.3)
        wide = margin_factor(normalized_margin(12, 3), 0.25, 1.3)
        assert 0.25 < close < wide < 1.0


class TestUpsetFactor:
    """Tests for the upset amplifier."""

    def test_never_below_one(self):
        for expected in (0.0, 0.1, 0.5, 0.9, 1.0):
            assert upset_factor(expected, True, 0.8, 1.2) >= 1.0
            assert upset_factor(expected, False, 0.8, 1.2) >= 1.0

    def test_certain_favorite_winning_is_neutral(self):
        assert upset_factor(1.0, True, 0.8, 1.2) == 1.0

    def test_underdog_win_is_amplified(self):
        favorite_wins = upset_factor(0.8, True, 0.8, 1.2)
        underdog_wins = upset_factor(0.8, False, 0.8, 1.2)
        assert underdog_wins > favorite_wins

    def test_maximum_surprise(self):
        assert upset_factor(1.0, False, 0.8, 1.2) == pytest.approx(1.8)


class TestCalculateBaseDelta:
    """Tests for the team-level base change."""

    def test_team_changes_are_exact_negatives(self):
        for t1, t2, won in [(5.0, 5.0, True), (3.7, 6.1, True), (6.4, 4.9, False), (0.1, 8.9, False)]:
            delta = base_delta(t1, t2, won, 13, 10)
            assert delta.team2 == -delta.team1

    def test_winner_gains(self):
        assert base_delta(5.0, 5.0, True, 12, 7).team1 > 0
        assert base_delta(5.0, 5.0, False, 7, 12).team1 < 0

    def test_upset_moves_more_than_expected_win(self):
        """Beating a stronger team earns more than beating a weaker one."""
        expected_win = base_delta(6.0, 5.0, True, 12, 7)
        upset_win = base_delta(5.0, 6.0, True, 12, 7)
        assert upset_win.team1 > expected_win.team1 > 0

    def test_wider_margin_moves_more(self):
        narrow = base_delta(5.0, 5.0, True, 13, 11)
        wide = base_delta(5.0, 5.0, True, 12, 2)
        assert wide.team1 > narrow.team1

    def test_even_match_factors(self):
        delta = base_delta(5.0, 5.0, True, 12, 7)

        assert delta.expected_team1 == 0.5
        assert delta.margin == pytest.approx(0.263, abs=1e-3)
        assert delta.margin_factor == pytest.approx(0.382, abs=1e-3)
        assert delta.upset_factor == pytest.approx(1.348, abs=1e-3)
        assert delta.team1 == pytest.approx(0.0644, abs=1e-4)
