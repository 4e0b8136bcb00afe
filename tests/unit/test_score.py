"""
Unit tests for padel score validation and parsing.

Tests that:
- Only legal padel set scores are accepted
- Set 3 is required exactly when sets 1 and 2 are split
- Compact score strings parse into the engine's set variants
"""

import pytest
from pydantic import ValidationError

from pmr.rating.sets import NOT_PLAYED, PlayedSet
from pmr.score import (
    MatchScoreInput,
    ScoreParseError,
    SetScoreInput,
    is_valid_set,
    parse_score,
)


class TestIsValidSet:
    """Tests for legal set scores."""

    @pytest.mark.parametrize("score", [(6, 0), (6, 4), (7, 5), (7, 6), (0, 6), (4, 6), (5, 7), (6, 7)])
    def test_valid(self, score):
        assert is_valid_set(*score)

    @pytest.mark.parametrize("score", [(6, 5), (6, 6), (5, 3), (7, 4), (7, 7), (0, 0), (7, 0)])
    def test_invalid(self, score):
        assert not is_valid_set(*score)


class TestSetScoreInput:
    """Tests for one set slot."""

    def test_aliases(self):
        s = SetScoreInput.model_validate({"team1Games": 6, "team2Games": 3})
        assert (s.team1_games, s.team2_games) == (6, 3)
        assert s.team1_won

    def test_field_names(self):
        s = SetScoreInput(team1_games=4, team2_games=6)
        assert not s.team1_won

    def test_empty(self):
        s = SetScoreInput()
        assert s.is_empty
        assert s.to_set_score() is NOT_PLAYED

    def test_partial_rejected(self):
        with pytest.raises(ValidationError, match="empty or complete"):
            SetScoreInput(team1_games=6)

    def test_illegal_score_rejected(self):
        with pytest.raises(ValidationError, match="Invalid set score 6-5"):
            SetScoreInput(team1_games=6, team2_games=5)

    def test_out_of_range_rejected(self):
        with pytest.raises(ValidationError):
            SetScoreInput(team1_games=8, team2_games=6)


class TestMatchScoreInput:
    """Tests for best-of-3 consistency rules."""

    def test_straight_sets(self):
        score = MatchScoreInput.model_validate({
            "set1": {"team1Games": 6, "team2Games": 3},
            "set2": {"team1Games": 6, "team2Games": 4},
        })
        assert score.to_set_scores() == (PlayedSet(6, 3), PlayedSet(6, 4), NOT_PLAYED)
        assert score.to_display_string() == "6-3 6-4"

    def test_sets_1_and_2_required(self):
        with pytest.raises(ValidationError, match="Sets 1 and 2 are mandatory"):
            MatchScoreInput.model_validate({"set1": {"team1Games": 6, "team2Games": 3}})

    def test_decider_required_after_split(self):
        with pytest.raises(ValidationError, match="Set 3 is mandatory"):
            MatchScoreInput.model_validate({
                "set1": {"team1Games": 6, "team2Games": 3},
                "set2": {"team1Games": 3, "team2Games": 6},
            })

    def test_decider_forbidden_after_two_nil(self):
        with pytest.raises(ValidationError, match="Set 3 must be empty"):
            MatchScoreInput.model_validate({
                "set1": {"team1Games": 6, "team2Games": 3},
                "set2": {"team1Games": 6, "team2Games": 3},
                "set3": {"team1Games": 6, "team2Games": 3},
            })


class TestParseScore:
    """Tests for parse_score()."""

    def test_three_sets(self):
        score = parse_score("6-3 4-6 7-5")
        assert score.to_set_scores() == (PlayedSet(6, 3), PlayedSet(4, 6), PlayedSet(7, 5))

    def test_separators(self):
        assert parse_score("6/3, 6:4").to_display_string() == "6-3 6-4"

    def test_team_2_win(self):
        assert parse_score("3-6 5-7").to_set_scores()[0] == PlayedSet(3, 6)

    @pytest.mark.parametrize("text", ["", "   ", "6-3 6-4 6-2 6-1", "6-3 abc", "6-5 6-4", "6-3 3-6", "6-3"])
    def test_invalid(self, text):
        with pytest.raises(ScoreParseError):
            parse_score(text)

