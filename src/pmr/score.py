"""
Padel score validation and parsing.

The rating engine trusts that a match score is well formed. This module is
where that guarantee comes from:

- A set is either empty (both sides null) or complete (both sides set)
- A complete set is 6-0..6-4, 7-5 or 7-6 (either way round)
- Sets 1 and 2 are mandatory
- Set 3 is mandatory after a 1-1 split and must be empty after 2-0 / 0-2

Scores arrive either as JSON from the admin console
({"set1": {"team1Games": 6, "team2Games": 3}, ...}) or as compact strings
typed on the command line ("6-3 4-6 7-5"); both end up as a validated
MatchScoreInput.
"""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from pmr.rating.sets import SetScore, set_score_from_games

MAX_SET_GAMES = 7

_SET_PATTERN = re.compile(r"^(\d+)\s*[-/:]\s*(\d+)$")


class ScoreParseError(Exception):
    """Raised when a score string cannot be parsed into a valid match score."""
    pass


def is_valid_set(team1_games: int, team2_games: int) -> bool:
    """Whether a completed set score is one padel allows."""
    won_at_6 = (team1_games == 6 and 0 <= team2_games <= 4) or (team2_games == 6 and 0 <= team1_games <= 4)
    won_at_7 = (team1_games == 7 and team2_games in (5, 6)) or (team2_games == 7 and team1_games in (5, 6))
    return won_at_6 or won_at_7


class SetScoreInput(BaseModel):
    """One set slot as entered in the admin console."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    team1_games: Optional[int] = Field(default=None, ge=0, le=MAX_SET_GAMES, alias="team1Games")
    team2_games: Optional[int] = Field(default=None, ge=0, le=MAX_SET_GAMES, alias="team2Games")

    @model_validator(mode="after")
    def check_complete_and_valid(self) -> "SetScoreInput":
        if (self.team1_games is None) != (self.team2_games is None):
            raise ValueError("A set must be either empty or complete (no partial value)")
        if not self.is_empty and not is_valid_set(self.team1_games, self.team2_games):
            raise ValueError(
                f"Invalid set score {self.team1_games}-{self.team2_games}. "
                "Valid sets: 6-0..6-4, 7-5, 7-6"
            )
        return self

    @property
    def is_empty(self) -> bool:
        return self.team1_games is None and self.team2_games is None

    @property
    def team1_won(self) -> bool:
        return not self.is_empty and self.team1_games > self.team2_games

    def to_set_score(self) -> SetScore:
        return set_score_from_games(self.team1_games, self.team2_games)


class MatchScoreInput(BaseModel):
    """A best-of-3 match score."""

    model_config = ConfigDict(frozen=True)

    set1: SetScoreInput = Field(default_factory=SetScoreInput)
    set2: SetScoreInput = Field(default_factory=SetScoreInput)
    set3: SetScoreInput = Field(default_factory=SetScoreInput)

    @model_validator(mode="after")
    def check_sets(self) -> "MatchScoreInput":
        if self.set1.is_empty or self.set2.is_empty:
            raise ValueError("Sets 1 and 2 are mandatory")

        is_split = self.set1.team1_won != self.set2.team1_won
        if is_split and self.set3.is_empty:
            raise ValueError("Set 3 is mandatory after a 1-1 split")
        if not is_split and not self.set3.is_empty:
            raise ValueError("Set 3 must be empty when the match is 2-0 or 0-2")
        return self

    @property
    def sets(self) -> tuple[SetScoreInput, SetScoreInput, SetScoreInput]:
        return (self.set1, self.set2, self.set3)

    def to_set_scores(self) -> tuple[SetScore, SetScore, SetScore]:
        """Convert to the rating engine's set variants."""
        return tuple(s.to_set_score() for s in self.sets)

    def to_display_string(self) -> str:
        """Compact form like '6-3 4-6 7-5'."""
        return " ".join(f"{s.team1_games}-{s.team2_games}" for s in self.sets if not s.is_empty)


def parse_score(score_str: str) -> MatchScoreInput:
    """
    Parse a compact score string into a validated match score.

    Sets are separated by whitespace or commas; games by '-', '/' or ':'.

    Args:
        score_str: Score from team 1's point of view, e.g. "6-3 4-6 7-5"

    Returns:
        Validated MatchScoreInput

    Raises:
        ScoreParseError: If the string is malformed or not a valid padel score

    Examples:
        >>> parse_score("6-3 6-4").to_display_string()
        '6-3 6-4'
    """
    if not score_str or not score_str.strip():
        raise ScoreParseError("Empty score string")

    parts = [p for p in re.split(r"[\s,]+", score_str.strip()) if p]
    if len(parts) > 3:
        raise ScoreParseError(f"Too many sets in score: {score_str!r}")

    sets = {}
    for i, part in enumerate(parts, start=1):
        match = _SET_PATTERN.match(part)
        if not match:
            raise ScoreParseError(f"Could not parse set {i} in score: {score_str!r}")
        sets[f"set{i}"] = {"team1Games": int(match.group(1)), "team2Games": int(match.group(2))}

    try:
        return MatchScoreInput.model_validate(sets)
    except ValidationError as e:
        messages = "; ".join(err["msg"] for err in e.errors())
        raise ScoreParseError(f"Invalid score {score_str!r}: {messages}") from e

