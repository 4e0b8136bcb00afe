"""
Set resolution for best-of-3 padel matches.

A set slot is either played (both teams' game counts known) or not played.
Modelling this as two variants means a half-filled set cannot exist inside
the engine; the conversion from nullable pairs happens once, at the edge,
in set_score_from_games().

The resolver counts set wins and sums games over played sets only:

    resolve_sets([PlayedSet(6, 3), PlayedSet(6, 4), NOT_PLAYED])
    # -> winner=1, games_team1=12, games_team2=7
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Union

from pmr.rating.constants import TEAM_1, TEAM_2


@dataclass(frozen=True)
class PlayedSet:
    """A set that was played to completion."""
    team1_games: int
    team2_games: int

    def __repr__(self) -> str:
        return f"{self.team1_games}-{self.team2_games}"


@dataclass(frozen=True)
class NotPlayed:
    """An empty set slot (typically the decider of a 2-0 match)."""

    def __repr__(self) -> str:
        return "-"


NOT_PLAYED = NotPlayed()

SetScore = Union[PlayedSet, NotPlayed]


def set_score_from_games(team1_games: Optional[int], team2_games: Optional[int]) -> SetScore:
    """
    Convert a nullable (team1, team2) pair into a set variant.

    A half-filled pair is treated as not played. Score validation is
    expected to reject it before it gets here.
    """
    if team1_games is None or team2_games is None:
        return NOT_PLAYED
    return PlayedSet(int(team1_games), int(team2_games))


@dataclass(frozen=True)
class SetResolution:
    """
    Outcome of a match read from its sets.

    Attributes:
        winner: TEAM_1 or TEAM_2, or None when set wins are level
        games_team1: Games won by team 1 over played sets
        games_team2: Games won by team 2 over played sets
        sets_team1: Sets won by team 1
        sets_team2: Sets won by team 2
        played_sets: Number of played sets
    """
    winner: Optional[int]
    games_team1: int
    games_team2: int
    sets_team1: int
    sets_team2: int
    played_sets: int


def resolve_sets(sets: Iterable[SetScore]) -> SetResolution:
    """
    Determine the winner and game totals from up to three set slots.

    The winner is the team with strictly more set wins. A set recorded
    level on games counts its games but gives no set win; with level set
    wins the resolution has no winner and the caller decides what to do.
    """
    games_team1 = 0
    games_team2 = 0
    sets_team1 = 0
    sets_team2 = 0
    played = 0

    for set_score in sets:
        if not isinstance(set_score, PlayedSet):
            continue
        played += 1
        games_team1 += set_score.team1_games
        games_team2 += set_score.team2_games
        if set_score.team1_games > set_score.team2_games:
            sets_team1 += 1
        elif set_score.team2_games > set_score.team1_games:
            sets_team2 += 1

    if sets_team1 > sets_team2:
        winner = TEAM_1
    elif sets_team2 > sets_team1:
        winner = TEAM_2
    else:
        winner = None

    return SetResolution(
        winner=winner,
        games_team1=games_team1,
        games_team2=games_team2,
        sets_team1=sets_team1,
        sets_team2=sets_team2,
        played_sets=played,
    )
