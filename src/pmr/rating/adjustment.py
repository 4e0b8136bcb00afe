"""
Post-match PMR and reliability adjustment for a doubles match.

Composes the set resolver, the expected-outcome / margin / upset factors,
the reliability curve and the volatility scaler into one pure function:

    results = compute_pmr_after_match(
        MatchInput(
            team1=(PlayerRatingSnapshot("a", 5.0, 50), PlayerRatingSnapshot("b", 5.0, 50)),
            team2=(PlayerRatingSnapshot("c", 5.0, 50), PlayerRatingSnapshot("d", 5.0, 50)),
            sets=(PlayedSet(6, 3), PlayedSet(6, 4), NOT_PLAYED),
        )
    )
    # team 1 players: 5.00 -> ~5.12, team 2 players: 5.00 -> ~4.88
    # everyone: reliability 50.00 -> ~50.9

Steps, in order:
1. Clamp incoming PMR and reliability into their valid ranges
2. Resolve sets into a winner and game totals
3. With fewer than two played sets, or no winner, return an unchanged
   result for every player (a committed no-op, not an error)
4. Otherwise compute the team base change, scale it per player by
   volatility, advance every player's reliability by one match, and clamp
5. Return four results in input order: team1[0], team1[1], team2[0], team2[1]

Nothing here performs I/O or keeps state between calls. Identical inputs
always give identical float outputs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from pmr.rating.calculator import BaseDelta, calculate_base_delta, team_rating
from pmr.rating.constants import TEAM_1
from pmr.rating.params import RatingParameters
from pmr.rating.reliability import advance_reliability, clamp, volatility_multiplier
from pmr.rating.sets import NOT_PLAYED, SetResolution, SetScore, resolve_sets

MIN_PLAYED_SETS = 2
SET_SLOTS = 3


@dataclass(frozen=True)
class PlayerRatingSnapshot:
    """A player's persisted rating state, read just before the match."""
    id: str
    pmr: float
    reliability: float


@dataclass(frozen=True)
class MatchInput:
    """
    Everything the adjustment needs about one completed match.

    Attributes:
        team1: The two players of team 1
        team2: The two players of team 2
        sets: Set slots in order; a two-slot input is padded with NOT_PLAYED
    """
    team1: tuple[PlayerRatingSnapshot, PlayerRatingSnapshot]
    team2: tuple[PlayerRatingSnapshot, PlayerRatingSnapshot]
    sets: tuple[SetScore, ...]

    def __post_init__(self) -> None:
        if len(self.team1) != 2 or len(self.team2) != 2:
            raise ValueError("each team must have exactly two players")
        if len(self.sets) > SET_SLOTS:
            raise ValueError(f"a match has at most {SET_SLOTS} sets, got {len(self.sets)}")
        padded = tuple(self.sets) + (NOT_PLAYED,) * (SET_SLOTS - len(self.sets))
        object.__setattr__(self, "team1", tuple(self.team1))
        object.__setattr__(self, "team2", tuple(self.team2))
        object.__setattr__(self, "sets", padded)

    @property
    def players(self) -> tuple[PlayerRatingSnapshot, ...]:
        """All four players in result order."""
        return self.team1 + self.team2


@dataclass(frozen=True)
class PostMatchResult:
    """
    One player's rating change from a match.

    Deltas are derived from the before/after values, never computed
    separately.
    """
    player_id: str
    previous_pmr: float
    new_pmr: float
    previous_reliability: float
    new_reliability: float

    @property
    def delta(self) -> float:
        """PMR change."""
        return self.new_pmr - self.previous_pmr

    @property
    def delta_reliability(self) -> float:
        """Reliability change."""
        return self.new_reliability - self.previous_reliability

    def to_dict(self) -> dict[str, Any]:
        """Wire format used by the admin console."""
        return {
            "playerId": self.player_id,
            "previousPmr": self.previous_pmr,
            "newPmr": self.new_pmr,
            "delta": self.delta,
            "previousReliability": self.previous_reliability,
            "newReliability": self.new_reliability,
            "deltaReliability": self.delta_reliability,
        }

    def __repr__(self) -> str:
        return (
            f"<PostMatchResult({self.player_id}: PMR {self.previous_pmr:.2f} -> {self.new_pmr:.2f}, "
            f"reliability {self.previous_reliability:.2f} -> {self.new_reliability:.2f})>"
        )


@dataclass(frozen=True)
class MatchAdjustment:
    """
    Full breakdown of a post-match adjustment.

    Attributes:
        applied: False when the no-op path was taken (insufficient sets or
            no winner); every result is then unchanged
        resolution: Winner and game totals read from the sets
        base: Team base changes and their factors (None when not applied)
        volatility: Per-player multipliers in result order (empty when not applied)
        results: Four results in input order
    """
    applied: bool
    resolution: SetResolution
    base: Optional[BaseDelta]
    volatility: tuple[float, ...]
    results: tuple[PostMatchResult, ...]

    def to_dict(self) -> dict[str, Any]:
        """Wire format used by the admin console's simulation screen."""
        data = {
            "applied": self.applied,
            "winner": self.resolution.winner,
            "playedSets": self.resolution.played_sets,
            "gamesTeam1": self.resolution.games_team1,
            "gamesTeam2": self.resolution.games_team2,
            "volatility": list(self.volatility),
            "results": [r.to_dict() for r in self.results],
        }
        if self.base is not None:
            data.update({
                "expectedTeam1": self.base.expected_team1,
                "margin": self.base.margin,
                "marginFactor": self.base.margin_factor,
                "upsetFactor": self.base.upset_factor,
                "baseTeam1": self.base.team1,
                "baseTeam2": self.base.team2,
            })
        return data


ParamsLike = Union[RatingParameters, Mapping[str, Any], None]


def compute_pmr_after_match(match: MatchInput, params: ParamsLike = None) -> list[PostMatchResult]:
    """
    Updated PMR and reliability for the four players of a match.

    Args:
        match: Players' prior ratings and the set scores
        params: RatingParameters, or a partial mapping merged over the defaults

    Returns:
        Four PostMatchResult, in order team1[0], team1[1], team2[0], team2[1]
    """
    return list(adjust_match(match, params).results)


def adjust_match(match: MatchInput, params: ParamsLike = None) -> MatchAdjustment:
    """Same as compute_pmr_after_match(), keeping every intermediate value."""
    p = _resolve_params(params)

    # Callers normally pass values already in range
    players = [
        PlayerRatingSnapshot(
            id=player.id,
            pmr=clamp(player.pmr, p.pmr_min, p.pmr_max),
            reliability=clamp(player.reliability, p.rel_min, p.rel_max),
        )
        for player in match.players
    ]

    resolution = resolve_sets(match.sets)
    if resolution.played_sets < MIN_PLAYED_SETS or resolution.winner is None:
        return MatchAdjustment(
            applied=False,
            resolution=resolution,
            base=None,
            volatility=(),
            results=tuple(_unchanged_result(player) for player in players),
        )

    a, b, c, d = players
    base = calculate_base_delta(
        team1_pmr=team_rating(a.pmr, b.pmr),
        team2_pmr=team_rating(c.pmr, d.pmr),
        team1_won=resolution.winner == TEAM_1,
        games_team1=resolution.games_team1,
        games_team2=resolution.games_team2,
        K=p.K,
        elo_scale=p.elo_scale,
        margin_min=p.margin_min,
        margin_gamma=p.margin_gamma,
        upset_beta=p.upset_beta,
        upset_gamma=p.upset_gamma,
    )

    team_deltas = (base.team1, base.team1, base.team2, base.team2)
    volatility = tuple(volatility_multiplier(player.reliability, p.v_max, p.v_gamma) for player in players)

    results = []
    for player, team_delta, multiplier in zip(players, team_deltas, volatility):
        new_pmr = clamp(player.pmr + team_delta * multiplier, p.pmr_min, p.pmr_max)
        new_reliability = clamp(
            advance_reliability(player.reliability, p.rel_tau, p.rel_curve_gamma),
            p.rel_min,
            p.rel_max,
        )
        results.append(_result(player, new_pmr, new_reliability))

    return MatchAdjustment(
        applied=True,
        resolution=resolution,
        base=base,
        volatility=volatility,
        results=tuple(results),
    )


def _resolve_params(params: ParamsLike) -> RatingParameters:
    if isinstance(params, RatingParameters):
        return params
    return RatingParameters.from_overrides(params)


def _result(player: PlayerRatingSnapshot, new_pmr: float, new_reliability: float) -> PostMatchResult:
    return PostMatchResult(
        player_id=player.id,
        previous_pmr=player.pmr,
        new_pmr=new_pmr,
        previous_reliability=player.reliability,
        new_reliability=new_reliability,
    )


def _unchanged_result(player: PlayerRatingSnapshot) -> PostMatchResult:
    return _result(player, player.pmr, player.reliability)
