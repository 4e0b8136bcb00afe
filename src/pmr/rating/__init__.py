"""
PMR rating module.

Implements the post-match adjustment for doubles padel with:
- Team strength as the mean of both players' PMR
- Logistic expected outcome on the PMR scale
- Game-margin and upset scaling of the team change
- Reliability-driven volatility per player
- Reliability curve advancing one match at a time
- Reliability-curve fitting via Optuna (pmr.rating.tuning)
"""

from pmr.rating.adjustment import (
    MatchAdjustment,
    MatchInput,
    PlayerRatingSnapshot,
    PostMatchResult,
    adjust_match,
    compute_pmr_after_match,
)
from pmr.rating.calculator import BaseDelta, calculate_base_delta, expected_win_probability
from pmr.rating.constants import DEFAULT_PARAMS
from pmr.rating.live import LiveRatingUpdater, MatchAlreadyRatedError
from pmr.rating.params import RatingParameters
from pmr.rating.params_store import get_active_rating_params, persist_rating_params
from pmr.rating.reliability import advance_reliability, reliability_from_matches, volatility_multiplier
from pmr.rating.sets import NOT_PLAYED, NotPlayed, PlayedSet, SetResolution, resolve_sets

__all__ = [
    "MatchAdjustment",
    "MatchInput",
    "PlayerRatingSnapshot",
    "PostMatchResult",
    "adjust_match",
    "compute_pmr_after_match",
    "BaseDelta",
    "calculate_base_delta",
    "expected_win_probability",
    "DEFAULT_PARAMS",
    "LiveRatingUpdater",
    "MatchAlreadyRatedError",
    "RatingParameters",
    "get_active_rating_params",
    "persist_rating_params",
    "advance_reliability",
    "reliability_from_matches",
    "volatility_multiplier",
    "NOT_PLAYED",
    "NotPlayed",
    "PlayedSet",
    "SetResolution",
    "resolve_sets",
]
