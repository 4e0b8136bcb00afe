"""Apply completed matches to persisted player ratings."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from pmr.config import settings
from pmr.db.models import PlayerRatingChange, PlayerRatingState, RatedMatch
from pmr.rating.adjustment import MatchAdjustment, MatchInput, PlayerRatingSnapshot, adjust_match
from pmr.rating.params import RatingParameters
from pmr.rating.params_store import get_active_rating_params
from pmr.rating.reliability import clamp
from pmr.rating.sets import PlayedSet, SetScore

logger = logging.getLogger(__name__)


class MatchAlreadyRatedError(Exception):
    """Raised when a match ref has already gone through the engine."""

    def __init__(self, match_ref: str):
        self.match_ref = match_ref
        super().__init__(f"Match {match_ref!r} has already been rated")


class LiveRatingUpdater:
    """Reads player states, runs the adjustment and writes the results back."""

    def __init__(self, params: RatingParameters, params_version: str):
        self.params = params
        self.params_version = params_version

    @classmethod
    def from_session(cls, session: Session) -> "LiveRatingUpdater":
        params, version = get_active_rating_params(session)
        return cls(params=params, params_version=version)

    def apply_match(
        self,
        session: Session,
        match_ref: str,
        team1_refs: Sequence[str],
        team2_refs: Sequence[str],
        sets: Sequence[SetScore],
    ) -> tuple[RatedMatch, MatchAdjustment]:
        """
        Rate one completed match.

        Players without a persisted rating are created at the configured
        defaults. All four states are updated from the same snapshot, so
        the order players are listed in does not affect anyone's result.

        Raises:
            MatchAlreadyRatedError: If match_ref was rated before
            ValueError: If the teams are malformed or share a player
        """
        refs = list(team1_refs) + list(team2_refs)
        if len(team1_refs) != 2 or len(team2_refs) != 2:
            raise ValueError("each team must have exactly two players")
        if len(set(refs)) != len(refs):
            raise ValueError(f"a player appears twice in match {match_ref!r}: {refs}")

        if self.is_rated(session, match_ref):
            logger.info("Match %s already rated, skipping", match_ref)
            raise MatchAlreadyRatedError(match_ref)

        states = (
            session.query(PlayerRatingState)
            .filter(PlayerRatingState.player_ref.in_(sorted(refs)))
            .with_for_update()
            .all()
        )
        state_by_ref = {s.player_ref: s for s in states}
        ordered = [state_by_ref.get(ref) or self._create_state(session, ref) for ref in refs]

        snapshots = [PlayerRatingSnapshot(s.player_ref, s.pmr, s.reliability) for s in ordered]
        match = MatchInput(team1=tuple(snapshots[:2]), team2=tuple(snapshots[2:]), sets=tuple(sets))
        adjustment = adjust_match(match, self.params)

        rated = RatedMatch(
            match_ref=match_ref,
            team1_player_refs=list(team1_refs),
            team2_player_refs=list(team2_refs),
            sets=[_set_to_json(s) for s in match.sets],
            params_version=self.params_version,
            applied=adjustment.applied,
            processed_at=datetime.utcnow(),
        )
        session.add(rated)
        session.flush()

        for position, (state, result) in enumerate(zip(ordered, adjustment.results)):
            session.add(
                PlayerRatingChange(
                    rated_match_id=rated.id,
                    player_ref=state.player_ref,
                    position=position,
                    previous_pmr=result.previous_pmr,
                    new_pmr=result.new_pmr,
                    previous_reliability=result.previous_reliability,
                    new_reliability=result.new_reliability,
                )
            )
            if adjustment.applied:
                state.pmr = result.new_pmr
                state.reliability = result.new_reliability
                state.rated_matches += 1

        session.flush()

        if adjustment.applied:
            logger.info(
                "Rated match %s (%s): team 1 %+.3f, team 2 %+.3f",
                match_ref,
                self.params_version,
                adjustment.base.team1,
                adjustment.base.team2,
            )
        else:
            logger.warning(
                "Match %s left ratings unchanged (%d played sets, winner=%s)",
                match_ref,
                adjustment.resolution.played_sets,
                adjustment.resolution.winner,
            )
        return rated, adjustment

    @staticmethod
    def is_rated(session: Session, match_ref: str) -> bool:
        return session.query(RatedMatch.id).filter(RatedMatch.match_ref == match_ref).first() is not None

    def _create_state(self, session: Session, player_ref: str) -> PlayerRatingState:
        state = PlayerRatingState(
            player_ref=player_ref,
            pmr=clamp(settings.default_player_pmr, self.params.pmr_min, self.params.pmr_max),
            reliability=clamp(settings.default_player_reliability, self.params.rel_min, self.params.rel_max),
            rated_matches=0,
        )
        session.add(state)
        session.flush()
        logger.debug("Created rating state for new player %s", player_ref)
        return state


def get_player_state(session: Session, player_ref: str) -> Optional[PlayerRatingState]:
    return session.query(PlayerRatingState).filter(PlayerRatingState.player_ref == player_ref).first()


def _set_to_json(set_score: SetScore) -> dict:
    if isinstance(set_score, PlayedSet):
        return {"team1Games": set_score.team1_games, "team2Games": set_score.team2_games}
    return {"team1Games": None, "team2Games": None}
