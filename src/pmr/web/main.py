import logging
from typing import Any, Dict, List, Optional, Union

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError
from sqlalchemy.orm import Session

from pmr.db.session import get_db
from pmr.onboarding import compute_onboarding_pmr
from pmr.rating.adjustment import MatchInput, PlayerRatingSnapshot, adjust_match
from pmr.rating.live import LiveRatingUpdater, MatchAlreadyRatedError, get_player_state
from pmr.rating.params_store import get_active_rating_params
from pmr.score import MatchScoreInput, ScoreParseError, parse_score

logger = logging.getLogger(__name__)

app = FastAPI(title="PMR Ratings")


# =============================================================================
# Request models
# =============================================================================

class PlayerInput(BaseModel):
    id: str
    pmr: float
    reliability: float = 0.0


class SimulateRequest(BaseModel):
    """Wizard simulation: four players, a score and optional parameter overrides."""
    team1: List[PlayerInput] = Field(..., min_length=2, max_length=2)
    team2: List[PlayerInput] = Field(..., min_length=2, max_length=2)
    # Either "6-3 4-6 7-5" or {"set1": {"team1Games": 6, "team2Games": 3}, ...}
    score: Union[str, Dict[str, Any]]
    params: Optional[Dict[str, Optional[float]]] = None


class RateMatchRequest(BaseModel):
    team1: List[str] = Field(..., min_length=2, max_length=2)
    team2: List[str] = Field(..., min_length=2, max_length=2)
    score: Union[str, Dict[str, Any]]


class OnboardingRequest(BaseModel):
    q1: str
    q2: str
    q3: str
    q4: str
    q5: str


def _validate_score(score: Union[str, Dict[str, Any]]) -> MatchScoreInput:
    """Validate a score from a request body, or raise a 422."""
    try:
        if isinstance(score, str):
            return parse_score(score)
        return MatchScoreInput.model_validate(score)
    except ScoreParseError as e:
        logger.info("Rejected score %r: %s", score, e)
        raise HTTPException(status_code=422, detail=str(e))
    except ValidationError as e:
        messages = "; ".join(err["msg"] for err in e.errors())
        logger.info("Rejected score %r: %s", score, messages)
        raise HTTPException(status_code=422, detail=messages)


# =============================================================================
# Rating simulation
# =============================================================================

@app.post("/api/pmr/simulate")
async def api_pmr_simulate(body: SimulateRequest):
    """
    Preview a post-match adjustment without touching any stored rating.

    Mirrors the admin console's PMR wizard: the caller supplies each
    player's current PMR and reliability and sees the full breakdown.
    """
    score = _validate_score(body.score)

    try:
        match = MatchInput(
            team1=tuple(PlayerRatingSnapshot(p.id, p.pmr, p.reliability) for p in body.team1),
            team2=tuple(PlayerRatingSnapshot(p.id, p.pmr, p.reliability) for p in body.team2),
            sets=score.to_set_scores(),
        )
        adjustment = adjust_match(match, body.params)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    data = adjustment.to_dict()
    data["score"] = score.to_display_string()
    return JSONResponse(data)


@app.post("/api/pmr/onboarding")
async def api_pmr_onboarding(body: OnboardingRequest):
    """Starting PMR for a new player from their questionnaire answers."""
    try:
        result = compute_onboarding_pmr(body.q1, body.q2, body.q3, body.q4, body.q5)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return JSONResponse({
        "pmr": result.pmr,
        "debug": [
            {
                "questionId": d.question_id,
                "answer": d.answer,
                "mu": d.evidence.mu,
                "tau": d.evidence.tau,
                "weight": d.evidence.weight,
                "hardMin": d.evidence.hard_min,
                "hardMax": d.evidence.hard_max,
                "scoreAtWinnerBase": d.score_at_winner_base,
                "scoreAtWinnerWeighted": d.score_at_winner_weighted,
            }
            for d in result.debug_scores
        ],
        # Only candidates that aren't ruled out by a hard bound
        "candidates": [
            {"level": c.level, "score": c.score}
            for c in result.candidates
            if c.score > 0
        ],
    })


# =============================================================================
# Persisted ratings
# =============================================================================

@app.get("/api/rating-params")
async def api_rating_params(db: Session = Depends(get_db)):
    """Parameter set currently used for live rating."""
    params, version = get_active_rating_params(db)
    return JSONResponse({"version": version, "params": params.as_wire_dict()})


@app.post("/api/matches/{match_ref}/rating")
async def api_rate_match(match_ref: str, body: RateMatchRequest, db: Session = Depends(get_db)):
    """
    Apply a completed match to the stored ratings of its four players.

    A match can only be rated once; a second call returns 409.
    """
    score = _validate_score(body.score)
    updater = LiveRatingUpdater.from_session(db)

    try:
        rated, adjustment = updater.apply_match(db, match_ref, body.team1, body.team2, score.to_set_scores())
    except MatchAlreadyRatedError as e:
        db.rollback()
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=422, detail=str(e))

    db.commit()

    return JSONResponse({
        "matchRef": rated.match_ref,
        "applied": rated.applied,
        "paramsVersion": rated.params_version,
        "score": score.to_display_string(),
        "results": [r.to_dict() for r in adjustment.results],
    })


@app.get("/api/players/{player_ref}/rating")
async def api_player_rating(player_ref: str, db: Session = Depends(get_db)):
    """Current stored rating of a player."""
    state = get_player_state(db, player_ref)
    if state is None:
        raise HTTPException(status_code=404, detail="Player not found")

    return JSONResponse({
        "playerRef": state.player_ref,
        "displayName": state.display_name,
        "pmr": state.pmr,
        "reliability": state.reliability,
        "ratedMatches": state.rated_matches,
        "updatedAt": state.updated_at.isoformat() if state.updated_at else None,
    })


if __name__ == "__main__":
    import uvicorn

    from pmr.config import settings

    uvicorn.run("pmr.web.main:app", host=settings.api_host, port=settings.api_port, reload=settings.api_reload)
