"""Persistence helpers for active rating parameter sets."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from pmr.config import settings
from pmr.db.models import RatingParameterSet
from pmr.rating.params import RatingParameters

logger = logging.getLogger(__name__)

DEFAULT_PARAMS_VERSION = "defaults-v1"


def default_rating_params() -> RatingParameters:
    """Engine defaults with RATING_OVERRIDES applied."""
    return RatingParameters.from_overrides(settings.rating_overrides)


def get_active_rating_params(session: Session) -> tuple[RatingParameters, str]:
    """Return active persisted rating params, or defaults if none are active."""
    active = (
        session.query(RatingParameterSet)
        .filter(RatingParameterSet.is_active.is_(True))
        .order_by(RatingParameterSet.created_at.desc(), RatingParameterSet.id.desc())
        .first()
    )
    if not active:
        return default_rating_params(), DEFAULT_PARAMS_VERSION

    try:
        params = RatingParameters.from_overrides(active.params)
    except (TypeError, ValueError) as e:
        logger.warning("Active rating parameter set %r is unusable (%s), using defaults", active.name, e)
        return default_rating_params(), DEFAULT_PARAMS_VERSION

    return params, active.name


def persist_rating_params(
    session: Session,
    name: str,
    params: RatingParameters,
    source: str = "manual",
    activate: bool = False,
) -> RatingParameterSet:
    """Persist a named rating params set and optionally activate it."""
    if activate:
        session.query(RatingParameterSet).update({RatingParameterSet.is_active: False})

    record = RatingParameterSet(
        name=name,
        params=params.as_dict(),
        source=source,
        is_active=activate,
    )
    session.add(record)
    session.flush()
    logger.info("Stored rating parameter set %r (source=%s, active=%s)", name, source, activate)
    return record
