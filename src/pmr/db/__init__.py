"""
Database module for PMR Ratings.

Provides SQLAlchemy ORM models and session management.

Usage:
    from pmr.db import get_session, PlayerRatingState

    with get_session() as session:
        states = session.query(PlayerRatingState).all()
"""

from pmr.db.models import (
    Base,
    PlayerRatingChange,
    PlayerRatingState,
    RatedMatch,
    RatingParameterSet,
)
from pmr.db.session import SessionLocal, get_engine, get_session

__all__ = [
    # Base
    "Base",
    # Models
    "PlayerRatingState",
    "RatingParameterSet",
    "RatedMatch",
    "PlayerRatingChange",
    # Session
    "get_session",
    "get_engine",
    "SessionLocal",
]
