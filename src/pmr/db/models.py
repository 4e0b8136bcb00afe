"""
SQLAlchemy ORM models for PMR Ratings.

The rating engine itself is pure; these tables are where its inputs are
read from and its outputs written back to.

Tables:
- player_rating_states: Current PMR / reliability per player
- rating_parameter_sets: Named rating parameter sets (defaults and tuned variants)
- rated_matches: One row per match that went through the engine
- player_rating_changes: Per-player before/after values for a rated match
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


# =============================================================================
# Player Ratings
# =============================================================================

class PlayerRatingState(Base):
    """
    Current rating of a player.

    player_ref is the platform's public player id; this service never
    owns player identity, it only tracks ratings against it.
    """

    __tablename__ = "player_rating_states"

    id: Mapped[int] = mapped_column(primary_key=True)
    player_ref: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    display_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    # Stored as doubles so a replayed match gives bit-identical values
    pmr: Mapped[float] = mapped_column(Float, nullable=False)
    reliability: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    rated_matches: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<PlayerRatingState(player_ref='{self.player_ref}', pmr={self.pmr}, reliability={self.reliability})>"


class RatingParameterSet(Base):
    """Persisted rating parameter sets (defaults and tuned variants)."""

    __tablename__ = "rating_parameter_sets"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    params: Mapped[dict] = mapped_column(JSONType, nullable=False)
    source: Mapped[str] = mapped_column(String(30), nullable=False, default="manual")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index("idx_rating_parameter_sets_active", "is_active"),
    )

    def __repr__(self) -> str:
        return f"<RatingParameterSet(name='{self.name}', active={self.is_active})>"


# =============================================================================
# Rating History
# =============================================================================

class RatedMatch(Base):
    """
    A completed match that went through the rating engine.

    The match itself lives in the platform; this row records what the
    engine saw (players and sets) and which parameter set it used, so a
    match is never rated twice.

    applied is False when the engine took its no-op path (not enough
    played sets); the match is still recorded so it isn't retried.
    """

    __tablename__ = "rated_matches"

    id: Mapped[int] = mapped_column(primary_key=True)
    match_ref: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)

    team1_player_refs: Mapped[list] = mapped_column(JSONType, nullable=False)
    team2_player_refs: Mapped[list] = mapped_column(JSONType, nullable=False)

    # [{"team1Games": 6, "team2Games": 3}, ...] (null games for unplayed sets)
    sets: Mapped[list] = mapped_column(JSONType, nullable=False)

    params_version: Mapped[str] = mapped_column(String(100), nullable=False)
    applied: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    processed_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    changes: Mapped[list["PlayerRatingChange"]] = relationship(
        back_populates="rated_match",
        order_by="PlayerRatingChange.position",
    )

    def __repr__(self) -> str:
        return f"<RatedMatch(match_ref='{self.match_ref}', applied={self.applied})>"


class PlayerRatingChange(Base):
    """One player's before/after ratings for a rated match."""

    __tablename__ = "player_rating_changes"

    id: Mapped[int] = mapped_column(primary_key=True)
    rated_match_id: Mapped[int] = mapped_column(ForeignKey("rated_matches.id"), nullable=False)
    player_ref: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    # 0, 1 = team 1; 2, 3 = team 2
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    previous_pmr: Mapped[float] = mapped_column(Float, nullable=False)
    new_pmr: Mapped[float] = mapped_column(Float, nullable=False)
    previous_reliability: Mapped[float] = mapped_column(Float, nullable=False)
    new_reliability: Mapped[float] = mapped_column(Float, nullable=False)

    rated_match: Mapped["RatedMatch"] = relationship(back_populates="changes")

    @property
    def delta(self) -> float:
        return self.new_pmr - self.previous_pmr

    @property
    def delta_reliability(self) -> float:
        return self.new_reliability - self.previous_reliability

    def __repr__(self) -> str:
        return f"<PlayerRatingChange(player_ref='{self.player_ref}', delta={self.delta:+.3f})>"
