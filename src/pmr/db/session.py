"""
Database session management for PMR Ratings.

Provides SQLAlchemy engine and session factory with connection pooling
configured from config.py. The engine is created on first use, so
importing this module never opens a connection or loads a driver.

Usage:
    # As a context manager (recommended for scripts)
    from pmr.db import get_session

    with get_session() as session:
        state = session.query(PlayerRatingState).filter_by(player_ref="p1").first()
        # Commits automatically on exit, rolls back on exception

    # As a dependency injection (for FastAPI)
    from pmr.db.session import get_db

    @app.get("/api/players/{player_ref}/rating")
    def read_rating(player_ref: str, db: Session = Depends(get_db)):
        ...
"""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from pmr.config import settings


def get_engine() -> Engine:
    """
    Create SQLAlchemy engine with connection pooling.

    The engine is configured with:
    - Connection pool for efficient reuse (not for SQLite)
    - Echo mode only when LOG_LEVEL=DEBUG
    - Pre-ping to verify connections before use (handles stale connections)
    """
    kwargs = {
        "pool_pre_ping": True,
        "echo": settings.log_level == "DEBUG",
    }
    if not settings.database_url.startswith("sqlite"):
        kwargs["pool_size"] = settings.db_pool_size
        kwargs["max_overflow"] = settings.db_max_overflow

    return create_engine(settings.database_url, **kwargs)


_engine = None


def _get_engine() -> Engine:
    """Get or create the singleton engine instance."""
    global _engine
    if _engine is None:
        _engine = get_engine()
    return _engine


# Session factory, bound to the engine on first use
SessionLocal = sessionmaker(autoflush=False)


def _new_session() -> Session:
    if SessionLocal.kw.get("bind") is None:
        SessionLocal.configure(bind=_get_engine())
    return SessionLocal()


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """
    Context manager for database sessions.

    Automatically commits on successful exit, rolls back on exception.
    This is the recommended way to use sessions in scripts.

    Raises:
        Any exception from the database operation (after rollback)
    """
    session = _new_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_db() -> Generator[Session, None, None]:
    """
    Dependency injection function for FastAPI.

    Use this with FastAPI's Depends() for request-scoped sessions.
    """
    db = _new_session()
    try:
        yield db
    finally:
        db.close()
