"""
Pytest configuration and fixtures.

This file is automatically loaded by pytest and provides
shared fixtures for all tests.
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from pmr.db.models import Base
from pmr.rating.adjustment import MatchInput, PlayerRatingSnapshot
from pmr.rating.sets import NOT_PLAYED, PlayedSet


@pytest.fixture(scope="session")
def test_engine():
    """
    SQLite in-memory engine.

    The rating tables use nothing PostgreSQL-specific beyond JSONB,
    which falls back to JSON here.
    """
    return create_engine("sqlite:///:memory:", echo=False)


@pytest.fixture(scope="session")
def tables(test_engine):
    """Create all tables once per test session."""
    Base.metadata.create_all(test_engine)
    yield
    Base.metadata.drop_all(test_engine)


@pytest.fixture
def db_session(test_engine, tables):
    """
    Database session for a single test.

    Everything the test writes is rolled back afterwards.
    """
    connection = test_engine.connect()
    transaction = connection.begin()

    Session = sessionmaker(bind=connection)
    session = Session()

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def api_session_factory():
    """
    Session factory over a fresh in-memory database.

    API handlers commit and roll back on their own, so they get a private
    database instead of the shared rollback-per-test connection.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, autoflush=False)
    Base.metadata.drop_all(engine)
    engine.dispose()


def make_match(team1, team2, sets):
    """
    Build a MatchInput from (id, pmr, reliability) tuples and (g1, g2) sets.

    None in sets stands for an unplayed slot.
    """
    return MatchInput(
        team1=tuple(PlayerRatingSnapshot(*p) for p in team1),
        team2=tuple(PlayerRatingSnapshot(*p) for p in team2),
        sets=tuple(NOT_PLAYED if s is None else PlayedSet(*s) for s in sets),
    )


@pytest.fixture
def even_match():
    """Four players at PMR 5.0 / reliability 50, team 1 wins 6-3 6-4."""
    return make_match(
        [("p1", 5.0, 50.0), ("p2", 5.0, 50.0)],
        [("p3", 5.0, 50.0), ("p4", 5.0, 50.0)],
        [(6, 3), (6, 4), None],
    )


@pytest.fixture
def match_factory():
    """make_match() as a fixture."""
    return make_match
