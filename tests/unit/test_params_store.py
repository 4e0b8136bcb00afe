"""
Unit tests for persisted rating parameter sets.
"""

from pmr.config import settings
from pmr.db.models import RatingParameterSet
from pmr.rating.params import RatingParameters
from pmr.rating.params_store import (
    DEFAULT_PARAMS_VERSION,
    get_active_rating_params,
    persist_rating_params,
)


class TestGetActiveRatingParams:
    def test_defaults_when_nothing_stored(self, db_session):
        params, version = get_active_rating_params(db_session)

        assert params == RatingParameters()
        assert version == DEFAULT_PARAMS_VERSION

    def test_defaults_include_settings_overrides(self, db_session, monkeypatch):
        monkeypatch.setattr(settings, "rating_overrides", {"K": 0.3, "relTau": 60.0})

        params, version = get_active_rating_params(db_session)

        assert params.K == 0.3
        assert params.rel_tau == 60.0
        assert version == DEFAULT_PARAMS_VERSION

    def test_active_set_is_used(self, db_session):
        persist_rating_params(db_session, "tuned-v2", RatingParameters(K=0.4), source="optuna", activate=True)

        params, version = get_active_rating_params(db_session)

        assert params.K == 0.4
        assert version == "tuned-v2"

    def test_inactive_set_is_ignored(self, db_session):
        persist_rating_params(db_session, "candidate", RatingParameters(K=0.4), activate=False)

        params, version = get_active_rating_params(db_session)

        assert params.K == 0.25
        assert version == DEFAULT_PARAMS_VERSION

    def test_unusable_active_set_falls_back(self, db_session):
        db_session.add(RatingParameterSet(name="broken", params={"eloScale": -1.0}, is_active=True))
        db_session.flush()

        params, version = get_active_rating_params(db_session)

        assert params == RatingParameters()
        assert version == DEFAULT_PARAMS_VERSION


class TestPersistRatingParams:
    def test_activation_deactivates_others(self, db_session):
        first = persist_rating_params(db_session, "first", RatingParameters(K=0.2), activate=True)
        second = persist_rating_params(db_session, "second", RatingParameters(K=0.3), activate=True)
        db_session.refresh(first)

        assert not first.is_active
        assert second.is_active
        assert get_active_rating_params(db_session)[1] == "second"

    def test_stored_as_field_names(self, db_session):
        record = persist_rating_params(db_session, "stored", RatingParameters(v_max=2.5))

        assert record.params["v_max"] == 2.5
        assert record.source == "manual"
        assert RatingParameters.from_overrides(record.params) == RatingParameters(v_max=2.5)
