"""
Unit tests for the onboarding PMR estimator.
"""

import math

import pytest

from pmr.onboarding import Evidence, compute_onboarding_pmr
from pmr.onboarding.calculator import log_score_gaussian, pick_level


class TestComputeOnboardingPmr:
    """Tests for compute_onboarding_pmr()."""

    def test_intermediate_player(self):
        result = compute_onboarding_pmr("intermediaire", "3-6ans", "debut-competition", "3", "3")
        assert result.pmr == 3.9

    def test_beginner(self):
        result = compute_onboarding_pmr("debutant", "moins-1an", "loisir", "1", "1")
        assert result.pmr <= 1.2

    def test_elite(self):
        result = compute_onboarding_pmr("elite", "plus-10ans", "competiteur-avance", "5", "5")
        assert result.pmr >= 7.0

    def test_hard_cap_from_experience(self):
        """Under a year of racket sports caps the estimate at 4.0."""
        result = compute_onboarding_pmr("elite", "moins-1an", "competiteur-avance", "5", "5")
        assert result.pmr <= 4.0

    def test_more_experience_never_lowers_estimate(self):
        answers = ("confirme", "debut-competition", "4", "4")
        novice = compute_onboarding_pmr(answers[0], "moins-1an", *answers[1:])
        seasoned = compute_onboarding_pmr(answers[0], "3-6ans", *answers[1:])
        assert seasoned.pmr >= novice.pmr

    def test_invalid_answer(self):
        with pytest.raises(ValueError, match="Q3"):
            compute_onboarding_pmr("intermediaire", "3-6ans", "pro", "3", "3")

    def test_debug_scores(self):
        result = compute_onboarding_pmr("intermediaire", "3-6ans", "debut-competition", "3", "3")

        assert [d.question_id for d in result.debug_scores] == ["Q1", "Q2", "Q3", "Q4", "Q5"]
        for d in result.debug_scores:
            assert 0.0 < d.score_at_winner_base <= 1.0
            assert 0.0 < d.score_at_winner_weighted <= 1.0

    def test_candidates(self):
        result = compute_onboarding_pmr("intermediaire", "3-6ans", "debut-competition", "3", "3")

        assert len(result.candidates) == 89
        assert result.candidates[0].level == 0.1
        assert result.candidates[-1].level == 8.9
        best = max(result.candidates, key=lambda c: c.score)
        assert best.level == result.pmr
        assert best.score == 1.0

    def test_forbidden_candidates_score_zero(self):
        result = compute_onboarding_pmr("intermediaire", "moins-1an", "debut-competition", "3", "3")
        above_cap = [c for c in result.candidates if c.level > 4.0]
        assert above_cap
        assert all(c.score == 0.0 and c.log_score == -math.inf for c in above_cap)


class TestPickLevel:
    """Tests for the level search and tie-breaking."""

    def test_single_evidence_peaks_at_mu(self):
        best_int, best_log, _ = pick_level([Evidence(mu=6.2, tau=1.0, weight=1.0)])
        assert best_int == 62
        assert best_log == 0.0

    def test_no_evidence_falls_back_to_default(self):
        """Every level scores 0; the default 4.0 wins the tie."""
        best_int, _, raw = pick_level([])
        assert best_int == 40
        assert len(raw) == 89

    def test_tie_prefers_average_mu(self):
        """Zero-weight evidence scores every level equally; the mean mu wins."""
        flat = Evidence(mu=6.0, tau=1.0, weight=0.0)
        best_int, best_log, _ = pick_level([flat])
        assert best_int == 60
        assert best_log == 0.0

    def test_tie_inside_hard_bounds(self):
        """With the mean mu ruled out, the allowed level nearest to it wins."""
        flat = Evidence(mu=6.0, tau=1.0, weight=0.0, hard_max=5.0)
        best_int, _, _ = pick_level([flat])
        assert best_int == 50

    def test_everything_forbidden(self):
        evidences = [
            Evidence(mu=2.0, tau=1.0, weight=1.0, hard_max=2.0),
            Evidence(mu=6.0, tau=1.0, weight=1.0, hard_min=6.0),
        ]
        best_int, best_log, _ = pick_level(evidences)
        assert best_log == -math.inf
        assert best_int == 40

    def test_gaussian_log_score(self):
        assert log_score_gaussian(4.0, 4.0, 1.0) == 0.0
        assert log_score_gaussian(5.0, 4.0, 1.0) == -0.5
        assert log_score_gaussian(5.0, 4.0, 0.0) < -1e9
