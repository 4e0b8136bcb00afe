"""Starting PMR estimate for new players."""

from pmr.onboarding.calculator import (
    CandidateLevel,
    Evidence,
    OnboardingResult,
    QuestionDebugScore,
    compute_onboarding_pmr,
)

__all__ = [
    "CandidateLevel",
    "Evidence",
    "OnboardingResult",
    "QuestionDebugScore",
    "compute_onboarding_pmr",
]
