"""
Optuna-based fitting of the reliability curve.

The curve R(n) = 100 * (1 - exp(-n / tau)) ^ gamma has two knobs. Product
decides how confident we should be after a given number of rated matches
(RELIABILITY_TARGETS), and this module finds the (relTau, relCurveGamma)
pair that hits those targets best.

Usage:
    fit = fit_reliability_curve({5: 24.0, 30: 55.0, 100: 85.0}, n_trials=300)
    params = RatingParameters.from_overrides(fit.as_overrides())
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

import optuna

from pmr.rating.constants import RELIABILITY_TARGETS
from pmr.rating.reliability import reliability_from_matches

TAU_RANGE = (10.0, 300.0)
GAMMA_RANGE = (0.2, 2.0)


@dataclass(frozen=True)
class CurveFit:
    """Best reliability curve found by the tuner."""
    rel_tau: float
    rel_curve_gamma: float
    loss: float
    n_trials: int

    def as_overrides(self) -> dict[str, float]:
        """Partial RatingParameters override with the fitted values."""
        return {"relTau": self.rel_tau, "relCurveGamma": self.rel_curve_gamma}


def reliability_curve_loss(
    rel_tau: float,
    rel_curve_gamma: float,
    targets: Optional[Mapping[int, float]] = None,
) -> float:
    """
    Mean squared error, in reliability points, between the curve and targets.

    Args:
        rel_tau: Curve time constant
        rel_curve_gamma: Curve shape exponent
        targets: {matches played: target reliability}. Defaults to
            RELIABILITY_TARGETS.
    """
    if targets is None:
        targets = RELIABILITY_TARGETS
    if not targets:
        raise ValueError("At least one reliability target is required")

    errors = [
        (reliability_from_matches(n, rel_tau, rel_curve_gamma) - target) ** 2
        for n, target in targets.items()
    ]
    return sum(errors) / len(errors)


def fit_reliability_curve(
    targets: Optional[Mapping[int, float]] = None,
    n_trials: int = 300,
    seed: int = 42,
) -> CurveFit:
    """
    Search relTau / relCurveGamma minimizing reliability_curve_loss().

    The TPE sampler is seeded so repeated runs give the same fit.

    Args:
        targets: {matches played: target reliability}
        n_trials: Number of Optuna trials
        seed: Sampler seed

    Returns:
        CurveFit with the best pair found and its loss
    """
    targets = dict(RELIABILITY_TARGETS if targets is None else targets)
    if not targets:
        raise ValueError("At least one reliability target is required")
    for n, target in targets.items():
        if n <= 0 or not 0.0 < target < 100.0:
            raise ValueError(f"Invalid reliability target {n}: {target}")

    def objective(trial: optuna.Trial) -> float:
        tau = trial.suggest_float("rel_tau", *TAU_RANGE)
        gamma = trial.suggest_float("rel_curve_gamma", *GAMMA_RANGE)
        return reliability_curve_loss(tau, gamma, targets)

    optuna.logging.set_verbosity(optuna.logging.WARNING)
    sampler = optuna.samplers.TPESampler(seed=seed)
    study = optuna.create_study(direction="minimize", sampler=sampler)
    study.optimize(objective, n_trials=n_trials)

    best = study.best_trial
    return CurveFit(
        rel_tau=best.params["rel_tau"],
        rel_curve_gamma=best.params["rel_curve_gamma"],
        loss=best.value,
        n_trials=n_trials,
    )
