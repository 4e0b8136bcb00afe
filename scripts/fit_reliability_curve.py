#!/usr/bin/env python3
"""
Fit the reliability curve (relTau, relCurveGamma) to target reliabilities.

Usage:
    # Fit the default targets (24% @ 5, 55% @ 30, 85% @ 100 matches)
    python scripts/fit_reliability_curve.py

    # Custom targets, then store and activate a parameter set
    python scripts/fit_reliability_curve.py \
      --target 5:20 --target 30:50 --target 100:80 \
      --n-trials 500 --activate
"""

import argparse
import sys
from datetime import datetime, timezone
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pmr.db.session import get_session
from pmr.rating.constants import RELIABILITY_TARGETS
from pmr.rating.params_store import get_active_rating_params, persist_rating_params
from pmr.rating.reliability import reliability_from_matches
from pmr.rating.tuning import fit_reliability_curve, reliability_curve_loss


def parse_target(value: str) -> tuple[int, float]:
    """Parse MATCHES:RELIABILITY."""
    matches, sep, reliability = value.partition(":")
    if not sep:
        raise argparse.ArgumentTypeError(f"Invalid target '{value}'. Use MATCHES:RELIABILITY.")
    try:
        return int(matches), float(reliability)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid target '{value}'") from exc


def main() -> int:
    parser = argparse.ArgumentParser(description="Fit the reliability curve with Optuna")
    parser.add_argument("--target", type=parse_target, action="append", default=None,
                        help="MATCHES:RELIABILITY target (repeatable)")
    parser.add_argument("--n-trials", type=int, default=300, help="Number of Optuna trials")
    parser.add_argument("--seed", type=int, default=42, help="Random seed for Optuna sampler")
    parser.add_argument("--persist", action="store_true", help="Store the fitted parameter set")
    parser.add_argument("--activate", action="store_true", help="Store and activate the fitted parameter set")
    parser.add_argument("--name", default=None, help="Name of the stored parameter set")
    args = parser.parse_args()

    if args.n_trials < 1:
        print("ERROR: --n-trials must be >= 1")
        return 1

    targets = dict(args.target) if args.target else dict(RELIABILITY_TARGETS)

    try:
        fit = fit_reliability_curve(targets, n_trials=args.n_trials, seed=args.seed)
    except ValueError as exc:
        print(f"ERROR: {exc}")
        return 1

    print(f"Best after {fit.n_trials} trials: relTau={fit.rel_tau:.3f}, "
          f"relCurveGamma={fit.rel_curve_gamma:.4f} (MSE {fit.loss:.4f})")
    print()
    print(f"{'Matches':>8} {'Target':>8} {'Fitted':>8}")
    for n, target in sorted(targets.items()):
        fitted = reliability_from_matches(n, fit.rel_tau, fit.rel_curve_gamma)
        print(f"{n:>8} {target:>8.1f} {fitted:>8.1f}")

    if not (args.persist or args.activate):
        return 0

    name = args.name or f"reliability-fit-{datetime.now(timezone.utc).strftime('%Y%m%d-%H%M%S')}"
    with get_session() as session:
        current, version = get_active_rating_params(session)
        baseline = reliability_curve_loss(current.rel_tau, current.rel_curve_gamma, targets)
        print()
        print(f"Current params ({version}): MSE {baseline:.4f}")

        record = persist_rating_params(
            session=session,
            name=name,
            params=current.with_overrides(fit.as_overrides()),
            source="optuna",
            activate=args.activate,
        )
        state = "Activated" if args.activate else "Stored"
        print(f"{state} rating params set: {record.name}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
