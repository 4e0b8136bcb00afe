#!/usr/bin/env python3
"""
Preview a post-match PMR adjustment from the command line.

Nothing is read from or written to the database; each player's current
PMR and reliability are passed on the command line.

Usage:
    python scripts/simulate_match.py \
      --team1 p1:4.5:50 p2:5.0:50 \
      --team2 p3:4.8:50 p4:5.2:50 \
      --score "6-3 4-6 7-5"

    # Try a different learning rate and volatility ceiling
    python scripts/simulate_match.py \
      --team1 p1:5:50 p2:5:50 --team2 p3:5:50 p4:5:50 \
      --score "6-3 6-4" --param K=0.3 --param Vmax=2.5
"""

import argparse
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pmr.rating.adjustment import MatchInput, PlayerRatingSnapshot, adjust_match
from pmr.score import ScoreParseError, parse_score


def parse_player(value: str) -> PlayerRatingSnapshot:
    """Parse ID:PMR[:RELIABILITY]."""
    parts = value.split(":")
    if len(parts) not in (2, 3):
        raise argparse.ArgumentTypeError(f"Invalid player '{value}'. Use ID:PMR or ID:PMR:RELIABILITY.")
    try:
        pmr = float(parts[1])
        reliability = float(parts[2]) if len(parts) == 3 else 0.0
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid numbers in player '{value}'") from exc
    return PlayerRatingSnapshot(id=parts[0], pmr=pmr, reliability=reliability)


def parse_param(value: str) -> tuple[str, float]:
    """Parse KEY=VALUE."""
    key, sep, raw = value.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"Invalid parameter '{value}'. Use KEY=VALUE.")
    try:
        return key.strip(), float(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid value in parameter '{value}'") from exc


def main() -> int:
    parser = argparse.ArgumentParser(description="Simulate the PMR adjustment for one match")
    parser.add_argument("--team1", type=parse_player, nargs=2, required=True, metavar="ID:PMR:REL")
    parser.add_argument("--team2", type=parse_player, nargs=2, required=True, metavar="ID:PMR:REL")
    parser.add_argument("--score", required=True, help='Score from team 1\'s side, e.g. "6-3 4-6 7-5"')
    parser.add_argument(
        "--param",
        type=parse_param,
        action="append",
        default=[],
        help="Parameter override KEY=VALUE (repeatable), e.g. K=0.3 or relTau=60",
    )
    args = parser.parse_args()

    try:
        score = parse_score(args.score)
    except ScoreParseError as exc:
        print(f"ERROR: {exc}")
        return 1

    try:
        adjustment = adjust_match(
            MatchInput(team1=tuple(args.team1), team2=tuple(args.team2), sets=score.to_set_scores()),
            dict(args.param),
        )
    except ValueError as exc:
        print(f"ERROR: {exc}")
        return 1

    resolution = adjustment.resolution
    print(f"Score: {score.to_display_string()}")
    print(f"Games: {resolution.games_team1}-{resolution.games_team2}, sets: {resolution.sets_team1}-{resolution.sets_team2}")

    if not adjustment.applied:
        print("No winner could be determined; ratings unchanged.")
    else:
        base = adjustment.base
        print(f"Winner: team {resolution.winner}")
        print(f"E1={base.expected_team1:.4f}  m={base.margin:.4f}  "
              f"F_margin={base.margin_factor:.4f}  F_upset={base.upset_factor:.4f}")
        print(f"Base change: team 1 {base.team1:+.4f}, team 2 {base.team2:+.4f}")

    print()
    print(f"{'Player':<12} {'PMR':>6} {'New':>6} {'Delta':>8} {'Rel':>7} {'New':>7} {'V':>6}")
    print("-" * 58)
    volatility = adjustment.volatility or (None,) * len(adjustment.results)
    for result, v in zip(adjustment.results, volatility):
        v_text = f"{v:.3f}" if v is not None else "-"
        print(
            f"{result.player_id:<12} {result.previous_pmr:>6.2f} {result.new_pmr:>6.2f} {result.delta:>+8.4f} "
            f"{result.previous_reliability:>7.2f} {result.new_reliability:>7.2f} {v_text:>6}"
        )

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
