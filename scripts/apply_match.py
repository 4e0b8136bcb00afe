#!/usr/bin/env python3
"""
Apply a completed match to the stored player ratings.

Players not seen before are created at DEFAULT_PLAYER_PMR /
DEFAULT_PLAYER_RELIABILITY. A match ref can only be rated once.

Usage:
    python scripts/apply_match.py M-2026-0412 \
      --team1 alice bob --team2 carol dave --score "6-3 6-4"

    # Preview without committing
    python scripts/apply_match.py M-2026-0412 \
      --team1 alice bob --team2 carol dave --score "6-3 6-4" --dry-run
"""

import argparse
import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pmr.config import settings
from pmr.db.session import get_session
from pmr.rating.live import LiveRatingUpdater, MatchAlreadyRatedError
from pmr.score import ScoreParseError, parse_score

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


class _DryRun(Exception):
    pass


def main() -> int:
    parser = argparse.ArgumentParser(description="Apply a completed match to stored PMR ratings")
    parser.add_argument("match_ref", help="Platform match id")
    parser.add_argument("--team1", nargs=2, required=True, metavar="PLAYER_REF")
    parser.add_argument("--team2", nargs=2, required=True, metavar="PLAYER_REF")
    parser.add_argument("--score", required=True, help='Score from team 1\'s side, e.g. "6-3 4-6 7-5"')
    parser.add_argument("--dry-run", action="store_true", help="Compute and print, then roll back")
    args = parser.parse_args()

    try:
        score = parse_score(args.score)
    except ScoreParseError as exc:
        logger.error("%s", exc)
        return 1

    try:
        with get_session() as session:
            updater = LiveRatingUpdater.from_session(session)
            logger.info("Using rating parameters %s", updater.params_version)

            rated, adjustment = updater.apply_match(
                session, args.match_ref, args.team1, args.team2, score.to_set_scores()
            )
            for result in adjustment.results:
                logger.info(
                    "  %s: PMR %.3f -> %.3f (%+.3f), reliability %.2f -> %.2f",
                    result.player_id,
                    result.previous_pmr,
                    result.new_pmr,
                    result.delta,
                    result.previous_reliability,
                    result.new_reliability,
                )
            if args.dry_run:
                raise _DryRun()
            match_ref, applied = rated.match_ref, rated.applied
    except _DryRun:
        logger.info("Dry run: nothing committed")
        return 0
    except MatchAlreadyRatedError as exc:
        logger.error("%s", exc)
        return 2
    except ValueError as exc:
        logger.error("%s", exc)
        return 1

    logger.info("Match %s rated (applied=%s)", match_ref, applied)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
