"""
Expected outcome, margin and upset factors for doubles matches.

Each team is rated by the average PMR of its two players. The base rating
change for team 1 is:

    delta_base = K * (A1 - E1) * F_margin * F_upset

Where:
  E1       = 1 / (1 + 10^(-(team1_pmr - team2_pmr) / eloScale))
  A1       = 1 if team 1 won, else 0
  F_margin = marginMin + (1 - marginMin) * m^marginGamma
             m = |games1 - games2| / max(1, games1 + games2)
  F_upset  = 1 + upsetBeta * surprise^upsetGamma
             surprise = pre-match probability that the winner would lose

Team 2's base change is the exact negative of team 1's. Per-player
volatility (see reliability.py) is applied afterwards, so individual
player changes are not zero-sum.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class BaseDelta:
    """
    Team-level rating change before per-player volatility.

    Attributes:
        expected_team1: Pre-match probability that team 1 wins (E1)
        margin: Normalized game margin m in [0, 1]
        margin_factor: F_margin
        upset_factor: F_upset
        team1: Base change for both team 1 players
        team2: Base change for both team 2 players (always -team1)
    """
    expected_team1: float
    margin: float
    margin_factor: float
    upset_factor: float
    team1: float
    team2: float


def team_rating(pmr_a: float, pmr_b: float) -> float:
    """Team PMR as the plain average of its two players."""
    return (pmr_a + pmr_b) / 2


def expected_win_probability(team1_pmr: float, team2_pmr: float, elo_scale: float) -> float:
    """
    Probability of team 1 winning, from team PMRs alone.

    Example:
        expected_win_probability(5.0, 5.0, 1.25)   # -> 0.5
        expected_win_probability(6.0, 5.0, 1.25)   # -> ~0.86
    """
    try:
        return 1.0 / (1.0 + 10.0 ** (-(team1_pmr - team2_pmr) / elo_scale))
    except OverflowError:
        return 0.0 if team2_pmr > team1_pmr else 1.0


def normalized_margin(games_team1: int, games_team2: int) -> float:
    """Game differential over total games, in [0, 1]. No games -> 0."""
    total = max(1, games_team1 + games_team2)
    return abs(games_team1 - games_team2) / total


def margin_factor(margin: float, margin_min: float, margin_gamma: float) -> float:
    """
    Scale a rating change by how lopsided the score was.

    A 6-0 6-0 (margin 1.0) keeps the full change; the closest possible
    scores fall toward margin_min.
    """
    return margin_min + (1.0 - margin_min) * margin ** margin_gamma


def upset_factor(expected_team1: float, team1_won: bool, upset_beta: float, upset_gamma: float) -> float:
    """
    Amplify a rating change by how surprising the result was.

    Always >= 1. An expected result (favorite wins comfortably on paper)
    stays close to 1, an underdog win approaches 1 + upset_beta.
    """
    surprise = (1.0 - expected_team1) if team1_won else expected_team1
    return 1.0 + upset_beta * surprise ** upset_gamma


def calculate_base_delta(
    team1_pmr: float,
    team2_pmr: float,
    team1_won: bool,
    games_team1: int,
    games_team2: int,
    K: float,
    elo_scale: float,
    margin_min: float,
    margin_gamma: float,
    upset_beta: float,
    upset_gamma: float,
) -> BaseDelta:
    """
    Compute both teams' base rating change for a decided match.

    Args:
        team1_pmr: Average PMR of team 1 before the match
        team2_pmr: Average PMR of team 2 before the match
        team1_won: Whether team 1 won the match
        games_team1: Games won by team 1 over played sets
        games_team2: Games won by team 2 over played sets
        K, elo_scale, margin_min, margin_gamma, upset_beta, upset_gamma:
            See RatingParameters

    Returns:
        BaseDelta with the intermediate factors and both team changes
    """
    expected_team1 = expected_win_probability(team1_pmr, team2_pmr, elo_scale)
    actual_team1 = 1.0 if team1_won else 0.0

    margin = normalized_margin(games_team1, games_team2)
    f_margin = margin_factor(margin, margin_min, margin_gamma)
    f_upset = upset_factor(expected_team1, team1_won, upset_beta, upset_gamma)

    delta_team1 = K * (actual_team1 - expected_team1) * f_margin * f_upset

    return BaseDelta(
        expected_team1=expected_team1,
        margin=margin,
        margin_factor=f_margin,
        upset_factor=f_upset,
        team1=delta_team1,
        team2=-delta_team1,
    )
