"""
PMR rating system constants.

K: Base learning rate (how far a team's PMR moves after one match)
  - Higher K = bigger rating swings
  - Lower K = more stable ratings

eloScale: Logistic steepness (how a PMR gap translates to win probability)
  - Lower scale = smaller gaps needed for a high win probability
  - A 1.25 PMR gap gives the stronger team ~91%

The margin and upset terms scale K up or down per match, and reliability
scales it per player (new players move faster than established ones).
"""

# Format: {wire name: default value}. Wire names are the keys used by the
# admin console and by persisted parameter sets.
DEFAULT_PARAMS = {
    # --- Elo + margin + upset ---
    "K": 0.25,
    "eloScale": 1.25,
    "marginMin": 0.25,
    "marginGamma": 1.3,
    "upsetBeta": 0.8,
    "upsetGamma": 1.2,

    # --- PMR bounds ---
    "pmrMin": 0.1,
    "pmrMax": 8.9,

    # --- Reliability -> volatility multiplier, V(0) = Vmax, V(100) = 1 ---
    "Vmax": 3.0,
    "vGamma": 1.2,

    # --- Reliability progression curve: R(n) = 100 * (1 - exp(-n / tau)) ^ gamma ---
    # Targets ~24% after 5 matches, ~55% after 30, ~85% after 100
    "relTau": 77.0,
    "relCurveGamma": 0.52,

    # --- Reliability bounds ---
    "relMin": 0.0,
    "relMax": 100.0,
}

# Wire name -> RatingParameters field name
PARAM_ALIASES = {
    "K": "K",
    "eloScale": "elo_scale",
    "marginMin": "margin_min",
    "marginGamma": "margin_gamma",
    "upsetBeta": "upset_beta",
    "upsetGamma": "upset_gamma",
    "pmrMin": "pmr_min",
    "pmrMax": "pmr_max",
    "Vmax": "v_max",
    "vGamma": "v_gamma",
    "relTau": "rel_tau",
    "relCurveGamma": "rel_curve_gamma",
    "relMin": "rel_min",
    "relMax": "rel_max",
}

# Reliability is always expressed on a 0-100 scale by the curve itself;
# relMin/relMax only narrow the stored range.
RELIABILITY_SCALE = 100.0

# Reliability progression targets the default curve was tuned against.
# Format: {rated matches played: reliability}
RELIABILITY_TARGETS = {
    5: 24.0,
    30: 55.0,
    100: 85.0,
}

# Team labels used by the set resolver
TEAM_1 = 1
TEAM_2 = 2
