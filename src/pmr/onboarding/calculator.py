"""
Starting PMR estimate from the onboarding questionnaire.

A new player answers five questions. Each answer is turned into soft
evidence about their level: a center (mu), a tolerance (tau), a relative
weight, and optionally hard bounds that rule levels out entirely.

Every candidate level 0.1..8.9 (step 0.1) is scored in log space:

    log_score(level) = sum(weight * -(level - mu)^2 / (2 * tau^2))

or -inf if any hard bound excludes it. Working in log space avoids the
underflow a product of many small likelihoods would hit, and lets the
winner land between the mu values (e.g. 4.3).

Ties are broken by distance to the average mu, then distance to the
default level 4.0, then the lower level.
"""

import math
from dataclasses import dataclass
from typing import Optional

# Levels as integers 1..89 to avoid float drift (PMR 0.1 .. 8.9)
LEVELS_INT = range(1, 90)

# Fallback level when nothing discriminates: 4.0
DEFAULT_LEVEL_INT = 40

MIN_TAU = 1e-6


@dataclass(frozen=True)
class Evidence:
    """
    Soft evidence about a player's level from one answer.

    Attributes:
        mu: Level the answer points to
        tau: Tolerance (sigma-like); higher is more permissive
        weight: Relative importance (1.0 = baseline)
        hard_min: Levels below this are impossible
        hard_max: Levels above this are impossible
    """
    mu: float
    tau: float
    weight: float
    hard_min: Optional[float] = None
    hard_max: Optional[float] = None

    def forbids(self, level: float) -> bool:
        if self.hard_min is not None and level < self.hard_min:
            return True
        if self.hard_max is not None and level > self.hard_max:
            return True
        return False


# Q1: self-assessed level. Permissive tau to absorb self-assessment bias.
Q1_LEVEL = {
    "debutant": 1,
    "debutant-avance": 2,
    "loisir-regulier": 3,
    "intermediaire": 4,
    "confirme": 5,
    "avance": 6,
    "expert": 7,
    "elite": 8,
}

# Q2: years of racket sports. Acts more as an upper bound than a booster,
# so long experience alone doesn't inflate a low level.
Q2_EVIDENCE = {
    "moins-1an": Evidence(mu=1.5, tau=2.0, weight=0.7, hard_max=4.0),
    "1-3ans": Evidence(mu=2.8, tau=1.5, weight=0.7, hard_max=5.5),
    "3-6ans": Evidence(mu=3.5, tau=1.2, weight=0.7, hard_max=6.5),
    "6-10ans": Evidence(mu=3.8, tau=1.3, weight=0.5),
    "plus-10ans": Evidence(mu=4.0, tau=1.5, weight=0.4),
}

# Q3: competition level. Soft only; players mix up tournament categories.
Q3_EVIDENCE = {
    "loisir": Evidence(mu=2.0, tau=3.0, weight=0.2),
    "debut-competition": Evidence(mu=4.0, tau=1.2, weight=0.8),
    "competiteur-regulier": Evidence(mu=5.5, tau=1.0, weight=0.9),
    "competiteur-avance": Evidence(mu=7.5, tau=0.9, weight=0.9),
}

# Q4: volley quality (1-5)
Q4_EVIDENCE = {
    "1": Evidence(mu=1.1, tau=1.3, weight=0.8, hard_max=3.0),
    "2": Evidence(mu=2.5, tau=1.3, weight=0.8, hard_max=4.0),
    "3": Evidence(mu=3.8, tau=1.4, weight=0.9, hard_max=5.0),
    "4": Evidence(mu=5.0, tau=1.7, weight=1.0),
    "5": Evidence(mu=6.0, tau=1.8, weight=1.0),
}

# Q5: wall play / tactical reading (1-5)
Q5_EVIDENCE = {
    "1": Evidence(mu=1.0, tau=1.3, weight=0.8, hard_max=3.0),
    "2": Evidence(mu=2.5, tau=1.3, weight=0.8, hard_max=4.0),
    "3": Evidence(mu=3.8, tau=1.4, weight=0.9, hard_max=5.0),
    "4": Evidence(mu=5.0, tau=1.7, weight=1.0),
    "5": Evidence(mu=6.0, tau=1.8, weight=1.0),
}


@dataclass(frozen=True)
class QuestionDebugScore:
    """How one answer scored at the winning level."""
    question_id: str
    answer: str
    evidence: Evidence
    # Unweighted score at the winning level, in (0, 1]; 0 when forbidden
    score_at_winner_base: float
    # score_at_winner_base ** weight
    score_at_winner_weighted: float


@dataclass(frozen=True)
class CandidateLevel:
    """One candidate level's score."""
    level: float
    # exp(log_score - best_log_score), in [0, 1]
    score: float
    log_score: float


@dataclass(frozen=True)
class OnboardingResult:
    """Starting PMR and how it was reached."""
    pmr: float
    debug_scores: list[QuestionDebugScore]
    candidates: list[CandidateLevel]


def _lookup(table: dict, question_id: str, answer: str):
    try:
        return table[answer]
    except KeyError:
        valid = ", ".join(table)
        raise ValueError(f"Invalid answer for {question_id}: {answer!r} (expected one of: {valid})") from None


def evidence_for_level_answer(answer: str) -> Evidence:
    """Q1 evidence: self-assessed level 1-8."""
    level = _lookup(Q1_LEVEL, "Q1", answer)
    return Evidence(mu=max(1, min(8, level)), tau=1.2, weight=2.0)


def log_score_gaussian(level: float, mu: float, tau: float) -> float:
    """
    Gaussian-like log score: -(d^2) / (2 * sigma^2).

    0 at level == mu, increasingly negative further away.
    """
    sigma = max(tau, MIN_TAU)
    d = level - mu
    return -(d * d) / (2 * sigma * sigma)


def pick_level(evidences: list[Evidence]) -> tuple[int, float, list[tuple[int, float]]]:
    """
    Find the level with the highest combined log score.

    Returns:
        Tuple of (winning level as int 1..89, its log score,
        [(level_int, log_score) for every candidate])
    """
    if evidences:
        avg_mu = sum(e.mu for e in evidences) / len(evidences)
    else:
        avg_mu = DEFAULT_LEVEL_INT / 10
    target_int = max(1, min(89, math.floor(avg_mu * 10 + 0.5)))

    best_int = DEFAULT_LEVEL_INT
    best_log = -math.inf
    raw = []

    for level_int in LEVELS_INT:
        level = level_int / 10
        combined = 0.0
        for e in evidences:
            if e.forbids(level):
                combined = -math.inf
                break
            combined += e.weight * log_score_gaussian(level, e.mu, e.tau)

        raw.append((level_int, combined))

        if combined > best_log:
            best_log = combined
            best_int = level_int
        elif combined == best_log:
            # Tie-break: closest to the average mu, then closest to default, then lower
            current = (abs(level_int - target_int), abs(level_int - DEFAULT_LEVEL_INT), level_int)
            incumbent = (abs(best_int - target_int), abs(best_int - DEFAULT_LEVEL_INT), best_int)
            if current < incumbent:
                best_int = level_int

    return best_int, best_log, raw


def compute_onboarding_pmr(q1: str, q2: str, q3: str, q4: str, q5: str) -> OnboardingResult:
    """
    Estimate a new player's starting PMR from their questionnaire answers.

    Args:
        q1: Self-assessed level ("debutant" .. "elite")
        q2: Years of racket sports ("moins-1an" .. "plus-10ans")
        q3: Competition level ("loisir" .. "competiteur-avance")
        q4: Volley quality ("1" .. "5")
        q5: Wall play quality ("1" .. "5")

    Returns:
        OnboardingResult with the PMR, per-question debug and all candidates

    Raises:
        ValueError: If an answer is not one of the known options

    Example:
        result = compute_onboarding_pmr("intermediaire", "3-6ans", "debut-competition", "3", "3")
        print(result.pmr)  # 3.9
    """
    answers = [
        ("Q1", q1, evidence_for_level_answer(q1)),
        ("Q2", q2, _lookup(Q2_EVIDENCE, "Q2", q2)),
        ("Q3", q3, _lookup(Q3_EVIDENCE, "Q3", q3)),
        ("Q4", q4, _lookup(Q4_EVIDENCE, "Q4", q4)),
        ("Q5", q5, _lookup(Q5_EVIDENCE, "Q5", q5)),
    ]

    best_int, best_log, raw = pick_level([e for _, _, e in answers])
    winner = best_int / 10

    debug_scores = []
    for question_id, answer, e in answers:
        if e.forbids(winner):
            base = weighted = 0.0
        else:
            log_base = log_score_gaussian(winner, e.mu, e.tau)
            base = math.exp(log_base)
            weighted = math.exp(e.weight * log_base)
        debug_scores.append(
            QuestionDebugScore(
                question_id=question_id,
                answer=answer,
                evidence=e,
                score_at_winner_base=base,
                score_at_winner_weighted=weighted,
            )
        )

    candidates = []
    for level_int, log_score in raw:
        if log_score == -math.inf or best_log == -math.inf:
            score = 0.0
        else:
            score = math.exp(log_score - best_log)
        candidates.append(CandidateLevel(level=level_int / 10, score=score, log_score=log_score))

    return OnboardingResult(pmr=winner, debug_scores=debug_scores, candidates=candidates)
