"""Bergen Social Media Addiction Scale (BSMAS) questionnaire.

Six statements, each rated on a 1-5 Likert scale (Very rarely ... Very
often).  The total (6-30) is mapped onto three risk levels which the
dashboard uses to frame the hourly budget.
"""

from __future__ import annotations

from beo.models import RiskLevel

BSMAS_SCALE = {
    1: "Very rarely",
    2: "Rarely",
    3: "Sometimes",
    4: "Often",
    5: "Very often",
}
BSMAS_SCALE_LABELS = [f"{k} - {v}" for k, v in BSMAS_SCALE.items()]

BSMAS_QUESTIONS: list[str] = [
    "You spend a lot of time thinking about social media or planning how to use it",
    "You feel an urge to use social media more and more",
    "You use social media in order to forget about personal problems",
    "You have tried to cut down on the use of social media without success",
    "You become restless or troubled if you are prohibited from using social media",
    "You use social media so much that it has had a negative impact on your job/studies",
]

LIKERT_MIN = 1
LIKERT_MAX = 5

# Upper bounds (inclusive) of the Low and Moderate bands.
RISK_LOW_MAX = 12
RISK_MODERATE_MAX = 18

_RISK_DESCRIPTIONS: dict[RiskLevel, str] = {
    RiskLevel.LOW: (
        "Your social media use appears healthy. beo will help you maintain balance."
    ),
    RiskLevel.MODERATE: (
        "You show some signs of problematic use. beo can help you build better habits."
    ),
    RiskLevel.HIGH: (
        "Your usage patterns suggest you could benefit significantly from mindful breaks."
    ),
}


def bsmas_min_score() -> int:
    return len(BSMAS_QUESTIONS) * LIKERT_MIN


def bsmas_max_score() -> int:
    return len(BSMAS_QUESTIONS) * LIKERT_MAX


def score_bsmas(answers: list[int]) -> int:
    """Sum a completed questionnaire.

    Raises ValueError unless there is exactly one answer per question and
    every answer is on the Likert scale.
    """
    if len(answers) != len(BSMAS_QUESTIONS):
        raise ValueError(
            f"Expected {len(BSMAS_QUESTIONS)} answers, got {len(answers)}"
        )
    for a in answers:
        if not LIKERT_MIN <= a <= LIKERT_MAX:
            raise ValueError(f"Answer {a} is outside {LIKERT_MIN}-{LIKERT_MAX}")
    return sum(answers)


def get_risk_level(score: int) -> RiskLevel:
    """Classify a BSMAS total. Out-of-range scores are clamped first."""
    score = max(bsmas_min_score(), min(bsmas_max_score(), score))
    if score <= RISK_LOW_MAX:
        return RiskLevel.LOW
    if score <= RISK_MODERATE_MAX:
        return RiskLevel.MODERATE
    return RiskLevel.HIGH


def describe_risk(level: RiskLevel) -> str:
    return _RISK_DESCRIPTIONS[level]


BSMAS_INSTRUCTIONS = (
    "This short questionnaire is the Bergen Social Media Addiction Scale "
    "(BSMAS).\n\n"
    "For each statement, think about the past year and rate how often it "
    "applies to you:\n"
    "  1 = Very rarely   2 = Rarely   3 = Sometimes   4 = Often   5 = Very often\n\n"
    "There are 6 questions. Your answers are stored only on this device."
)
