"""
XP Calculator

Computes the experience points awarded for a completed quiz attempt.

Formula:
    percentage = correct / total * 100
    raw = (50 + floor(score * 2)) * performance * difficulty + time_bonus
    xp  = max(10, floor(raw))

Multipliers are applied with Decimal arithmetic so that results like
70 * 1.1 floor to the exact integer instead of drifting below it.

Author: DSP Development Team
Version: 1.0.0
"""

import math
from dataclasses import dataclass, field
from decimal import ROUND_FLOOR, Decimal
from typing import Any, Dict

from .exceptions import XpCalculationError

BASE_XP = 50
SCORE_XP_PER_POINT = 2
MINIMUM_XP = 10
TIME_BONUS_XP = 25
TIME_BONUS_MIN_PERCENTAGE = 60

# (threshold percentage, multiplier, note), checked top down
PERFORMANCE_TIERS = (
    (90, Decimal("1.5"), "Excellent performance bonus (90%+)"),
    (80, Decimal("1.3"), "Good performance bonus (80%+)"),
    (70, Decimal("1.1"), "Decent performance bonus (70%+)"),
)

# (minimum quiz total score, multiplier, note)
DIFFICULTY_TIERS = (
    (100, Decimal("1.4"), "High difficulty bonus"),
    (50, Decimal("1.2"), "Medium difficulty bonus"),
)


@dataclass
class XpResult:
    """XP awarded for an attempt together with the factors that produced it."""

    xp: int
    breakdown: Dict[str, Any] = field(default_factory=dict)


def _multiplier(value: float, tiers):
    for threshold, multiplier, note in tiers:
        if value >= threshold:
            return multiplier, note
    return Decimal("1"), None


def xp_breakdown(
    quiz_total_score: int,
    quiz_total_time: int,
    total_score: int,
    correct_count: int,
    total_questions: int,
) -> Dict[str, Any]:
    """
    Side-effect free XP breakdown, also used for previews.

    Args:
        quiz_total_score: Maximum attainable score of the quiz
        quiz_total_time: Total time limit of the quiz in seconds (0 = none)
        total_score: Points earned in the attempt
        correct_count: Number of correctly answered questions
        total_questions: Number of answered questions

    Raises:
        XpCalculationError: if total_questions is zero
    """
    if total_questions <= 0:
        raise XpCalculationError(details={"total_questions": total_questions})

    percentage = correct_count / total_questions * 100
    score_xp = math.floor(total_score * SCORE_XP_PER_POINT)

    performance, performance_note = _multiplier(percentage, PERFORMANCE_TIERS)
    difficulty, difficulty_note = _multiplier(quiz_total_score or 0, DIFFICULTY_TIERS)

    time_bonus = 0
    if quiz_total_time and quiz_total_time > 0 and percentage >= TIME_BONUS_MIN_PERCENTAGE:
        time_bonus = TIME_BONUS_XP

    raw = Decimal(BASE_XP + score_xp) * performance * difficulty + time_bonus
    total_xp = max(MINIMUM_XP, int(raw.to_integral_value(rounding=ROUND_FLOOR)))

    breakdown = {
        "base_xp": BASE_XP,
        "score_xp": score_xp,
        "performance_multiplier": float(performance),
        "difficulty_multiplier": float(difficulty),
        "time_bonus": time_bonus,
        "total_xp": total_xp,
        "max_possible_score": quiz_total_score or 0,
        "percentage": round(percentage, 1),
    }
    if performance_note:
        breakdown["performance_note"] = performance_note
    if difficulty_note:
        breakdown["difficulty_note"] = difficulty_note
    if time_bonus:
        breakdown["time_note"] = "Quick completion bonus"
    return breakdown


def calculate_xp(quiz, total_score: int, correct_count: int, total_questions: int) -> XpResult:
    """Calculate the XP for an attempt on ``quiz`` (anything with total_score / total_time)."""
    breakdown = xp_breakdown(
        quiz_total_score=quiz.total_score,
        quiz_total_time=quiz.total_time,
        total_score=total_score,
        correct_count=correct_count,
        total_questions=total_questions,
    )
    return XpResult(xp=breakdown["total_xp"], breakdown=breakdown)
