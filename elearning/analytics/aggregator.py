"""
Analytics Aggregator

Builds the analytics report of a quiz from its full participation history.
Every facet is computed independently from the same records:

- participation_stats: counts, score extremes and averages, completion rate
- score_distribution: five percentage buckets of the maximum score
- time_analysis: average / median / fastest / slowest time and efficiency
- question_analytics: per-question success rates and difficulty levels
- user_performance_matrix: one row per participation, one cell per question
- difficulty_analysis: difficulty distribution and hardest / easiest questions
- progress_tracking: per-day statistics, trends and per-user details

All functions are pure and never raise for empty input; they return
zeroed or empty structures instead. The report is a plain dict so it can
be cached and serialised as is.

Author: DSP Development Team
Version: 1.0.0
"""

from collections import OrderedDict
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..participation.models import ParticipationStatus
from ..quizzes.models import QuestionType
from .records import ParticipationRecord, QuizRecord

SCORE_BUCKETS = (
    (20, "0-20%"),
    (40, "21-40%"),
    (60, "41-60%"),
    (80, "61-80%"),
)
TOP_SCORE_BUCKET = "81-100%"

DIFFICULTY_LEVELS = ("easy", "medium", "hard", "very_hard")

TREND_WINDOW_DAYS = 7
HIGHLIGHTED_QUESTIONS = 3


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0


def score_percentage(total_score: int, max_score: int) -> float:
    return total_score / max_score * 100 if max_score else 0


def question_difficulty(correct_percentage: float) -> str:
    if correct_percentage >= 80:
        return "easy"
    if correct_percentage >= 60:
        return "medium"
    if correct_percentage >= 40:
        return "hard"
    return "very_hard"


def _completion_rate(participations: Sequence[ParticipationRecord]) -> float:
    if not participations:
        return 0
    completed = sum(1 for p in participations if p.status == ParticipationStatus.COMPLETED)
    return completed / len(participations) * 100


# --- Facets ---


def participation_stats(quiz: QuizRecord, participations: Sequence[ParticipationRecord]) -> Dict[str, Any]:
    scores = [p.total_score for p in participations]
    times = [p.time_taken for p in participations if p.time_taken is not None]
    return {
        "total_participations": len(participations),
        "unique_users": len({p.user_id for p in participations}),
        "average_score": round(_mean(scores), 2),
        "highest_score": max(scores) if scores else 0,
        "lowest_score": min(scores) if scores else 0,
        "average_time": round(_mean(times), 2),
        "completion_rate": round(_completion_rate(participations), 2),
        "total_possible_score": quiz.total_score,
    }


def score_distribution(quiz: QuizRecord, participations: Iterable[ParticipationRecord]) -> Dict[str, int]:
    buckets = OrderedDict((label, 0) for _, label in SCORE_BUCKETS)
    buckets[TOP_SCORE_BUCKET] = 0
    for participation in participations:
        percentage = score_percentage(participation.total_score, quiz.total_score)
        for threshold, label in SCORE_BUCKETS:
            if percentage <= threshold:
                buckets[label] += 1
                break
        else:
            buckets[TOP_SCORE_BUCKET] += 1
    return dict(buckets)


def time_analysis(quiz: QuizRecord, participations: Iterable[ParticipationRecord]) -> Dict[str, Any]:
    times = sorted(p.time_taken for p in participations if p.time_taken is not None)
    if not times:
        return {
            "average_time": 0,
            "median_time": 0,
            "fastest_time": 0,
            "slowest_time": 0,
            "time_efficiency": 0,
            "allocated_time": quiz.total_time,
        }

    count = len(times)
    middle = count // 2
    median = (times[middle - 1] + times[middle]) / 2 if count % 2 == 0 else times[middle]
    average = _mean(times)
    efficiency = (quiz.total_time - average) / quiz.total_time * 100 if quiz.total_time > 0 else 0

    return {
        "average_time": round(average, 2),
        "median_time": round(median, 2),
        "fastest_time": times[0],
        "slowest_time": times[-1],
        "time_efficiency": round(efficiency, 2),
        "allocated_time": quiz.total_time,
    }


def question_analytics(quiz: QuizRecord, participations: Sequence[ParticipationRecord]) -> List[Dict[str, Any]]:
    answers_by_question: Dict[int, list] = {q.id: [] for q in quiz.questions}
    for participation in participations:
        for answer in participation.answers:
            if answer.question_id in answers_by_question:
                answers_by_question[answer.question_id].append(answer)

    analytics = []
    for question in quiz.questions:
        answers = answers_by_question[question.id]
        total = len(answers)
        correct = sum(1 for a in answers if a.is_correct)
        correct_percentage = correct / total * 100 if total else 0

        distribution: Dict[str, int] = {}
        if question.question_type == QuestionType.MULTIPLE_CHOICE:
            for answer in answers:
                distribution[answer.answer] = distribution.get(answer.answer, 0) + 1

        analytics.append(
            {
                "question_id": question.id,
                "question": question.question,
                "question_type": question.question_type,
                "total_answers": total,
                "correct_answers": correct,
                "incorrect_answers": total - correct,
                "correct_percentage": round(correct_percentage, 2),
                "difficulty_level": question_difficulty(correct_percentage),
                "answer_distribution": distribution,
                "score_weight": question.score,
            }
        )
    return analytics


def user_performance_matrix(quiz: QuizRecord, participations: Iterable[ParticipationRecord]) -> Dict[str, Any]:
    rows = []
    for participation in participations:
        answers = {a.question_id: a for a in participation.answers}
        cells: List[Optional[Dict[str, Any]]] = []
        for question in quiz.questions:
            answer = answers.get(question.id)
            if answer is None:
                cells.append(None)
                continue
            cells.append(
                {
                    "question_id": question.id,
                    "is_correct": answer.is_correct,
                    "answer": answer.answer,
                    "score": question.score if answer.is_correct else 0,
                }
            )
        rows.append(
            {
                "user_id": participation.user_id,
                "user_name": participation.user_name,
                "total_score": participation.total_score,
                "percentage": round(score_percentage(participation.total_score, quiz.total_score), 1),
                "time_taken": participation.time_taken,
                "completed_at": participation.completed_at.isoformat() if participation.completed_at else None,
                "questions": cells,
            }
        )

    # sorted() is stable: equal scores keep submission order
    rows = sorted(rows, key=lambda row: row["total_score"], reverse=True)
    return {
        "matrix": rows,
        "questions": [{"id": q.id, "question": q.question, "score": q.score} for q in quiz.questions],
    }


def difficulty_analysis(questions: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    """Summarise the per-question analytics produced by question_analytics()."""
    distribution = {level: 0 for level in DIFFICULTY_LEVELS}
    for question in questions:
        distribution[question["difficulty_level"]] += 1

    by_rate = sorted(questions, key=lambda q: q["correct_percentage"])
    by_rate_desc = sorted(questions, key=lambda q: q["correct_percentage"], reverse=True)
    return {
        "distribution": distribution,
        "average_success_rate": round(_mean([q["correct_percentage"] for q in questions]), 2),
        "most_difficult_questions": by_rate[:HIGHLIGHTED_QUESTIONS],
        "easiest_questions": by_rate_desc[:HIGHLIGHTED_QUESTIONS],
    }


def calculate_trends(daily_stats: Sequence[Dict[str, Any]]) -> Dict[str, float]:
    """
    Compare the mean of the last seven daily buckets with the mean of the
    seven buckets before them. Fewer than two days yield zero trends.
    """
    trends = {"attempts_trend": 0, "score_trend": 0, "completion_trend": 0}
    count = len(daily_stats)
    if count < 2:
        return trends

    recent = daily_stats[-TREND_WINDOW_DAYS:]
    previous = daily_stats[max(0, count - 2 * TREND_WINDOW_DAYS):max(0, count - TREND_WINDOW_DAYS)]

    for trend_key, stat_key in (
        ("attempts_trend", "attempts"),
        ("score_trend", "average_score"),
        ("completion_trend", "completion_rate"),
    ):
        previous_mean = _mean([day[stat_key] for day in previous])
        if previous_mean > 0:
            recent_mean = _mean([day[stat_key] for day in recent])
            trends[trend_key] = round((recent_mean - previous_mean) / previous_mean * 100, 2)
    return trends


def progress_tracking(participations: Iterable[ParticipationRecord]) -> Dict[str, Any]:
    by_day: Dict[Any, List[ParticipationRecord]] = {}
    users: "OrderedDict[int, Dict[str, Any]]" = OrderedDict()

    for participation in sorted(participations, key=lambda p: p.completed_at):
        by_day.setdefault(participation.completed_at.date(), []).append(participation)

        details = users.get(participation.user_id)
        if details is None:
            details = users[participation.user_id] = {
                "user_id": participation.user_id,
                "user_name": participation.user_name,
                "attempts": 0,
                "best_score": participation.total_score,
                "scores": [],
                "last_completed_at": None,
            }
        details["attempts"] += 1
        details["best_score"] = max(details["best_score"], participation.total_score)
        details["scores"].append(participation.total_score)
        details["last_completed_at"] = participation.completed_at.isoformat()

    daily_stats = []
    for day in sorted(by_day):
        day_participations = by_day[day]
        daily_stats.append(
            {
                "date": day.isoformat(),
                "attempts": len(day_participations),
                "unique_users": len({p.user_id for p in day_participations}),
                "average_score": round(_mean([p.total_score for p in day_participations]), 2),
                "completion_rate": round(_completion_rate(day_participations), 2),
            }
        )

    user_details = []
    for details in users.values():
        scores = details.pop("scores")
        details["average_score"] = round(_mean(scores), 2)
        user_details.append(details)

    return {
        "daily_stats": daily_stats,
        "trends": calculate_trends(daily_stats),
        "user_details": user_details,
    }


def build_report(quiz: QuizRecord, participations: Sequence[ParticipationRecord]) -> Dict[str, Any]:
    """
    Build the complete analytics report of a quiz.

    Args:
        quiz: Quiz record including its questions in id order
        participations: All participations of the quiz with answers

    Returns:
        Dict with the seven report facets
    """
    participations = list(participations)
    questions = question_analytics(quiz, participations)
    return {
        "participation_stats": participation_stats(quiz, participations),
        "score_distribution": score_distribution(quiz, participations),
        "time_analysis": time_analysis(quiz, participations),
        "question_analytics": questions,
        "user_performance_matrix": user_performance_matrix(quiz, participations),
        "difficulty_analysis": difficulty_analysis(questions),
        "progress_tracking": progress_tracking(participations),
    }
