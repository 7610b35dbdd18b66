"""
Attempt Results

Detailed result of one participation (per-question outcome, grade,
performance level, per-type analysis and XP breakdown) and the paginated
result history of a learner.

Author: DSP Development Team
Version: 1.0.0
"""

import logging
from typing import Any, Dict, List, Optional

from django.core.paginator import Paginator
from django.db.models import Avg, Max, Sum

from ..analytics.masking import StableMaskingStrategy, is_unmasked_viewer
from ..quizzes.models import QuestionType
from ..users.models import get_display_name
from .answers import display_answer
from .models import Participation
from .xp import xp_breakdown

logger = logging.getLogger(__name__)

GRADE_THRESHOLDS = (
    (97, "A+"),
    (93, "A"),
    (90, "A-"),
    (87, "B+"),
    (83, "B"),
    (80, "B-"),
    (77, "C+"),
    (73, "C"),
    (70, "C-"),
    (67, "D+"),
    (65, "D"),
)

PERFORMANCE_LEVELS = (
    (90, "Excellent"),
    (80, "Good"),
    (70, "Satisfactory"),
    (60, "Needs Improvement"),
)

STRENGTH_THRESHOLD = 80
IMPROVEMENT_THRESHOLD = 60


def calculate_grade(percentage: float) -> str:
    for threshold, grade in GRADE_THRESHOLDS:
        if percentage >= threshold:
            return grade
    return "F"


def performance_level(percentage: float) -> str:
    for threshold, level in PERFORMANCE_LEVELS:
        if percentage >= threshold:
            return level
    return "Poor"


def quiz_masking_strategy(quiz_id) -> StableMaskingStrategy:
    """Stable labels numbered over every participant of the quiz."""
    return StableMaskingStrategy(Participation.objects.filter(quiz_id=quiz_id).values_list("user_id", flat=True))


def participant_name(participation: Participation, viewer, viewer_role: str) -> str:
    """
    Name of the participant as shown to ``viewer``: the real name for the
    participant themself and for admins, a stable "Student N" label
    (numbered over all participants of the quiz) for everyone else.
    """
    if viewer is not None and viewer.pk == participation.user_id:
        return get_display_name(participation.user)
    if is_unmasked_viewer(viewer_role):
        return get_display_name(participation.user)
    return quiz_masking_strategy(participation.quiz_id).label_for(participation.user_id)


def _correct_answer(question_type: str, correct: List[str]):
    if question_type == QuestionType.MULTIPLE_CHOICE:
        answer = correct[0] if correct else None
        return answer, answer or "No correct answer set"
    if question_type == QuestionType.CHECKBOX:
        return correct, ", ".join(correct) if correct else "No correct answers set"
    return correct, " / ".join(correct) if correct else "No correct answer set"


def build_attempt_result(participation: Participation, viewer=None, viewer_role: Optional[str] = None) -> Dict[str, Any]:
    """
    Detailed result of a participation.

    Args:
        participation: Participation to describe
        viewer: Requesting user (used for name masking)
        viewer_role: Role of the requesting user
    """
    quiz = participation.quiz
    questions = list(quiz.questions.prefetch_related("choices").order_by("id"))
    answers = {a.question_id: a for a in participation.answers.all()}

    results = {
        "participation_id": participation.id,
        "quiz_title": quiz.title,
        "quiz_description": quiz.description,
        "total_score": participation.total_score,
        "max_possible_score": quiz.total_score,
        "xp_earned": participation.xp_earned,
        "time_taken": participation.time_taken,
        "quiz_time_limit": quiz.total_time,
        "completed_at": participation.completed_at.isoformat(),
        "status": participation.status,
        "total_questions": len(questions),
        "correct_answers": 0,
        "incorrect_answers": 0,
        "unanswered_questions": 0,
        "participant_name": participant_name(participation, viewer, viewer_role),
        "percentage": participation.percentage,
    }

    question_results = []
    for question in questions:
        choices = list(question.choices.all())
        correct = [c.choice for c in choices if c.is_correct]
        correct_answer, correct_display = _correct_answer(question.question_type, correct)
        item = {
            "question_id": question.id,
            "question_text": question.question,
            "question_type": question.question_type,
            "question_score": question.score,
            "user_answer": None,
            "user_answer_display": "Not answered",
            "correct_answer": correct_answer,
            "correct_answer_display": correct_display,
            "is_correct": False,
            "points_earned": 0,
            "choices": [{"choice": c.choice, "is_correct": c.is_correct} for c in choices],
        }
        answer = answers.get(question.id)
        if answer is None:
            results["unanswered_questions"] += 1
        else:
            item["user_answer"] = answer.answer
            item["user_answer_display"] = display_answer(answer.answer)
            item["is_correct"] = answer.is_correct
            if answer.is_correct:
                item["points_earned"] = question.score
                results["correct_answers"] += 1
            else:
                results["incorrect_answers"] += 1
        question_results.append(item)

    performance = {
        "grade": calculate_grade(results["percentage"]),
        "performance_level": performance_level(results["percentage"]),
        "strengths": [],
        "areas_for_improvement": [],
    }
    type_analysis = {}
    for question_type, label in QuestionType.choices:
        typed = [q for q in question_results if q["question_type"] == question_type]
        if not typed:
            continue
        correct_count = sum(1 for q in typed if q["is_correct"])
        percentage = round(correct_count / len(typed) * 100, 1)
        type_analysis[question_type] = {
            "total": len(typed),
            "correct": correct_count,
            "percentage": percentage,
            "type_label": str(label),
        }
        if percentage >= STRENGTH_THRESHOLD:
            performance["strengths"].append(str(label))
        elif percentage < IMPROVEMENT_THRESHOLD:
            performance["areas_for_improvement"].append(str(label))

    breakdown = None
    if questions:
        breakdown = xp_breakdown(
            quiz_total_score=quiz.total_score,
            quiz_total_time=quiz.total_time,
            total_score=participation.total_score,
            correct_count=results["correct_answers"],
            total_questions=len(questions),
        )

    return {
        "results": results,
        "questions": question_results,
        "performance": performance,
        "type_analysis": type_analysis,
        "xp_breakdown": breakdown,
        "quiz": {
            "id": quiz.id,
            "title": quiz.title,
            "description": quiz.description,
            "total_time": quiz.total_time,
            "mode": quiz.mode,
        },
    }


def build_result_history(user, viewer, viewer_role: str, page: int = 1, per_page: int = 10) -> Dict[str, Any]:
    """
    Paginated participations of ``user``, newest first, with summary stats.

    Names follow participant_name: the learner reading their own history
    sees their real name, other non-admin viewers see the per-quiz label.
    """
    participations = (
        Participation.objects.filter(user=user)
        .select_related("quiz", "user")
        .order_by("-completed_at", "-id")
    )
    paginator = Paginator(participations, per_page)
    page_obj = paginator.get_page(page)

    items = []
    for participation in page_obj.object_list:
        items.append(
            {
                "id": participation.id,
                "quiz_id": participation.quiz_id,
                "quiz_title": participation.quiz.title,
                "participant_name": participant_name(participation, viewer, viewer_role),
                "total_score": participation.total_score,
                "max_possible_score": participation.quiz.total_score,
                "percentage": participation.percentage,
                "xp_earned": participation.xp_earned,
                "time_taken": participation.time_taken,
                "completed_at": participation.completed_at.isoformat(),
                "status": participation.status,
                "grade": calculate_grade(participation.percentage),
            }
        )

    totals = participations.aggregate(
        average_score=Avg("total_score"),
        total_xp=Sum("xp_earned"),
        best_score=Max("total_score"),
    )
    return {
        "results": items,
        "pagination": {
            "page": page_obj.number,
            "per_page": per_page,
            "total_pages": paginator.num_pages,
            "total": paginator.count,
        },
        "stats": {
            "total_quizzes_taken": paginator.count,
            "average_score": round(totals["average_score"] or 0, 2),
            "total_xp_earned": totals["total_xp"] or 0,
            "best_score": totals["best_score"] or 0,
        },
    }
