"""
Learner quiz listings: quizzes already taken and quizzes still available.

Both lists are cached per user and dropped by the recorder after every
submission of that user.
"""

from typing import Any, Dict, List, Optional

from ..quizzes.models import Quiz
from ..services.cache import QuizCache, get_quiz_cache, quizzes_available_key, quizzes_taken_key
from .models import Participation


def get_quizzes_taken(user, cache: Optional[QuizCache] = None) -> List[Dict[str, Any]]:
    cache = cache or get_quiz_cache()

    def load():
        return [
            {
                "id": p.id,
                "quiz_id": p.quiz_id,
                "quiz_name": p.quiz.title,
                "total_score": p.total_score,
                "xp_earned": p.xp_earned,
                "completed_at": p.completed_at.isoformat(),
            }
            for p in Participation.objects.filter(user=user).select_related("quiz").order_by("-completed_at")
        ]

    return cache.remember(quizzes_taken_key(user.id), QuizCache.timeout_for("quizzes_taken"), load)


def get_quizzes_available(user, cache: Optional[QuizCache] = None) -> List[Dict[str, Any]]:
    cache = cache or get_quiz_cache()

    def load():
        taken = Participation.objects.filter(user=user).values_list("quiz_id", flat=True)
        return [
            {
                "quiz_id": quiz.id,
                "title": quiz.title,
                "description": quiz.description,
                "mode": quiz.mode,
                "total_score": quiz.total_score,
                "total_time": quiz.total_time,
                "created_at": quiz.created_at.isoformat(),
            }
            for quiz in Quiz.objects.exclude(id__in=taken).order_by("-created_at", "id")
        ]

    return cache.remember(quizzes_available_key(user.id), QuizCache.timeout_for("quizzes_available"), load)
