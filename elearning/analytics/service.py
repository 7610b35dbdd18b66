"""
Quiz Analytics Service

Loads participation history, builds reports through the aggregator and
caches the full report per quiz. Masking is applied by the callers for the
requesting viewer, so the cached report itself is never masked.

Author: DSP Development Team
Version: 1.0.0
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from django.conf import settings
from django.utils import timezone

from ..participation.exceptions import QuizNotFound, ValidationError
from ..participation.models import Participation
from ..quizzes.models import Quiz
from ..services.cache import QuizCache, analytics_key, get_quiz_cache
from ..users.models import get_display_name
from .aggregator import build_report, participation_stats
from .records import load_participation_records, load_quiz_record

logger = logging.getLogger(__name__)

MIN_COMPARE_QUIZZES = 2
MAX_COMPARE_QUIZZES = 5


class QuizAnalyticsService:
    """
    Service for quiz analytics reports.

    Args:
        cache: Cache port holding the per-quiz reports
    """

    def __init__(self, cache: Optional[QuizCache] = None):
        self.cache = cache or get_quiz_cache()

    @staticmethod
    def get_quiz(quiz_id: Any) -> Quiz:
        try:
            quiz_id = int(quiz_id)
        except (TypeError, ValueError):
            raise ValidationError("Quiz ids must be integers.", details={"quiz_id": quiz_id})
        quiz = Quiz.objects.filter(pk=quiz_id).first()
        if quiz is None:
            raise QuizNotFound(quiz_id)
        return quiz

    def generate_report(self, quiz: Quiz) -> Dict[str, Any]:
        """Build a fresh, uncached report."""
        return build_report(load_quiz_record(quiz), load_participation_records(quiz))

    def get_analytics(self, quiz: Quiz) -> Dict[str, Any]:
        """Full report, served from cache when available."""
        return self.cache.remember(
            analytics_key(quiz.id),
            QuizCache.timeout_for("analytics"),
            lambda: self.generate_report(quiz),
        )

    def invalidate(self, quiz_id: int) -> None:
        self.cache.forget_analytics(quiz_id)
        logger.info(f"Analytics cache cleared for quiz {quiz_id}")

    def get_realtime_analytics(self, quiz: Quiz) -> Dict[str, Any]:
        """Participation stats and the most recent attempts, never cached."""
        limit = getattr(settings, "QUIZ_REALTIME_RECENT_LIMIT", 10)
        records = load_participation_records(quiz)
        recent = (
            Participation.objects.filter(quiz=quiz)
            .select_related("user")
            .order_by("-completed_at", "-id")[:limit]
        )
        return {
            "participation_stats": participation_stats(load_quiz_record(quiz), records),
            "recent_attempts": [
                {
                    "participation_id": p.id,
                    "user_id": p.user_id,
                    "user_name": get_display_name(p.user),
                    "total_score": p.total_score,
                    "xp_earned": p.xp_earned,
                    "time_taken": p.time_taken,
                    "status": p.status,
                    "completed_at": p.completed_at.isoformat(),
                }
                for p in recent
            ],
            "last_updated": timezone.now().isoformat(),
        }

    def compare(self, quiz_ids: Sequence[Any]) -> List[Dict[str, Any]]:
        """
        Participation stats and difficulty analysis of 2 to 5 quizzes.

        Raises:
            ValidationError: wrong number of ids
            QuizNotFound: an id does not exist
        """
        if not isinstance(quiz_ids, (list, tuple)) or not (
            MIN_COMPARE_QUIZZES <= len(quiz_ids) <= MAX_COMPARE_QUIZZES
        ):
            raise ValidationError(
                f"Provide between {MIN_COMPARE_QUIZZES} and {MAX_COMPARE_QUIZZES} quiz ids.",
                details={"quiz_ids": quiz_ids},
            )

        comparison = []
        for quiz_id in quiz_ids:
            quiz = self.get_quiz(quiz_id)
            report = self.get_analytics(quiz)
            comparison.append(
                {
                    "quiz": {"id": quiz.id, "title": quiz.title},
                    "stats": report["participation_stats"],
                    "difficulty": report["difficulty_analysis"],
                }
            )
        return comparison
