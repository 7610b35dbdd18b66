"""
Quiz Cache Port

Thin, injectable wrapper around Django's cache framework used by the quiz
engine. All cache keys and timeouts of the quiz engine live here so the
recorder, question service and analytics service never talk to the global
cache directly.

The cache is best-effort: staleness up to the configured timeout is
acceptable, correctness-critical reads must go to the database.

Author: DSP Development Team
Version: 1.0.0
"""

import logging
from typing import Any, Callable, Optional

from django.conf import settings
from django.core.cache import caches

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUTS = {
    "quiz_questions": 600,
    "question": 60,
    "analytics": 600,
    "quizzes_taken": 600,
    "quizzes_available": 600,
}


def quiz_questions_key(quiz_id: int) -> str:
    return f"quiz:{quiz_id}:questions"


def question_key(question_id: int) -> str:
    return f"quiz_question_{question_id}"


def analytics_key(quiz_id: int) -> str:
    return f"quiz_analytics_{quiz_id}"


def quizzes_taken_key(user_id: int) -> str:
    return f"quiz_participation_access_user_{user_id}"


def quizzes_available_key(user_id: int) -> str:
    return f"quizzes_available_user_{user_id}"


class QuizCache:
    """
    Key-value cache port with get / put / forget / remember.

    Args:
        backend: Optional Django cache backend. Defaults to the alias named by
            the QUIZ_CACHE_ALIAS setting.
    """

    def __init__(self, backend=None):
        self._backend = backend

    @property
    def backend(self):
        if self._backend is None:
            self._backend = caches[getattr(settings, "QUIZ_CACHE_ALIAS", "default")]
        return self._backend

    @staticmethod
    def timeout_for(family: str) -> int:
        timeouts = getattr(settings, "QUIZ_CACHE_TIMEOUTS", {})
        return timeouts.get(family, DEFAULT_TIMEOUTS.get(family, 300))

    def get(self, key: str, default: Any = None) -> Any:
        return self.backend.get(key, default)

    def put(self, key: str, value: Any, timeout: Optional[int] = None) -> None:
        self.backend.set(key, value, timeout=timeout)

    def forget(self, *keys: str) -> None:
        for key in keys:
            self.backend.delete(key)
        logger.debug(f"Cache invalidated: {', '.join(keys)}")

    def remember(self, key: str, timeout: int, loader: Callable[[], Any]) -> Any:
        """Read-through: return the cached value or compute, store and return it."""
        sentinel = object()
        value = self.backend.get(key, sentinel)
        if value is not sentinel:
            logger.debug(f"Cache hit: {key}")
            return value
        logger.debug(f"Cache miss: {key}")
        value = loader()
        self.backend.set(key, value, timeout=timeout)
        return value

    # --- Invalidation helpers used after writes ---

    def forget_user_listings(self, user_id: int) -> None:
        self.forget(quizzes_taken_key(user_id), quizzes_available_key(user_id))

    def forget_quiz(self, quiz_id: int) -> None:
        self.forget(quiz_questions_key(quiz_id), analytics_key(quiz_id))

    def forget_analytics(self, quiz_id: int) -> None:
        self.forget(analytics_key(quiz_id))


def get_quiz_cache() -> QuizCache:
    return QuizCache()
