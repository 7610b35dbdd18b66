from .quiz_cache import (
    QuizCache,
    analytics_key,
    get_quiz_cache,
    question_key,
    quiz_questions_key,
    quizzes_available_key,
    quizzes_taken_key,
)

__all__ = [
    "QuizCache",
    "analytics_key",
    "get_quiz_cache",
    "question_key",
    "quiz_questions_key",
    "quizzes_available_key",
    "quizzes_taken_key",
]
