"""
Shared test data helpers for the quiz engine tests.
"""

from django.contrib.auth.models import User
from django.core.cache import caches

from elearning.quizzes.models import Quiz
from elearning.quizzes.services import QuestionService
from elearning.services.cache import QuizCache
from elearning.users.models import Role


def make_user(username, role=Role.LEARNER, first_name="", last_name=""):
    user = User.objects.create_user(
        username=username,
        password="Musterpassword",
        first_name=first_name,
        last_name=last_name,
    )
    user.profile.role = role
    user.profile.save()
    return user


def make_cache():
    """Quiz cache on the default (local memory) backend, emptied first."""
    backend = caches["default"]
    backend.clear()
    return QuizCache(backend=backend)


def make_capital_quiz(owner, cache=None, total_time=True):
    """
    Quiz with a multiple choice question (10 points, "Paris") and an
    identification question (5 points, "42").
    """
    quiz = Quiz.objects.create(user=owner, title="Hauptstädte")
    service = QuestionService(cache=cache)
    mc = service.create_question(
        quiz,
        {
            "question": "Hauptstadt von Frankreich?",
            "question_type": "multiple_choice",
            "score": 10,
            "time": 30 if total_time else None,
            "choices": [
                {"choice": "Paris", "is_correct": True},
                {"choice": "Lyon", "is_correct": False},
            ],
        },
    )
    ident = service.create_question(
        quiz,
        {
            "question": "Die Antwort auf alles?",
            "question_type": "identification",
            "score": 5,
            "time": 30 if total_time else None,
            "correct_answer": "42",
        },
    )
    quiz.refresh_from_db()
    return quiz, mc, ident
