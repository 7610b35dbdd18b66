"""
Question Service

Persists quiz questions with their choices and keeps the derived quiz data
consistent: after every create, update or delete the quiz totals are
recomputed, the quiz question cache is rebuilt and the quiz analytics cache
is dropped.

Author: DSP Development Team
Version: 1.0.0
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from django.db import transaction

from ...participation.exceptions import QuizNotFound, ValidationError
from ...services.cache import QuizCache, get_quiz_cache, question_key, quiz_questions_key
from ..models import Choice, Question, QuestionSnapshot, QuestionType, Quiz

logger = logging.getLogger(__name__)


def load_question_snapshots(quiz_id: int) -> Tuple[QuestionSnapshot, ...]:
    """Read all questions of a quiz (in id order) with their choices from the database."""
    questions = Question.objects.filter(quiz_id=quiz_id).prefetch_related("choices").order_by("id")
    return tuple(q.to_snapshot() for q in questions)


class QuestionService:
    """
    Service for question authoring and cached question reads.

    Args:
        cache: Cache port; defaults to the configured quiz cache
    """

    def __init__(self, cache: Optional[QuizCache] = None):
        self.cache = cache or get_quiz_cache()

    # --- Reads ---

    def get_questions(self, quiz_id: int) -> Tuple[QuestionSnapshot, ...]:
        """Cached question snapshots of a quiz, including correctness flags."""
        return self.cache.remember(
            quiz_questions_key(quiz_id),
            QuizCache.timeout_for("quiz_questions"),
            lambda: load_question_snapshots(quiz_id),
        )

    def get_question(self, question_id: int) -> Optional[QuestionSnapshot]:
        def load():
            question = Question.objects.filter(pk=question_id).prefetch_related("choices").first()
            return question.to_snapshot() if question else None

        return self.cache.remember(question_key(question_id), QuizCache.timeout_for("question"), load)

    def get_quiz_payload(self, quiz_id: int) -> Dict[str, Any]:
        """
        Quiz data for a learner taking the quiz. Choice texts are included,
        correctness flags are not.

        Raises:
            QuizNotFound: if the quiz does not exist
        """
        quiz = Quiz.objects.filter(pk=quiz_id).first()
        if quiz is None:
            raise QuizNotFound(quiz_id)
        return {
            "id": quiz.id,
            "title": quiz.title,
            "description": quiz.description,
            "mode": quiz.mode,
            "total_score": quiz.total_score,
            "total_time": quiz.total_time,
            "questions": [q.public_payload() for q in self.get_questions(quiz.id)],
        }

    # --- Writes ---

    def create_question(self, quiz: Quiz, data: Dict[str, Any]) -> Question:
        """
        Create a question with its choices.

        Args:
            quiz: Parent quiz
            data: question, question_type, score, time, is_required and either
                choices ([{"choice", "is_correct"}]) or correct_answer for
                identification questions
        """
        self.validate(data)
        with transaction.atomic():
            question = Question.objects.create(
                quiz=quiz,
                question=data["question"],
                question_type=data["question_type"],
                score=data.get("score", 1),
                time=data.get("time"),
                is_required=data.get("is_required", False),
            )
            self._store_choices(question, data)
            quiz.recalculate_totals()

        self._after_change(quiz.id, question.id)
        logger.info(f"Question {question.id} created for quiz {quiz.id}")
        return question

    def update_question(self, question: Question, data: Dict[str, Any]) -> Question:
        """Replace a question's fields and choices."""
        self.validate(data)
        with transaction.atomic():
            question.question = data["question"]
            question.question_type = data["question_type"]
            question.score = data.get("score", 1)
            question.time = data.get("time")
            question.is_required = data.get("is_required", False)
            question.save()
            question.choices.all().delete()
            self._store_choices(question, data)
            question.quiz.recalculate_totals()

        self._after_change(question.quiz_id, question.id)
        logger.info(f"Question {question.id} of quiz {question.quiz_id} updated")
        return question

    def delete_question(self, question: Question) -> None:
        quiz = question.quiz
        question_id = question.id
        with transaction.atomic():
            question.delete()
            quiz.recalculate_totals()

        self._after_change(quiz.id, question_id)
        logger.info(f"Question {question_id} of quiz {quiz.id} deleted")

    def sync_question(self, question: Question) -> None:
        """Refresh derived data after a question was saved outside this service (e.g. the admin)."""
        question.quiz.recalculate_totals()
        self._after_change(question.quiz_id, question.id)

    def sync_quiz(self, quiz: Quiz, deleted_question_ids=()) -> None:
        quiz.recalculate_totals()
        question_ids = list(quiz.questions.values_list("id", flat=True)) + list(deleted_question_ids)
        self.cache.forget(*[question_key(pk) for pk in question_ids])
        self.cache.forget_quiz(quiz.id)
        self.get_questions(quiz.id)

    # --- Helpers ---

    @staticmethod
    def validate(data: Dict[str, Any]) -> None:
        """
        Authoring rules for a question payload.

        Raises:
            ValidationError: unknown type, missing answer or wrong number of
                correct choices
        """
        question_type = data.get("question_type")
        if question_type not in QuestionType.values:
            raise ValidationError(
                f"Unknown question type '{question_type}'.",
                details={"question_type": question_type},
            )

        if question_type == QuestionType.IDENTIFICATION:
            if not (data.get("correct_answer") or "").strip():
                raise ValidationError("Identification questions need a correct answer.")
            return

        choices: List[Dict[str, Any]] = [
            c for c in data.get("choices") or [] if (c.get("choice") or "").strip()
        ]
        if not choices:
            raise ValidationError("Choice questions need at least one choice.")
        correct = sum(1 for c in choices if c.get("is_correct"))
        if question_type == QuestionType.MULTIPLE_CHOICE and correct != 1:
            raise ValidationError(
                "Multiple choice questions must have exactly one correct choice.",
                details={"correct_choices": correct},
            )
        if question_type == QuestionType.CHECKBOX and correct == 0:
            raise ValidationError("Checkbox questions need at least one correct choice.")

    @staticmethod
    def _store_choices(question: Question, data: Dict[str, Any]) -> None:
        if question.question_type == QuestionType.IDENTIFICATION:
            Choice.objects.create(question=question, choice=data["correct_answer"].strip(), is_correct=True)
            return
        Choice.objects.bulk_create(
            [
                Choice(question=question, choice=c["choice"], is_correct=bool(c.get("is_correct")))
                for c in data.get("choices") or []
                if (c.get("choice") or "").strip()
            ]
        )

    def _after_change(self, quiz_id: int, question_id: int) -> None:
        self.cache.forget(question_key(question_id))
        self.cache.forget_quiz(quiz_id)
        # Rebuild the question cache right away, quizzes are read far more than written
        self.get_questions(quiz_id)
