"""
Participation Recorder

Records one quiz submission: validates the submitted answers, evaluates
each of them, persists the participation with its answers, awards XP and
finally invalidates the caches that depend on the new attempt.

Participation, answers, the XP history entry and the profile XP increment
are written in one transaction. A user can take a quiz only once; this is
checked against the database before writing and enforced by a unique
constraint while writing.

Author: DSP Development Team
Version: 1.0.0
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone

from ..quizzes.models import QuestionSnapshot, Quiz
from ..quizzes.services import QuestionService
from ..services.cache import QuizCache, get_quiz_cache
from ..users.models import Profile
from .answers import SubmittedAnswer, parse_answer
from .evaluator import evaluate
from .exceptions import (
    AlreadyAttempted,
    InvalidQuestionReference,
    PersistenceError,
    QuizEngineError,
    QuizNotFound,
    SubmissionFailed,
    ValidationError,
)
from .models import Answer, Participation, ParticipationStatus, XpHistory, XpSource
from .xp import calculate_xp

logger = logging.getLogger(__name__)


@dataclass
class SubmissionResult:
    """Outcome of a recorded submission."""

    participation_id: int
    total_score: int
    max_score: int
    xp_earned: int
    percentage: float
    correct_answers: int
    total_questions: int
    xp_breakdown: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ParticipationRecorder:
    """
    Orchestrates quiz submissions.

    Args:
        cache: Cache port used for question reads and invalidation
    """

    def __init__(self, cache: Optional[QuizCache] = None):
        self.cache = cache or get_quiz_cache()
        self.questions = QuestionService(cache=self.cache)

    def submit(
        self,
        user,
        quiz_id: int,
        answers: List[Dict[str, Any]],
        time_taken: Optional[int] = None,
    ) -> SubmissionResult:
        """
        Record a submission for ``user``.

        Args:
            user: Submitting user
            quiz_id: Quiz being submitted
            answers: [{"question_id": int, "answer": str | list | None}, ...]
            time_taken: Client-reported duration in seconds

        Returns:
            SubmissionResult

        Raises:
            ValidationError / InvalidQuestionReference / QuizNotFound: bad input
            AlreadyAttempted: the user already has a participation for the quiz
            SubmissionFailed: anything went wrong while writing
        """
        quiz = Quiz.objects.filter(pk=quiz_id).first()
        if quiz is None:
            raise QuizNotFound(quiz_id)

        parsed = self._parse_submission(quiz, answers)
        time_taken = self._validate_time_taken(time_taken)

        if self.has_attempted(user, quiz):
            logger.warning(f"Duplicate submission rejected: user {user.id}, quiz {quiz.id}")
            raise AlreadyAttempted(details={"quiz_id": quiz.id})

        try:
            with transaction.atomic():
                try:
                    result = self._record(user, quiz, parsed, time_taken)
                except IntegrityError:
                    raise
                except DatabaseError as exc:
                    raise PersistenceError(details={"reason": str(exc)}) from exc
        except IntegrityError as exc:
            if Participation.objects.filter(user=user, quiz=quiz).exists():
                logger.warning(f"Concurrent duplicate submission rejected: user {user.id}, quiz {quiz.id}")
                raise AlreadyAttempted(details={"quiz_id": quiz.id}) from exc
            logger.error(f"Quiz submission error for user {user.id}, quiz {quiz.id}: {exc}", exc_info=True)
            raise SubmissionFailed() from exc
        except QuizEngineError as exc:
            logger.error(
                f"Quiz submission error for user {user.id}, quiz {quiz.id}: {exc.message}",
                exc_info=True,
            )
            raise SubmissionFailed(details={"error_code": exc.error_code}) from exc
        except Exception as exc:
            logger.exception(f"Unexpected quiz submission error for user {user.id}, quiz {quiz.id}: {exc}")
            raise SubmissionFailed() from exc

        self.invalidate_after_submission(user.id, quiz.id)
        logger.info(
            f"Quiz {quiz.id} submitted by user {user.id}: score {result.total_score}/{result.max_score}, "
            f"{result.xp_earned} XP"
        )
        return result

    def has_attempted(self, user, quiz) -> bool:
        # Never answered from cache
        return Participation.objects.filter(user=user, quiz=quiz).exists()

    def invalidate_after_submission(self, user_id: int, quiz_id: int) -> None:
        self.cache.forget_user_listings(user_id)
        self.cache.forget_quiz(quiz_id)

    # --- Internals ---

    def _parse_submission(
        self, quiz: Quiz, answers: Any
    ) -> List[Tuple[QuestionSnapshot, SubmittedAnswer]]:
        if not isinstance(answers, list) or not answers:
            raise ValidationError("At least one answer is required.")

        questions = {q.id: q for q in self.questions.get_questions(quiz.id)}
        parsed = []
        seen = set()
        for item in answers:
            if not isinstance(item, dict) or "question_id" not in item:
                raise ValidationError("Every answer needs a question_id.")
            question_id = self._parse_question_id(item["question_id"])
            question = questions.get(question_id)
            if question is None:
                raise InvalidQuestionReference(question_id, quiz.id)
            if question_id in seen:
                raise ValidationError(
                    f"Question {question_id} was answered more than once.",
                    details={"question_id": question_id},
                )
            seen.add(question_id)
            parsed.append((question, parse_answer(question.question_type, item.get("answer"))))
        return parsed

    @staticmethod
    def _parse_question_id(value: Any) -> int:
        # ints and digit strings only; bools and floats are rejected
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().isdigit():
            return int(value.strip())
        raise ValidationError("question_id must be an integer.", details={"question_id": value})

    @staticmethod
    def _validate_time_taken(time_taken: Any) -> Optional[int]:
        if time_taken is None:
            return None
        if isinstance(time_taken, bool) or not isinstance(time_taken, int) or time_taken < 0:
            raise ValidationError(
                "time_taken must be a non-negative integer.", details={"time_taken": time_taken}
            )
        return time_taken

    def _record(
        self,
        user,
        quiz: Quiz,
        parsed: List[Tuple[QuestionSnapshot, SubmittedAnswer]],
        time_taken: Optional[int],
    ) -> SubmissionResult:
        participation = Participation.objects.create(
            user=user,
            quiz=quiz,
            total_score=0,
            xp_earned=0,
            time_taken=time_taken,
            status=ParticipationStatus.COMPLETED,
            completed_at=timezone.now(),
        )

        total_score = 0
        correct_answers = 0
        rows = []
        for question, answer in parsed:
            is_correct = evaluate(question, answer)
            if is_correct:
                total_score += question.score
                correct_answers += 1
            rows.append(
                Answer(
                    participation=participation,
                    question_id=question.id,
                    answer=answer.stored_value(),
                    is_correct=is_correct,
                )
            )
        Answer.objects.bulk_create(rows)

        total_questions = len(parsed)
        xp = calculate_xp(quiz, total_score, correct_answers, total_questions)

        participation.total_score = total_score
        participation.xp_earned = xp.xp
        participation.save(update_fields=["total_score", "xp_earned"])

        XpHistory.objects.create(
            user=user,
            source=XpSource.QUIZ,
            source_id=quiz.id,
            xp_earned=xp.xp,
            description='Completed quiz "%s" - Score: %d/%d (%.1f%%) - %d/%d correct answers'
            % (
                quiz.title,
                total_score,
                quiz.total_score,
                xp.breakdown["percentage"],
                correct_answers,
                total_questions,
            ),
        )
        profile, _ = Profile.objects.get_or_create(user=user)
        profile.add_xp(xp.xp)

        percentage = round(total_score / quiz.total_score * 100, 1) if quiz.total_score else 0
        return SubmissionResult(
            participation_id=participation.id,
            total_score=total_score,
            max_score=quiz.total_score,
            xp_earned=xp.xp,
            percentage=percentage,
            correct_answers=correct_answers,
            total_questions=total_questions,
            xp_breakdown=xp.breakdown,
        )
