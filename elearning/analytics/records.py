"""
Analytics input records.

Plain, immutable copies of the quiz and its participation history. The
aggregator only ever sees these records, which keeps it a pure function
that can be tested without a database.

Author: DSP Development Team
Version: 1.0.0
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple

from django.db.models import Prefetch
from django.utils import timezone

from ..participation.models import Answer, Participation
from ..quizzes.models import Quiz
from ..users.models import get_display_name


@dataclass(frozen=True)
class QuestionRecord:
    id: int
    question: str
    question_type: str
    score: int


@dataclass(frozen=True)
class QuizRecord:
    id: int
    title: str
    total_score: int
    total_time: int
    questions: Tuple[QuestionRecord, ...] = ()


@dataclass(frozen=True)
class AnswerRecord:
    question_id: int
    answer: str
    is_correct: bool


@dataclass(frozen=True)
class ParticipationRecord:
    id: int
    user_id: int
    user_name: str
    total_score: int
    time_taken: Optional[int]
    status: str
    completed_at: datetime
    answers: Tuple[AnswerRecord, ...] = ()


def load_quiz_record(quiz: Quiz) -> QuizRecord:
    return QuizRecord(
        id=quiz.id,
        title=quiz.title,
        total_score=quiz.total_score or 0,
        total_time=quiz.total_time or 0,
        questions=tuple(
            QuestionRecord(id=q.id, question=q.question, question_type=q.question_type, score=q.score)
            for q in quiz.questions.order_by("id")
        ),
    )


def _local(value: datetime) -> datetime:
    if value is not None and timezone.is_aware(value):
        return timezone.localtime(value)
    return value


def to_participation_record(participation: Participation) -> ParticipationRecord:
    return ParticipationRecord(
        id=participation.id,
        user_id=participation.user_id,
        user_name=get_display_name(participation.user),
        total_score=participation.total_score,
        time_taken=participation.time_taken,
        status=participation.status,
        completed_at=_local(participation.completed_at),
        answers=tuple(
            AnswerRecord(question_id=a.question_id, answer=a.answer, is_correct=a.is_correct)
            for a in participation.answers.all()
        ),
    )


def load_participation_records(quiz: Quiz) -> List[ParticipationRecord]:
    """All participations of a quiz in submission order, with answers and users."""
    participations = (
        Participation.objects.filter(quiz=quiz)
        .select_related("user")
        .prefetch_related(Prefetch("answers", queryset=Answer.objects.order_by("question_id", "id")))
        .order_by("completed_at", "id")
    )
    return [to_participation_record(p) for p in participations]
