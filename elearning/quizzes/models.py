"""
E-Learning Quiz Authoring Models

This module defines the authored quiz content that learners take and
that the participation engine scores against.

Models:
- Quiz: A titled set of questions owned by an instructor or admin
- Question: A single scored question of one of three types
- Choice: An answer option (or, for identification, the canonical answer)

Invariants:
- Quiz.total_score is the sum of its question scores
- Quiz.total_time is the sum of its question time limits (null counted as 0)
  Both are derived and recomputed by QuestionService whenever questions change.

Author: DSP Development Team
Version: 1.0.0
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from django.conf import settings
from django.db import models
from django.db.models import Sum
from django.utils.translation import gettext_lazy as _


class QuizMode(models.TextChoices):
    """Navigation style; affects presentation only, never scoring."""

    STANDARD = "standard", _("Standard")
    FOCUSED = "focused", _("Focused")


class QuestionType(models.TextChoices):
    MULTIPLE_CHOICE = "multiple_choice", _("Multiple Choice")
    CHECKBOX = "checkbox", _("Checkbox")
    IDENTIFICATION = "identification", _("Identification")


class Quiz(models.Model):
    """
    A quiz authored by an instructor or admin.

    Attributes:
        user: Owning user (creator)
        title: Quiz title
        description: Free-text description
        mode: Presentation mode (standard / focused)
        total_score: Maximum attainable score (derived)
        total_time: Sum of question time limits in seconds (derived)
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="quizzes",
        verbose_name=_("Creator"),
    )
    title = models.CharField(max_length=255, verbose_name=_("Title"))
    description = models.TextField(blank=True, default="", verbose_name=_("Description"))
    mode = models.CharField(
        max_length=20,
        choices=QuizMode.choices,
        default=QuizMode.STANDARD,
        verbose_name=_("Mode"),
    )
    total_score = models.PositiveIntegerField(
        default=0,
        verbose_name=_("Total Score"),
        help_text=_("Sum of question scores. Recomputed automatically."),
    )
    total_time = models.PositiveIntegerField(
        default=0,
        verbose_name=_("Total Time"),
        help_text=_("Sum of question time limits in seconds. Recomputed automatically."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Quiz")
        verbose_name_plural = _("Quizzes")
        ordering = ["-created_at", "id"]
        db_table = "elearning_quiz"

    def __str__(self) -> str:
        return self.title

    def recalculate_totals(self) -> None:
        """Recompute total_score and total_time from the current questions and save them."""
        totals = self.questions.aggregate(score=Sum("score"), time=Sum("time"))
        self.total_score = totals["score"] or 0
        self.total_time = totals["time"] or 0
        self.save(update_fields=["total_score", "total_time", "updated_at"])


class Question(models.Model):
    """
    A scored question belonging to one quiz.

    Attributes:
        quiz: Parent quiz
        question_type: multiple_choice, checkbox or identification
        question: Question text
        score: Points awarded for a correct answer
        time: Optional time limit in seconds
        is_required: Whether the learner must answer it
    """

    quiz = models.ForeignKey(
        Quiz,
        on_delete=models.CASCADE,
        related_name="questions",
        verbose_name=_("Quiz"),
    )
    question_type = models.CharField(
        max_length=20,
        choices=QuestionType.choices,
        verbose_name=_("Question Type"),
    )
    question = models.TextField(verbose_name=_("Question"))
    score = models.PositiveIntegerField(default=1, verbose_name=_("Score"))
    time = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name=_("Time Limit"),
        help_text=_("Time limit in seconds (optional)"),
    )
    is_required = models.BooleanField(default=False, verbose_name=_("Required"))

    class Meta:
        verbose_name = _("Question")
        verbose_name_plural = _("Questions")
        ordering = ["quiz", "id"]
        db_table = "elearning_question"

    def __str__(self) -> str:
        return f"{self.quiz.title} - {self.question[:40]}"

    def to_snapshot(self) -> "QuestionSnapshot":
        """Build an immutable, cache-friendly copy of this question and its choices."""
        return QuestionSnapshot(
            id=self.id,
            quiz_id=self.quiz_id,
            question_type=self.question_type,
            question=self.question,
            score=self.score,
            time=self.time,
            is_required=self.is_required,
            choices=tuple(
                ChoiceSnapshot(choice=c.choice, is_correct=c.is_correct)
                for c in self.choices.all()
            ),
        )


class Choice(models.Model):
    """
    An answer option of a question.

    For identification questions a single choice with is_correct=True holds
    the canonical answer.
    """

    question = models.ForeignKey(
        Question,
        on_delete=models.CASCADE,
        related_name="choices",
        verbose_name=_("Question"),
    )
    choice = models.CharField(max_length=500, verbose_name=_("Choice"))
    is_correct = models.BooleanField(default=False, verbose_name=_("Correct"))

    class Meta:
        verbose_name = _("Choice")
        verbose_name_plural = _("Choices")
        ordering = ["question", "id"]
        db_table = "elearning_choice"

    def __str__(self) -> str:
        return self.choice


@dataclass(frozen=True)
class ChoiceSnapshot:
    choice: str
    is_correct: bool


@dataclass(frozen=True)
class QuestionSnapshot:
    """Read-only question data as cached for scoring and quiz taking."""

    id: int
    quiz_id: int
    question_type: str
    question: str
    score: int
    time: Optional[int] = None
    is_required: bool = False
    choices: Tuple[ChoiceSnapshot, ...] = ()

    def public_payload(self) -> dict:
        """Question data safe to send to a learner (no correctness flags)."""
        return {
            "id": self.id,
            "question": self.question,
            "question_type": self.question_type,
            "score": self.score,
            "time": self.time,
            "is_required": self.is_required,
            "choices": (
                []
                if self.question_type == QuestionType.IDENTIFICATION
                else [c.choice for c in self.choices]
            ),
        }
