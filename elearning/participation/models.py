"""
E-Learning Quiz Participation Models

Persistent records of quiz attempts and the XP they earned.

Models:
- Participation: One user's single scored attempt at one quiz
- Answer: The stored answer to one question within an attempt
- XpHistory: Append-only XP ledger, one row per scored attempt

Participations and answers are written once by the ParticipationRecorder
and never changed afterwards. A database constraint guarantees at most one
participation per (user, quiz).

Author: DSP Development Team
Version: 1.0.0
"""

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from ..quizzes.models import Question, Quiz


class ParticipationStatus(models.TextChoices):
    COMPLETED = "completed", _("Completed")
    IN_PROGRESS = "in_progress", _("In Progress")


class Participation(models.Model):
    """
    A user's attempt at a quiz.

    Attributes:
        user: Participating user
        quiz: Attempted quiz
        total_score: Sum of points earned
        xp_earned: XP awarded for the attempt
        time_taken: Client-reported duration in seconds
        status: Attempt status (completed for every recorded submission)
        completed_at: Submission timestamp
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="quiz_participations",
        verbose_name=_("User"),
    )
    quiz = models.ForeignKey(
        Quiz,
        on_delete=models.CASCADE,
        related_name="participations",
        verbose_name=_("Quiz"),
    )
    total_score = models.PositiveIntegerField(default=0, verbose_name=_("Total Score"))
    xp_earned = models.PositiveIntegerField(default=0, verbose_name=_("XP Earned"))
    time_taken = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name=_("Time Taken"),
        help_text=_("Seconds, as reported by the client"),
    )
    status = models.CharField(
        max_length=20,
        choices=ParticipationStatus.choices,
        default=ParticipationStatus.COMPLETED,
        verbose_name=_("Status"),
    )
    completed_at = models.DateTimeField(default=timezone.now, verbose_name=_("Completed At"))
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Quiz Participation")
        verbose_name_plural = _("Quiz Participations")
        ordering = ["-completed_at", "-id"]
        db_table = "elearning_participation"
        constraints = [
            models.UniqueConstraint(fields=["user", "quiz"], name="unique_participation_per_user_quiz"),
        ]
        indexes = [
            models.Index(fields=["quiz", "completed_at"], name="elearning_part_quiz_done_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.user.username} - {self.quiz.title} ({self.total_score})"

    @property
    def percentage(self) -> float:
        """Score as percentage of the quiz maximum, rounded to one decimal."""
        if not self.quiz.total_score:
            return 0
        return round(self.total_score / self.quiz.total_score * 100, 1)


class Answer(models.Model):
    """
    A stored answer. ``answer`` holds the trimmed string, or a JSON array for
    checkbox questions; ``is_correct`` is computed once at submission time.
    """

    participation = models.ForeignKey(
        Participation,
        on_delete=models.CASCADE,
        related_name="answers",
        verbose_name=_("Participation"),
    )
    question = models.ForeignKey(
        Question,
        on_delete=models.CASCADE,
        related_name="answers",
        verbose_name=_("Question"),
    )
    answer = models.TextField(blank=True, default="", verbose_name=_("Answer"))
    is_correct = models.BooleanField(default=False, verbose_name=_("Correct"))

    class Meta:
        verbose_name = _("Answer")
        verbose_name_plural = _("Answers")
        ordering = ["participation", "question_id", "id"]
        db_table = "elearning_participation_answer"

    def __str__(self) -> str:
        return f"Answer {self.question_id} ({'correct' if self.is_correct else 'incorrect'})"


class XpSource(models.TextChoices):
    QUIZ = "quiz", _("Quiz")


class XpHistory(models.Model):
    """Append-only XP ledger entry."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="xp_history",
        verbose_name=_("User"),
    )
    source = models.CharField(
        max_length=20,
        choices=XpSource.choices,
        default=XpSource.QUIZ,
        verbose_name=_("Source"),
    )
    source_id = models.PositiveIntegerField(verbose_name=_("Source ID"))
    xp_earned = models.PositiveIntegerField(verbose_name=_("XP Earned"))
    description = models.CharField(max_length=500, blank=True, default="", verbose_name=_("Description"))
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("XP History Entry")
        verbose_name_plural = _("XP History")
        ordering = ["-created_at", "-id"]
        db_table = "elearning_xp_history"

    def __str__(self) -> str:
        return f"{self.user.username} +{self.xp_earned} XP ({self.source} {self.source_id})"
