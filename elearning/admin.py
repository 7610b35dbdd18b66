"""
E-Learning Application Django Admin Configuration

This module provides the Django admin configuration for all quiz models.

The admin interface is organized into logical sections:
- User Management: User administration with role and XP profile
- Quiz Authoring: Quizzes with inline questions, questions with inline choices
- Participation: Read-only attempts, answers and XP ledger

Quiz totals and question caches are derived data and are refreshed
through QuestionService whenever questions are saved in the admin. Inline
choices follow the same authoring rules as the API.

Author: DSP Development Team
Version: 1.0.0
"""

from typing import Optional

from django import forms
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.models import User
from django.db.models import QuerySet
from django.forms.models import BaseInlineFormSet
from django.http import HttpRequest
from django.utils.translation import gettext_lazy as _

from .models import (
    Answer,
    Choice,
    Participation,
    Profile,
    Question,
    Quiz,
    XpHistory,
)
from .participation.exceptions import QuizEngineError
from .quizzes.services import QuestionService

# --- User Management Administration ---


class ProfileInline(admin.StackedInline):
    """Inline admin for the quiz profile (role and lifetime XP)."""

    model = Profile
    can_delete = False
    verbose_name_plural = "Profile Information"
    fk_name = "user"
    fields = ("role", "xp")
    readonly_fields = ("xp",)

    def get_extra(self, request: HttpRequest, obj: Optional[User] = None, **kwargs) -> int:
        """Return 0 extra forms since profile should exist or be created automatically."""
        return 0


class UserAdmin(BaseUserAdmin):
    """User administration with profile role and XP columns."""

    inlines = (ProfileInline,)
    list_display = (
        "username",
        "email",
        "first_name",
        "last_name",
        "get_role",
        "get_xp",
        "is_active",
    )
    list_select_related = ("profile",)
    list_filter = ("is_staff", "is_superuser", "is_active", "profile__role", "date_joined")
    search_fields = ("username", "first_name", "last_name", "email")
    ordering = ("username",)

    @admin.display(description=_("Role"))
    def get_role(self, instance: User) -> Optional[str]:
        try:
            return instance.profile.get_role_display()
        except Profile.DoesNotExist:
            return None

    @admin.display(description=_("XP"))
    def get_xp(self, instance: User) -> Optional[int]:
        try:
            return instance.profile.xp
        except Profile.DoesNotExist:
            return None

    def get_queryset(self, request: HttpRequest) -> QuerySet:
        return super().get_queryset(request).select_related("profile")


admin.site.unregister(User)
admin.site.register(User, UserAdmin)

# --- Quiz Authoring Administration ---


class ChoiceInlineFormSet(BaseInlineFormSet):
    """Applies the QuestionService authoring rules to inline choice edits."""

    def clean(self):
        super().clean()
        if any(self.errors):
            return
        choices = [
            {"choice": form.cleaned_data.get("choice", ""), "is_correct": form.cleaned_data.get("is_correct", False)}
            for form in self.forms
            if form.cleaned_data and not form.cleaned_data.get("DELETE")
        ]
        correct = [c["choice"] for c in choices if c["is_correct"]]
        data = {
            "question_type": self.instance.question_type,
            "choices": choices,
            # identification answers are stored as their correct choice
            "correct_answer": correct[0] if correct else "",
        }
        try:
            QuestionService.validate(data)
        except QuizEngineError as exc:
            raise forms.ValidationError(exc.message)


class ChoiceInline(admin.TabularInline):
    model = Choice
    formset = ChoiceInlineFormSet
    extra = 1
    fields = ("choice", "is_correct")


class QuestionInline(admin.TabularInline):
    model = Question
    extra = 0
    fields = ("question", "question_type", "score", "time", "is_required")
    show_change_link = True


@admin.register(Quiz)
class QuizAdmin(admin.ModelAdmin):
    list_display = ("title", "user", "mode", "total_score", "total_time", "question_count", "created_at")
    list_filter = ("mode", "created_at")
    search_fields = ("title", "description", "user__username")
    readonly_fields = ("total_score", "total_time", "created_at", "updated_at")
    inlines = [QuestionInline]

    fieldsets = (
        (_("Basic Information"), {"fields": ("title", "description", "user", "mode")}),
        (
            _("Derived Totals"),
            {
                "fields": ("total_score", "total_time"),
                "description": _("Recomputed automatically from the questions"),
            },
        ),
        (_("Timestamps"), {"fields": ("created_at", "updated_at"), "classes": ("collapse",)}),
    )

    @admin.display(description=_("Questions"))
    def question_count(self, obj: Quiz) -> int:
        return obj.questions.count()

    def save_related(self, request, form, formsets, change):
        deleted_ids = [f.instance.pk for formset in formsets for f in formset.deleted_forms if f.instance.pk]
        super().save_related(request, form, formsets, change)
        QuestionService().sync_quiz(form.instance, deleted_question_ids=deleted_ids)


@admin.register(Question)
class QuestionAdmin(admin.ModelAdmin):
    list_display = ("__str__", "quiz", "question_type", "score", "time", "is_required")
    list_filter = ("question_type", "is_required", "quiz")
    search_fields = ("question", "quiz__title")
    inlines = [ChoiceInline]

    def save_related(self, request, form, formsets, change):
        super().save_related(request, form, formsets, change)
        QuestionService().sync_question(form.instance)


# --- Participation Administration ---


class AnswerInline(admin.TabularInline):
    model = Answer
    extra = 0
    can_delete = False
    fields = ("question", "answer", "is_correct")
    readonly_fields = fields


@admin.register(Participation)
class ParticipationAdmin(admin.ModelAdmin):
    """Attempts are immutable; the admin only displays them."""

    list_display = ("user", "quiz", "total_score", "xp_earned", "time_taken", "status", "completed_at")
    list_filter = ("status", "quiz", "completed_at")
    search_fields = ("user__username", "quiz__title")
    readonly_fields = (
        "user",
        "quiz",
        "total_score",
        "xp_earned",
        "time_taken",
        "status",
        "completed_at",
        "created_at",
    )
    inlines = [AnswerInline]

    def has_add_permission(self, request: HttpRequest) -> bool:
        return False

    def get_queryset(self, request: HttpRequest) -> QuerySet:
        return super().get_queryset(request).select_related("user", "quiz")


@admin.register(XpHistory)
class XpHistoryAdmin(admin.ModelAdmin):
    list_display = ("user", "source", "source_id", "xp_earned", "description", "created_at")
    list_filter = ("source", "created_at")
    search_fields = ("user__username", "description")
    readonly_fields = ("user", "source", "source_id", "xp_earned", "description", "created_at")

    def has_add_permission(self, request: HttpRequest) -> bool:
        return False

    def has_change_permission(self, request: HttpRequest, obj=None) -> bool:
        return False
