"""
E-Learning Application URL Configuration

This module defines the URL routing structure of the quiz application.
Each functional area (quizzes, participation, analytics) has its own URL
namespace.

URL Structure:
- /token/: Authentication endpoints (JWT token management)
- /quizzes/: Quiz authoring and quiz taking
- /participations/: Submissions, results and learner history
- /analytics/: Instructor and admin reports

Author: DSP Development Team
Version: 1.0.0
"""

from typing import List

from django.urls import URLPattern, include, path
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView, TokenVerifyView

from .analytics import views as analytics_views
from .participation import views as participation_views
from .quizzes import views as quiz_views

app_name = "elearning"

# --- Quiz Authoring and Quiz Taking ---

quizzes_urlpatterns: List[URLPattern] = [
    path("", quiz_views.QuizListCreateView.as_view(), name="quiz-list-create"),
    path("<int:pk>/", quiz_views.QuizDetailView.as_view(), name="quiz-detail"),
    # GET: questions for taking the quiz, POST: create question
    path("<int:quiz_id>/questions/", quiz_views.QuizQuestionsView.as_view(), name="quiz-questions"),
    path("questions/<int:pk>/", quiz_views.QuestionDetailView.as_view(), name="question-detail"),
    # Submission and XP preview
    path("<int:quiz_id>/participations/", participation_views.SubmitQuizView.as_view(), name="quiz-submit"),
    path("<int:quiz_id>/xp-preview/", participation_views.XpPreviewView.as_view(), name="quiz-xp-preview"),
    # Analytics per quiz
    path("<int:quiz_id>/analytics/", analytics_views.QuizAnalyticsView.as_view(), name="quiz-analytics"),
    path(
        "<int:quiz_id>/analytics/realtime/",
        analytics_views.RealtimeAnalyticsView.as_view(),
        name="quiz-analytics-realtime",
    ),
    path(
        "<int:quiz_id>/analytics/export/<str:export_format>/",
        analytics_views.ExportAnalyticsView.as_view(),
        name="quiz-analytics-export",
    ),
    path(
        "<int:quiz_id>/analytics/clear-cache/",
        analytics_views.clear_analytics_cache,
        name="quiz-analytics-clear-cache",
    ),
]

# --- Learner Participation ---

participations_urlpatterns: List[URLPattern] = [
    path("my-quizzes/", participation_views.MyQuizzesView.as_view(), name="my-quizzes"),
    path("mine/", participation_views.MyResultsView.as_view(), name="my-results"),
    path("<int:pk>/results/", participation_views.AttemptResultView.as_view(), name="attempt-results"),
]

# --- Cross-Quiz Analytics ---

analytics_urlpatterns: List[URLPattern] = [
    path("compare/", analytics_views.compare_quizzes, name="compare"),
]

# --- Main URL Configuration for E-Learning Application ---

urlpatterns: List[URLPattern] = [
    path("token/", TokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("token/verify/", TokenVerifyView.as_view(), name="token_verify"),
    path("quizzes/", include((quizzes_urlpatterns, "quizzes"))),
    path("participations/", include((participations_urlpatterns, "participations"))),
    path("analytics/", include((analytics_urlpatterns, "analytics"))),
]
