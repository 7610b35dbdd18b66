from django.conf import settings
from django.shortcuts import get_object_or_404
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from ...mixins import QuizEngineErrorMixin
from ...quizzes.models import Quiz
from ...users.models import Role
from ...users.permissions import IsLearner
from ..listings import get_quizzes_available, get_quizzes_taken
from ..models import Participation
from ..recorder import ParticipationRecorder
from ..results import build_attempt_result, build_result_history
from ..serializers import SubmissionSerializer, XpPreviewSerializer
from ..xp import xp_breakdown


class SubmitQuizView(QuizEngineErrorMixin, APIView):
    """Submit the answers of a quiz. Every learner can submit each quiz once."""

    permission_classes = [IsLearner]

    def post(self, request, quiz_id):
        serializer = SubmissionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = ParticipationRecorder().submit(
            request.user,
            quiz_id,
            serializer.validated_data["answers"],
            time_taken=serializer.validated_data.get("time_taken"),
        )
        payload = result.to_dict()
        payload["message"] = f"Quiz submitted successfully! You earned {result.xp_earned} XP."
        return Response(payload, status=status.HTTP_201_CREATED)


class MyQuizzesView(QuizEngineErrorMixin, APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(
            {
                "quizzes_taken": get_quizzes_taken(request.user),
                "quizzes_available": get_quizzes_available(request.user),
            }
        )


class AttemptResultView(QuizEngineErrorMixin, APIView):
    """
    Detailed result of one participation. Learners only see their own
    attempts; instructors and admins see all of them.
    """

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        participation = get_object_or_404(
            Participation.objects.select_related("quiz", "user").prefetch_related("answers"),
            pk=pk,
        )
        role = self.viewer_role
        if participation.user_id != request.user.id and role not in (Role.ADMIN, Role.INSTRUCTOR):
            self.permission_denied(request, message="You can only view your own results.")
        return Response(build_attempt_result(participation, viewer=request.user, viewer_role=role))


class MyResultsView(QuizEngineErrorMixin, APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        default_page_size = getattr(settings, "QUIZ_RESULTS_PAGE_SIZE", 10)
        try:
            per_page = max(1, min(int(request.query_params.get("per_page", default_page_size)), 100))
        except ValueError:
            per_page = default_page_size
        page = request.query_params.get("page", 1)
        return Response(build_result_history(request.user, request.user, self.viewer_role, page=page, per_page=per_page))


class XpPreviewView(QuizEngineErrorMixin, APIView):
    """XP breakdown for a hypothetical result, without recording anything."""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, quiz_id):
        quiz = get_object_or_404(Quiz, pk=quiz_id)
        serializer = XpPreviewSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        return Response(
            xp_breakdown(
                quiz_total_score=quiz.total_score,
                quiz_total_time=quiz.total_time,
                total_score=data["total_score"],
                correct_count=data["correct_answers"],
                total_questions=data["total_questions"],
            )
        )
