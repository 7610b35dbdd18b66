"""
Quiz Analytics Views

API endpoints for instructors and admins:
- GET  /quizzes/<id>/analytics/                 - Full (cached) analytics report
- GET  /quizzes/<id>/analytics/realtime/        - Live stats and recent attempts
- GET  /quizzes/<id>/analytics/export/<format>/ - Report export (json, csv, excel)
- POST /quizzes/<id>/analytics/clear-cache/     - Drop the cached report
- POST /analytics/compare/                      - Side by side stats of 2-5 quizzes

Learner names are masked for every viewer except admins.

Author: DSP Development Team
Version: 1.0.0
"""

import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.views import APIView

from ...mixins import QuizEngineErrorMixin
from ...participation.exceptions import QuizEngineError
from ...participation.results import quiz_masking_strategy
from ...users.models import get_user_role
from ...users.permissions import IsInstructorOrAdmin
from ..exporters import get_export_sink
from ..masking import mask_report
from ..serializers import CompareSerializer
from ..service import QuizAnalyticsService

logger = logging.getLogger(__name__)


class QuizAnalyticsView(QuizEngineErrorMixin, APIView):
    permission_classes = [IsInstructorOrAdmin]

    def get(self, request, quiz_id):
        service = QuizAnalyticsService()
        quiz = service.get_quiz(quiz_id)
        report = mask_report(service.get_analytics(quiz), self.viewer_role)
        return Response(
            {
                "quiz": {
                    "id": quiz.id,
                    "title": quiz.title,
                    "description": quiz.description,
                    "mode": quiz.mode,
                    "total_score": quiz.total_score,
                    "total_time": quiz.total_time,
                },
                "analytics": report,
            }
        )


class RealtimeAnalyticsView(QuizEngineErrorMixin, APIView):
    permission_classes = [IsInstructorOrAdmin]

    def get(self, request, quiz_id):
        service = QuizAnalyticsService()
        quiz = service.get_quiz(quiz_id)
        # numbered over all participants, not only the recent slice
        strategy = quiz_masking_strategy(quiz.id)
        return Response(mask_report(service.get_realtime_analytics(quiz), self.viewer_role, strategy=strategy))


class ExportAnalyticsView(QuizEngineErrorMixin, APIView):
    """Exports always use a freshly built report, masked before rendering."""

    permission_classes = [IsInstructorOrAdmin]

    def get(self, request, quiz_id, export_format):
        sink = get_export_sink(export_format)
        service = QuizAnalyticsService()
        quiz = service.get_quiz(quiz_id)
        report = mask_report(service.generate_report(quiz), self.viewer_role)
        logger.info(f"Analytics export of quiz {quiz.id} as {export_format} by user {request.user.id}")
        return sink.render(quiz, report)


@api_view(["POST"])
@permission_classes([IsInstructorOrAdmin])
def clear_analytics_cache(request, quiz_id):
    service = QuizAnalyticsService()
    try:
        quiz = service.get_quiz(quiz_id)
    except QuizEngineError as e:
        return Response(e.to_dict(), status=e.status_code)
    service.invalidate(quiz.id)
    return Response({"message": "Analytics cache cleared successfully"}, status=status.HTTP_200_OK)


@api_view(["POST"])
@permission_classes([IsInstructorOrAdmin])
def compare_quizzes(request):
    """
    Compare participation stats and difficulty of several quizzes.

    Request Body:
    {
        "quiz_ids": [1, 2, 3]   // 2 to 5 quiz ids
    }
    """
    serializer = CompareSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    try:
        comparison = QuizAnalyticsService().compare(serializer.validated_data["quiz_ids"])
    except QuizEngineError as e:
        return Response(e.to_dict(), status=e.status_code)
    logger.debug(f"Compared quizzes {serializer.validated_data['quiz_ids']} for {get_user_role(request.user)}")
    return Response(comparison)
