from dataclasses import asdict

from django.shortcuts import get_object_or_404
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from ...mixins import QuizEngineErrorMixin
from ...services.cache import get_quiz_cache
from ...users.models import Role
from ...users.permissions import IsInstructorOrAdmin
from ..models import Question, Quiz
from ..serializers import QuestionSerializer, QuestionWriteSerializer, QuizSerializer
from ..services import QuestionService


def _check_quiz_owner(view, request, quiz: Quiz) -> None:
    """Instructors may only change their own quizzes; admins may change all."""
    if view.viewer_role != Role.ADMIN and quiz.user_id != request.user.id:
        view.permission_denied(request, message="You can only manage your own quizzes.")


class QuizListCreateView(QuizEngineErrorMixin, generics.ListCreateAPIView):
    serializer_class = QuizSerializer
    permission_classes = [IsInstructorOrAdmin]

    def get_queryset(self):
        queryset = Quiz.objects.select_related("user").order_by("-created_at", "id")
        if self.viewer_role == Role.ADMIN:
            return queryset
        return queryset.filter(user=self.request.user)

    def perform_create(self, serializer):
        serializer.save(user=self.request.user)


class QuizDetailView(QuizEngineErrorMixin, generics.RetrieveUpdateDestroyAPIView):
    serializer_class = QuizSerializer
    permission_classes = [IsInstructorOrAdmin]
    queryset = Quiz.objects.select_related("user")

    def get_object(self):
        quiz = super().get_object()
        _check_quiz_owner(self, self.request, quiz)
        return quiz

    def perform_update(self, serializer):
        quiz = serializer.save()
        get_quiz_cache().forget_quiz(quiz.id)

    def perform_destroy(self, instance):
        quiz_id = instance.id
        instance.delete()
        get_quiz_cache().forget_quiz(quiz_id)


class QuizQuestionsView(QuizEngineErrorMixin, APIView):
    """
    GET: quiz with its questions for taking the quiz (no correctness flags).
    POST: create a question (quiz owner or admin).
    """

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsInstructorOrAdmin()]
        return [permissions.IsAuthenticated()]

    def get(self, request, quiz_id):
        return Response(QuestionService().get_quiz_payload(quiz_id))

    def post(self, request, quiz_id):
        quiz = get_object_or_404(Quiz, pk=quiz_id)
        _check_quiz_owner(self, request, quiz)
        serializer = QuestionWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        question = QuestionService().create_question(quiz, serializer.validated_data)
        return Response(QuestionSerializer(question).data, status=status.HTTP_201_CREATED)


class QuestionDetailView(QuizEngineErrorMixin, APIView):
    permission_classes = [IsInstructorOrAdmin]

    def _get_question(self, request, pk) -> Question:
        question = get_object_or_404(Question.objects.select_related("quiz"), pk=pk)
        _check_quiz_owner(self, request, question.quiz)
        return question

    def get(self, request, pk):
        question = self._get_question(request, pk)
        return Response(asdict(QuestionService().get_question(question.id)))

    def put(self, request, pk):
        question = self._get_question(request, pk)
        serializer = QuestionWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        question = QuestionService().update_question(question, serializer.validated_data)
        return Response(QuestionSerializer(question).data)

    def delete(self, request, pk):
        question = self._get_question(request, pk)
        QuestionService().delete_question(question)
        return Response(status=status.HTTP_204_NO_CONTENT)
