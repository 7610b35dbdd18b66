from rest_framework import serializers

from .models import Choice, Question, QuestionType, Quiz


class QuizSerializer(serializers.ModelSerializer):
    creator = serializers.CharField(source="user.username", read_only=True)
    question_count = serializers.IntegerField(source="questions.count", read_only=True)

    class Meta:
        model = Quiz
        fields = [
            "id",
            "title",
            "description",
            "mode",
            "total_score",
            "total_time",
            "creator",
            "question_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["total_score", "total_time", "created_at", "updated_at"]


class ChoiceInputSerializer(serializers.Serializer):
    choice = serializers.CharField(max_length=500, allow_blank=True)
    is_correct = serializers.BooleanField(default=False)


class QuestionWriteSerializer(serializers.Serializer):
    """Input for creating and updating questions through the QuestionService."""

    question = serializers.CharField()
    question_type = serializers.ChoiceField(choices=QuestionType.choices)
    score = serializers.IntegerField(min_value=0, default=1)
    time = serializers.IntegerField(min_value=0, required=False, allow_null=True, default=None)
    is_required = serializers.BooleanField(default=False)
    choices = ChoiceInputSerializer(many=True, required=False, default=list)
    correct_answer = serializers.CharField(required=False, allow_blank=True, default="")


class ChoiceSerializer(serializers.ModelSerializer):
    class Meta:
        model = Choice
        fields = ["id", "choice", "is_correct"]


class QuestionSerializer(serializers.ModelSerializer):
    """Full question including correctness flags, for authors only."""

    choices = ChoiceSerializer(many=True, read_only=True)

    class Meta:
        model = Question
        fields = ["id", "quiz", "question", "question_type", "score", "time", "is_required", "choices"]
