from rest_framework import serializers


class SubmissionSerializer(serializers.Serializer):
    """
    Quiz submission payload. Answer values are checked per question type by
    the recorder, so each answer is accepted here as a plain dict.
    """

    answers = serializers.ListField(child=serializers.DictField(), allow_empty=True)
    time_taken = serializers.IntegerField(min_value=0, required=False, allow_null=True, default=None)


class XpPreviewSerializer(serializers.Serializer):
    total_score = serializers.IntegerField(min_value=0)
    correct_answers = serializers.IntegerField(min_value=0)
    total_questions = serializers.IntegerField(min_value=1)

    def validate(self, attrs):
        if attrs["correct_answers"] > attrs["total_questions"]:
            raise serializers.ValidationError("correct_answers cannot exceed total_questions.")
        return attrs
