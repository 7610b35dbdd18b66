from rest_framework import serializers


class CompareSerializer(serializers.Serializer):
    quiz_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), min_length=2, max_length=5)
