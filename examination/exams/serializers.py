from rest_framework import serializers

# Angepasste Importe
from .models import Exam, Question, Choice


class ChoiceSerializer(serializers.ModelSerializer):
    """Antwortoption ohne Korrektheits-Flag (Sicht der Studierenden)."""

    class Meta:
        model = Choice
        fields = ["id", "content", "order"]


class QuestionSerializer(serializers.ModelSerializer):
    choices = ChoiceSerializer(many=True, read_only=True)

    class Meta:
        model = Question
        fields = ["id", "type", "content", "points", "order", "choices"]


class ExamListSerializer(serializers.ModelSerializer):
    max_score = serializers.DecimalField(max_digits=7, decimal_places=2, read_only=True)
    question_count = serializers.SerializerMethodField()

    class Meta:
        model = Exam
        fields = [
            "id",
            "title",
            "description",
            "duration_minutes",
            "start_time",
            "end_time",
            "is_active",
            "max_score",
            "question_count",
        ]

    def get_question_count(self, obj):
        return obj.questions.count()


class ExamSessionSerializer(serializers.ModelSerializer):
    """Prüfungsinhalt für eine laufende Sitzung inkl. Monitor-Konfiguration."""

    questions = QuestionSerializer(many=True, read_only=True)
    security_features = serializers.SerializerMethodField()

    class Meta:
        model = Exam
        fields = [
            "id",
            "title",
            "description",
            "duration_minutes",
            "end_time",
            "questions",
            "security_features",
        ]

    def get_security_features(self, obj):
        return obj.security_features.to_client_dict()
