from rest_framework import serializers

# Angepasste Importe
from ..exams.serializers import ExamListSerializer, ExamSessionSerializer
from ..services.session import timing_service
from ..services.scoring import scoring_service
from .models import (
    ExamAssignment,
    Answer,
    SecurityViolationLog,
    SubmissionTrigger,
    ViolationKind,
)


class AnswerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Answer
        fields = ["id", "question", "choice", "answer_text", "score", "feedback", "updated_at"]


class AssignmentSessionSerializer(serializers.ModelSerializer):
    """
    Zustand einer Sitzung zum Fortsetzen nach einem Neuladen.

    Die verbleibende Zeit wird bei jedem Abruf serverseitig aus
    ``started_at`` berechnet und ist für den Client nur ein Startwert
    seines Countdowns.
    """

    exam = ExamSessionSerializer(read_only=True)
    answers = serializers.SerializerMethodField()
    timing = serializers.SerializerMethodField()

    class Meta:
        model = ExamAssignment
        fields = [
            "id",
            "exam",
            "status",
            "assigned_at",
            "started_at",
            "submitted_at",
            "forced_submission",
            "submission_trigger",
            "security_violation",
            "answers",
            "timing",
        ]

    def get_answers(self, obj):
        # Korrekturen werden erst mit den Ergebnissen sichtbar
        return [
            {"question": a.question_id, "choice": a.choice_id, "answer_text": a.answer_text}
            for a in obj.answers.all()
        ]

    def get_timing(self, obj):
        return timing_service.get_session_timing(obj)


class MyAssignmentSerializer(serializers.ModelSerializer):
    exam = ExamListSerializer(read_only=True)
    remaining_seconds = serializers.SerializerMethodField()

    class Meta:
        model = ExamAssignment
        fields = [
            "id",
            "exam",
            "status",
            "assigned_at",
            "started_at",
            "submitted_at",
            "graded_at",
            "auto_score",
            "score",
            "remaining_seconds",
        ]

    def get_remaining_seconds(self, obj):
        return timing_service.calculate_remaining_seconds(obj)


class SaveAnswerSerializer(serializers.Serializer):
    choice_id = serializers.IntegerField(required=False, allow_null=True)
    choice_ids = serializers.ListField(child=serializers.IntegerField(), required=False)
    text = serializers.CharField(required=False, allow_blank=True, allow_null=True, trim_whitespace=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Provide 'choice_id', 'choice_ids' or 'text'.")
        return attrs


class SubmitSerializer(serializers.Serializer):
    trigger = serializers.ChoiceField(choices=SubmissionTrigger.choices, default=SubmissionTrigger.MANUAL)
    violation = serializers.ChoiceField(choices=ViolationKind.choices, required=False, allow_null=True)
    # Zwischengespeicherte Antworten werden erst im Service geprüft
    answers = serializers.ListField(child=serializers.DictField(), required=False)

    def validate(self, attrs):
        if attrs.get("trigger") == SubmissionTrigger.VIOLATION and not attrs.get("violation"):
            raise serializers.ValidationError({"violation": "Required for violation submissions."})
        return attrs


class ViolationReportSerializer(serializers.Serializer):
    violation_type = serializers.CharField()
    details = serializers.CharField(required=False, allow_blank=True, default="")
    answers = serializers.ListField(child=serializers.DictField(), required=False)


class GradeEntrySerializer(serializers.Serializer):
    question_id = serializers.IntegerField()
    # Zahl oder numerischer String; die Normalisierung übernimmt der Service
    score = serializers.CharField()
    feedback = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class GradeSubmissionSerializer(serializers.Serializer):
    question_id = serializers.IntegerField(required=False)
    score = serializers.CharField(required=False)
    feedback = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    scores = GradeEntrySerializer(many=True, required=False)
    teacher_notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate(self, attrs):
        single = "question_id" in attrs
        if single and "score" not in attrs:
            raise serializers.ValidationError({"score": "This field is required."})
        if not single and not attrs.get("scores"):
            raise serializers.ValidationError("Provide 'question_id' and 'score' or a list of 'scores'.")
        return attrs

    def get_grades(self):
        data = self.validated_data
        if "question_id" in data:
            return [{
                "question_id": data["question_id"],
                "score": data["score"],
                "feedback": data.get("feedback"),
            }]
        return list(data["scores"])


class TeacherSubmissionSerializer(serializers.ModelSerializer):
    exam_title = serializers.CharField(source="exam.title", read_only=True)
    student = serializers.CharField(source="student.username", read_only=True)
    pending_question_ids = serializers.SerializerMethodField()

    class Meta:
        model = ExamAssignment
        fields = [
            "id",
            "exam",
            "exam_title",
            "student",
            "status",
            "submitted_at",
            "auto_score",
            "forced_submission",
            "submission_trigger",
            "security_violation",
            "pending_question_ids",
        ]

    def get_pending_question_ids(self, obj):
        return scoring_service.pending_manual_question_ids(obj)


class SecurityViolationLogSerializer(serializers.ModelSerializer):
    class Meta:
        model = SecurityViolationLog
        fields = ["id", "kind", "details", "critical", "terminated_session", "reported_at"]


class AssignExamSerializer(serializers.Serializer):
    student_ids = serializers.ListField(child=serializers.IntegerField(), required=False)
    group_ids = serializers.ListField(child=serializers.IntegerField(), required=False)

    def validate(self, attrs):
        if not attrs.get("student_ids") and not attrs.get("group_ids"):
            raise serializers.ValidationError("Provide 'student_ids' and/or 'group_ids'.")
        return attrs
