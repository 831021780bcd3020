from rest_framework import generics, status
from rest_framework.views import APIView
from rest_framework.response import Response
from django.shortcuts import get_object_or_404

# Angepasste Importe
from ...exams.models import Exam
from ...exceptions import ExamSessionException
from ...services.session import state_machine
from ...services.scoring import scoring_service
from ...services.proctoring import violation_handler
from ...services.distribution import distribution_service
from ...services.results import results_service
from ..models import ExamAssignment
from ..permissions import IsTeacher
from ..serializers import (
    AssignExamSerializer,
    GradeSubmissionSerializer,
    SecurityViolationLogSerializer,
    TeacherSubmissionSerializer,
)
from .base import exam_error_response


class AssignExamView(APIView):
    permission_classes = [IsTeacher]

    def post(self, request, exam_id):
        exam = get_object_or_404(Exam, pk=exam_id)
        serializer = AssignExamSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = distribution_service.assign(
            exam,
            student_ids=serializer.validated_data.get('student_ids'),
            group_ids=serializer.validated_data.get('group_ids'),
            assigned_by=request.user,
        )
        return Response({
            'created': result.created_count,
            'existing': result.existing,
            'assignment_ids': [a.id for a in result.created],
            'message': 'Prüfung erfolgreich zugewiesen.',
        }, status=status.HTTP_201_CREATED if result.created else status.HTTP_200_OK)


class UnassignExamView(APIView):
    permission_classes = [IsTeacher]

    def delete(self, request, assignment_id):
        assignment = get_object_or_404(ExamAssignment, pk=assignment_id)
        try:
            distribution_service.unassign(assignment)
        except ExamSessionException as e:
            return exam_error_response(request, e)
        return Response(status=status.HTTP_204_NO_CONTENT)


class TeacherSubmissionsListView(generics.ListAPIView):
    serializer_class = TeacherSubmissionSerializer
    permission_classes = [IsTeacher]

    def get_queryset(self):
        queryset = ExamAssignment.objects.filter(
            status=ExamAssignment.Status.SUBMITTED
        ).select_related('student', 'exam').order_by('submitted_at')
        exam_id = self.request.query_params.get('exam')
        if exam_id:
            queryset = queryset.filter(exam_id=exam_id)
        return queryset


class TeacherGradeAttemptView(APIView):
    permission_classes = [IsTeacher]

    def post(self, request, attempt_id):
        assignment = get_object_or_404(ExamAssignment.objects.select_related('exam'), pk=attempt_id)
        serializer = GradeSubmissionSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            assignment = state_machine.grade_batch(
                assignment,
                serializer.get_grades(),
                teacher_notes=serializer.validated_data.get('teacher_notes'),
                graded_by=request.user,
            )
        except ExamSessionException as e:
            return exam_error_response(request, e)

        return Response({
            'message': 'Bewertung erfolgreich gespeichert.',
            'status': assignment.status,
            'score': assignment.score,
            'pending_question_ids': scoring_service.pending_manual_question_ids(assignment),
        }, status=status.HTTP_200_OK)


class RecalculateExamScoresView(APIView):
    permission_classes = [IsTeacher]

    def post(self, request, exam_id):
        exam = get_object_or_404(Exam, pk=exam_id)
        updated = scoring_service.recalculate_exam_scores(exam)
        return Response({
            'updated': updated,
            'message': f'{updated} Versuche neu berechnet.',
        }, status=status.HTTP_200_OK)


class ViolationHistoryView(APIView):
    permission_classes = [IsTeacher]

    def get(self, request, attempt_id):
        assignment = get_object_or_404(ExamAssignment, pk=attempt_id)
        history = violation_handler.get_violation_history(assignment)
        return Response({
            'attempt_id': assignment.id,
            'security_violation': assignment.security_violation,
            'violations': SecurityViolationLogSerializer(history, many=True).data,
        }, status=status.HTTP_200_OK)


class ExamStatisticsView(APIView):
    permission_classes = [IsTeacher]

    def get(self, request, exam_id):
        exam = get_object_or_404(Exam, pk=exam_id)
        return Response(results_service.get_completion_stats(exam), status=status.HTTP_200_OK)
