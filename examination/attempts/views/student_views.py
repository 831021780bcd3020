from rest_framework import generics, permissions, status
from rest_framework.views import APIView
from rest_framework.response import Response
from django.shortcuts import get_object_or_404

# Angepasste Importe
from ...exams.models import Exam
from ...exceptions import ExamSessionException, NotSubmitted
from ...services.session import state_machine, answer_store
from ...services.proctoring import violation_handler
from ...services.results import results_service
from ..models import ExamAssignment
from ..permissions import IsAssignmentOwnerOrTeacher, is_teacher
from ..serializers import (
    AssignmentSessionSerializer,
    MyAssignmentSerializer,
    SaveAnswerSerializer,
    SubmitSerializer,
    ViolationReportSerializer,
)
from .base import exam_error_response


def _own_assignment(request, attempt_id):
    return get_object_or_404(
        ExamAssignment.objects.select_related("exam"), pk=attempt_id, student=request.user
    )


class MyExamsView(generics.ListAPIView):
    serializer_class = MyAssignmentSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return ExamAssignment.objects.filter(
            student=self.request.user
        ).select_related('exam').order_by('-assigned_at')


class StartExamView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, exam_id):
        exam = get_object_or_404(Exam, pk=exam_id)
        try:
            assignment = state_machine.start_exam(exam, request.user)
        except ExamSessionException as e:
            return exam_error_response(request, e)

        data = AssignmentSessionSerializer(assignment).data
        return Response(
            {'attempt_id': assignment.id, 'message': 'Prüfung erfolgreich gestartet.', 'attempt': data},
            status=status.HTTP_201_CREATED,
        )


class AttemptSessionView(generics.RetrieveAPIView):
    serializer_class = AssignmentSessionSerializer
    permission_classes = [permissions.IsAuthenticated]
    lookup_url_kwarg = 'attempt_id'

    def get_queryset(self):
        return ExamAssignment.objects.filter(
            student=self.request.user
        ).select_related('exam').prefetch_related('exam__questions__choices', 'answers')


class SaveAnswerView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def put(self, request, attempt_id, question_id):
        assignment = _own_assignment(request, attempt_id)
        serializer = SaveAnswerSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            question = answer_store.get_question(assignment, question_id)
            answers = state_machine.save_answer(assignment, question, serializer.validated_data)
        except ExamSessionException as e:
            return exam_error_response(request, e)

        return Response({
            'question_id': question.id,
            'saved_rows': len(answers),
            'message': 'Antwort gespeichert.',
        }, status=status.HTTP_200_OK)


class SubmitExamView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, attempt_id):
        assignment = _own_assignment(request, attempt_id)
        serializer = SubmitSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        try:
            result = state_machine.submit(
                assignment,
                trigger=data['trigger'],
                violation=data.get('violation'),
                buffered_answers=data.get('answers'),
            )
        except ExamSessionException as e:
            return exam_error_response(request, e)

        attempt = result.assignment
        message = (
            'Prüfung erfolgreich abgegeben.' if result.submitted
            else 'Diese Prüfung wurde bereits abgegeben.'
        )
        return Response({
            'submitted': result.submitted,
            'already_submitted': result.already_submitted,
            'message': message,
            'status': attempt.status,
            'submitted_at': attempt.submitted_at,
            'submission_trigger': attempt.submission_trigger,
            'auto_score': attempt.auto_score,
            'score': attempt.score,
        }, status=status.HTTP_200_OK)


class ReportViolationView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, attempt_id):
        assignment = _own_assignment(request, attempt_id)
        serializer = ViolationReportSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        try:
            outcome = violation_handler.report(
                assignment,
                data['violation_type'],
                details=data.get('details', ''),
                buffered_answers=data.get('answers'),
            )
        except ExamSessionException as e:
            return exam_error_response(request, e)

        return Response(outcome.to_dict(), status=status.HTTP_200_OK)


class AttemptResultsView(APIView):
    permission_classes = [IsAssignmentOwnerOrTeacher]

    def get(self, request, attempt_id):
        assignment = get_object_or_404(ExamAssignment.objects.select_related('exam'), pk=attempt_id)
        self.check_object_permissions(request, assignment)

        if assignment.submitted_at is None and not is_teacher(request.user):
            return exam_error_response(request, NotSubmitted())

        return Response(results_service.get_results(assignment), status=status.HTTP_200_OK)
