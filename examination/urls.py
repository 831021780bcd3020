"""
URL configuration for the examination app.

All routes are mounted under ``/api/exams/``.

Author: Exam Platform Development Team
Version: 1.0.0
"""

from django.urls import path

from .attempts.views import (
    # Student
    MyExamsView,
    StartExamView,
    AttemptSessionView,
    SaveAnswerView,
    SubmitExamView,
    ReportViolationView,
    AttemptResultsView,
    # Teacher
    AssignExamView,
    UnassignExamView,
    TeacherSubmissionsListView,
    TeacherGradeAttemptView,
    RecalculateExamScoresView,
    ViolationHistoryView,
    ExamStatisticsView,
)

app_name = "examination"

urlpatterns = [
    # --- Student ---
    path("my-exams/", MyExamsView.as_view(), name="my-exams"),
    path("<int:exam_id>/start/", StartExamView.as_view(), name="start-exam"),
    path("attempts/<int:attempt_id>/", AttemptSessionView.as_view(), name="attempt-session"),
    path(
        "attempts/<int:attempt_id>/answers/<int:question_id>/",
        SaveAnswerView.as_view(),
        name="save-answer",
    ),
    path("attempts/<int:attempt_id>/submit/", SubmitExamView.as_view(), name="submit-exam"),
    path(
        "attempts/<int:attempt_id>/violations/",
        ReportViolationView.as_view(),
        name="report-violation",
    ),
    path("attempts/<int:attempt_id>/results/", AttemptResultsView.as_view(), name="attempt-results"),
    # --- Teacher ---
    path("<int:exam_id>/assign/", AssignExamView.as_view(), name="assign-exam"),
    path("assignments/<int:assignment_id>/", UnassignExamView.as_view(), name="unassign-exam"),
    path("teacher/submissions/", TeacherSubmissionsListView.as_view(), name="teacher-submissions"),
    path(
        "teacher/attempts/<int:attempt_id>/grade/",
        TeacherGradeAttemptView.as_view(),
        name="teacher-grade-attempt",
    ),
    path(
        "teacher/attempts/<int:attempt_id>/violations/",
        ViolationHistoryView.as_view(),
        name="violation-history",
    ),
    path("<int:exam_id>/recalculate/", RecalculateExamScoresView.as_view(), name="recalculate-scores"),
    path("<int:exam_id>/statistics/", ExamStatisticsView.as_view(), name="exam-statistics"),
]
