"""
Examination Django Admin Configuration

This module provides the Django admin interface for the proctored exam
models. Teachers author exams with their questions and choices inline;
attempts, answers and the security violation log are available for
review.

The admin interface is organized into logical sections:
- Exam Authoring: Exams, questions and choices
- Attempt Review: Assignments, answers and grading state
- Proctoring: Security violation audit log (read-only)

Author: Exam Platform Development Team
Version: 1.0.0
"""

from typing import Optional
from django.contrib import admin, messages
from django.utils.translation import gettext_lazy as _
from django.db.models import QuerySet
from django.http import HttpRequest

# Import all models from the central models registry
from .models import (
    Exam,
    Question,
    Choice,
    ExamAssignment,
    Answer,
    SecurityViolationLog,
)
from .services.scoring import scoring_service

# --- Exam Authoring Administration ---


class QuestionInline(admin.TabularInline):
    """Inline admin for exam question management."""

    model = Question
    extra = 1
    fields = ("order", "type", "content", "points")
    show_change_link = True


class ChoiceInline(admin.TabularInline):
    """Inline admin for answer choice management."""

    model = Choice
    extra = 2
    fields = ("order", "content", "is_correct")


@admin.register(Exam)
class ExamAdmin(admin.ModelAdmin):
    """
    Administration interface for examination management.

    Provides exam creation including question definition, time window
    and monitor configuration.
    """

    list_display = (
        "title",
        "is_active",
        "duration_minutes",
        "start_time",
        "end_time",
        "total_max_points",
        "created_at",
    )
    list_filter = ("is_active", "created_at")
    search_fields = ("title", "description")
    inlines = [QuestionInline]
    actions = ["recalculate_scores"]

    fieldsets = (
        (
            _("Basic Information"),
            {"fields": ("title", "description", "duration_minutes", "is_active", "created_by")},
        ),
        (
            _("Time Window"),
            {
                "fields": ("start_time", "end_time"),
                "description": _("Leave empty for an exam without time restriction"),
            },
        ),
        (
            _("Proctoring"),
            {"fields": ("security_settings",), "classes": ("collapse",)},
        ),
    )

    readonly_fields = ("created_at", "updated_at")

    @admin.display(description=_("Total Points"))
    def total_max_points(self, obj: Exam) -> int:
        """Calculate and display total maximum points for the exam."""
        return sum(question.points for question in obj.questions.all())

    @admin.action(description=_("Recalculate scores of submitted attempts"))
    def recalculate_scores(self, request: HttpRequest, queryset: QuerySet) -> None:
        updated = sum(scoring_service.recalculate_exam_scores(exam) for exam in queryset)
        self.message_user(request, f"{updated} Versuche neu berechnet.", messages.SUCCESS)

    def get_queryset(self, request: HttpRequest) -> QuerySet:
        """Optimize queryset with related object prefetch."""
        return super().get_queryset(request).prefetch_related("questions")


@admin.register(Question)
class QuestionAdmin(admin.ModelAdmin):
    """Administration interface for questions with their choices."""

    list_display = ("content", "exam", "type", "points", "order")
    list_filter = ("type", "exam")
    search_fields = ("content", "exam__title")
    autocomplete_fields = ("exam",)
    inlines = [ChoiceInline]

    fieldsets = (
        (_("Question"), {"fields": ("exam", "type", "content")}),
        (_("Scoring"), {"fields": ("points", "order")}),
    )


# --- Attempt Review Administration ---


class AnswerInline(admin.TabularInline):
    """Inline admin for the answers of an attempt."""

    model = Answer
    extra = 0
    fields = ("question", "choice", "answer_text", "score", "feedback")
    readonly_fields = ("question", "choice", "answer_text")

    def has_add_permission(self, request: HttpRequest, obj: Optional[ExamAssignment] = None) -> bool:
        return False


class SecurityViolationLogInline(admin.TabularInline):
    """Read-only inline of the violations reported for an attempt."""

    model = SecurityViolationLog
    extra = 0
    fields = ("kind", "critical", "terminated_session", "details", "reported_at")
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request: HttpRequest, obj: Optional[ExamAssignment] = None) -> bool:
        return False


@admin.register(ExamAssignment)
class ExamAssignmentAdmin(admin.ModelAdmin):
    """
    Administration interface for exam attempts.

    Timestamps and scores are written by the session services only and
    are therefore read-only here.
    """

    list_display = (
        "student",
        "exam",
        "status",
        "started_at",
        "submitted_at",
        "auto_score",
        "score",
        "forced_submission",
        "security_violation",
    )
    list_filter = ("status", "forced_submission", "submission_trigger", "security_violation", "exam")
    search_fields = ("student__username", "student__email", "exam__title")
    readonly_fields = (
        "status",
        "assigned_at",
        "started_at",
        "submitted_at",
        "graded_at",
        "due_date",
        "processing_time_seconds",
        "auto_score",
        "score",
        "forced_submission",
        "submission_trigger",
        "security_violation",
    )
    autocomplete_fields = ("student", "exam", "assigned_by", "graded_by")

    fieldsets = (
        (_("Assignment"), {"fields": ("student", "exam", "assigned_by", "status")}),
        (
            _("Timestamps"),
            {
                "fields": (
                    "assigned_at",
                    "started_at",
                    "submitted_at",
                    "graded_at",
                    "due_date",
                    "processing_time_seconds",
                ),
                "classes": ("collapse",),
            },
        ),
        (
            _("Submission"),
            {"fields": ("forced_submission", "submission_trigger", "security_violation")},
        ),
        (_("Grading"), {"fields": ("auto_score", "score", "teacher_notes", "graded_by")}),
    )

    inlines = [AnswerInline, SecurityViolationLogInline]

    def get_queryset(self, request: HttpRequest) -> QuerySet:
        """Optimize queryset with related object prefetch."""
        return (
            super()
            .get_queryset(request)
            .select_related("student", "exam", "graded_by")
        )


# --- Proctoring Administration ---


@admin.register(SecurityViolationLog)
class SecurityViolationLogAdmin(admin.ModelAdmin):
    """Append-only audit log; entries cannot be created or edited here."""

    list_display = ("assignment", "kind", "critical", "terminated_session", "reported_at")
    list_filter = ("kind", "critical", "terminated_session")
    search_fields = ("assignment__student__username", "assignment__exam__title", "details")
    readonly_fields = ("assignment", "kind", "details", "critical", "terminated_session", "reported_at")

    def has_add_permission(self, request: HttpRequest) -> bool:
        return False

    def has_change_permission(self, request: HttpRequest, obj: Optional[SecurityViolationLog] = None) -> bool:
        return False
