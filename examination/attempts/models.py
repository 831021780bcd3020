import datetime
from typing import Optional

from django.db import models
from django.conf import settings
from django.utils.translation import gettext_lazy as _

from ..exams import security
from ..exams.models import Exam, Question, Choice

User = settings.AUTH_USER_MODEL


class SubmissionTrigger(models.TextChoices):
    MANUAL = "manual", _("Manual")
    TIMEOUT = "timeout", _("Timeout")
    VIOLATION = "violation", _("Security violation")


FORCED_TRIGGERS = frozenset({SubmissionTrigger.TIMEOUT.value, SubmissionTrigger.VIOLATION.value})


class ViolationKind(models.TextChoices):
    TAB_SWITCH = security.TAB_SWITCH, _("Tab switch")
    FULLSCREEN_EXIT = security.FULLSCREEN_EXIT, _("Fullscreen exit")
    DEVTOOLS_OPENED = security.DEVTOOLS_OPENED, _("Developer tools opened")
    COPY_PASTE = security.COPY_PASTE, _("Copy / paste")
    RIGHT_CLICK = security.RIGHT_CLICK, _("Right click")
    PRINT_ATTEMPT = security.PRINT_ATTEMPT, _("Print attempt")
    IDLE_TIMEOUT = security.IDLE_TIMEOUT, _("Idle timeout")


class ExamAssignment(models.Model):
    class Status(models.TextChoices):
        ASSIGNED = "assigned", _("Zugewiesen")
        STARTED = "started", _("Gestartet")
        SUBMITTED = "submitted", _("Abgegeben")
        GRADED = "graded", _("Bewertet")

    exam = models.ForeignKey(Exam, on_delete=models.CASCADE, related_name="assignments")
    student = models.ForeignKey(
        User, on_delete=models.CASCADE, related_name="exam_assignments"
    )
    assigned_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="distributed_exam_assignments",
    )
    status = models.CharField(
        max_length=15, choices=Status.choices, default=Status.ASSIGNED
    )
    assigned_at = models.DateTimeField(auto_now_add=True)
    started_at = models.DateTimeField(null=True, blank=True)
    submitted_at = models.DateTimeField(null=True, blank=True)
    graded_at = models.DateTimeField(null=True, blank=True)
    auto_score = models.DecimalField(
        max_digits=7,
        decimal_places=2,
        null=True,
        blank=True,
        help_text=_("Punkte der automatisch korrigierbaren Fragen."),
    )
    score = models.DecimalField(
        max_digits=7,
        decimal_places=2,
        null=True,
        blank=True,
        help_text=_("Gesamtpunktzahl. Wird nach Abschluss der Bewertung berechnet."),
    )
    forced_submission = models.BooleanField(default=False)
    submission_trigger = models.CharField(
        max_length=10, choices=SubmissionTrigger.choices, null=True, blank=True
    )
    security_violation = models.CharField(
        max_length=20, choices=ViolationKind.choices, null=True, blank=True
    )
    teacher_notes = models.TextField(blank=True, null=True)
    graded_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="graded_exam_assignments",
    )

    class Meta:
        verbose_name = _("Exam Assignment")
        verbose_name_plural = _("Exam Assignments")
        unique_together = ("exam", "student")
        ordering = ["-assigned_at"]

    def __str__(self):
        return f"Assignment of {self.exam.title} to {self.student}"

    @property
    def is_started(self) -> bool:
        return self.started_at is not None

    @property
    def is_submitted(self) -> bool:
        return self.submitted_at is not None

    @property
    def is_in_progress(self) -> bool:
        return self.started_at is not None and self.submitted_at is None

    @property
    def due_date(self) -> Optional[datetime.datetime]:
        if self.started_at and self.exam and self.exam.duration_minutes:
            return self.started_at + datetime.timedelta(minutes=self.exam.duration_minutes)
        return None

    @property
    def processing_time_seconds(self) -> Optional[int]:
        if self.started_at and self.submitted_at:
            return int((self.submitted_at - self.started_at).total_seconds())
        return None


class Answer(models.Model):
    assignment = models.ForeignKey(
        ExamAssignment, on_delete=models.CASCADE, related_name="answers"
    )
    question = models.ForeignKey(
        Question, on_delete=models.CASCADE, related_name="answers"
    )
    choice = models.ForeignKey(
        Choice,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="answers",
    )
    answer_text = models.TextField(null=True, blank=True)
    score = models.DecimalField(
        max_digits=7,
        decimal_places=2,
        null=True,
        blank=True,
        help_text=_("Manuell vergebene Punkte (nur Freitextfragen)."),
    )
    feedback = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Answer")
        verbose_name_plural = _("Answers")
        ordering = ["assignment", "question", "id"]
        indexes = [
            models.Index(fields=["assignment", "question"], name="answer_assign_question_idx"),
        ]

    def __str__(self):
        if self.choice_id:
            return f"Answer to question {self.question_id}: choice {self.choice_id}"
        return f"Answer to question {self.question_id}: {(self.answer_text or '')[:30]}"


class SecurityViolationLog(models.Model):
    assignment = models.ForeignKey(
        ExamAssignment, on_delete=models.CASCADE, related_name="violation_logs"
    )
    kind = models.CharField(max_length=20, choices=ViolationKind.choices)
    details = models.TextField(blank=True)
    critical = models.BooleanField(default=False)
    terminated_session = models.BooleanField(
        default=False,
        help_text=_("True, wenn diese Meldung die Sitzung beendet hat."),
    )
    reported_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Security Violation")
        verbose_name_plural = _("Security Violations")
        ordering = ["reported_at", "id"]

    def __str__(self):
        return f"{self.kind} on assignment {self.assignment_id}"
