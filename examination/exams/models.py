from decimal import Decimal
from typing import Optional, Set
import datetime

from django.db import models
from django.conf import settings
from django.utils.translation import gettext_lazy as _
from django.core.validators import MinValueValidator
from django.core.exceptions import ValidationError
from django.utils import timezone

from ..conf import get_setting
from .security import SecurityFeatureFlags

User = settings.AUTH_USER_MODEL


def default_duration_minutes() -> int:
    return int(get_setting("DEFAULT_DURATION_MINUTES"))


def default_security_settings() -> dict:
    return dict(get_setting("DEFAULT_SECURITY_FEATURES"))


class QuestionType(models.TextChoices):
    ONE_CHOICE = "one_choice", _("Single choice")
    MULTIPLE = "multiple", _("Multiple choice")
    BOOLEAN = "boolean", _("True / False")
    TEXT = "text", _("Free text")


# Fragetypen, die ohne menschliche Bewertung korrigiert werden können
AUTO_GRADABLE_TYPES = frozenset(
    {QuestionType.ONE_CHOICE.value, QuestionType.MULTIPLE.value, QuestionType.BOOLEAN.value}
)
MANUAL_GRADING_TYPES = frozenset({QuestionType.TEXT.value})
CHOICE_TYPES = AUTO_GRADABLE_TYPES


class Exam(models.Model):
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    duration_minutes = models.PositiveIntegerField(
        default=default_duration_minutes,
        validators=[MinValueValidator(1)],
        help_text=_("Bearbeitungszeit ab Start in Minuten."),
    )
    start_time = models.DateTimeField(
        null=True,
        blank=True,
        help_text=_("Frühester Startzeitpunkt (optional)."),
    )
    end_time = models.DateTimeField(
        null=True,
        blank=True,
        help_text=_("Spätester Zeitpunkt, bis zu dem die Prüfung läuft (optional)."),
    )
    is_active = models.BooleanField(default=False)
    security_settings = models.JSONField(
        default=default_security_settings,
        blank=True,
        help_text=_("Feature-Flags der Sitzungsüberwachung."),
    )
    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="authored_exams",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Exam")
        verbose_name_plural = _("Exams")
        ordering = ["-created_at"]

    def __str__(self):
        return self.title

    def clean(self):
        if self.start_time and self.end_time and self.end_time <= self.start_time:
            raise ValidationError(
                {"end_time": _("End time must be after the start time.")}
            )

    def is_within_time_window(self, now: Optional[datetime.datetime] = None) -> bool:
        """
        Missing bounds are open: no start time means available immediately,
        no end time means available indefinitely.
        """
        now = now or timezone.now()
        if self.start_time and now < self.start_time:
            return False
        if self.end_time and now > self.end_time:
            return False
        return True

    def is_available(self, now: Optional[datetime.datetime] = None) -> bool:
        return self.is_active and self.is_within_time_window(now)

    def has_ended(self, now: Optional[datetime.datetime] = None) -> bool:
        now = now or timezone.now()
        return bool(self.end_time and now > self.end_time)

    @property
    def security_features(self) -> SecurityFeatureFlags:
        return SecurityFeatureFlags.from_dict(self.security_settings)

    @property
    def max_score(self) -> Decimal:
        total = sum(q.points for q in self.questions.all())
        return Decimal(total).quantize(Decimal("0.01"))

    def has_manual_questions(self) -> bool:
        return self.questions.filter(type__in=MANUAL_GRADING_TYPES).exists()


class Question(models.Model):
    exam = models.ForeignKey(Exam, on_delete=models.CASCADE, related_name="questions")
    type = models.CharField(
        max_length=20, choices=QuestionType.choices, default=QuestionType.ONE_CHOICE
    )
    content = models.TextField()
    points = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
        help_text=_("Maximale Punktzahl für diese Frage."),
    )
    order = models.PositiveSmallIntegerField(default=0)

    class Meta:
        verbose_name = _("Question")
        verbose_name_plural = _("Questions")
        ordering = ["exam", "order", "id"]

    def __str__(self):
        return f"{self.content[:50]} ({self.points} Pts)"

    @property
    def is_auto_gradable(self) -> bool:
        return str(self.type) in AUTO_GRADABLE_TYPES

    @property
    def requires_manual_grading(self) -> bool:
        return str(self.type) in MANUAL_GRADING_TYPES

    def correct_choice_ids(self) -> Set[int]:
        return {c.id for c in self.choices.all() if c.is_correct}


class Choice(models.Model):
    question = models.ForeignKey(
        Question, on_delete=models.CASCADE, related_name="choices"
    )
    content = models.CharField(max_length=500)
    is_correct = models.BooleanField(default=False)
    order = models.PositiveSmallIntegerField(default=0)

    class Meta:
        verbose_name = _("Choice")
        verbose_name_plural = _("Choices")
        ordering = ["question", "order", "id"]

    def __str__(self):
        marker = "✓" if self.is_correct else "✗"
        return f"{marker} {self.content[:50]}"
