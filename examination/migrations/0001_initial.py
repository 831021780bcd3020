import django.core.validators
import django.db.models.deletion
import examination.exams.models
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Exam",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                (
                    "duration_minutes",
                    models.PositiveIntegerField(
                        default=examination.exams.models.default_duration_minutes,
                        help_text="Bearbeitungszeit ab Start in Minuten.",
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                (
                    "start_time",
                    models.DateTimeField(blank=True, help_text="Frühester Startzeitpunkt (optional).", null=True),
                ),
                (
                    "end_time",
                    models.DateTimeField(
                        blank=True,
                        help_text="Spätester Zeitpunkt, bis zu dem die Prüfung läuft (optional).",
                        null=True,
                    ),
                ),
                ("is_active", models.BooleanField(default=False)),
                (
                    "security_settings",
                    models.JSONField(
                        blank=True,
                        default=examination.exams.models.default_security_settings,
                        help_text="Feature-Flags der Sitzungsüberwachung.",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="authored_exams",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Exam",
                "verbose_name_plural": "Exams",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Question",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("one_choice", "Single choice"),
                            ("multiple", "Multiple choice"),
                            ("boolean", "True / False"),
                            ("text", "Free text"),
                        ],
                        default="one_choice",
                        max_length=20,
                    ),
                ),
                ("content", models.TextField()),
                (
                    "points",
                    models.PositiveIntegerField(
                        default=1,
                        help_text="Maximale Punktzahl für diese Frage.",
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                ("order", models.PositiveSmallIntegerField(default=0)),
                (
                    "exam",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="questions",
                        to="examination.exam",
                    ),
                ),
            ],
            options={
                "verbose_name": "Question",
                "verbose_name_plural": "Questions",
                "ordering": ["exam", "order", "id"],
            },
        ),
        migrations.CreateModel(
            name="Choice",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("content", models.CharField(max_length=500)),
                ("is_correct", models.BooleanField(default=False)),
                ("order", models.PositiveSmallIntegerField(default=0)),
                (
                    "question",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="choices",
                        to="examination.question",
                    ),
                ),
            ],
            options={
                "verbose_name": "Choice",
                "verbose_name_plural": "Choices",
                "ordering": ["question", "order", "id"],
            },
        ),
        migrations.CreateModel(
            name="ExamAssignment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("assigned", "Zugewiesen"),
                            ("started", "Gestartet"),
                            ("submitted", "Abgegeben"),
                            ("graded", "Bewertet"),
                        ],
                        default="assigned",
                        max_length=15,
                    ),
                ),
                ("assigned_at", models.DateTimeField(auto_now_add=True)),
                ("started_at", models.DateTimeField(blank=True, null=True)),
                ("submitted_at", models.DateTimeField(blank=True, null=True)),
                ("graded_at", models.DateTimeField(blank=True, null=True)),
                (
                    "auto_score",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Punkte der automatisch korrigierbaren Fragen.",
                        max_digits=7,
                        null=True,
                    ),
                ),
                (
                    "score",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Gesamtpunktzahl. Wird nach Abschluss der Bewertung berechnet.",
                        max_digits=7,
                        null=True,
                    ),
                ),
                ("forced_submission", models.BooleanField(default=False)),
                (
                    "submission_trigger",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("manual", "Manual"),
                            ("timeout", "Timeout"),
                            ("violation", "Security violation"),
                        ],
                        max_length=10,
                        null=True,
                    ),
                ),
                (
                    "security_violation",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("tab_switch", "Tab switch"),
                            ("fullscreen_exit", "Fullscreen exit"),
                            ("devtools_opened", "Developer tools opened"),
                            ("copy_paste", "Copy / paste"),
                            ("right_click", "Right click"),
                            ("print_attempt", "Print attempt"),
                            ("idle_timeout", "Idle timeout"),
                        ],
                        max_length=20,
                        null=True,
                    ),
                ),
                ("teacher_notes", models.TextField(blank=True, null=True)),
                (
                    "assigned_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="distributed_exam_assignments",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "exam",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="assignments",
                        to="examination.exam",
                    ),
                ),
                (
                    "graded_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="graded_exam_assignments",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "student",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="exam_assignments",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Exam Assignment",
                "verbose_name_plural": "Exam Assignments",
                "ordering": ["-assigned_at"],
                "unique_together": {("exam", "student")},
            },
        ),
        migrations.CreateModel(
            name="Answer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("answer_text", models.TextField(blank=True, null=True)),
                (
                    "score",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Manuell vergebene Punkte (nur Freitextfragen).",
                        max_digits=7,
                        null=True,
                    ),
                ),
                ("feedback", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "assignment",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="answers",
                        to="examination.examassignment",
                    ),
                ),
                (
                    "choice",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="answers",
                        to="examination.choice",
                    ),
                ),
                (
                    "question",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="answers",
                        to="examination.question",
                    ),
                ),
            ],
            options={
                "verbose_name": "Answer",
                "verbose_name_plural": "Answers",
                "ordering": ["assignment", "question", "id"],
                "indexes": [
                    models.Index(fields=["assignment", "question"], name="answer_assign_question_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="SecurityViolationLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "kind",
                    models.CharField(
                        choices=[
                            ("tab_switch", "Tab switch"),
                            ("fullscreen_exit", "Fullscreen exit"),
                            ("devtools_opened", "Developer tools opened"),
                            ("copy_paste", "Copy / paste"),
                            ("right_click", "Right click"),
                            ("print_attempt", "Print attempt"),
                            ("idle_timeout", "Idle timeout"),
                        ],
                        max_length=20,
                    ),
                ),
                ("details", models.TextField(blank=True)),
                ("critical", models.BooleanField(default=False)),
                (
                    "terminated_session",
                    models.BooleanField(default=False, help_text="True, wenn diese Meldung die Sitzung beendet hat."),
                ),
                ("reported_at", models.DateTimeField(auto_now_add=True)),
                (
                    "assignment",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="violation_logs",
                        to="examination.examassignment",
                    ),
                ),
            ],
            options={
                "verbose_name": "Security Violation",
                "verbose_name_plural": "Security Violations",
                "ordering": ["reported_at", "id"],
            },
        ),
    ]
