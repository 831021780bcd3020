import logging
from django.core.management.base import BaseCommand
from django.db import transaction
from django.contrib.auth.models import User, Group

from ...models import Exam, Question, Choice, QuestionType
from ...services.distribution import distribution_service

# Configure logger
logger = logging.getLogger(__name__)

DEMO_PASSWORD = "demo-password-123"

# Fragen der Demo-Prüfung: (Typ, Inhalt, Punkte, [(Option, korrekt), ...])
DEMO_QUESTIONS = [
    (
        QuestionType.ONE_CHOICE,
        "Welches HTTP-Verb ist idempotent und ersetzt eine Ressource vollständig?",
        10,
        [("POST", False), ("PUT", True), ("PATCH", False)],
    ),
    (
        QuestionType.MULTIPLE,
        "Welche der folgenden Datentypen sind in Python unveränderlich?",
        15,
        [("tuple", True), ("list", False), ("frozenset", True), ("dict", False)],
    ),
    (
        QuestionType.BOOLEAN,
        "Eine Datenbanktransaktion ist atomar.",
        5,
        [("Wahr", True), ("Falsch", False)],
    ),
    (
        QuestionType.TEXT,
        "Erklären Sie den Unterschied zwischen Authentifizierung und Autorisierung.",
        20,
        [],
    ),
]


class Command(BaseCommand):
    help = "Erstellt eine Demo-Prüfung mit Lehrkraft, Studierenden-Gruppe und Zuweisungen"

    def add_arguments(self, parser):
        parser.add_argument(
            "--students",
            type=int,
            default=3,
            help="Anzahl der Demo-Studierenden",
        )
        parser.add_argument(
            "--fullscreen",
            action="store_true",
            help="Vollbildmodus für die Demo-Prüfung verlangen",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        teacher, created = User.objects.get_or_create(
            username="demo_teacher", defaults={"is_staff": True, "email": "teacher@example.com"}
        )
        if created:
            teacher.set_password(DEMO_PASSWORD)
            teacher.save()

        group, _ = Group.objects.get_or_create(name="Demo-Klasse")
        for index in range(1, options["students"] + 1):
            student, created = User.objects.get_or_create(
                username=f"demo_student_{index}",
                defaults={"email": f"student{index}@example.com"},
            )
            if created:
                student.set_password(DEMO_PASSWORD)
                student.save()
            student.groups.add(group)

        exam = Exam.objects.create(
            title="Demo-Prüfung Webentwicklung",
            description="Beaufsichtigte Demo-Prüfung mit allen Fragetypen.",
            duration_minutes=30,
            is_active=True,
            created_by=teacher,
        )
        if options["fullscreen"]:
            exam.security_settings = {**exam.security_settings, "fullscreen_required": True}
            exam.save(update_fields=["security_settings"])

        for order, (question_type, content, points, choices) in enumerate(DEMO_QUESTIONS, start=1):
            question = Question.objects.create(
                exam=exam, type=question_type, content=content, points=points, order=order
            )
            Choice.objects.bulk_create([
                Choice(question=question, content=text, is_correct=correct, order=position)
                for position, (text, correct) in enumerate(choices, start=1)
            ])

        result = distribution_service.assign_to_groups(exam, [group], assigned_by=teacher)

        logger.info(f"Demo-Prüfung {exam.id} erstellt")
        self.stdout.write(self.style.SUCCESS(f"Prüfung '{exam.title}' (ID {exam.id}) erstellt"))
        self.stdout.write(f"Zugewiesen: {result.created_count} Studierende")
        self.stdout.write(f"Passwort aller Demo-Benutzer: {DEMO_PASSWORD}")
