"""Auto-Submit Expired Exams Management Command"""

import logging
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from ...models import ExamAssignment, SubmissionTrigger
from ...services.session import state_machine, timing_service

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = (
        "Gibt alle laufenden Prüfungen ab, deren Bearbeitungszeit inkl. Kulanzzeit "
        "abgelaufen ist (z.B. weil der Browser geschlossen wurde)"
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Zeige nur welche Versuche abgegeben werden würden",
        )
        parser.add_argument(
            "--verbose",
            action="store_true",
            help="Jeden abgegebenen Versuch ausgeben",
        )

    def handle(self, *args, **options):
        dry_run = options["dry_run"]
        verbose = options["verbose"]
        now = timezone.now()

        if dry_run:
            self.stdout.write(self.style.WARNING("DRY RUN: Es wird nichts abgegeben"))

        candidates = ExamAssignment.objects.filter(
            started_at__isnull=False, submitted_at__isnull=True
        ).select_related("exam")

        submitted = 0
        skipped = 0
        for assignment in candidates:
            if not timing_service.is_expired(assignment, now):
                continue

            if dry_run:
                submitted += 1
                self.stdout.write(f"   - Versuch {assignment.id} ({assignment.exam.title})")
                continue

            try:
                result = state_machine.submit(
                    assignment, trigger=SubmissionTrigger.TIMEOUT, now=now
                )
            except Exception as e:
                logger.error(f"Fehler bei der automatischen Abgabe von Versuch {assignment.id}: {e}", exc_info=True)
                raise CommandError(f"Automatische Abgabe fehlgeschlagen: {e}")

            if result.submitted:
                submitted += 1
                if verbose:
                    self.stdout.write(
                        f"   - Versuch {assignment.id} abgegeben, auto_score={result.assignment.auto_score}"
                    )
            else:
                skipped += 1

        label = "Would submit" if dry_run else "Submitted"
        self.stdout.write(self.style.SUCCESS(f"{label}: {submitted}"))
        if skipped:
            self.stdout.write(f"Skipped (already submitted): {skipped}")
