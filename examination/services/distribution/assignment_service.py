"""
Assignment Distribution Service

Verteilt Prüfungen an Studierende, einzeln oder über Gruppen. Bestehende
Zuweisungen bleiben unverändert, doppelte Verteilung ist wirkungslos.
Zuweisungen können nur entfernt werden, solange die Prüfung nicht
gestartet wurde.

Author: Exam Platform Development Team
Version: 1.0.0
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.db import transaction

from ...exams.models import Exam
from ...attempts.models import ExamAssignment
from ...exceptions import UnassignNotAllowed

logger = logging.getLogger(__name__)


@dataclass
class DistributionResult:
    created: List[ExamAssignment] = field(default_factory=list)
    existing: int = 0

    @property
    def created_count(self) -> int:
        return len(self.created)


class AssignmentDistributionService:

    def assign_to_students(self, exam: Exam, students: Iterable, assigned_by=None) -> DistributionResult:
        result = DistributionResult()
        with transaction.atomic():
            for student in students:
                assignment, created = ExamAssignment.objects.get_or_create(
                    exam=exam,
                    student=student,
                    defaults={"assigned_by": assigned_by},
                )
                if created:
                    result.created.append(assignment)
                else:
                    result.existing += 1

        logger.info(
            f"Prüfung {exam.id} verteilt: {result.created_count} neu, "
            f"{result.existing} bereits zugewiesen"
        )
        return result

    def assign_to_groups(self, exam: Exam, groups: Iterable[Group], assigned_by=None) -> DistributionResult:
        User = get_user_model()
        students = User.objects.filter(groups__in=list(groups), is_active=True).distinct()
        return self.assign_to_students(exam, students, assigned_by=assigned_by)

    def assign(
        self,
        exam: Exam,
        student_ids: Optional[Iterable[int]] = None,
        group_ids: Optional[Iterable[int]] = None,
        assigned_by=None,
    ) -> DistributionResult:
        """Verteilt an die Vereinigung aus Einzelpersonen und Gruppenmitgliedern."""
        User = get_user_model()
        students = User.objects.none()
        if student_ids:
            students = students | User.objects.filter(pk__in=list(student_ids), is_active=True)
        if group_ids:
            students = students | User.objects.filter(groups__pk__in=list(group_ids), is_active=True)
        return self.assign_to_students(exam, students.distinct(), assigned_by=assigned_by)

    def unassign(self, assignment: ExamAssignment) -> None:
        """
        Raises:
            UnassignNotAllowed: Prüfung wurde bereits gestartet
        """
        deleted, _ = ExamAssignment.objects.filter(
            pk=assignment.pk, started_at__isnull=True
        ).delete()
        if not deleted:
            raise UnassignNotAllowed()
        logger.info(
            f"Zuweisung entfernt: Prüfung {assignment.exam_id}, Student {assignment.student_id}"
        )


distribution_service = AssignmentDistributionService()
