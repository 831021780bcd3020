"""
Violation Handler

Nimmt die Sicherheitsmeldungen des Sitzungsmonitors entgegen, entscheidet
über deren Kritikalität und erzwingt bei kritischen Verstößen die Abgabe
über den AssignmentStateMachine.

- Kritisch (Tab-Wechsel, Verlassen des Vollbilds): sofortige Abgabe mit
  ``trigger=violation`` inklusive der zwischengespeicherten Antworten
- Nicht kritisch: nur Protokollierung, kein Zustandswechsel
- Jede Meldung wird in ``SecurityViolationLog`` festgehalten

Author: Exam Platform Development Team
Version: 1.0.0
"""

import datetime
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from django.utils import timezone

from ...exams.security import VIOLATION_KINDS, is_critical_violation
from ...attempts.models import ExamAssignment, SecurityViolationLog, SubmissionTrigger
from ...exceptions import SessionNotStarted, UnknownViolationKind
from ..session import AssignmentStateMachine, SubmissionResult, state_machine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViolationOutcome:
    violation_type: str
    critical: bool
    exam_terminated: bool
    log: SecurityViolationLog
    submission: Optional[SubmissionResult] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "violation_type": self.violation_type,
            "critical": self.critical,
            "exam_terminated": self.exam_terminated,
        }


class ViolationHandler:

    def __init__(self, machine: Optional[AssignmentStateMachine] = None):
        self.state_machine = machine or state_machine

    def report(
        self,
        assignment: ExamAssignment,
        violation_type: str,
        details: str = "",
        buffered_answers: Optional[Iterable[Dict[str, Any]]] = None,
        now: Optional[datetime.datetime] = None,
    ) -> ViolationOutcome:
        """
        Verarbeitet eine Verstoßmeldung.

        Raises:
            UnknownViolationKind: unbekannter Verstoßtyp
            SessionNotStarted: Versuch wurde noch nicht gestartet
        """
        now = now or timezone.now()
        if violation_type not in VIOLATION_KINDS:
            raise UnknownViolationKind(details={"violation_type": violation_type})

        current = ExamAssignment.objects.select_related("exam").get(pk=assignment.pk)
        if current.started_at is None:
            raise SessionNotStarted()

        critical = is_critical_violation(violation_type) and current.exam.security_features.enabled
        submission = None
        terminated_now = False

        if current.submitted_at is not None:
            # Sitzung bereits geschlossen: nur protokollieren
            exam_terminated = True
        elif critical:
            submission = self.state_machine.submit(
                current,
                trigger=SubmissionTrigger.VIOLATION,
                violation=violation_type,
                buffered_answers=buffered_answers,
                now=now,
            )
            terminated_now = submission.submitted
            exam_terminated = True
        else:
            exam_terminated = False

        log = SecurityViolationLog.objects.create(
            assignment=current,
            kind=violation_type,
            details=details or "",
            critical=critical,
            terminated_session=terminated_now,
        )

        logger.warning(
            f"Sicherheitsverstoß: Versuch {current.id}, Prüfung {current.exam_id}, "
            f"Student {current.student_id}, Typ {violation_type}, kritisch={critical}, "
            f"beendet={exam_terminated}, Details: {details or '-'}, Zeit: {now.isoformat()}"
        )

        assignment.refresh_from_db()
        return ViolationOutcome(
            violation_type=violation_type,
            critical=critical,
            exam_terminated=exam_terminated,
            log=log,
            submission=submission,
        )

    def get_violation_history(self, assignment: ExamAssignment) -> List[SecurityViolationLog]:
        return list(SecurityViolationLog.objects.filter(assignment=assignment))


violation_handler = ViolationHandler()
