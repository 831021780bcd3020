"""
Assignment State Machine

Besitzt den Lebenszyklus eines Prüfungsversuchs:

    assigned → started → submitted → graded

Alle Übergänge laufen über diesen Service. Er ist der einzige Schreiber von
``started_at``, ``submitted_at`` und ``score``. Manuelle Abgabe, Ablauf des
Timers, kritische Sicherheitsverstöße und der serverseitige Ablauf-Sweep
münden in dieselbe Methode ``submit``, die über ein bedingtes Update
höchstens einmal wirksam wird.

Author: Exam Platform Development Team
Version: 1.0.0
"""

import datetime
import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional

from django.db import transaction
from django.utils import timezone

from ...conf import get_setting
from ...exams.models import Exam, Question
from ...attempts.models import (
    ExamAssignment,
    Answer,
    SubmissionTrigger,
    FORCED_TRIGGERS,
)
from ...exceptions import (
    AlreadyStarted,
    ExamNotActive,
    SessionClosed,
    SessionNotStarted,
    NotSubmitted,
    NotAssigned,
    ScoreExceedsMax,
    InvalidScore,
    NotManuallyGradable,
    QuestionNotInExam,
)
from ..scoring import ScoringService, scoring_service
from .answer_store import AnswerStore, answer_store
from .timing_service import ExamTimingService, timing_service

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmissionResult:
    """
    Ergebnis eines Abgabeversuchs.

    ``submitted`` ist nur für den Aufruf True, der die Abgabe tatsächlich
    geschrieben hat. Verlierer eines gleichzeitigen Abgabe-Rennens erhalten
    ``already_submitted=True``; das ist kein Fehler.
    """

    submitted: bool
    already_submitted: bool
    assignment: ExamAssignment
    trigger: Optional[str] = None


def normalize_score(value: Any) -> Decimal:
    """
    Akzeptiert Zahlen und numerische Strings (auch mit Dezimalkomma).

    Raises:
        InvalidScore: nicht numerisch oder negativ
    """
    if isinstance(value, bool) or value is None:
        raise InvalidScore()
    if isinstance(value, str):
        value = value.strip().replace(",", ".")
    try:
        score = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidScore()
    if not score.is_finite() or score < 0:
        raise InvalidScore()
    return score.quantize(Decimal("0.01"))


class AssignmentStateMachine:

    def __init__(
        self,
        scoring: Optional[ScoringService] = None,
        store: Optional[AnswerStore] = None,
        timing: Optional[ExamTimingService] = None,
    ):
        self.scoring = scoring or scoring_service
        self.store = store or answer_store
        self.timing = timing or timing_service

    # --- Start ---

    def start(self, assignment: ExamAssignment, now: Optional[datetime.datetime] = None) -> ExamAssignment:
        """
        Startet den Versuch. ``started_at`` wird nur gesetzt, wenn es noch
        leer ist (bedingtes Update).

        Raises:
            AlreadyStarted: Versuch wurde bereits gestartet
            ExamNotActive: Prüfung inaktiv oder außerhalb des Zeitfensters
        """
        now = now or timezone.now()
        if assignment.started_at is not None:
            raise AlreadyStarted()
        if not assignment.exam.is_available(now):
            raise ExamNotActive()

        updated = ExamAssignment.objects.filter(
            pk=assignment.pk, started_at__isnull=True
        ).update(started_at=now, status=ExamAssignment.Status.STARTED)
        if not updated:
            raise AlreadyStarted()

        assignment.refresh_from_db()
        logger.info(
            f"Prüfung gestartet: Versuch {assignment.id}, Prüfung {assignment.exam_id}, "
            f"Student {assignment.student_id}"
        )
        return assignment

    def start_exam(self, exam: Exam, student, now: Optional[datetime.datetime] = None) -> ExamAssignment:
        """Startet die Prüfung für einen Studierenden über dessen Zuweisung."""
        assignment = ExamAssignment.objects.select_related("exam").filter(
            exam=exam, student=student
        ).first()
        if assignment is None:
            if not get_setting("ALLOW_UNASSIGNED_START"):
                raise NotAssigned()
            assignment, _ = ExamAssignment.objects.get_or_create(exam=exam, student=student)
        return self.start(assignment, now=now)

    # --- Antworten ---

    def save_answer(
        self,
        assignment: ExamAssignment,
        question: Question,
        payload: Dict[str, Any],
        now: Optional[datetime.datetime] = None,
    ) -> List[Answer]:
        """
        Speichert eine Antwort, solange die Sitzung läuft.

        Die Zeile des Versuchs wird gesperrt, damit sich das Speichern nicht
        mit der Abgabe überschneidet. Ist die Zeit samt Kulanzzeit
        abgelaufen, wird der Versuch zuerst mit ``trigger=timeout``
        abgegeben.

        Raises:
            SessionClosed: Versuch nicht gestartet, bereits abgegeben oder abgelaufen
        """
        now = now or timezone.now()
        with transaction.atomic():
            locked = (
                ExamAssignment.objects.select_for_update()
                .select_related("exam")
                .get(pk=assignment.pk)
            )
            if locked.started_at is None:
                raise SessionClosed("The exam session has not been started")
            if locked.submitted_at is not None:
                raise SessionClosed()
            expired = self.timing.is_expired(locked, now)
            if not expired:
                return self.store.save(locked, question, payload)

        logger.info(f"Antwort nach Ablauf der Zeit für Versuch {locked.id}: automatische Abgabe")
        self.submit(locked, trigger=SubmissionTrigger.TIMEOUT, now=now)
        assignment.refresh_from_db()
        raise SessionClosed("The time for this exam has expired")

    # --- Abgabe ---

    def submit(
        self,
        assignment: ExamAssignment,
        trigger: str = SubmissionTrigger.MANUAL,
        violation: Optional[str] = None,
        buffered_answers: Optional[Iterable[Dict[str, Any]]] = None,
        now: Optional[datetime.datetime] = None,
    ) -> SubmissionResult:
        """
        Einziger Einstiegspunkt für die Abgabe (manuell, Timeout, Verstoß,
        Ablauf-Sweep).

        Kommt die Abgabe erst nach Ablauf der Zeit samt Kulanzzeit an, wird
        sie als Timeout zum Deadline-Zeitpunkt geschrieben und mitgeschickte
        Antworten werden verworfen.

        Raises:
            SessionNotStarted: Versuch wurde nie gestartet
        """
        now = now or timezone.now()
        trigger = SubmissionTrigger(trigger)
        if trigger == SubmissionTrigger.VIOLATION and not violation:
            raise ValueError("A violation submission requires the violation kind")

        with transaction.atomic():
            current = ExamAssignment.objects.select_related("exam").get(pk=assignment.pk)

            if trigger != SubmissionTrigger.TIMEOUT and self.timing.is_expired(current, now):
                logger.info(
                    f"Abgabe von Versuch {current.id} nach Ablauf der Zeit "
                    f"(trigger={trigger}): als Timeout gewertet"
                )
                trigger = SubmissionTrigger.TIMEOUT
                violation = None
                buffered_answers = None

            submitted_at = now
            if trigger == SubmissionTrigger.TIMEOUT:
                deadline = self.timing.get_deadline(current)
                if deadline is not None and deadline < now:
                    submitted_at = deadline

            won = ExamAssignment.objects.filter(
                pk=current.pk,
                started_at__isnull=False,
                submitted_at__isnull=True,
            ).update(
                submitted_at=submitted_at,
                status=ExamAssignment.Status.SUBMITTED,
                forced_submission=trigger.value in FORCED_TRIGGERS,
                submission_trigger=trigger,
                security_violation=violation if trigger == SubmissionTrigger.VIOLATION else None,
            )

            if not won:
                current.refresh_from_db()
                if current.started_at is None:
                    raise SessionNotStarted()
                logger.info(
                    f"Abgabe ignoriert, Versuch {current.id} wurde bereits abgegeben "
                    f"(trigger={trigger})"
                )
                assignment.refresh_from_db()
                return SubmissionResult(
                    submitted=False, already_submitted=True, assignment=current, trigger=trigger
                )

            if buffered_answers:
                self.store.persist_buffered(
                    current, buffered_answers, strict=trigger == SubmissionTrigger.MANUAL
                )

            fields = {"auto_score": self.scoring.calculate_auto_correctable_score(current)}
            if self.scoring.is_grading_complete(current):
                fields.update(
                    status=ExamAssignment.Status.GRADED,
                    score=self.scoring.calculate_assignment_score(current),
                    graded_at=now,
                )
            ExamAssignment.objects.filter(pk=current.pk).update(**fields)

        current.refresh_from_db()
        assignment.refresh_from_db()
        logger.info(
            f"Prüfung abgegeben: Versuch {current.id}, Prüfung {current.exam_id}, "
            f"Student {current.student_id}, trigger={trigger}, auto_score={current.auto_score}"
        )
        return SubmissionResult(
            submitted=True, already_submitted=False, assignment=current, trigger=trigger
        )

    # --- Bewertung ---

    def _validate_grade(self, assignment: ExamAssignment, question: Question, score: Any) -> Decimal:
        if question.exam_id != assignment.exam_id:
            raise QuestionNotInExam(question_id=question.id)
        if not question.requires_manual_grading:
            raise NotManuallyGradable()
        if assignment.submitted_at is None:
            raise NotSubmitted()
        value = normalize_score(score)
        if value > question.points:
            raise ScoreExceedsMax(max_points=question.points)
        return value

    def _apply_grade(
        self, assignment: ExamAssignment, question: Question, score: Decimal, feedback: Optional[str]
    ) -> Answer:
        answer = Answer.objects.filter(assignment=assignment, question=question).first()
        if answer is None:
            # Unbeantwortete Freitextfrage: leere Antwortzeile für die Bewertung
            answer = Answer(assignment=assignment, question=question, answer_text="")
        answer.score = score
        if feedback is not None:
            answer.feedback = feedback
        answer.save()
        return answer

    def _finalize_grading(
        self, assignment: ExamAssignment, graded_by=None, now: Optional[datetime.datetime] = None
    ) -> ExamAssignment:
        if not self.scoring.is_grading_complete(assignment):
            return assignment
        assignment.status = ExamAssignment.Status.GRADED
        assignment.score = self.scoring.calculate_assignment_score(assignment)
        assignment.graded_at = now or timezone.now()
        if graded_by is not None:
            assignment.graded_by = graded_by
        assignment.save(update_fields=["status", "score", "graded_at", "graded_by", "teacher_notes"])
        logger.info(f"Bewertung abgeschlossen: Versuch {assignment.id}, score={assignment.score}")
        return assignment

    def grade_text_question(
        self,
        assignment: ExamAssignment,
        question: Question,
        score: Any,
        feedback: Optional[str] = None,
        graded_by=None,
        now: Optional[datetime.datetime] = None,
    ) -> ExamAssignment:
        """
        Vergibt Punkte für eine Freitextfrage. Sind danach alle
        Freitextantworten bewertet, wird der Versuch auf ``graded`` gesetzt
        und ``score`` vollständig neu berechnet.
        """
        value = self._validate_grade(assignment, question, score)
        with transaction.atomic():
            self._apply_grade(assignment, question, value, feedback)
            return self._finalize_grading(assignment, graded_by=graded_by, now=now)

    def grade_batch(
        self,
        assignment: ExamAssignment,
        grades: Iterable[Dict[str, Any]],
        teacher_notes: Optional[str] = None,
        graded_by=None,
        now: Optional[datetime.datetime] = None,
    ) -> ExamAssignment:
        """
        Bewertet mehrere Freitextfragen atomar. Jeder Eintrag enthält
        ``question_id``, ``score`` und optional ``feedback``. Ist ein
        Eintrag ungültig, wird nichts gespeichert.
        """
        validated = []
        for grade in grades:
            question = self.store.get_question(assignment, grade.get("question_id"))
            validated.append(
                (question, self._validate_grade(assignment, question, grade.get("score")), grade.get("feedback"))
            )

        with transaction.atomic():
            for question, value, feedback in validated:
                self._apply_grade(assignment, question, value, feedback)
            if teacher_notes is not None:
                assignment.teacher_notes = teacher_notes
                assignment.save(update_fields=["teacher_notes"])
            return self._finalize_grading(assignment, graded_by=graded_by, now=now)


state_machine = AssignmentStateMachine()
