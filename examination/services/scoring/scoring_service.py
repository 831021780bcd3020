"""
Scoring Service für die Proctored Exam Platform

Berechnet die Punktzahl eines Prüfungsversuchs über eine Dispatch-Tabelle,
die jedem Fragetyp genau eine Bewertungsstrategie zuordnet.

- calculate_question_score: Punkte einer einzelnen Frage
- calculate_assignment_score: Summe über alle Fragen (inkl. Freitext)
- calculate_auto_correctable_score: Summe über automatisch korrigierbare Fragen
- recalculate_exam_scores: Neuberechnung nach Änderungen an den Fragen

Author: Exam Platform Development Team
Version: 1.0.0
"""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from django.db import transaction

from ...exams.models import Exam, Question, MANUAL_GRADING_TYPES
from ...attempts.models import ExamAssignment, Answer
from .strategies import DEFAULT_STRATEGIES, ScoringStrategy, ZERO, quantize

logger = logging.getLogger(__name__)


class ScoringService:
    """
    Service für die Bewertung von Prüfungsversuchen.

    Die Dispatch-Tabelle wird beim Erzeugen aufgebaut; weitere Fragetypen
    können über ``register_strategy`` ergänzt werden.
    """

    def __init__(self, strategies: Optional[Iterable[ScoringStrategy]] = None):
        self._strategies: Dict[str, ScoringStrategy] = {}
        for strategy in strategies if strategies is not None else DEFAULT_STRATEGIES:
            self.register_strategy(strategy)

    def register_strategy(self, strategy: ScoringStrategy) -> None:
        for question_type in strategy.question_types:
            self._strategies[str(question_type)] = strategy

    def get_strategy(self, question_type: str) -> ScoringStrategy:
        try:
            return self._strategies[str(question_type)]
        except KeyError:
            raise ValueError(f"No scoring strategy registered for question type '{question_type}'")

    # --- Einzelne Fragen ---

    def is_answer_correct(self, question: Question, answers: Sequence[Answer]) -> Optional[bool]:
        """None bei manuell zu bewertenden Fragen."""
        return self.get_strategy(question.type).is_correct(question, answers)

    def calculate_question_score(self, question: Question, answers: Sequence[Answer]) -> Decimal:
        return quantize(self.get_strategy(question.type).calculate_score(question, answers))

    # --- Ganze Versuche ---

    def _questions(self, exam: Exam) -> List[Question]:
        return list(exam.questions.prefetch_related("choices"))

    def answers_by_question(self, assignment: ExamAssignment) -> Dict[int, List[Answer]]:
        grouped: Dict[int, List[Answer]] = defaultdict(list)
        for answer in assignment.answers.all():
            grouped[answer.question_id].append(answer)
        return grouped

    def calculate_assignment_score(self, assignment: ExamAssignment) -> Decimal:
        """
        Summe der Punkte aller Fragen, auf zwei Nachkommastellen gerundet.

        Freitextfragen tragen ihre manuell vergebenen Punkte bei (0, solange
        sie nicht bewertet sind).
        """
        answers = self.answers_by_question(assignment)
        total = sum(
            (self.calculate_question_score(q, answers.get(q.id, []))
             for q in self._questions(assignment.exam)),
            ZERO,
        )
        return quantize(total)

    def calculate_auto_correctable_score(self, assignment: ExamAssignment) -> Decimal:
        answers = self.answers_by_question(assignment)
        total = sum(
            (self.calculate_question_score(q, answers.get(q.id, []))
             for q in self._questions(assignment.exam) if q.is_auto_gradable),
            ZERO,
        )
        return quantize(total)

    def has_manual_correction_questions(self, exam: Exam) -> bool:
        return exam.questions.filter(type__in=MANUAL_GRADING_TYPES).exists()

    def pending_manual_question_ids(self, assignment: ExamAssignment) -> List[int]:
        """
        IDs der Freitextfragen mit einer nicht leeren, noch unbewerteten
        Antwort. Unbeantwortete Freitextfragen gelten als mit 0 bewertet.
        """
        pending = (
            Answer.objects.filter(
                assignment=assignment,
                question__type__in=MANUAL_GRADING_TYPES,
                score__isnull=True,
            )
            .exclude(answer_text__isnull=True)
            .exclude(answer_text="")
            .values_list("question_id", flat=True)
            .distinct()
        )
        return sorted(pending)

    def is_grading_complete(self, assignment: ExamAssignment) -> bool:
        return not self.pending_manual_question_ids(assignment)

    # --- Neuberechnung ---

    def recalculate_exam_scores(self, exam: Exam) -> int:
        """
        Berechnet ``auto_score`` (und bei bewerteten Versuchen ``score``)
        für alle abgegebenen Versuche einer Prüfung neu.

        Returns:
            Anzahl der aktualisierten Versuche
        """
        updated = 0
        assignments = ExamAssignment.objects.filter(
            exam=exam, submitted_at__isnull=False
        ).select_related("exam")

        with transaction.atomic():
            for assignment in assignments:
                fields = {"auto_score": self.calculate_auto_correctable_score(assignment)}
                if assignment.status == ExamAssignment.Status.GRADED:
                    fields["score"] = self.calculate_assignment_score(assignment)
                ExamAssignment.objects.filter(pk=assignment.pk).update(**fields)
                updated += 1

        logger.info(f"Punkte für {updated} Versuche der Prüfung {exam.id} neu berechnet")
        return updated


scoring_service = ScoringService()
