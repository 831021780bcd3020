"""
Results Service

Aufbereitung der Ergebnisse eines Prüfungsversuchs (Aufschlüsselung pro
Frage, Gesamtpunkte, Maximalpunkte, Prozent) und Abschlussstatistiken
einer Prüfung.

Die Gesamtpunktzahl ist erst nach abgeschlossener Bewertung gesetzt; bis
dahin liefert ``total_score`` None und ``auto_score`` den automatisch
korrigierten Anteil.

Author: Exam Platform Development Team
Version: 1.0.0
"""

import logging
from decimal import Decimal
from typing import Any, Dict, Optional

from django.db.models import Avg, Count, Q

from ...exams.models import Exam
from ...attempts.models import ExamAssignment
from ..scoring import ScoringService, scoring_service

logger = logging.getLogger(__name__)


def _percentage(score: Optional[Decimal], max_score: Decimal) -> Optional[float]:
    if score is None or not max_score:
        return None
    return round(float(score) / float(max_score) * 100, 2)


class ResultsService:

    def __init__(self, scoring: Optional[ScoringService] = None):
        self.scoring = scoring or scoring_service

    def get_results(self, assignment: ExamAssignment) -> Dict[str, Any]:
        exam = assignment.exam
        answers = self.scoring.answers_by_question(assignment)
        questions = []
        for question in exam.questions.prefetch_related("choices"):
            given = answers.get(question.id, [])
            text_answer = next((a for a in given if a.answer_text is not None), None)
            questions.append({
                "question_id": question.id,
                "content": question.content,
                "type": question.type,
                "points": question.points,
                "score": self.scoring.calculate_question_score(question, given),
                "is_correct": self.scoring.is_answer_correct(question, given),
                "selected_choice_ids": sorted(a.choice_id for a in given if a.choice_id),
                "correct_choice_ids": sorted(question.correct_choice_ids()),
                "answer_text": text_answer.answer_text if text_answer else None,
                "feedback": text_answer.feedback if text_answer else None,
                "graded": (
                    not question.requires_manual_grading
                    or not text_answer
                    or not text_answer.answer_text
                    or text_answer.score is not None
                ),
            })

        max_score = exam.max_score
        return {
            "assignment": {
                "id": assignment.id,
                "exam_id": exam.id,
                "exam_title": exam.title,
                "status": assignment.status,
                "started_at": assignment.started_at,
                "submitted_at": assignment.submitted_at,
                "graded_at": assignment.graded_at,
                "forced_submission": assignment.forced_submission,
                "submission_trigger": assignment.submission_trigger,
                "security_violation": assignment.security_violation,
                "teacher_notes": assignment.teacher_notes,
                "processing_time_seconds": assignment.processing_time_seconds,
            },
            "questions": questions,
            "auto_score": assignment.auto_score,
            "total_score": assignment.score,
            "max_score": max_score,
            "percentage": _percentage(assignment.score, max_score),
        }

    def get_completion_stats(self, exam: Exam) -> Dict[str, Any]:
        Status = ExamAssignment.Status
        stats = ExamAssignment.objects.filter(exam=exam).aggregate(
            total=Count("id"),
            assigned=Count("id", filter=Q(status=Status.ASSIGNED)),
            started=Count("id", filter=Q(status=Status.STARTED)),
            submitted=Count("id", filter=Q(status=Status.SUBMITTED)),
            graded=Count("id", filter=Q(status=Status.GRADED)),
            forced=Count("id", filter=Q(forced_submission=True)),
            average_score=Avg("score", filter=Q(status=Status.GRADED)),
        )
        average = stats["average_score"]
        stats["average_score"] = (
            Decimal(average).quantize(Decimal("0.01")) if average is not None else None
        )
        finished = stats["submitted"] + stats["graded"]
        stats["completion_rate"] = round(finished / stats["total"] * 100, 2) if stats["total"] else 0.0
        return stats


results_service = ResultsService()
