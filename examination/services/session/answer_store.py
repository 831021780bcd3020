"""
Answer Store

Persistiert die Antwort eines Prüfungsversuchs auf eine Frage. Jede
Speicherung ersetzt die bisherigen Antwortzeilen der Frage vollständig
(löschen, dann einfügen), so dass bei Mehrfachauswahl nie veraltete
Optionen stehen bleiben.

Unterstützte Payloads:
- ``{"choice_id": 3}`` für Single Choice und Wahr/Falsch
- ``{"choice_ids": [3, 4]}`` für Mehrfachauswahl
- ``{"text": "..."}`` für Freitext

Der Store prüft keine Sitzungszustände; das übernimmt der
AssignmentStateMachine, der die Zeile des Versuchs vorher sperrt.

Author: Exam Platform Development Team
Version: 1.0.0
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from ...exams.models import Question, QuestionType
from ...attempts.models import ExamAssignment, Answer
from ...exceptions import (
    ExamSessionException,
    QuestionNotInExam,
    ChoiceNotInQuestion,
    InvalidAnswerPayload,
)

logger = logging.getLogger(__name__)


@dataclass
class NormalizedAnswer:
    question: Question
    choice_ids: List[int] = field(default_factory=list)
    text: Optional[str] = None


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidAnswerPayload("Choice ids must be integers")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidAnswerPayload("Choice ids must be integers")


class AnswerStore:

    def get_question(self, assignment: ExamAssignment, question_id: Any) -> Question:
        try:
            question_id = int(question_id)
        except (TypeError, ValueError):
            raise QuestionNotInExam(question_id=None)
        question = (
            Question.objects.filter(pk=question_id, exam_id=assignment.exam_id)
            .prefetch_related("choices")
            .first()
        )
        if question is None:
            raise QuestionNotInExam(question_id=question_id)
        return question

    def normalize(self, question: Question, payload: Dict[str, Any]) -> NormalizedAnswer:
        """
        Prüft den Payload gegen den Fragetyp und die Optionen der Frage.

        Raises:
            InvalidAnswerPayload: Payload passt nicht zum Fragetyp
            ChoiceNotInQuestion: Option gehört nicht zur Frage
        """
        if not isinstance(payload, dict):
            raise InvalidAnswerPayload()

        if question.type == QuestionType.TEXT:
            if "text" not in payload:
                raise InvalidAnswerPayload("Text questions expect a 'text' value")
            text = payload["text"]
            if text is not None and not isinstance(text, str):
                raise InvalidAnswerPayload("'text' must be a string")
            text = (text or "").strip()
            return NormalizedAnswer(question=question, text=text)

        if question.type == QuestionType.MULTIPLE:
            if "choice_ids" not in payload:
                raise InvalidAnswerPayload("Multiple choice questions expect 'choice_ids'")
            raw = payload["choice_ids"] or []
            if not isinstance(raw, (list, tuple)):
                raise InvalidAnswerPayload("'choice_ids' must be a list")
            choice_ids = sorted({_to_int(v) for v in raw})
        else:
            if "choice_id" in payload:
                raw = payload["choice_id"]
                choice_ids = [] if raw is None else [_to_int(raw)]
            elif isinstance(payload.get("choice_ids"), (list, tuple)) and len(payload["choice_ids"]) <= 1:
                choice_ids = [_to_int(v) for v in payload["choice_ids"]]
            else:
                raise InvalidAnswerPayload("Single choice questions expect exactly one 'choice_id'")

        valid_ids = {c.id for c in question.choices.all()}
        invalid = [cid for cid in choice_ids if cid not in valid_ids]
        if invalid:
            raise ChoiceNotInQuestion(choice_ids=invalid)
        return NormalizedAnswer(question=question, choice_ids=choice_ids)

    def replace(self, assignment: ExamAssignment, normalized: NormalizedAnswer) -> List[Answer]:
        """Ersetzt alle Antwortzeilen des Versuchs für diese Frage."""
        question = normalized.question
        Answer.objects.filter(assignment=assignment, question=question).delete()

        if question.type == QuestionType.TEXT:
            rows = [Answer(assignment=assignment, question=question, answer_text=normalized.text)]
        else:
            rows = [
                Answer(assignment=assignment, question=question, choice_id=choice_id)
                for choice_id in normalized.choice_ids
            ]
        return Answer.objects.bulk_create(rows)

    def save(self, assignment: ExamAssignment, question: Question, payload: Dict[str, Any]) -> List[Answer]:
        if question.exam_id != assignment.exam_id:
            raise QuestionNotInExam(question_id=question.id)
        normalized = self.normalize(question, payload)
        answers = self.replace(assignment, normalized)
        logger.debug(
            f"Antwort gespeichert: Versuch {assignment.id}, Frage {question.id}, "
            f"{len(answers)} Zeile(n)"
        )
        return answers

    def persist_buffered(
        self,
        assignment: ExamAssignment,
        buffered: Iterable[Dict[str, Any]],
        strict: bool = True,
    ) -> int:
        """
        Übernimmt die vom Client zwischengespeicherten Antworten bei der Abgabe.

        Jeder Eintrag enthält ``question_id`` und den Payload der Frage.
        Mit ``strict=False`` (erzwungene Abgabe) werden ungültige Einträge
        protokolliert und übersprungen, damit die Abgabe nie scheitert.

        Returns:
            Anzahl der übernommenen Antworten
        """
        saved = 0
        for entry in buffered or []:
            try:
                if not isinstance(entry, dict):
                    raise InvalidAnswerPayload()
                question = self.get_question(assignment, entry.get("question_id"))
                self.replace(assignment, self.normalize(question, entry))
                saved += 1
            except ExamSessionException as e:
                if strict:
                    raise
                logger.warning(
                    f"Zwischengespeicherte Antwort für Versuch {assignment.id} verworfen: {e.message}"
                )
        return saved


answer_store = AnswerStore()
