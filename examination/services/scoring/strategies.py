"""
Scoring Strategies

One strategy per question type. Strategies are pure: they receive the
question and the answer rows stored for it and never touch the database
themselves (the question's choices should be prefetched by the caller).

Author: Exam Platform Development Team
Version: 1.0.0
"""

from decimal import Decimal
from typing import Iterable, Optional, Sequence, Set

from ...exams.models import QuestionType

ZERO = Decimal("0.00")
TWO_PLACES = Decimal("0.01")


def quantize(value) -> Decimal:
    return Decimal(value).quantize(TWO_PLACES)


def selected_choice_ids(answers: Iterable) -> Set[int]:
    return {a.choice_id for a in answers if a.choice_id is not None}


class ScoringStrategy:
    """
    Basis für alle Bewertungsstrategien.

    Unterklassen setzen ``question_types`` und implementieren
    ``is_correct`` und ``calculate_score``.
    """

    question_types: Sequence[str] = ()

    def supports(self, question_type: str) -> bool:
        return question_type in self.question_types

    def is_correct(self, question, answers: Sequence) -> Optional[bool]:
        raise NotImplementedError

    def calculate_score(self, question, answers: Sequence) -> Decimal:
        if self.is_correct(question, answers):
            return quantize(question.points)
        return ZERO


class SingleChoiceStrategy(ScoringStrategy):
    """Genau eine ausgewählte Option, die als korrekt markiert ist."""

    question_types = (QuestionType.ONE_CHOICE, QuestionType.BOOLEAN)

    def is_correct(self, question, answers: Sequence) -> Optional[bool]:
        selected = selected_choice_ids(answers)
        if len(answers) != 1 or len(selected) != 1:
            return False
        return selected <= question.correct_choice_ids()


class MultipleChoiceStrategy(ScoringStrategy):
    """
    Alles-oder-nichts: Die Menge der gewählten Optionen muss exakt der
    Menge der korrekten Optionen entsprechen. Eine Frage ohne korrekte
    Optionen ergibt immer 0 Punkte.
    """

    question_types = (QuestionType.MULTIPLE,)

    def is_correct(self, question, answers: Sequence) -> Optional[bool]:
        correct = question.correct_choice_ids()
        if not correct:
            return False
        return selected_choice_ids(answers) == correct


class TextStrategy(ScoringStrategy):
    """Freitext wird manuell bewertet; bis dahin zählt die Frage 0 Punkte."""

    question_types = (QuestionType.TEXT,)

    def is_correct(self, question, answers: Sequence) -> Optional[bool]:
        return None

    def calculate_score(self, question, answers: Sequence) -> Decimal:
        total = sum((a.score for a in answers if a.score is not None), ZERO)
        return quantize(total)


DEFAULT_STRATEGIES = (
    SingleChoiceStrategy(),
    MultipleChoiceStrategy(),
    TextStrategy(),
)
