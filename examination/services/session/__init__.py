"""
Session Services Package

Sitzungslogik eines Prüfungsversuchs:
- AssignmentStateMachine: Start, Antworten, Abgabe, Bewertung
- AnswerStore: Speicherung der Antworten
- ExamTimingService: serverseitige Zeitberechnung

Author: Exam Platform Development Team
Version: 1.0.0
"""

from .timing_service import ExamTimingService, timing_service
from .answer_store import AnswerStore, answer_store
from .state_machine import (
    AssignmentStateMachine,
    SubmissionResult,
    normalize_score,
    state_machine,
)

__all__ = [
    "ExamTimingService",
    "timing_service",
    "AnswerStore",
    "answer_store",
    "AssignmentStateMachine",
    "SubmissionResult",
    "normalize_score",
    "state_machine",
]
