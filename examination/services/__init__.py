"""
Exam Services Package - Proctored Exam Platform

Dieses Paket enthält alle Services der Prüfungssitzung:
- Scoring Services (Bewertung pro Fragetyp)
- Session Services (Zustandsautomat, Antworten, Zeitberechnung)
- Proctoring Services (Sicherheitsverstöße)
- Distribution Services (Verteilung an Studierende und Gruppen)
- Results Services (Ergebnisse und Statistiken)

Struktur:
├── scoring/          # Bewertungs-Engine
├── session/          # Lebenszyklus eines Prüfungsversuchs
├── proctoring/       # Verstoßmeldungen
├── distribution/     # Zuweisungen
└── results/          # Ergebnisaufbereitung

Author: Exam Platform Development Team
Version: 1.0.0
"""

# Scoring Services
from .scoring import ScoringService, scoring_service

# Session Services
from .session import (
    AssignmentStateMachine,
    AnswerStore,
    ExamTimingService,
    SubmissionResult,
    state_machine,
    answer_store,
    timing_service,
)

# Proctoring Services
from .proctoring import ViolationHandler, ViolationOutcome, violation_handler

# Distribution Services
from .distribution import AssignmentDistributionService, DistributionResult, distribution_service

# Results Services
from .results import ResultsService, results_service

__all__ = [
    # Scoring
    "ScoringService",
    "scoring_service",
    # Session
    "AssignmentStateMachine",
    "AnswerStore",
    "ExamTimingService",
    "SubmissionResult",
    "state_machine",
    "answer_store",
    "timing_service",
    # Proctoring
    "ViolationHandler",
    "ViolationOutcome",
    "violation_handler",
    # Distribution
    "AssignmentDistributionService",
    "DistributionResult",
    "distribution_service",
    # Results
    "ResultsService",
    "results_service",
]
