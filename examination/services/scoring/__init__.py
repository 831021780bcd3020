"""
Scoring Services Package

Bewertungs-Engine für Prüfungsversuche:
- Strategien pro Fragetyp (Single Choice, Multiple Choice, Freitext)
- ScoringService mit Dispatch-Tabelle

Author: Exam Platform Development Team
Version: 1.0.0
"""

from .strategies import (
    ScoringStrategy,
    SingleChoiceStrategy,
    MultipleChoiceStrategy,
    TextStrategy,
)
from .scoring_service import ScoringService, scoring_service

__all__ = [
    "ScoringStrategy",
    "SingleChoiceStrategy",
    "MultipleChoiceStrategy",
    "TextStrategy",
    "ScoringService",
    "scoring_service",
]
