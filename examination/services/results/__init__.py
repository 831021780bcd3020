"""
Results Services Package

Ergebnisse und Statistiken von Prüfungsversuchen.

Author: Exam Platform Development Team
Version: 1.0.0
"""

from .results_service import ResultsService, results_service

__all__ = ["ResultsService", "results_service"]
