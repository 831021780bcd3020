"""
Proctoring Services Package

Verarbeitung der Sicherheitsmeldungen des Sitzungsmonitors.

Author: Exam Platform Development Team
Version: 1.0.0
"""

from .violation_handler import ViolationHandler, ViolationOutcome, violation_handler

__all__ = ["ViolationHandler", "ViolationOutcome", "violation_handler"]
