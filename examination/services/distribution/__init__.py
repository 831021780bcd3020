"""
Distribution Services Package

Verteilung von Prüfungen an Studierende und Gruppen.

Author: Exam Platform Development Team
Version: 1.0.0
"""

from .assignment_service import (
    AssignmentDistributionService,
    DistributionResult,
    distribution_service,
)

__all__ = ["AssignmentDistributionService", "DistributionResult", "distribution_service"]
