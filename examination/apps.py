"""
Examination Application Configuration

This module contains the Django application configuration for the proctored
examination system. It defines the application's metadata and default field
configuration.

The examination application covers the exam session lifecycle: distribution of
exams to students, the attempt state machine, answer persistence, scoring and
the proctoring protocol that terminates sessions on critical violations.

Author: Exam Platform Development Team
Version: 1.0.0
"""

from django.apps import AppConfig


class ExaminationConfig(AppConfig):
    """
    Configuration class for the examination Django application.

    Attributes:
        default_auto_field: Default primary key field type for models
        name: Application name for Django registration
        verbose_name: Human-readable application name for admin interface
    """

    default_auto_field: str = "django.db.models.BigAutoField"
    name: str = "examination"
    verbose_name: str = "Proctored Examinations"
