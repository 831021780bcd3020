"""
Examination Application Models Registry

This module serves as the central models registry for the examination
application. It imports and exposes all models from the logical submodules
(exams, attempts) to ensure they are properly registered with Django's ORM.

Architecture:
- exams/: Exam definitions, questions and choices
- attempts/: Student attempts, answers and the security violation log

Author: Exam Platform Development Team
Version: 1.0.0
"""

# Import all exam definition models for registration with Django ORM
from .exams.models import *

# Import all attempt-related models for registration with Django ORM
from .attempts.models import *
