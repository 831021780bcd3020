"""
Exam Timing Service

Server-side authority on the time of an exam session. The remaining time
is always derived from ``started_at`` and the exam duration, so reloading
the client or starting again can never reset the countdown.

Author: Exam Platform Development Team
Version: 1.0.0
"""

import datetime
import logging
from typing import Any, Dict, Optional

from django.utils import timezone

from ...conf import get_setting
from ...exams.models import Exam
from ...attempts.models import ExamAssignment

logger = logging.getLogger(__name__)


class ExamTimingService:

    def get_grace_period(self) -> datetime.timedelta:
        return datetime.timedelta(seconds=int(get_setting("TIMER_GRACE_PERIOD_SECONDS")))

    def get_deadline(self, assignment: ExamAssignment) -> Optional[datetime.datetime]:
        return assignment.due_date

    def calculate_remaining_seconds(
        self, assignment: ExamAssignment, now: Optional[datetime.datetime] = None
    ) -> Optional[int]:
        """
        Verbleibende Sekunden: ``duration - (now - started_at)``, nie negativ.

        Returns:
            None, wenn die Prüfung nicht gestartet wurde; 0 nach der Abgabe.
        """
        if assignment.started_at is None:
            return None
        if assignment.submitted_at is not None:
            return 0
        now = now or timezone.now()
        remaining = (self.get_deadline(assignment) - now).total_seconds()
        return max(0, int(remaining))

    def is_expired(
        self,
        assignment: ExamAssignment,
        now: Optional[datetime.datetime] = None,
        with_grace: bool = True,
    ) -> bool:
        deadline = self.get_deadline(assignment)
        if deadline is None:
            return False
        now = now or timezone.now()
        if with_grace:
            deadline += self.get_grace_period()
        return now > deadline

    def is_near_expiration(
        self, assignment: ExamAssignment, now: Optional[datetime.datetime] = None
    ) -> bool:
        remaining = self.calculate_remaining_seconds(assignment, now)
        if not remaining:
            return False
        threshold = assignment.exam.duration_minutes * 60 * float(get_setting("NEAR_EXPIRATION_RATIO"))
        return remaining <= threshold

    @staticmethod
    def format_time_remaining(seconds: Optional[int]) -> str:
        """Formatiert Sekunden als HH:MM:SS."""
        seconds = max(0, int(seconds or 0))
        hours, rest = divmod(seconds, 3600)
        minutes, secs = divmod(rest, 60)
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"

    def get_time_window_status(self, exam: Exam, now: Optional[datetime.datetime] = None) -> str:
        now = now or timezone.now()
        if not exam.is_active:
            return "inactive"
        if exam.start_time and now < exam.start_time:
            return "not_started"
        if exam.has_ended(now):
            return "ended"
        return "open"

    def get_session_timing(
        self, assignment: ExamAssignment, now: Optional[datetime.datetime] = None
    ) -> Dict[str, Any]:
        now = now or timezone.now()
        remaining = self.calculate_remaining_seconds(assignment, now)
        return {
            "remaining_seconds": remaining,
            "formatted_remaining": self.format_time_remaining(remaining),
            "deadline": self.get_deadline(assignment),
            "near_expiration": self.is_near_expiration(assignment, now),
            "expired": self.is_expired(assignment, now, with_grace=False),
            "server_time": now,
        }


timing_service = ExamTimingService()
