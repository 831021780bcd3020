import datetime

from django.test import TestCase, override_settings
from django.utils import timezone

from examination.models import ExamAssignment
from examination.services.session import ExamTimingService
from examination.tests.factories import create_user, create_exam, assign, minutes_ago

"""
    Tests für die serverseitige Zeitberechnung einer Prüfungssitzung.
"""


class ExamTimingServiceTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.student = create_user("Max")
        cls.exam = create_exam(duration_minutes=30)

    def setUp(self):
        self.timing = ExamTimingService()
        self.now = timezone.now()

    def test_remaining_seconds_follow_started_at(self):
        assignment = assign(self.exam, self.student, started_at=minutes_ago(10, self.now))
        self.assertEqual(self.timing.calculate_remaining_seconds(assignment, self.now), 20 * 60)

    def test_remaining_seconds_never_negative(self):
        assignment = assign(self.exam, self.student, started_at=minutes_ago(45, self.now))
        self.assertEqual(self.timing.calculate_remaining_seconds(assignment, self.now), 0)

    def test_remaining_seconds_before_start_and_after_submit(self):
        assignment = assign(self.exam, self.student)
        self.assertIsNone(self.timing.calculate_remaining_seconds(assignment, self.now))

        assignment.started_at = minutes_ago(5, self.now)
        assignment.submitted_at = self.now
        assignment.status = ExamAssignment.Status.SUBMITTED
        self.assertEqual(self.timing.calculate_remaining_seconds(assignment, self.now), 0)

    def test_expiry_respects_grace_period(self):
        started = self.now - datetime.timedelta(minutes=30, seconds=20)
        assignment = assign(self.exam, self.student, started_at=started)

        self.assertFalse(self.timing.is_expired(assignment, self.now))
        self.assertTrue(self.timing.is_expired(assignment, self.now, with_grace=False))
        self.assertTrue(self.timing.is_expired(assignment, self.now + datetime.timedelta(seconds=11)))

    @override_settings(EXAM_SESSION={"TIMER_GRACE_PERIOD_SECONDS": 0})
    def test_grace_period_is_configurable(self):
        started = self.now - datetime.timedelta(minutes=30, seconds=1)
        assignment = assign(self.exam, self.student, started_at=started)
        self.assertTrue(self.timing.is_expired(assignment, self.now))

    def test_unstarted_attempt_never_expires(self):
        self.assertFalse(self.timing.is_expired(assign(self.exam, self.student), self.now))

    def test_near_expiration_in_last_tenth(self):
        assignment = assign(self.exam, self.student, started_at=minutes_ago(28, self.now))
        self.assertTrue(self.timing.is_near_expiration(assignment, self.now))

        assignment.started_at = minutes_ago(20, self.now)
        self.assertFalse(self.timing.is_near_expiration(assignment, self.now))

    def test_format_time_remaining(self):
        self.assertEqual(ExamTimingService.format_time_remaining(0), "00:00:00")
        self.assertEqual(ExamTimingService.format_time_remaining(3725), "01:02:05")
        self.assertEqual(ExamTimingService.format_time_remaining(None), "00:00:00")

    def test_time_window_status(self):
        hour = datetime.timedelta(hours=1)
        self.assertEqual(self.timing.get_time_window_status(self.exam, self.now), "open")
        self.assertEqual(
            self.timing.get_time_window_status(create_exam("Aus", is_active=False), self.now), "inactive"
        )
        self.assertEqual(
            self.timing.get_time_window_status(create_exam("Bald", start_time=self.now + hour), self.now),
            "not_started",
        )
        self.assertEqual(
            self.timing.get_time_window_status(create_exam("Vorbei", end_time=self.now - hour), self.now),
            "ended",
        )

    def test_session_timing_payload(self):
        assignment = assign(self.exam, self.student, started_at=minutes_ago(10, self.now))
        timing = self.timing.get_session_timing(assignment, self.now)

        self.assertEqual(timing["remaining_seconds"], 1200)
        self.assertEqual(timing["formatted_remaining"], "00:20:00")
        self.assertEqual(timing["deadline"], assignment.started_at + datetime.timedelta(minutes=30))
        self.assertFalse(timing["expired"])
        self.assertFalse(timing["near_expiration"])
        self.assertEqual(timing["server_time"], self.now)
