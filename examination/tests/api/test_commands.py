from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from examination.models import ExamAssignment, QuestionType
from examination.tests.factories import create_user, create_exam, add_question, assign, minutes_ago


class AutoSubmitExpiredExamsTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.exam = create_exam(duration_minutes=30)
        add_question(cls.exam, QuestionType.ONE_CHOICE, 5, [("A", True), ("B", False)])
        cls.expired = assign(cls.exam, create_user("Max"), started_at=minutes_ago(45))
        cls.running = assign(cls.exam, create_user("Erika"), started_at=minutes_ago(10))
        cls.unstarted = assign(cls.exam, create_user("Paul"))

    def test_submits_only_expired_attempts(self):
        out = StringIO()
        call_command("auto_submit_expired_exams", stdout=out)

        self.assertIn("Submitted: 1", out.getvalue())
        expired = ExamAssignment.objects.get(pk=self.expired.pk)
        self.assertEqual(expired.submission_trigger, "timeout")
        self.assertTrue(expired.forced_submission)
        self.assertIsNone(ExamAssignment.objects.get(pk=self.running.pk).submitted_at)
        self.assertIsNone(ExamAssignment.objects.get(pk=self.unstarted.pk).submitted_at)

    def test_dry_run_changes_nothing(self):
        out = StringIO()
        call_command("auto_submit_expired_exams", "--dry-run", stdout=out)

        self.assertIn("Would submit: 1", out.getvalue())
        self.assertIsNone(ExamAssignment.objects.get(pk=self.expired.pk).submitted_at)

    def test_second_run_finds_nothing(self):
        call_command("auto_submit_expired_exams", stdout=StringIO())
        out = StringIO()
        call_command("auto_submit_expired_exams", stdout=out)
        self.assertIn("Submitted: 0", out.getvalue())


class SeedDemoExamTests(TestCase):
    def test_seed_creates_exam_with_assignments(self):
        call_command("seed_demo_exam", "--students", "2", stdout=StringIO())
        self.assertEqual(ExamAssignment.objects.count(), 2)
