from decimal import Decimal

from django.contrib.auth.models import Group
from django.test import TestCase

from examination.models import ExamAssignment, QuestionType
from examination.exceptions import UnassignNotAllowed
from examination.services.distribution import AssignmentDistributionService
from examination.services.results import ResultsService
from examination.services.session import AssignmentStateMachine
from examination.tests.factories import (
    create_user,
    create_exam,
    add_question,
    assign,
    correct_ids,
    wrong_ids,
    minutes_ago,
)


class DistributionTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.teacher = create_user("Lehrer", staff=True)
        cls.max = create_user("Max")
        cls.erika = create_user("Erika")
        cls.inactive = create_user("Alt")
        cls.inactive.is_active = False
        cls.inactive.save()
        cls.group = Group.objects.create(name="Klasse 10a")
        cls.group.user_set.add(cls.erika, cls.inactive)
        cls.exam = create_exam()

    def setUp(self):
        self.service = AssignmentDistributionService()

    def test_assign_to_students_and_groups(self):
        result = self.service.assign(
            self.exam, student_ids=[self.max.id, self.erika.id], group_ids=[self.group.id], assigned_by=self.teacher
        )

        self.assertEqual(result.created_count, 2)
        self.assertEqual(result.existing, 0)
        students = set(ExamAssignment.objects.filter(exam=self.exam).values_list("student__username", flat=True))
        self.assertEqual(students, {"Max", "Erika"})
        self.assertEqual(result.created[0].assigned_by, self.teacher)

    def test_repeated_assignment_is_idempotent(self):
        self.service.assign(self.exam, student_ids=[self.max.id])
        result = self.service.assign(self.exam, student_ids=[self.max.id, self.erika.id])

        self.assertEqual(result.created_count, 1)
        self.assertEqual(result.existing, 1)
        self.assertEqual(ExamAssignment.objects.filter(exam=self.exam).count(), 2)

    def test_assign_to_groups_skips_inactive_members(self):
        result = self.service.assign_to_groups(self.exam, [self.group])
        self.assertEqual([a.student for a in result.created], [self.erika])

    def test_unassign_before_start(self):
        assignment = assign(self.exam, self.max)
        self.service.unassign(assignment)
        self.assertFalse(ExamAssignment.objects.filter(pk=assignment.pk).exists())

    def test_unassign_after_start_is_rejected(self):
        assignment = assign(self.exam, self.max, started_at=minutes_ago(1))
        with self.assertRaises(UnassignNotAllowed):
            self.service.unassign(assignment)
        self.assertTrue(ExamAssignment.objects.filter(pk=assignment.pk).exists())


class ResultsServiceTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.exam = create_exam()
        cls.single = add_question(cls.exam, QuestionType.ONE_CHOICE, 10, [("A", True), ("B", False)])
        cls.text = add_question(cls.exam, QuestionType.TEXT, 10)
        cls.max = create_user("Max")
        cls.erika = create_user("Erika")
        cls.paul = create_user("Paul")

    def setUp(self):
        self.machine = AssignmentStateMachine()
        self.results = ResultsService()

    def test_results_before_and_after_grading(self):
        assignment = assign(self.exam, self.max, started_at=minutes_ago(20))
        self.machine.save_answer(assignment, self.single, {"choice_id": correct_ids(self.single)[0]})
        self.machine.save_answer(assignment, self.text, {"text": "Antwort"})
        self.machine.submit(assignment)

        results = self.results.get_results(assignment)
        self.assertEqual(results["auto_score"], Decimal("10.00"))
        self.assertIsNone(results["total_score"])
        self.assertIsNone(results["percentage"])
        self.assertEqual(results["max_score"], Decimal("20.00"))
        single, text = results["questions"]
        self.assertTrue(single["is_correct"])
        self.assertEqual(single["selected_choice_ids"], correct_ids(self.single))
        self.assertIsNone(text["is_correct"])
        self.assertFalse(text["graded"])

        assignment = self.machine.grade_text_question(assignment, self.text, 5, feedback="Teilweise")
        results = self.results.get_results(assignment)
        self.assertEqual(results["total_score"], Decimal("15.00"))
        self.assertEqual(results["percentage"], 75.0)
        self.assertEqual(results["questions"][1]["feedback"], "Teilweise")
        self.assertTrue(results["questions"][1]["graded"])

    def test_completion_stats(self):
        graded = assign(self.exam, self.max, started_at=minutes_ago(20))
        self.machine.save_answer(graded, self.single, {"choice_id": wrong_ids(self.single)[0]})
        self.machine.submit(graded)
        assign(self.exam, self.erika, started_at=minutes_ago(5))
        assign(self.exam, self.paul)

        stats = self.results.get_completion_stats(self.exam)

        self.assertEqual(stats["total"], 3)
        self.assertEqual(stats["assigned"], 1)
        self.assertEqual(stats["started"], 1)
        self.assertEqual(stats["graded"], 1)
        self.assertEqual(stats["average_score"], Decimal("0.00"))
        self.assertAlmostEqual(stats["completion_rate"], 33.33)
