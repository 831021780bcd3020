from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from examination.models import Answer, ExamAssignment, QuestionType, SecurityViolationLog
from examination.tests.factories import (
    create_user,
    create_exam,
    add_question,
    assign,
    correct_ids,
    wrong_ids,
    minutes_ago,
)

"""
    API-Tests aus Sicht der Studierenden: Prüfung starten, Sitzung fortsetzen,
    Antworten speichern, abgeben, Verstöße melden und Ergebnisse abrufen.
"""


class StudentApiTestCase(TestCase):
    # This setup is only executed once for the entire testfile
    @classmethod
    def setUpTestData(cls):
        cls.student = create_user("Max")
        cls.other = create_user("Erika")
        cls.teacher = create_user("Lehrer", staff=True)
        cls.exam = create_exam("Mathematik", duration_minutes=45)
        cls.single = add_question(cls.exam, QuestionType.ONE_CHOICE, 10, [("2", False), ("4", True)])
        cls.multiple = add_question(
            cls.exam, QuestionType.MULTIPLE, 10, [("Primzahl 2", True), ("Primzahl 3", True), ("4", False)]
        )

    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=self.student)


class StartAndSessionTests(StudentApiTestCase):
    def test_unauthenticated_request_is_rejected(self):
        response = APIClient().get(reverse("examination:my-exams"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_my_exams_lists_only_own_assignments(self):
        assign(self.exam, self.student)
        assign(create_exam("Physik"), self.other)

        response = self.client.get(reverse("examination:my-exams"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["exam"]["title"], "Mathematik")
        self.assertEqual(response.data[0]["exam"]["question_count"], 2)
        self.assertIsNone(response.data[0]["remaining_seconds"])

    def test_start_exam(self):
        assign(self.exam, self.student)

        response = self.client.post(reverse("examination:start-exam", args=[self.exam.id]))

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        attempt = response.data["attempt"]
        self.assertEqual(response.data["attempt_id"], attempt["id"])
        self.assertEqual(attempt["status"], ExamAssignment.Status.STARTED)
        self.assertLessEqual(attempt["timing"]["remaining_seconds"], 45 * 60)
        self.assertGreater(attempt["timing"]["remaining_seconds"], 44 * 60)
        self.assertEqual(len(attempt["exam"]["questions"]), 2)
        self.assertIn("security_features", attempt["exam"])

    def test_choices_do_not_reveal_correct_answers(self):
        assign(self.exam, self.student)
        response = self.client.post(reverse("examination:start-exam", args=[self.exam.id]))

        for question in response.data["attempt"]["exam"]["questions"]:
            for choice in question["choices"]:
                self.assertNotIn("is_correct", choice)

    def test_start_twice_is_conflict(self):
        assign(self.exam, self.student, started_at=minutes_ago(3))

        response = self.client.post(reverse("examination:start-exam", args=[self.exam.id]))

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["error_code"], "AlreadyStarted")

    def test_start_without_assignment_is_forbidden(self):
        response = self.client.post(reverse("examination:start-exam", args=[self.exam.id]))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["error_code"], "NotAssigned")

    def test_start_inactive_exam_is_forbidden(self):
        exam = create_exam("Entwurf", is_active=False)
        assign(exam, self.student)

        response = self.client.post(reverse("examination:start-exam", args=[exam.id]))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["error_code"], "ExamNotActive")

    def test_start_unknown_exam_is_not_found(self):
        response = self.client.post(reverse("examination:start-exam", args=[999999]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_resume_returns_server_side_remaining_time_and_answers(self):
        assignment = assign(self.exam, self.student, started_at=minutes_ago(15))
        Answer.objects.create(assignment=assignment, question=self.single, choice_id=correct_ids(self.single)[0])

        response = self.client.get(reverse("examination:attempt-session", args=[assignment.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        remaining = response.data["timing"]["remaining_seconds"]
        self.assertLessEqual(remaining, 30 * 60)
        self.assertGreater(remaining, 29 * 60)
        self.assertEqual(
            response.data["answers"],
            [{"question": self.single.id, "choice": correct_ids(self.single)[0], "answer_text": None}],
        )

    def test_attempt_of_other_student_is_not_found(self):
        assignment = assign(self.exam, self.other, started_at=minutes_ago(1))
        response = self.client.get(reverse("examination:attempt-session", args=[assignment.id]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class AnswerAndSubmitTests(StudentApiTestCase):
    def setUp(self):
        super().setUp()
        self.assignment = assign(self.exam, self.student, started_at=minutes_ago(5))

    def save(self, question, payload):
        url = reverse("examination:save-answer", args=[self.assignment.id, question.id])
        return self.client.put(url, payload, format="json")

    def test_save_answer(self):
        response = self.save(self.multiple, {"choice_ids": correct_ids(self.multiple)})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["saved_rows"], 2)
        self.assertEqual(Answer.objects.filter(assignment=self.assignment).count(), 2)

    def test_save_answer_with_foreign_choice(self):
        response = self.save(self.single, {"choice_id": correct_ids(self.multiple)[0]})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error_code"], "ChoiceNotInQuestion")

    def test_save_answer_for_question_of_other_exam(self):
        foreign = add_question(create_exam("Andere"), QuestionType.TEXT, 1)
        response = self.save(foreign, {"text": "x"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error_code"], "QuestionNotInExam")

    def test_save_answer_with_empty_body(self):
        response = self.save(self.single, {})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_submit_and_submit_again(self):
        self.save(self.single, {"choice_id": correct_ids(self.single)[0]})
        url = reverse("examination:submit-exam", args=[self.assignment.id])

        first = self.client.post(url, {}, format="json")
        second = self.client.post(url, {"trigger": "timeout"}, format="json")

        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertTrue(first.data["submitted"])
        self.assertEqual(first.data["auto_score"], Decimal("10.00"))
        self.assertEqual(first.data["status"], ExamAssignment.Status.GRADED)
        self.assertEqual(second.status_code, status.HTTP_200_OK)
        self.assertFalse(second.data["submitted"])
        self.assertTrue(second.data["already_submitted"])
        self.assertEqual(second.data["submission_trigger"], "manual")

    def test_submit_with_buffered_answers(self):
        url = reverse("examination:submit-exam", args=[self.assignment.id])
        payload = {"answers": [{"question_id": self.multiple.id, "choice_ids": correct_ids(self.multiple)}]}

        response = self.client.post(url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["auto_score"], Decimal("10.00"))

    def test_violation_submit_requires_kind(self):
        url = reverse("examination:submit-exam", args=[self.assignment.id])
        response = self.client.post(url, {"trigger": "violation"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_save_after_submit_is_rejected(self):
        self.client.post(reverse("examination:submit-exam", args=[self.assignment.id]), {}, format="json")

        response = self.save(self.single, {"choice_id": wrong_ids(self.single)[0]})

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["error_code"], "SessionClosed")

    def test_save_after_expiry_submits_exam(self):
        ExamAssignment.objects.filter(pk=self.assignment.pk).update(started_at=minutes_ago(50))

        response = self.save(self.single, {"choice_id": correct_ids(self.single)[0]})

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["error_code"], "SessionClosed")
        self.assignment.refresh_from_db()
        self.assertEqual(self.assignment.submission_trigger, "timeout")


class ViolationAndResultsTests(StudentApiTestCase):
    def setUp(self):
        super().setUp()
        self.assignment = assign(self.exam, self.student, started_at=minutes_ago(5))

    def report(self, violation_type, **extra):
        url = reverse("examination:report-violation", args=[self.assignment.id])
        return self.client.post(url, {"violation_type": violation_type, **extra}, format="json")

    def test_non_critical_violation(self):
        response = self.report("right_click", details="Kontextmenü")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            response.data,
            {"success": True, "violation_type": "right_click", "critical": False, "exam_terminated": False},
        )

    def test_critical_violation_terminates_exam(self):
        answers = [{"question_id": self.single.id, "choice_id": correct_ids(self.single)[0]}]
        response = self.report("tab_switch", answers=answers)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["exam_terminated"])
        self.assignment.refresh_from_db()
        self.assertTrue(self.assignment.forced_submission)
        self.assertEqual(self.assignment.auto_score, Decimal("10.00"))
        self.assertEqual(SecurityViolationLog.objects.filter(assignment=self.assignment).count(), 1)

    def test_unknown_violation_type(self):
        response = self.report("screenshot")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error_code"], "UnknownViolationKind")

    def test_results_before_submission_are_hidden(self):
        response = self.client.get(reverse("examination:attempt-results", args=[self.assignment.id]))
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["error_code"], "NotSubmitted")

    def test_results_after_submission(self):
        self.client.put(
            reverse("examination:save-answer", args=[self.assignment.id, self.single.id]),
            {"choice_id": correct_ids(self.single)[0]},
            format="json",
        )
        self.client.post(reverse("examination:submit-exam", args=[self.assignment.id]), {}, format="json")

        response = self.client.get(reverse("examination:attempt-results", args=[self.assignment.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["total_score"], Decimal("10.00"))
        self.assertEqual(response.data["max_score"], Decimal("20.00"))
        self.assertEqual(response.data["percentage"], 50.0)

    def test_results_of_other_student_are_forbidden(self):
        self.client.force_authenticate(user=self.other)
        response = self.client.get(reverse("examination:attempt-results", args=[self.assignment.id]))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_teacher_sees_results_before_submission(self):
        self.client.force_authenticate(user=self.teacher)
        response = self.client.get(reverse("examination:attempt-results", args=[self.assignment.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data["total_score"])
