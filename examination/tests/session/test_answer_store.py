from django.test import TestCase

from examination.models import Answer, QuestionType
from examination.exceptions import ChoiceNotInQuestion, InvalidAnswerPayload, QuestionNotInExam
from examination.services.session import AnswerStore
from examination.tests.factories import (
    create_user,
    create_exam,
    add_question,
    assign,
    correct_ids,
    wrong_ids,
    minutes_ago,
)


class AnswerStoreTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.student = create_user("Max")
        cls.exam = create_exam()
        cls.single = add_question(cls.exam, QuestionType.ONE_CHOICE, 5, [("A", True), ("B", False)])
        cls.multiple = add_question(cls.exam, QuestionType.MULTIPLE, 5, [("A", True), ("B", True), ("C", False)])
        cls.text = add_question(cls.exam, QuestionType.TEXT, 5)

    def setUp(self):
        self.store = AnswerStore()
        self.assignment = assign(self.exam, self.student, started_at=minutes_ago(1))

    def test_multiple_choice_ids_are_deduplicated_and_sorted(self):
        a, b = correct_ids(self.multiple)
        normalized = self.store.normalize(self.multiple, {"choice_ids": [b, a, b]})
        self.assertEqual(normalized.choice_ids, [a, b])

    def test_empty_multiple_selection_clears_rows(self):
        self.store.save(self.assignment, self.multiple, {"choice_ids": correct_ids(self.multiple)})
        self.store.save(self.assignment, self.multiple, {"choice_ids": []})
        self.assertFalse(Answer.objects.filter(assignment=self.assignment, question=self.multiple).exists())

    def test_single_choice_accepts_choice_id_or_one_element_list(self):
        self.assertEqual(self.store.normalize(self.single, {"choice_id": wrong_ids(self.single)[0]}).choice_ids,
                         wrong_ids(self.single))
        self.assertEqual(self.store.normalize(self.single, {"choice_ids": correct_ids(self.single)}).choice_ids,
                         correct_ids(self.single))
        self.assertEqual(self.store.normalize(self.single, {"choice_id": None}).choice_ids, [])

    def test_single_choice_rejects_several_choices(self):
        ids = [c.id for c in self.single.choices.all()]
        with self.assertRaises(InvalidAnswerPayload):
            self.store.normalize(self.single, {"choice_ids": ids})

    def test_text_is_stripped(self):
        rows = self.store.save(self.assignment, self.text, {"text": "  Antwort \n"})
        self.assertEqual([r.answer_text for r in rows], ["Antwort"])

    def test_wrong_payload_shapes_are_rejected(self):
        cases = [
            (self.text, {"choice_id": 1}),
            (self.text, {"text": 5}),
            (self.multiple, {"choice_id": correct_ids(self.multiple)[0]}),
            (self.multiple, {"choice_ids": "1,2"}),
            (self.single, {"choice_id": "abc"}),
            (self.single, {"choice_id": True}),
        ]
        for question, payload in cases:
            with self.subTest(payload=payload):
                with self.assertRaises(InvalidAnswerPayload):
                    self.store.normalize(question, payload)

    def test_foreign_choice_is_rejected(self):
        with self.assertRaises(ChoiceNotInQuestion) as ctx:
            self.store.normalize(self.multiple, {"choice_ids": correct_ids(self.single)})
        self.assertEqual(ctx.exception.details["choice_ids"], correct_ids(self.single))

    def test_get_question_checks_exam(self):
        other = add_question(create_exam("Andere"), QuestionType.TEXT, 1)
        with self.assertRaises(QuestionNotInExam):
            self.store.get_question(self.assignment, other.id)
        with self.assertRaises(QuestionNotInExam):
            self.store.get_question(self.assignment, "keine-id")
        self.assertEqual(self.store.get_question(self.assignment, str(self.text.id)), self.text)
