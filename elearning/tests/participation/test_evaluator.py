from django.test import SimpleTestCase

from elearning.participation.answers import (
    MultiChoiceAnswer,
    SingleChoiceAnswer,
    TextAnswer,
    display_answer,
    parse_answer,
)
from elearning.participation.evaluator import evaluate
from elearning.participation.exceptions import ValidationError
from elearning.quizzes.models import ChoiceSnapshot, QuestionSnapshot


def snapshot(question_type, choices):
    return QuestionSnapshot(
        id=1,
        quiz_id=1,
        question_type=question_type,
        question="?",
        score=1,
        choices=tuple(ChoiceSnapshot(choice=c, is_correct=ok) for c, ok in choices),
    )


class MultipleChoiceEvaluationTests(SimpleTestCase):
    def setUp(self):
        self.question = snapshot("multiple_choice", [("Paris", True), ("Lyon", False)])

    def test_correct_choice_ignores_surrounding_whitespace(self):
        self.assertTrue(evaluate(self.question, SingleChoiceAnswer(" Paris ")))

    def test_comparison_is_case_sensitive(self):
        self.assertFalse(evaluate(self.question, SingleChoiceAnswer("paris")))

    def test_wrong_choice(self):
        self.assertFalse(evaluate(self.question, SingleChoiceAnswer("Lyon")))

    def test_empty_answer_is_incorrect(self):
        self.assertFalse(evaluate(self.question, SingleChoiceAnswer("")))

    def test_question_without_correct_choice_is_never_correct(self):
        question = snapshot("multiple_choice", [("A", False), ("B", False)])
        self.assertFalse(evaluate(question, SingleChoiceAnswer("A")))

    def test_first_correct_choice_wins(self):
        question = snapshot("multiple_choice", [("A", True), ("B", True)])
        self.assertTrue(evaluate(question, SingleChoiceAnswer("A")))
        self.assertFalse(evaluate(question, SingleChoiceAnswer("B")))


class CheckboxEvaluationTests(SimpleTestCase):
    def setUp(self):
        self.question = snapshot("checkbox", [("try", True), ("except", True), ("loop", False)])

    def test_exact_set_in_any_order(self):
        self.assertTrue(evaluate(self.question, MultiChoiceAnswer(("except", " try"))))

    def test_subset_is_incorrect(self):
        self.assertFalse(evaluate(self.question, MultiChoiceAnswer(("try",))))

    def test_superset_is_incorrect(self):
        self.assertFalse(evaluate(self.question, MultiChoiceAnswer(("try", "except", "loop"))))

    def test_empty_selection_is_incorrect(self):
        self.assertFalse(evaluate(self.question, MultiChoiceAnswer(())))

    def test_single_string_counts_as_one_element_selection(self):
        question = snapshot("checkbox", [("only", True), ("other", False)])
        self.assertTrue(evaluate(question, parse_answer("checkbox", "only")))


class IdentificationEvaluationTests(SimpleTestCase):
    def setUp(self):
        self.question = snapshot("identification", [("Origin", True), ("upstream", True), ("", True)])

    def test_case_insensitive_match_against_any_accepted_answer(self):
        self.assertTrue(evaluate(self.question, TextAnswer("  ORIGIN ")))
        self.assertTrue(evaluate(self.question, TextAnswer("Upstream")))

    def test_blank_answer_never_matches_blank_choice(self):
        self.assertFalse(evaluate(self.question, TextAnswer("   ")))

    def test_unknown_question_type_is_incorrect(self):
        question = snapshot("essay", [("x", True)])
        self.assertFalse(evaluate(question, SingleChoiceAnswer("x")))


class ParseAnswerTests(SimpleTestCase):
    def test_null_answer_is_empty(self):
        self.assertTrue(parse_answer("multiple_choice", None).is_empty)
        self.assertTrue(parse_answer("checkbox", None).is_empty)

    def test_list_for_single_value_question_is_rejected(self):
        with self.assertRaises(ValidationError):
            parse_answer("identification", ["a", "b"])

    def test_non_string_answer_is_rejected(self):
        with self.assertRaises(ValidationError):
            parse_answer("multiple_choice", 42)

    def test_checkbox_answer_is_stored_as_json_array(self):
        answer = parse_answer("checkbox", ["a", "b"])
        self.assertEqual(answer.stored_value(), '["a", "b"]')
        self.assertEqual(display_answer(answer.stored_value()), "a, b")
