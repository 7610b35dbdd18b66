from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from elearning.participation.exceptions import QuizNotFound, ValidationError
from elearning.quizzes.models import Quiz
from elearning.quizzes.services import QuestionService
from elearning.services.cache import analytics_key, quiz_questions_key
from elearning.users.models import Role

from ..fixtures import make_cache, make_capital_quiz, make_user


class QuestionServiceTests(TestCase):
    def setUp(self):
        self.cache = make_cache()
        self.owner = make_user("lehrer", Role.INSTRUCTOR)
        self.service = QuestionService(cache=self.cache)
        self.quiz = Quiz.objects.create(user=self.owner, title="Leeres Quiz")

    def test_multiple_choice_needs_exactly_one_correct_choice(self):
        for choices in (
            [{"choice": "A", "is_correct": False}],
            [{"choice": "A", "is_correct": True}, {"choice": "B", "is_correct": True}],
        ):
            with self.assertRaises(ValidationError):
                self.service.create_question(
                    self.quiz, {"question": "?", "question_type": "multiple_choice", "choices": choices}
                )
        self.assertFalse(self.quiz.questions.exists())

    def test_checkbox_needs_a_correct_choice(self):
        with self.assertRaises(ValidationError):
            self.service.create_question(
                self.quiz,
                {"question": "?", "question_type": "checkbox", "choices": [{"choice": "A", "is_correct": False}]},
            )

    def test_identification_stores_correct_answer_as_choice(self):
        question = self.service.create_question(
            self.quiz, {"question": "?", "question_type": "identification", "correct_answer": " origin "}
        )
        self.assertEqual(list(question.choices.values_list("choice", "is_correct")), [("origin", True)])

    def test_totals_follow_create_update_and_delete(self):
        quiz, mc, ident = make_capital_quiz(self.owner, cache=self.cache)
        self.assertEqual((quiz.total_score, quiz.total_time), (15, 60))

        self.service.update_question(
            ident,
            {"question": "Neu?", "question_type": "identification", "score": 7, "time": None, "correct_answer": "x"},
        )
        quiz.refresh_from_db()
        self.assertEqual((quiz.total_score, quiz.total_time), (17, 30))

        self.service.delete_question(mc)
        quiz.refresh_from_db()
        self.assertEqual((quiz.total_score, quiz.total_time), (7, 0))

    def test_changes_refresh_question_cache_and_drop_analytics(self):
        quiz, mc, _ = make_capital_quiz(self.owner, cache=self.cache)
        self.cache.put(analytics_key(quiz.id), {"stale": True}, 600)

        self.service.delete_question(mc)

        self.assertIsNone(self.cache.get(analytics_key(quiz.id)))
        cached = self.cache.get(quiz_questions_key(quiz.id))
        self.assertEqual([q.id for q in cached], [q.id for q in self.service.get_questions(quiz.id)])
        self.assertNotIn(mc.id, [q.id for q in cached])

    def test_quiz_payload_hides_correctness(self):
        quiz, _, _ = make_capital_quiz(self.owner, cache=self.cache)
        payload = self.service.get_quiz_payload(quiz.id)

        self.assertEqual(payload["total_score"], 15)
        self.assertEqual(payload["questions"][0]["choices"], ["Paris", "Lyon"])
        self.assertEqual(payload["questions"][1]["choices"], [])
        self.assertNotIn("is_correct", str(payload))

    def test_payload_of_unknown_quiz(self):
        with self.assertRaises(QuizNotFound):
            self.service.get_quiz_payload(999999)


class AuthoringViewTests(TestCase):
    def setUp(self):
        make_cache()
        self.client = APIClient()
        self.owner = make_user("lehrer", Role.INSTRUCTOR)
        self.learner = make_user("Max")

    def test_instructor_creates_quiz_and_question(self):
        self.client.force_authenticate(self.owner)
        response = self.client.post("/api/elearning/quizzes/", {"title": "Git"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        quiz_id = response.json()["id"]

        response = self.client.post(
            f"/api/elearning/quizzes/{quiz_id}/questions/",
            {
                "question": "Standard-Remote?",
                "question_type": "identification",
                "score": 3,
                "time": 20,
                "correct_answer": "origin",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Quiz.objects.get(pk=quiz_id).total_score, 3)

    def test_invalid_question_returns_error_payload(self):
        quiz = Quiz.objects.create(user=self.owner, title="Git")
        self.client.force_authenticate(self.owner)
        response = self.client.post(
            f"/api/elearning/quizzes/{quiz.id}/questions/",
            {"question": "?", "question_type": "identification"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["error_code"], "VALIDATION_ERROR")

    def test_learner_cannot_author(self):
        self.client.force_authenticate(self.learner)
        response = self.client.post("/api/elearning/quizzes/", {"title": "Git"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_learner_reads_questions_without_flags(self):
        quiz, _, _ = make_capital_quiz(self.owner)
        self.client.force_authenticate(self.learner)
        response = self.client.get(f"/api/elearning/quizzes/{quiz.id}/questions/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.json()["questions"]), 2)

    def test_other_instructor_cannot_edit_foreign_quiz(self):
        quiz, mc, _ = make_capital_quiz(self.owner)
        self.client.force_authenticate(make_user("fremd", Role.INSTRUCTOR))
        response = self.client.delete(f"/api/elearning/quizzes/questions/{mc.id}/")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
