import logging
import random

from django.contrib.auth.models import User
from django.core.management.base import BaseCommand
from django.db import transaction

from ...models import Participation, Quiz, XpHistory
from ...participation.exceptions import QuizEngineError
from ...participation.recorder import ParticipationRecorder
from ...quizzes.services import QuestionService
from ...users.models import Role

# Configure logger
logger = logging.getLogger(__name__)

DEMO_PASSWORD = "test"

DEMO_USERS = [
    # (username, first_name, last_name, role)
    ("admin", "Ada", "Admin", Role.ADMIN),
    ("instructor", "Ian", "Instructor", Role.INSTRUCTOR),
    ("learner1", "Lena", "Becker", Role.LEARNER),
    ("learner2", "Tom", "Schulz", Role.LEARNER),
    ("learner3", "Mia", "Wagner", Role.LEARNER),
    ("learner4", "Jonas", "Fischer", Role.LEARNER),
]

DEMO_QUIZZES = {
    "Python Grundlagen": [
        {
            "question": "Welcher Datentyp ist unveränderlich?",
            "question_type": "multiple_choice",
            "score": 2,
            "time": 30,
            "choices": [
                {"choice": "list", "is_correct": False},
                {"choice": "tuple", "is_correct": True},
                {"choice": "dict", "is_correct": False},
            ],
        },
        {
            "question": "Welche Schlüsselwörter gehören zur Fehlerbehandlung?",
            "question_type": "checkbox",
            "score": 3,
            "time": 45,
            "choices": [
                {"choice": "try", "is_correct": True},
                {"choice": "except", "is_correct": True},
                {"choice": "loop", "is_correct": False},
                {"choice": "finally", "is_correct": True},
            ],
        },
        {
            "question": "Wie heißt die Funktion, die die Länge einer Liste liefert?",
            "question_type": "identification",
            "score": 1,
            "time": 20,
            "correct_answer": "len",
        },
    ],
    "Git Basics": [
        {
            "question": "Welcher Befehl erstellt einen neuen Commit?",
            "question_type": "multiple_choice",
            "score": 1,
            "time": 20,
            "choices": [
                {"choice": "git push", "is_correct": False},
                {"choice": "git commit", "is_correct": True},
                {"choice": "git fetch", "is_correct": False},
            ],
        },
        {
            "question": "Wie heißt der Standard-Remote nach einem Clone?",
            "question_type": "identification",
            "score": 2,
            "time": 30,
            "correct_answer": "origin",
        },
    ],
}


class Command(BaseCommand):
    help = "Seed demo users, quizzes and participations for the quiz engine."

    def add_arguments(self, parser):
        parser.add_argument(
            "--flush",
            action="store_true",
            help="Delete existing demo quizzes, participations and users before seeding.",
        )
        parser.add_argument("--seed", type=int, default=42, help="Random seed for the simulated answers.")

    def _create_user(self, username, first_name, last_name, role):
        user, created = User.objects.get_or_create(
            username=username,
            defaults={
                "first_name": first_name,
                "last_name": last_name,
                "email": f"{username}@example.com",
                "is_staff": role == Role.ADMIN,
                "is_superuser": role == Role.ADMIN,
            },
        )
        if created:
            user.set_password(DEMO_PASSWORD)
            user.save()
        # The profile itself is created by the post_save signal
        user.profile.role = role
        user.profile.save(update_fields=["role"])
        return user

    def _create_quiz(self, owner, title, questions):
        quiz, created = Quiz.objects.get_or_create(
            title=title,
            user=owner,
            defaults={"description": f"Demo-Quiz zum Thema {title}."},
        )
        if not created:
            self.stdout.write(f'  - Quiz "{title}" existiert bereits.')
            return quiz

        service = QuestionService()
        for data in questions:
            service.create_question(quiz, data)
        quiz.refresh_from_db()
        self.stdout.write(
            self.style.SUCCESS(f'  - Quiz "{title}" erstellt ({len(questions)} Fragen, {quiz.total_score} Punkte)')
        )
        return quiz

    @staticmethod
    def _random_answer(question):
        """Pick a plausible answer, right roughly two thirds of the time."""
        correct = [c.choice for c in question.choices if c.is_correct]
        wrong = [c.choice for c in question.choices if not c.is_correct]
        answer_right = random.random() < 0.66

        if question.question_type == "identification":
            return correct[0].upper() if answer_right else "keine Ahnung"
        if question.question_type == "checkbox":
            if answer_right or not wrong:
                return correct
            return correct[:1] + wrong[:1]
        if answer_right or not wrong:
            return correct[0]
        return random.choice(wrong)

    def _submit(self, recorder, learner, quiz):
        if Participation.objects.filter(user=learner, quiz=quiz).exists():
            self.stdout.write(f"  - {learner.username} hat {quiz.title} bereits abgelegt.")
            return

        questions = recorder.questions.get_questions(quiz.id)
        answers = [{"question_id": q.id, "answer": self._random_answer(q)} for q in questions]
        time_taken = random.randint(max(quiz.total_time // 3, 1), max(quiz.total_time, 1))
        try:
            result = recorder.submit(learner, quiz.id, answers, time_taken=time_taken)
        except QuizEngineError as exc:
            logger.warning(f"Seeding submission for {learner.username} on quiz {quiz.id} failed: {exc.message}")
            self.stdout.write(self.style.ERROR(f"  - Abgabe fehlgeschlagen: {exc.message}"))
            return
        self.stdout.write(
            f"  - {learner.username}: {result.total_score}/{result.max_score} Punkte, {result.xp_earned} XP"
        )

    def handle(self, *args, **options):
        random.seed(options["seed"])

        if options["flush"]:
            self.stdout.write(self.style.WARNING("Starting database cleanup before seeding..."))
            with transaction.atomic():
                XpHistory.objects.all().delete()
                Participation.objects.all().delete()
                Quiz.objects.filter(title__in=DEMO_QUIZZES.keys()).delete()
                User.objects.filter(username__in=[u[0] for u in DEMO_USERS]).delete()
            self.stdout.write(self.style.SUCCESS("Cleanup finished."))

        self.stdout.write("Erstelle Demo User...")
        users = {username: self._create_user(username, first, last, role) for username, first, last, role in DEMO_USERS}
        self.stdout.write(self.style.SUCCESS(f"{len(users)} User verarbeitet/erstellt."))

        self.stdout.write("Erstelle Quizze...")
        quizzes = [self._create_quiz(users["instructor"], title, questions) for title, questions in DEMO_QUIZZES.items()]

        self.stdout.write("Simuliere Abgaben...")
        recorder = ParticipationRecorder()
        learners = [user for user in users.values() if user.profile.role == Role.LEARNER]
        for quiz in quizzes:
            for learner in learners:
                self._submit(recorder, learner, quiz)

        self.stdout.write(self.style.SUCCESS("Database seeding finished."))
