import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Profile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "role",
                    models.CharField(
                        choices=[("admin", "Admin"), ("instructor", "Instructor"), ("learner", "Learner")],
                        default="learner",
                        help_text="Determines access to authoring and analytics views",
                        max_length=20,
                        verbose_name="Role",
                    ),
                ),
                (
                    "xp",
                    models.PositiveIntegerField(
                        default=0,
                        help_text="Lifetime XP; running sum of the user's XP history",
                        verbose_name="Experience Points",
                    ),
                ),
                (
                    "user",
                    models.OneToOneField(
                        help_text="Associated user account",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="profile",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="User",
                    ),
                ),
            ],
            options={
                "verbose_name": "User Profile",
                "verbose_name_plural": "User Profiles",
                "db_table": "elearning_profile",
            },
        ),
        migrations.CreateModel(
            name="Quiz",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255, verbose_name="Title")),
                ("description", models.TextField(blank=True, default="", verbose_name="Description")),
                (
                    "mode",
                    models.CharField(
                        choices=[("standard", "Standard"), ("focused", "Focused")],
                        default="standard",
                        max_length=20,
                        verbose_name="Mode",
                    ),
                ),
                (
                    "total_score",
                    models.PositiveIntegerField(
                        default=0,
                        help_text="Sum of question scores. Recomputed automatically.",
                        verbose_name="Total Score",
                    ),
                ),
                (
                    "total_time",
                    models.PositiveIntegerField(
                        default=0,
                        help_text="Sum of question time limits in seconds. Recomputed automatically.",
                        verbose_name="Total Time",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="quizzes",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Creator",
                    ),
                ),
            ],
            options={
                "verbose_name": "Quiz",
                "verbose_name_plural": "Quizzes",
                "ordering": ["-created_at", "id"],
                "db_table": "elearning_quiz",
            },
        ),
        migrations.CreateModel(
            name="Question",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "question_type",
                    models.CharField(
                        choices=[
                            ("multiple_choice", "Multiple Choice"),
                            ("checkbox", "Checkbox"),
                            ("identification", "Identification"),
                        ],
                        max_length=20,
                        verbose_name="Question Type",
                    ),
                ),
                ("question", models.TextField(verbose_name="Question")),
                ("score", models.PositiveIntegerField(default=1, verbose_name="Score")),
                (
                    "time",
                    models.PositiveIntegerField(
                        blank=True,
                        help_text="Time limit in seconds (optional)",
                        null=True,
                        verbose_name="Time Limit",
                    ),
                ),
                ("is_required", models.BooleanField(default=False, verbose_name="Required")),
                (
                    "quiz",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="questions",
                        to="elearning.quiz",
                        verbose_name="Quiz",
                    ),
                ),
            ],
            options={
                "verbose_name": "Question",
                "verbose_name_plural": "Questions",
                "ordering": ["quiz", "id"],
                "db_table": "elearning_question",
            },
        ),
        migrations.CreateModel(
            name="Choice",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("choice", models.CharField(max_length=500, verbose_name="Choice")),
                ("is_correct", models.BooleanField(default=False, verbose_name="Correct")),
                (
                    "question",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="choices",
                        to="elearning.question",
                        verbose_name="Question",
                    ),
                ),
            ],
            options={
                "verbose_name": "Choice",
                "verbose_name_plural": "Choices",
                "ordering": ["question", "id"],
                "db_table": "elearning_choice",
            },
        ),
        migrations.CreateModel(
            name="Participation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("total_score", models.PositiveIntegerField(default=0, verbose_name="Total Score")),
                ("xp_earned", models.PositiveIntegerField(default=0, verbose_name="XP Earned")),
                (
                    "time_taken",
                    models.PositiveIntegerField(
                        blank=True,
                        help_text="Seconds, as reported by the client",
                        null=True,
                        verbose_name="Time Taken",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("completed", "Completed"), ("in_progress", "In Progress")],
                        default="completed",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                (
                    "completed_at",
                    models.DateTimeField(default=django.utils.timezone.now, verbose_name="Completed At"),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "quiz",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="participations",
                        to="elearning.quiz",
                        verbose_name="Quiz",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="quiz_participations",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="User",
                    ),
                ),
            ],
            options={
                "verbose_name": "Quiz Participation",
                "verbose_name_plural": "Quiz Participations",
                "ordering": ["-completed_at", "-id"],
                "db_table": "elearning_participation",
                "indexes": [models.Index(fields=["quiz", "completed_at"], name="elearning_part_quiz_done_idx")],
                "constraints": [
                    models.UniqueConstraint(fields=("user", "quiz"), name="unique_participation_per_user_quiz")
                ],
            },
        ),
        migrations.CreateModel(
            name="Answer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("answer", models.TextField(blank=True, default="", verbose_name="Answer")),
                ("is_correct", models.BooleanField(default=False, verbose_name="Correct")),
                (
                    "participation",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="answers",
                        to="elearning.participation",
                        verbose_name="Participation",
                    ),
                ),
                (
                    "question",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="answers",
                        to="elearning.question",
                        verbose_name="Question",
                    ),
                ),
            ],
            options={
                "verbose_name": "Answer",
                "verbose_name_plural": "Answers",
                "ordering": ["participation", "question_id", "id"],
                "db_table": "elearning_participation_answer",
            },
        ),
        migrations.CreateModel(
            name="XpHistory",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "source",
                    models.CharField(choices=[("quiz", "Quiz")], default="quiz", max_length=20, verbose_name="Source"),
                ),
                ("source_id", models.PositiveIntegerField(verbose_name="Source ID")),
                ("xp_earned", models.PositiveIntegerField(verbose_name="XP Earned")),
                (
                    "description",
                    models.CharField(blank=True, default="", max_length=500, verbose_name="Description"),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="xp_history",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="User",
                    ),
                ),
            ],
            options={
                "verbose_name": "XP History Entry",
                "verbose_name_plural": "XP History",
                "ordering": ["-created_at", "-id"],
                "db_table": "elearning_xp_history",
            },
        ),
    ]
