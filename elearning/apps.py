"""
E-Learning Application Configuration

This module contains the Django application configuration for the quiz
learning system: quiz authoring, participation scoring, XP and analytics.

Author: DSP Development Team
Version: 1.0.0
"""

from django.apps import AppConfig


class ElearningConfig(AppConfig):
    """
    Configuration class for the E-Learning Django application.

    Attributes:
        default_auto_field: Default primary key field type for models
        name: Application name for Django registration
        verbose_name: Human-readable application name for admin interface
    """

    default_auto_field: str = "django.db.models.BigAutoField"
    name: str = "elearning"
    verbose_name: str = "E-Learning Quizzes"

    def ready(self) -> None:
        """
        Register signal handlers.

        The profile post_save receiver lives in users.models and is connected
        on import; importing the registry here makes that explicit.
        """
        super().ready()
        from . import models  # noqa: F401
