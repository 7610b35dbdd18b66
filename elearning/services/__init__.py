"""
E-Learning Services Package

Shared infrastructure services of the quiz engine.

Struktur:
└── cache/    # Cache-Port für Fragen, Listen und Analytics

Author: DSP Development Team
Version: 1.0.0
"""

from .cache import QuizCache, get_quiz_cache

__all__ = [
    "QuizCache",
    "get_quiz_cache",
]
