"""
E-Learning Application Models Registry

This module serves as the central models registry for the E-Learning application.
It imports and exposes all models from the logical submodules (users, quizzes,
participation) to ensure they are properly registered with Django's ORM system.

The modular structure promotes separation of concerns while maintaining a unified
Django app namespace for the quiz functionality.

Architecture:
- users/: Profiles with viewer role and lifetime XP
- quizzes/: Authored quizzes, questions and choices
- participation/: Quiz attempts, stored answers and the XP ledger

Author: DSP Development Team
Version: 1.0.0
"""

# Import all user-related models for registration with Django ORM
from .users.models import *

# Import all quiz authoring models for registration with Django ORM
from .quizzes.models import *

# Import all participation models for registration with Django ORM
from .participation.models import *
