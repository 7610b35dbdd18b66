from rest_framework.permissions import BasePermission

from .models import Role, get_user_role


class HasQuizRole(BasePermission):
    """Allows access only to authenticated users holding one of the given roles."""

    allowed_roles: tuple = ()

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return get_user_role(user) in self.allowed_roles


class IsInstructorOrAdmin(HasQuizRole):
    """Analytics and authoring views: instructors see masked data, admins see everything."""

    allowed_roles = (Role.ADMIN, Role.INSTRUCTOR)


class IsLearner(HasQuizRole):
    """Quiz taking is reserved for learners."""

    allowed_roles = (Role.LEARNER,)
