"""
E-Learning User Management Models

This module extends Django's built-in User model with the quiz-specific
profile data: the viewer role used for access control and data masking,
and the denormalised lifetime XP counter.

Models:
- Profile: Role and XP information attached to every user

Features:
- Automatic profile creation for new users
- Role resolution for admin / instructor / learner views
- Fast lifetime XP reads without summing the XP ledger

Author: DSP Development Team
Version: 1.0.0
"""

from django.db import models
from django.conf import settings
from django.db.models import F
from django.db.models.signals import post_save
from django.dispatch import receiver
from django.utils.translation import gettext_lazy as _


class Role(models.TextChoices):
    """Viewer roles known to the quiz engine."""

    ADMIN = "admin", _("Admin")
    INSTRUCTOR = "instructor", _("Instructor")
    LEARNER = "learner", _("Learner")


class Profile(models.Model):
    """
    Extended user profile model for the quiz system.

    Attributes:
        user: One-to-one relationship with Django User model
        role: Viewer role (admin, instructor or learner)
        xp: Lifetime experience points, mirrored from the XP history ledger

    The profile is automatically created when a new user is registered
    and maintains a one-to-one relationship with the User model.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
        verbose_name=_("User"),
        help_text=_("Associated user account"),
    )

    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.LEARNER,
        verbose_name=_("Role"),
        help_text=_("Determines access to authoring and analytics views"),
    )

    xp = models.PositiveIntegerField(
        default=0,
        verbose_name=_("Experience Points"),
        help_text=_("Lifetime XP; running sum of the user's XP history"),
    )

    class Meta:
        verbose_name = _("User Profile")
        verbose_name_plural = _("User Profiles")
        db_table = "elearning_profile"

    def __str__(self) -> str:
        return f"{self.user.username} Profile"

    def __repr__(self) -> str:
        return f"<Profile(user={self.user.username}, role={self.role}, xp={self.xp})>"

    def add_xp(self, amount: int) -> None:
        """
        Atomically increment the lifetime XP counter.

        Args:
            amount: XP to add (must be non-negative)
        """
        Profile.objects.filter(pk=self.pk).update(xp=F("xp") + amount)
        self.refresh_from_db(fields=["xp"])


def get_user_role(user) -> str:
    """
    Resolve the effective role of a user.

    Superusers are always treated as admins. Users without a profile fall
    back to the learner role.

    Args:
        user: Django User instance (may be anonymous)

    Returns:
        One of the Role values
    """
    if not user or not user.is_authenticated:
        return Role.LEARNER
    if user.is_superuser:
        return Role.ADMIN
    try:
        return user.profile.role
    except Profile.DoesNotExist:
        return Role.LEARNER


def get_display_name(user) -> str:
    """Return the full name of a user, or the username when no name is set."""
    full_name = user.get_full_name().strip()
    return full_name or user.username


# --- Signal Handlers for Automatic Profile Management ---


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_user_profile(sender, instance, created: bool, **kwargs) -> None:
    """
    Automatically create a user profile when a new user is created.

    Args:
        sender: The User model class
        instance: The actual User instance that was saved
        created: Boolean indicating if this is a new instance
        **kwargs: Additional signal arguments
    """
    if created:
        Profile.objects.get_or_create(user=instance)
