"""
Authentication models.

This module defines the user identity consumed by the chat membership
subsystem. Conversations and memberships reference users; they never
own them.

Models:
    User: Custom user model with email-based authentication and the
          display fields returned alongside conversation memberships

Related files:
    - managers.py: Custom user manager for email-based creation
"""

import re

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.core.exceptions import ValidationError
from django.db import models

from authentication.managers import UserManager


def validate_username_format(value):
    """Validate username format: 3-30 chars, alphanumeric + _ + -."""
    if not re.match(r"^[a-zA-Z0-9_-]{3,30}$", value):
        raise ValidationError(
            "Username must be 3-30 characters and contain only "
            "letters, numbers, underscores, and hyphens."
        )


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom User model using email as the primary identifier.

    Fields:
        email: Primary identifier, unique, used for login
        username: Optional public handle shown in member lists
        display_name: Optional human-readable name
        avatar_url: Optional avatar image URL
        preferred_language: BCP 47 language tag used for translations
        is_active: Whether the user account is active
        is_staff: Whether the user can access Django admin
        date_joined: When the user account was created
        updated_at: When the user record was last modified

    Usage:
        user = User.objects.create_user(
            email="user@example.com",
            password="securepassword",
            display_name="Ada",
        )
    """

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="User's email address (primary identifier)",
    )

    username = models.CharField(
        max_length=30,
        unique=True,
        null=True,
        blank=True,
        validators=[validate_username_format],
        help_text="Public handle (3-30 chars, letters, numbers, _ and -)",
    )

    display_name = models.CharField(
        max_length=100,
        blank=True,
        default="",
        help_text="Name shown to other conversation members",
    )

    avatar_url = models.URLField(
        max_length=500,
        blank=True,
        default="",
        help_text="URL of the user's avatar image",
    )

    preferred_language = models.CharField(
        max_length=10,
        default="en",
        help_text="Preferred language for translated content (e.g. 'en', 'pt-BR')",
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        """Return the user's email as string representation."""
        return self.email

    def get_full_name(self):
        """Return the display name, falling back to username then email."""
        return self.display_name or self.username or self.email

    def get_short_name(self):
        """Return the display name or the email local part."""
        return self.display_name or self.email.split("@")[0]
