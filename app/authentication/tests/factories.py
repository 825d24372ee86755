"""
Factory Boy factories for authentication models.

Provides realistic test data generation for:
- User: Custom user model with email-based authentication and the
  public display fields shown in member lists

Usage:
    from authentication.tests.factories import UserFactory

    # Create a user with default values
    user = UserFactory()

    # Create a user that prefers Brazilian Portuguese
    user = UserFactory(preferred_language="pt-BR")
"""

import factory

from authentication.models import User


class UserFactory(factory.django.DjangoModelFactory):
    """
    Factory for User model.

    Creates active users through UserManager.create_user() so passwords
    are hashed the same way as in production.

    Examples:
        # Basic user
        user = UserFactory()

        # User without a public handle
        user = UserFactory(username=None)

        # Inactive user (deactivated)
        user = UserFactory(is_active=False)
    """

    class Meta:
        model = User
        skip_postgeneration_save = True

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    username = factory.Sequence(lambda n: f"user_{n}")
    display_name = factory.Faker("name")
    avatar_url = factory.Sequence(lambda n: f"https://cdn.example.com/avatars/{n}.png")
    preferred_language = "en"
    is_active = True
    is_staff = False

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        """Override create to use UserManager.create_user()."""
        password = kwargs.pop("password", "TestPass123!")
        return model_class.objects.create_user(
            email=kwargs.pop("email"), password=password, **kwargs
        )
