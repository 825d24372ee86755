"""
Factory Boy factories for chat models.

Provides realistic test data generation for:
- Conversation: Conversation with an owner and capacity
- Membership: A user's membership in a conversation, in any state

Usage:
    from chat.tests.factories import (
        ConversationFactory,
        MembershipFactory,
        OwnerMembershipFactory,
    )

    # Conversation for up to three people
    conversation = ConversationFactory(max_users=3)

    # The owner's row (a ConversationFactory does not create it)
    OwnerMembershipFactory(conversation=conversation, user=conversation.owner)

    # Active member
    MembershipFactory(conversation=conversation, user=user)

    # Pending invitation
    MembershipFactory(conversation=conversation, user=user, pending=True)
"""

import factory
from django.utils import timezone

from authentication.tests.factories import UserFactory
from chat.models import Conversation, Membership, MembershipRole


class ConversationFactory(factory.django.DjangoModelFactory):
    """
    Factory for Conversation model.

    Creates the conversation row only. Tests that need a consistent
    owner membership should use OwnerMembershipFactory or go through
    ConversationService.create_conversation().

    Examples:
        conversation = ConversationFactory(title="Trip planning", max_users=4)
    """

    class Meta:
        model = Conversation

    title = factory.Faker("sentence", nb_words=3)
    owner = factory.SubFactory(UserFactory)
    max_users = 4
    allow_user_invites = False


class MembershipFactory(factory.django.DjangoModelFactory):
    """
    Factory for Membership model.

    Creates an active MEMBER by default.

    Traits:
        pending: Invited but not yet joined (inactive, joined_at unset)
        departed: Joined once, then left or was kicked

    Examples:
        MembershipFactory(conversation=conversation, role=MembershipRole.MODERATOR)
        MembershipFactory(conversation=conversation, departed=True)
    """

    class Meta:
        model = Membership

    conversation = factory.SubFactory(ConversationFactory)
    user = factory.SubFactory(UserFactory)
    role = MembershipRole.MEMBER
    is_active = True
    can_write = True
    can_invite = False
    can_moderate = False
    joined_at = factory.LazyFunction(timezone.now)

    class Params:
        pending = factory.Trait(is_active=False, joined_at=None)
        departed = factory.Trait(is_active=False)


class OwnerMembershipFactory(MembershipFactory):
    """Factory for the owner's membership (every capability flag set)."""

    role = MembershipRole.OWNER
    can_invite = True
    can_moderate = True
    user = factory.SelfAttribute("conversation.owner")


class ModeratorMembershipFactory(MembershipFactory):
    """Factory for a moderator's membership."""

    role = MembershipRole.MODERATOR
    can_moderate = True
