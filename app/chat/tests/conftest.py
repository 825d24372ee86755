"""
Test configuration and fixtures for chat tests.

This module provides:
- User fixtures with different conversation roles
- Conversation fixtures (owner only, and a full role hierarchy)
- Membership fixtures for each role and state
- API client helpers for authenticated requests

Usage:
    def test_example(conversation, owner_client):
        response = owner_client.get(f"/api/v1/chat/conversations/{conversation.id}/")
        assert response.status_code == 200
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import UserFactory
from chat.models import Membership
from chat.services import ConversationService
from chat.tests.factories import MembershipFactory, ModeratorMembershipFactory


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def owner_user(db):
    """Create a user who will be a conversation owner."""
    return UserFactory()


@pytest.fixture
def moderator_user(db):
    """Create a user who will be a conversation moderator."""
    return UserFactory()


@pytest.fixture
def member_user(db):
    """Create a user who will be a conversation member."""
    return UserFactory()


@pytest.fixture
def outsider_user(db):
    """Create a user with no membership in any test conversation."""
    return UserFactory()


# =============================================================================
# Conversation Fixtures
# =============================================================================


@pytest.fixture
def conversation(db, owner_user):
    """
    Create a conversation for up to four users.

    Goes through ConversationService so the owner's membership exists
    exactly as it does in production.
    """
    result = ConversationService.create_conversation(
        creator=owner_user,
        title="Weekend trip",
        max_users=4,
    )
    return result.data


@pytest.fixture
def conversation_with_members(conversation, moderator_user, member_user):
    """
    Conversation with an owner, a moderator and a member (3 of 4 seats).

    Provides a full role hierarchy for permission testing.
    """
    ModeratorMembershipFactory(conversation=conversation, user=moderator_user)
    MembershipFactory(conversation=conversation, user=member_user)
    return conversation


# =============================================================================
# Membership Fixtures
# =============================================================================


@pytest.fixture
def owner_membership(conversation, owner_user):
    """The owner's membership row."""
    return Membership.objects.get(conversation=conversation, user=owner_user)


@pytest.fixture
def moderator_membership(conversation_with_members, moderator_user):
    """The moderator's membership row."""
    return Membership.objects.get(
        conversation=conversation_with_members, user=moderator_user
    )


@pytest.fixture
def member_membership(conversation_with_members, member_user):
    """The plain member's membership row."""
    return Membership.objects.get(
        conversation=conversation_with_members, user=member_user
    )


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()


@pytest.fixture
def authenticated_client_factory(db):
    """
    Factory to create authenticated clients for any user.

    Usage:
        def test_example(authenticated_client_factory, some_user):
            client = authenticated_client_factory(some_user)
            response = client.post("/api/v1/chat/conversations/", {})
    """

    def _make_client(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
        return client

    return _make_client


@pytest.fixture
def owner_client(authenticated_client_factory, owner_user):
    """API client authenticated as the owner user."""
    return authenticated_client_factory(owner_user)


@pytest.fixture
def moderator_client(authenticated_client_factory, moderator_user):
    """API client authenticated as the moderator user."""
    return authenticated_client_factory(moderator_user)


@pytest.fixture
def member_client(authenticated_client_factory, member_user):
    """API client authenticated as the member user."""
    return authenticated_client_factory(member_user)


@pytest.fixture
def outsider_client(authenticated_client_factory, outsider_user):
    """API client authenticated as a user outside the conversation."""
    return authenticated_client_factory(outsider_user)
