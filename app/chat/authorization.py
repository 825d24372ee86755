"""
Service-level authorization for conversation membership.

This module provides the permission checks consulted by the membership
services and by message/posting code elsewhere. It is distinct from the
DRF permission classes (in permissions.py) which handle HTTP-level
authorization.

Key Components:
    can_invite, can_write, can_moderate, can_manage_permissions:
        Pure predicates over an already-fetched Membership (no queries)
    MembershipAccessService: Read-only queries answering "may this user
        access / write to this conversation" and listing active members

Freshness:
    Nothing here is cached. Callers fetch the membership right before
    acting so a permission revoked by a concurrent request is never
    honoured from stale state.

Usage:
    # Predicate over a row you already hold
    if can_invite(inviter_membership):
        ...

    # Query by ids
    if MembershipAccessService.can_write(conversation_id, user.id):
        ...
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from chat.models import Membership, MembershipRole

if TYPE_CHECKING:
    from chat.managers import MembershipQuerySet


# =============================================================================
# Permission Evaluator
# =============================================================================


def can_invite(membership: Optional[Membership]) -> bool:
    """Active member holding the invite flag."""
    return bool(membership and membership.is_active and membership.can_invite)


def can_write(membership: Optional[Membership]) -> bool:
    """Active member holding the write flag."""
    return bool(membership and membership.is_active and membership.can_write)


def can_moderate(membership: Optional[Membership]) -> bool:
    """Active member holding the moderate flag."""
    return bool(membership and membership.is_active and membership.can_moderate)


def can_manage_permissions(membership: Optional[Membership]) -> bool:
    """
    Active owner or moderator.

    Role based rather than flag based: a moderator stripped of
    can_moderate may still edit member permissions.
    """
    return bool(
        membership
        and membership.is_active
        and membership.role in (MembershipRole.OWNER, MembershipRole.MODERATOR)
    )


# =============================================================================
# Access Query Facade
# =============================================================================


class MembershipAccessService:
    """
    Stateless read-only queries over memberships.

    All methods are classmethods and can be called directly without
    instantiation. None of them mutate state.

    Performance Notes:
        - has_access / can_write are single indexed lookups
        - get_active_members joins the user row for display fields
        - count_active_members uses the same active() filter as the
          capacity check in MembershipService.invite_user
    """

    @classmethod
    def get_user_membership(
        cls,
        conversation_id: int,
        user_id: int,
    ) -> Optional[Membership]:
        """
        Get the membership row for a user, active or not.

        Args:
            conversation_id: ID of the conversation
            user_id: ID of the user

        Returns:
            Membership if a row exists for the pair, None otherwise
        """
        return (
            Membership.objects.for_conversation(conversation_id)
            .for_user(user_id)
            .select_related("user")
            .first()
        )

    @classmethod
    def has_access(cls, conversation_id: int, user_id: int) -> bool:
        """
        Check if user is an active member of the conversation.

        Args:
            conversation_id: ID of the conversation
            user_id: ID of the user

        Returns:
            True if a membership row exists and is active
        """
        return (
            Membership.objects.for_conversation(conversation_id)
            .for_user(user_id)
            .active()
            .exists()
        )

    @classmethod
    def can_write(cls, conversation_id: int, user_id: int) -> bool:
        """
        Check if user may post in the conversation.

        Args:
            conversation_id: ID of the conversation
            user_id: ID of the user

        Returns:
            True if the membership is active and holds the write flag
        """
        return (
            Membership.objects.for_conversation(conversation_id)
            .for_user(user_id)
            .active()
            .filter(can_write=True)
            .exists()
        )

    @classmethod
    def get_active_members(cls, conversation_id: int) -> MembershipQuerySet:
        """
        List active members for display.

        Ordering is part of the contract: the owner is always listed
        first, then moderators, then members, each group by ascending
        joined_at.

        Args:
            conversation_id: ID of the conversation

        Returns:
            QuerySet of active Membership rows with user preloaded
        """
        return (
            Membership.objects.for_conversation(conversation_id)
            .active()
            .select_related("user")
            .in_role_order()
        )

    @classmethod
    def count_active_members(cls, conversation_id: int) -> int:
        """
        Count active members.

        Args:
            conversation_id: ID of the conversation

        Returns:
            Number of memberships with is_active=True
        """
        return Membership.objects.for_conversation(conversation_id).active().count()
