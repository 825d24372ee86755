"""
Permission classes for chat API.

This module provides DRF permission classes for the membership system:
- IsConversationMember: User holds an active membership

Everything finer grained (invite, kick, permission edits, ownership) is
decided by the service layer, which reports a stable error code the view
turns into a status.

Design Decisions:
    - Permissions check against the Membership model, not User
    - Active member = is_active is True
    - Object may be a Conversation or a Membership
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rest_framework import permissions

from chat.authorization import MembershipAccessService
from chat.models import Conversation, Membership

if TYPE_CHECKING:
    from rest_framework.request import Request
    from rest_framework.views import APIView


class IsConversationMember(permissions.BasePermission):
    """
    Allows access only to active members of the conversation.

    This is the base permission for read endpoints.
    """

    message = "You are not a member of this conversation."

    def has_object_permission(
        self, request: Request, view: APIView, obj: Conversation | Membership
    ) -> bool:
        """Check if user is an active member."""
        if not request.user.is_authenticated:
            return False

        conversation_id = obj.conversation_id if isinstance(obj, Membership) else obj.pk
        return MembershipAccessService.has_access(conversation_id, request.user.id)
