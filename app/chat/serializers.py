"""
Serializers for chat API.

This module provides serializers for the membership system:
- Conversation serializers (detail, create, settings update)
- Membership serializers (read, invite/target, permission patch, settings)
- Invite link serializers

Serializer Hierarchy:
    ConversationSerializer: Conversation with capacity and current role
    ConversationCreateSerializer: New conversation input
    ConversationSettingsSerializer: Owner settings patch

    MembershipSerializer: Membership with denormalized user fields
    MemberTargetSerializer: Body naming another user (invite, kick, transfer)
    MemberPermissionsSerializer: Role / capability flag patch
    MembershipSettingsSerializer: Caller's own preferences

    InviteLinkSerializer: Generated link
    JoinByTokenSerializer: Token from an invite link

Design Decisions:
    - Read and write serializers are separate for clarity
    - Business rules (capacity, ownership, permission) live in services;
      serializers only validate shape and ranges
"""

from __future__ import annotations

from rest_framework import serializers

from authentication.serializers import UserSummarySerializer
from chat.authorization import MembershipAccessService
from chat.constants import MEMBERSHIP_CONFIG
from chat.models import Conversation, Membership, MembershipRole


# =============================================================================
# Membership Serializers
# =============================================================================


class MembershipSerializer(serializers.ModelSerializer):
    """
    Read serializer for memberships.

    Includes the member's public display fields.
    """

    user = UserSummarySerializer(read_only=True)
    conversation_id = serializers.IntegerField(read_only=True)
    invited_by_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = Membership
        fields = [
            "id",
            "conversation_id",
            "user",
            "role",
            "is_active",
            "can_write",
            "can_invite",
            "can_moderate",
            "invited_by_id",
            "joined_at",
            "auto_translate_enabled",
        ]
        read_only_fields = fields


class MemberTargetSerializer(serializers.Serializer):
    """Body naming the user an action applies to."""

    user_id = serializers.IntegerField(
        min_value=1,
        help_text="ID of the user to invite, kick or promote",
    )


class MemberPermissionsSerializer(serializers.Serializer):
    """
    Serializer for permission patches.

    Only MODERATOR and MEMBER are accepted here. The OWNER role moves
    exclusively through the transfer-ownership endpoint.
    """

    role = serializers.ChoiceField(
        choices=[
            (MembershipRole.MODERATOR, "Moderator"),
            (MembershipRole.MEMBER, "Member"),
        ],
        required=False,
        help_text="New role (moderator or member)",
    )
    can_write = serializers.BooleanField(required=False)
    can_invite = serializers.BooleanField(required=False)
    can_moderate = serializers.BooleanField(required=False)

    def validate(self, attrs: dict) -> dict:
        """Require at least one field."""
        if not attrs:
            raise serializers.ValidationError(
                "Provide at least one of role, can_write, can_invite, can_moderate"
            )
        return attrs


class MembershipSettingsSerializer(serializers.Serializer):
    """Serializer for the caller's own membership preferences."""

    auto_translate_enabled = serializers.BooleanField(
        help_text="Translate incoming messages to your preferred language",
    )


# =============================================================================
# Conversation Serializers
# =============================================================================


class ConversationSerializer(serializers.ModelSerializer):
    """
    Conversation details.

    Adds the active member count and the requesting user's role.
    """

    owner_id = serializers.IntegerField(read_only=True)
    active_member_count = serializers.SerializerMethodField(
        help_text="Number of active members"
    )
    current_user_role = serializers.SerializerMethodField(
        help_text="Current user's role in this conversation"
    )

    class Meta:
        model = Conversation
        fields = [
            "id",
            "title",
            "owner_id",
            "max_users",
            "allow_user_invites",
            "active_member_count",
            "current_user_role",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_active_member_count(self, obj: Conversation) -> int:
        """Count active members."""
        return MembershipAccessService.count_active_members(obj.id)

    def get_current_user_role(self, obj: Conversation) -> str | None:
        """Get current user's role if they are an active member."""
        request = self.context.get("request")
        if not request or not request.user.is_authenticated:
            return None

        membership = MembershipAccessService.get_user_membership(obj.id, request.user.id)
        if membership is None or not membership.is_active:
            return None
        return membership.role


class ConversationCreateSerializer(serializers.Serializer):
    """Serializer for creating conversations."""

    title = serializers.CharField(
        max_length=200,
        required=False,
        allow_blank=True,
        default="",
        help_text="Optional conversation title",
    )
    max_users = serializers.IntegerField(
        min_value=MEMBERSHIP_CONFIG.MIN_USERS,
        max_value=MEMBERSHIP_CONFIG.MAX_USERS_LIMIT,
        default=MEMBERSHIP_CONFIG.DEFAULT_MAX_USERS,
        help_text="Maximum number of active members",
    )
    allow_user_invites = serializers.BooleanField(
        default=False,
        help_text="Whether invited members may invite others",
    )


class ConversationSettingsSerializer(serializers.Serializer):
    """
    Serializer for owner settings updates.

    All fields are optional; omitted fields are left unchanged.
    """

    title = serializers.CharField(max_length=200, required=False, allow_blank=True)
    max_users = serializers.IntegerField(
        min_value=MEMBERSHIP_CONFIG.MIN_USERS,
        max_value=MEMBERSHIP_CONFIG.MAX_USERS_LIMIT,
        required=False,
    )
    allow_user_invites = serializers.BooleanField(required=False)


# =============================================================================
# Invite Link Serializers
# =============================================================================


class InviteLinkSerializer(serializers.Serializer):
    """Generated invite link."""

    link = serializers.CharField(read_only=True)


class JoinByTokenSerializer(serializers.Serializer):
    """Token taken from an invite link."""

    token = serializers.CharField(help_text="Token from the invite link")
