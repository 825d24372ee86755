"""
Chat membership models.

This module defines the data models for multi-party conversations and the
per-user membership records that govern who may join, write, invite,
moderate, or own a conversation.

Models:
    Conversation: Container with an owner, a capacity bound and an invite policy
    Membership: One user's role, activation state and capability flags
                in one conversation

Design Decisions:
    - Exactly one active OWNER membership per conversation, and
      Conversation.owner always points at that user
    - Membership rows are created once per (conversation, user) and never
      deleted; leaving or being kicked only clears is_active
    - Re-inviting a departed user reactivates the existing row
    - Capability flags are independent of role; role only decides who may
      manage permissions and who is protected from kicks and edits
"""

from __future__ import annotations

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from core.models import BaseModel

from chat.constants import MEMBERSHIP_CONFIG
from chat.managers import MembershipQuerySet


class MembershipRole(models.TextChoices):
    """
    Role within a conversation.

    Presentation order: OWNER > MODERATOR > MEMBER

    OWNER: Exactly one per conversation; cannot leave, be kicked or be
           re-roled. Ownership moves only through transfer_ownership.
    MODERATOR: May manage other members' permissions
    MEMBER: Regular participant
    """

    OWNER = "owner", "Owner"
    MODERATOR = "moderator", "Moderator"
    MEMBER = "member", "Member"


class Conversation(BaseModel):
    """
    A conversation shared by up to max_users active members.

    Fields:
        title: Optional display title
        owner: The user holding the single OWNER membership
        max_users: Ceiling on concurrently active members
        allow_user_invites: Default invite right granted to newly invited
                            members (existing members are not affected)

    Relationships:
        memberships: All Membership records (active and inactive)
    """

    title = models.CharField(
        max_length=200,
        blank=True,
        default="",
        help_text="Conversation title",
    )

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="owned_conversations",
        help_text="User holding the OWNER membership",
    )

    max_users = models.PositiveSmallIntegerField(
        default=MEMBERSHIP_CONFIG.DEFAULT_MAX_USERS,
        validators=[
            MinValueValidator(MEMBERSHIP_CONFIG.MIN_USERS),
            MaxValueValidator(MEMBERSHIP_CONFIG.MAX_USERS_LIMIT),
        ],
        help_text="Maximum number of concurrently active members",
    )

    allow_user_invites = models.BooleanField(
        default=False,
        help_text="Whether newly invited members may invite others",
    )

    class Meta:
        db_table = "chat_conversation"
        ordering = ["-updated_at"]

    def __str__(self) -> str:
        """Return human-readable representation."""
        if self.title:
            return f"Conversation: {self.title}"
        return f"Conversation({self.pk})"

    def get_active_memberships(self) -> MembershipQuerySet:
        """
        Get queryset of active memberships.

        Returns:
            QuerySet of Membership objects where is_active is True
        """
        return self.memberships.active()


class Membership(BaseModel):
    """
    A user's membership in a conversation.

    Lifecycle:
        1. Invited: row created with is_active=False
        2. Active: join sets is_active=True and stamps joined_at
        3. Inactive: leave or kick clears is_active (row kept)
        4. Re-invite of an inactive row sets is_active=True directly

    Fields:
        conversation: Conversation this membership belongs to
        user: Member
        role: OWNER, MODERATOR or MEMBER
        is_active: True while the user participates
        can_write: May post messages
        can_invite: May invite other users
        can_moderate: May kick members
        invited_by: User who last invited this member (null if the
                    inviter account was deleted or for the creator)
        joined_at: First activation time (null until joined)
        auto_translate_enabled: Member's own translation preference

    Constraints:
        - UniqueConstraint(conversation, user): one row per pair, ever
    """

    conversation = models.ForeignKey(
        Conversation,
        on_delete=models.CASCADE,
        related_name="memberships",
        help_text="Conversation this membership belongs to",
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="conversation_memberships",
        help_text="Member",
    )

    role = models.CharField(
        max_length=10,
        choices=MembershipRole.choices,
        default=MembershipRole.MEMBER,
        help_text="Role in the conversation",
    )

    is_active = models.BooleanField(
        default=False,
        help_text="Whether the user currently participates",
    )

    can_write = models.BooleanField(default=True, help_text="May post messages")
    can_invite = models.BooleanField(default=False, help_text="May invite users")
    can_moderate = models.BooleanField(default=False, help_text="May kick members")

    invited_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sent_invitations",
        help_text="User who last invited this member",
    )

    joined_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the user first became active",
    )

    auto_translate_enabled = models.BooleanField(
        default=False,
        help_text="Translate incoming messages to the member's language",
    )

    objects = MembershipQuerySet.as_manager()

    class Meta:
        db_table = "chat_membership"
        ordering = ["joined_at"]
        indexes = [
            # Active members of a conversation (capacity checks, listings)
            models.Index(
                fields=["conversation", "is_active"],
                name="chat_member_conv_active_idx",
            ),
            # A user's active conversations
            models.Index(
                fields=["user", "is_active"],
                name="chat_member_user_active_idx",
            ),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["conversation", "user"],
                name="unique_conversation_membership",
            ),
        ]

    def __str__(self) -> str:
        """Return human-readable representation."""
        status = "active" if self.is_active else "inactive"
        return (
            f"Membership: {self.user_id} in {self.conversation_id} "
            f"({self.role}) [{status}]"
        )

    @property
    def is_owner(self) -> bool:
        """Check if membership has OWNER role."""
        return self.role == MembershipRole.OWNER

    @property
    def is_moderator(self) -> bool:
        """Check if membership has MODERATOR role."""
        return self.role == MembershipRole.MODERATOR
