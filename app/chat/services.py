"""
Chat membership service layer.

This module provides the business logic for conversation membership,
encapsulating every state change to Conversation and Membership rows.

Services:
    ConversationService: Conversation creation and multi-user settings
    MembershipService: Membership lifecycle (invite, join, leave, kick,
                       ownership transfer, permission and settings updates)
    InviteLinkService: Signed, shareable invite links

Design Principles:
    - Services are stateless (use class methods)
    - Expected failures return ServiceResult.failure()
    - Unexpected failures (database errors) raise and are never retried here
    - Every mutation runs in one transaction that first locks the
      conversation row, so operations on the same conversation serialize
    - Exactly one active OWNER membership per conversation at all times

Usage:
    from chat.services import ConversationService, MembershipService

    # Create a conversation for up to three people
    result = ConversationService.create_conversation(
        creator=user,
        title="Trip planning",
        max_users=3,
    )
    conversation = result.data

    # Invite and accept
    MembershipService.invite_user(conversation.id, friend.id, user.id)
    MembershipService.join_conversation(conversation.id, friend.id)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional
from urllib.parse import urlencode

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core import signing
from django.db import IntegrityError, transaction
from django.utils import timezone

from core.services import BaseService, ServiceResult

from chat.authorization import (
    MembershipAccessService,
    can_invite,
    can_manage_permissions,
    can_moderate,
)
from chat.constants import MEMBERSHIP_CONFIG, MembershipErrorCode
from chat.models import Conversation, Membership, MembershipRole

if TYPE_CHECKING:
    from authentication.models import User


PERMISSION_FLAGS = ("can_write", "can_invite", "can_moderate")
PERMISSION_FIELDS = ("role", *PERMISSION_FLAGS)


def _lock_conversation(conversation_id: int) -> Optional[Conversation]:
    """
    Fetch a conversation and lock its row until the transaction ends.

    Must be called inside transaction.atomic().
    """
    return Conversation.objects.select_for_update().filter(pk=conversation_id).first()


def _get_membership(conversation_id: int, user_id: int) -> Optional[Membership]:
    return Membership.objects.for_conversation(conversation_id).for_user(user_id).first()


def _conversation_not_found(conversation_id: int) -> ServiceResult:
    return ServiceResult.failure(
        f"Conversation {conversation_id} not found",
        error_code=MembershipErrorCode.CONVERSATION_NOT_FOUND,
    )


def _validate_max_users(max_users: Any) -> Optional[str]:
    """Return an error message when max_users is outside the allowed range."""
    if (
        not isinstance(max_users, int)
        or isinstance(max_users, bool)
        or not MEMBERSHIP_CONFIG.MIN_USERS
        <= max_users
        <= MEMBERSHIP_CONFIG.MAX_USERS_LIMIT
    ):
        return (
            f"max_users must be between {MEMBERSHIP_CONFIG.MIN_USERS} "
            f"and {MEMBERSHIP_CONFIG.MAX_USERS_LIMIT}"
        )
    return None


class ConversationService(BaseService):
    """
    Service for conversation lifecycle operations.

    Methods:
        create_conversation: Create a conversation owned by its creator
        update_settings: Owner-only title/capacity/invite policy changes
    """

    @classmethod
    def create_conversation(
        cls,
        creator: User,
        title: str = "",
        max_users: int = MEMBERSHIP_CONFIG.DEFAULT_MAX_USERS,
        allow_user_invites: bool = False,
    ) -> ServiceResult[Conversation]:
        """
        Create a new conversation.

        The creator becomes the owner: the conversation and the creator's
        active OWNER membership (all capability flags set) are written in
        the same transaction.

        Args:
            creator: User creating the conversation (becomes owner)
            title: Optional display title
            max_users: Capacity, 1 to MEMBERSHIP_CONFIG.MAX_USERS_LIMIT
            allow_user_invites: Whether invited members may invite others

        Returns:
            ServiceResult with new Conversation

        Error codes:
            INVALID_SETTINGS: max_users out of range
        """
        error = _validate_max_users(max_users)
        if error:
            return ServiceResult.failure(
                error,
                error_code=MembershipErrorCode.INVALID_SETTINGS,
                errors={"max_users": [error]},
            )

        title = title.strip() if title else ""

        with cls.atomic():
            conversation = Conversation.objects.create(
                title=title,
                owner=creator,
                max_users=max_users,
                allow_user_invites=allow_user_invites,
            )
            Membership.objects.create(
                conversation=conversation,
                user=creator,
                role=MembershipRole.OWNER,
                is_active=True,
                can_write=True,
                can_invite=True,
                can_moderate=True,
                joined_at=timezone.now(),
            )

        cls.get_logger().info(
            f"Created conversation {conversation.id} owned by user {creator.id} "
            f"(max_users={max_users}, allow_user_invites={allow_user_invites})"
        )

        return ServiceResult.success(conversation)

    @classmethod
    def update_settings(
        cls,
        conversation_id: int,
        user: User,
        title: Optional[str] = None,
        max_users: Optional[int] = None,
        allow_user_invites: Optional[bool] = None,
    ) -> ServiceResult[Conversation]:
        """
        Update conversation settings.

        Only the owner may change settings. Lowering max_users below the
        current number of active members is rejected; nobody is evicted.
        allow_user_invites only applies to members invited afterwards.

        Args:
            conversation_id: Conversation to update
            user: User performing the change (must be owner)
            title: New title (None leaves unchanged)
            max_users: New capacity (None leaves unchanged)
            allow_user_invites: New invite policy (None leaves unchanged)

        Returns:
            ServiceResult with updated Conversation

        Error codes:
            CONVERSATION_NOT_FOUND: Conversation does not exist
            NO_PERMISSION: User is not the active owner
            INVALID_SETTINGS: max_users out of range or below active count
        """
        with cls.atomic():
            conversation = _lock_conversation(conversation_id)
            if conversation is None:
                return _conversation_not_found(conversation_id)

            membership = _get_membership(conversation_id, user.id)
            if not (membership and membership.is_active and membership.is_owner):
                cls.get_logger().warning(
                    f"User {user.id} attempted to change settings of "
                    f"conversation {conversation_id} without ownership"
                )
                return ServiceResult.failure(
                    "Only the owner can change conversation settings",
                    error_code=MembershipErrorCode.NO_PERMISSION,
                )

            update_fields = ["updated_at"]

            if max_users is not None:
                error = _validate_max_users(max_users)
                if error is None:
                    active = MembershipAccessService.count_active_members(
                        conversation_id
                    )
                    if max_users < active:
                        error = (
                            f"max_users cannot be lower than the current "
                            f"number of active members ({active})"
                        )
                if error:
                    return ServiceResult.failure(
                        error,
                        error_code=MembershipErrorCode.INVALID_SETTINGS,
                        errors={"max_users": [error]},
                    )
                conversation.max_users = max_users
                update_fields.append("max_users")

            if title is not None:
                conversation.title = title.strip()
                update_fields.append("title")

            if allow_user_invites is not None:
                conversation.allow_user_invites = allow_user_invites
                update_fields.append("allow_user_invites")

            conversation.save(update_fields=update_fields)

        cls.get_logger().info(
            f"Updated settings of conversation {conversation_id} by user {user.id}: "
            f"{', '.join(f for f in update_fields if f != 'updated_at') or 'no changes'}"
        )

        return ServiceResult.success(conversation)


class MembershipService(BaseService):
    """
    Service for membership lifecycle operations.

    State per (conversation, user):
        no row -> invited (inactive) -> active -> inactive -> active ...

    A fresh invite leaves the row inactive until join_conversation.
    Re-inviting an inactive row reactivates it directly, skipping join.

    Methods:
        invite_user: Invite a user (or reactivate a departed one)
        join_conversation: Accept a pending invitation
        leave_conversation: Leave voluntarily (not allowed for the owner)
        kick_user: Remove a member (requires can_moderate)
        transfer_ownership: Hand the OWNER role to another active member
        update_member_permissions: Change a member's role and flags
        update_membership_settings: Change the caller's own preferences
    """

    @classmethod
    def invite_user(
        cls,
        conversation_id: int,
        invited_user_id: int,
        inviter_id: int,
    ) -> ServiceResult[Membership]:
        """
        Invite a user into a conversation.

        Creates an inactive MEMBER row with can_write=True, can_moderate=False
        and can_invite copied from the conversation's allow_user_invites.
        If an inactive row already exists it is reactivated instead and
        invited_by is refreshed; its flags are kept.

        The conversation row is locked while counting active members, so
        concurrent invites cannot push the conversation past max_users.

        Args:
            conversation_id: Conversation to invite into
            invited_user_id: User being invited
            inviter_id: User sending the invitation

        Returns:
            ServiceResult with the created or reactivated Membership

        Error codes:
            CONVERSATION_NOT_FOUND: Conversation does not exist
            NO_PERMISSION: Inviter is not active or lacks can_invite
            USER_NOT_FOUND: Invited user does not exist
            CAPACITY_EXCEEDED: Active members already equal max_users
            ALREADY_MEMBER: Invited user is already active
        """
        logger = cls.get_logger()

        with cls.atomic():
            conversation = _lock_conversation(conversation_id)
            if conversation is None:
                return _conversation_not_found(conversation_id)

            inviter = _get_membership(conversation_id, inviter_id)
            if not can_invite(inviter):
                logger.warning(
                    f"User {inviter_id} attempted to invite into conversation "
                    f"{conversation_id} without permission"
                )
                return ServiceResult.failure(
                    "You do not have permission to invite users",
                    error_code=MembershipErrorCode.NO_PERMISSION,
                )

            if not get_user_model().objects.filter(pk=invited_user_id).exists():
                return ServiceResult.failure(
                    f"User {invited_user_id} not found",
                    error_code=MembershipErrorCode.USER_NOT_FOUND,
                )

            active_count = MembershipAccessService.count_active_members(conversation_id)
            if active_count >= conversation.max_users:
                return ServiceResult.failure(
                    f"Conversation has reached maximum users ({conversation.max_users})",
                    error_code=MembershipErrorCode.CAPACITY_EXCEEDED,
                )

            existing = _get_membership(conversation_id, invited_user_id)

            if existing is not None:
                if existing.is_active:
                    return ServiceResult.failure(
                        "User is already a member",
                        error_code=MembershipErrorCode.ALREADY_MEMBER,
                    )

                existing.is_active = True
                existing.invited_by_id = inviter_id
                update_fields = ["is_active", "invited_by", "updated_at"]
                if existing.joined_at is None:
                    existing.joined_at = timezone.now()
                    update_fields.append("joined_at")
                existing.save(update_fields=update_fields)

                logger.info(
                    f"Reactivated membership {existing.id} of user {invited_user_id} "
                    f"in conversation {conversation_id} by user {inviter_id}"
                )
                return ServiceResult.success(existing)

            try:
                with transaction.atomic():
                    membership = Membership.objects.create(
                        conversation=conversation,
                        user_id=invited_user_id,
                        invited_by_id=inviter_id,
                        role=MembershipRole.MEMBER,
                        is_active=False,
                        can_write=True,
                        can_invite=conversation.allow_user_invites,
                        can_moderate=False,
                    )
            except IntegrityError:
                # Lost a race against a concurrent invite for the same pair
                logger.info(
                    f"Concurrent invite for user {invited_user_id} in conversation "
                    f"{conversation_id} absorbed by unique constraint"
                )
                return ServiceResult.failure(
                    "User is already a member",
                    error_code=MembershipErrorCode.ALREADY_MEMBER,
                )

        logger.info(
            f"Invited user {invited_user_id} to conversation {conversation_id} "
            f"by user {inviter_id} (membership {membership.id})"
        )

        return ServiceResult.success(membership)

    @classmethod
    def join_conversation(
        cls,
        conversation_id: int,
        user_id: int,
    ) -> ServiceResult[Membership]:
        """
        Accept a pending invitation.

        Capacity is checked again here because pending invitations do not
        count toward max_users until accepted.

        Args:
            conversation_id: Conversation to join
            user_id: User accepting the invitation

        Returns:
            ServiceResult with the now-active Membership

        Error codes:
            CONVERSATION_NOT_FOUND: Conversation does not exist
            NO_INVITATION: No membership row exists for the user
            ALREADY_MEMBER: Membership is already active
            CAPACITY_EXCEEDED: Conversation filled up since the invitation
        """
        with cls.atomic():
            conversation = _lock_conversation(conversation_id)
            if conversation is None:
                return _conversation_not_found(conversation_id)

            membership = _get_membership(conversation_id, user_id)
            if membership is None:
                return ServiceResult.failure(
                    "No invitation found",
                    error_code=MembershipErrorCode.NO_INVITATION,
                )

            if membership.is_active:
                return ServiceResult.failure(
                    "Already a member",
                    error_code=MembershipErrorCode.ALREADY_MEMBER,
                )

            active_count = MembershipAccessService.count_active_members(conversation_id)
            if active_count >= conversation.max_users:
                return ServiceResult.failure(
                    f"Conversation has reached maximum users ({conversation.max_users})",
                    error_code=MembershipErrorCode.CAPACITY_EXCEEDED,
                )

            membership.is_active = True
            update_fields = ["is_active", "updated_at"]
            if membership.joined_at is None:
                membership.joined_at = timezone.now()
                update_fields.append("joined_at")
            membership.save(update_fields=update_fields)

        cls.get_logger().info(
            f"User {user_id} joined conversation {conversation_id} "
            f"(membership {membership.id})"
        )

        return ServiceResult.success(membership)

    @classmethod
    def leave_conversation(
        cls,
        conversation_id: int,
        user_id: int,
    ) -> ServiceResult[Membership]:
        """
        Leave a conversation voluntarily.

        The owner must transfer ownership first so the conversation is
        never left without an owner.

        Args:
            conversation_id: Conversation to leave
            user_id: User leaving

        Returns:
            ServiceResult with the now-inactive Membership

        Error codes:
            CONVERSATION_NOT_FOUND: Conversation does not exist
            NOT_MEMBER: User has no active membership
            OWNER_CANNOT_LEAVE: User is the owner
        """
        with cls.atomic():
            conversation = _lock_conversation(conversation_id)
            if conversation is None:
                return _conversation_not_found(conversation_id)

            membership = _get_membership(conversation_id, user_id)
            if membership is None or not membership.is_active:
                return ServiceResult.failure(
                    "Not a member",
                    error_code=MembershipErrorCode.NOT_MEMBER,
                )

            if membership.is_owner:
                return ServiceResult.failure(
                    "Owner cannot leave. Transfer ownership first.",
                    error_code=MembershipErrorCode.OWNER_CANNOT_LEAVE,
                )

            membership.is_active = False
            membership.save(update_fields=["is_active", "updated_at"])

        cls.get_logger().info(
            f"User {user_id} left conversation {conversation_id} "
            f"(membership {membership.id})"
        )

        return ServiceResult.success(membership)

    @classmethod
    def kick_user(
        cls,
        conversation_id: int,
        target_user_id: int,
        moderator_user_id: int,
    ) -> ServiceResult[Membership]:
        """
        Remove a member from a conversation.

        Args:
            conversation_id: Conversation to remove from
            target_user_id: User being removed
            moderator_user_id: User performing the removal

        Returns:
            ServiceResult with the target's now-inactive Membership

        Error codes:
            CONVERSATION_NOT_FOUND: Conversation does not exist
            NO_PERMISSION: Moderator is not active or lacks can_moderate
            NOT_MEMBER: Target has no active membership
            CANNOT_KICK_OWNER: Target is the owner
        """
        logger = cls.get_logger()

        with cls.atomic():
            conversation = _lock_conversation(conversation_id)
            if conversation is None:
                return _conversation_not_found(conversation_id)

            moderator = _get_membership(conversation_id, moderator_user_id)
            if not can_moderate(moderator):
                logger.warning(
                    f"User {moderator_user_id} attempted to kick user "
                    f"{target_user_id} from conversation {conversation_id} "
                    f"without permission"
                )
                return ServiceResult.failure(
                    "You do not have permission to kick users",
                    error_code=MembershipErrorCode.NO_PERMISSION,
                )

            target = _get_membership(conversation_id, target_user_id)
            if target is None or not target.is_active:
                return ServiceResult.failure(
                    "User is not a member",
                    error_code=MembershipErrorCode.NOT_MEMBER,
                )

            if target.is_owner:
                return ServiceResult.failure(
                    "Cannot kick the owner",
                    error_code=MembershipErrorCode.CANNOT_KICK_OWNER,
                )

            target.is_active = False
            target.save(update_fields=["is_active", "updated_at"])

        logger.info(
            f"User {target_user_id} kicked from conversation {conversation_id} "
            f"by user {moderator_user_id}"
        )

        return ServiceResult.success(target)

    @classmethod
    def transfer_ownership(
        cls,
        conversation_id: int,
        new_owner_id: int,
        current_owner_id: int,
    ) -> ServiceResult[dict]:
        """
        Transfer conversation ownership to another active member.

        Three writes in one transaction:
            1. Current owner demoted to MODERATOR (can_moderate=True,
               other flags kept)
            2. New owner promoted to OWNER with every flag set
            3. Conversation.owner pointed at the new owner
        If any write fails all three roll back and the error propagates.

        Args:
            conversation_id: Conversation to transfer
            new_owner_id: Active member receiving ownership
            current_owner_id: Current owner making the transfer

        Returns:
            ServiceResult with {"success": True}

        Error codes:
            CONVERSATION_NOT_FOUND: Conversation does not exist
            NO_PERMISSION: Caller is not the active owner
            INVALID_NEW_OWNER: Target is the caller or not an active member
        """
        with cls.atomic():
            conversation = _lock_conversation(conversation_id)
            if conversation is None:
                return _conversation_not_found(conversation_id)

            current = _get_membership(conversation_id, current_owner_id)
            if not (current and current.is_active and current.is_owner):
                cls.get_logger().warning(
                    f"User {current_owner_id} attempted to transfer ownership of "
                    f"conversation {conversation_id} without being owner"
                )
                return ServiceResult.failure(
                    "Only the owner can transfer ownership",
                    error_code=MembershipErrorCode.NO_PERMISSION,
                )

            if new_owner_id == current_owner_id:
                return ServiceResult.failure(
                    "Cannot transfer ownership to yourself",
                    error_code=MembershipErrorCode.INVALID_NEW_OWNER,
                )

            new_owner = _get_membership(conversation_id, new_owner_id)
            if new_owner is None or not new_owner.is_active:
                return ServiceResult.failure(
                    "New owner must be an active member",
                    error_code=MembershipErrorCode.INVALID_NEW_OWNER,
                )

            current.role = MembershipRole.MODERATOR
            current.can_moderate = True
            current.save(update_fields=["role", "can_moderate", "updated_at"])

            new_owner.role = MembershipRole.OWNER
            new_owner.can_write = True
            new_owner.can_invite = True
            new_owner.can_moderate = True
            new_owner.save(
                update_fields=[
                    "role",
                    "can_write",
                    "can_invite",
                    "can_moderate",
                    "updated_at",
                ]
            )

            conversation.owner_id = new_owner_id
            conversation.save(update_fields=["owner", "updated_at"])

        cls.get_logger().info(
            f"Transferred ownership of conversation {conversation_id} "
            f"from user {current_owner_id} to user {new_owner_id}"
        )

        return ServiceResult.success({"success": True})

    @classmethod
    def update_member_permissions(
        cls,
        conversation_id: int,
        target_user_id: int,
        moderator_user_id: int,
        patch: dict[str, Any],
    ) -> ServiceResult[Membership]:
        """
        Change a member's role and capability flags.

        Only owners and moderators may edit permissions. The owner's row
        may only be edited by the owner, and even then its role stays
        OWNER: ownership moves only through transfer_ownership, and no
        patch may grant the OWNER role.

        An owner editing their own flags is allowed (they may, for
        example, drop can_moderate) and is logged at WARNING.

        Args:
            conversation_id: Conversation of the membership
            target_user_id: User whose membership is edited
            moderator_user_id: User performing the edit
            patch: Any of role, can_write, can_invite, can_moderate

        Returns:
            ServiceResult with the updated Membership

        Error codes:
            CONVERSATION_NOT_FOUND: Conversation does not exist
            NO_PERMISSION: Editor is not an active owner or moderator
            NOT_MEMBER: Target has no membership row
            CANNOT_MODIFY_OWNER: Target is the owner (edited by someone
                else, or a role change was requested)
            INVALID_ROLE: Unknown role or role=owner requested
            INVALID_SETTINGS: Patch contains unknown fields or non-boolean flags
        """
        logger = cls.get_logger()

        unknown = sorted(set(patch) - set(PERMISSION_FIELDS))
        if unknown:
            return ServiceResult.failure(
                f"Unknown permission fields: {', '.join(unknown)}",
                error_code=MembershipErrorCode.INVALID_SETTINGS,
                errors={field: ["Unknown field"] for field in unknown},
            )

        not_boolean = sorted(
            field
            for field in PERMISSION_FLAGS
            if patch.get(field) is not None and not isinstance(patch[field], bool)
        )
        if not_boolean:
            return ServiceResult.failure(
                f"Permission flags must be booleans: {', '.join(not_boolean)}",
                error_code=MembershipErrorCode.INVALID_SETTINGS,
                errors={field: ["Must be a boolean"] for field in not_boolean},
            )

        with cls.atomic():
            conversation = _lock_conversation(conversation_id)
            if conversation is None:
                return _conversation_not_found(conversation_id)

            moderator = _get_membership(conversation_id, moderator_user_id)
            if not can_manage_permissions(moderator):
                logger.warning(
                    f"User {moderator_user_id} attempted to update permissions of "
                    f"user {target_user_id} in conversation {conversation_id} "
                    f"without permission"
                )
                return ServiceResult.failure(
                    "You do not have permission to update member permissions",
                    error_code=MembershipErrorCode.NO_PERMISSION,
                )

            target = _get_membership(conversation_id, target_user_id)
            if target is None:
                return ServiceResult.failure(
                    "User is not a member",
                    error_code=MembershipErrorCode.NOT_MEMBER,
                )

            is_self = target_user_id == moderator_user_id
            if target.is_owner and not is_self:
                return ServiceResult.failure(
                    "Cannot modify owner permissions",
                    error_code=MembershipErrorCode.CANNOT_MODIFY_OWNER,
                )

            role = patch.get("role")
            if role is not None:
                if role not in MembershipRole.values or role == MembershipRole.OWNER:
                    return ServiceResult.failure(
                        "Role must be moderator or member. "
                        "Use transfer_ownership to change the owner.",
                        error_code=MembershipErrorCode.INVALID_ROLE,
                    )
                if target.is_owner:
                    return ServiceResult.failure(
                        "The owner's role can only change through ownership transfer",
                        error_code=MembershipErrorCode.CANNOT_MODIFY_OWNER,
                    )

            update_fields = ["updated_at"]
            for field in PERMISSION_FIELDS:
                if field in patch and patch[field] is not None:
                    setattr(target, field, patch[field])
                    update_fields.append(field)
            target.save(update_fields=update_fields)

        if target.is_owner:
            logger.warning(
                f"Owner {moderator_user_id} edited their own permissions in "
                f"conversation {conversation_id}: {patch}"
            )
        else:
            logger.info(
                f"Updated permissions of user {target_user_id} in conversation "
                f"{conversation_id} by user {moderator_user_id}: {patch}"
            )

        return ServiceResult.success(target)

    @classmethod
    def update_membership_settings(
        cls,
        conversation_id: int,
        user_id: int,
        auto_translate_enabled: bool,
    ) -> ServiceResult[Membership]:
        """
        Update the caller's own membership preferences.

        Args:
            conversation_id: Conversation of the membership
            user_id: User updating their own membership
            auto_translate_enabled: Translate incoming messages

        Returns:
            ServiceResult with the updated Membership

        Error codes:
            NOT_MEMBER: User has no active membership
        """
        membership = _get_membership(conversation_id, user_id)
        if membership is None or not membership.is_active:
            return ServiceResult.failure(
                "Not a member",
                error_code=MembershipErrorCode.NOT_MEMBER,
            )

        membership.auto_translate_enabled = auto_translate_enabled
        membership.save(update_fields=["auto_translate_enabled", "updated_at"])

        cls.get_logger().info(
            f"User {user_id} set auto_translate_enabled={auto_translate_enabled} "
            f"in conversation {conversation_id}"
        )

        return ServiceResult.success(membership)


class InviteLinkService(BaseService):
    """
    Service for shareable invite links.

    A link carries a signed, timestamped token naming the conversation and
    the inviting user. Accepting it runs a normal invite on the inviter's
    behalf, so the inviter's permission and the conversation's capacity
    are evaluated when the link is used, not when it was generated.

    Methods:
        generate_invite_link: Build a link for a user allowed to invite
        accept_invite_by_token: Invite and join the caller via a token
    """

    @staticmethod
    def _signer() -> signing.TimestampSigner:
        return signing.TimestampSigner(salt=MEMBERSHIP_CONFIG.INVITE_LINK_SALT)

    @classmethod
    def generate_invite_link(
        cls,
        conversation_id: int,
        inviter_id: int,
        origin: Optional[str] = None,
    ) -> ServiceResult[str]:
        """
        Generate a shareable invite link.

        Args:
            conversation_id: Conversation the link invites into
            inviter_id: User generating the link (needs can_invite)
            origin: Base URL of the requesting frontend; falls back to
                    settings.FRONTEND_URL

        Returns:
            ServiceResult with the link URL

        Error codes:
            CONVERSATION_NOT_FOUND: Conversation does not exist
            NO_PERMISSION: Inviter is not active or lacks can_invite
        """
        if not Conversation.objects.filter(pk=conversation_id).exists():
            return _conversation_not_found(conversation_id)

        inviter = _get_membership(conversation_id, inviter_id)
        if not can_invite(inviter):
            return ServiceResult.failure(
                "You do not have permission to invite users",
                error_code=MembershipErrorCode.NO_PERMISSION,
            )

        token = cls._signer().sign_object(
            {"conversation_id": conversation_id, "inviter_id": inviter_id}
        )
        base = (origin or settings.FRONTEND_URL).rstrip("/")
        link = f"{base}{MEMBERSHIP_CONFIG.INVITE_LINK_PATH}?{urlencode({'token': token})}"

        cls.get_logger().info(
            f"User {inviter_id} generated invite link for conversation {conversation_id}"
        )

        return ServiceResult.success(link)

    @classmethod
    def accept_invite_by_token(
        cls,
        token: str,
        user_id: int,
    ) -> ServiceResult[Membership]:
        """
        Join a conversation through an invite link.

        Runs invite_user on behalf of the user who generated the link,
        then join_conversation when the invite produced a pending row.
        A departed user is reactivated by the invite and does not need
        the join step. Both steps commit together.

        Args:
            token: Token from the invite link
            user_id: User accepting the invitation

        Returns:
            ServiceResult with the active Membership

        Error codes:
            INVALID_INVITE_TOKEN: Token is malformed or tampered with
            INVITE_EXPIRED: Token is older than INVITE_LINK_MAX_AGE_SECONDS
            plus any error code of invite_user or join_conversation
        """
        logger = cls.get_logger()
        max_age = getattr(
            settings,
            "INVITE_LINK_MAX_AGE_SECONDS",
            MEMBERSHIP_CONFIG.INVITE_LINK_MAX_AGE_SECONDS,
        )

        try:
            payload = cls._signer().unsign_object(token, max_age=max_age)
            conversation_id = int(payload["conversation_id"])
            inviter_id = int(payload["inviter_id"])
        except signing.SignatureExpired:
            return ServiceResult.failure(
                "Invite link has expired",
                error_code=MembershipErrorCode.INVITE_EXPIRED,
            )
        except (signing.BadSignature, KeyError, TypeError, ValueError):
            logger.warning(f"User {user_id} presented an invalid invite token")
            return ServiceResult.failure(
                "Invalid invite link",
                error_code=MembershipErrorCode.INVALID_INVITE_TOKEN,
            )

        with cls.atomic():
            result = MembershipService.invite_user(conversation_id, user_id, inviter_id)
            if not result.success:
                return result

            if not result.data.is_active:
                result = MembershipService.join_conversation(conversation_id, user_id)
                if not result.success:
                    transaction.set_rollback(True)
                    return result

        logger.info(
            f"User {user_id} joined conversation {conversation_id} via invite "
            f"link from user {inviter_id}"
        )

        return result
