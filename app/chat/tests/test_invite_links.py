"""
Tests for InviteLinkService.

Verifies:
- Only users allowed to invite can generate links
- Links carry a signed token that round-trips to a membership
- Expired, tampered and malformed tokens are rejected
- Permission and capacity are evaluated when the link is used
"""

from unittest.mock import patch
from urllib.parse import parse_qs, urlparse

import pytest
from django.core import signing

from authentication.tests.factories import UserFactory
from chat.constants import MEMBERSHIP_CONFIG, MembershipErrorCode
from chat.models import Membership, MembershipRole
from chat.services import ConversationService, InviteLinkService, MembershipService
from chat.tests.factories import MembershipFactory
from core.services import ServiceResult


def token_from(link):
    """Extract the token query parameter from an invite link."""
    return parse_qs(urlparse(link).query)["token"][0]


def make_link(conversation, inviter):
    return InviteLinkService.generate_invite_link(conversation.id, inviter.id).data


# =============================================================================
# TestGenerateInviteLink
# =============================================================================


class TestGenerateInviteLink:
    """Tests for InviteLinkService.generate_invite_link()."""

    def test_owner_generates_link_on_frontend_url(
        self, db, settings, conversation, owner_user
    ):
        settings.FRONTEND_URL = "https://app.example.com/"

        result = InviteLinkService.generate_invite_link(conversation.id, owner_user.id)

        assert result.success is True
        parsed = urlparse(result.data)
        assert f"{parsed.scheme}://{parsed.netloc}" == "https://app.example.com"
        assert parsed.path == MEMBERSHIP_CONFIG.INVITE_LINK_PATH
        assert token_from(result.data)

    def test_origin_overrides_frontend_url(self, db, conversation, owner_user):
        result = InviteLinkService.generate_invite_link(
            conversation.id, owner_user.id, origin="https://staging.example.com"
        )

        assert result.data.startswith("https://staging.example.com/chat/join?token=")

    def test_member_without_invite_flag_is_rejected(
        self, db, conversation_with_members, member_user
    ):
        result = InviteLinkService.generate_invite_link(
            conversation_with_members.id, member_user.id
        )

        assert result.success is False
        assert result.error_code == MembershipErrorCode.NO_PERMISSION

    def test_outsider_is_rejected(self, db, conversation, outsider_user):
        result = InviteLinkService.generate_invite_link(conversation.id, outsider_user.id)

        assert result.error_code == MembershipErrorCode.NO_PERMISSION

    def test_unknown_conversation(self, db, owner_user):
        result = InviteLinkService.generate_invite_link(999999, owner_user.id)

        assert result.error_code == MembershipErrorCode.CONVERSATION_NOT_FOUND

    def test_generating_creates_no_membership(self, db, conversation, owner_user):
        make_link(conversation, owner_user)

        assert Membership.objects.filter(conversation=conversation).count() == 1


# =============================================================================
# TestAcceptInviteByToken
# =============================================================================


class TestAcceptInviteByToken:
    """Tests for InviteLinkService.accept_invite_by_token()."""

    def test_new_user_joins_through_link(self, db, conversation, owner_user):
        """
        Accepting a link invites and joins in one step.

        Why it matters: Link recipients should not need a second action.
        """
        newcomer = UserFactory()
        token = token_from(make_link(conversation, owner_user))

        result = InviteLinkService.accept_invite_by_token(token, newcomer.id)

        assert result.success is True
        membership = result.data
        assert membership.is_active is True
        assert membership.role == MembershipRole.MEMBER
        assert membership.invited_by_id == owner_user.id
        assert membership.joined_at is not None

    def test_departed_member_is_reactivated(self, db, conversation, owner_user):
        departed = MembershipFactory(conversation=conversation, departed=True)
        token = token_from(make_link(conversation, owner_user))

        result = InviteLinkService.accept_invite_by_token(token, departed.user_id)

        assert result.success is True
        assert result.data.id == departed.id
        assert result.data.is_active is True

    @pytest.mark.parametrize("returning", [False, True])
    def test_join_via_link_is_logged(self, db, conversation, owner_user, returning):
        """
        Both the new-member and the reactivation path log the join.

        Why it matters: Link usage is audited the same way regardless of
        whether the user had been in the conversation before.
        """
        if returning:
            user_id = MembershipFactory(conversation=conversation, departed=True).user_id
        else:
            user_id = UserFactory().id
        token = token_from(make_link(conversation, owner_user))

        with patch.object(InviteLinkService, "get_logger") as get_logger:
            result = InviteLinkService.accept_invite_by_token(token, user_id)

        assert result.success is True
        info = get_logger.return_value.info
        info.assert_called_once()
        assert "via invite link" in info.call_args.args[0]

    def test_active_member_gets_already_member(
        self, db, conversation_with_members, owner_user, member_user
    ):
        token = token_from(make_link(conversation_with_members, owner_user))

        result = InviteLinkService.accept_invite_by_token(token, member_user.id)

        assert result.error_code == MembershipErrorCode.ALREADY_MEMBER

    def test_expired_token(self, db, settings, conversation, owner_user):
        token = token_from(make_link(conversation, owner_user))
        settings.INVITE_LINK_MAX_AGE_SECONDS = -1

        result = InviteLinkService.accept_invite_by_token(token, UserFactory().id)

        assert result.success is False
        assert result.error_code == MembershipErrorCode.INVITE_EXPIRED

    def test_tampered_token(self, db, conversation, owner_user):
        token = token_from(make_link(conversation, owner_user))
        tampered = token.replace(":", ":0", 1)

        result = InviteLinkService.accept_invite_by_token(tampered, UserFactory().id)

        assert result.error_code == MembershipErrorCode.INVALID_INVITE_TOKEN

    def test_token_signed_for_another_purpose(self, db, conversation, owner_user):
        """A token signed with a different salt is not an invite."""
        token = signing.TimestampSigner(salt="other").sign_object(
            {"conversation_id": conversation.id, "inviter_id": owner_user.id}
        )

        result = InviteLinkService.accept_invite_by_token(token, UserFactory().id)

        assert result.error_code == MembershipErrorCode.INVALID_INVITE_TOKEN

    def test_token_missing_inviter(self, db, conversation):
        token = signing.TimestampSigner(
            salt=MEMBERSHIP_CONFIG.INVITE_LINK_SALT
        ).sign_object({"conversation_id": conversation.id})

        result = InviteLinkService.accept_invite_by_token(token, UserFactory().id)

        assert result.error_code == MembershipErrorCode.INVALID_INVITE_TOKEN

    def test_garbage_token(self, db):
        result = InviteLinkService.accept_invite_by_token("not-a-token", UserFactory().id)

        assert result.error_code == MembershipErrorCode.INVALID_INVITE_TOKEN

    def test_inviter_permission_checked_at_use(
        self, db, conversation_with_members, owner_user, member_user
    ):
        """
        A link stops working once its creator loses the invite right.
        """
        MembershipService.update_member_permissions(
            conversation_with_members.id,
            member_user.id,
            owner_user.id,
            {"can_invite": True},
        )
        token = token_from(make_link(conversation_with_members, member_user))
        MembershipService.leave_conversation(conversation_with_members.id, member_user.id)

        result = InviteLinkService.accept_invite_by_token(token, UserFactory().id)

        assert result.error_code == MembershipErrorCode.NO_PERMISSION

    def test_capacity_checked_at_use(self, db, owner_user):
        conversation = ConversationService.create_conversation(
            creator=owner_user, max_users=2
        ).data
        token = token_from(make_link(conversation, owner_user))
        MembershipFactory(conversation=conversation)
        latecomer = UserFactory()

        result = InviteLinkService.accept_invite_by_token(token, latecomer.id)

        assert result.error_code == MembershipErrorCode.CAPACITY_EXCEEDED
        assert not Membership.objects.filter(
            conversation=conversation, user=latecomer
        ).exists()

    def test_failed_join_discards_invitation(self, db, conversation, owner_user):
        """
        The pending row created by the invite step is rolled back when
        the join step fails.
        """
        newcomer = UserFactory()
        token = token_from(make_link(conversation, owner_user))
        failure = ServiceResult.failure(
            "Conversation is full", error_code=MembershipErrorCode.CAPACITY_EXCEEDED
        )

        with patch.object(MembershipService, "join_conversation", return_value=failure):
            result = InviteLinkService.accept_invite_by_token(token, newcomer.id)

        assert result.error_code == MembershipErrorCode.CAPACITY_EXCEEDED
        assert not Membership.objects.filter(
            conversation=conversation, user=newcomer
        ).exists()
