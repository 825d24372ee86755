"""
Tests for the membership permission evaluator and access queries.

The evaluator functions are pure, so most cases run against unsaved
Membership instances. MembershipAccessService tests hit the database.
"""

import pytest

from authentication.tests.factories import UserFactory
from chat.authorization import (
    MembershipAccessService,
    can_invite,
    can_manage_permissions,
    can_moderate,
    can_write,
)
from chat.models import Membership, MembershipRole
from chat.tests.factories import (
    ConversationFactory,
    MembershipFactory,
    ModeratorMembershipFactory,
    OwnerMembershipFactory,
)


def build_membership(**overrides):
    """Unsaved active member with the given overrides."""
    fields = {
        "role": MembershipRole.MEMBER,
        "is_active": True,
        "can_write": True,
        "can_invite": False,
        "can_moderate": False,
    }
    fields.update(overrides)
    return Membership(**fields)


# =============================================================================
# Capability Flags
# =============================================================================


class TestCapabilityChecks:
    """Tests for can_invite, can_write and can_moderate."""

    @pytest.mark.parametrize("check", [can_invite, can_write, can_moderate])
    def test_missing_membership_is_denied(self, check):
        assert check(None) is False

    @pytest.mark.parametrize(
        "check,flag",
        [
            (can_invite, "can_invite"),
            (can_write, "can_write"),
            (can_moderate, "can_moderate"),
        ],
    )
    def test_granted_when_active_with_flag(self, check, flag):
        assert check(build_membership(**{flag: True})) is True

    @pytest.mark.parametrize(
        "check,flag",
        [
            (can_invite, "can_invite"),
            (can_write, "can_write"),
            (can_moderate, "can_moderate"),
        ],
    )
    def test_denied_without_flag(self, check, flag):
        assert check(build_membership(**{flag: False})) is False

    @pytest.mark.parametrize(
        "check,flag",
        [
            (can_invite, "can_invite"),
            (can_write, "can_write"),
            (can_moderate, "can_moderate"),
        ],
    )
    def test_inactive_membership_loses_every_capability(self, check, flag):
        """
        Flags are ignored while the membership is inactive.

        Why it matters: A kicked moderator keeps can_moderate=True on the
        row but must not be able to use it.
        """
        membership = build_membership(is_active=False, **{flag: True})

        assert check(membership) is False

    def test_flags_are_independent_of_role(self):
        """A member granted can_moderate may moderate; an owner without it may not."""
        member = build_membership(can_moderate=True)
        owner = build_membership(role=MembershipRole.OWNER, can_moderate=False)

        assert can_moderate(member) is True
        assert can_moderate(owner) is False


class TestCanManagePermissions:
    """Tests for can_manage_permissions (role based)."""

    @pytest.mark.parametrize(
        "role,expected",
        [
            (MembershipRole.OWNER, True),
            (MembershipRole.MODERATOR, True),
            (MembershipRole.MEMBER, False),
        ],
    )
    def test_active_roles(self, role, expected):
        assert can_manage_permissions(build_membership(role=role)) is expected

    def test_moderator_without_moderate_flag_still_manages(self):
        membership = build_membership(role=MembershipRole.MODERATOR, can_moderate=False)

        assert can_manage_permissions(membership) is True

    def test_member_with_moderate_flag_cannot_manage(self):
        membership = build_membership(can_moderate=True)

        assert can_manage_permissions(membership) is False

    def test_inactive_owner_cannot_manage(self):
        membership = build_membership(role=MembershipRole.OWNER, is_active=False)

        assert can_manage_permissions(membership) is False

    def test_missing_membership(self):
        assert can_manage_permissions(None) is False


# =============================================================================
# MembershipAccessService
# =============================================================================


class TestMembershipAccessService:
    """Tests for the read-only access query facade."""

    def test_get_user_membership_returns_inactive_rows(self, db):
        membership = MembershipFactory(departed=True)

        found = MembershipAccessService.get_user_membership(
            membership.conversation_id, membership.user_id
        )

        assert found == membership
        assert found.is_active is False

    def test_get_user_membership_returns_none_without_row(self, db):
        conversation = ConversationFactory()
        user = UserFactory()

        assert (
            MembershipAccessService.get_user_membership(conversation.id, user.id)
            is None
        )

    def test_has_access_requires_active_row(self, db):
        active = MembershipFactory()
        pending = MembershipFactory(conversation=active.conversation, pending=True)
        conversation_id = active.conversation_id

        assert MembershipAccessService.has_access(conversation_id, active.user_id)
        assert not MembershipAccessService.has_access(conversation_id, pending.user_id)
        assert not MembershipAccessService.has_access(
            conversation_id, UserFactory().id
        )

    def test_can_write_requires_active_row_with_flag(self, db):
        writer = MembershipFactory()
        muted = MembershipFactory(conversation=writer.conversation, can_write=False)
        departed = MembershipFactory(conversation=writer.conversation, departed=True)
        conversation_id = writer.conversation_id

        assert MembershipAccessService.can_write(conversation_id, writer.user_id)
        assert not MembershipAccessService.can_write(conversation_id, muted.user_id)
        assert not MembershipAccessService.can_write(conversation_id, departed.user_id)

    def test_get_active_members_in_role_order(self, db):
        """
        Owner first, then moderators, then members.

        Why it matters: Clients render the list as-is.
        """
        conversation = ConversationFactory()
        member = MembershipFactory(conversation=conversation)
        moderator = ModeratorMembershipFactory(conversation=conversation)
        owner = OwnerMembershipFactory(conversation=conversation)
        MembershipFactory(conversation=conversation, pending=True)

        members = list(MembershipAccessService.get_active_members(conversation.id))

        assert members == [owner, moderator, member]

    def test_count_active_members(self, db):
        conversation = ConversationFactory()
        OwnerMembershipFactory(conversation=conversation)
        MembershipFactory(conversation=conversation)
        MembershipFactory(conversation=conversation, pending=True)
        MembershipFactory(conversation=conversation, departed=True)

        assert MembershipAccessService.count_active_members(conversation.id) == 2
