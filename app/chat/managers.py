"""
Custom QuerySet for membership lookups.

Every read the membership services perform goes through these chainable
filters so the definition of "active" lives in exactly one place. The
capacity check, the member listing and the access checks all count the
same rows.

Usage:
    from chat.models import Membership

    Membership.objects.active().for_conversation(conversation_id).count()
    Membership.objects.for_conversation(conversation_id).active().in_role_order()
"""

from __future__ import annotations

from django.db import models
from django.db.models import Case, IntegerField, Value, When


class MembershipQuerySet(models.QuerySet):
    """
    QuerySet with the filters shared by membership services.

    Methods:
        active(): Rows with is_active=True
        for_conversation(): Rows belonging to one conversation
        for_user(): Rows belonging to one user
        with_role_rank(): Annotate role_rank (owner=0, moderator=1, member=2)
        in_role_order(): Owner first, then moderators, then members,
            each group by ascending joined_at
    """

    def active(self) -> MembershipQuerySet:
        """Filter to memberships that are currently participating."""
        return self.filter(is_active=True)

    def for_conversation(self, conversation_id) -> MembershipQuerySet:
        """Filter to memberships of a single conversation."""
        return self.filter(conversation_id=conversation_id)

    def for_user(self, user_id) -> MembershipQuerySet:
        """Filter to memberships held by a single user."""
        return self.filter(user_id=user_id)

    def with_role_rank(self) -> MembershipQuerySet:
        """
        Annotate each row with an integer rank for its role.

        Role values are strings, so ordering by the column directly would
        sort alphabetically (member < moderator < owner).
        """
        from chat.models import MembershipRole

        return self.annotate(
            role_rank=Case(
                When(role=MembershipRole.OWNER, then=Value(0)),
                When(role=MembershipRole.MODERATOR, then=Value(1)),
                default=Value(2),
                output_field=IntegerField(),
            )
        )

    def in_role_order(self) -> MembershipQuerySet:
        """Order by role rank, then join time, then id for stable ties."""
        return self.with_role_rank().order_by("role_rank", "joined_at", "id")
