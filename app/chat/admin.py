"""
Django admin configuration for chat models.

Provides admin interfaces for:
- Conversation management (with inline memberships)
- Membership viewing

Ownership is read-only here: changing it outside transfer_ownership
would break the single-owner rule.
"""

from django.contrib import admin

from chat.models import Conversation, Membership


class MembershipInline(admin.TabularInline):
    """Inline display of memberships in conversation admin."""

    model = Membership
    fk_name = "conversation"
    extra = 0
    readonly_fields = ["role", "joined_at", "invited_by"]
    raw_id_fields = ["user", "invited_by"]


@admin.register(Conversation)
class ConversationAdmin(admin.ModelAdmin):
    """Admin interface for Conversation model."""

    list_display = [
        "id",
        "title",
        "owner",
        "max_users",
        "allow_user_invites",
        "created_at",
    ]
    list_filter = ["allow_user_invites", "created_at"]
    search_fields = ["title", "id", "owner__email"]
    readonly_fields = ["owner", "created_at", "updated_at"]
    inlines = [MembershipInline]
    ordering = ["-created_at"]


@admin.register(Membership)
class MembershipAdmin(admin.ModelAdmin):
    """Admin interface for Membership model."""

    list_display = [
        "id",
        "conversation",
        "user",
        "role",
        "is_active",
        "can_write",
        "can_invite",
        "can_moderate",
        "joined_at",
    ]
    list_filter = ["role", "is_active", "can_moderate"]
    search_fields = ["user__email", "user__username", "conversation__title"]
    readonly_fields = ["role", "created_at", "updated_at", "joined_at"]
    raw_id_fields = ["conversation", "user", "invited_by"]
    ordering = ["-created_at"]
