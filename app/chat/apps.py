"""
Chat application configuration.

This app provides conversation membership with:
- Invitations, joins, departures and kicks
- Role-based permission management (owner, moderator, member)
- Atomic ownership transfer
- Shareable invite links
"""

from django.apps import AppConfig


class ChatConfig(AppConfig):
    """Configuration for the chat application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "chat"
    verbose_name = "Chat"
