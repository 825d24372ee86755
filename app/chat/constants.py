"""
Constants and configuration for conversation membership.

This module centralizes configuration values for:
- Conversation capacity (max_users bounds and default)
- Invite links (signing salt, default lifetime)
- Error codes returned by the membership services

Deployment-specific values (invite link lifetime, frontend URL) are read
from Django settings at call time; the values here are the defaults.
Import example:
    from chat.constants import MEMBERSHIP_CONFIG, MembershipErrorCode
"""

from typing import Final


# =============================================================================
# Membership Configuration
# =============================================================================


class MEMBERSHIP_CONFIG:
    """Configuration for conversation capacity and invite links."""

    # Capacity bounds for Conversation.max_users
    MIN_USERS: Final[int] = 1
    MAX_USERS_LIMIT: Final[int] = 4
    DEFAULT_MAX_USERS: Final[int] = 1

    # Invite links
    INVITE_LINK_SALT: Final[str] = "chat.invite-link"
    INVITE_LINK_MAX_AGE_SECONDS: Final[int] = 7 * 24 * 60 * 60  # 7 days
    INVITE_LINK_PATH: Final[str] = "/chat/join"


# =============================================================================
# Error Codes
# =============================================================================


class MembershipErrorCode:
    """
    Stable, machine-readable error codes for membership failures.

    Clients switch on these values; never rename an existing code.
    """

    CONVERSATION_NOT_FOUND: Final[str] = "CONVERSATION_NOT_FOUND"
    USER_NOT_FOUND: Final[str] = "USER_NOT_FOUND"
    NO_PERMISSION: Final[str] = "NO_PERMISSION"
    ALREADY_MEMBER: Final[str] = "ALREADY_MEMBER"
    NOT_MEMBER: Final[str] = "NOT_MEMBER"
    NO_INVITATION: Final[str] = "NO_INVITATION"
    CAPACITY_EXCEEDED: Final[str] = "CAPACITY_EXCEEDED"
    OWNER_CANNOT_LEAVE: Final[str] = "OWNER_CANNOT_LEAVE"
    CANNOT_KICK_OWNER: Final[str] = "CANNOT_KICK_OWNER"
    CANNOT_MODIFY_OWNER: Final[str] = "CANNOT_MODIFY_OWNER"
    INVALID_NEW_OWNER: Final[str] = "INVALID_NEW_OWNER"
    INVALID_ROLE: Final[str] = "INVALID_ROLE"
    INVALID_SETTINGS: Final[str] = "INVALID_SETTINGS"
    INVALID_INVITE_TOKEN: Final[str] = "INVALID_INVITE_TOKEN"
    INVITE_EXPIRED: Final[str] = "INVITE_EXPIRED"
