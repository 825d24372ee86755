"""
Authentication application.

This app provides the user identity referenced by conversations and
memberships. Tokens are issued by SimpleJWT (see config/urls.py).

Key components:
    - User model: Custom email-based user with public display fields
    - UserManager: Email-based user creation
    - UserSummarySerializer: Public user projection for API responses

Usage:
    from authentication.models import User
"""
