"""
Tests for chat app.

This package contains test modules for:
- test_models.py: Conversation, Membership and queryset tests
- test_authorization.py: Permission evaluator and access queries
- test_services.py: Conversation and membership service tests
- test_invite_links.py: Invite link generation and acceptance
- test_views.py: REST API endpoint tests

Usage:
    pytest chat/tests/
    pytest chat/tests/test_services.py
"""
