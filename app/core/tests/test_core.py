"""
Tests for core infrastructure.

Verifies:
- ServiceResult success/failure construction and error bodies
- BaseService logger naming and transactional scope
- Health check endpoint
- OpenAPI postprocessing hook
"""

from unittest.mock import patch

import pytest
from django.db import DatabaseError

from authentication.models import User
from authentication.tests.factories import UserFactory
from core.openapi import group_api_endpoints
from core.services import BaseService, ServiceResult


class ExampleService(BaseService):
    """Service used to exercise BaseService helpers."""

    @classmethod
    def rename_and_fail(cls, user, display_name):
        with cls.atomic():
            user.display_name = display_name
            user.save(update_fields=["display_name"])
            raise DatabaseError("write failed")


# =============================================================================
# ServiceResult
# =============================================================================


class TestServiceResult:
    """Tests for the ServiceResult wrapper."""

    def test_success(self):
        result = ServiceResult.success({"id": 1})

        assert result.success is True
        assert result.data == {"id": 1}
        assert result.error is None
        assert bool(result) is True

    def test_failure(self):
        result = ServiceResult.failure("Conversation is full", error_code="CAPACITY_EXCEEDED")

        assert result.success is False
        assert result.data is None
        assert result.error_code == "CAPACITY_EXCEEDED"
        assert bool(result) is False

    def test_failure_response_body(self):
        result = ServiceResult.failure(
            "Invalid settings",
            error_code="INVALID_SETTINGS",
            errors={"max_users": ["Must be between 1 and 4"]},
        )

        assert result.to_response() == {
            "error": "Invalid settings",
            "error_code": "INVALID_SETTINGS",
            "errors": {"max_users": ["Must be between 1 and 4"]},
        }

    def test_failure_response_omits_empty_fields(self):
        assert ServiceResult.failure("Nope").to_response() == {"error": "Nope"}


# =============================================================================
# BaseService
# =============================================================================


class TestBaseService:
    """Tests for BaseService helpers."""

    def test_logger_named_after_service(self):
        assert ExampleService.get_logger().name == f"{__name__}.ExampleService"

    def test_atomic_rolls_back_and_propagates(self, db):
        user = UserFactory(display_name="Before")

        with pytest.raises(DatabaseError):
            ExampleService.rename_and_fail(user, "After")

        assert User.objects.get(pk=user.pk).display_name == "Before"


# =============================================================================
# Health Check
# =============================================================================


class TestHealthCheck:
    """Tests for GET /health/."""

    def test_healthy(self, client, db):
        response = client.get("/health/")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "database": "connected"}

    def test_database_unreachable(self, client, db):
        with patch("core.views.connection") as connection:
            connection.cursor.side_effect = DatabaseError("down")
            response = client.get("/health/")

        assert response.status_code == 503
        assert response.json()["database"] == "disconnected"


# =============================================================================
# OpenAPI
# =============================================================================


class TestGroupApiEndpoints:
    """Tests for the drf-spectacular postprocessing hook."""

    def test_token_operations_get_summaries_and_auth_tag(self):
        schema = {
            "paths": {
                "/api/v1/auth/token/": {
                    "post": {"operationId": "auth_token_create", "tags": ["auth"]},
                },
                "/api/v1/chat/conversations/": {
                    "post": {
                        "operationId": "create_conversation",
                        "tags": ["Chat - Conversations"],
                    },
                    "parameters": [],
                },
            }
        }

        result = group_api_endpoints(schema, None, None, True)

        token_op = result["paths"]["/api/v1/auth/token/"]["post"]
        assert token_op["summary"] == "Obtain tokens"
        assert token_op["tags"] == ["Auth"]
        chat_op = result["paths"]["/api/v1/chat/conversations/"]["post"]
        assert chat_op["tags"] == ["Chat - Conversations"]
        assert [tag["name"] for tag in result["tags"]] == [
            "Auth",
            "Chat - Conversations",
            "Chat - Members",
        ]
