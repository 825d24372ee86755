"""
Base service layer patterns for business logic encapsulation.

This module provides the two building blocks every domain service uses:
- ServiceResult: Standard result wrapper for consistent success/failure handling
- BaseService: Base class with per-service logging and transactional scope

Service Layer Philosophy:
    Views handle HTTP concerns, models handle data, services handle rules.
    A service method reads fresh state from the database on every call and
    never caches permission data between calls.

Pattern Comparison:
    - ServiceResult: Use for expected failures (business rule violations)
    - Exceptions: Use for unexpected failures (database errors, bugs)

Usage:
    from core.services import BaseService, ServiceResult

    class MembershipService(BaseService):
        @classmethod
        def join_conversation(cls, conversation_id, user_id) -> ServiceResult[Membership]:
            membership = Membership.objects.filter(...).first()
            if membership is None:
                return ServiceResult.failure(
                    "No invitation found",
                    error_code="NO_INVITATION",
                )

            with cls.atomic():
                membership.is_active = True
                membership.save(update_fields=["is_active", "updated_at"])

            cls.get_logger().info(f"User {user_id} joined {conversation_id}")
            return ServiceResult.success(membership)

    # In a view
    result = MembershipService.join_conversation(conversation_id, request.user.id)
    if result.success:
        return Response(MembershipSerializer(result.data).data)
    return Response(result.to_response(), status=400)
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

from django.db import transaction

if TYPE_CHECKING:
    from collections.abc import Generator
    from typing import Any

# Generic type for ServiceResult data
T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Standard result wrapper for service operations.

    Provides consistent success/failure handling without exceptions.
    Use this for expected failures (permission checks, state preconditions).

    Attributes:
        success: Whether the operation succeeded
        data: Result data if successful (None if failed)
        error: Error message if failed (None if successful)
        error_code: Machine-readable error code for client handling
        errors: Field-level errors for validation failures

    Usage:
        # Success case
        return ServiceResult.success(membership)

        # Failure case
        return ServiceResult.failure("Conversation is full", "CAPACITY_EXCEEDED")

        # Check result
        result = MembershipService.invite_user(conversation_id, user_id, inviter_id)
        if result.success:
            membership = result.data
        else:
            print(f"Error: {result.error} ({result.error_code})")
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None
    errors: dict[str, list[str]] | None = field(default=None)

    @classmethod
    def success(cls, data: T) -> ServiceResult[T]:
        """
        Create a successful result.

        Args:
            data: The result data

        Returns:
            ServiceResult with success=True and data set
        """
        return cls(success=True, data=data)

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: str | None = None,
        errors: dict[str, list[str]] | None = None,
    ) -> ServiceResult[T]:
        """
        Create a failed result.

        Args:
            error: Human-readable error message
            error_code: Machine-readable error code for client handling
            errors: Field-level errors (for validation failures)

        Returns:
            ServiceResult with success=False and error details

        Example:
            return ServiceResult.failure(
                "Invalid conversation settings",
                error_code="INVALID_SETTINGS",
                errors={"max_users": ["Must be between 1 and 4"]},
            )
        """
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            errors=errors,
        )

    def to_response(self) -> dict[str, Any]:
        """
        Convert a failed result to the API error body.

        Returns:
            Dict with error and error_code (and field errors when present)
        """
        if self.success:
            return {"success": True, "data": self.data}

        response: dict[str, Any] = {"error": self.error}
        if self.error_code:
            response["error_code"] = self.error_code
        if self.errors:
            response["errors"] = self.errors
        return response

    def __bool__(self) -> bool:
        """Allow using result in boolean context (same as result.success)."""
        return self.success


class BaseService:
    """
    Base class for service layer classes.

    Provides common utilities for services:
    - Logging setup per service
    - Database transaction management

    Design Notes:
        - Use @classmethod (no instance state)
        - Services are stateless; every fact is read fresh from the database
        - Use ServiceResult for expected failures
        - Let database exceptions propagate to the caller
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get logger for this service.

        Returns a logger named after the service class for
        easy filtering in logs (e.g. "chat.services.MembershipService").
        """
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Execute operations in a database transaction.

        All database operations within this context manager commit
        together. If any operation raises, every change made inside
        the block is rolled back and the exception propagates.

        Example:
            with cls.atomic():
                current.save(update_fields=["role", "updated_at"])
                new_owner.save(update_fields=["role", "updated_at"])
                conversation.save(update_fields=["owner", "updated_at"])
        """
        with transaction.atomic():
            yield
