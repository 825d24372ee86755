"""
Core Application - Infrastructure & Base Classes

This app contains infrastructure code shared by the domain apps. It holds
no membership logic of its own.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Services (import from core.services):
    - BaseService: Base class for service layer
    - ServiceResult: Standard result wrapper for success/failure handling

Views (import from core.views):
    - health_check: Liveness/readiness probe

OpenAPI (referenced from settings.SPECTACULAR):
    - group_api_endpoints: Schema postprocessing hook adding tag metadata

Usage:
    from core.models import BaseModel
    from core.services import BaseService, ServiceResult

    class MembershipService(BaseService):
        @classmethod
        def leave_conversation(cls, conversation_id, user_id):
            with cls.atomic():
                ...
            return ServiceResult.success(membership)

Note:
    - Business logic should NOT go here. Extend core classes in your domain apps.
    - Django models are NOT imported here to avoid AppRegistryNotReady
      errors. Import them directly from their modules.
"""

# Services (no Django model dependencies)
from .services import BaseService, ServiceResult

__all__ = [
    "BaseService",
    "ServiceResult",
]
