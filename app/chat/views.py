"""
ViewSets for chat API.

This module provides REST API endpoints for the membership system:
- ConversationViewSet: Conversation creation, details, settings and the
  caller's own membership
- MembershipViewSet: Member listing and lifecycle actions (nested under
  conversation)
- JoinByTokenView: Accept an invite link

URL Structure:
    /api/v1/chat/conversations/                                    POST
    /api/v1/chat/conversations/{id}/                               GET, PATCH
    /api/v1/chat/conversations/{id}/membership/                    GET, PATCH
    /api/v1/chat/conversations/{id}/members/                       GET
    /api/v1/chat/conversations/{id}/members/invite/                POST
    /api/v1/chat/conversations/{id}/members/join/                  POST
    /api/v1/chat/conversations/{id}/members/leave/                 POST
    /api/v1/chat/conversations/{id}/members/kick/                  POST
    /api/v1/chat/conversations/{id}/members/transfer-ownership/    POST
    /api/v1/chat/conversations/{id}/members/generate-invite-link/  POST
    /api/v1/chat/conversations/{id}/members/{user_id}/             PATCH
    /api/v1/chat/conversations/members/join-by-token/              POST

Design Decisions:
    - All state changes go through the service layer
    - Service error codes map to HTTP status through SERVICE_ERROR_STATUS
    - Error bodies are {"error": str, "error_code": str}
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema, extend_schema_view
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.services import ServiceResult

from chat.authorization import MembershipAccessService
from chat.constants import MembershipErrorCode
from chat.models import Conversation
from chat.permissions import IsConversationMember
from chat.serializers import (
    ConversationCreateSerializer,
    ConversationSerializer,
    ConversationSettingsSerializer,
    InviteLinkSerializer,
    JoinByTokenSerializer,
    MemberPermissionsSerializer,
    MembershipSerializer,
    MembershipSettingsSerializer,
    MemberTargetSerializer,
)
from chat.services import ConversationService, InviteLinkService, MembershipService


SERVICE_ERROR_STATUS = {
    MembershipErrorCode.CONVERSATION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    MembershipErrorCode.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    MembershipErrorCode.NO_PERMISSION: status.HTTP_403_FORBIDDEN,
    MembershipErrorCode.OWNER_CANNOT_LEAVE: status.HTTP_403_FORBIDDEN,
    MembershipErrorCode.CANNOT_KICK_OWNER: status.HTTP_403_FORBIDDEN,
    MembershipErrorCode.CANNOT_MODIFY_OWNER: status.HTTP_403_FORBIDDEN,
    MembershipErrorCode.ALREADY_MEMBER: status.HTTP_409_CONFLICT,
    MembershipErrorCode.CAPACITY_EXCEEDED: status.HTTP_409_CONFLICT,
}


def service_error_response(result: ServiceResult) -> Response:
    """Translate a failed ServiceResult into an error response."""
    return Response(
        result.to_response(),
        status=SERVICE_ERROR_STATUS.get(result.error_code, status.HTTP_400_BAD_REQUEST),
    )


def request_origin(request) -> str | None:
    """
    Base URL of the frontend that made the request.

    Prefers the Origin header, then the scheme and host of the Referer.
    Returns None when neither is present so the caller falls back to
    settings.FRONTEND_URL.
    """
    origin = request.headers.get("Origin")
    if origin:
        return origin

    referer = request.headers.get("Referer")
    if referer:
        parts = referer.split("/")
        if len(parts) >= 3:
            return "/".join(parts[:3])

    return None


@extend_schema_view(
    create=extend_schema(
        operation_id="create_conversation",
        summary="Create conversation",
        request=ConversationCreateSerializer,
        responses={201: ConversationSerializer},
        tags=["Chat - Conversations"],
    ),
    retrieve=extend_schema(
        operation_id="get_conversation",
        summary="Get conversation",
        tags=["Chat - Conversations"],
    ),
    partial_update=extend_schema(
        operation_id="update_conversation_settings",
        summary="Update conversation settings",
        request=ConversationSettingsSerializer,
        responses={200: ConversationSerializer},
        tags=["Chat - Conversations"],
    ),
)
class ConversationViewSet(
    mixins.CreateModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    viewsets.GenericViewSet,
):
    """
    ViewSet for conversation operations.

    create:
        Create a new conversation. The caller becomes its owner.

    retrieve:
        Get conversation details. Active members only.

    partial_update:
        Update title, capacity or invite policy. Owner only.

    membership:
        GET the caller's own membership, or PATCH its preferences.
    """

    queryset = Conversation.objects.all()
    serializer_class = ConversationSerializer
    lookup_value_regex = r"\d+"
    http_method_names = ["get", "post", "patch", "head", "options"]

    def get_permissions(self):
        """Return permissions based on action."""
        if self.action == "retrieve":
            return [IsAuthenticated(), IsConversationMember()]
        return [IsAuthenticated()]

    def get_serializer_class(self):
        """Return appropriate serializer based on action."""
        if self.action == "create":
            return ConversationCreateSerializer
        if self.action == "partial_update":
            return ConversationSettingsSerializer
        return ConversationSerializer

    def create(self, request):
        """Create a conversation owned by the caller."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ConversationService.create_conversation(
            creator=request.user,
            **serializer.validated_data,
        )

        if not result.success:
            return service_error_response(result)

        output_serializer = ConversationSerializer(
            result.data, context={"request": request}
        )
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        """Update conversation settings."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ConversationService.update_settings(
            conversation_id=int(pk),
            user=request.user,
            **serializer.validated_data,
        )

        if not result.success:
            return service_error_response(result)

        output_serializer = ConversationSerializer(
            result.data, context={"request": request}
        )
        return Response(output_serializer.data)

    @extend_schema(
        methods=["GET"],
        operation_id="get_my_membership",
        summary="Get my membership",
        responses={200: MembershipSerializer},
        tags=["Chat - Members"],
    )
    @extend_schema(
        methods=["PATCH"],
        operation_id="update_my_membership",
        summary="Update my membership settings",
        request=MembershipSettingsSerializer,
        responses={200: MembershipSerializer},
        tags=["Chat - Members"],
    )
    @action(detail=True, methods=["get", "patch"])
    def membership(self, request, pk=None):
        """Get or update the caller's own membership."""
        conversation_id = int(pk)

        if request.method == "PATCH":
            serializer = MembershipSettingsSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)

            result = MembershipService.update_membership_settings(
                conversation_id=conversation_id,
                user_id=request.user.id,
                auto_translate_enabled=serializer.validated_data[
                    "auto_translate_enabled"
                ],
            )
            if not result.success:
                return service_error_response(result)
            return Response(MembershipSerializer(result.data).data)

        membership = MembershipAccessService.get_user_membership(
            conversation_id, request.user.id
        )
        if membership is None:
            return Response(
                {
                    "error": "Membership not found",
                    "error_code": MembershipErrorCode.NOT_MEMBER,
                },
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(MembershipSerializer(membership).data)


@extend_schema_view(
    list=extend_schema(
        operation_id="list_conversation_members",
        summary="List active members",
        responses={200: MembershipSerializer(many=True)},
        tags=["Chat - Members"],
    ),
    invite=extend_schema(
        operation_id="invite_member",
        summary="Invite user",
        request=MemberTargetSerializer,
        responses={201: MembershipSerializer},
        tags=["Chat - Members"],
    ),
    join=extend_schema(
        operation_id="join_conversation",
        summary="Accept invitation",
        request=None,
        responses={200: MembershipSerializer},
        tags=["Chat - Members"],
    ),
    leave=extend_schema(
        operation_id="leave_conversation",
        summary="Leave conversation",
        request=None,
        responses={200: MembershipSerializer},
        tags=["Chat - Members"],
    ),
    kick=extend_schema(
        operation_id="kick_member",
        summary="Remove member",
        request=MemberTargetSerializer,
        responses={200: MembershipSerializer},
        tags=["Chat - Members"],
    ),
    transfer_ownership=extend_schema(
        operation_id="transfer_conversation_ownership",
        summary="Transfer ownership",
        request=MemberTargetSerializer,
        responses={200: OpenApiResponse(description="{'success': true}")},
        tags=["Chat - Members"],
    ),
    partial_update=extend_schema(
        operation_id="update_member_permissions",
        summary="Update member permissions",
        request=MemberPermissionsSerializer,
        responses={200: MembershipSerializer},
        tags=["Chat - Members"],
    ),
    generate_invite_link=extend_schema(
        operation_id="generate_invite_link",
        summary="Generate invite link",
        request=None,
        responses={200: InviteLinkSerializer},
        tags=["Chat - Members"],
    ),
)
class MembershipViewSet(viewsets.ViewSet):
    """
    ViewSet for member operations within a conversation.

    list:
        Active members, owner first, then moderators, then members.

    invite / kick / transfer_ownership:
        Act on the user named by user_id in the body.

    join / leave:
        Act on the caller's own membership.

    partial_update:
        Change role and capability flags of the member identified by
        user_id in the URL.

    generate_invite_link:
        Shareable link for users allowed to invite.
    """

    permission_classes = [IsAuthenticated]

    def _conversation_id(self) -> int:
        return int(self.kwargs["conversation_pk"])

    def list(self, request, conversation_pk=None):
        """List active members."""
        conversation_id = self._conversation_id()

        if not Conversation.objects.filter(pk=conversation_id).exists():
            return Response(
                {
                    "error": "Conversation not found",
                    "error_code": MembershipErrorCode.CONVERSATION_NOT_FOUND,
                },
                status=status.HTTP_404_NOT_FOUND,
            )

        if not MembershipAccessService.has_access(conversation_id, request.user.id):
            return Response(
                {
                    "error": IsConversationMember.message,
                    "error_code": MembershipErrorCode.NO_PERMISSION,
                },
                status=status.HTTP_403_FORBIDDEN,
            )

        members = MembershipAccessService.get_active_members(conversation_id)
        return Response(MembershipSerializer(members, many=True).data)

    @action(detail=False, methods=["post"])
    def invite(self, request, conversation_pk=None):
        """Invite a user."""
        serializer = MemberTargetSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = MembershipService.invite_user(
            conversation_id=self._conversation_id(),
            invited_user_id=serializer.validated_data["user_id"],
            inviter_id=request.user.id,
        )

        if not result.success:
            return service_error_response(result)

        return Response(
            MembershipSerializer(result.data).data, status=status.HTTP_201_CREATED
        )

    @action(detail=False, methods=["post"])
    def join(self, request, conversation_pk=None):
        """Accept a pending invitation."""
        result = MembershipService.join_conversation(
            conversation_id=self._conversation_id(),
            user_id=request.user.id,
        )

        if not result.success:
            return service_error_response(result)

        return Response(MembershipSerializer(result.data).data)

    @action(detail=False, methods=["post"])
    def leave(self, request, conversation_pk=None):
        """Leave the conversation."""
        result = MembershipService.leave_conversation(
            conversation_id=self._conversation_id(),
            user_id=request.user.id,
        )

        if not result.success:
            return service_error_response(result)

        return Response(MembershipSerializer(result.data).data)

    @action(detail=False, methods=["post"])
    def kick(self, request, conversation_pk=None):
        """Remove a member."""
        serializer = MemberTargetSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = MembershipService.kick_user(
            conversation_id=self._conversation_id(),
            target_user_id=serializer.validated_data["user_id"],
            moderator_user_id=request.user.id,
        )

        if not result.success:
            return service_error_response(result)

        return Response(MembershipSerializer(result.data).data)

    @action(detail=False, methods=["post"], url_path="transfer-ownership")
    def transfer_ownership(self, request, conversation_pk=None):
        """Transfer ownership to another active member."""
        serializer = MemberTargetSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = MembershipService.transfer_ownership(
            conversation_id=self._conversation_id(),
            new_owner_id=serializer.validated_data["user_id"],
            current_owner_id=request.user.id,
        )

        if not result.success:
            return service_error_response(result)

        return Response(result.data)

    def partial_update(self, request, conversation_pk=None, user_id=None):
        """Change a member's role and capability flags."""
        serializer = MemberPermissionsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = MembershipService.update_member_permissions(
            conversation_id=self._conversation_id(),
            target_user_id=int(user_id),
            moderator_user_id=request.user.id,
            patch=serializer.validated_data,
        )

        if not result.success:
            return service_error_response(result)

        return Response(MembershipSerializer(result.data).data)

    @action(detail=False, methods=["post"], url_path="generate-invite-link")
    def generate_invite_link(self, request, conversation_pk=None):
        """Generate a shareable invite link."""
        result = InviteLinkService.generate_invite_link(
            conversation_id=self._conversation_id(),
            inviter_id=request.user.id,
            origin=request_origin(request),
        )

        if not result.success:
            return service_error_response(result)

        return Response({"link": result.data})


class JoinByTokenView(APIView):
    """
    Accept an invite link.

    The token identifies the conversation, so the URL carries no
    conversation id.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="join_by_token",
        summary="Join conversation via invite link",
        request=JoinByTokenSerializer,
        responses={200: MembershipSerializer},
        tags=["Chat - Members"],
    )
    def post(self, request):
        """Invite and join the caller using an invite link token."""
        serializer = JoinByTokenSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = InviteLinkService.accept_invite_by_token(
            token=serializer.validated_data["token"],
            user_id=request.user.id,
        )

        if not result.success:
            return service_error_response(result)

        return Response(MembershipSerializer(result.data).data)
