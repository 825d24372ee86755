"""
URL configuration for chat API.

URL Structure:
    Conversations:
        /conversations/                                   POST
        /conversations/{id}/                              GET, PATCH
        /conversations/{id}/membership/                   GET, PATCH

    Members:
        /conversations/{id}/members/                      GET
        /conversations/{id}/members/invite/               POST
        /conversations/{id}/members/join/                 POST
        /conversations/{id}/members/leave/                POST
        /conversations/{id}/members/kick/                 POST
        /conversations/{id}/members/transfer-ownership/   POST
        /conversations/{id}/members/generate-invite-link/ POST
        /conversations/{id}/members/{user_id}/            PATCH

    Invite links:
        /conversations/members/join-by-token/             POST

All URLs are prefixed with /api/v1/chat/ in the main URL configuration.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from chat.views import ConversationViewSet, JoinByTokenView, MembershipViewSet

router = DefaultRouter()
router.register(r"conversations", ConversationViewSet, basename="conversation")

app_name = "chat"

member_actions = [
    ("invite", "invite"),
    ("join", "join"),
    ("leave", "leave"),
    ("kick", "kick"),
    ("transfer-ownership", "transfer_ownership"),
    ("generate-invite-link", "generate_invite_link"),
]

urlpatterns = [
    # Registered before the router so "members" is not taken as a conversation pk
    path(
        "conversations/members/join-by-token/",
        JoinByTokenView.as_view(),
        name="join-by-token",
    ),
    path("", include(router.urls)),
    path(
        "conversations/<int:conversation_pk>/members/",
        MembershipViewSet.as_view({"get": "list"}),
        name="conversation-member-list",
    ),
    *[
        path(
            f"conversations/<int:conversation_pk>/members/{url_path}/",
            MembershipViewSet.as_view({"post": method}),
            name=f"conversation-member-{url_path}",
        )
        for url_path, method in member_actions
    ],
    path(
        "conversations/<int:conversation_pk>/members/<int:user_id>/",
        MembershipViewSet.as_view({"patch": "partial_update"}),
        name="conversation-member-detail",
    ),
]
