"""
OpenAPI schema customizations for drf-spectacular.

This module provides a hook to customize the generated OpenAPI schema:
natural language summaries for the SimpleJWT token endpoints and tag
descriptions for ReDoc/Swagger UI.

Tag naming follows the pattern: [App Name] - [Group Name]
Examples:
- Auth (token issue and refresh)
- Chat - Conversations (create, details, settings)
- Chat - Members (membership lifecycle and permissions)
"""

# Natural language summaries for SimpleJWT endpoints
# Maps operation_id to (summary, description)
TOKEN_SUMMARIES = {
    "auth_token_create": (
        "Obtain tokens",
        "Authenticate with email and password to receive an access and refresh token pair.",
    ),
    "auth_token_refresh_create": (
        "Refresh access token",
        "Get a new access token using a valid refresh token.",
    ),
}


def group_api_endpoints(result, generator, request, public):
    """
    Postprocessing hook to group API endpoints by function.

    Auth groups:
        - Auth: token operations (obtain, refresh)

    Chat groups (set via tags= in @extend_schema, descriptions added here):
        - Chat - Conversations: creation, details, owner settings
        - Chat - Members: invite, join, leave, kick, ownership transfer,
          permission updates, invite links, own membership settings

    Also adds natural language summaries to SimpleJWT endpoints.
    """
    paths = result.get("paths", {})

    for path, methods in paths.items():
        for method, operation in methods.items():
            if not isinstance(operation, dict):
                continue

            operation_id = operation.get("operationId", "")

            if operation_id in TOKEN_SUMMARIES:
                summary, description = TOKEN_SUMMARIES[operation_id]
                operation["summary"] = summary
                operation["description"] = description

            if operation_id.startswith("auth_"):
                operation["tags"] = ["Auth"]

    result["tags"] = [
        {
            "name": "Auth",
            "description": "JWT token issue and refresh.",
        },
        {
            "name": "Chat - Conversations",
            "description": "Conversation creation, details, and owner-only settings (title, capacity, invite policy).",
        },
        {
            "name": "Chat - Members",
            "description": "Membership lifecycle: invitations, joins, departures, kicks, ownership transfer, permission changes and invite links.",
        },
    ]

    return result
