"""
Serializers for authentication models.

UserSummarySerializer is the read-only projection of a user that is
embedded in conversation and membership responses.
"""

from rest_framework import serializers

from authentication.models import User


class UserSummarySerializer(serializers.ModelSerializer):
    """
    Public, read-only view of a user.

    Carries only the denormalized display fields other conversation
    members are allowed to see (no email address).
    """

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "display_name",
            "avatar_url",
            "preferred_language",
        ]
        read_only_fields = fields
