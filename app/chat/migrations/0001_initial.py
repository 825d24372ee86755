"""
Initial schema for conversation membership.

Models created:
    - Conversation: owner, capacity (max_users 1..4) and invite policy
    - Membership: role, activation state and capability flags, unique per
      (conversation, user)
"""

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Conversation",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "title",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Conversation title",
                        max_length=200,
                    ),
                ),
                (
                    "max_users",
                    models.PositiveSmallIntegerField(
                        default=1,
                        help_text="Maximum number of concurrently active members",
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(4),
                        ],
                    ),
                ),
                (
                    "allow_user_invites",
                    models.BooleanField(
                        default=False,
                        help_text="Whether newly invited members may invite others",
                    ),
                ),
                (
                    "owner",
                    models.ForeignKey(
                        help_text="User holding the OWNER membership",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="owned_conversations",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "chat_conversation",
                "ordering": ["-updated_at"],
            },
        ),
        migrations.CreateModel(
            name="Membership",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "role",
                    models.CharField(
                        choices=[
                            ("owner", "Owner"),
                            ("moderator", "Moderator"),
                            ("member", "Member"),
                        ],
                        default="member",
                        help_text="Role in the conversation",
                        max_length=10,
                    ),
                ),
                (
                    "is_active",
                    models.BooleanField(
                        default=False,
                        help_text="Whether the user currently participates",
                    ),
                ),
                (
                    "can_write",
                    models.BooleanField(default=True, help_text="May post messages"),
                ),
                (
                    "can_invite",
                    models.BooleanField(default=False, help_text="May invite users"),
                ),
                (
                    "can_moderate",
                    models.BooleanField(default=False, help_text="May kick members"),
                ),
                (
                    "joined_at",
                    models.DateTimeField(
                        blank=True,
                        help_text="When the user first became active",
                        null=True,
                    ),
                ),
                (
                    "auto_translate_enabled",
                    models.BooleanField(
                        default=False,
                        help_text="Translate incoming messages to the member's language",
                    ),
                ),
                (
                    "conversation",
                    models.ForeignKey(
                        help_text="Conversation this membership belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="memberships",
                        to="chat.conversation",
                    ),
                ),
                (
                    "invited_by",
                    models.ForeignKey(
                        blank=True,
                        help_text="User who last invited this member",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="sent_invitations",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        help_text="Member",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="conversation_memberships",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "chat_membership",
                "ordering": ["joined_at"],
                "indexes": [
                    models.Index(
                        fields=["conversation", "is_active"],
                        name="chat_member_conv_active_idx",
                    ),
                    models.Index(
                        fields=["user", "is_active"],
                        name="chat_member_user_active_idx",
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("conversation", "user"),
                        name="unique_conversation_membership",
                    ),
                ],
            },
        ),
    ]
