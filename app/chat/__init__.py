"""
Chat app for conversation membership and permissions.

This app handles:
- Conversations with an owner, a capacity and an invite policy
- Membership lifecycle (invite, join, leave, kick, ownership transfer)
- Capability flags (write, invite, moderate) and their evaluation
- Access checks used by message and posting code

Related apps:
    - authentication: User model for members

Usage:
    from chat.services import ConversationService, MembershipService
    from chat.authorization import MembershipAccessService

    # Create conversation
    conversation = ConversationService.create_conversation(
        creator=user,
        title="Weekend",
        max_users=2,
    ).data

    # Invite and accept
    MembershipService.invite_user(conversation.id, friend.id, user.id)
    MembershipService.join_conversation(conversation.id, friend.id)

    # Gate a post
    if MembershipAccessService.can_write(conversation.id, friend.id):
        ...
"""
