from __future__ import annotations

from casting_messaging.application.dto.principal import Principal
from casting_messaging.application.exceptions import ForbiddenError, NotFoundError
from casting_messaging.application.repositories.participant import ParticipantReader
from casting_messaging.domain.entities.conversation import Conversation
from casting_messaging.domain.value_objects.enums import CONVERSATION_TYPE_BY_ROLE, ConversationType


async def assert_conversation_access(
    principal: Principal,
    conversation: Conversation | None,
    participants: ParticipantReader,
) -> Conversation:
    """Raise if conversation doesn't exist or principal is not one of its participants."""
    if conversation is None:
        raise NotFoundError("Conversation not found")

    is_member = await participants.is_participant(conversation.id, principal.user_id)
    if not is_member:
        raise ForbiddenError("Access denied")

    return conversation


def assert_can_use_inbox(principal: Principal) -> None:
    # Admins moderate through the admin routes and have no inbox of their own.
    if principal.is_admin:
        raise ForbiddenError("Access denied")


def assert_can_start_conversation(principal: Principal) -> ConversationType:
    conversation_type = CONVERSATION_TYPE_BY_ROLE.get(principal.role)
    if conversation_type is None:
        raise ForbiddenError("Only casting directors and writers can start conversations")
    return conversation_type


def assert_admin(principal: Principal) -> None:
    if not principal.is_admin:
        raise ForbiddenError("Admin access required")
