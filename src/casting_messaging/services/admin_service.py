from __future__ import annotations

import logging
import uuid

from casting_messaging.application.dto.conversation import ConversationFilterDTO, MessagingStatsDTO
from casting_messaging.application.dto.principal import Principal
from casting_messaging.application.exceptions import NotFoundError
from casting_messaging.application.policies.permissions import assert_admin
from casting_messaging.application.uow import UnitOfWork
from casting_messaging.domain.entities.conversation import Conversation
from casting_messaging.domain.entities.conversation_summary import ConversationSummary
from casting_messaging.domain.entities.message import Message
from casting_messaging.services.conversation_service import remove_conversation, summarize

logger = logging.getLogger(__name__)


async def list_conversations(
    filters: ConversationFilterDTO,
    uow: UnitOfWork,
) -> list[ConversationSummary]:
    conversations = await uow.conversations.list_for_admin(filters)
    return await summarize(conversations, uow)


async def get_conversation(
    conversation_id: uuid.UUID,
    uow: UnitOfWork,
) -> Conversation:
    conversation = await uow.conversations.get_by_id(conversation_id)
    if conversation is None:
        raise NotFoundError("Conversation not found")
    return conversation


async def delete_conversation(
    conversation_id: uuid.UUID,
    principal: Principal,
    uow: UnitOfWork,
) -> int:
    assert_admin(principal)
    await get_conversation(conversation_id, uow)
    removed = await remove_conversation(conversation_id, uow)
    logger.info(
        "Conversation %s (%d messages) deleted by admin %s",
        conversation_id, removed, principal.user_id,
    )
    return removed


async def stats(uow: UnitOfWork) -> MessagingStatsDTO:
    return MessagingStatsDTO(
        conversations=await uow.conversations.count(),
        active_conversations=await uow.conversations.count(is_active=True),
        messages=await uow.messages.count(),
        unread_messages=await uow.messages.count(unread_only=True),
    )


async def get_thread(
    conversation_id: uuid.UUID,
    page: int,
    limit: int,
    uow: UnitOfWork,
) -> tuple[ConversationSummary, list[Message], bool]:
    """Thread page for moderation. Read flags are left untouched."""
    conversation = await get_conversation(conversation_id, uow)
    newest_first = await uow.messages.list_page(
        conversation_id, offset=(page - 1) * limit, limit=limit,
    )
    [summary] = await summarize([conversation], uow)
    return summary, list(reversed(newest_first)), len(newest_first) == limit
