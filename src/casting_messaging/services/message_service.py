from __future__ import annotations

import dataclasses
import logging
import uuid
from datetime import datetime, timezone

from casting_messaging.application.dto.principal import Principal
from casting_messaging.application.exceptions import ConflictError, ValidationError
from casting_messaging.application.policies.permissions import assert_conversation_access
from casting_messaging.application.uow import UnitOfWork
from casting_messaging.domain.entities.conversation_summary import ConversationSummary
from casting_messaging.domain.entities.message import Message
from casting_messaging.services.conversation_service import summarize

logger = logging.getLogger(__name__)


async def send_message(
    conversation_id: uuid.UUID,
    principal: Principal,
    content: str,
    uow: UnitOfWork,
) -> Message:
    """Post a message and move the conversation's last-message snapshot to it."""
    content = content.strip()
    if not content:
        raise ValidationError("Message content is required")

    conversation = await uow.conversations.get_by_id(conversation_id)
    conversation = await assert_conversation_access(principal, conversation, uow.participants)
    if not conversation.is_active:
        raise ConflictError("Conversation is closed")

    msg = await uow.messages_w.create(
        Message(
            id=uuid.uuid4(),
            conversation_id=conversation_id,
            sender_id=principal.user_id,
            content=content,
            is_delivered=True,
            is_read=False,
            read_at=None,
            created_at=datetime.now(timezone.utc),
        )
    )
    await uow.conversations_w.set_last_message(conversation_id, msg.id, msg.created_at)
    await uow.commit()
    logger.debug("Message %s posted to conversation %s", msg.id, conversation_id)
    return msg


async def open_thread(
    conversation_id: uuid.UUID,
    principal: Principal,
    page: int,
    limit: int,
    uow: UnitOfWork,
) -> tuple[ConversationSummary, list[Message], bool]:
    """Return one page of the thread in chronological order.

    Messages on the page that the other party sent and the caller has not
    read yet are marked read. Returns (summary, messages, has_more).
    """
    conversation = await uow.conversations.get_by_id(conversation_id)
    conversation = await assert_conversation_access(principal, conversation, uow.participants)

    newest_first = await uow.messages.list_page(
        conversation_id, offset=(page - 1) * limit, limit=limit,
    )
    unread_ids = [
        m.id for m in newest_first
        if not m.is_read and m.sender_id != principal.user_id
    ]
    if unread_ids:
        now = datetime.now(timezone.utc)
        await uow.messages_w.mark_read(unread_ids, now)
        await uow.commit()
        marked = set(unread_ids)
        newest_first = [
            dataclasses.replace(m, is_read=True, read_at=now) if m.id in marked else m
            for m in newest_first
        ]

    [summary] = await summarize([conversation], uow, reader_id=principal.user_id)
    return summary, list(reversed(newest_first)), len(newest_first) == limit

