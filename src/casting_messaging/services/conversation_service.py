from __future__ import annotations

import dataclasses
import logging
import uuid
from datetime import datetime, timezone

from casting_messaging.application.dto.conversation import StartConversationDTO
from casting_messaging.application.dto.principal import Principal
from casting_messaging.application.exceptions import ConflictError, NotFoundError, ValidationError
from casting_messaging.application.policies.permissions import (
    assert_can_start_conversation,
    assert_can_use_inbox,
    assert_conversation_access,
)
from casting_messaging.application.uow import UnitOfWork
from casting_messaging.domain.entities.conversation import Conversation
from casting_messaging.domain.entities.conversation_summary import (
    ConversationSummary,
    ParticipantView,
)
from casting_messaging.domain.entities.message import Message
from casting_messaging.domain.entities.participant import Participant
from casting_messaging.domain.value_objects.enums import SLOTS_BY_TYPE, ConversationType

logger = logging.getLogger(__name__)

SUBJECT_MAX_LENGTH = 200


async def summarize(
    conversations: list[Conversation],
    uow: UnitOfWork,
    *,
    reader_id: int | None = None,
) -> list[ConversationSummary]:
    """Attach participants, the last message and the reader's unread count."""
    ids = [c.id for c in conversations]
    participants = await uow.participants.list_for_conversations(ids)
    users = await uow.users.get_many(
        [p.user_id for members in participants.values() for p in members]
    )
    last_messages = await uow.messages.get_many(
        [c.last_message_id for c in conversations if c.last_message_id is not None]
    )
    unread = await uow.messages.count_unread(ids, reader_id) if reader_id is not None else {}

    return [
        ConversationSummary(
            conversation=c,
            participants=[
                ParticipantView(user_id=p.user_id, slot=p.slot, user=users.get(p.user_id))
                for p in participants.get(c.id, [])
            ],
            last_message=last_messages.get(c.last_message_id) if c.last_message_id else None,
            unread_count=unread.get(c.id, 0),
        )
        for c in conversations
    ]


async def list_user_conversations(
    principal: Principal,
    page: int,
    limit: int,
    uow: UnitOfWork,
) -> list[ConversationSummary]:
    assert_can_use_inbox(principal)
    conversations = await uow.conversations.list_for_user(
        principal.user_id, offset=(page - 1) * limit, limit=limit,
    )
    return await summarize(conversations, uow, reader_id=principal.user_id)


async def start_conversation(
    principal: Principal,
    data: StartConversationDTO,
    uow: UnitOfWork,
) -> tuple[ConversationSummary, Message]:
    """Open a conversation with a recipient and post its first message.

    Casting directors open director-talent conversations, writers open
    writer-user ones. A pair may only have one conversation of a type.
    """
    # Role is checked before the fields: a role that may not start conversations
    # gets 403 even when the request is also incomplete.
    conversation_type = assert_can_start_conversation(principal)

    subject = data.subject.strip()
    content = data.initial_message.strip()
    if not subject or not content:
        raise ValidationError("Recipient, subject and initial message are required")
    if len(subject) > SUBJECT_MAX_LENGTH:
        raise ValidationError(f"Subject must be at most {SUBJECT_MAX_LENGTH} characters")
    if data.recipient_id == principal.user_id:
        raise ValidationError("You cannot start a conversation with yourself")

    recipient = await uow.users.get_by_id(data.recipient_id)
    if recipient is None:
        raise NotFoundError("Recipient not found")

    # One conversation per pair and type is enforced here only, not by a
    # constraint. Two concurrent starts for the same pair can both pass.
    existing = await uow.conversations.find_between(
        conversation_type,
        principal.user_id,
        recipient.id,
        either_direction=conversation_type == ConversationType.WRITER_USER,
    )
    if existing is not None:
        raise ConflictError("Conversation already exists", conversation_id=str(existing.id))

    now = datetime.now(timezone.utc)
    conversation = await uow.conversations_w.create(
        Conversation(
            id=uuid.uuid4(),
            conversation_type=conversation_type.value,
            subject=subject,
            casting_id=data.casting_id,
            last_message_id=None,
            last_message_at=None,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
    )

    starter_slot, recipient_slot = SLOTS_BY_TYPE[conversation_type]
    for user_id, slot in ((principal.user_id, starter_slot), (recipient.id, recipient_slot)):
        await uow.participants_w.add(
            Participant(
                conversation_id=conversation.id,
                user_id=user_id,
                slot=slot.value,
                joined_at=now,
            )
        )

    message = await uow.messages_w.create(
        Message(
            id=uuid.uuid4(),
            conversation_id=conversation.id,
            sender_id=principal.user_id,
            content=content,
            is_delivered=True,
            is_read=False,
            read_at=None,
            created_at=now,
        )
    )
    await uow.conversations_w.set_last_message(conversation.id, message.id, message.created_at)
    await uow.commit()

    logger.info(
        "Conversation %s (%s) started by user %s with user %s",
        conversation.id, conversation_type, principal.user_id, recipient.id,
    )
    conversation = dataclasses.replace(
        conversation, last_message_id=message.id, last_message_at=message.created_at,
    )
    [summary] = await summarize([conversation], uow, reader_id=principal.user_id)
    return summary, message


async def get_conversation(
    conversation_id: uuid.UUID,
    principal: Principal,
    uow: UnitOfWork,
) -> Conversation:
    conversation = await uow.conversations.get_by_id(conversation_id)
    return await assert_conversation_access(principal, conversation, uow.participants)


async def close_conversation(
    conversation_id: uuid.UUID,
    principal: Principal,
    uow: UnitOfWork,
) -> Conversation:
    conversation = await get_conversation(conversation_id, principal, uow)
    if not conversation.is_active:
        return conversation

    await uow.conversations_w.set_active(conversation_id, False)
    await uow.commit()
    logger.info("Conversation %s closed by user %s", conversation_id, principal.user_id)
    return dataclasses.replace(conversation, is_active=False)


async def delete_conversation(
    conversation_id: uuid.UUID,
    principal: Principal,
    uow: UnitOfWork,
) -> None:
    await get_conversation(conversation_id, principal, uow)
    await remove_conversation(conversation_id, uow)
    logger.info("Conversation %s deleted by user %s", conversation_id, principal.user_id)


async def remove_conversation(conversation_id: uuid.UUID, uow: UnitOfWork) -> int:
    """Delete a conversation and its messages. Return the number of messages removed."""
    removed = await uow.messages_w.delete_for_conversation(conversation_id)
    await uow.conversations_w.delete(conversation_id)
    await uow.commit()
    return removed
