from __future__ import annotations

from casting_messaging.domain.entities.message import Message
from casting_messaging.infrastructure.db.models.message import MessageModel


def model_to_entity(model: MessageModel) -> Message:
    return Message(
        id=model.id,
        conversation_id=model.conversation_id,
        sender_id=model.sender_id,
        content=model.content,
        is_delivered=model.is_delivered,
        is_read=model.is_read,
        read_at=model.read_at,
        created_at=model.created_at,
    )


def entity_to_model(entity: Message) -> MessageModel:
    return MessageModel(
        id=entity.id,
        conversation_id=entity.conversation_id,
        sender_id=entity.sender_id,
        content=entity.content,
        is_delivered=entity.is_delivered,
        is_read=entity.is_read,
        read_at=entity.read_at,
        created_at=entity.created_at,
    )
