from __future__ import annotations

from casting_messaging.domain.entities.conversation import Conversation
from casting_messaging.infrastructure.db.models.conversation import ConversationModel


def model_to_entity(model: ConversationModel) -> Conversation:
    return Conversation(
        id=model.id,
        conversation_type=model.conversation_type,
        subject=model.subject,
        casting_id=model.casting_id,
        last_message_id=model.last_message_id,
        last_message_at=model.last_message_at,
        is_active=model.is_active,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def entity_to_model(entity: Conversation) -> ConversationModel:
    return ConversationModel(
        id=entity.id,
        conversation_type=entity.conversation_type,
        subject=entity.subject,
        casting_id=entity.casting_id,
        last_message_id=entity.last_message_id,
        last_message_at=entity.last_message_at,
        is_active=entity.is_active,
        created_at=entity.created_at,
        updated_at=entity.updated_at,
    )
