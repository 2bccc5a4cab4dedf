from __future__ import annotations

from casting_messaging.domain.entities.participant import Participant
from casting_messaging.infrastructure.db.models.participant import ParticipantModel


def model_to_entity(model: ParticipantModel) -> Participant:
    return Participant(
        conversation_id=model.conversation_id,
        user_id=model.user_id,
        slot=model.slot,
        joined_at=model.joined_at,
    )


def entity_to_model(entity: Participant) -> ParticipantModel:
    return ParticipantModel(
        conversation_id=entity.conversation_id,
        user_id=entity.user_id,
        slot=entity.slot,
        joined_at=entity.joined_at,
    )
