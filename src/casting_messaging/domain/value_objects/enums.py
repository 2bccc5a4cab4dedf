from __future__ import annotations

from enum import StrEnum


class UserRole(StrEnum):
    TALENT = "talent"
    CASTING_DIRECTOR = "casting_director"
    JOURNALIST = "journalist"
    ADMIN = "admin"


class ConversationType(StrEnum):
    DIRECTOR_TALENT = "director_talent"
    WRITER_USER = "writer_user"


class ParticipantSlot(StrEnum):
    DIRECTOR = "director"
    TALENT = "talent"
    INITIATOR = "initiator"
    RECIPIENT = "recipient"


# Roles allowed to open a new conversation, and the kind they open.
CONVERSATION_TYPE_BY_ROLE: dict[UserRole, ConversationType] = {
    UserRole.CASTING_DIRECTOR: ConversationType.DIRECTOR_TALENT,
    UserRole.JOURNALIST: ConversationType.WRITER_USER,
}

SLOTS_BY_TYPE: dict[ConversationType, tuple[ParticipantSlot, ParticipantSlot]] = {
    ConversationType.DIRECTOR_TALENT: (ParticipantSlot.DIRECTOR, ParticipantSlot.TALENT),
    ConversationType.WRITER_USER: (ParticipantSlot.INITIATOR, ParticipantSlot.RECIPIENT),
}
