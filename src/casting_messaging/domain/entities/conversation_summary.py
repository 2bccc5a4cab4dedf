from __future__ import annotations

from dataclasses import dataclass, field

from casting_messaging.domain.entities.conversation import Conversation
from casting_messaging.domain.entities.message import Message
from casting_messaging.domain.entities.user import User


@dataclass(frozen=True, slots=True)
class ParticipantView:
    user_id: int
    slot: str
    user: User | None = None


@dataclass(frozen=True, slots=True)
class ConversationSummary:
    """Conversation as seen by one participant: who is in it, last message, unread count."""

    conversation: Conversation
    participants: list[ParticipantView] = field(default_factory=list)
    last_message: Message | None = None
    unread_count: int = 0
