from __future__ import annotations

from dataclasses import dataclass

from casting_messaging.domain.value_objects.enums import ConversationType


@dataclass(frozen=True, slots=True)
class ConversationFilterDTO:
    conversation_type: ConversationType | None = None
    is_active: bool | None = None
    page: int = 1
    limit: int = 20

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True, slots=True)
class StartConversationDTO:
    recipient_id: int
    subject: str
    initial_message: str
    casting_id: int | None = None


@dataclass(frozen=True, slots=True)
class MessagingStatsDTO:
    conversations: int
    active_conversations: int
    messages: int
    unread_messages: int
