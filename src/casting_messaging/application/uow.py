from __future__ import annotations

from typing import Protocol

from casting_messaging.application.repositories.conversation import (
    ConversationReader,
    ConversationWriter,
)
from casting_messaging.application.repositories.message import MessageReader, MessageWriter
from casting_messaging.application.repositories.participant import (
    ParticipantReader,
    ParticipantWriter,
)
from casting_messaging.application.repositories.user import UserReader


class UnitOfWork(Protocol):
    users: UserReader
    conversations: ConversationReader
    conversations_w: ConversationWriter
    participants: ParticipantReader
    participants_w: ParticipantWriter
    messages: MessageReader
    messages_w: MessageWriter

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
