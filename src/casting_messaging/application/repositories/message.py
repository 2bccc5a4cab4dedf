from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from casting_messaging.domain.entities.message import Message


class MessageReader(Protocol):
    async def list_page(
        self,
        conversation_id: UUID,
        *,
        offset: int = 0,
        limit: int = 50,
    ) -> list[Message]:
        """One page of the thread, newest first."""
        ...

    async def get_many(self, message_ids: list[UUID]) -> dict[UUID, Message]: ...

    async def count_unread(
        self, conversation_ids: list[UUID], reader_id: int
    ) -> dict[UUID, int]:
        """Unread messages per conversation, not counting the reader's own."""
        ...

    async def count(self, *, unread_only: bool = False) -> int: ...


class MessageWriter(Protocol):
    async def create(self, message: Message) -> Message: ...

    async def mark_read(
        self, message_ids: list[UUID], read_at: datetime
    ) -> int: ...

    async def mark_conversation_read(
        self, conversation_id: UUID, reader_id: int, read_at: datetime
    ) -> int:
        """Mark every unread message not sent by reader_id as read. Return the number updated."""
        ...

    async def delete_for_conversation(self, conversation_id: UUID) -> int: ...
