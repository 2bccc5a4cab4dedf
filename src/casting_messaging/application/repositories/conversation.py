from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from casting_messaging.application.dto.conversation import ConversationFilterDTO
from casting_messaging.domain.entities.conversation import Conversation


class ConversationReader(Protocol):
    async def get_by_id(self, conversation_id: UUID) -> Conversation | None: ...

    async def find_between(
        self,
        conversation_type: str,
        first_user_id: int,
        second_user_id: int,
        *,
        either_direction: bool = False,
    ) -> Conversation | None:
        """Find a conversation of the type whose first and second slots hold the given users.

        With either_direction=True the slots may be swapped.
        """
        ...

    async def list_for_user(
        self, user_id: int, *, offset: int = 0, limit: int = 20
    ) -> list[Conversation]:
        """Active conversations the user takes part in, latest activity first."""
        ...

    async def list_active_ids_for_user(self, user_id: int) -> list[UUID]: ...

    async def list_for_admin(
        self, filters: ConversationFilterDTO
    ) -> list[Conversation]: ...

    async def count(self, *, is_active: bool | None = None) -> int: ...


class ConversationWriter(Protocol):
    async def create(self, conversation: Conversation) -> Conversation: ...

    async def set_last_message(
        self, conversation_id: UUID, message_id: UUID, ts: datetime
    ) -> None: ...

    async def set_active(self, conversation_id: UUID, is_active: bool) -> None: ...

    async def delete(self, conversation_id: UUID) -> None: ...
