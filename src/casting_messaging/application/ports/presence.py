from __future__ import annotations

from typing import Protocol
from uuid import UUID


class TypingPresence(Protocol):
    async def set_typing(
        self, conversation_id: UUID, user_id: int, is_typing: bool
    ) -> None: ...

    async def typing_users(self, conversation_id: UUID) -> list[int]: ...
