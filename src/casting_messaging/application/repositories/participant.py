from __future__ import annotations

from typing import Protocol
from uuid import UUID

from casting_messaging.domain.entities.participant import Participant


class ParticipantReader(Protocol):
    async def is_participant(
        self,
        conversation_id: UUID,
        user_id: int,
    ) -> bool: ...

    async def list_for_conversations(
        self, conversation_ids: list[UUID]
    ) -> dict[UUID, list[Participant]]: ...


class ParticipantWriter(Protocol):
    async def add(self, participant: Participant) -> None: ...
