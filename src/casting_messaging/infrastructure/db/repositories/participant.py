from __future__ import annotations

from collections import defaultdict
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from casting_messaging.domain.entities.participant import Participant
from casting_messaging.infrastructure.db.mappers import participant as mapper
from casting_messaging.infrastructure.db.models.participant import ParticipantModel


class ParticipantReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def is_participant(
        self,
        conversation_id: UUID,
        user_id: int,
    ) -> bool:
        stmt = (
            select(ParticipantModel.id)
            .where(
                ParticipantModel.conversation_id == conversation_id,
                ParticipantModel.user_id == user_id,
            )
            .limit(1)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def list_for_conversations(
        self,
        conversation_ids: list[UUID],
    ) -> dict[UUID, list[Participant]]:
        grouped: dict[UUID, list[Participant]] = defaultdict(list)
        if not conversation_ids:
            return grouped
        stmt = select(ParticipantModel).where(
            ParticipantModel.conversation_id.in_(conversation_ids)
        )
        result = await self._session.execute(stmt)
        for model in result.scalars().all():
            grouped[model.conversation_id].append(mapper.model_to_entity(model))
        return grouped


class ParticipantWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, participant: Participant) -> None:
        model = mapper.entity_to_model(participant)
        self._session.add(model)
        await self._session.flush()
