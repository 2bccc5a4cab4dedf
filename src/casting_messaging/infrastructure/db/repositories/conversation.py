from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import Select, and_, delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from casting_messaging.application.dto.conversation import ConversationFilterDTO
from casting_messaging.domain.entities.conversation import Conversation
from casting_messaging.domain.value_objects.enums import SLOTS_BY_TYPE, ConversationType
from casting_messaging.infrastructure.db.mappers import conversation as mapper
from casting_messaging.infrastructure.db.models.conversation import ConversationModel
from casting_messaging.infrastructure.db.models.participant import ParticipantModel


class ConversationReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, conversation_id: UUID) -> Conversation | None:
        result = await self._session.get(ConversationModel, conversation_id)
        return mapper.model_to_entity(result) if result else None

    async def find_between(
        self,
        conversation_type: str,
        first_user_id: int,
        second_user_id: int,
        *,
        either_direction: bool = False,
    ) -> Conversation | None:
        first_slot, second_slot = SLOTS_BY_TYPE[ConversationType(conversation_type)]
        first = aliased(ParticipantModel)
        second = aliased(ParticipantModel)

        pair = and_(first.user_id == first_user_id, second.user_id == second_user_id)
        if either_direction:
            pair = or_(
                pair,
                and_(first.user_id == second_user_id, second.user_id == first_user_id),
            )

        stmt = (
            select(ConversationModel)
            .join(first, first.conversation_id == ConversationModel.id)
            .join(second, second.conversation_id == ConversationModel.id)
            .where(
                ConversationModel.conversation_type == conversation_type,
                first.slot == first_slot,
                second.slot == second_slot,
                pair,
            )
            .order_by(ConversationModel.created_at.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    def _user_active_stmt(self, user_id: int, *columns: Any) -> Select[Any]:
        return (
            select(*(columns or (ConversationModel,)))
            .join(
                ParticipantModel,
                ParticipantModel.conversation_id == ConversationModel.id,
            )
            .where(
                ParticipantModel.user_id == user_id,
                ConversationModel.is_active.is_(True),
            )
        )

    async def list_for_user(
        self,
        user_id: int,
        *,
        offset: int = 0,
        limit: int = 20,
    ) -> list[Conversation]:
        stmt = (
            self._user_active_stmt(user_id)
            .order_by(ConversationModel.last_message_at.desc().nullslast(), ConversationModel.id)
            .offset(offset)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def list_active_ids_for_user(self, user_id: int) -> list[UUID]:
        stmt = self._user_active_stmt(user_id, ConversationModel.id)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_admin(
        self,
        filters: ConversationFilterDTO,
    ) -> list[Conversation]:
        stmt = select(ConversationModel)
        if filters.conversation_type:
            stmt = stmt.where(ConversationModel.conversation_type == filters.conversation_type.value)
        if filters.is_active is not None:
            stmt = stmt.where(ConversationModel.is_active.is_(filters.is_active))
        stmt = (
            stmt.order_by(
                ConversationModel.last_message_at.desc().nullslast(),
                ConversationModel.id,
            )
            .offset(filters.offset)
            .limit(filters.limit)
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def count(self, *, is_active: bool | None = None) -> int:
        stmt = select(func.count()).select_from(ConversationModel)
        if is_active is not None:
            stmt = stmt.where(ConversationModel.is_active.is_(is_active))
        result = await self._session.execute(stmt)
        return result.scalar_one()


class ConversationWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, conversation: Conversation) -> Conversation:
        model = mapper.entity_to_model(conversation)
        self._session.add(model)
        await self._session.flush()
        return mapper.model_to_entity(model)

    async def set_last_message(
        self,
        conversation_id: UUID,
        message_id: UUID,
        ts: datetime,
    ) -> None:
        stmt = (
            update(ConversationModel)
            .where(ConversationModel.id == conversation_id)
            .values(last_message_id=message_id, last_message_at=ts)
        )
        await self._session.execute(stmt)

    async def set_active(self, conversation_id: UUID, is_active: bool) -> None:
        stmt = (
            update(ConversationModel)
            .where(ConversationModel.id == conversation_id)
            .values(is_active=is_active)
        )
        await self._session.execute(stmt)

    async def delete(self, conversation_id: UUID) -> None:
        await self._session.execute(
            delete(ConversationModel).where(ConversationModel.id == conversation_id)
        )
