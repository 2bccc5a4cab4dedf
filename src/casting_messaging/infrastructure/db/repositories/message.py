from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from casting_messaging.domain.entities.message import Message
from casting_messaging.infrastructure.db.mappers import message as mapper
from casting_messaging.infrastructure.db.models.message import MessageModel


class MessageReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_page(
        self,
        conversation_id: UUID,
        *,
        offset: int = 0,
        limit: int = 50,
    ) -> list[Message]:
        stmt = (
            select(MessageModel)
            .where(MessageModel.conversation_id == conversation_id)
            .order_by(MessageModel.created_at.desc(), MessageModel.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def get_many(self, message_ids: list[UUID]) -> dict[UUID, Message]:
        if not message_ids:
            return {}
        stmt = select(MessageModel).where(MessageModel.id.in_(message_ids))
        result = await self._session.execute(stmt)
        return {m.id: mapper.model_to_entity(m) for m in result.scalars().all()}

    async def count_unread(
        self,
        conversation_ids: list[UUID],
        reader_id: int,
    ) -> dict[UUID, int]:
        if not conversation_ids:
            return {}
        stmt = (
            select(MessageModel.conversation_id, func.count())
            .where(
                MessageModel.conversation_id.in_(conversation_ids),
                MessageModel.sender_id != reader_id,
                MessageModel.is_read.is_(False),
            )
            .group_by(MessageModel.conversation_id)
        )
        result = await self._session.execute(stmt)
        return {conversation_id: count for conversation_id, count in result.all()}

    async def count(self, *, unread_only: bool = False) -> int:
        stmt = select(func.count()).select_from(MessageModel)
        if unread_only:
            stmt = stmt.where(MessageModel.is_read.is_(False))
        result = await self._session.execute(stmt)
        return result.scalar_one()


class MessageWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, message: Message) -> Message:
        model = mapper.entity_to_model(message)
        self._session.add(model)
        await self._session.flush()
        return mapper.model_to_entity(model)

    async def mark_read(self, message_ids: list[UUID], read_at: datetime) -> int:
        if not message_ids:
            return 0
        stmt = (
            update(MessageModel)
            .where(
                MessageModel.id.in_(message_ids),
                MessageModel.is_read.is_(False),
            )
            .values(is_read=True, read_at=read_at)
        )
        result = await self._session.execute(stmt)
        return result.rowcount

    async def mark_conversation_read(
        self,
        conversation_id: UUID,
        reader_id: int,
        read_at: datetime,
    ) -> int:
        stmt = (
            update(MessageModel)
            .where(
                MessageModel.conversation_id == conversation_id,
                MessageModel.sender_id != reader_id,
                MessageModel.is_read.is_(False),
            )
            .values(is_read=True, read_at=read_at)
        )
        result = await self._session.execute(stmt)
        return result.rowcount

    async def delete_for_conversation(self, conversation_id: UUID) -> int:
        result = await self._session.execute(
            delete(MessageModel).where(MessageModel.conversation_id == conversation_id)
        )
        return result.rowcount
