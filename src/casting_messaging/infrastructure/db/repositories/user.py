from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from casting_messaging.domain.entities.user import User
from casting_messaging.infrastructure.db.mappers import user as mapper
from casting_messaging.infrastructure.db.models.user import UserModel


class UserReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, user_id: int) -> User | None:
        result = await self._session.get(UserModel, user_id)
        return mapper.model_to_entity(result) if result else None

    async def get_many(self, user_ids: list[int]) -> dict[int, User]:
        if not user_ids:
            return {}
        stmt = select(UserModel).where(UserModel.id.in_(set(user_ids)))
        result = await self._session.execute(stmt)
        return {m.id: mapper.model_to_entity(m) for m in result.scalars().all()}
