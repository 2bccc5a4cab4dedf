from __future__ import annotations

from types import TracebackType
from typing import Self

from sqlalchemy.ext.asyncio import AsyncSession

from casting_messaging.infrastructure.db.repositories.conversation import (
    ConversationReaderRepo,
    ConversationWriterRepo,
)
from casting_messaging.infrastructure.db.repositories.message import (
    MessageReaderRepo,
    MessageWriterRepo,
)
from casting_messaging.infrastructure.db.repositories.participant import (
    ParticipantReaderRepo,
    ParticipantWriterRepo,
)
from casting_messaging.infrastructure.db.repositories.user import UserReaderRepo


class SqlAlchemyUoW:
    """Concrete Unit-of-Work backed by a single AsyncSession."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self.users = UserReaderRepo(session)
        self.conversations = ConversationReaderRepo(session)
        self.conversations_w = ConversationWriterRepo(session)
        self.participants = ParticipantReaderRepo(session)
        self.participants_w = ParticipantWriterRepo(session)
        self.messages = MessageReaderRepo(session)
        self.messages_w = MessageWriterRepo(session)

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            await self.rollback()
