"""Seed development data: sample users, one director-talent and one writer-user conversation."""
from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy.dialects.postgresql import insert as pg_insert

from casting_messaging.domain.entities.conversation import Conversation
from casting_messaging.domain.entities.message import Message
from casting_messaging.domain.entities.participant import Participant
from casting_messaging.domain.value_objects.enums import (
    SLOTS_BY_TYPE,
    ConversationType,
    UserRole,
)
from casting_messaging.infrastructure.db.models.user import UserModel
from casting_messaging.infrastructure.db.session import AsyncSessionLocal
from casting_messaging.infrastructure.db.uow import SqlAlchemyUoW

logger = logging.getLogger(__name__)

USERS = [
    {"id": 1, "email": "admin@casting.local", "first_name": "Site", "last_name": "Admin", "role": UserRole.ADMIN},
    {"id": 2, "email": "director@casting.local", "first_name": "John", "last_name": "Director", "role": UserRole.CASTING_DIRECTOR},
    {"id": 3, "email": "talent@casting.local", "first_name": "Jane", "last_name": "Talent", "role": UserRole.TALENT},
    {"id": 4, "email": "writer@casting.local", "first_name": "Sara", "last_name": "Writer", "role": UserRole.JOURNALIST},
]

CONVERSATIONS = [
    (
        ConversationType.DIRECTOR_TALENT,
        "Callback for the lead role",
        (2, 3),
        [
            (2, "Hello Jane, we liked your audition tape."),
            (3, "Thank you! When is the callback?"),
            (2, "Thursday at 10am, studio B."),
        ],
    ),
    (
        ConversationType.WRITER_USER,
        "Interview request",
        (4, 2),
        [
            (4, "Hi John, could I interview you about your latest casting call?"),
        ],
    ),
]


async def seed() -> None:
    async with AsyncSessionLocal() as session:
        await session.execute(pg_insert(UserModel).values(USERS).on_conflict_do_nothing())
        async with SqlAlchemyUoW(session) as uow:
            now = datetime.now(timezone.utc)

            for conversation_type, subject, user_ids, lines in CONVERSATIONS:
                conv = await uow.conversations_w.create(
                    Conversation(
                        id=uuid.uuid4(),
                        conversation_type=conversation_type,
                        subject=subject,
                        casting_id=None,
                        last_message_id=None,
                        last_message_at=None,
                        is_active=True,
                        created_at=now,
                        updated_at=now,
                    )
                )
                for user_id, slot in zip(user_ids, SLOTS_BY_TYPE[conversation_type]):
                    await uow.participants_w.add(
                        Participant(conversation_id=conv.id, user_id=user_id, slot=slot, joined_at=now)
                    )

                last: Message | None = None
                for offset, (sender_id, content) in enumerate(lines):
                    last = await uow.messages_w.create(
                        Message(
                            id=uuid.uuid4(),
                            conversation_id=conv.id,
                            sender_id=sender_id,
                            content=content,
                            is_delivered=True,
                            is_read=False,
                            read_at=None,
                            created_at=now + timedelta(seconds=offset),
                        )
                    )
                if last is not None:
                    await uow.conversations_w.set_last_message(conv.id, last.id, last.created_at)
                logger.info("Seeded %s conversation %s with %d messages", conversation_type, conv.id, len(lines))

            await uow.commit()


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed())


if __name__ == "__main__":
    main()
