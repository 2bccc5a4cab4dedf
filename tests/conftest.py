"""Shared test fixtures."""
from __future__ import annotations

import dataclasses
import uuid
from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from uuid import UUID

import pytest

from casting_messaging.application.dto.conversation import ConversationFilterDTO
from casting_messaging.application.dto.principal import Principal
from casting_messaging.domain.entities.conversation import Conversation
from casting_messaging.domain.entities.message import Message
from casting_messaging.domain.entities.participant import Participant
from casting_messaging.domain.entities.user import User
from casting_messaging.domain.value_objects.enums import (
    SLOTS_BY_TYPE,
    ConversationType,
    UserRole,
)

ADMIN_ID = 1
DIRECTOR_ID = 2
TALENT_ID = 3
WRITER_ID = 4
OTHER_TALENT_ID = 5

USERS = {
    ADMIN_ID: User(ADMIN_ID, "admin@example.com", "Site", "Admin", UserRole.ADMIN),
    DIRECTOR_ID: User(DIRECTOR_ID, "director@example.com", "John", "Director", UserRole.CASTING_DIRECTOR),
    TALENT_ID: User(TALENT_ID, "talent@example.com", "Jane", "Talent", UserRole.TALENT),
    WRITER_ID: User(WRITER_ID, "writer@example.com", "Sara", "Writer", UserRole.JOURNALIST),
    OTHER_TALENT_ID: User(OTHER_TALENT_ID, "other@example.com", "Ali", "Actor", UserRole.TALENT),
}


def principal_for(user_id: int) -> Principal:
    user = USERS[user_id]
    return Principal(user_id=user.id, role=UserRole(user.role), email=user.email)


@pytest.fixture
def admin_principal() -> Principal:
    return principal_for(ADMIN_ID)


@pytest.fixture
def director_principal() -> Principal:
    return principal_for(DIRECTOR_ID)


@pytest.fixture
def talent_principal() -> Principal:
    return principal_for(TALENT_ID)


@pytest.fixture
def writer_principal() -> Principal:
    return principal_for(WRITER_ID)


def make_conversation(
    *,
    conversation_id: UUID | None = None,
    conversation_type: str = ConversationType.DIRECTOR_TALENT,
    is_active: bool = True,
    last_message_at: datetime | None = None,
) -> Conversation:
    now = datetime.now(timezone.utc)
    return Conversation(
        id=conversation_id or uuid.uuid4(),
        conversation_type=conversation_type,
        subject="Audition",
        casting_id=None,
        last_message_id=None,
        last_message_at=last_message_at,
        is_active=is_active,
        created_at=now,
        updated_at=now,
    )


def make_message(
    *,
    conversation_id: UUID | None = None,
    sender_id: int = DIRECTOR_ID,
    content: str = "hello",
    is_read: bool = False,
    created_at: datetime | None = None,
) -> Message:
    return Message(
        id=uuid.uuid4(),
        conversation_id=conversation_id or uuid.uuid4(),
        sender_id=sender_id,
        content=content,
        is_delivered=True,
        is_read=is_read,
        read_at=None,
        created_at=created_at or datetime.now(timezone.utc),
    )


@dataclass
class FakeUserReader:
    _users: dict[int, User] = field(default_factory=lambda: dict(USERS))

    async def get_by_id(self, user_id: int) -> User | None:
        return self._users.get(user_id)

    async def get_many(self, user_ids: list[int]) -> dict[int, User]:
        return {uid: self._users[uid] for uid in user_ids if uid in self._users}


@dataclass
class FakeParticipantReader:
    _participants: list[Participant] = field(default_factory=list)

    async def is_participant(self, conversation_id: UUID, user_id: int) -> bool:
        return any(
            p.conversation_id == conversation_id and p.user_id == user_id
            for p in self._participants
        )

    async def list_for_conversations(self, conversation_ids: list[UUID]) -> dict[UUID, list[Participant]]:
        grouped: dict[UUID, list[Participant]] = defaultdict(list)
        for p in self._participants:
            if p.conversation_id in conversation_ids:
                grouped[p.conversation_id].append(p)
        return grouped


@dataclass
class FakeParticipantWriter:
    _reader: FakeParticipantReader

    async def add(self, participant: Participant) -> None:
        self._reader._participants.append(participant)


@dataclass
class FakeMessageReader:
    _messages: list[Message] = field(default_factory=list)

    async def list_page(self, conversation_id: UUID, *, offset: int = 0, limit: int = 50) -> list[Message]:
        thread = sorted(
            (m for m in self._messages if m.conversation_id == conversation_id),
            key=lambda m: m.created_at,
            reverse=True,
        )
        return thread[offset:offset + limit]

    async def get_many(self, message_ids: list[UUID]) -> dict[UUID, Message]:
        return {m.id: m for m in self._messages if m.id in message_ids}

    async def count_unread(self, conversation_ids: list[UUID], reader_id: int) -> dict[UUID, int]:
        counts: dict[UUID, int] = defaultdict(int)
        for m in self._messages:
            if m.conversation_id in conversation_ids and m.sender_id != reader_id and not m.is_read:
                counts[m.conversation_id] += 1
        return dict(counts)

    async def count(self, *, unread_only: bool = False) -> int:
        return sum(1 for m in self._messages if not (unread_only and m.is_read))


@dataclass
class FakeMessageWriter:
    _reader: FakeMessageReader

    async def create(self, message: Message) -> Message:
        self._reader._messages.append(message)
        return message

    def _mark(self, predicate, read_at: datetime) -> int:
        updated = 0
        for i, m in enumerate(self._reader._messages):
            if not m.is_read and predicate(m):
                self._reader._messages[i] = dataclasses.replace(m, is_read=True, read_at=read_at)
                updated += 1
        return updated

    async def mark_read(self, message_ids: list[UUID], read_at: datetime) -> int:
        return self._mark(lambda m: m.id in message_ids, read_at)

    async def mark_conversation_read(self, conversation_id: UUID, reader_id: int, read_at: datetime) -> int:
        return self._mark(
            lambda m: m.conversation_id == conversation_id and m.sender_id != reader_id,
            read_at,
        )

    async def delete_for_conversation(self, conversation_id: UUID) -> int:
        before = len(self._reader._messages)
        self._reader._messages[:] = [
            m for m in self._reader._messages if m.conversation_id != conversation_id
        ]
        return before - len(self._reader._messages)


@dataclass
class FakeConversationReader:
    _participants: FakeParticipantReader
    _store: dict[UUID, Conversation] = field(default_factory=dict)

    async def get_by_id(self, conversation_id: UUID) -> Conversation | None:
        return self._store.get(conversation_id)

    def _slots(self, conversation_id: UUID) -> dict[str, int]:
        return {
            p.slot: p.user_id
            for p in self._participants._participants
            if p.conversation_id == conversation_id
        }

    async def find_between(
        self,
        conversation_type: str,
        first_user_id: int,
        second_user_id: int,
        *,
        either_direction: bool = False,
    ) -> Conversation | None:
        first_slot, second_slot = SLOTS_BY_TYPE[ConversationType(conversation_type)]
        wanted = {(first_user_id, second_user_id)}
        if either_direction:
            wanted.add((second_user_id, first_user_id))
        for c in self._store.values():
            slots = self._slots(c.id)
            pair = (slots.get(first_slot), slots.get(second_slot))
            if c.conversation_type == conversation_type and pair in wanted:
                return c
        return None

    def _active_for(self, user_id: int) -> list[Conversation]:
        convs = [
            c for c in self._store.values()
            if c.is_active and user_id in self._slots(c.id).values()
        ]
        oldest = datetime.min.replace(tzinfo=timezone.utc)
        return sorted(convs, key=lambda c: c.last_message_at or oldest, reverse=True)

    async def list_for_user(self, user_id: int, *, offset: int = 0, limit: int = 20) -> list[Conversation]:
        return self._active_for(user_id)[offset:offset + limit]

    async def list_active_ids_for_user(self, user_id: int) -> list[UUID]:
        return [c.id for c in self._active_for(user_id)]

    async def list_for_admin(self, filters: ConversationFilterDTO) -> list[Conversation]:
        convs = [
            c for c in self._store.values()
            if (filters.conversation_type is None or c.conversation_type == filters.conversation_type)
            and (filters.is_active is None or c.is_active == filters.is_active)
        ]
        return convs[filters.offset:filters.offset + filters.limit]

    async def count(self, *, is_active: bool | None = None) -> int:
        return sum(1 for c in self._store.values() if is_active is None or c.is_active == is_active)


@dataclass
class FakeConversationWriter:
    _reader: FakeConversationReader

    async def create(self, conversation: Conversation) -> Conversation:
        self._reader._store[conversation.id] = conversation
        return conversation

    async def set_last_message(self, conversation_id: UUID, message_id: UUID, ts: datetime) -> None:
        conv = self._reader._store[conversation_id]
        self._reader._store[conversation_id] = dataclasses.replace(
            conv, last_message_id=message_id, last_message_at=ts,
        )

    async def set_active(self, conversation_id: UUID, is_active: bool) -> None:
        conv = self._reader._store[conversation_id]
        self._reader._store[conversation_id] = dataclasses.replace(conv, is_active=is_active)

    async def delete(self, conversation_id: UUID) -> None:
        self._reader._store.pop(conversation_id, None)
        participants = self._reader._participants._participants
        participants[:] = [p for p in participants if p.conversation_id != conversation_id]


@dataclass
class FakeUoW:
    """In-memory UoW for unit tests."""
    users: FakeUserReader = field(default_factory=FakeUserReader)
    participants: FakeParticipantReader = field(default_factory=FakeParticipantReader)
    participants_w: FakeParticipantWriter | None = None
    conversations: FakeConversationReader | None = None
    conversations_w: FakeConversationWriter | None = None
    messages: FakeMessageReader = field(default_factory=FakeMessageReader)
    messages_w: FakeMessageWriter | None = None
    _committed: bool = False

    def __post_init__(self) -> None:
        if self.participants_w is None:
            self.participants_w = FakeParticipantWriter(self.participants)
        if self.conversations is None:
            self.conversations = FakeConversationReader(self.participants)
        if self.conversations_w is None:
            self.conversations_w = FakeConversationWriter(self.conversations)
        if self.messages_w is None:
            self.messages_w = FakeMessageWriter(self.messages)

    async def commit(self) -> None:
        self._committed = True

    async def rollback(self) -> None:
        pass


def add_conversation(
    uow: FakeUoW,
    first_user_id: int = DIRECTOR_ID,
    second_user_id: int = TALENT_ID,
    *,
    conversation_type: str = ConversationType.DIRECTOR_TALENT,
    is_active: bool = True,
    messages: Sequence[tuple[int, str]] = (),
) -> Conversation:
    """Register a conversation, its two participants and a thread of (sender_id, content)."""
    start = datetime.now(timezone.utc) - timedelta(minutes=10)
    conv = make_conversation(conversation_type=conversation_type, is_active=is_active)
    first_slot, second_slot = SLOTS_BY_TYPE[ConversationType(conversation_type)]
    for user_id, slot in ((first_user_id, first_slot), (second_user_id, second_slot)):
        uow.participants._participants.append(
            Participant(conversation_id=conv.id, user_id=user_id, slot=slot, joined_at=start)
        )

    last: Message | None = None
    for i, (sender_id, content) in enumerate(messages):
        last = make_message(
            conversation_id=conv.id,
            sender_id=sender_id,
            content=content,
            created_at=start + timedelta(seconds=i),
        )
        uow.messages._messages.append(last)
    if last is not None:
        conv = dataclasses.replace(conv, last_message_id=last.id, last_message_at=last.created_at)

    uow.conversations._store[conv.id] = conv
    return conv


@dataclass
class FakePresence:
    _typing: dict[UUID, set[int]] = field(default_factory=lambda: defaultdict(set))

    async def set_typing(self, conversation_id: UUID, user_id: int, is_typing: bool) -> None:
        if is_typing:
            self._typing[conversation_id].add(user_id)
        else:
            self._typing[conversation_id].discard(user_id)

    async def typing_users(self, conversation_id: UUID) -> list[int]:
        return sorted(self._typing[conversation_id])
