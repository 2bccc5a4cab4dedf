from __future__ import annotations

import uuid

import pytest

from casting_messaging.application.dto.conversation import StartConversationDTO
from casting_messaging.application.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from casting_messaging.domain.value_objects.enums import ConversationType, ParticipantSlot
from casting_messaging.services import conversation_service
from tests.conftest import (
    DIRECTOR_ID,
    OTHER_TALENT_ID,
    TALENT_ID,
    WRITER_ID,
    FakeUoW,
    add_conversation,
)


def _start(recipient_id: int = TALENT_ID, **kwargs) -> StartConversationDTO:
    return StartConversationDTO(
        recipient_id=recipient_id,
        subject=kwargs.get("subject", "Callback for Hamlet"),
        initial_message=kwargs.get("initial_message", "Are you free on Friday?"),
        casting_id=kwargs.get("casting_id"),
    )


@pytest.mark.asyncio
async def test_director_starts_director_talent_conversation(director_principal):
    uow = FakeUoW()

    summary, message = await conversation_service.start_conversation(
        director_principal, _start(casting_id=7), uow,
    )

    conv = summary.conversation
    assert conv.conversation_type == ConversationType.DIRECTOR_TALENT
    assert conv.casting_id == 7
    assert conv.last_message_id == message.id
    assert uow._committed is True
    slots = {p.slot: p.user_id for p in summary.participants}
    assert slots == {ParticipantSlot.DIRECTOR: DIRECTOR_ID, ParticipantSlot.TALENT: TALENT_ID}
    assert message.sender_id == DIRECTOR_ID
    assert message.content == "Are you free on Friday?"
    assert summary.last_message == message
    assert summary.unread_count == 0


@pytest.mark.asyncio
async def test_writer_starts_writer_user_conversation(writer_principal):
    uow = FakeUoW()

    summary, _ = await conversation_service.start_conversation(
        writer_principal, _start(recipient_id=DIRECTOR_ID), uow,
    )

    assert summary.conversation.conversation_type == ConversationType.WRITER_USER
    slots = {p.slot: p.user_id for p in summary.participants}
    assert slots == {ParticipantSlot.INITIATOR: WRITER_ID, ParticipantSlot.RECIPIENT: DIRECTOR_ID}


@pytest.mark.asyncio
async def test_talent_cannot_start_conversation(talent_principal):
    uow = FakeUoW()

    with pytest.raises(ForbiddenError):
        await conversation_service.start_conversation(
            talent_principal, _start(recipient_id=DIRECTOR_ID), uow,
        )
    assert uow._committed is False


@pytest.mark.asyncio
async def test_admin_cannot_start_conversation(admin_principal):
    with pytest.raises(ForbiddenError):
        await conversation_service.start_conversation(admin_principal, _start(), FakeUoW())


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"subject": "   "},
        {"initial_message": ""},
        {"subject": "x" * 201},
    ],
)
async def test_start_conversation_rejects_invalid_input(director_principal, overrides):
    with pytest.raises(ValidationError):
        await conversation_service.start_conversation(
            director_principal, _start(**overrides), FakeUoW(),
        )


@pytest.mark.asyncio
async def test_start_conversation_with_self(director_principal):
    with pytest.raises(ValidationError):
        await conversation_service.start_conversation(
            director_principal, _start(recipient_id=DIRECTOR_ID), FakeUoW(),
        )


@pytest.mark.asyncio
async def test_start_conversation_unknown_recipient(director_principal):
    with pytest.raises(NotFoundError):
        await conversation_service.start_conversation(
            director_principal, _start(recipient_id=999), FakeUoW(),
        )


@pytest.mark.asyncio
async def test_duplicate_conversation_reports_existing_id(director_principal):
    uow = FakeUoW()
    existing = add_conversation(uow, DIRECTOR_ID, TALENT_ID)

    with pytest.raises(ConflictError) as exc_info:
        await conversation_service.start_conversation(director_principal, _start(), uow)

    assert exc_info.value.extra == {"conversation_id": str(existing.id)}


@pytest.mark.asyncio
async def test_closed_conversation_still_blocks_duplicate(director_principal):
    uow = FakeUoW()
    add_conversation(uow, DIRECTOR_ID, TALENT_ID, is_active=False)

    with pytest.raises(ConflictError):
        await conversation_service.start_conversation(director_principal, _start(), uow)


@pytest.mark.asyncio
async def test_writer_duplicate_is_checked_in_either_direction(writer_principal):
    uow = FakeUoW()
    # A conversation where the writer is the recipient.
    add_conversation(
        uow, DIRECTOR_ID, WRITER_ID, conversation_type=ConversationType.WRITER_USER,
    )

    with pytest.raises(ConflictError):
        await conversation_service.start_conversation(
            writer_principal, _start(recipient_id=DIRECTOR_ID), uow,
        )


@pytest.mark.asyncio
async def test_director_may_start_with_another_talent(director_principal):
    uow = FakeUoW()
    add_conversation(uow, DIRECTOR_ID, TALENT_ID)

    summary, _ = await conversation_service.start_conversation(
        director_principal, _start(recipient_id=OTHER_TALENT_ID), uow,
    )

    assert summary.conversation.id in uow.conversations._store
    assert len(uow.conversations._store) == 2


@pytest.mark.asyncio
async def test_list_user_conversations_only_active_memberships(talent_principal):
    uow = FakeUoW()
    older = add_conversation(uow, messages=[(DIRECTOR_ID, "hi"), (DIRECTOR_ID, "still there?")])
    newer = add_conversation(
        uow, WRITER_ID, TALENT_ID,
        conversation_type=ConversationType.WRITER_USER,
        messages=[(WRITER_ID, "a"), (WRITER_ID, "b"), (TALENT_ID, "c")],
    )
    add_conversation(uow, is_active=False)
    add_conversation(uow, DIRECTOR_ID, OTHER_TALENT_ID)

    result = await conversation_service.list_user_conversations(talent_principal, 1, 20, uow)

    assert {s.conversation.id for s in result} == {older.id, newer.id}
    unread = {s.conversation.id: s.unread_count for s in result}
    assert unread[older.id] == 2
    assert unread[newer.id] == 2
    assert all(s.last_message is not None for s in result)


@pytest.mark.asyncio
async def test_list_user_conversations_paginates(director_principal):
    uow = FakeUoW()
    for _ in range(3):
        add_conversation(uow, messages=[(DIRECTOR_ID, "hello")])

    first = await conversation_service.list_user_conversations(director_principal, 1, 2, uow)
    second = await conversation_service.list_user_conversations(director_principal, 2, 2, uow)

    assert len(first) == 2
    assert len(second) == 1


@pytest.mark.asyncio
async def test_admin_has_no_inbox(admin_principal):
    with pytest.raises(ForbiddenError):
        await conversation_service.list_user_conversations(admin_principal, 1, 20, FakeUoW())


@pytest.mark.asyncio
async def test_close_conversation(talent_principal):
    uow = FakeUoW()
    conv = add_conversation(uow)

    closed = await conversation_service.close_conversation(conv.id, talent_principal, uow)

    assert closed.is_active is False
    assert uow.conversations._store[conv.id].is_active is False
    assert uow._committed is True


@pytest.mark.asyncio
async def test_close_conversation_is_idempotent(director_principal):
    uow = FakeUoW()
    conv = add_conversation(uow, is_active=False)

    closed = await conversation_service.close_conversation(conv.id, director_principal, uow)

    assert closed.is_active is False
    assert uow._committed is False


@pytest.mark.asyncio
async def test_close_conversation_requires_membership(writer_principal):
    uow = FakeUoW()
    conv = add_conversation(uow)

    with pytest.raises(ForbiddenError):
        await conversation_service.close_conversation(conv.id, writer_principal, uow)


@pytest.mark.asyncio
async def test_close_missing_conversation(director_principal):
    with pytest.raises(NotFoundError):
        await conversation_service.close_conversation(uuid.uuid4(), director_principal, FakeUoW())


@pytest.mark.asyncio
async def test_delete_conversation_removes_thread(director_principal):
    uow = FakeUoW()
    conv = add_conversation(uow, messages=[(DIRECTOR_ID, "hi"), (TALENT_ID, "hello")])
    keep = add_conversation(uow, DIRECTOR_ID, OTHER_TALENT_ID, messages=[(DIRECTOR_ID, "hey")])

    await conversation_service.delete_conversation(conv.id, director_principal, uow)

    assert conv.id not in uow.conversations._store
    assert not await uow.participants.is_participant(conv.id, DIRECTOR_ID)
    assert not await uow.participants.is_participant(conv.id, TALENT_ID)
    assert [m.conversation_id for m in uow.messages._messages] == [keep.id]
    assert uow._committed is True


@pytest.mark.asyncio
async def test_delete_conversation_requires_membership(writer_principal):
    uow = FakeUoW()
    conv = add_conversation(uow)

    with pytest.raises(ForbiddenError):
        await conversation_service.delete_conversation(conv.id, writer_principal, uow)
    assert conv.id in uow.conversations._store


@pytest.mark.asyncio
async def test_role_is_checked_before_fields(talent_principal):
    with pytest.raises(ForbiddenError):
        await conversation_service.start_conversation(
            talent_principal,
            _start(recipient_id=DIRECTOR_ID, subject="", initial_message=""),
            FakeUoW(),
        )
