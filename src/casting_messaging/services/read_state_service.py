from __future__ import annotations

import uuid
from datetime import datetime, timezone

from casting_messaging.application.dto.principal import Principal
from casting_messaging.application.policies.permissions import (
    assert_can_use_inbox,
    assert_conversation_access,
)
from casting_messaging.application.uow import UnitOfWork


async def mark_read(
    conversation_id: uuid.UUID,
    principal: Principal,
    uow: UnitOfWork,
) -> int:
    """Mark every message the other party sent as read. Return how many changed."""
    conversation = await uow.conversations.get_by_id(conversation_id)
    await assert_conversation_access(principal, conversation, uow.participants)
    updated = await uow.messages_w.mark_conversation_read(
        conversation_id,
        principal.user_id,
        datetime.now(timezone.utc),
    )
    await uow.commit()
    return updated


async def unread_count(principal: Principal, uow: UnitOfWork) -> int:
    """Unread messages across the caller's open conversations."""
    assert_can_use_inbox(principal)
    conversation_ids = await uow.conversations.list_active_ids_for_user(principal.user_id)
    counts = await uow.messages.count_unread(conversation_ids, principal.user_id)
    return sum(counts.values())
