from __future__ import annotations

import logging
import uuid

from casting_messaging.application.dto.principal import Principal
from casting_messaging.application.ports.presence import TypingPresence
from casting_messaging.application.uow import UnitOfWork
from casting_messaging.services.conversation_service import get_conversation

logger = logging.getLogger(__name__)


async def set_typing(
    conversation_id: uuid.UUID,
    principal: Principal,
    is_typing: bool,
    uow: UnitOfWork,
    presence: TypingPresence,
) -> None:
    await get_conversation(conversation_id, principal, uow)
    logger.info(
        "Typing indicator: %s for conversation %s by user %s",
        "start" if is_typing else "stop", conversation_id, principal.user_id,
    )
    await presence.set_typing(conversation_id, principal.user_id, is_typing)


async def typing_users(
    conversation_id: uuid.UUID,
    principal: Principal,
    uow: UnitOfWork,
    presence: TypingPresence,
) -> list[int]:
    """Other participants currently typing in the conversation."""
    await get_conversation(conversation_id, principal, uow)
    users = await presence.typing_users(conversation_id)
    return [u for u in users if u != principal.user_id]
