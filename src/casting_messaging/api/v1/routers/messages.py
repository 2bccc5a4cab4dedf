from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter

from casting_messaging.api.deps import CurrentPrincipal, PresenceDep, UoWDep
from casting_messaging.api.v1.schemas.common import SuccessResponse
from casting_messaging.api.v1.schemas.message import (
    MessageEnvelope,
    MessageResponse,
    SendMessageRequest,
    TypingRequest,
    TypingResponse,
    UnreadCountResponse,
)
from casting_messaging.services import message_service, read_state_service, typing_service

router = APIRouter(prefix="/messages", tags=["messages"])


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> UnreadCountResponse:
    count = await read_state_service.unread_count(principal, uow)
    return UnreadCountResponse(unread_count=count)


@router.post(
    "/conversations/{conversation_id}/messages",
    response_model=MessageEnvelope,
    status_code=201,
)
async def send_message(
    conversation_id: UUID,
    body: SendMessageRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> MessageEnvelope:
    msg = await message_service.send_message(conversation_id, principal, body.content, uow)
    return MessageEnvelope(message=MessageResponse.model_validate(msg, from_attributes=True))


@router.post("/conversations/{conversation_id}/typing", response_model=SuccessResponse)
async def send_typing(
    conversation_id: UUID,
    body: TypingRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
    presence: PresenceDep,
) -> SuccessResponse:
    await typing_service.set_typing(conversation_id, principal, body.is_typing, uow, presence)
    return SuccessResponse()


@router.get("/conversations/{conversation_id}/typing", response_model=TypingResponse)
async def get_typing(
    conversation_id: UUID,
    principal: CurrentPrincipal,
    uow: UoWDep,
    presence: PresenceDep,
) -> TypingResponse:
    users = await typing_service.typing_users(conversation_id, principal, uow, presence)
    return TypingResponse(typing_user_ids=users)
