from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Query

from casting_messaging.api.deps import CurrentPrincipal, UoWDep
from casting_messaging.api.v1.schemas.common import SuccessResponse
from casting_messaging.api.v1.schemas.conversation import (
    ConversationListResponse,
    ConversationResponse,
    ConversationStatusResponse,
    StartConversationRequest,
    StartConversationResponse,
    ThreadResponse,
)
from casting_messaging.api.v1.schemas.message import MarkReadResponse, MessageResponse
from casting_messaging.application.dto.conversation import StartConversationDTO
from casting_messaging.services import conversation_service, message_service, read_state_service

router = APIRouter(prefix="/messages/conversations", tags=["conversations"])


@router.get("", response_model=ConversationListResponse)
async def list_conversations(
    principal: CurrentPrincipal,
    uow: UoWDep,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> ConversationListResponse:
    summaries = await conversation_service.list_user_conversations(
        principal, page, limit, uow,
    )
    return ConversationListResponse(
        conversations=[ConversationResponse.from_summary(s) for s in summaries],
    )


@router.post("", response_model=StartConversationResponse, status_code=201)
async def start_conversation(
    body: StartConversationRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> StartConversationResponse:
    summary, message = await conversation_service.start_conversation(
        principal,
        StartConversationDTO(
            recipient_id=body.recipient_id,
            subject=body.subject,
            initial_message=body.initial_message,
            casting_id=body.casting_id,
        ),
        uow,
    )
    return StartConversationResponse(
        conversation=ConversationResponse.from_summary(summary),
        initial_message=MessageResponse.model_validate(message, from_attributes=True),
    )


@router.get("/{conversation_id}", response_model=ThreadResponse)
async def get_thread(
    conversation_id: UUID,
    principal: CurrentPrincipal,
    uow: UoWDep,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
) -> ThreadResponse:
    summary, messages, has_more = await message_service.open_thread(
        conversation_id, principal, page, limit, uow,
    )
    return ThreadResponse(
        conversation=ConversationResponse.from_summary(summary),
        messages=[MessageResponse.model_validate(m, from_attributes=True) for m in messages],
        has_more=has_more,
    )


@router.patch("/{conversation_id}/read", response_model=MarkReadResponse)
async def mark_read(
    conversation_id: UUID,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> MarkReadResponse:
    updated = await read_state_service.mark_read(conversation_id, principal, uow)
    return MarkReadResponse(updated_count=updated)


@router.patch("/{conversation_id}/close", response_model=ConversationStatusResponse)
async def close_conversation(
    conversation_id: UUID,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> ConversationStatusResponse:
    conv = await conversation_service.close_conversation(conversation_id, principal, uow)
    return ConversationStatusResponse(conversation_id=conv.id, is_active=conv.is_active)


@router.delete("/{conversation_id}", response_model=SuccessResponse)
async def delete_conversation(
    conversation_id: UUID,
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> SuccessResponse:
    await conversation_service.delete_conversation(conversation_id, principal, uow)
    return SuccessResponse()
