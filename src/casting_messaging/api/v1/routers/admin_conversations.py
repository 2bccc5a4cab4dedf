from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Query

from casting_messaging.api.deps import CurrentAdmin, UoWDep
from casting_messaging.api.v1.schemas.admin import AdminDeleteResponse, MessagingStatsResponse
from casting_messaging.api.v1.schemas.conversation import (
    ConversationListResponse,
    ConversationResponse,
    ThreadResponse,
)
from casting_messaging.api.v1.schemas.message import MessageResponse
from casting_messaging.application.dto.conversation import ConversationFilterDTO
from casting_messaging.domain.value_objects.enums import ConversationType
from casting_messaging.services import admin_service

router = APIRouter(prefix="/messages/admin", tags=["admin"])


@router.get("/conversations", response_model=ConversationListResponse)
async def list_conversations(
    admin: CurrentAdmin,
    uow: UoWDep,
    conversation_type: ConversationType | None = Query(None),
    is_active: bool | None = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> ConversationListResponse:
    filters = ConversationFilterDTO(
        conversation_type=conversation_type,
        is_active=is_active,
        page=page,
        limit=limit,
    )
    summaries = await admin_service.list_conversations(filters, uow)
    return ConversationListResponse(
        conversations=[ConversationResponse.from_summary(s) for s in summaries],
    )


@router.get("/conversations/{conversation_id}", response_model=ThreadResponse)
async def get_thread(
    conversation_id: UUID,
    admin: CurrentAdmin,
    uow: UoWDep,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
) -> ThreadResponse:
    summary, messages, has_more = await admin_service.get_thread(
        conversation_id, page, limit, uow,
    )
    return ThreadResponse(
        conversation=ConversationResponse.from_summary(summary),
        messages=[MessageResponse.model_validate(m, from_attributes=True) for m in messages],
        has_more=has_more,
    )


@router.delete("/conversations/{conversation_id}", response_model=AdminDeleteResponse)
async def delete_conversation(
    conversation_id: UUID,
    admin: CurrentAdmin,
    uow: UoWDep,
) -> AdminDeleteResponse:
    removed = await admin_service.delete_conversation(conversation_id, admin, uow)
    return AdminDeleteResponse(deleted_messages=removed)


@router.get("/stats", response_model=MessagingStatsResponse)
async def stats(
    admin: CurrentAdmin,
    uow: UoWDep,
) -> MessagingStatsResponse:
    result = await admin_service.stats(uow)
    return MessagingStatsResponse(
        conversations=result.conversations,
        active_conversations=result.active_conversations,
        messages=result.messages,
        unread_messages=result.unread_messages,
    )
