from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from casting_messaging.api.v1.schemas.common import SuccessResponse


class SendMessageRequest(BaseModel):
    content: str = ""


class MessageResponse(BaseModel):
    id: UUID
    conversation_id: UUID
    sender_id: int
    content: str
    is_delivered: bool
    is_read: bool
    read_at: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}


class MessageEnvelope(SuccessResponse):
    message: MessageResponse


class UnreadCountResponse(SuccessResponse):
    unread_count: int


class MarkReadResponse(SuccessResponse):
    updated_count: int


class TypingRequest(BaseModel):
    is_typing: bool = True


class TypingResponse(SuccessResponse):
    typing_user_ids: list[int]
