from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from casting_messaging.api.v1.schemas.common import SuccessResponse
from casting_messaging.api.v1.schemas.message import MessageResponse
from casting_messaging.domain.entities.conversation_summary import ConversationSummary


class UserSummary(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    full_name: str
    role: str

    model_config = {"from_attributes": True}


class ParticipantResponse(BaseModel):
    user_id: int
    slot: str
    user: UserSummary | None = None

    model_config = {"from_attributes": True}


class ConversationResponse(BaseModel):
    id: UUID
    conversation_type: str
    subject: str
    casting_id: int | None
    participants: list[ParticipantResponse]
    last_message: MessageResponse | None
    last_message_at: datetime | None
    unread_count: int
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_summary(cls, summary: ConversationSummary) -> ConversationResponse:
        c = summary.conversation
        return cls(
            id=c.id,
            conversation_type=c.conversation_type,
            subject=c.subject,
            casting_id=c.casting_id,
            participants=[
                ParticipantResponse.model_validate(p, from_attributes=True)
                for p in summary.participants
            ],
            last_message=(
                MessageResponse.model_validate(summary.last_message, from_attributes=True)
                if summary.last_message
                else None
            ),
            last_message_at=c.last_message_at,
            unread_count=summary.unread_count,
            is_active=c.is_active,
            created_at=c.created_at,
            updated_at=c.updated_at,
        )


class StartConversationRequest(BaseModel):
    recipient_id: int
    subject: str = ""
    initial_message: str = ""
    casting_id: int | None = None


class ConversationListResponse(SuccessResponse):
    conversations: list[ConversationResponse]


class StartConversationResponse(SuccessResponse):
    conversation: ConversationResponse
    initial_message: MessageResponse


class ThreadResponse(SuccessResponse):
    conversation: ConversationResponse
    messages: list[MessageResponse]
    has_more: bool


class ConversationStatusResponse(SuccessResponse):
    conversation_id: UUID
    is_active: bool
