from __future__ import annotations

from casting_messaging.api.v1.schemas.common import SuccessResponse


class MessagingStatsResponse(SuccessResponse):
    conversations: int
    active_conversations: int
    messages: int
    unread_messages: int


class AdminDeleteResponse(SuccessResponse):
    deleted_messages: int
