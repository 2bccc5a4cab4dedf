from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, slots=True)
class Conversation:
    id: UUID
    conversation_type: str
    subject: str
    casting_id: int | None
    last_message_id: UUID | None
    last_message_at: datetime | None
    is_active: bool
    created_at: datetime
    updated_at: datetime
