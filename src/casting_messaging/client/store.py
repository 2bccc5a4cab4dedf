"""Client-side messaging state, refreshed by plain REST polling."""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Callable

from casting_messaging.client.api import MessagingApi, MessagingApiError
from casting_messaging.domain.value_objects.enums import CONVERSATION_TYPE_BY_ROLE

logger = logging.getLogger(__name__)

Notifier = Callable[[str], None]


class MessagingStore:
    """Holds the conversation list, the open thread and the unread total.

    Every operation issues REST calls through ``MessagingApi`` and merges the
    response into local state. Failures are reported through ``on_error``
    (a toast, in a UI) and recorded in ``notices``; reads swallow the error
    after reporting it, writes re-raise it.
    """

    def __init__(
        self,
        api: MessagingApi,
        *,
        role: str,
        on_error: Notifier | None = None,
    ) -> None:
        self.api = api
        self.role = role
        self._on_error = on_error

        self.conversations: list[dict[str, Any]] = []
        self.selected_conversation_id: str | None = None
        self.messages: list[dict[str, Any]] = []
        self.unread_count = 0
        self.loading = False
        self.typing_users: set[int] = set()
        self.notices: list[str] = []

    @property
    def selected_conversation(self) -> dict[str, Any] | None:
        for conv in self.conversations:
            if conv["id"] == self.selected_conversation_id:
                return conv
        return None

    def _notify(self, action: str, exc: MessagingApiError) -> None:
        logger.error("Error %s: %s", action, exc.message)
        self.notices.append(exc.message)
        if self._on_error is not None:
            self._on_error(exc.message)

    async def fetch_conversations(self) -> None:
        try:
            data = await self.api.list_conversations()
        except MessagingApiError as exc:
            self._notify("fetching conversations", exc)
            return
        self.conversations = data.get("conversations") or []

    async def fetch_unread_count(self) -> None:
        try:
            data = await self.api.unread_count()
        except MessagingApiError as exc:
            self._notify("fetching unread count", exc)
            return
        self.unread_count = data.get("unread_count") or 0

    async def fetch_messages(self, conversation_id: str) -> None:
        if not conversation_id:
            return
        self.loading = True
        try:
            data = await self.api.get_thread(conversation_id)
        except MessagingApiError as exc:
            self._notify("fetching messages", exc)
            return
        finally:
            self.loading = False
        self.messages = data.get("messages") or []

    async def select_conversation(self, conversation_id: str | None) -> None:
        self.selected_conversation_id = conversation_id
        if conversation_id:
            await self.fetch_messages(conversation_id)
            await self.mark_as_read(conversation_id)
        else:
            self.messages = []
            self.typing_users = set()

    async def send_message(self, conversation_id: str, content: str) -> dict[str, Any] | None:
        if not conversation_id or not content.strip():
            return None
        try:
            data = await self.api.send_message(conversation_id, content.strip())
        except MessagingApiError as exc:
            self._notify("sending message", exc)
            raise

        message = data["message"]
        if conversation_id == self.selected_conversation_id:
            self.messages.append(message)
        self.conversations = [
            {
                **conv,
                "last_message": message,
                "last_message_at": datetime.now(timezone.utc).isoformat(),
            }
            if conv["id"] == conversation_id
            else conv
            for conv in self.conversations
        ]
        return message

    async def start_conversation(
        self,
        recipient_id: int,
        subject: str,
        initial_message: str,
        casting_id: int | None = None,
    ) -> dict[str, Any] | None:
        if not recipient_id or not subject or not initial_message:
            return None
        if self.role not in CONVERSATION_TYPE_BY_ROLE:
            raise PermissionError("Only casting directors and writers can start conversations")
        try:
            data = await self.api.start_conversation(
                recipient_id, subject, initial_message, casting_id,
            )
        except MessagingApiError as exc:
            self._notify("starting conversation", exc)
            raise

        conversation = data["conversation"]
        self.conversations = [conversation, *self.conversations]
        return conversation

    async def mark_as_read(self, conversation_id: str) -> None:
        if not conversation_id:
            return
        try:
            await self.api.mark_read(conversation_id)
        except MessagingApiError as exc:
            self._notify("marking as read", exc)
            return
        self.conversations = [
            {**conv, "unread_count": 0} if conv["id"] == conversation_id else conv
            for conv in self.conversations
        ]
        await self.fetch_unread_count()

    async def close_conversation(self, conversation_id: str) -> bool:
        if not conversation_id:
            return False
        try:
            await self.api.close_conversation(conversation_id)
        except MessagingApiError as exc:
            self._notify("closing conversation", exc)
            raise
        await self._forget(conversation_id)
        return True

    async def delete_conversation(self, conversation_id: str) -> bool:
        if not conversation_id:
            return False
        try:
            await self.api.delete_conversation(conversation_id)
        except MessagingApiError as exc:
            self._notify("deleting conversation", exc)
            raise
        await self._forget(conversation_id)
        return True

    async def _forget(self, conversation_id: str) -> None:
        # Closed and deleted conversations both leave the active list.
        self.conversations = [c for c in self.conversations if c["id"] != conversation_id]
        if self.selected_conversation_id == conversation_id:
            self.selected_conversation_id = None
            self.messages = []
            self.typing_users = set()
        await self.fetch_unread_count()

    async def send_typing_indicator(self, conversation_id: str, is_typing: bool) -> None:
        logger.debug(
            "Typing indicator: %s for conversation %s",
            "start" if is_typing else "stop", conversation_id,
        )
        try:
            await self.api.send_typing(conversation_id, is_typing)
        except MessagingApiError as exc:
            self._notify("sending typing indicator", exc)

    async def fetch_typing(self, conversation_id: str) -> None:
        try:
            data = await self.api.get_typing(conversation_id)
        except MessagingApiError as exc:
            self._notify("fetching typing users", exc)
            return
        if conversation_id == self.selected_conversation_id:
            self.typing_users = set(data.get("typing_user_ids") or [])

    async def poll_once(self) -> None:
        await self.fetch_conversations()
        await self.fetch_unread_count()
        if self.selected_conversation_id:
            await self.fetch_messages(self.selected_conversation_id)
            await self.fetch_typing(self.selected_conversation_id)

    async def run_polling(self, interval: float) -> None:
        """Poll until cancelled."""
        while True:
            await self.poll_once()
            await asyncio.sleep(interval)
