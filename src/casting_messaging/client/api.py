"""Thin async REST client for the messaging endpoints."""
from __future__ import annotations

from typing import Any
from uuid import UUID

import httpx


class MessagingApiError(Exception):
    """A request failed: network error or non-2xx response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class MessagingApi:
    """One method per endpoint; each returns the decoded JSON envelope.

    No retry, backoff or timeout policy beyond httpx's defaults.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        api_prefix: str = "/api",
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"Bearer {token}"},
            transport=transport,
        )
        self._prefix = f"{api_prefix.rstrip('/')}/messages"

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> MessagingApi:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            resp = await self._client.request(method, f"{self._prefix}{path}", **kwargs)
        except httpx.HTTPError as exc:
            raise MessagingApiError(f"Request failed: {exc}") from exc

        try:
            data = resp.json()
        except ValueError:
            data = {}
        if resp.is_error:
            raise MessagingApiError(
                data.get("error") or f"Request failed with status {resp.status_code}",
                status_code=resp.status_code,
            )
        return data

    async def list_conversations(self, page: int = 1, limit: int = 20) -> dict[str, Any]:
        return await self._request("GET", "/conversations", params={"page": page, "limit": limit})

    async def unread_count(self) -> dict[str, Any]:
        return await self._request("GET", "/unread-count")

    async def get_thread(self, conversation_id: UUID | str, page: int = 1) -> dict[str, Any]:
        return await self._request("GET", f"/conversations/{conversation_id}", params={"page": page})

    async def send_message(self, conversation_id: UUID | str, content: str) -> dict[str, Any]:
        return await self._request(
            "POST", f"/conversations/{conversation_id}/messages", json={"content": content},
        )

    async def start_conversation(
        self,
        recipient_id: int,
        subject: str,
        initial_message: str,
        casting_id: int | None = None,
    ) -> dict[str, Any]:
        return await self._request(
            "POST",
            "/conversations",
            json={
                "recipient_id": recipient_id,
                "subject": subject,
                "initial_message": initial_message,
                "casting_id": casting_id,
            },
        )

    async def mark_read(self, conversation_id: UUID | str) -> dict[str, Any]:
        return await self._request("PATCH", f"/conversations/{conversation_id}/read")

    async def close_conversation(self, conversation_id: UUID | str) -> dict[str, Any]:
        return await self._request("PATCH", f"/conversations/{conversation_id}/close")

    async def delete_conversation(self, conversation_id: UUID | str) -> dict[str, Any]:
        return await self._request("DELETE", f"/conversations/{conversation_id}")

    async def send_typing(self, conversation_id: UUID | str, is_typing: bool) -> dict[str, Any]:
        return await self._request(
            "POST", f"/conversations/{conversation_id}/typing", json={"is_typing": is_typing},
        )

    async def get_typing(self, conversation_id: UUID | str) -> dict[str, Any]:
        return await self._request("GET", f"/conversations/{conversation_id}/typing")
