from __future__ import annotations

from typing import Protocol


class TokenVerifier(Protocol):
    async def verify(self, token: str) -> int:
        """Return the user id the token was issued for."""
        ...
