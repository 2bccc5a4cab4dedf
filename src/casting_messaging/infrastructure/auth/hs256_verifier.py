from __future__ import annotations

import jwt

from casting_messaging.application.exceptions import AuthenticationError


class HS256Verifier:
    """Verify JWTs signed with the marketplace's shared secret."""

    def __init__(self, secret: str, algorithm: str = "HS256") -> None:
        self._secret = secret
        self._algorithm = algorithm

    async def verify(self, token: str) -> int:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.PyJWTError as exc:
            raise AuthenticationError("Invalid token") from exc

        raw_id = payload.get("userId", payload.get("sub"))
        try:
            return int(raw_id)
        except (TypeError, ValueError) as exc:
            raise AuthenticationError("Invalid token") from exc
