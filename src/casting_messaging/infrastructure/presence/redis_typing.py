"""Typing markers kept in Redis, read back by polling clients."""
from __future__ import annotations

import time
from uuid import UUID

import redis.asyncio as aioredis


class RedisTypingPresence:
    """Implements application.ports.presence.TypingPresence.

    Each conversation has one sorted set: member = user id, score = the time
    the user last reported typing. Members older than the TTL are stale.
    """

    def __init__(self, redis: aioredis.Redis, ttl_seconds: float, prefix: str = "typing") -> None:
        self._redis = redis
        self._ttl = ttl_seconds
        self._prefix = prefix

    def _key(self, conversation_id: UUID) -> str:
        return f"{self._prefix}:{conversation_id}"

    async def set_typing(self, conversation_id: UUID, user_id: int, is_typing: bool) -> None:
        key = self._key(conversation_id)
        if not is_typing:
            await self._redis.zrem(key, str(user_id))
            return
        async with self._redis.pipeline(transaction=True) as pipe:
            pipe.zadd(key, {str(user_id): time.time()})
            pipe.expire(key, max(1, int(self._ttl * 2)))
            await pipe.execute()

    async def typing_users(self, conversation_id: UUID) -> list[int]:
        key = self._key(conversation_id)
        cutoff = time.time() - self._ttl
        await self._redis.zremrangebyscore(key, "-inf", cutoff)
        members = await self._redis.zrangebyscore(key, cutoff, "+inf")
        return sorted(int(m) for m in members)
