"""Database connection state shared by the availability gate and /readyz."""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)

Probe = Callable[[], Awaitable[None]]


def engine_probe(engine: AsyncEngine) -> Probe:
    async def _probe() -> None:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    return _probe


class DatabaseMonitor:
    """Tracks whether the database is reachable.

    The state starts as disconnected and flips on each probe. Request
    handlers may also mark it down when a query fails at the connection
    level; the next successful probe brings it back.
    """

    def __init__(self, probe: Probe) -> None:
        self._probe = probe
        self._ready = False
        self._last_error: str | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def is_ready(self) -> bool:
        return self._ready

    @property
    def last_error(self) -> str | None:
        return self._last_error

    def mark_up(self) -> None:
        if not self._ready:
            logger.info("Database connection is available")
        self._ready = True
        self._last_error = None

    def mark_down(self, reason: str) -> None:
        if self._ready:
            logger.warning("Database connection lost: %s", reason)
        self._ready = False
        self._last_error = reason

    async def check(self) -> bool:
        try:
            await self._probe()
        except Exception as exc:  # noqa: BLE001
            self.mark_down(str(exc))
        else:
            self.mark_up()
        return self._ready

    async def start(self, interval: float) -> None:
        await self.check()
        self._task = asyncio.create_task(self._run(interval), name="db-monitor")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _run(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            await self.check()
