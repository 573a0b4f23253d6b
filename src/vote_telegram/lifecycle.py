from __future__ import annotations

import asyncio
import contextlib
import logging
from datetime import timedelta

from .votes import VoteStore

logger = logging.getLogger(__name__)

SESSION_RETENTION = timedelta(days=7)
DEFAULT_SWEEP_INTERVAL_SECONDS = 24 * 60 * 60.0


class SessionSweeper:
    def __init__(
        self,
        store: VoteStore,
        retention: timedelta = SESSION_RETENTION,
        interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
    ) -> None:
        self._store = store
        self._retention = retention
        self._interval_seconds = interval_seconds
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.create_task(self._sweep_loop(), name="vote-session-sweeper")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    def sweep_once(self) -> int:
        removed = self._store.expire_older_than(self._retention)
        logger.info("Expired %d voting session(s), %d remaining", removed, len(self._store))
        return removed

    async def _sweep_loop(self) -> None:
        while True:
            try:
                self.sweep_once()
            except Exception:
                logger.exception("session sweep error")
            await asyncio.sleep(self._interval_seconds)
