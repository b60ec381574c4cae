"""Periodic self-ping that keeps free-tier hosts from idling the process."""

from __future__ import annotations

import asyncio
from datetime import timedelta

import aiohttp

from lowballbot.util.logger import get_logger

logger = get_logger("keep_alive")

REQUEST_TIMEOUT = aiohttp.ClientTimeout(total=30)


class KeepAlive:
    """
    GET ``<service_url>/health`` every ``interval`` until stopped.

    Args:
        service_url: Public base URL of this deployment.
        interval: Time between pings.
    """

    def __init__(self, service_url: str, interval: timedelta) -> None:
        self.health_url = f"{service_url.rstrip('/')}/health"
        self.interval = interval
        self._task: asyncio.Task | None = None

    async def ping_once(self, session: aiohttp.ClientSession) -> int | None:
        """Ping the health URL once; return the status code, or None on failure."""
        try:
            async with session.get(self.health_url, timeout=REQUEST_TIMEOUT) as response:
                logger.info("Self-ping successful: %s", response.status)
                return response.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            logger.error("Self-ping failed: %s", exc)
            return None

    async def _run_loop(self) -> None:
        seconds = self.interval.total_seconds()
        try:
            async with aiohttp.ClientSession() as session:
                while True:
                    await asyncio.sleep(seconds)
                    await self.ping_once(session)
        except asyncio.CancelledError:
            logger.info("Keep-alive cancelled")
            raise

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            logger.warning("Keep-alive already running")
            return
        self._task = asyncio.create_task(self._run_loop())
        logger.info("Keep-alive mechanism started (every %.0fs -> %s)", self.interval.total_seconds(), self.health_url)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
