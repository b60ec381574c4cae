"""
HTTP liveness endpoint.

Hosting platforms probe ``/`` or ``/health`` to decide whether the process is
alive. Both routes answer 200 with uptime and whether the Discord gateway
session is ready.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Callable

from aiohttp import web

from lowballbot.util.logger import get_logger

logger = get_logger("health_server")

ReadyCheck = Callable[[], bool]

STARTED_AT_KEY = web.AppKey("started_at", float)
READY_CHECK_KEY = web.AppKey("ready_check", ReadyCheck)


def build_health_payload(is_ready: bool, started_at: float, now: float | None = None) -> dict:
    current = time.monotonic() if now is None else now
    return {
        "status": "healthy",
        "uptime": round(current - started_at, 3),
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "bot_status": "online" if is_ready else "offline",
    }


async def handle_health(request: web.Request) -> web.Response:
    app = request.app
    payload = build_health_payload(app[READY_CHECK_KEY](), app[STARTED_AT_KEY])
    return web.json_response(payload)


def build_health_app(is_ready: ReadyCheck, started_at: float | None = None) -> web.Application:
    """Create the aiohttp application serving ``/`` and ``/health``.

    Parameters
    ----------
    is_ready:
        Callable reporting whether the Discord client is connected.
    started_at:
        ``time.monotonic()`` value uptime is measured from; defaults to now.
    """
    app = web.Application()
    app[READY_CHECK_KEY] = is_ready
    app[STARTED_AT_KEY] = time.monotonic() if started_at is None else started_at
    app.router.add_get("/", handle_health)
    app.router.add_get("/health", handle_health)
    return app


class HealthServer:
    """Run the health application on ``host:port`` next to the bot."""

    def __init__(self, port: int, is_ready: ReadyCheck, host: str = "0.0.0.0") -> None:
        self.port = port
        self.host = host
        self.app = build_health_app(is_ready)
        self._runner: web.AppRunner | None = None

    async def start(self) -> None:
        if self._runner is not None:
            logger.warning("Health server already running on port %d", self.port)
            return
        runner = web.AppRunner(self.app, access_log=None)
        await runner.setup()
        site = web.TCPSite(runner, self.host, self.port)
        await site.start()
        self._runner = runner
        logger.info("Health server running on port %d", self.port)
        logger.info("Health endpoint: http://localhost:%d/health", self.port)

    async def stop(self) -> None:
        if self._runner is None:
            return
        await self._runner.cleanup()
        self._runner = None
        logger.info("Health server stopped")
