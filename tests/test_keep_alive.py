import asyncio
from datetime import timedelta
from unittest.mock import MagicMock

import aiohttp
import pytest

from lowballbot.health import keep_alive
from lowballbot.health.keep_alive import KeepAlive


@pytest.fixture(autouse=True)
def quiet_logger(monkeypatch):
    mock_logger = MagicMock()
    monkeypatch.setattr(keep_alive, "logger", mock_logger)
    return mock_logger


class FakeResponse:
    def __init__(self, status):
        self.status = status

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    def __init__(self, status=200, error=None):
        self.status = status
        self.error = error
        self.urls = []

    def get(self, url, timeout=None):
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return FakeResponse(self.status)


def test_health_url_strips_trailing_slash():
    assert KeepAlive("https://bot.example.com/", timedelta(minutes=14)).health_url == "https://bot.example.com/health"


@pytest.mark.asyncio
async def test_ping_once_returns_status(quiet_logger):
    session = FakeSession(status=200)

    status = await KeepAlive("https://x", timedelta(minutes=1)).ping_once(session)

    assert status == 200
    assert session.urls == ["https://x/health"]
    quiet_logger.info.assert_called_once()


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [aiohttp.ClientConnectionError("down"), asyncio.TimeoutError()])
async def test_ping_failure_is_logged_not_raised(quiet_logger, error):
    status = await KeepAlive("https://x", timedelta(minutes=1)).ping_once(FakeSession(error=error))

    assert status is None
    quiet_logger.error.assert_called_once()


@pytest.mark.asyncio
async def test_start_and_stop():
    pinger = KeepAlive("https://x", timedelta(hours=1))

    pinger.start()
    assert pinger.running
    pinger.start()

    await pinger.stop()
    assert not pinger.running
    await pinger.stop()
