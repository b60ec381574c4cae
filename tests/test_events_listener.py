from datetime import timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from lowballbot.bot.cogs import events_listener
from lowballbot.bot.role_ui import RoleButtonsView
from lowballbot.configuration.app_configuration import BotSettings


class FakeKeepAlive:
    instances = []

    def __init__(self, service_url, interval):
        self.service_url = service_url
        self.interval = interval
        self.started = 0
        self.stopped = False
        FakeKeepAlive.instances.append(self)

    def start(self):
        self.started += 1

    async def stop(self):
        self.stopped = True


@pytest.fixture(autouse=True)
def fake_keep_alive(monkeypatch):
    FakeKeepAlive.instances = []
    monkeypatch.setattr(events_listener, "KeepAlive", FakeKeepAlive)


@pytest.fixture()
def fake_bot():
    return SimpleNamespace(user=SimpleNamespace(id=999), add_view=MagicMock())


@pytest.mark.asyncio
async def test_on_ready_registers_view_once(fake_bot):
    cog = events_listener.EventsListenerCog(fake_bot, BotSettings(token="t"))

    await cog.on_ready()
    await cog.on_ready()

    fake_bot.add_view.assert_called_once()
    view = fake_bot.add_view.call_args.args[0]
    assert isinstance(view, RoleButtonsView)
    assert view.role_name == "lowball"
    assert FakeKeepAlive.instances == []


@pytest.mark.asyncio
async def test_on_ready_starts_keep_alive_in_production(fake_bot):
    settings = BotSettings(token="t", environment="production", service_url="https://bot.example.com")
    cog = events_listener.EventsListenerCog(fake_bot, settings)

    await cog.on_ready()
    await cog.on_ready()

    assert len(FakeKeepAlive.instances) == 1
    pinger = FakeKeepAlive.instances[0]
    assert pinger.started == 1
    assert pinger.interval == timedelta(minutes=14)

    await cog.shutdown()
    assert pinger.stopped is True
    assert cog.keep_alive is None


@pytest.mark.asyncio
async def test_command_error_replies_generically():
    cog = events_listener.EventsListenerCog(SimpleNamespace(), BotSettings(token="t"))
    ctx = SimpleNamespace(command=SimpleNamespace(qualified_name="purge"), respond=AsyncMock())

    await cog.on_application_command_error(ctx, discord.DiscordException("boom"))

    ctx.respond.assert_awaited_once_with(events_listener.GENERIC_ERROR_REPLY, ephemeral=True)


@pytest.mark.asyncio
async def test_command_error_reply_failure_is_logged(monkeypatch):
    mock_logger = MagicMock()
    monkeypatch.setattr(events_listener, "logger", mock_logger)
    cog = events_listener.EventsListenerCog(SimpleNamespace(), BotSettings(token="t"))
    response = MagicMock(status=404, reason="Unknown interaction")
    ctx = SimpleNamespace(command=None, respond=AsyncMock(side_effect=discord.NotFound(response, "gone")))

    await cog.on_application_command_error(ctx, discord.DiscordException("boom"))

    assert mock_logger.error.call_count == 2
