from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from lowballbot.bot.cogs import moderation_cmds
from lowballbot.configuration.app_configuration import BotSettings
from lowballbot.moderation.errors import ExternalCallFailure, PermissionDenied
from lowballbot.moderation.moderation_datatypes import Actor, ModerationMessage


SETTINGS = BotSettings(token="t", purge_pacing_seconds=0)


def make_ctx():
    return SimpleNamespace(
        author=SimpleNamespace(id=1),
        guild=SimpleNamespace(id=99),
        channel=SimpleNamespace(id=5, purge=AsyncMock(return_value=[object()] * 3)),
        respond=AsyncMock(),
        defer=AsyncMock(),
        send_followup=AsyncMock(),
    )


def fresh_message(message_id, author_id, age=timedelta(minutes=1)):
    return ModerationMessage(
        message_id=message_id,
        author_id=author_id,
        created_at=datetime.now(timezone.utc) - age,
    )


@pytest.fixture()
def allow(monkeypatch):
    monkeypatch.setattr(moderation_cmds, "require_permissions", lambda ctx, **_: None)


@pytest.fixture()
def deny(monkeypatch):
    def fake_require(ctx, **perms):
        raise PermissionDenied(next(iter(perms)))

    monkeypatch.setattr(moderation_cmds, "require_permissions", fake_require)


def test_setup_registers_cog():
    captured = {}
    moderation_cmds.setup(SimpleNamespace(add_cog=lambda cog: captured.setdefault("cog", cog)), SETTINGS)
    assert isinstance(captured["cog"], moderation_cmds.ModerationCog)


@pytest.mark.asyncio
async def test_clear_requires_manage_messages(deny):
    cog = moderation_cmds.ModerationCog(SimpleNamespace(), SETTINGS)
    ctx = make_ctx()

    await moderation_cmds.ModerationCog.clear.callback(cog, ctx, 10)

    ctx.respond.assert_awaited_once_with(moderation_cmds.MANAGE_MESSAGES_DENIED, ephemeral=True)
    ctx.channel.purge.assert_not_awaited()


@pytest.mark.asyncio
async def test_clear_reports_deleted_count(allow):
    cog = moderation_cmds.ModerationCog(SimpleNamespace(), SETTINGS)
    ctx = make_ctx()

    await moderation_cmds.ModerationCog.clear.callback(cog, ctx, 10)

    assert ctx.channel.purge.await_args.kwargs["limit"] == 10
    cutoff = ctx.channel.purge.await_args.kwargs["after"]
    assert datetime.now(timezone.utc) - cutoff >= timedelta(days=14)
    ctx.send_followup.assert_awaited_once_with("✅ Deleted 3 messages!", ephemeral=True)


@pytest.mark.asyncio
async def test_clear_http_error_reply(allow):
    cog = moderation_cmds.ModerationCog(SimpleNamespace(), SETTINGS)
    ctx = make_ctx()
    response = MagicMock(status=400, reason="Bad Request")
    ctx.channel.purge.side_effect = discord.HTTPException(response, "too old")

    await moderation_cmds.ModerationCog.clear.callback(cog, ctx, 10)

    ctx.send_followup.assert_awaited_once_with("❌ I cannot delete messages older than 14 days!", ephemeral=True)


@pytest.mark.asyncio
async def test_purge_deletes_non_admin_messages(allow, monkeypatch):
    admin = Actor(actor_id=1, role_names=("Admin",))
    member = Actor(actor_id=2, role_names=("@everyone",))
    messages = [
        fresh_message(10, 2),
        fresh_message(11, 1),
        fresh_message(12, 2),
        fresh_message(13, 2, age=timedelta(days=20)),
    ]
    fetched_limits = []
    deleted = []

    async def fake_fetch(channel, limit):
        fetched_limits.append(limit)
        return messages

    async def fake_delete(message):
        deleted.append(message.message_id)
        return True

    actors = {1: admin, 2: member}
    monkeypatch.setattr(moderation_cmds, "fetch_recent_messages", fake_fetch)
    monkeypatch.setattr(moderation_cmds, "member_resolver", lambda guild: lambda m: actors.get(m.author_id))
    monkeypatch.setattr(moderation_cmds, "delete_discord_message", fake_delete)

    cog = moderation_cmds.ModerationCog(SimpleNamespace(), SETTINGS)
    ctx = make_ctx()
    await moderation_cmds.ModerationCog.purge.callback(cog, ctx, None)

    assert fetched_limits == [50]
    assert deleted == [10, 12]
    ctx.send_followup.assert_awaited_once_with(
        "✅ Deleted 2 messages from non-admin users.\n⚠️ Skipped 1 messages (too old or couldn't delete).",
        ephemeral=True,
    )


@pytest.mark.asyncio
async def test_purge_with_only_admin_messages(allow, monkeypatch):
    async def fake_fetch(channel, limit):
        return [fresh_message(10, 1)]

    monkeypatch.setattr(moderation_cmds, "fetch_recent_messages", fake_fetch)
    monkeypatch.setattr(
        moderation_cmds, "member_resolver", lambda guild: lambda m: Actor(actor_id=1, is_administrator=True)
    )

    cog = moderation_cmds.ModerationCog(SimpleNamespace(), SETTINGS)
    ctx = make_ctx()
    await moderation_cmds.ModerationCog.purge.callback(cog, ctx, 20)

    ctx.send_followup.assert_awaited_once_with(
        "❌ No messages found from non-admin users in the last 20 messages.", ephemeral=True
    )


@pytest.mark.asyncio
async def test_purge_fetch_failure(allow, monkeypatch):
    async def fake_fetch(channel, limit):
        raise ExternalCallFailure("history unavailable")

    monkeypatch.setattr(moderation_cmds, "fetch_recent_messages", fake_fetch)

    cog = moderation_cmds.ModerationCog(SimpleNamespace(), SETTINGS)
    ctx = make_ctx()
    await moderation_cmds.ModerationCog.purge.callback(cog, ctx, 20)

    message = ctx.send_followup.await_args.args[0]
    assert message.startswith("❌ There was an error purging messages.")


@pytest.mark.asyncio
async def test_purge_denied(deny):
    cog = moderation_cmds.ModerationCog(SimpleNamespace(), SETTINGS)
    ctx = make_ctx()

    await moderation_cmds.ModerationCog.purge.callback(cog, ctx, None)

    ctx.respond.assert_awaited_once_with(moderation_cmds.MANAGE_MESSAGES_DENIED, ephemeral=True)
    ctx.defer.assert_not_awaited()
