"""Tests for the role grant/revoke logic."""

from unittest.mock import MagicMock

import pytest

from lowballbot.moderation import role_toggle
from lowballbot.moderation.errors import RoleNotFound
from lowballbot.moderation.moderation_datatypes import GuildRole, RoleAction, RoleToggleResult
from lowballbot.moderation.role_toggle import RoleToggle, describe_result, require_role, resolve_role


@pytest.fixture()
def mock_logger(monkeypatch):
    fake = MagicMock()
    monkeypatch.setattr(role_toggle, "logger", fake)
    return fake


def test_resolve_role_ignores_case(lowball_role):
    roles = [GuildRole(1, "@everyone"), lowball_role]
    assert resolve_role(roles, "lowball") == lowball_role
    assert resolve_role(roles, "LOWBALL") == lowball_role
    assert resolve_role(roles, "lowballer") is None


def test_require_role_raises_when_missing():
    with pytest.raises(RoleNotFound) as excinfo:
        require_role([GuildRole(1, "@everyone")], "lowball")
    assert excinfo.value.role_name == "lowball"


@pytest.mark.asyncio
async def test_grant_twice_mutates_once(role_gateway, mock_logger):
    toggle = RoleToggle(role_gateway, "lowball")

    assert await toggle.grant(7) is RoleToggleResult.GRANTED
    assert await toggle.grant(7) is RoleToggleResult.ALREADY_HELD
    assert role_gateway.calls == [("add", 7, 555)]


@pytest.mark.asyncio
async def test_revoke_twice_mutates_once(role_gateway, mock_logger):
    role_gateway.members[7] = {555}
    toggle = RoleToggle(role_gateway, "lowball")

    assert await toggle.revoke(7) is RoleToggleResult.REVOKED
    assert await toggle.revoke(7) is RoleToggleResult.NOT_HELD
    assert role_gateway.calls == [("remove", 7, 555)]


@pytest.mark.asyncio
async def test_grant_when_already_held_makes_no_calls(role_gateway, mock_logger):
    role_gateway.members[7] = {555}

    result = await RoleToggle(role_gateway, "lowball").grant(7)

    assert result is RoleToggleResult.ALREADY_HELD
    assert role_gateway.calls == []


@pytest.mark.asyncio
async def test_missing_role_returns_role_not_found_and_logs_once(role_gateway, mock_logger):
    role_gateway.roles = [GuildRole(1, "@everyone")]

    result = await RoleToggle(role_gateway, "lowball").grant(7)

    assert result is RoleToggleResult.ROLE_NOT_FOUND
    assert role_gateway.calls == []
    assert mock_logger.error.call_count == 1


@pytest.mark.asyncio
async def test_unknown_member_is_treated_as_holding_nothing(role_gateway, mock_logger):
    result = await RoleToggle(role_gateway, "lowball").revoke(404)

    assert result is RoleToggleResult.NOT_HELD


@pytest.mark.asyncio
async def test_handle_button_dispatches_by_action(role_gateway, mock_logger):
    toggle = RoleToggle(role_gateway, "lowball")

    assert await toggle.handle_button(7, RoleAction.ADD) is RoleToggleResult.GRANTED
    assert await toggle.handle_button(7, RoleAction.REMOVE) is RoleToggleResult.REVOKED


@pytest.mark.asyncio
async def test_handle_button_turns_failures_into_internal_error(role_gateway, mock_logger):
    async def broken_add(actor_id, role):
        raise RuntimeError("missing permissions")

    role_gateway.add_role = broken_add

    result = await RoleToggle(role_gateway, "lowball").handle_button(7, RoleAction.ADD)

    assert result is RoleToggleResult.INTERNAL_ERROR
    mock_logger.exception.assert_called_once()


def test_describe_result_covers_every_outcome():
    for result in RoleToggleResult:
        assert describe_result(result, "lowball")
    assert "already have the lowball role" in describe_result(RoleToggleResult.ALREADY_HELD, "lowball")
    assert '"lowball"' in describe_result(RoleToggleResult.ROLE_NOT_FOUND, "lowball")


def test_display_name_uses_guild_spelling(role_gateway):
    assert RoleToggle(role_gateway, "LOWBALL").display_name() == "Lowball"
    assert RoleToggle(role_gateway, "missing").display_name() == "missing"
