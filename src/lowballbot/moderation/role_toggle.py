"""
Self-service grant and revoke of a single named role.

The role is looked up by name (case-insensitive) and the member is re-read
from the gateway on every call, so a double click on the same button yields
``GRANTED`` then ``ALREADY_HELD`` with exactly one role mutation.
"""

from __future__ import annotations

import asyncio
from typing import Iterable, Optional, Protocol, Sequence

from lowballbot.moderation.errors import RoleNotFound
from lowballbot.moderation.moderation_datatypes import Actor, GuildRole, RoleAction, RoleToggleResult
from lowballbot.util.logger import get_logger

logger = get_logger("role_toggle")


class RoleGateway(Protocol):
    """Guild operations needed to toggle a role."""

    def list_roles(self) -> Sequence[GuildRole]:
        ...

    async def fetch_actor(self, actor_id: int) -> Optional[Actor]:
        ...

    async def add_role(self, actor_id: int, role: GuildRole) -> None:
        ...

    async def remove_role(self, actor_id: int, role: GuildRole) -> None:
        ...


def resolve_role(roles: Iterable[GuildRole], role_name: str) -> Optional[GuildRole]:
    """Return the first role whose name matches ``role_name`` ignoring case."""
    wanted = role_name.lower()
    for role in roles:
        if role.name.lower() == wanted:
            return role
    return None


def require_role(roles: Iterable[GuildRole], role_name: str) -> GuildRole:
    """Like :func:`resolve_role` but raises :class:`RoleNotFound` when missing."""
    role = resolve_role(roles, role_name)
    if role is None:
        raise RoleNotFound(role_name)
    return role


class RoleToggle:
    """Grant or revoke one configured role through a :class:`RoleGateway`.

    Parameters
    ----------
    gateway:
        Guild access used for role lookup, member lookup, and mutation.
    role_name:
        Name of the role to toggle, matched case-insensitively.
    """

    def __init__(self, gateway: RoleGateway, role_name: str) -> None:
        self.gateway = gateway
        self.role_name = role_name

    def display_name(self) -> str:
        """Name of the role as the guild spells it, or the configured name when it is missing."""
        role = resolve_role(self.gateway.list_roles(), self.role_name)
        return role.name if role is not None else self.role_name

    async def _prepare(self, actor_id: int) -> tuple[GuildRole, Actor]:
        role = require_role(self.gateway.list_roles(), self.role_name)
        actor = await self.gateway.fetch_actor(actor_id)
        if actor is None:
            actor = Actor(actor_id=actor_id)
        return role, actor

    async def grant(self, actor_id: int) -> RoleToggleResult:
        try:
            role, actor = await self._prepare(actor_id)
        except RoleNotFound as exc:
            logger.error("Cannot grant role to %s: %s", actor_id, exc)
            return RoleToggleResult.ROLE_NOT_FOUND

        if actor.holds_role(role.role_id):
            return RoleToggleResult.ALREADY_HELD

        await self.gateway.add_role(actor_id, role)
        logger.info("Granted role %s to member %s", role.name, actor_id)
        return RoleToggleResult.GRANTED

    async def revoke(self, actor_id: int) -> RoleToggleResult:
        try:
            role, actor = await self._prepare(actor_id)
        except RoleNotFound as exc:
            logger.error("Cannot revoke role from %s: %s", actor_id, exc)
            return RoleToggleResult.ROLE_NOT_FOUND

        if not actor.holds_role(role.role_id):
            return RoleToggleResult.NOT_HELD

        await self.gateway.remove_role(actor_id, role)
        logger.info("Removed role %s from member %s", role.name, actor_id)
        return RoleToggleResult.REVOKED

    async def handle_button(self, actor_id: int, action: RoleAction) -> RoleToggleResult:
        """Run the grant or revoke behind a role button; never raises."""
        try:
            if action is RoleAction.ADD:
                return await self.grant(actor_id)
            return await self.revoke(actor_id)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.exception("Error handling role button %s for member %s: %s", action, actor_id, exc)
            return RoleToggleResult.INTERNAL_ERROR


def describe_result(result: RoleToggleResult, role_name: str) -> str:
    """Return the ephemeral reply for a role button outcome."""
    messages = {
        RoleToggleResult.ALREADY_HELD: f"❌ You already have the {role_name} role!",
        RoleToggleResult.GRANTED: f"✅ You have been given the {role_name} role!",
        RoleToggleResult.NOT_HELD: f"❌ You don't have the {role_name} role to remove!",
        RoleToggleResult.REVOKED: f"✅ The {role_name} role has been removed from you!",
        RoleToggleResult.ROLE_NOT_FOUND: (
            f'❌ Could not find the "{role_name}" role. '
            "Please make sure it exists and the bot can see it."
        ),
        RoleToggleResult.INTERNAL_ERROR: (
            "❌ There was an error processing your request. "
            "Please make sure the bot has permission to manage roles."
        ),
    }
    return messages[result]
