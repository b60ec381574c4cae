"""
discord_utils.py
================

Low-level Discord helpers for Lowball Bot.

This module converts py-cord objects into the plain moderation values, wraps
message deletion and history fetching with error classification, and exposes
a :class:`RoleGateway` implementation backed by a guild. Nothing here keeps
state between calls.
"""

import datetime
from typing import Callable, List, Optional, Sequence, Union

import discord

from lowballbot.moderation.errors import ExternalCallFailure, PermissionDenied, RateLimited
from lowballbot.moderation.moderation_datatypes import Actor, GuildRole, ModerationMessage
from lowballbot.util.logger import get_logger

logger = get_logger("discord_utils")


# ==========================================
# Conversions
# ==========================================

def actor_from_member(member: discord.Member) -> Actor:
    """
    Build an :class:`Actor` snapshot from a guild member.

    Args:
        member (discord.Member): Member to convert.

    Returns:
        Actor: Role names and ids in guild order plus the Administrator flag.
    """
    roles = list(getattr(member, "roles", []) or [])
    permissions = getattr(member, "guild_permissions", None)
    return Actor(
        actor_id=member.id,
        role_names=tuple(role.name for role in roles),
        is_administrator=bool(getattr(permissions, "administrator", False)),
        role_ids=frozenset(role.id for role in roles),
    )


def message_from_discord(message: discord.Message) -> ModerationMessage:
    """
    Normalize a Discord message, keeping a reference for later deletion.

    Args:
        message (discord.Message): Message fetched from channel history.

    Returns:
        ModerationMessage: Normalized message with a UTC creation time.
    """
    created_at = message.created_at
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=datetime.timezone.utc)
    return ModerationMessage(
        message_id=message.id,
        author_id=message.author.id,
        created_at=created_at,
        author_is_bot=bool(message.author.bot),
        discord_message=message,
    )


def guild_role_from_discord(role: discord.Role) -> GuildRole:
    return GuildRole(role_id=role.id, name=role.name)


def member_resolver(guild: discord.Guild) -> Callable[[ModerationMessage], Optional[Actor]]:
    """Return a resolver mapping a message to its author's Actor via the member cache."""

    def resolve(message: ModerationMessage) -> Optional[Actor]:
        member = guild.get_member(message.author_id)
        if member is None:
            return None
        return actor_from_member(member)

    return resolve


# ==========================================
# Permission checks
# ==========================================

def has_permissions(application_context: discord.ApplicationContext, **required_permissions) -> bool:
    """
    Check if the command issuer has all specified permissions in the guild.

    Args:
        application_context (discord.ApplicationContext): The command context.
        **required_permissions: Permission flags to check.

    Returns:
        bool: True if all permissions are present, False otherwise.
    """
    if not isinstance(application_context.author, discord.Member):
        return False
    permissions = application_context.author.guild_permissions
    return all(getattr(permissions, permission_name, False) for permission_name in required_permissions)


def require_permissions(application_context: discord.ApplicationContext, **required_permissions) -> None:
    """Raise :class:`PermissionDenied` naming the first missing permission."""
    if has_permissions(application_context, **required_permissions):
        return
    raise PermissionDenied(next(iter(required_permissions), "unknown"))


# ==========================================
# Messages
# ==========================================

async def fetch_recent_messages(channel: discord.abc.Messageable, limit: int) -> List[ModerationMessage]:
    """
    Fetch the latest ``limit`` messages, newest first.

    Raises:
        ExternalCallFailure: If the history cannot be read.
    """
    try:
        return [message_from_discord(message) async for message in channel.history(limit=limit)]
    except discord.HTTPException as exc:
        raise ExternalCallFailure(f"Could not fetch messages: {exc}") from exc


async def delete_discord_message(message: Union[ModerationMessage, discord.Message]) -> bool:
    """
    Delete a message, classifying recoverable errors.

    Args:
        message: A :class:`ModerationMessage` carrying its Discord message, or
            a ``discord.Message``.

    Returns:
        bool: True if deleted; False when already gone or forbidden.

    Raises:
        RateLimited: If Discord answered 429.
    """
    target = message.discord_message if isinstance(message, ModerationMessage) else message
    if target is None:
        logger.warning("No Discord message attached to %s; cannot delete", getattr(message, "message_id", "?"))
        return False

    try:
        await target.delete()
        return True
    except discord.NotFound:
        logger.info("Message %s was already deleted", target.id)
        return False
    except discord.Forbidden:
        logger.warning("No permission to delete message %s", target.id)
        return False
    except discord.HTTPException as exc:
        if exc.status == 429:
            raise RateLimited(str(exc)) from exc
        raise


# ==========================================
# Roles
# ==========================================

class DiscordRoleGateway:
    """:class:`~lowballbot.moderation.role_toggle.RoleGateway` over a live guild."""

    def __init__(self, guild: discord.Guild) -> None:
        self.guild = guild

    def list_roles(self) -> Sequence[GuildRole]:
        return [guild_role_from_discord(role) for role in self.guild.roles]

    async def _member(self, actor_id: int) -> Optional[discord.Member]:
        member = self.guild.get_member(actor_id)
        if member is not None:
            return member
        try:
            return await self.guild.fetch_member(actor_id)
        except discord.NotFound:
            return None

    async def fetch_actor(self, actor_id: int) -> Optional[Actor]:
        member = await self._member(actor_id)
        return actor_from_member(member) if member is not None else None

    async def _role_and_member(self, actor_id: int, role: GuildRole) -> tuple[discord.Role, discord.Member]:
        discord_role = self.guild.get_role(role.role_id)
        member = await self._member(actor_id)
        if discord_role is None or member is None:
            raise ExternalCallFailure(f"Role {role.role_id} or member {actor_id} disappeared")
        return discord_role, member

    async def add_role(self, actor_id: int, role: GuildRole) -> None:
        discord_role, member = await self._role_and_member(actor_id, role)
        await member.add_roles(discord_role, reason="Self-assigned via role button")

    async def remove_role(self, actor_id: int, role: GuildRole) -> None:
        discord_role, member = await self._role_and_member(actor_id, role)
        await member.remove_roles(discord_role, reason="Self-removed via role button")
