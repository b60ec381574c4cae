"""
Admin exemption rule.

Members holding a role named ``admin`` or ``administrator`` (any casing), or
the guild Administrator permission, are never touched by purge or
auto-delete. Every call site goes through :func:`is_exempt` so the rule has a
single definition.
"""

from __future__ import annotations

from lowballbot.moderation.moderation_datatypes import Actor, ModerationMessage

EXEMPT_ROLE_NAMES: frozenset[str] = frozenset({"admin", "administrator"})


def is_exempt(actor: Actor) -> bool:
    """Return True when ``actor`` is exempt from moderation actions.

    Args:
        actor (Actor): Member snapshot to evaluate.

    Returns:
        bool: True if any role name matches an exempt name case-insensitively
        or the member has the Administrator permission.
    """
    if actor.is_administrator:
        return True
    return any(name.lower() in EXEMPT_ROLE_NAMES for name in actor.role_names)


def is_deletable(message: ModerationMessage, actor: Actor | None) -> bool:
    """Decide whether a message may be removed by purge or auto-delete.

    Bot-authored messages are always kept. A message whose author could not be
    resolved to a guild member is deletable.
    """
    if message.author_is_bot:
        return False
    if actor is None:
        return True
    return not is_exempt(actor)
