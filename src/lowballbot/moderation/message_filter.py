"""Purge candidate selection."""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional

from lowballbot.moderation.moderation_datatypes import Actor, ModerationDecision, ModerationMessage
from lowballbot.moderation.permissions import is_deletable

ActorResolver = Callable[[ModerationMessage], Optional[Actor]]


def build_moderation_decisions(
    messages: Iterable[ModerationMessage],
    resolve_actor: ActorResolver,
) -> List[ModerationDecision]:
    """Evaluate every message and keep the input order.

    Parameters
    ----------
    messages:
        Messages as fetched from the channel, newest first.
    resolve_actor:
        Maps a message to its author's :class:`Actor`, or ``None`` when the
        author is no longer a guild member.

    Returns
    -------
    list[ModerationDecision]
        One decision per message. Bot messages are never resolved.
    """
    decisions: List[ModerationDecision] = []
    for message in messages:
        actor = None if message.author_is_bot else resolve_actor(message)
        decisions.append(ModerationDecision(message=message, eligible=is_deletable(message, actor)))
    return decisions


def select_for_deletion(
    messages: Iterable[ModerationMessage],
    resolve_actor: ActorResolver,
) -> List[ModerationMessage]:
    """Return the deletable messages in their original order.

    Message age is not considered here; the deletion executor skips and
    counts messages past the platform limit.
    """
    return [decision.message for decision in build_moderation_decisions(messages, resolve_actor) if decision.eligible]
