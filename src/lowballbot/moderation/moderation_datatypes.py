"""
Value types for the moderation layer.

These types decouple the moderation logic from py-cord objects. Adapters in
:mod:`lowballbot.util.discord_utils` build them from live Discord objects;
tests build them directly.

Key Features:
- `Actor`: A guild member as seen by the permission rule (role names, role ids,
  administrator flag).
- `ModerationMessage`: A fetched message normalized to author, timestamp, and
  bot flag.
- `ModerationDecision`: Per-message eligibility produced during one purge.
- `DeletionSummary`: Deleted and skipped counters returned by the executor.
- `RoleToggleResult`: Every user-facing outcome of a role button press.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


@dataclass(frozen=True, slots=True)
class Actor:
    """Guild member snapshot used for permission checks.

    Attributes:
        actor_id (int): Snowflake of the member.
        role_names (tuple[str, ...]): Role names in guild order.
        is_administrator (bool): Whether the member has the Administrator permission.
        role_ids (frozenset[int]): Role snowflakes, used for "already holds" checks.
    """

    actor_id: int
    role_names: tuple[str, ...] = ()
    is_administrator: bool = False
    role_ids: frozenset[int] = frozenset()

    def holds_role(self, role_id: int) -> bool:
        return role_id in self.role_ids


@dataclass(frozen=True, slots=True)
class ModerationMessage:
    """Normalized representation of a fetched channel message.

    Attributes:
        message_id (int): Snowflake of the message.
        author_id (int): Snowflake of the author.
        created_at (datetime): Timezone-aware creation time.
        author_is_bot (bool): True when the author is an automated account.
        discord_message (Any): Optional originating ``discord.Message``.
    """

    message_id: int
    author_id: int
    created_at: datetime
    author_is_bot: bool = False
    discord_message: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class ModerationDecision:
    """Whether one message was selected for deletion."""

    message: ModerationMessage
    eligible: bool


@dataclass(frozen=True, slots=True)
class GuildRole:
    role_id: int
    name: str

    @property
    def mention(self) -> str:
        return f"<@&{self.role_id}>"


class SkipReason(Enum):
    """Why a selected message was not deleted."""

    TOO_OLD = "too_old"
    RATE_LIMITED = "rate_limited"
    DELETE_FAILED = "delete_failed"

    def __str__(self) -> str:
        return self.value


@dataclass(slots=True)
class DeletionSummary:
    """Outcome of one deletion batch.

    ``skipped`` counts per :class:`SkipReason`; ``skipped_count`` is the total
    reported to the user.
    """

    deleted_count: int = 0
    skipped: Counter = field(default_factory=Counter)

    @property
    def skipped_count(self) -> int:
        return sum(self.skipped.values())

    def record_deleted(self) -> None:
        self.deleted_count += 1

    def record_skipped(self, reason: SkipReason) -> None:
        self.skipped[reason] += 1


class RoleAction(Enum):
    """Role button actions keyed by their component custom id."""

    ADD = "add_lowball_role"
    REMOVE = "remove_lowball_role"

    def __str__(self) -> str:
        return self.value


class RoleToggleResult(Enum):
    """User-facing outcome of a role grant or revoke."""

    ALREADY_HELD = "already_held"
    GRANTED = "granted"
    NOT_HELD = "not_held"
    REVOKED = "revoked"
    ROLE_NOT_FOUND = "role_not_found"
    INTERNAL_ERROR = "internal_error"

    def __str__(self) -> str:
        return self.value
