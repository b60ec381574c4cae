"""
Bulk removal of non-admin messages from a channel.

``purge`` works on messages that were already fetched (newest first) so the
Discord calls stay in the cog. Selection happens before the age check: the
"nothing eligible" outcome is decided on the full selection, and messages too
old to delete are reported as skipped.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Sequence

from lowballbot.moderation.deletion_executor import (
    DEFAULT_MAX_AGE,
    DEFAULT_PACING_SECONDS,
    DeleteFn,
    SleepFn,
    execute_deletions,
)
from lowballbot.moderation.errors import NoEligibleMessages
from lowballbot.moderation.message_filter import ActorResolver, select_for_deletion
from lowballbot.moderation.moderation_datatypes import DeletionSummary, ModerationMessage
from lowballbot.util.logger import get_logger

logger = get_logger("purge")

DEFAULT_PURGE_AMOUNT = 50
MIN_PURGE_AMOUNT = 1
MAX_PURGE_AMOUNT = 100


@dataclass(frozen=True, slots=True)
class PurgeLimits:
    """Platform constraints applied while deleting."""

    max_age: timedelta = DEFAULT_MAX_AGE
    pacing_seconds: float = DEFAULT_PACING_SECONDS


async def purge(
    channel_messages: Sequence[ModerationMessage],
    resolve_actor: ActorResolver,
    delete_fn: DeleteFn,
    *,
    requested_count: int = DEFAULT_PURGE_AMOUNT,
    limits: PurgeLimits = PurgeLimits(),
    now: datetime | None = None,
    sleep: SleepFn = asyncio.sleep,
) -> DeletionSummary:
    """Delete messages from non-exempt authors among the latest ``requested_count``.

    Raises
    ------
    NoEligibleMessages
        When none of the inspected messages is eligible.
    """
    inspected = list(channel_messages[:requested_count])
    selected = select_for_deletion(inspected, resolve_actor)

    if not selected:
        raise NoEligibleMessages(requested_count)

    logger.info("Purging %d of %d inspected messages", len(selected), len(inspected))
    return await execute_deletions(
        selected,
        delete_fn,
        max_age=limits.max_age,
        now=now,
        pacing_seconds=limits.pacing_seconds,
        sleep=sleep,
    )


def format_purge_result(summary: DeletionSummary) -> str:
    """Render the reply shown to the moderator after a purge."""
    result = f"✅ Deleted {summary.deleted_count} messages from non-admin users."
    if summary.skipped_count > 0:
        result += f"\n⚠️ Skipped {summary.skipped_count} messages (too old or couldn't delete)."
    return result


def format_no_eligible(error: NoEligibleMessages) -> str:
    return f"❌ No messages found from non-admin users in the last {error.inspected_count} messages."
