"""
Paced, age-limited deletion of selected messages.

Discord refuses to delete messages older than 14 days through the normal
endpoints, and a burst of single deletions trips its rate limit. The executor
processes messages strictly in order, skips (and counts) messages at or past
the age limit, and pauses after every successful deletion.

A failed deletion never aborts the batch: it is logged, counted as skipped,
and the next message is processed.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Iterable

from lowballbot.moderation.errors import RateLimited
from lowballbot.moderation.moderation_datatypes import DeletionSummary, ModerationMessage, SkipReason
from lowballbot.util.logger import get_logger

logger = get_logger("deletion_executor")

DeleteFn = Callable[[ModerationMessage], Awaitable[bool]]
SleepFn = Callable[[float], Awaitable[object]]

DEFAULT_MAX_AGE = timedelta(days=14)
DEFAULT_PACING_SECONDS = 0.1


def is_too_old(message: ModerationMessage, now: datetime, max_age: timedelta) -> bool:
    """Return True when the message age reaches ``max_age``; the boundary itself is too old."""
    return now - message.created_at >= max_age


async def execute_deletions(
    selected: Iterable[ModerationMessage],
    delete_fn: DeleteFn,
    *,
    max_age: timedelta = DEFAULT_MAX_AGE,
    now: datetime | None = None,
    pacing_seconds: float = DEFAULT_PACING_SECONDS,
    sleep: SleepFn = asyncio.sleep,
) -> DeletionSummary:
    """Delete ``selected`` in order and return the deleted/skipped counters.

    Parameters
    ----------
    selected:
        Messages chosen by the filter, in fetch order.
    delete_fn:
        Coroutine deleting one message; returns ``False`` on a handled
        failure and may raise :class:`RateLimited` or any other exception.
    max_age:
        Messages this old or older are skipped without calling ``delete_fn``.
    now:
        Reference time for the age check; defaults to the current UTC time.
    pacing_seconds:
        Pause after each successful deletion.
    sleep:
        Awaitable sleep, replaceable in tests.

    Returns
    -------
    DeletionSummary
        Deleted count and skipped counts per reason.
    """
    reference_time = now or datetime.now(timezone.utc)
    summary = DeletionSummary()

    for message in selected:
        if is_too_old(message, reference_time, max_age):
            summary.record_skipped(SkipReason.TOO_OLD)
            continue

        try:
            deleted = await delete_fn(message)
        except asyncio.CancelledError:
            raise
        except RateLimited as exc:
            logger.warning("Rate limited while deleting message %s: %s", message.message_id, exc)
            summary.record_skipped(SkipReason.RATE_LIMITED)
            continue
        except Exception as exc:
            logger.error("Error deleting message %s: %s", message.message_id, exc)
            summary.record_skipped(SkipReason.DELETE_FAILED)
            continue

        if not deleted:
            logger.warning("Could not delete message %s", message.message_id)
            summary.record_skipped(SkipReason.DELETE_FAILED)
            continue

        summary.record_deleted()
        await sleep(pacing_seconds)

    logger.debug(
        "Deletion batch finished: deleted=%d skipped=%d (%s)",
        summary.deleted_count,
        summary.skipped_count,
        dict(summary.skipped),
    )
    return summary
