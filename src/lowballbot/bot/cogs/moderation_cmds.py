"""
Moderation cog: bulk message removal.

- ``/clear`` deletes the latest messages regardless of author, skipping those
  past the platform age limit.
- ``/purge`` deletes the latest messages from members who are not exempt
  (see :mod:`lowballbot.moderation.permissions`), one by one with pacing, and
  reports how many were deleted and skipped.

Both commands require Manage Messages and reply ephemerally.
"""

import discord
from discord import Option
from discord.ext import commands

from lowballbot.configuration.app_configuration import BotSettings
from lowballbot.moderation.errors import ExternalCallFailure, NoEligibleMessages, PermissionDenied
from lowballbot.moderation.purge import (
    MAX_PURGE_AMOUNT,
    MIN_PURGE_AMOUNT,
    PurgeLimits,
    format_no_eligible,
    format_purge_result,
    purge as run_purge,
)
from lowballbot.util.discord_utils import (
    delete_discord_message,
    fetch_recent_messages,
    member_resolver,
    require_permissions,
)
from lowballbot.util.logger import get_logger

logger = get_logger("moderation_cog")

MANAGE_MESSAGES_DENIED = '❌ You need "Manage Messages" permission to use this command!'


class ModerationCog(commands.Cog):
    """Cog containing the message removal commands."""

    def __init__(self, bot: discord.Bot, settings: BotSettings):
        self.bot = bot
        self.settings = settings
        self.limits = PurgeLimits(
            max_age=settings.max_message_age,
            pacing_seconds=settings.purge_pacing_seconds,
        )
        logger.info("Moderation cog loaded")

    async def ensure_manage_messages(self, ctx: discord.ApplicationContext) -> bool:
        """Reply with the denial text and return False when the invoker lacks Manage Messages."""
        try:
            require_permissions(ctx, manage_messages=True)
        except PermissionDenied as exc:
            logger.info("Denied moderation command for %s: %s", ctx.author.id, exc)
            await ctx.respond(MANAGE_MESSAGES_DENIED, ephemeral=True)
            return False
        return True

    @commands.slash_command(name="clear", description="Clear messages from this channel")
    async def clear(
        self,
        ctx: discord.ApplicationContext,
        amount: Option(
            int,
            "Number of messages to delete (1-100)",
            min_value=MIN_PURGE_AMOUNT,
            max_value=MAX_PURGE_AMOUNT,
            required=True,
        ),  # type: ignore
    ) -> None:
        if not await self.ensure_manage_messages(ctx):
            return

        await ctx.defer(ephemeral=True)
        cutoff = discord.utils.utcnow() - self.settings.max_message_age
        try:
            deleted = await ctx.channel.purge(limit=amount, after=cutoff)
        except discord.HTTPException as exc:
            logger.error("Error clearing messages in %s: %s", ctx.channel.id, exc)
            await ctx.send_followup("❌ I cannot delete messages older than 14 days!", ephemeral=True)
            return

        logger.info("Cleared %d messages in channel %s for %s", len(deleted), ctx.channel.id, ctx.author.id)
        await ctx.send_followup(f"✅ Deleted {len(deleted)} messages!", ephemeral=True)

    @commands.slash_command(name="purge", description="Delete all messages from users without admin role")
    async def purge(
        self,
        ctx: discord.ApplicationContext,
        amount: Option(
            int,
            "Number of messages to check (1-100, default: 50)",
            min_value=MIN_PURGE_AMOUNT,
            max_value=MAX_PURGE_AMOUNT,
            required=False,
            default=None,
        ),  # type: ignore
    ) -> None:
        requested = amount or self.settings.default_purge_amount
        if not await self.ensure_manage_messages(ctx):
            return

        await ctx.defer(ephemeral=True)
        try:
            messages = await fetch_recent_messages(ctx.channel, requested)
            summary = await run_purge(
                messages,
                member_resolver(ctx.guild),
                delete_discord_message,
                requested_count=requested,
                limits=self.limits,
            )
        except NoEligibleMessages as exc:
            await ctx.send_followup(format_no_eligible(exc), ephemeral=True)
            return
        except (ExternalCallFailure, discord.HTTPException) as exc:
            logger.error("Error in purge command: %s", exc)
            await ctx.send_followup(
                "❌ There was an error purging messages. "
                "Make sure I have permission to delete messages in this channel.",
                ephemeral=True,
            )
            return

        logger.info(
            "Purge in channel %s by %s: deleted=%d skipped=%d",
            ctx.channel.id,
            ctx.author.id,
            summary.deleted_count,
            summary.skipped_count,
        )
        await ctx.send_followup(format_purge_result(summary), ephemeral=True)


def setup(bot: discord.Bot, settings: BotSettings) -> None:
    """Register the moderation cog."""
    bot.add_cog(ModerationCog(bot, settings))
