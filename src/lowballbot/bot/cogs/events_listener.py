"""Event listener Cog for Lowball Bot.

This cog handles bot lifecycle events (on_ready) and application command
errors. Message events are handled by the MessageListenerCog.
"""

import discord
from discord.ext import commands

from lowballbot.bot.role_ui import RoleButtonsView
from lowballbot.configuration.app_configuration import BotSettings
from lowballbot.health.keep_alive import KeepAlive
from lowballbot.util.logger import get_logger

logger = get_logger("events_listener_cog")

GENERIC_ERROR_REPLY = "❌ Something went wrong while running that command. Please try again."


class EventsListenerCog(commands.Cog):
    """Cog containing bot lifecycle and command error handlers."""

    def __init__(self, bot: discord.Bot, settings: BotSettings):
        self.bot = bot
        self.settings = settings
        self.keep_alive: KeepAlive | None = None
        self._views_registered = False
        logger.info("Events listener cog loaded")

    @commands.Cog.listener(name="on_ready")
    async def on_ready(self):
        """Log the session, re-attach the role buttons, and start the keep-alive ping.

        on_ready fires again after every reconnect; the view and the ping
        task are only set up on the first call.
        """
        if self.bot.user:
            logger.info(f"Ready! Logged in as {self.bot.user} (ID: {self.bot.user.id})")
        else:
            logger.warning("Bot partially connected, but user information not yet available.")

        if not self._views_registered:
            self.bot.add_view(RoleButtonsView(self.settings.lowball_role_name))
            self._views_registered = True
            logger.info("Registered persistent role buttons for %r", self.settings.lowball_role_name)

        if self.settings.keep_alive_enabled and self.keep_alive is None:
            self.keep_alive = KeepAlive(self.settings.service_url, self.settings.keep_alive_interval)
            self.keep_alive.start()

    @commands.Cog.listener(name="on_application_command_error")
    async def on_application_command_error(
        self, ctx: discord.ApplicationContext, error: discord.DiscordException
    ) -> None:
        logger.error("Error in command %s: %s", getattr(ctx.command, "qualified_name", "?"), error)
        try:
            await ctx.respond(GENERIC_ERROR_REPLY, ephemeral=True)
        except discord.HTTPException as exc:
            logger.error("Failed to send error response to user: %s", exc)

    async def shutdown(self) -> None:
        """Stop the keep-alive task if it was started."""
        if self.keep_alive is not None:
            await self.keep_alive.stop()
            self.keep_alive = None


def setup(bot: discord.Bot, settings: BotSettings) -> None:
    """Register the events listener cog."""
    bot.add_cog(EventsListenerCog(bot, settings))
