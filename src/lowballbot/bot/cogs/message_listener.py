"""Message listener Cog for Lowball Bot.

Keeps the configured auto-delete channel reserved for admins: any message from
a non-exempt member is removed as soon as it arrives.
"""

import discord
from discord.ext import commands

from lowballbot.configuration.app_configuration import BotSettings
from lowballbot.moderation.permissions import is_deletable
from lowballbot.util.discord_utils import delete_discord_message, member_resolver, message_from_discord
from lowballbot.util.logger import get_logger

logger = get_logger("message_listener_cog")


class MessageListenerCog(commands.Cog):
    """Cog responsible for auto-deleting messages in the locked channel."""

    def __init__(self, bot: discord.Bot, settings: BotSettings):
        self.bot = bot
        self.settings = settings
        logger.info("Message listener cog loaded")

    def _is_watched(self, message: discord.Message) -> bool:
        channel_id = self.settings.auto_delete_channel_id
        return channel_id is not None and message.channel.id == channel_id

    @commands.Cog.listener(name="on_message")
    async def on_message(self, message: discord.Message) -> None:
        if message.author.bot or message.guild is None or not self._is_watched(message):
            return

        moderation_message = message_from_discord(message)
        actor = member_resolver(message.guild)(moderation_message)
        if not is_deletable(moderation_message, actor):
            return

        try:
            deleted = await delete_discord_message(moderation_message)
        except Exception as exc:
            logger.error("Error auto-deleting message %s: %s", message.id, exc)
            return

        if deleted:
            logger.info("Auto-deleted message from %s in %s", message.author.name, message.channel.name)


def setup(bot: discord.Bot, settings: BotSettings) -> None:
    """Register the message listener cog."""
    bot.add_cog(MessageListenerCog(bot, settings))
