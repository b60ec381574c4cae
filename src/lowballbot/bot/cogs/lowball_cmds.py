"""
Lowball cog: submission modal and the self-assign role panel.
"""

import discord
from discord import Option
from discord.ext import commands

from lowballbot.bot.lowball_modal import LowballModal
from lowballbot.bot.role_ui import (
    DEFAULT_PANEL_DESCRIPTION,
    DEFAULT_PANEL_TITLE,
    RoleButtonsView,
    build_role_panel_embed,
)
from lowballbot.configuration.app_configuration import BotSettings
from lowballbot.moderation.errors import PermissionDenied, RoleNotFound
from lowballbot.moderation.role_toggle import require_role
from lowballbot.util.discord_utils import DiscordRoleGateway, require_permissions
from lowballbot.util.logger import get_logger

logger = get_logger("lowball_cog")


class LowballCog(commands.Cog):
    """Commands specific to the lowballing workflow."""

    def __init__(self, bot: discord.Bot, settings: BotSettings):
        self.bot = bot
        self.settings = settings
        logger.info("Lowball cog loaded")

    @commands.slash_command(name="lowballmethod", description="Submit a car for lowballing")
    async def lowballmethod(self, ctx: discord.ApplicationContext) -> None:
        modal = LowballModal(self.bot, self.settings.lowball_channel_id, self.settings.ping_role_id)
        await ctx.send_modal(modal)

    @commands.slash_command(
        name="setup-reaction-roles",
        description="Setup reaction roles for the lowball role (Admin only)",
    )
    async def setup_reaction_roles(
        self,
        ctx: discord.ApplicationContext,
        title: Option(str, "Title for the reaction role message", required=False, default=None),  # type: ignore
        description: Option(str, "Description for the reaction role message", required=False, default=None),  # type: ignore
    ) -> None:
        """Post the role panel embed with persistent add/remove buttons."""
        role_name = self.settings.lowball_role_name
        try:
            require_permissions(ctx, administrator=True)
            role = require_role(DiscordRoleGateway(ctx.guild).list_roles(), role_name)
        except PermissionDenied:
            await ctx.respond("❌ You need Administrator permission to use this command!", ephemeral=True)
            return
        except RoleNotFound:
            logger.error("Role panel requested but role %r does not exist in guild %s", role_name, ctx.guild.id)
            await ctx.respond(
                f'❌ Could not find the "{role_name}" role. Please make sure it exists first!',
                ephemeral=True,
            )
            return

        embed = build_role_panel_embed(
            title or DEFAULT_PANEL_TITLE,
            description or DEFAULT_PANEL_DESCRIPTION,
            role.mention,
        )
        try:
            await ctx.channel.send(embed=embed, view=RoleButtonsView(role_name))
        except discord.HTTPException as exc:
            logger.error("Error setting up reaction roles: %s", exc)
            await ctx.respond("❌ There was an error setting up reaction roles. Please try again.", ephemeral=True)
            return

        logger.info("Role panel for %s posted in channel %s", role.name, ctx.channel.id)
        await ctx.respond("✅ Reaction roles message has been set up successfully!", ephemeral=True)


def setup(bot: discord.Bot, settings: BotSettings) -> None:
    """Register the lowball cog."""
    bot.add_cog(LowballCog(bot, settings))
