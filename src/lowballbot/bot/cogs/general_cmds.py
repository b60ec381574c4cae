"""
General commands cog: /ping, /help, /userinfo, /say.
"""

import discord
from discord import Option
from discord.ext import commands

from lowballbot.util.logger import get_logger

logger = get_logger("general_commands")

COMMAND_HELP: tuple[tuple[str, str], ...] = (
    ("/lowballmethod", "Submit a car for lowballing"),
    ("/ping", "Check if the bot is working"),
    ("/help", "Show this help message"),
    ("/clear [amount]", "Delete messages (1-100)"),
    ("/userinfo [user]", "Get info about a user"),
    ("/say [message]", "Make the bot say something"),
    ("/purge [amount]", "Delete messages from users without admin role"),
    ("/setup-reaction-roles", "Setup reaction roles for lowball role (Admin only)"),
)


def build_help_embed() -> discord.Embed:
    embed = discord.Embed(
        title="🤖 Bot Commands",
        description="Here are all the commands you can use:",
        color=discord.Color(0x0099FF),
        timestamp=discord.utils.utcnow(),
    )
    for name, value in COMMAND_HELP:
        embed.add_field(name=name, value=value, inline=False)
    return embed


def build_userinfo_embed(user: discord.abc.User, member: discord.Member | None) -> discord.Embed:
    """Summarize a user's account and, when known, their membership."""
    embed = discord.Embed(
        title=f"👤 {user.name}'s Information",
        color=discord.Color(0x0099FF),
        timestamp=discord.utils.utcnow(),
    )
    embed.set_thumbnail(url=user.display_avatar.url)
    embed.add_field(name="Username", value=user.name, inline=True)
    embed.add_field(name="User ID", value=str(user.id), inline=True)
    embed.add_field(name="Account Created", value=user.created_at.strftime("%a %b %d %Y"), inline=True)
    joined = member.joined_at.strftime("%a %b %d %Y") if member is not None and member.joined_at else "Not in server"
    embed.add_field(name="Joined Server", value=joined, inline=True)
    return embed


class GeneralCog(commands.Cog):
    """Utility commands available to everyone."""

    def __init__(self, bot: discord.Bot):
        self.bot = bot
        logger.info("General cog loaded")

    @commands.slash_command(name="ping", description="Check if the bot is working")
    async def ping(self, ctx: discord.ApplicationContext) -> None:
        latency_ms = round(self.bot.latency * 1000)
        await ctx.respond(f"🏓 Pong! Bot is working fine. Ping: {latency_ms}ms", ephemeral=True)

    @commands.slash_command(name="help", description="Show all available commands")
    async def help(self, ctx: discord.ApplicationContext) -> None:
        await ctx.respond(embed=build_help_embed(), ephemeral=True)

    @commands.slash_command(name="userinfo", description="Get information about a user")
    async def userinfo(
        self,
        ctx: discord.ApplicationContext,
        user: Option(discord.User, "The user to get info about", required=False, default=None),  # type: ignore
    ) -> None:
        target = user or ctx.author
        member = ctx.guild.get_member(target.id) if ctx.guild else None
        await ctx.respond(embed=build_userinfo_embed(target, member), ephemeral=True)

    @commands.slash_command(name="say", description="Make the bot say something")
    async def say(
        self,
        ctx: discord.ApplicationContext,
        message: Option(str, "What you want the bot to say", required=True),  # type: ignore
    ) -> None:
        try:
            await ctx.channel.send(message)
        except discord.HTTPException as exc:
            logger.error("Error sending /say message in %s: %s", getattr(ctx.channel, "id", "?"), exc)
            await ctx.respond("❌ I couldn't send that message here.", ephemeral=True)
            return
        await ctx.respond("✅ Message sent!", ephemeral=True)


def setup(bot: discord.Bot) -> None:
    """Register the general cog."""
    bot.add_cog(GeneralCog(bot))
