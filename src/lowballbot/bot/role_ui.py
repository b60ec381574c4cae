"""
Persistent add/remove buttons for the self-assignable lowball role.

The view has no timeout and fixed custom ids, so registering one instance with
``bot.add_view`` at startup keeps buttons on old panel messages working after
a restart.
"""

from __future__ import annotations

import discord

from lowballbot.moderation.moderation_datatypes import RoleAction, RoleToggleResult
from lowballbot.moderation.role_toggle import RoleToggle, describe_result
from lowballbot.util.discord_utils import DiscordRoleGateway
from lowballbot.util.logger import get_logger

logger = get_logger("role_ui")

DEFAULT_PANEL_TITLE = "Facebook Lowball Method"
DEFAULT_PANEL_DESCRIPTION = (
    "Use the green button below to claim your role. Use the red one if you got the role "
    "but then decided to remove it or if you don't want to get pings from it."
)


def build_role_panel_embed(title: str, description: str, role_mention: str) -> discord.Embed:
    """Create the panel embed that mentions the role."""
    embed = discord.Embed(
        title=title,
        description=f"{description}\n\n{role_mention}\n\nUse the button below!",
        color=discord.Color(0x2F3136),
        timestamp=discord.utils.utcnow(),
    )
    return embed


class RoleButtonsView(discord.ui.View):
    """Add and remove buttons bound to one role name."""

    def __init__(self, role_name: str):
        super().__init__(timeout=None)
        self.role_name = role_name

    async def toggle(self, interaction: discord.Interaction, action: RoleAction) -> RoleToggleResult:
        """Apply ``action`` for the clicking member and reply ephemerally."""
        role_name = self.role_name
        if interaction.guild is None or interaction.user is None:
            result = RoleToggleResult.INTERNAL_ERROR
        else:
            toggle = RoleToggle(DiscordRoleGateway(interaction.guild), self.role_name)
            result = await toggle.handle_button(interaction.user.id, action)
            role_name = toggle.display_name()

        await interaction.response.send_message(describe_result(result, role_name), ephemeral=True)
        return result

    @discord.ui.button(
        label="Add the role!",
        style=discord.ButtonStyle.success,
        emoji="⭐",
        custom_id=RoleAction.ADD.value,
    )
    async def add_button(self, button: discord.ui.Button, interaction: discord.Interaction):
        await self.toggle(interaction, RoleAction.ADD)

    @discord.ui.button(
        label="Remove role / No more pings",
        style=discord.ButtonStyle.danger,
        emoji="❌",
        custom_id=RoleAction.REMOVE.value,
    )
    async def remove_button(self, button: discord.ui.Button, interaction: discord.Interaction):
        await self.toggle(interaction, RoleAction.REMOVE)
