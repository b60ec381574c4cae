"""
Lowball submission modal.

``/lowballmethod`` opens this modal. On submit the answers are formatted into
a post that pings the lowball role and is sent to the submissions channel.
"""

from __future__ import annotations

from typing import Optional

import discord

from lowballbot.util.logger import get_logger

logger = get_logger("lowball_modal")

MODAL_CUSTOM_ID = "lowball_modal"
CAR_MAX_LENGTH = 100
PRICE_MAX_LENGTH = 20
LINK_MAX_LENGTH = 500


def build_lowball_post(car: str, price: str, link: str, author_id: int, ping_role_id: Optional[int] = None) -> str:
    """Compose the submission post.

    The marketplace link is wrapped in angle brackets so Discord keeps it
    clickable without unfurling a preview.
    """
    lines = []
    if ping_role_id is not None:
        lines.append(f"||<@&{ping_role_id}>||")
        lines.append("")
    lines.append(f"# **Lowball this {car}!**")
    lines.append("")
    lines.append(
        f"This is a **{car}** for **<@{author_id}>** and you guys need to lowball the person "
        f"for **{price}**. Here is the marketplace link **<{link}>**"
    )
    return "\n".join(lines)


class LowballModal(discord.ui.Modal):
    """Three-field form collecting the car, target price, and listing link."""

    def __init__(self, bot: discord.Bot, lowball_channel_id: Optional[int], ping_role_id: Optional[int]):
        super().__init__(title="Lowball Method Submission", custom_id=MODAL_CUSTOM_ID)
        self.bot = bot
        self.lowball_channel_id = lowball_channel_id
        self.ping_role_id = ping_role_id

        self.car_input = discord.ui.InputText(
            label="Car (e.g., 2011 BMW 3 Series)",
            custom_id="car_input",
            style=discord.InputTextStyle.short,
            max_length=CAR_MAX_LENGTH,
            required=True,
        )
        self.price_input = discord.ui.InputText(
            label="Lowball Price",
            custom_id="price_input",
            style=discord.InputTextStyle.short,
            max_length=PRICE_MAX_LENGTH,
            required=True,
        )
        self.link_input = discord.ui.InputText(
            label="Facebook Marketplace Link",
            custom_id="link_input",
            style=discord.InputTextStyle.short,
            max_length=LINK_MAX_LENGTH,
            required=True,
        )
        self.add_item(self.car_input)
        self.add_item(self.price_input)
        self.add_item(self.link_input)

    async def callback(self, interaction: discord.Interaction):
        channel = self.bot.get_channel(self.lowball_channel_id) if self.lowball_channel_id else None
        if channel is None:
            logger.error("Lowball channel %s is not available", self.lowball_channel_id)
            await interaction.response.send_message(
                "Error: Could not find the designated lowball channel. Please contact an administrator.",
                ephemeral=True,
            )
            return

        post = build_lowball_post(
            car=self.car_input.value or "",
            price=self.price_input.value or "",
            link=self.link_input.value or "",
            author_id=interaction.user.id,
            ping_role_id=self.ping_role_id,
        )

        try:
            await channel.send(post)
        except discord.HTTPException as exc:
            logger.error("Error sending lowball message: %s", exc)
            await interaction.response.send_message(
                "❌ There was an error posting your lowball request. Please try again or contact an administrator.",
                ephemeral=True,
            )
            return

        logger.info("Posted lowball submission from %s to channel %s", interaction.user.id, self.lowball_channel_id)
        await interaction.response.send_message("✅ Your lowball request has been posted successfully!", ephemeral=True)
