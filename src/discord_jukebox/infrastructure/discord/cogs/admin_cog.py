"""Owner-only maintenance commands."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from discord_jukebox.domain.shared.exceptions import PermissionDeniedError
from discord_jukebox.domain.shared.messages import (
    DiscordUIMessages,
    ErrorMessages,
    LogTemplates,
)

if TYPE_CHECKING:
    from ....config.container import Container

logger = logging.getLogger(__name__)


def is_bot_owner(bot: commands.Bot, container: Container, user_id: int) -> bool:
    """Check if the user is a configured bot owner or the application owner."""
    if container.settings.discord.is_owner(user_id):
        return True

    app_info = bot.application
    return bool(app_info and app_info.owner and app_info.owner.id == user_id)


class AdminCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    @app_commands.command(
        name="refreshcommands", description="Remove all global commands (owner only)."
    )
    async def refresh_commands(self, interaction: discord.Interaction) -> None:
        if not is_bot_owner(self.bot, self.container, interaction.user.id):
            raise PermissionDeniedError("refresh commands", ErrorMessages.OWNER_ONLY_REFRESH)

        await interaction.response.defer(ephemeral=True)
        try:
            self.bot.tree.clear_commands(guild=None)
            await self.bot.tree.sync()
        except discord.HTTPException:
            logger.exception(LogTemplates.BOT_GLOBAL_COMMANDS_CLEAR_FAILED)
            await interaction.followup.send(DiscordUIMessages.ERROR_REFRESH_FAILED, ephemeral=True)
            return

        logger.info(LogTemplates.BOT_GLOBAL_COMMANDS_CLEARED, interaction.user.id)
        await interaction.followup.send(DiscordUIMessages.SUCCESS_COMMANDS_REFRESHED, ephemeral=True)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(AdminCog(bot, container))
