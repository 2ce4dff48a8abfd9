"""Slash-command cog for playback control: skip, voteskip, stop, pause, resume, volume, loop."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from discord_jukebox.application.commands.skip_track import SkipTrackCommand
from discord_jukebox.application.commands.vote_skip import VoteSkipCommand
from discord_jukebox.domain.shared.messages import DiscordUIMessages, ErrorMessages
from discord_jukebox.infrastructure.discord.guards.voice_guards import (
    get_member,
    get_voice_channel,
    is_dj,
)

if TYPE_CHECKING:
    from ....config.container import Container

logger = logging.getLogger(__name__)


class PlaybackCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    def _is_dj(self, member: discord.Member) -> bool:
        return is_dj(member, self.container.settings.discord)

    @app_commands.command(name="skip", description="Skip the current song (requester or DJ only).")
    async def skip(self, interaction: discord.Interaction) -> None:
        member = await get_member(interaction)
        if member is None:
            return

        await self.container.skip_track_handler.handle(
            SkipTrackCommand(
                guild_id=member.guild.id, user_id=member.id, is_dj=self._is_dj(member)
            )
        )
        await interaction.response.send_message(DiscordUIMessages.SKIP_DONE)

    @app_commands.command(name="voteskip", description="Vote to skip the current song.")
    async def voteskip(self, interaction: discord.Interaction) -> None:
        located = await get_voice_channel(interaction)
        if located is None:
            return
        member, _ = located

        tally = await self.container.vote_skip_handler.handle(
            VoteSkipCommand(
                guild_id=member.guild.id, user_id=member.id, is_dj=self._is_dj(member)
            )
        )
        await interaction.response.send_message(tally.message, ephemeral=not tally.skipped)

    @app_commands.command(name="stop", description="Stop playback, clear the queue and leave.")
    async def stop(self, interaction: discord.Interaction) -> None:
        member = await get_member(interaction)
        if member is None:
            return

        await self.container.playback_controller.stop(member.guild.id)
        await interaction.response.send_message(DiscordUIMessages.ACTION_STOPPED)

    @app_commands.command(name="pause", description="Pause playback.")
    async def pause(self, interaction: discord.Interaction) -> None:
        member = await get_member(interaction)
        if member is None:
            return

        await self.container.playback_controller.pause(member.guild.id)
        await interaction.response.send_message(DiscordUIMessages.ACTION_PAUSED)

    @app_commands.command(name="resume", description="Resume playback.")
    async def resume(self, interaction: discord.Interaction) -> None:
        member = await get_member(interaction)
        if member is None:
            return

        await self.container.playback_controller.resume(member.guild.id)
        await interaction.response.send_message(DiscordUIMessages.ACTION_RESUMED)

    @app_commands.command(name="volume", description="Set the playback volume.")
    @app_commands.describe(level="Volume between 0.0 and 5.0 (1.0 is normal)")
    async def volume(self, interaction: discord.Interaction, level: float) -> None:
        member = await get_member(interaction)
        if member is None:
            return

        applied = await self.container.playback_controller.set_volume(member.guild.id, level)
        await interaction.response.send_message(
            DiscordUIMessages.ACTION_VOLUME_SET.format(volume=applied)
        )

    @app_commands.command(name="loop", description="Toggle looping of the current song.")
    async def loop(self, interaction: discord.Interaction) -> None:
        member = await get_member(interaction)
        if member is None:
            return

        enabled = await self.container.playback_controller.toggle_loop(member.guild.id)
        await interaction.response.send_message(
            DiscordUIMessages.ACTION_LOOP_ENABLED if enabled else DiscordUIMessages.ACTION_LOOP_DISABLED
        )


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(PlaybackCog(bot, container))
