"""Slash-command cog for adding music: play, search, now playing and help."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from discord_jukebox.application.commands.play_track import PlayTrackCommand
from discord_jukebox.application.interfaces.track_resolver import Resolution
from discord_jukebox.application.queries.get_current import GetCurrentTrackQuery
from discord_jukebox.domain.music.entities import Track
from discord_jukebox.domain.shared.messages import DiscordUIMessages, ErrorMessages
from discord_jukebox.infrastructure.discord.guards.voice_guards import get_voice_channel
from discord_jukebox.infrastructure.discord.views.search_view import SearchView

if TYPE_CHECKING:
    from ....config.container import Container

logger = logging.getLogger(__name__)


class MusicCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    @app_commands.command(
        name="play", description="Play a video, playlist, or Spotify link, or search YouTube."
    )
    @app_commands.describe(query="URL or search terms")
    async def play(self, interaction: discord.Interaction, query: str) -> None:
        located = await get_voice_channel(interaction)
        if located is None:
            return
        member, channel = located
        assert interaction.guild is not None

        await interaction.response.defer()

        command = PlayTrackCommand(
            guild_id=interaction.guild.id,
            voice_channel_id=channel.id,
            user_id=member.id,
            query=query,
            text_channel_id=interaction.channel_id,
        )
        result = await self.container.play_track_handler.handle(command)
        await interaction.followup.send(result.message)

    @app_commands.command(name="search", description="Search YouTube and pick a result to play.")
    @app_commands.describe(query="Search terms")
    async def search(self, interaction: discord.Interaction, query: str) -> None:
        located = await get_voice_channel(interaction)
        if located is None:
            return
        member, channel = located
        assert interaction.guild is not None

        await interaction.response.defer()

        settings = self.container.settings
        results = await self.container.track_resolver.search(
            query, member.id, limit=settings.audio.search_limit
        )
        command = PlayTrackCommand(
            guild_id=interaction.guild.id,
            voice_channel_id=channel.id,
            user_id=member.id,
            query=query,
            text_channel_id=interaction.channel_id,
        )

        async def on_select(selection: discord.Interaction, track: Track) -> None:
            still_located = await get_voice_channel(selection)
            if still_located is None:
                return
            _, current_channel = still_located
            result = await self.container.play_track_handler.enqueue(
                command.model_copy(update={"voice_channel_id": current_channel.id}),
                Resolution(tracks=[track]),
            )
            await selection.followup.send(result.message)

        view = SearchView(
            requester_id=member.id,
            results=results,
            on_select=on_select,
            timeout=settings.interaction.search_timeout_seconds,
        )
        message = await interaction.followup.send(
            DiscordUIMessages.SEARCH_PROMPT, view=view, wait=True
        )
        view.set_message(message)

    @app_commands.command(name="np", description="Show the song that is playing now.")
    async def now_playing(self, interaction: discord.Interaction) -> None:
        if interaction.guild is None:
            await interaction.response.send_message(
                DiscordUIMessages.STATE_SERVER_ONLY, ephemeral=True
            )
            return

        info = await self.container.get_current_handler.handle(
            GetCurrentTrackQuery(guild_id=interaction.guild.id)
        )
        await interaction.response.send_message(info.render(), ephemeral=info.track is None)

    @app_commands.command(name="help", description="List the available commands.")
    async def help(self, interaction: discord.Interaction) -> None:
        await interaction.response.send_message(DiscordUIMessages.HELP_TEXT, ephemeral=True)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(MusicCog(bot, container))
