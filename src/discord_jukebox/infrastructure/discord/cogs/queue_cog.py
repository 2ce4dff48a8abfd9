"""Slash-command cog for queue management: view, remove, move, jump, shuffle, clear."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from discord_jukebox.application.queries.get_queue import GetQueueQuery, QueuePage
from discord_jukebox.domain.shared.messages import DiscordUIMessages, ErrorMessages
from discord_jukebox.infrastructure.discord.guards.voice_guards import get_member
from discord_jukebox.infrastructure.discord.views.queue_view import QueueView
from discord_jukebox.utils.reply import build_queue_embed

if TYPE_CHECKING:
    from ....config.container import Container

logger = logging.getLogger(__name__)


class QueueCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    async def _load_page(self, guild_id: int, page: int) -> QueuePage:
        return await self.container.get_queue_handler.handle(
            GetQueueQuery(
                guild_id=guild_id,
                page=page,
                page_size=self.container.settings.interaction.queue_page_size,
            )
        )

    @app_commands.command(name="queue", description="Show the current queue.")
    async def queue(self, interaction: discord.Interaction) -> None:
        member = await get_member(interaction)
        if member is None:
            return
        guild_id = member.guild.id

        page = await self._load_page(guild_id, 1)
        if page.is_empty:
            await interaction.response.send_message(
                DiscordUIMessages.STATE_QUEUE_EMPTY, ephemeral=True
            )
            return

        async def load_page(number: int) -> QueuePage:
            return await self._load_page(guild_id, number)

        view = QueueView(
            requester_id=member.id,
            page=page,
            load_page=load_page,
            timeout=self.container.settings.interaction.queue_timeout_seconds,
        )
        await interaction.response.send_message(embed=build_queue_embed(page), view=view)
        view.set_message(await interaction.original_response())

    @app_commands.command(name="remove", description="Remove a song from the queue.")
    @app_commands.describe(position="Position in the queue (2 or higher)")
    async def remove(self, interaction: discord.Interaction, position: int) -> None:
        member = await get_member(interaction)
        if member is None:
            return

        track = await self.container.queue_service.remove(member.guild.id, position)
        await interaction.response.send_message(
            DiscordUIMessages.ACTION_REMOVED.format(title=track.title)
        )

    @app_commands.command(name="move", description="Move a song to another position in the queue.")
    @app_commands.describe(from_position="Current position", to_position="New position")
    async def move(
        self, interaction: discord.Interaction, from_position: int, to_position: int
    ) -> None:
        member = await get_member(interaction)
        if member is None:
            return

        outcome = await self.container.queue_service.move(
            member.guild.id, from_position, to_position
        )
        await interaction.response.send_message(
            DiscordUIMessages.ACTION_MOVED.format(
                title=outcome.track.title,
                from_pos=outcome.from_position,
                to_pos=outcome.to_position,
            )
        )

    @app_commands.command(name="jump", description="Jump to a song, dropping the ones before it.")
    @app_commands.describe(position="Position in the queue (2 or higher)")
    async def jump(self, interaction: discord.Interaction, position: int) -> None:
        member = await get_member(interaction)
        if member is None:
            return

        track = await self.container.playback_controller.jump(member.guild.id, position)
        if track is None:
            await interaction.response.send_message(DiscordUIMessages.ACTION_JUMP_NOTHING_PLAYABLE)
            return
        await interaction.response.send_message(
            DiscordUIMessages.ACTION_JUMPED.format(title=track.title)
        )

    @app_commands.command(name="shuffle", description="Shuffle the upcoming songs.")
    async def shuffle(self, interaction: discord.Interaction) -> None:
        member = await get_member(interaction)
        if member is None:
            return

        await self.container.queue_service.shuffle(member.guild.id)
        await interaction.response.send_message(DiscordUIMessages.ACTION_SHUFFLED)

    @app_commands.command(name="clear", description="Clear the queue except the current song.")
    async def clear(self, interaction: discord.Interaction) -> None:
        member = await get_member(interaction)
        if member is None:
            return

        await self.container.queue_service.clear(member.guild.id)
        await interaction.response.send_message(DiscordUIMessages.ACTION_CLEARED)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(QueueCog(bot, container))
