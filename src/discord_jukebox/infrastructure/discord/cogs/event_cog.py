"""Discord event listeners for voice, guild, and message events."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

import discord
from discord.ext import commands

from discord_jukebox.domain.music.value_objects import TeardownReason
from discord_jukebox.domain.shared.events import (
    QueueExhausted,
    SessionDestroyed,
    TrackStartedPlaying,
    TrackStreamFailed,
)
from discord_jukebox.domain.shared.messages import (
    DiscordUIMessages,
    ErrorMessages,
    LogTemplates,
)

if TYPE_CHECKING:
    from ....config.container import Container

logger = logging.getLogger(__name__)


class EventCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    def _subscriptions(self) -> list[tuple[type, Callable[[Any], Awaitable[None]]]]:
        return [
            (TrackStartedPlaying, self._on_track_started),
            (TrackStreamFailed, self._on_stream_failed),
            (QueueExhausted, self._on_queue_exhausted),
            (SessionDestroyed, self._on_session_destroyed),
        ]

    async def cog_load(self) -> None:
        for event_type, handler in self._subscriptions():
            self.container.event_bus.subscribe(event_type, handler)

    async def cog_unload(self) -> None:
        for event_type, handler in self._subscriptions():
            self.container.event_bus.unsubscribe(event_type, handler)

    # ─────────────────────────────────────────────────────────────────
    # Guild Events
    # ─────────────────────────────────────────────────────────────────

    @commands.Cog.listener()
    async def on_guild_remove(self, guild: discord.Guild) -> None:
        logger.info("Left guild: %s (%s)", guild.name, guild.id)
        await self.container.playback_controller.teardown(guild.id, TeardownReason.GUILD_REMOVED)

    # ─────────────────────────────────────────────────────────────────
    # Voice Events
    # ─────────────────────────────────────────────────────────────────

    @commands.Cog.listener()
    async def on_voice_state_update(
        self, member: discord.Member, before: discord.VoiceState, after: discord.VoiceState
    ) -> None:
        controller = self.container.playback_controller
        guild_id = member.guild.id

        if self.bot.user is not None and member.id == self.bot.user.id:
            if before.channel is not None and after.channel is None:
                await controller.teardown(guild_id, TeardownReason.DISCONNECTED)
            elif after.channel is not None:
                queue = controller.registry.get(guild_id)
                if queue is not None:
                    queue.voice_channel_id = after.channel.id
            return

        if member.bot or before.channel is None:
            return
        if after.channel is not None and after.channel.id == before.channel.id:
            return

        queue = controller.registry.get(guild_id)
        if queue is None or queue.voice_channel_id != before.channel.id:
            return

        await controller.check_vacancy(guild_id)

    # ─────────────────────────────────────────────────────────────────
    # Message Events
    # ─────────────────────────────────────────────────────────────────

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        if message.author.bot or self.bot.user is None:
            return

        if self.bot.user in message.mentions:
            await message.channel.send(DiscordUIMessages.MENTION_REPLY)

    # ─────────────────────────────────────────────────────────────────
    # Domain Events
    # ─────────────────────────────────────────────────────────────────

    async def _post_notice(self, guild_id: int, text_channel_id: int | None, content: str) -> None:
        if text_channel_id is None:
            return

        channel = self.bot.get_channel(text_channel_id)
        if not isinstance(channel, discord.abc.Messageable):
            return

        try:
            await channel.send(content)
        except discord.HTTPException:
            logger.warning(LogTemplates.NOTIFY_FAILED, text_channel_id, guild_id)

    async def _on_track_started(self, event: TrackStartedPlaying) -> None:
        if not event.announce:
            return
        await self._post_notice(
            event.guild_id,
            event.text_channel_id,
            DiscordUIMessages.PLAY_NOW_PLAYING.format(title=event.track_title),
        )

    async def _on_stream_failed(self, event: TrackStreamFailed) -> None:
        """Tell the session's text channel that a song was skipped because it would not play."""
        template = (
            DiscordUIMessages.NOTICE_STREAM_FAILED_LOOP
            if event.loop_enabled
            else DiscordUIMessages.NOTICE_STREAM_FAILED
        )
        await self._post_notice(
            event.guild_id, event.text_channel_id, template.format(title=event.track_title)
        )

    async def _on_queue_exhausted(self, event: QueueExhausted) -> None:
        if not event.last_track_title:
            return
        await self._post_notice(
            event.guild_id,
            event.text_channel_id,
            DiscordUIMessages.NOTICE_QUEUE_FINISHED.format(title=event.last_track_title),
        )

    async def _on_session_destroyed(self, event: SessionDestroyed) -> None:
        """Explain departures nobody asked for; stops and disconnects speak for themselves."""
        notices = {
            TeardownReason.IDLE_TIMEOUT.value: DiscordUIMessages.NOTICE_LEFT_IDLE,
            TeardownReason.ROOM_EMPTY.value: DiscordUIMessages.NOTICE_LEFT_EMPTY,
        }
        notice = notices.get(event.reason)
        if notice is None:
            return
        await self._post_notice(event.guild_id, event.text_channel_id, notice)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(EventCog(bot, container))
