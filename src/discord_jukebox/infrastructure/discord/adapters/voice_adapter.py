"""Discord voice adapter implementing VoiceTransport with FFmpeg streams."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import discord

from discord_jukebox.application.interfaces.track_resolver import TrackResolver
from discord_jukebox.application.interfaces.voice_transport import (
    AudioSink,
    StreamEndCallback,
    VoiceSession,
    VoiceTransport,
)
from discord_jukebox.config.settings import AudioSettings
from discord_jukebox.domain.shared.constants import AudioConstants, TimeConstants
from discord_jukebox.domain.shared.exceptions import (
    StreamUnavailableError,
    VoiceConnectionError,
)
from discord_jukebox.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ....domain.music.entities import Track

logger = logging.getLogger(__name__)


class DiscordVoiceAdapter(VoiceTransport):
    """Voice transport backed by ``discord.VoiceClient``.

    The session handle is the guild's ``VoiceClient`` and each stream's sink
    is the ``PCMVolumeTransformer`` wrapping its FFmpeg source.
    """

    def __init__(
        self,
        bot: discord.Client,
        resolver: TrackResolver,
        settings: AudioSettings | None = None,
    ) -> None:
        self._bot = bot
        self._resolver = resolver
        self._settings = settings or AudioSettings()
        self._ffmpeg_options = self._settings.ffmpeg_options
        self._on_stream_end: StreamEndCallback | None = None

    # TODO(integ): Test real voice connect with a test bot in a test guild.
    async def connect(self, guild_id: int, channel_id: int) -> VoiceSession:
        guild = self._bot.get_guild(guild_id)
        if guild is None:
            logger.warning(LogTemplates.GUILD_NOT_FOUND, guild_id)
            raise VoiceConnectionError(channel_id, ErrorMessages.COULD_NOT_JOIN_VOICE)

        channel = guild.get_channel(channel_id)
        if not isinstance(channel, discord.VoiceChannel | discord.StageChannel):
            logger.warning(LogTemplates.CHANNEL_NOT_VOICE, channel_id)
            raise VoiceConnectionError(channel_id, ErrorMessages.COULD_NOT_JOIN_VOICE)

        existing = guild.voice_client
        if isinstance(existing, discord.VoiceClient) and existing.is_connected():
            if existing.channel is not None and existing.channel.id != channel_id:
                await existing.move_to(channel)
            return existing

        try:
            async with asyncio.timeout(TimeConstants.VOICE_CONNECT_TIMEOUT):
                vc = await channel.connect(self_deaf=True)
        except TimeoutError as exc:
            logger.error(LogTemplates.VOICE_CONNECTION_TIMEOUT, channel_id)
            raise VoiceConnectionError(channel_id, ErrorMessages.COULD_NOT_JOIN_VOICE) from exc
        except discord.Forbidden as exc:
            logger.error(LogTemplates.VOICE_NO_PERMISSION, channel_id)
            raise VoiceConnectionError(channel_id, ErrorMessages.COULD_NOT_JOIN_VOICE) from exc
        except discord.ClientException as exc:
            logger.error(LogTemplates.VOICE_CLIENT_ERROR, exc)
            raise VoiceConnectionError(channel_id, ErrorMessages.COULD_NOT_JOIN_VOICE) from exc

        logger.info(LogTemplates.VOICE_CONNECTED, channel.name, guild.name)
        return vc

    def _build_source(self, stream_url: str, volume: float) -> discord.PCMVolumeTransformer:
        base_before_opts = self._ffmpeg_options.get("before_options", "")
        user_agent = AudioConstants.FFMPEG_USER_AGENT_HEADER.format(
            user_agent=AudioConstants.ANDROID_USER_AGENT
        )
        before_opts = f"{base_before_opts} {user_agent}"
        source = discord.FFmpegPCMAudio(
            stream_url,
            before_options=before_opts,
            options=self._ffmpeg_options.get("options", ""),
        )
        return discord.PCMVolumeTransformer(source, volume=volume)

    # TODO(integ): Test playing a short clip via FFmpeg on a live voice connection.
    async def start_stream(self, session: VoiceSession, track: Track, volume: float) -> AudioSink:
        vc: discord.VoiceClient = session
        stream_url = await self._resolver.stream_url(track.url)

        try:
            sink = self._build_source(stream_url, volume)
        except discord.ClientException as exc:
            raise StreamUnavailableError(track.url, str(exc)) from exc

        guild_id = vc.guild.id
        loop = self._bot.loop

        def after_callback(error: Exception | None = None) -> None:
            logger.debug(LogTemplates.STREAM_ENDED, guild_id, error)
            asyncio.run_coroutine_threadsafe(
                self._handle_stream_end(guild_id, sink, error), loop
            )

        if vc.is_playing() or vc.is_paused():
            vc.stop()

        try:
            vc.play(sink, after=after_callback)
        except discord.ClientException as exc:
            sink.cleanup()
            raise StreamUnavailableError(track.url, str(exc)) from exc
        return sink

    async def _handle_stream_end(
        self, guild_id: int, sink: AudioSink, error: Exception | None
    ) -> None:
        """Called from the FFmpeg thread via run_coroutine_threadsafe."""
        if self._on_stream_end is None:
            logger.warning(LogTemplates.STREAM_NO_CALLBACK, guild_id)
            return
        try:
            await self._on_stream_end(guild_id, sink, error)
        except Exception:
            logger.exception(LogTemplates.STREAM_CALLBACK_ERROR, guild_id)

    def set_volume(self, sink: AudioSink, volume: float) -> None:
        if isinstance(sink, discord.PCMVolumeTransformer):
            sink.volume = volume

    def pause(self, session: VoiceSession) -> None:
        if session is not None and session.is_playing():
            session.pause()

    def resume(self, session: VoiceSession) -> None:
        if session is not None and session.is_paused():
            session.resume()

    def stop(self, session: VoiceSession) -> None:
        if session is not None and (session.is_playing() or session.is_paused()):
            session.stop()
            logger.debug(LogTemplates.PLAYBACK_STOPPED, session.guild.id)

    async def destroy(self, session: VoiceSession) -> None:
        vc: discord.VoiceClient = session
        guild_id = vc.guild.id
        vc.stop()
        await vc.disconnect(force=True)
        logger.info(LogTemplates.VOICE_DISCONNECTED, guild_id)

    def listener_ids(self, session: VoiceSession) -> set[int]:
        if session is None or session.channel is None:
            return set()
        return {member.id for member in session.channel.members if not member.bot}

    def set_on_stream_end(self, callback: StreamEndCallback) -> None:
        self._on_stream_end = callback
