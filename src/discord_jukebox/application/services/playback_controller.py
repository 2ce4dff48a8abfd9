"""Playback controller - the per-guild playback state machine.

Every operation runs as a transaction under the guild's registry lock.
Domain events produced while the lock is held are published once it has
been released, so event handlers may call back into the controller.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from ...domain.music.entities import GuildQueue, Track
from ...domain.music.value_objects import PlaybackState, TeardownReason
from ...domain.shared.constants import AudioConstants
from ...domain.shared.events import (
    DomainEvent,
    EventBus,
    QueueExhausted,
    SessionDestroyed,
    TrackStartedPlaying,
    TrackStreamFailed,
    get_event_bus,
)
from ...domain.shared.exceptions import (
    NoActiveSessionError,
    PermissionDeniedError,
    StreamUnavailableError,
)
from ...domain.shared.messages import ErrorMessages, LogTemplates
from ...domain.shared.types import DiscordSnowflake
from ...domain.voting.services import VotingDomainService
from ...domain.voting.value_objects import VoteResult, VoteTally
from .queue_models import EnqueueOutcome

if TYPE_CHECKING:
    from ...domain.music.registry import SessionFactory, SessionRegistry
    from ..interfaces.voice_transport import AudioSink, VoiceTransport
    from .idle_monitor import IdleMonitor

logger = logging.getLogger(__name__)

_ENQUEUE_ATTEMPTS = 2


class PlaybackController:
    """Drives playback for every guild through a single advance path.

    Stream ends, skips, jumps and successful skip votes all move the queue
    forward via :meth:`_advance` / :meth:`_start_head`. Stream-end
    notifications carry the sink they belong to; any notification whose
    sink is not the queue's current one is stale and ignored.
    """

    def __init__(
        self,
        *,
        registry: SessionRegistry,
        transport: VoiceTransport,
        idle_monitor: IdleMonitor,
        event_bus: EventBus | None = None,
        default_volume: float = AudioConstants.DEFAULT_VOLUME,
    ) -> None:
        self._registry = registry
        self._transport = transport
        self._idle_monitor = idle_monitor
        self._event_bus = event_bus or get_event_bus()
        self._default_volume = default_volume

        self._transport.set_on_stream_end(self.handle_stream_end)
        self._idle_monitor.set_on_timeout(self._on_idle_timeout)

    @property
    def registry(self) -> SessionRegistry:
        return self._registry

    # ─────────────────────────────────────────────────────────────────
    # Transaction helpers
    # ─────────────────────────────────────────────────────────────────

    @asynccontextmanager
    async def _transaction(self, guild_id: int) -> AsyncIterator[list[DomainEvent]]:
        events: list[DomainEvent] = []
        async with self._registry.lock(guild_id):
            yield events
        await self._event_bus.publish_all(events)

    def _require_queue(self, guild_id: int) -> GuildQueue:
        queue = self._registry.get(guild_id)
        if queue is None:
            raise NoActiveSessionError(guild_id)
        return queue

    def _require_current(self, guild_id: int) -> GuildQueue:
        queue = self._require_queue(guild_id)
        if queue.current is None:
            raise NoActiveSessionError(guild_id, ErrorMessages.NO_SONG_PLAYING)
        return queue

    # ─────────────────────────────────────────────────────────────────
    # Session creation / enqueue
    # ─────────────────────────────────────────────────────────────────

    def session_factory(
        self,
        guild_id: DiscordSnowflake,
        voice_channel_id: DiscordSnowflake,
        text_channel_id: DiscordSnowflake | None = None,
    ) -> SessionFactory:
        """Build a factory that joins ``voice_channel_id`` and wraps it in a new queue."""

        async def create() -> GuildQueue:
            session = await self._transport.connect(guild_id, voice_channel_id)
            queue = GuildQueue(
                guild_id=guild_id,
                volume=self._default_volume,
                text_channel_id=text_channel_id,
                voice_channel_id=voice_channel_id,
            )
            queue.voice_session = session
            return queue

        return create

    async def enqueue(
        self,
        guild_id: DiscordSnowflake,
        tracks: list[Track],
        *,
        session_factory: SessionFactory,
    ) -> EnqueueOutcome:
        """Append tracks atomically, creating the session and starting playback if needed."""
        for _ in range(_ENQUEUE_ATTEMPTS):
            queue = await self._registry.get_or_create(guild_id, session_factory)
            async with self._transaction(guild_id) as events:
                if self._registry.get(guild_id) is not queue:
                    logger.info(LogTemplates.SESSION_RECREATE_RACE, guild_id)
                    continue

                self._idle_monitor.cancel(queue)
                first_position = queue.append(tracks)
                started = False
                if queue.state == PlaybackState.EMPTY:
                    started = await self._start_head(queue, events, announce=False)

                logger.info(LogTemplates.QUEUE_ENQUEUED, len(tracks), guild_id, started)
                return EnqueueOutcome(
                    first_position=first_position,
                    added=len(tracks),
                    queue_length=queue.length,
                    started=started,
                    now_playing=queue.current if started else None,
                )

        raise NoActiveSessionError(guild_id)

    # ─────────────────────────────────────────────────────────────────
    # Advance path
    # ─────────────────────────────────────────────────────────────────

    async def _start_head(
        self,
        queue: GuildQueue,
        events: list[DomainEvent],
        *,
        announce: bool = True,
        finished: Track | None = None,
    ) -> bool:
        """Stream the head track, dropping heads that cannot be opened.

        Returns True once a stream is running, False if the queue ran dry.
        ``finished`` is the track that played last, reported if the queue
        runs dry.
        """
        while (track := queue.current) is not None:
            try:
                sink = await self._transport.start_stream(queue.voice_session, track, queue.volume)
            except StreamUnavailableError as exc:
                logger.warning(
                    LogTemplates.PLAYBACK_STREAM_FAILED, track.title, queue.guild_id, exc.message
                )
                events.append(self._stream_failed_event(queue, track, exc))
                queue.advance(honour_loop=False)
                continue

            queue.audio_sink = sink
            queue.mark_playing()
            logger.info(LogTemplates.PLAYBACK_STARTED, track.title, queue.guild_id)
            events.append(
                TrackStartedPlaying(
                    guild_id=queue.guild_id,
                    text_channel_id=queue.text_channel_id,
                    track_title=track.title,
                    track_url=track.link,
                    requested_by_id=track.requested_by_id,
                    duration_seconds=track.duration_seconds,
                    announce=announce,
                )
            )
            return True

        self._become_empty(queue, events, finished)
        return False

    async def _advance(
        self, queue: GuildQueue, events: list[DomainEvent], *, honour_loop: bool
    ) -> bool:
        last = queue.current
        queue.advance(honour_loop=honour_loop)
        if honour_loop and queue.loop and last is not None:
            logger.debug(LogTemplates.PLAYBACK_LOOPING, last.title, queue.guild_id)
        return await self._start_head(queue, events, finished=last)

    def _become_empty(
        self, queue: GuildQueue, events: list[DomainEvent], finished: Track | None = None
    ) -> None:
        if queue.state != PlaybackState.EMPTY:
            queue.mark_empty()
            events.append(
                QueueExhausted(
                    guild_id=queue.guild_id,
                    text_channel_id=queue.text_channel_id,
                    last_track_title=finished.title if finished is not None else "",
                )
            )
            logger.info(LogTemplates.QUEUE_EMPTY, queue.guild_id)
        queue.audio_sink = None
        queue.started_at = None
        self._idle_monitor.schedule(queue)

    def _stop_stream(self, queue: GuildQueue) -> None:
        """Detach the current sink, then stop it so its stream-end callback reads as stale."""
        had_sink = queue.audio_sink is not None
        queue.audio_sink = None
        if had_sink:
            self._transport.stop(queue.voice_session)

    @staticmethod
    def _stream_failed_event(
        queue: GuildQueue, track: Track, error: Exception | None
    ) -> TrackStreamFailed:
        return TrackStreamFailed(
            guild_id=queue.guild_id,
            text_channel_id=queue.text_channel_id,
            track_title=track.title,
            track_url=track.link,
            error=str(error) if error is not None else "",
            loop_enabled=queue.loop,
        )

    async def handle_stream_end(
        self, guild_id: int, sink: AudioSink, error: Exception | None
    ) -> None:
        """Transport callback: the stream behind ``sink`` finished or failed."""
        async with self._transaction(guild_id) as events:
            queue = self._registry.get(guild_id)
            if queue is None or queue.audio_sink is None or queue.audio_sink is not sink:
                logger.debug(LogTemplates.PLAYBACK_STALE_CALLBACK, guild_id)
                return

            queue.audio_sink = None
            if self._transport.count_listeners(queue.voice_session) == 0:
                logger.info(LogTemplates.SESSION_ROOM_EMPTY, guild_id)
                await self._destroy(queue, TeardownReason.ROOM_EMPTY, events)
                return

            if error is not None:
                track = queue.current
                if track is not None:
                    logger.warning(
                        LogTemplates.PLAYBACK_STREAM_ERROR, track.title, guild_id, error
                    )
                    events.append(self._stream_failed_event(queue, track, error))
                await self._advance(queue, events, honour_loop=False)
                return

            await self._advance(queue, events, honour_loop=True)

    # ─────────────────────────────────────────────────────────────────
    # Commands
    # ─────────────────────────────────────────────────────────────────

    async def skip(
        self,
        guild_id: DiscordSnowflake,
        *,
        actor_id: DiscordSnowflake | None = None,
        is_privileged: bool = True,
    ) -> Track:
        """Skip the current track, ignoring loop, and return it.

        Non-privileged actors may only skip tracks they requested themselves.
        """
        async with self._transaction(guild_id) as events:
            queue = self._require_current(guild_id)
            skipped = queue.current
            assert skipped is not None
            if not is_privileged and (actor_id is None or not skipped.was_requested_by(actor_id)):
                raise PermissionDeniedError("skip", ErrorMessages.SKIP_NOT_ALLOWED)
            self._stop_stream(queue)
            await self._advance(queue, events, honour_loop=False)
            logger.info(LogTemplates.TRACK_SKIPPED, skipped.title, guild_id)
            return skipped

    async def jump(self, guild_id: DiscordSnowflake, position: int) -> Track | None:
        """Discard every track before ``position`` and start playing it.

        Returns the track that actually started, which is a later one when
        the target cannot be streamed, or None if nothing could be played.
        """
        async with self._transaction(guild_id) as events:
            queue = self._require_queue(guild_id)
            target = queue.jump_to(position)
            self._stop_stream(queue)
            await self._start_head(queue, events, announce=False)
            logger.info(LogTemplates.TRACK_JUMPED, target.title, guild_id)
            return queue.current

    async def vote_skip(
        self, guild_id: DiscordSnowflake, voter_id: DiscordSnowflake, *, is_privileged: bool
    ) -> VoteTally:
        """Count a skip vote and skip in the same transaction when it passes.

        Only members listening in the bot's voice channel may vote. The
        requester of the current track counts as privileged.
        """
        async with self._transaction(guild_id) as events:
            queue = self._require_current(guild_id)
            current = queue.current
            assert current is not None
            tally = VotingDomainService.register_vote(
                queue,
                voter_id,
                is_privileged=is_privileged or current.was_requested_by(voter_id),
                listeners=self._transport.listener_ids(queue.voice_session),
            )
            if tally.result == VoteResult.NOT_IN_CHANNEL:
                logger.info(LogTemplates.VOTE_NOT_IN_CHANNEL, voter_id, guild_id)
                return tally
            logger.info(LogTemplates.VOTE_RECORDED, voter_id, guild_id, tally.votes, tally.threshold)

            if tally.skipped:
                logger.info(LogTemplates.VOTE_PASSED, guild_id, tally.votes, tally.threshold)
                self._stop_stream(queue)
                await self._advance(queue, events, honour_loop=False)
            return tally

    async def pause(self, guild_id: DiscordSnowflake) -> None:
        async with self._transaction(guild_id):
            queue = self._require_queue(guild_id)
            queue.pause()
            self._transport.pause(queue.voice_session)
            logger.info(LogTemplates.PLAYBACK_PAUSED, guild_id)

    async def resume(self, guild_id: DiscordSnowflake) -> None:
        async with self._transaction(guild_id):
            queue = self._require_queue(guild_id)
            queue.resume()
            self._idle_monitor.cancel(queue)
            self._transport.resume(queue.voice_session)
            logger.info(LogTemplates.PLAYBACK_RESUMED, guild_id)

    async def stop(self, guild_id: DiscordSnowflake) -> None:
        """Clear the queue and leave voice."""
        if not await self.teardown(guild_id, TeardownReason.STOPPED):
            raise NoActiveSessionError(guild_id)

    async def set_volume(self, guild_id: DiscordSnowflake, volume: float) -> float:
        async with self._transaction(guild_id):
            queue = self._require_queue(guild_id)
            applied = queue.set_volume(volume)
            if queue.audio_sink is not None:
                self._transport.set_volume(queue.audio_sink, applied)
            logger.info(LogTemplates.PLAYBACK_VOLUME_SET, applied, guild_id)
            return applied

    async def toggle_loop(self, guild_id: DiscordSnowflake) -> bool:
        async with self._transaction(guild_id):
            queue = self._require_queue(guild_id)
            enabled = queue.toggle_loop()
            logger.info(
                LogTemplates.PLAYBACK_LOOP_TOGGLED, "enabled" if enabled else "disabled", guild_id
            )
            return enabled

    # ─────────────────────────────────────────────────────────────────
    # Teardown / vacancy
    # ─────────────────────────────────────────────────────────────────

    async def teardown(
        self,
        guild_id: DiscordSnowflake,
        reason: TeardownReason,
        *,
        expected: GuildQueue | None = None,
    ) -> bool:
        """Destroy the guild's session. Returns False if there was nothing to destroy.

        With ``expected`` set, only that exact queue is destroyed. Idle
        timeouts additionally require the queue to still be empty.
        """
        async with self._transaction(guild_id) as events:
            queue = self._registry.get(guild_id)
            if queue is None:
                return False
            if expected is not None and queue is not expected:
                return False
            if reason.requires_empty_queue and not queue.is_empty:
                return False
            await self._destroy(queue, reason, events)
            return True

    async def check_vacancy(self, guild_id: DiscordSnowflake) -> bool:
        """Tear the session down immediately if no human listeners remain."""
        async with self._transaction(guild_id) as events:
            queue = self._registry.get(guild_id)
            if queue is None:
                return False
            if self._transport.count_listeners(queue.voice_session) > 0:
                return False
            logger.info(LogTemplates.SESSION_ROOM_EMPTY, guild_id)
            await self._destroy(queue, TeardownReason.ROOM_EMPTY, events)
            return True

    async def shutdown(self) -> None:
        """Tear down every live session."""
        guild_ids = self._registry.guild_ids()
        if guild_ids:
            logger.info(LogTemplates.SESSION_SHUTDOWN, len(guild_ids))
        for guild_id in guild_ids:
            await self.teardown(guild_id, TeardownReason.SHUTDOWN)

    async def _on_idle_timeout(self, queue: GuildQueue) -> None:
        await self.teardown(queue.guild_id, TeardownReason.IDLE_TIMEOUT, expected=queue)

    async def _destroy(
        self, queue: GuildQueue, reason: TeardownReason, events: list[DomainEvent]
    ) -> None:
        self._idle_monitor.cancel(queue)
        queue.discard()
        queue.audio_sink = None
        session, queue.voice_session = queue.voice_session, None
        try:
            if session is not None:
                await self._transport.destroy(session)
        except Exception:
            logger.exception(LogTemplates.VOICE_DESTROY_FAILED, queue.guild_id)
        finally:
            self._registry.remove(queue.guild_id)

        logger.info(LogTemplates.SESSION_DESTROYED, queue.guild_id, reason.value)
        events.append(
            SessionDestroyed(
                guild_id=queue.guild_id,
                text_channel_id=queue.text_channel_id,
                reason=reason.value,
            )
        )
