"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for the registry, controller, adapters, and handlers.
Components are created on-demand and cached for reuse throughout the application.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import ErrorMessages

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from discord.ext.commands import Bot

    from ..application.commands.play_track import PlayTrackHandler
    from ..application.commands.skip_track import SkipTrackHandler
    from ..application.commands.vote_skip import VoteSkipHandler
    from ..application.interfaces.track_resolver import TrackResolver
    from ..application.interfaces.voice_transport import VoiceTransport
    from ..application.queries.get_current import GetCurrentTrackHandler
    from ..application.queries.get_queue import GetQueueHandler
    from ..application.services.idle_monitor import IdleMonitor
    from ..application.services.playback_controller import PlaybackController
    from ..application.services.queue_service import QueueApplicationService
    from ..domain.music.registry import SessionRegistry
    from ..domain.shared.events import EventBus
    from ..infrastructure.audio.spotify_resolver import SpotifyResolver
    from ..infrastructure.audio.ytdlp_resolver import YtDlpResolver
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    This container manages all application dependencies and their lifecycle.
    Components are lazily initialized when first accessed.
    """

    settings: Settings
    _bot: Bot | None = None

    # Core state
    _registry: SessionRegistry | None = None
    _event_bus: EventBus | None = None

    # Infrastructure adapters
    _ytdlp_resolver: YtDlpResolver | None = None
    _spotify_resolver: SpotifyResolver | None = None
    _track_resolver: TrackResolver | None = None
    _voice_adapter: VoiceTransport | None = None

    # Application services
    _idle_monitor: IdleMonitor | None = None
    _playback_controller: PlaybackController | None = None
    _queue_service: QueueApplicationService | None = None

    # Command handlers
    _play_track_handler: PlayTrackHandler | None = None
    _skip_track_handler: SkipTrackHandler | None = None
    _vote_skip_handler: VoteSkipHandler | None = None

    # Query handlers
    _get_queue_handler: GetQueueHandler | None = None
    _get_current_handler: GetCurrentTrackHandler | None = None

    def set_bot(self, bot: Bot) -> None:
        """Set the Discord bot instance."""
        self._bot = bot

    @property
    def bot(self) -> Bot:
        """Get the Discord bot instance."""
        if self._bot is None:
            raise RuntimeError(ErrorMessages.BOT_NOT_INITIALIZED)
        return self._bot

    # === Core State ===

    @property
    def registry(self) -> SessionRegistry:
        """Get the per-guild session registry."""
        if self._registry is None:
            from ..domain.music.registry import SessionRegistry

            self._registry = SessionRegistry()
        return self._registry

    @property
    def event_bus(self) -> EventBus:
        if self._event_bus is None:
            from ..domain.shared.events import get_event_bus

            self._event_bus = get_event_bus()
        return self._event_bus

    # === Infrastructure Adapters ===

    @property
    def ytdlp_resolver(self) -> YtDlpResolver:
        if self._ytdlp_resolver is None:
            from ..infrastructure.audio.ytdlp_resolver import YtDlpResolver

            self._ytdlp_resolver = YtDlpResolver(self.settings.audio)
        return self._ytdlp_resolver

    @property
    def spotify_resolver(self) -> SpotifyResolver:
        if self._spotify_resolver is None:
            from ..infrastructure.audio.spotify_resolver import SpotifyResolver

            self._spotify_resolver = SpotifyResolver(
                self.settings.spotify,
                self.ytdlp_resolver,
                limit=self.settings.audio.playlist_limit,
            )
        return self._spotify_resolver

    @property
    def track_resolver(self) -> TrackResolver:
        """Get the resolver that turns queries and links into tracks."""
        if self._track_resolver is None:
            from ..infrastructure.audio.track_resolver import MediaTrackResolver

            self._track_resolver = MediaTrackResolver(
                youtube=self.ytdlp_resolver, spotify=self.spotify_resolver
            )
        return self._track_resolver

    @property
    def voice_adapter(self) -> VoiceTransport:
        """Get the voice adapter."""
        if self._voice_adapter is None:
            from ..infrastructure.discord.adapters.voice_adapter import (
                DiscordVoiceAdapter,
            )

            self._voice_adapter = DiscordVoiceAdapter(
                self.bot, self.track_resolver, self.settings.audio
            )
        return self._voice_adapter

    # === Application Services ===

    @property
    def idle_monitor(self) -> IdleMonitor:
        if self._idle_monitor is None:
            from ..application.services.idle_monitor import IdleMonitor

            self._idle_monitor = IdleMonitor(
                timeout_seconds=self.settings.session.idle_timeout_seconds
            )
        return self._idle_monitor

    @property
    def playback_controller(self) -> PlaybackController:
        """Get the playback controller."""
        if self._playback_controller is None:
            from ..application.services.playback_controller import PlaybackController

            self._playback_controller = PlaybackController(
                registry=self.registry,
                transport=self.voice_adapter,
                idle_monitor=self.idle_monitor,
                event_bus=self.event_bus,
                default_volume=self.settings.audio.default_volume,
            )
        return self._playback_controller

    @property
    def queue_service(self) -> QueueApplicationService:
        """Get the queue application service."""
        if self._queue_service is None:
            from ..application.services.queue_service import QueueApplicationService

            self._queue_service = QueueApplicationService(registry=self.registry)
        return self._queue_service

    # === Command Handlers ===

    @property
    def play_track_handler(self) -> PlayTrackHandler:
        """Get the play track command handler."""
        if self._play_track_handler is None:
            from ..application.commands.play_track import PlayTrackHandler

            self._play_track_handler = PlayTrackHandler(
                controller=self.playback_controller,
                track_resolver=self.track_resolver,
            )
        return self._play_track_handler

    @property
    def skip_track_handler(self) -> SkipTrackHandler:
        """Get the skip track command handler."""
        if self._skip_track_handler is None:
            from ..application.commands.skip_track import SkipTrackHandler

            self._skip_track_handler = SkipTrackHandler(controller=self.playback_controller)
        return self._skip_track_handler

    @property
    def vote_skip_handler(self) -> VoteSkipHandler:
        """Get the vote skip command handler."""
        if self._vote_skip_handler is None:
            from ..application.commands.vote_skip import VoteSkipHandler

            self._vote_skip_handler = VoteSkipHandler(controller=self.playback_controller)
        return self._vote_skip_handler

    # === Query Handlers ===

    @property
    def get_queue_handler(self) -> GetQueueHandler:
        """Get the get queue query handler."""
        if self._get_queue_handler is None:
            from ..application.queries.get_queue import GetQueueHandler

            self._get_queue_handler = GetQueueHandler(registry=self.registry)
        return self._get_queue_handler

    @property
    def get_current_handler(self) -> GetCurrentTrackHandler:
        """Get the get current track query handler."""
        if self._get_current_handler is None:
            from ..application.queries.get_current import GetCurrentTrackHandler

            self._get_current_handler = GetCurrentTrackHandler(registry=self.registry)
        return self._get_current_handler

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Build the playback controller so transport callbacks are wired before any command."""
        _ = self.playback_controller

    async def shutdown(self) -> None:
        """Tear down every live session."""
        if self._playback_controller is not None:
            await self._playback_controller.shutdown()


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
