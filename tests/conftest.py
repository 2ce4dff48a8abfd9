import asyncio
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from discord_jukebox.application.interfaces.track_resolver import Resolution, TrackResolver
from discord_jukebox.application.interfaces.voice_transport import VoiceTransport
from discord_jukebox.application.services.idle_monitor import IdleMonitor
from discord_jukebox.application.services.playback_controller import PlaybackController
from discord_jukebox.domain.music.entities import Track
from discord_jukebox.domain.music.registry import SessionRegistry
from discord_jukebox.domain.shared.events import EventBus, reset_event_bus
from discord_jukebox.domain.shared.exceptions import NoResultsError, StreamUnavailableError

GUILD_ID = 111111111111111111
VOICE_CHANNEL_ID = 222222222222222222
TEXT_CHANNEL_ID = 333333333333333333
USER_A = 444444444444444441
USER_B = 444444444444444442
USER_C = 444444444444444443


def listening(*user_ids: int, others: int = 0) -> set[int]:
    """Ids of a voice room holding ``user_ids`` plus ``others`` anonymous listeners."""
    return {*user_ids, *(900_000_000 + n for n in range(others))}


def make_track(title: str = "Song", *, requester: int = USER_A, duration: int = 180, **kwargs) -> Track:
    """Build a track whose URL is derived from its title."""
    slug = title.lower().replace(" ", "-")
    return Track(
        title=title,
        url=kwargs.pop("url", f"https://www.youtube.com/watch?v={slug}"),
        duration_seconds=duration,
        requested_by_id=requester,
        **kwargs,
    )


# ============================================================================
# Fakes
# ============================================================================


class FakeSession:
    def __init__(self, guild_id: int, channel_id: int) -> None:
        self.guild_id = guild_id
        self.channel_id = channel_id


class FakeSink:
    def __init__(self, track: Track, volume: float) -> None:
        self.track = track
        self.volume = volume


class FakeVoiceTransport(VoiceTransport):
    """In-memory voice transport that records every call.

    ``members`` are the ids :meth:`listener_ids` reports and
    ``failing_urls`` are track URLs whose streams cannot be opened.
    """

    def __init__(self) -> None:
        self.members: set[int] = {USER_A}
        self.failing_urls: set[str] = set()
        self.connect_error: Exception | None = None
        self.connects: list[tuple[int, int]] = []
        self.started: list[Track] = []
        self.sinks: list[FakeSink] = []
        self.stops = 0
        self.pauses = 0
        self.resumes = 0
        self.destroyed: list[FakeSession] = []
        self.volumes: list[tuple[FakeSink, float]] = []
        self.on_stream_end = None

    async def connect(self, guild_id, channel_id):
        if self.connect_error is not None:
            raise self.connect_error
        self.connects.append((guild_id, channel_id))
        return FakeSession(guild_id, channel_id)

    async def start_stream(self, session, track, volume):
        if track.url in self.failing_urls:
            raise StreamUnavailableError(track.url)
        sink = FakeSink(track, volume)
        self.started.append(track)
        self.sinks.append(sink)
        return sink

    def set_volume(self, sink, volume):
        self.volumes.append((sink, volume))

    def pause(self, session):
        self.pauses += 1

    def resume(self, session):
        self.resumes += 1

    def stop(self, session):
        self.stops += 1

    async def destroy(self, session):
        self.destroyed.append(session)

    def listener_ids(self, session):
        return set(self.members)

    def set_on_stream_end(self, callback):
        self.on_stream_end = callback

    @property
    def current_sink(self) -> FakeSink:
        return self.sinks[-1]


class FakeTrackResolver(TrackResolver):
    """Resolver returning canned resolutions keyed by query."""

    def __init__(self) -> None:
        self.resolutions: dict[str, Resolution] = {}
        self.search_results: list[Track] = []
        self.calls: list[tuple[str, int]] = []

    async def resolve(self, query, requester_id):
        self.calls.append((query, requester_id))
        if query not in self.resolutions:
            raise NoResultsError(query)
        return self.resolutions[query]

    async def search(self, query, requester_id, limit=5):
        return self.search_results[:limit]

    async def stream_url(self, url):
        return f"{url}&stream=1"


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _reset_global_event_bus():
    reset_event_bus()
    yield
    reset_event_bus()


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry()


@pytest.fixture
def transport() -> FakeVoiceTransport:
    return FakeVoiceTransport()


@pytest.fixture
def resolver() -> FakeTrackResolver:
    return FakeTrackResolver()


@pytest.fixture
def idle_monitor() -> IdleMonitor:
    return IdleMonitor(timeout_seconds=0.05)


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def published(event_bus):
    """Every event published on ``event_bus``, in order."""
    events = []
    original = event_bus.publish

    async def record(event):
        events.append(event)
        await original(event)

    event_bus.publish = record
    return events


@pytest.fixture
async def controller(registry, transport, idle_monitor, event_bus):
    controller = PlaybackController(
        registry=registry,
        transport=transport,
        idle_monitor=idle_monitor,
        event_bus=event_bus,
    )
    yield controller
    await controller.shutdown()


@pytest.fixture
def factory(controller):
    return controller.session_factory(GUILD_ID, VOICE_CHANNEL_ID, TEXT_CHANNEL_ID)


async def settle(delay: float = 0.0) -> None:
    """Let pending tasks run."""
    await asyncio.sleep(delay)


def make_interaction(*, user_id: int = USER_A, in_voice: bool = True) -> MagicMock:
    """Slash-command interaction from a guild member, optionally in the voice channel."""
    interaction = MagicMock(spec=discord.Interaction)
    interaction.response = MagicMock()
    interaction.response.is_done.return_value = False
    interaction.response.send_message = AsyncMock()
    interaction.response.defer = AsyncMock()
    interaction.followup = MagicMock()
    interaction.followup.send = AsyncMock()
    interaction.original_response = AsyncMock()
    interaction.channel_id = TEXT_CHANNEL_ID

    interaction.guild = MagicMock()
    interaction.guild.id = GUILD_ID

    member = MagicMock(spec=discord.Member)
    member.id = user_id
    member.guild = interaction.guild
    member.guild_permissions = MagicMock(administrator=False)
    member.roles = []
    if in_voice:
        member.voice = MagicMock()
        member.voice.channel = MagicMock()
        member.voice.channel.id = VOICE_CHANNEL_ID
    else:
        member.voice = None
    interaction.user = member
    return interaction
