"""
Unit Tests for the Domain Event Bus

Tests for:
- Event models (defaults, immutability)
- subscribe / unsubscribe / publish
- Handler failure isolation
- publish_all ordering
- Global singleton management
"""

import pytest
from pydantic import ValidationError

from conftest import GUILD_ID

from discord_jukebox.domain.shared.events import (
    EventBus,
    QueueExhausted,
    SessionDestroyed,
    TrackStartedPlaying,
    TrackStreamFailed,
    get_event_bus,
    reset_event_bus,
)


# =============================================================================
# Event models
# =============================================================================


class TestDomainEvents:
    def test_defaults(self):
        event = TrackStartedPlaying(guild_id=GUILD_ID, track_title="Song")
        assert event.event_id
        assert event.occurred_at.tzinfo is not None
        assert event.requested_by_id is None

    def test_unique_ids(self):
        assert SessionDestroyed(guild_id=GUILD_ID).event_id != SessionDestroyed(guild_id=GUILD_ID).event_id

    def test_frozen(self):
        event = QueueExhausted(guild_id=GUILD_ID)
        with pytest.raises(ValidationError):
            event.last_track_title = "x"  # type: ignore[misc]

    def test_stream_failed_carries_loop_flag(self):
        event = TrackStreamFailed(guild_id=GUILD_ID, track_title="Song", loop_enabled=True)
        assert event.loop_enabled is True
        assert event.text_channel_id is None

    def test_invalid_guild_id(self):
        with pytest.raises(ValidationError):
            SessionDestroyed(guild_id=0)


# =============================================================================
# EventBus
# =============================================================================


class TestEventBus:
    async def test_publish_to_subscribers(self, event_bus):
        received = []

        async def handler(event):
            received.append(event)

        event_bus.subscribe(QueueExhausted, handler)
        event = QueueExhausted(guild_id=GUILD_ID)
        await event_bus.publish(event)

        assert received == [event]

    async def test_only_matching_type(self, event_bus):
        received = []

        async def handler(event):
            received.append(event)

        event_bus.subscribe(QueueExhausted, handler)
        await event_bus.publish(SessionDestroyed(guild_id=GUILD_ID))

        assert received == []

    async def test_publish_without_handlers(self, event_bus):
        await event_bus.publish(SessionDestroyed(guild_id=GUILD_ID))

    async def test_unsubscribe(self, event_bus):
        received = []

        async def handler(event):
            received.append(event)

        event_bus.subscribe(QueueExhausted, handler)
        event_bus.unsubscribe(QueueExhausted, handler)
        event_bus.unsubscribe(QueueExhausted, handler)
        await event_bus.publish(QueueExhausted(guild_id=GUILD_ID))

        assert received == []

    async def test_failing_handler_does_not_block_others(self, event_bus, caplog):
        received = []

        async def broken(event):
            raise RuntimeError("handler exploded")

        async def healthy(event):
            received.append(event)

        event_bus.subscribe(SessionDestroyed, broken)
        event_bus.subscribe(SessionDestroyed, healthy)
        await event_bus.publish(SessionDestroyed(guild_id=GUILD_ID, reason="stopped"))

        assert len(received) == 1
        assert "Error in handler for SessionDestroyed" in caplog.text

    async def test_publish_all_preserves_order(self, event_bus):
        order = []

        async def handler(event):
            order.append(type(event).__name__)

        event_bus.subscribe(TrackStartedPlaying, handler)
        event_bus.subscribe(QueueExhausted, handler)
        event_bus.subscribe(SessionDestroyed, handler)

        await event_bus.publish_all(
            [
                TrackStartedPlaying(guild_id=GUILD_ID),
                QueueExhausted(guild_id=GUILD_ID),
                SessionDestroyed(guild_id=GUILD_ID),
            ]
        )

        assert order == ["TrackStartedPlaying", "QueueExhausted", "SessionDestroyed"]

    async def test_clear(self, event_bus):
        received = []

        async def handler(event):
            received.append(event)

        event_bus.subscribe(QueueExhausted, handler)
        event_bus.clear()
        await event_bus.publish(QueueExhausted(guild_id=GUILD_ID))

        assert received == []


# =============================================================================
# Global bus
# =============================================================================


class TestGlobalEventBus:
    def test_singleton(self):
        assert get_event_bus() is get_event_bus()
        assert isinstance(get_event_bus(), EventBus)

    def test_reset_creates_new_bus(self):
        first = get_event_bus()
        reset_event_bus()
        assert get_event_bus() is not first
