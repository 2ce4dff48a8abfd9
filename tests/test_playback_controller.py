"""
Unit Tests for PlaybackController

Tests for:
- enqueue (session creation, start on first track, concurrent callers, connect failures)
- the advance path (stream end, loop replay, stream errors, unplayable heads)
- stale stream-end callbacks
- skip / jump / vote_skip / pause / resume / stop / set_volume / toggle_loop
- teardown, idle timeout, room vacancy and shutdown
- event publication after the guild lock is released
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from conftest import (
    GUILD_ID,
    TEXT_CHANNEL_ID,
    USER_A,
    USER_B,
    USER_C,
    VOICE_CHANNEL_ID,
    listening,
    make_track,
    settle,
)

from discord_jukebox.domain.music.value_objects import PlaybackState, TeardownReason
from discord_jukebox.domain.shared.events import (
    QueueExhausted,
    SessionDestroyed,
    TrackStartedPlaying,
    TrackStreamFailed,
)
from discord_jukebox.domain.shared.exceptions import (
    InvalidOperationError,
    NoActiveSessionError,
    PermissionDeniedError,
    UserInputError,
    VoiceConnectionError,
)
from discord_jukebox.domain.voting.value_objects import VoteResult

OTHER_GUILD = 555555555555555555


def _titles(controller) -> list[str]:
    queue = controller.registry.get(GUILD_ID)
    return [t.title for t in queue.tracks] if queue else []


async def _enqueue(controller, factory, *titles: str, requester: int = USER_A):
    return await controller.enqueue(
        GUILD_ID, [make_track(t, requester=requester) for t in titles], session_factory=factory
    )


# =============================================================================
# Enqueue
# =============================================================================


class TestEnqueue:
    """Tests for appending tracks and starting playback."""

    async def test_first_enqueue_creates_session_and_plays(self, controller, transport, factory):
        outcome = await _enqueue(controller, factory, "A")

        assert transport.connects == [(GUILD_ID, VOICE_CHANNEL_ID)]
        assert outcome.started
        assert outcome.first_position == 1
        assert outcome.now_playing.title == "A"

        queue = controller.registry.get(GUILD_ID)
        assert queue.state == PlaybackState.PLAYING
        assert queue.text_channel_id == TEXT_CHANNEL_ID
        assert queue.audio_sink is transport.current_sink
        assert queue.started_at is not None

    async def test_enqueue_while_playing_appends(self, controller, transport, factory):
        await _enqueue(controller, factory, "A")
        outcome = await _enqueue(controller, factory, "B", "C")

        assert not outcome.started
        assert outcome.first_position == 2
        assert outcome.added == 2
        assert outcome.queue_length == 3
        assert outcome.now_playing is None
        assert [t.title for t in transport.started] == ["A"]
        assert len(transport.connects) == 1

    async def test_concurrent_enqueues_share_one_session(self, controller, transport, factory):
        await asyncio.gather(
            _enqueue(controller, factory, "A"),
            _enqueue(controller, factory, "B"),
        )

        assert len(transport.connects) == 1
        assert sorted(_titles(controller)) == ["A", "B"]
        assert len(transport.started) == 1

    async def test_connect_failure_registers_nothing(self, controller, transport, factory):
        transport.connect_error = VoiceConnectionError(VOICE_CHANNEL_ID)

        with pytest.raises(VoiceConnectionError):
            await _enqueue(controller, factory, "A")

        assert controller.registry.get(GUILD_ID) is None

    async def test_default_volume_applied_to_new_sessions(
        self, registry, transport, idle_monitor, event_bus
    ):
        from discord_jukebox.application.services.playback_controller import PlaybackController

        controller = PlaybackController(
            registry=registry,
            transport=transport,
            idle_monitor=idle_monitor,
            event_bus=event_bus,
            default_volume=0.5,
        )
        factory = controller.session_factory(GUILD_ID, VOICE_CHANNEL_ID)
        await _enqueue(controller, factory, "A")

        assert registry.get(GUILD_ID).volume == 0.5
        assert transport.current_sink.volume == 0.5
        await controller.shutdown()

    async def test_all_heads_unplayable(self, controller, transport, factory, published):
        transport.failing_urls = {make_track("A").url, make_track("B").url}

        outcome = await _enqueue(controller, factory, "A", "B")

        assert not outcome.started
        queue = controller.registry.get(GUILD_ID)
        assert queue.is_empty
        assert queue.state == PlaybackState.EMPTY
        assert [type(e) for e in published] == [TrackStreamFailed, TrackStreamFailed]


# =============================================================================
# Advance path
# =============================================================================


class TestAdvance:
    """Tests for stream-end handling."""

    async def test_stream_end_plays_next(self, controller, transport, factory):
        await _enqueue(controller, factory, "A", "B")

        await controller.handle_stream_end(GUILD_ID, transport.current_sink, None)

        assert _titles(controller) == ["B"]
        assert [t.title for t in transport.started] == ["A", "B"]

    async def test_loop_replays_current(self, controller, transport, factory):
        await _enqueue(controller, factory, "A", "B")
        await controller.toggle_loop(GUILD_ID)

        await controller.handle_stream_end(GUILD_ID, transport.current_sink, None)

        assert _titles(controller) == ["A", "B"]
        assert [t.title for t in transport.started] == ["A", "A"]

    async def test_stream_error_skips_even_when_looping(
        self, controller, transport, factory, published
    ):
        await _enqueue(controller, factory, "A", "B")
        await controller.toggle_loop(GUILD_ID)

        await controller.handle_stream_end(
            GUILD_ID, transport.current_sink, RuntimeError("ffmpeg died")
        )

        assert _titles(controller) == ["B"]
        failed = [e for e in published if isinstance(e, TrackStreamFailed)]
        assert len(failed) == 1
        assert failed[0].track_title == "A"
        assert failed[0].loop_enabled
        assert failed[0].text_channel_id == TEXT_CHANNEL_ID
        assert "ffmpeg died" in failed[0].error

    async def test_unplayable_next_track_is_dropped(self, controller, transport, factory, published):
        transport.failing_urls = {make_track("B").url}
        await _enqueue(controller, factory, "A", "B", "C")

        await controller.handle_stream_end(GUILD_ID, transport.current_sink, None)

        assert _titles(controller) == ["C"]
        assert [t.title for t in transport.started] == ["A", "C"]
        assert any(isinstance(e, TrackStreamFailed) and e.track_title == "B" for e in published)

    async def test_queue_runs_dry(self, controller, transport, factory, published):
        transport.failing_urls = {make_track("B").url}
        await _enqueue(controller, factory, "A", "B")

        await controller.handle_stream_end(GUILD_ID, transport.current_sink, None)

        queue = controller.registry.get(GUILD_ID)
        assert queue.is_empty
        assert queue.state == PlaybackState.EMPTY
        assert queue.audio_sink is None
        assert isinstance(published[-1], QueueExhausted)
        assert published[-1].last_track_title == "A"
        assert published[-1].text_channel_id == TEXT_CHANNEL_ID

    async def test_stale_callback_ignored(self, controller, transport, factory):
        await _enqueue(controller, factory, "A", "B", "C")
        old_sink = transport.current_sink
        await controller.skip(GUILD_ID)

        await controller.handle_stream_end(GUILD_ID, old_sink, None)

        assert _titles(controller) == ["B", "C"]
        assert [t.title for t in transport.started] == ["A", "B"]

    async def test_callback_for_unknown_guild_ignored(self, controller, transport, factory):
        await _enqueue(controller, factory, "A")
        await controller.handle_stream_end(OTHER_GUILD, transport.current_sink, None)
        assert _titles(controller) == ["A"]

    async def test_empty_room_on_stream_end_tears_down(self, controller, transport, factory, published):
        await _enqueue(controller, factory, "A", "B")
        transport.members = set()

        await controller.handle_stream_end(GUILD_ID, transport.current_sink, None)

        assert controller.registry.get(GUILD_ID) is None
        assert len(transport.destroyed) == 1
        destroyed = [e for e in published if isinstance(e, SessionDestroyed)]
        assert destroyed[0].reason == TeardownReason.ROOM_EMPTY.value

    async def test_started_event_published(self, controller, factory, published):
        await _enqueue(controller, factory, "A")
        started = [e for e in published if isinstance(e, TrackStartedPlaying)]
        assert started[0].track_title == "A"
        assert started[0].requested_by_id == USER_A
        assert started[0].announce is False

    async def test_advanced_track_is_announced(self, controller, transport, factory, published):
        await _enqueue(controller, factory, "A", "B")

        await controller.handle_stream_end(GUILD_ID, transport.current_sink, None)

        started = [e for e in published if isinstance(e, TrackStartedPlaying)]
        assert [(e.track_title, e.announce) for e in started] == [("A", False), ("B", True)]
        assert started[1].text_channel_id == TEXT_CHANNEL_ID

    async def test_events_published_outside_lock(self, controller, factory, event_bus, registry):
        lock_states = []

        async def handler(event):
            lock_states.append(registry.lock(GUILD_ID).locked())

        event_bus.subscribe(TrackStartedPlaying, handler)
        await _enqueue(controller, factory, "A")

        assert lock_states == [False]


# =============================================================================
# Commands
# =============================================================================


class TestSkipAndJump:
    async def test_skip_ignores_loop(self, controller, transport, factory):
        await _enqueue(controller, factory, "A", "B")
        await controller.toggle_loop(GUILD_ID)

        skipped = await controller.skip(GUILD_ID)

        assert skipped.title == "A"
        assert _titles(controller) == ["B"]
        assert transport.stops == 1

    async def test_skip_last_track_empties_queue(self, controller, factory):
        await _enqueue(controller, factory, "A")
        await controller.skip(GUILD_ID)
        assert controller.registry.get(GUILD_ID).state == PlaybackState.EMPTY

    async def test_requester_may_skip_own_track(self, controller, factory):
        await _enqueue(controller, factory, "A", "B", requester=USER_B)
        skipped = await controller.skip(GUILD_ID, actor_id=USER_B, is_privileged=False)
        assert skipped.title == "A"

    async def test_others_may_not_skip(self, controller, factory):
        await _enqueue(controller, factory, "A", "B", requester=USER_A)

        with pytest.raises(PermissionDeniedError):
            await controller.skip(GUILD_ID, actor_id=USER_B, is_privileged=False)

        assert _titles(controller) == ["A", "B"]

    async def test_skip_without_session(self, controller):
        with pytest.raises(NoActiveSessionError):
            await controller.skip(GUILD_ID)

    async def test_skip_with_nothing_playing(self, controller, transport, factory):
        await _enqueue(controller, factory, "A")
        await controller.handle_stream_end(GUILD_ID, transport.current_sink, None)

        with pytest.raises(NoActiveSessionError):
            await controller.skip(GUILD_ID)

    async def test_skip_while_paused_resumes_with_next(self, controller, factory):
        await _enqueue(controller, factory, "A", "B")
        await controller.pause(GUILD_ID)

        await controller.skip(GUILD_ID)

        assert controller.registry.get(GUILD_ID).state == PlaybackState.PLAYING

    async def test_jump(self, controller, transport, factory):
        await _enqueue(controller, factory, "A", "B", "C", "D")

        target = await controller.jump(GUILD_ID, 3)

        assert target.title == "C"
        assert _titles(controller) == ["C", "D"]
        assert [t.title for t in transport.started] == ["A", "C"]

    async def test_jump_invalid_position(self, controller, transport, factory):
        await _enqueue(controller, factory, "A", "B")

        with pytest.raises(UserInputError):
            await controller.jump(GUILD_ID, 5)

        assert _titles(controller) == ["A", "B"]
        assert transport.stops == 0

    async def test_jump_reports_track_actually_started(self, controller, transport, factory):
        transport.failing_urls = {make_track("C").url}
        await _enqueue(controller, factory, "A", "B", "C", "D")

        started = await controller.jump(GUILD_ID, 3)

        assert started.title == "D"
        assert _titles(controller) == ["D"]

    async def test_jump_to_unplayable_tail(self, controller, transport, factory):
        transport.failing_urls = {make_track("B").url}
        await _enqueue(controller, factory, "A", "B")

        assert await controller.jump(GUILD_ID, 2) is None
        assert controller.registry.get(GUILD_ID).state == PlaybackState.EMPTY


class TestVoteSkip:
    async def test_votes_until_threshold(self, controller, transport, factory):
        transport.members = listening(USER_A, USER_B, USER_C)
        await _enqueue(controller, factory, "A", "B", requester=USER_A)

        first = await controller.vote_skip(GUILD_ID, USER_B, is_privileged=False)
        assert first.result == VoteResult.VOTE_RECORDED
        assert (first.votes, first.threshold) == (1, 2)
        assert _titles(controller) == ["A", "B"]

        second = await controller.vote_skip(GUILD_ID, USER_C, is_privileged=False)
        assert second.result == VoteResult.THRESHOLD_MET
        assert _titles(controller) == ["B"]
        assert controller.registry.get(GUILD_ID).vote_count == 0

    async def test_requester_vote_is_privileged(self, controller, transport, factory):
        transport.members = listening(USER_A, USER_B, others=2)
        await _enqueue(controller, factory, "A", "B", requester=USER_A)

        tally = await controller.vote_skip(GUILD_ID, USER_A, is_privileged=False)

        assert tally.result == VoteResult.PRIVILEGED_SKIP
        assert _titles(controller) == ["B"]

    async def test_votes_reset_on_track_change(self, controller, transport, factory):
        transport.members = listening(USER_A, USER_B, others=3)
        await _enqueue(controller, factory, "A", "B", requester=USER_A)
        await controller.vote_skip(GUILD_ID, USER_B, is_privileged=False)

        await controller.handle_stream_end(GUILD_ID, transport.current_sink, None)

        tally = await controller.vote_skip(GUILD_ID, USER_B, is_privileged=False)
        assert tally.result == VoteResult.VOTE_RECORDED
        assert tally.votes == 1

    async def test_absent_member_cannot_vote(self, controller, transport, factory):
        transport.members = {USER_A}
        await _enqueue(controller, factory, "A", "B", requester=USER_A)

        tally = await controller.vote_skip(GUILD_ID, USER_B, is_privileged=False)

        assert tally.result == VoteResult.NOT_IN_CHANNEL
        assert not tally.skipped
        assert _titles(controller) == ["A", "B"]
        assert controller.registry.get(GUILD_ID).votes == set()
        assert transport.stops == 0

    async def test_absent_dj_cannot_vote(self, controller, transport, factory):
        transport.members = {USER_A}
        await _enqueue(controller, factory, "A", "B", requester=USER_A)

        tally = await controller.vote_skip(GUILD_ID, USER_B, is_privileged=True)

        assert tally.result == VoteResult.NOT_IN_CHANNEL
        assert _titles(controller) == ["A", "B"]

    async def test_votes_of_departed_members_dropped(self, controller, transport, factory):
        transport.members = listening(USER_A, USER_B, USER_C, others=1)
        await _enqueue(controller, factory, "A", "B", requester=USER_A)
        await controller.vote_skip(GUILD_ID, USER_B, is_privileged=False)

        transport.members = listening(USER_A, USER_C, others=1)
        tally = await controller.vote_skip(GUILD_ID, USER_C, is_privileged=False)

        assert tally.result == VoteResult.VOTE_RECORDED
        assert (tally.votes, tally.threshold) == (1, 2)
        assert controller.registry.get(GUILD_ID).votes == {USER_C}
        assert _titles(controller) == ["A", "B"]


class TestPlaybackControls:
    async def test_pause_and_resume(self, controller, transport, factory):
        await _enqueue(controller, factory, "A")

        await controller.pause(GUILD_ID)
        assert controller.registry.get(GUILD_ID).state == PlaybackState.PAUSED
        assert transport.pauses == 1

        await controller.resume(GUILD_ID)
        assert controller.registry.get(GUILD_ID).state == PlaybackState.PLAYING
        assert transport.resumes == 1

    async def test_pause_when_paused(self, controller, factory):
        await _enqueue(controller, factory, "A")
        await controller.pause(GUILD_ID)

        with pytest.raises(InvalidOperationError):
            await controller.pause(GUILD_ID)

    async def test_resume_when_playing(self, controller, factory):
        await _enqueue(controller, factory, "A")
        with pytest.raises(InvalidOperationError):
            await controller.resume(GUILD_ID)

    async def test_pause_without_session(self, controller):
        with pytest.raises(NoActiveSessionError):
            await controller.pause(GUILD_ID)

    async def test_set_volume_applies_to_sink(self, controller, transport, factory):
        await _enqueue(controller, factory, "A")

        applied = await controller.set_volume(GUILD_ID, 2.0)

        assert applied == 2.0
        assert transport.volumes == [(transport.current_sink, 2.0)]

    async def test_volume_carries_to_next_track(self, controller, transport, factory):
        await _enqueue(controller, factory, "A", "B")
        await controller.set_volume(GUILD_ID, 0.3)

        await controller.skip(GUILD_ID)

        assert transport.current_sink.volume == 0.3

    async def test_invalid_volume(self, controller, transport, factory):
        await _enqueue(controller, factory, "A")

        with pytest.raises(UserInputError):
            await controller.set_volume(GUILD_ID, 6.0)

        assert transport.volumes == []
        assert controller.registry.get(GUILD_ID).volume == 1.0

    async def test_toggle_loop(self, controller, factory):
        await _enqueue(controller, factory, "A")
        assert await controller.toggle_loop(GUILD_ID) is True
        assert await controller.toggle_loop(GUILD_ID) is False

    async def test_stop_tears_down(self, controller, transport, factory, published):
        await _enqueue(controller, factory, "A", "B")

        await controller.stop(GUILD_ID)

        assert controller.registry.get(GUILD_ID) is None
        assert len(transport.destroyed) == 1
        assert isinstance(published[-1], SessionDestroyed)
        assert published[-1].reason == TeardownReason.STOPPED.value
        assert published[-1].text_channel_id == TEXT_CHANNEL_ID

    async def test_stop_without_session(self, controller):
        with pytest.raises(NoActiveSessionError):
            await controller.stop(GUILD_ID)


# =============================================================================
# Teardown
# =============================================================================


class TestTeardown:
    async def test_teardown_unknown_guild(self, controller):
        assert await controller.teardown(GUILD_ID, TeardownReason.DISCONNECTED) is False

    async def test_teardown_expected_mismatch(self, controller, factory):
        await _enqueue(controller, factory, "A")
        stale = controller.registry.get(GUILD_ID).model_copy()

        assert await controller.teardown(GUILD_ID, TeardownReason.STOPPED, expected=stale) is False
        assert controller.registry.get(GUILD_ID) is not None

    async def test_idle_reason_requires_empty_queue(self, controller, factory):
        await _enqueue(controller, factory, "A")
        assert await controller.teardown(GUILD_ID, TeardownReason.IDLE_TIMEOUT) is False
        assert controller.registry.get(GUILD_ID) is not None

    async def test_destroy_failure_still_unregisters(self, controller, transport, factory, caplog):
        await _enqueue(controller, factory, "A")
        transport.destroy = AsyncMock(side_effect=RuntimeError("socket closed"))

        assert await controller.teardown(GUILD_ID, TeardownReason.DISCONNECTED) is True

        assert controller.registry.get(GUILD_ID) is None
        assert "Failed to disconnect voice" in caplog.text

    async def test_teardown_discards_queue(self, controller, factory):
        await _enqueue(controller, factory, "A", "B")
        queue = controller.registry.get(GUILD_ID)

        await controller.teardown(GUILD_ID, TeardownReason.GUILD_REMOVED)

        assert queue.state == PlaybackState.STOPPED
        assert queue.is_empty
        assert queue.voice_session is None

    async def test_enqueue_after_teardown_creates_new_session(self, controller, transport, factory):
        await _enqueue(controller, factory, "A")
        first = controller.registry.get(GUILD_ID)
        await controller.stop(GUILD_ID)

        await _enqueue(controller, factory, "B")

        assert controller.registry.get(GUILD_ID) is not first
        assert len(transport.connects) == 2


class TestIdleTimeout:
    async def test_empty_queue_torn_down_after_timeout(
        self, controller, transport, factory, published
    ):
        await _enqueue(controller, factory, "A")
        await controller.handle_stream_end(GUILD_ID, transport.current_sink, None)
        assert controller.registry.get(GUILD_ID) is not None

        await settle(0.15)

        assert controller.registry.get(GUILD_ID) is None
        assert len(transport.destroyed) == 1
        assert published[-1].reason == TeardownReason.IDLE_TIMEOUT.value

    async def test_enqueue_cancels_idle_timer(self, controller, transport, factory):
        await _enqueue(controller, factory, "A")
        await controller.handle_stream_end(GUILD_ID, transport.current_sink, None)

        outcome = await _enqueue(controller, factory, "B")
        await settle(0.15)

        assert outcome.started
        assert controller.registry.get(GUILD_ID) is not None
        assert controller.registry.get(GUILD_ID).idle_task is None
        assert transport.destroyed == []

    async def test_teardown_cancels_idle_timer(self, controller, transport, factory):
        await _enqueue(controller, factory, "A")
        await controller.handle_stream_end(GUILD_ID, transport.current_sink, None)
        task = controller.registry.get(GUILD_ID).idle_task

        await controller.teardown(GUILD_ID, TeardownReason.DISCONNECTED)
        await settle()

        assert task.cancelled() or task.done()
        assert len(transport.destroyed) == 1


class TestVacancyAndShutdown:
    async def test_check_vacancy_with_listeners(self, controller, transport, factory):
        await _enqueue(controller, factory, "A")
        assert await controller.check_vacancy(GUILD_ID) is False
        assert controller.registry.get(GUILD_ID) is not None

    async def test_check_vacancy_empty_room(self, controller, transport, factory):
        await _enqueue(controller, factory, "A")
        transport.members = set()

        assert await controller.check_vacancy(GUILD_ID) is True
        assert controller.registry.get(GUILD_ID) is None

    async def test_check_vacancy_without_session(self, controller):
        assert await controller.check_vacancy(GUILD_ID) is False

    async def test_shutdown_tears_down_every_guild(self, controller, transport):
        for guild_id in (GUILD_ID, OTHER_GUILD):
            factory = controller.session_factory(guild_id, VOICE_CHANNEL_ID)
            await controller.enqueue(guild_id, [make_track("A")], session_factory=factory)

        await controller.shutdown()

        assert len(controller.registry) == 0
        assert len(transport.destroyed) == 2
