"""
Unit Tests for QueueApplicationService

Tests for:
- remove / move / shuffle / clear on a live queue
- rejection of invalid positions without mutation
- NoActiveSessionError without a session
"""

import random

import pytest

from conftest import GUILD_ID, make_track

from discord_jukebox.application.services.queue_service import QueueApplicationService
from discord_jukebox.domain.music.entities import GuildQueue
from discord_jukebox.domain.shared.exceptions import NoActiveSessionError, UserInputError


@pytest.fixture
async def queue(registry) -> GuildQueue:
    async def factory() -> GuildQueue:
        return GuildQueue(guild_id=GUILD_ID, tracks=[make_track(t) for t in "ABCD"])

    return await registry.get_or_create(GUILD_ID, factory)


@pytest.fixture
def service(registry) -> QueueApplicationService:
    return QueueApplicationService(registry=registry, rng=random.Random(3))


def _titles(queue: GuildQueue) -> list[str]:
    return [t.title for t in queue.tracks]


class TestQueueService:
    async def test_remove(self, service, queue):
        removed = await service.remove(GUILD_ID, 2)
        assert removed.title == "B"
        assert _titles(queue) == ["A", "C", "D"]

    async def test_remove_current_rejected(self, service, queue):
        with pytest.raises(UserInputError):
            await service.remove(GUILD_ID, 1)
        assert _titles(queue) == ["A", "B", "C", "D"]

    async def test_move(self, service, queue):
        outcome = await service.move(GUILD_ID, 2, 3)
        assert outcome.track.title == "B"
        assert (outcome.from_position, outcome.to_position) == (2, 3)
        assert _titles(queue) == ["A", "C", "B", "D"]

    async def test_move_out_of_range(self, service, queue):
        with pytest.raises(UserInputError):
            await service.move(GUILD_ID, 2, 9)
        assert _titles(queue) == ["A", "B", "C", "D"]

    async def test_shuffle_keeps_current(self, service, queue):
        assert await service.shuffle(GUILD_ID) == 3
        assert queue.current.title == "A"
        assert sorted(_titles(queue)) == ["A", "B", "C", "D"]

    async def test_clear(self, service, queue):
        assert await service.clear(GUILD_ID) == 3
        assert _titles(queue) == ["A"]

    @pytest.mark.parametrize("method,args", [
        ("remove", (2,)),
        ("move", (2, 3)),
        ("shuffle", ()),
        ("clear", ()),
    ])
    async def test_requires_session(self, service, method, args):
        with pytest.raises(NoActiveSessionError):
            await getattr(service, method)(GUILD_ID, *args)
