"""Port interface for resolving user queries into playable tracks."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict, Field

from discord_jukebox.domain.music.entities import Track
from discord_jukebox.domain.shared.types import DiscordSnowflake, NonEmptyStr, NonNegativeInt, PositiveInt


class Resolution(BaseModel):
    """Ordered tracks produced from one query.

    ``collection_title`` and ``collection_kind`` are set when the query named a
    playlist or album. ``source_label`` tags single tracks that came from another
    service. ``failed`` counts entries that could not be matched.
    """

    model_config = ConfigDict(frozen=True)

    tracks: list[Track] = Field(min_length=1)
    collection_title: str | None = None
    collection_kind: str | None = None
    source_label: str | None = None
    failed: NonNegativeInt = 0

    @property
    def is_collection(self) -> bool:
        return self.collection_title is not None


class TrackResolver(ABC):
    """Interface for turning links and search terms into tracks."""

    @abstractmethod
    async def resolve(self, query: NonEmptyStr, requester_id: DiscordSnowflake) -> Resolution:
        """Resolve a link or search term.

        Raises:
            NoResultsError: Nothing matched the query.
            FetchError: The source could not be fetched.
            UserInputError: The link type is not supported.
        """
        ...

    @abstractmethod
    async def search(
        self, query: NonEmptyStr, requester_id: DiscordSnowflake, limit: PositiveInt = 5
    ) -> list[Track]:
        """Return up to ``limit`` candidate tracks for a search term."""
        ...

    @abstractmethod
    async def stream_url(self, url: NonEmptyStr) -> str:
        """Return a direct media URL for a track.

        Raises:
            StreamUnavailableError: No playable stream could be extracted.
        """
        ...
