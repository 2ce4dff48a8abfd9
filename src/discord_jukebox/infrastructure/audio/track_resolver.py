"""TrackResolver adapter dispatching queries to the YouTube or Spotify resolver."""

from __future__ import annotations

import logging

from discord_jukebox.application.interfaces.track_resolver import Resolution, TrackResolver
from discord_jukebox.domain.music.entities import Track
from discord_jukebox.domain.shared.exceptions import NoResultsError, UserInputError
from discord_jukebox.domain.shared.messages import ErrorMessages, LogTemplates
from discord_jukebox.infrastructure.audio.spotify_resolver import SpotifyResolver
from discord_jukebox.infrastructure.audio.url_classifier import InputType, classify
from discord_jukebox.infrastructure.audio.ytdlp_resolver import YtDlpResolver

logger = logging.getLogger(__name__)


class MediaTrackResolver(TrackResolver):
    """Resolves links and search terms using :func:`classify` to pick a backend."""

    def __init__(self, *, youtube: YtDlpResolver, spotify: SpotifyResolver) -> None:
        self._youtube = youtube
        self._spotify = spotify

    async def resolve(self, query: str, requester_id: int) -> Resolution:
        kind, value = classify(query)

        match kind:
            case InputType.SPOTIFY_TRACK:
                resolution = await self._spotify.resolve_track(value, requester_id, query)
            case InputType.SPOTIFY_PLAYLIST:
                resolution = await self._spotify.resolve_playlist(value, requester_id, query)
            case InputType.SPOTIFY_ALBUM:
                resolution = await self._spotify.resolve_album(value, requester_id, query)
            case InputType.SPOTIFY_UNSUPPORTED:
                raise UserInputError(ErrorMessages.UNSUPPORTED_LINK, field="query")
            case InputType.YOUTUBE_PLAYLIST:
                resolution = await self._youtube.resolve_playlist(value, requester_id)
            case InputType.YOUTUBE_URL | InputType.OTHER_URL:
                resolution = await self._youtube.resolve_video(value, requester_id)
            case _:
                resolution = await self._youtube.resolve_search(value, requester_id)

        logger.info(LogTemplates.RESOLVED, query, len(resolution.tracks), resolution.failed)
        return resolution

    async def search(self, query: str, requester_id: int, limit: int = 5) -> list[Track]:
        results = await self._youtube.search(query, requester_id, limit)
        if not results:
            raise NoResultsError(query, ErrorMessages.NO_SEARCH_RESULTS)
        return results

    async def stream_url(self, url: str) -> str:
        return await self._youtube.stream_url(url)
