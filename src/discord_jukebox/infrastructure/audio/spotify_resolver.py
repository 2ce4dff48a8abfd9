"""Spotify link resolution: tracks, playlists and albums matched to YouTube videos."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import spotipy
from spotipy.oauth2 import SpotifyClientCredentials

from discord_jukebox.application.interfaces.track_resolver import Resolution
from discord_jukebox.config.settings import SpotifySettings
from discord_jukebox.domain.music.entities import Track
from discord_jukebox.domain.music.value_objects import TrackOrigin
from discord_jukebox.domain.shared.exceptions import FetchError, NoResultsError
from discord_jukebox.domain.shared.messages import ErrorMessages, LogTemplates
from discord_jukebox.infrastructure.audio.ytdlp_resolver import YtDlpResolver

logger = logging.getLogger(__name__)

SPOTIFY_TRACK_URL = "https://open.spotify.com/track/{track_id}"


class SpotifyResolver:
    """Reads Spotify metadata and finds a matching YouTube video for each track.

    Each Spotify track is searched on YouTube as ``"<name> <artist> <artist>..."``;
    the first hit becomes the playback URL while the Spotify link is kept as
    the track's display link.
    """

    def __init__(
        self,
        settings: SpotifySettings,
        youtube: YtDlpResolver,
        *,
        client: spotipy.Spotify | None = None,
        limit: int = 50,
    ) -> None:
        self._youtube = youtube
        self._limit = limit
        self._sp: spotipy.Spotify | None = client
        if self._sp is None and settings.enabled:
            auth = SpotifyClientCredentials(
                client_id=settings.client_id,
                client_secret=settings.client_secret.get_secret_value(),
            )
            self._sp = spotipy.Spotify(auth_manager=auth)
        if self._sp is None:
            logger.warning(LogTemplates.SPOTIFY_DISABLED)

    @property
    def available(self) -> bool:
        return self._sp is not None

    def _client(self, query: str) -> spotipy.Spotify:
        if self._sp is None:
            raise FetchError(query, ErrorMessages.SPOTIFY_NOT_CONFIGURED)
        return self._sp

    @staticmethod
    def _search_terms(track: dict[str, Any]) -> str:
        artists = " ".join(a["name"] for a in track.get("artists", []) if a.get("name"))
        return f"{track.get('name', '')} {artists}".strip()

    @staticmethod
    def _spotify_link(track: dict[str, Any], fallback: str) -> str:
        external = track.get("external_urls") or {}
        if external.get("spotify"):
            return external["spotify"]
        if track.get("id"):
            return SPOTIFY_TRACK_URL.format(track_id=track["id"])
        return fallback

    def _collect_sync(self, first_page: dict[str, Any] | None, *, nested: bool) -> list[dict[str, Any]]:
        """Walk paged results up to the configured limit.

        Playlist pages wrap each track in ``{"track": ...}``; album pages do not.
        """
        sp = self._sp
        assert sp is not None
        items: list[dict[str, Any]] = []
        page = first_page
        while page and len(items) < self._limit:
            for item in page.get("items", []):
                track = item.get("track") if nested else item
                if track:
                    items.append(track)
            page = sp.next(page) if page.get("next") else None
        return items[: self._limit]

    async def _match(self, track: dict[str, Any], requester_id: int, fallback: str) -> Track | None:
        terms = self._search_terms(track)
        if not terms:
            return None
        match = await self._youtube.first_match(
            terms,
            requester_id,
            origin=TrackOrigin.EXTERNAL_SERVICE,
            source_url=self._spotify_link(track, fallback),
        )
        if match is None:
            logger.info(LogTemplates.SPOTIFY_NO_MATCH, terms)
        return match

    async def resolve_track(self, track_id: str, requester_id: int, query: str) -> Resolution:
        sp = self._client(query)
        try:
            data = await asyncio.to_thread(sp.track, track_id)
        except spotipy.SpotifyException as exc:
            logger.warning(LogTemplates.SPOTIFY_REQUEST_FAILED, "track", track_id, exc_info=exc)
            raise FetchError(query, ErrorMessages.FETCH_SPOTIFY_TRACK_FAILED) from exc

        track = await self._match(data, requester_id, query)
        if track is None:
            raise NoResultsError(query, ErrorMessages.NO_MATCH_FOR_SPOTIFY_TRACK)
        return Resolution(tracks=[track], source_label="Spotify track")

    async def resolve_playlist(self, playlist_id: str, requester_id: int, query: str) -> Resolution:
        sp = self._client(query)
        try:
            info = await asyncio.to_thread(sp.playlist, playlist_id, fields="name")
            first = await asyncio.to_thread(sp.playlist_items, playlist_id, limit=min(self._limit, 100))
            items = await asyncio.to_thread(self._collect_sync, first, nested=True)
        except spotipy.SpotifyException as exc:
            logger.warning(LogTemplates.SPOTIFY_REQUEST_FAILED, "playlist", playlist_id, exc_info=exc)
            raise FetchError(query, ErrorMessages.FETCH_SPOTIFY_PLAYLIST_FAILED) from exc

        return await self._match_all(
            items,
            requester_id,
            query,
            title=info.get("name") or query,
            kind="Spotify playlist",
            empty_message=ErrorMessages.NO_PLAYABLE_IN_SPOTIFY_PLAYLIST,
        )

    async def resolve_album(self, album_id: str, requester_id: int, query: str) -> Resolution:
        sp = self._client(query)
        try:
            info = await asyncio.to_thread(sp.album, album_id)
            first = await asyncio.to_thread(sp.album_tracks, album_id, limit=min(self._limit, 50))
            items = await asyncio.to_thread(self._collect_sync, first, nested=False)
        except spotipy.SpotifyException as exc:
            logger.warning(LogTemplates.SPOTIFY_REQUEST_FAILED, "album", album_id, exc_info=exc)
            raise FetchError(query, ErrorMessages.FETCH_SPOTIFY_ALBUM_FAILED) from exc

        return await self._match_all(
            items,
            requester_id,
            query,
            title=info.get("name") or query,
            kind="Spotify album",
            empty_message=ErrorMessages.NO_PLAYABLE_IN_SPOTIFY_ALBUM,
        )

    async def _match_all(
        self,
        items: list[dict[str, Any]],
        requester_id: int,
        query: str,
        *,
        title: str,
        kind: str,
        empty_message: str,
    ) -> Resolution:
        tracks: list[Track] = []
        for item in items:
            track = await self._match(item, requester_id, query)
            if track is not None:
                tracks.append(track)

        if not tracks:
            raise NoResultsError(query, empty_message)
        return Resolution(
            tracks=tracks,
            collection_title=title,
            collection_kind=kind,
            failed=len(items) - len(tracks),
        )
