"""yt-dlp backed resolution of YouTube links, playlists and search terms."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

from yt_dlp import YoutubeDL
from yt_dlp.utils import YoutubeDLError

from discord_jukebox.application.interfaces.track_resolver import Resolution
from discord_jukebox.config.settings import AudioSettings
from discord_jukebox.domain.music.entities import Track
from discord_jukebox.domain.music.value_objects import TrackOrigin
from discord_jukebox.domain.shared.exceptions import (
    FetchError,
    NoResultsError,
    StreamUnavailableError,
)
from discord_jukebox.domain.shared.messages import ErrorMessages, LogTemplates
from discord_jukebox.infrastructure.audio.models import (
    CACHE_MAX_SIZE,
    CACHE_TTL,
    LOG_URL_TRUNCATE,
    AudioFormatInfo,
    CacheEntry,
    YtDlpOpts,
    YtDlpTrackInfo,
)

logger = logging.getLogger(__name__)


class YtDlpResolver:
    """Turns YouTube links and search terms into :class:`Track` objects.

    Metadata lookups (playlists, searches) use flat extraction so they stay
    fast; the direct media URL is only extracted when a track is about to
    play, through :meth:`stream_url`, and cached for ``CACHE_TTL`` seconds.
    """

    def __init__(self, settings: AudioSettings | None = None) -> None:
        self._settings = settings or AudioSettings()
        self._base_opts = YtDlpOpts(format=self._settings.ytdlp_format)
        self._cache: dict[str, CacheEntry] = {}

    @property
    def playlist_limit(self) -> int:
        return self._settings.playlist_limit

    def _get_opts(self, **overrides: Any) -> YtDlpOpts:
        if overrides:
            return self._base_opts.model_copy(update=overrides)
        return self._base_opts

    def _get_flat_opts(self, **overrides: Any) -> YtDlpOpts:
        return self._get_opts(extract_flat="in_playlist", format=None, **overrides)

    @staticmethod
    def _parse_info(data: dict[str, Any]) -> YtDlpTrackInfo:
        return YtDlpTrackInfo.model_validate(data)

    @staticmethod
    def _info_to_track(
        info: YtDlpTrackInfo,
        requester_id: int,
        *,
        origin: TrackOrigin = TrackOrigin.NATIVE_VIDEO,
        source_url: str | None = None,
    ) -> Track | None:
        page_url = info.page_url
        if page_url is None:
            return None
        return Track(
            title=info.title[:500],
            url=page_url,
            duration_seconds=info.duration_seconds,
            requested_by_id=requester_id,
            origin=origin,
            source_url=source_url or page_url,
        )

    @staticmethod
    def _entries(data: Any) -> list[YtDlpTrackInfo]:
        if not isinstance(data, dict):
            return []
        entries = data.get("entries") or []
        return [YtDlpResolver._parse_info(dict(e)) for e in entries if isinstance(e, dict)]

    # ── Blocking helpers (run via asyncio.to_thread) ────────────────

    def _extract_sync(self, url: str, opts: YtDlpOpts) -> dict[str, Any] | None:
        with YoutubeDL(params=opts.to_params()) as ydl:
            data = ydl.extract_info(url, download=False)
        return dict(data) if isinstance(data, dict) else None

    def _search_sync(self, query: str, limit: int) -> list[YtDlpTrackInfo]:
        data = self._extract_sync(f"ytsearch{limit}:{query}", self._get_flat_opts())
        return self._entries(data)

    def _stream_url_sync(self, url: str) -> str | None:
        now = time.time()
        cached = self._cache.get(url)
        if cached is not None:
            if now - cached.cached_at < CACHE_TTL:
                logger.debug(LogTemplates.CACHE_HIT_URL, url[:LOG_URL_TRUNCATE])
                return cached.stream_url
            self._cache.pop(url, None)

        data = self._extract_sync(url, self._get_opts())
        if data is None:
            return None
        info = self._parse_info(data)
        stream_url = info.url or self._extract_stream_from_formats(info.formats)
        if stream_url:
            self._cache[url] = CacheEntry(stream_url=stream_url, cached_at=now)
            self._evict_expired(now)
        return stream_url

    def _evict_expired(self, now: float) -> None:
        if len(self._cache) <= CACHE_MAX_SIZE:
            return
        expired = [k for k, entry in self._cache.items() if now - entry.cached_at >= CACHE_TTL]
        for k in expired:
            self._cache.pop(k, None)
        if expired:
            logger.debug(LogTemplates.CACHE_EXPIRED_CLEANED, len(expired))

    @staticmethod
    def _extract_stream_from_formats(formats: list[AudioFormatInfo]) -> str | None:
        audio_formats = [f for f in formats if f.acodec != "none" and f.url]
        if audio_formats:
            return audio_formats[-1].url
        return None

    # ── Public API ──────────────────────────────────────────────────

    async def resolve_video(self, url: str, requester_id: int) -> Resolution:
        """Resolve a single video link."""
        try:
            data = await asyncio.to_thread(self._extract_sync, url, self._get_flat_opts())
        except YoutubeDLError as exc:
            logger.warning(LogTemplates.YTDLP_FAILED_EXTRACT_INFO, url, exc_info=exc)
            raise FetchError(url, ErrorMessages.FETCH_VIDEO_FAILED) from exc

        track = self._info_to_track(self._parse_info(data), requester_id) if data else None
        if track is None:
            raise FetchError(url, ErrorMessages.FETCH_VIDEO_FAILED)
        return Resolution(tracks=[track])

    async def resolve_playlist(self, url: str, requester_id: int) -> Resolution:
        """Resolve a playlist link into at most ``playlist_limit`` tracks."""
        opts = self._get_flat_opts(noplaylist=False, playlistend=self.playlist_limit)
        try:
            data = await asyncio.to_thread(self._extract_sync, url, opts)
        except YoutubeDLError as exc:
            logger.warning(LogTemplates.YTDLP_FAILED_EXTRACT_PLAYLIST, url, exc_info=exc)
            raise FetchError(url, ErrorMessages.FETCH_PLAYLIST_FAILED) from exc

        if data is None:
            raise FetchError(url, ErrorMessages.FETCH_PLAYLIST_FAILED)

        entries = self._entries(data)[: self.playlist_limit]
        tracks = [t for e in entries if (t := self._info_to_track(e, requester_id)) is not None]
        if not tracks:
            raise NoResultsError(url, ErrorMessages.NO_PLAYABLE_IN_PLAYLIST)

        title = data.get("title") if isinstance(data.get("title"), str) else None
        return Resolution(
            tracks=tracks,
            collection_title=title or url,
            collection_kind="playlist",
            failed=len(entries) - len(tracks),
        )

    async def search(self, query: str, requester_id: int, limit: int = 5) -> list[Track]:
        """Return up to ``limit`` video results for a search term."""
        try:
            results = await asyncio.to_thread(self._search_sync, query, limit)
        except YoutubeDLError as exc:
            logger.warning(LogTemplates.YTDLP_FAILED_SEARCH, query, exc_info=exc)
            raise FetchError(query) from exc

        return [t for info in results if (t := self._info_to_track(info, requester_id)) is not None]

    async def first_match(
        self,
        query: str,
        requester_id: int,
        *,
        origin: TrackOrigin = TrackOrigin.NATIVE_VIDEO,
        source_url: str | None = None,
    ) -> Track | None:
        """Top search result for ``query``, or None if nothing matched."""
        try:
            results = await asyncio.to_thread(self._search_sync, query, 1)
        except YoutubeDLError as exc:
            logger.warning(LogTemplates.YTDLP_FAILED_SEARCH, query, exc_info=exc)
            return None

        for info in results:
            track = self._info_to_track(info, requester_id, origin=origin, source_url=source_url)
            if track is not None:
                return track
        return None

    async def resolve_search(self, query: str, requester_id: int) -> Resolution:
        track = await self.first_match(query, requester_id)
        if track is None:
            raise NoResultsError(query, ErrorMessages.NO_VIDEO_RESULTS)
        return Resolution(tracks=[track])

    async def stream_url(self, url: str) -> str:
        """Extract the direct media URL for a video page."""
        try:
            stream_url = await asyncio.to_thread(self._stream_url_sync, url)
        except YoutubeDLError as exc:
            logger.warning(LogTemplates.YTDLP_FAILED_EXTRACT_INFO, url, exc_info=exc)
            raise StreamUnavailableError(url, ErrorMessages.NO_STREAM_URL.format(url=url)) from exc

        if not stream_url:
            logger.warning(LogTemplates.YTDLP_NO_STREAM_URL, url)
            raise StreamUnavailableError(url, ErrorMessages.NO_STREAM_URL.format(url=url))
        return stream_url
