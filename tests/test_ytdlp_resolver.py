"""
Unit Tests for YtDlpResolver

Tests for:
- resolve_video / resolve_playlist / resolve_search / search / first_match
- stream_url extraction, format fallback and caching
- yt-dlp error mapping to domain errors
- YtDlpTrackInfo coercion
"""

from unittest.mock import MagicMock, patch

import pytest
from yt_dlp.utils import DownloadError

from conftest import USER_A

from discord_jukebox.config.settings import AudioSettings
from discord_jukebox.domain.music.value_objects import TrackOrigin
from discord_jukebox.domain.shared.exceptions import (
    FetchError,
    NoResultsError,
    StreamUnavailableError,
)
from discord_jukebox.domain.shared.messages import ErrorMessages
from discord_jukebox.infrastructure.audio.models import YtDlpTrackInfo
from discord_jukebox.infrastructure.audio.ytdlp_resolver import YtDlpResolver

VIDEO_URL = "https://www.youtube.com/watch?v=abc"


@pytest.fixture
def resolver() -> YtDlpResolver:
    return YtDlpResolver(AudioSettings(playlist_limit=3))


def _entry(video_id: str, title: str, duration: int | None = 120) -> dict:
    return {"id": video_id, "title": title, "duration": duration, "ie_key": "Youtube"}


# =============================================================================
# Models
# =============================================================================


class TestYtDlpTrackInfo:
    def test_garbage_values_coerced(self):
        info = YtDlpTrackInfo.model_validate(
            {"id": "  ", "title": "", "duration": "abc", "webpage_url": 5}
        )
        assert info.id is None
        assert info.title == "Unknown Title"
        assert info.duration is None
        assert info.webpage_url is None
        assert info.page_url is None

    def test_page_url_rebuilt_from_id(self):
        info = YtDlpTrackInfo.model_validate(_entry("xyz", "T"))
        assert info.page_url == "https://www.youtube.com/watch?v=xyz"

    def test_page_url_from_flat_url(self):
        info = YtDlpTrackInfo.model_validate({"url": "https://example.com/a.mp3"})
        assert info.page_url == "https://example.com/a.mp3"

    def test_negative_duration_dropped(self):
        assert YtDlpTrackInfo.model_validate({"duration": -3}).duration_seconds == 0

    def test_duration_capped(self):
        assert YtDlpTrackInfo.model_validate({"duration": 10**6}).duration_seconds == 86_400


# =============================================================================
# Resolution
# =============================================================================


class TestResolveVideo:
    async def test_single_video(self, resolver):
        data = {"id": "abc", "title": "Video", "duration": 212, "webpage_url": VIDEO_URL}
        with patch.object(resolver, "_extract_sync", return_value=data):
            resolution = await resolver.resolve_video(VIDEO_URL, USER_A)

        track = resolution.tracks[0]
        assert track.title == "Video"
        assert track.url == VIDEO_URL
        assert track.duration_seconds == 212
        assert track.requested_by_id == USER_A
        assert track.origin == TrackOrigin.NATIVE_VIDEO
        assert not resolution.is_collection

    async def test_extraction_error(self, resolver):
        with patch.object(resolver, "_extract_sync", side_effect=DownloadError("gone")):
            with pytest.raises(FetchError) as exc_info:
                await resolver.resolve_video(VIDEO_URL, USER_A)
        assert exc_info.value.message == ErrorMessages.FETCH_VIDEO_FAILED

    async def test_nothing_extracted(self, resolver):
        with patch.object(resolver, "_extract_sync", return_value=None):
            with pytest.raises(FetchError):
                await resolver.resolve_video(VIDEO_URL, USER_A)


class TestResolvePlaylist:
    async def test_playlist_entries(self, resolver):
        data = {
            "title": "Mix",
            "entries": [_entry("a", "A"), {"title": "no link"}, "junk", _entry("b", "B")],
        }
        with patch.object(resolver, "_extract_sync", return_value=data) as extract:
            resolution = await resolver.resolve_playlist("https://youtube.com/playlist?list=PL", USER_A)

        opts = extract.call_args.args[1]
        assert opts.noplaylist is False
        assert opts.playlistend == 3
        assert [t.title for t in resolution.tracks] == ["A", "B"]
        assert resolution.collection_title == "Mix"
        assert resolution.collection_kind == "playlist"
        assert resolution.failed == 1

    async def test_playlist_limit(self, resolver):
        data = {"title": "Big", "entries": [_entry(str(i), f"T{i}") for i in range(10)]}
        with patch.object(resolver, "_extract_sync", return_value=data):
            resolution = await resolver.resolve_playlist("https://youtube.com/playlist?list=PL", USER_A)
        assert len(resolution.tracks) == 3

    async def test_empty_playlist(self, resolver):
        with patch.object(resolver, "_extract_sync", return_value={"title": "Empty", "entries": []}):
            with pytest.raises(NoResultsError) as exc_info:
                await resolver.resolve_playlist("https://youtube.com/playlist?list=PL", USER_A)
        assert exc_info.value.message == ErrorMessages.NO_PLAYABLE_IN_PLAYLIST

    async def test_playlist_error(self, resolver):
        with patch.object(resolver, "_extract_sync", side_effect=DownloadError("private")):
            with pytest.raises(FetchError) as exc_info:
                await resolver.resolve_playlist("https://youtube.com/playlist?list=PL", USER_A)
        assert exc_info.value.message == ErrorMessages.FETCH_PLAYLIST_FAILED


class TestSearch:
    async def test_search_uses_ytsearch_prefix(self, resolver):
        data = {"entries": [_entry("a", "A"), _entry("b", "B")]}
        with patch.object(resolver, "_extract_sync", return_value=data) as extract:
            results = await resolver.search("lofi", USER_A, limit=2)

        assert extract.call_args.args[0] == "ytsearch2:lofi"
        assert [t.title for t in results] == ["A", "B"]

    async def test_search_error(self, resolver):
        with patch.object(resolver, "_extract_sync", side_effect=DownloadError("offline")):
            with pytest.raises(FetchError):
                await resolver.search("lofi", USER_A)

    async def test_first_match_tags_origin(self, resolver):
        data = {"entries": [_entry("a", "A")]}
        with patch.object(resolver, "_extract_sync", return_value=data):
            track = await resolver.first_match(
                "song artist",
                USER_A,
                origin=TrackOrigin.EXTERNAL_SERVICE,
                source_url="https://open.spotify.com/track/1",
            )
        assert track.origin == TrackOrigin.EXTERNAL_SERVICE
        assert track.link == "https://open.spotify.com/track/1"
        assert track.url == "https://www.youtube.com/watch?v=a"

    async def test_first_match_swallows_errors(self, resolver):
        with patch.object(resolver, "_extract_sync", side_effect=DownloadError("offline")):
            assert await resolver.first_match("x", USER_A) is None

    async def test_resolve_search_no_results(self, resolver):
        with patch.object(resolver, "_extract_sync", return_value={"entries": []}):
            with pytest.raises(NoResultsError) as exc_info:
                await resolver.resolve_search("zzzz", USER_A)
        assert exc_info.value.message == ErrorMessages.NO_VIDEO_RESULTS


# =============================================================================
# Stream URLs
# =============================================================================


class TestStreamUrl:
    async def test_direct_url_cached(self, resolver):
        with patch.object(
            resolver, "_extract_sync", return_value={"url": "https://media.test/1"}
        ) as extract:
            first = await resolver.stream_url(VIDEO_URL)
            second = await resolver.stream_url(VIDEO_URL)

        assert first == second == "https://media.test/1"
        extract.assert_called_once()

    async def test_falls_back_to_audio_format(self, resolver):
        data = {
            "formats": [
                {"url": "https://media.test/video", "acodec": "none"},
                {"url": "https://media.test/audio", "acodec": "opus"},
            ]
        }
        with patch.object(resolver, "_extract_sync", return_value=data):
            assert await resolver.stream_url(VIDEO_URL) == "https://media.test/audio"

    async def test_no_stream(self, resolver):
        with patch.object(resolver, "_extract_sync", return_value={"title": "x"}):
            with pytest.raises(StreamUnavailableError):
                await resolver.stream_url(VIDEO_URL)

    async def test_extraction_error(self, resolver):
        with patch.object(resolver, "_extract_sync", side_effect=DownloadError("403")):
            with pytest.raises(StreamUnavailableError) as exc_info:
                await resolver.stream_url(VIDEO_URL)
        assert exc_info.value.url == VIDEO_URL


def test_extract_sync_passes_params():
    resolver = YtDlpResolver()
    ydl = MagicMock()
    ydl.extract_info.return_value = {"id": "abc"}
    with patch("discord_jukebox.infrastructure.audio.ytdlp_resolver.YoutubeDL") as ydl_cls:
        ydl_cls.return_value.__enter__.return_value = ydl
        data = resolver._extract_sync(VIDEO_URL, resolver._get_opts())

    assert data == {"id": "abc"}
    params = ydl_cls.call_args.kwargs["params"]
    assert params["format"] == AudioSettings().ytdlp_format
    assert "playlistend" not in params
    ydl.extract_info.assert_called_once_with(VIDEO_URL, download=False)
