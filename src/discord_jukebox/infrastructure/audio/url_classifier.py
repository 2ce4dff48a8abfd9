"""Classify user queries into link kinds or plain search terms."""

from __future__ import annotations

import re
from enum import Enum, auto
from typing import Final


class InputType(Enum):
    YOUTUBE_URL = auto()
    YOUTUBE_PLAYLIST = auto()
    SPOTIFY_TRACK = auto()
    SPOTIFY_PLAYLIST = auto()
    SPOTIFY_ALBUM = auto()
    SPOTIFY_UNSUPPORTED = auto()
    OTHER_URL = auto()
    SEARCH_QUERY = auto()


_YOUTUBE_RE: Final = re.compile(
    r"(?:https?://)?(?:www\.|m\.|music\.)?(?:youtube\.com|youtu\.be)/?\S+"
)

_YOUTUBE_PLAYLIST_RE: Final = re.compile(r"[?&]list=([A-Za-z0-9_-]+)")

_SPOTIFY_HOST = "open.spotify.com"

_SPOTIFY_RE: Final = re.compile(
    r"(?:https?://)?open\.spotify\.com/(?:intl-[a-z]{2}/)?(track|playlist|album)/([A-Za-z0-9]+)"
)

_URL_RE: Final = re.compile(r"^https?://\S+$")

_SPOTIFY_TYPES: Final = {
    "track": InputType.SPOTIFY_TRACK,
    "playlist": InputType.SPOTIFY_PLAYLIST,
    "album": InputType.SPOTIFY_ALBUM,
}


def classify(query: str) -> tuple[InputType, str]:
    """Return (InputType, cleaned_value) for a user query.

    For Spotify links the cleaned value is the Spotify ID. Every other kind
    keeps the stripped query. Spotify links to anything other than a track,
    playlist or album classify as ``SPOTIFY_UNSUPPORTED``.
    """
    query = query.strip()

    if _SPOTIFY_HOST in query:
        m = _SPOTIFY_RE.search(query)
        if m is None:
            return InputType.SPOTIFY_UNSUPPORTED, query
        return _SPOTIFY_TYPES[m.group(1)], m.group(2)

    if _YOUTUBE_RE.match(query):
        if _YOUTUBE_PLAYLIST_RE.search(query):
            return InputType.YOUTUBE_PLAYLIST, query
        return InputType.YOUTUBE_URL, query

    if _URL_RE.match(query):
        return InputType.OTHER_URL, query

    return InputType.SEARCH_QUERY, query
