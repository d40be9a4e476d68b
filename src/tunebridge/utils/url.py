"""URL parsing utilities.

Pure identity-extraction helpers for each provider. They are shared by the
query classifier and the extractors.
"""

import re
from dataclasses import dataclass
from typing import Literal
from urllib.parse import parse_qs, urlparse

from tunebridge.exceptions import QueryParseError

# Maximum URL length to prevent potential abuse (standard browser limit)
MAX_URL_LENGTH = 2048

# ============================================================================
# YOUTUBE
# ============================================================================

# Hosts that carry the video ID in the v= query parameter
YOUTUBE_QUERY_HOSTS = frozenset(
    {
        "youtube.com",
        "www.youtube.com",
        "m.youtube.com",
        "music.youtube.com",
        "gaming.youtube.com",
    }
)

# Links that carry the video ID in the path (youtu.be, embed, shorts, live)
_YOUTUBE_PATH_PATTERN = re.compile(
    r"^https?://(youtu\.be/|(www\.)?youtube\.com/(embed|v|shorts|live)/)"
)
_VIDEO_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{11}$")
_PLAYLIST_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{2,}$")
_SUBDOMAIN_PATTERN = re.compile(r"^(https?://)(?:m|music|gaming)\.(?=youtube\.com)")

# Auto-generated radio mixes look like playlists but are per-video
RADIO_PLAYLIST_MARKER = "list=RD"

VIDEO_ID_LENGTH = 11


def validate_id(video_id: str) -> bool:
    """Check whether a string is a well-formed 11 character video ID."""
    return bool(_VIDEO_ID_PATTERN.match(video_id.strip()))


def parse_video_id(link: str) -> str:
    """Extract the video ID from a YouTube link.

    Supports watch URLs (v= parameter) on known YouTube hosts, youtu.be
    short links and /embed/, /v/, /shorts/, /live/ paths. Surrounding query
    parameters and path noise are ignored; the ID is cut to 11 characters.

    Args:
        link: YouTube or youtu.be URL.

    Returns:
        The 11 character video ID.

    Raises:
        QueryParseError: If the host is not a YouTube host, no ID is present
            or the ID has the wrong format.
    """
    if not link or len(link) > MAX_URL_LENGTH:
        raise QueryParseError(f"No video id found: {link!r}")

    link = link.strip()
    parsed = urlparse(link)
    host = parsed.hostname or ""
    video_id = parse_qs(parsed.query).get("v", [None])[0]

    if _YOUTUBE_PATH_PATTERN.match(link) and not video_id:
        paths = parsed.path.split("/")
        # youtu.be/ID vs youtube.com/shorts/ID
        index = 1 if host == "youtu.be" else 2
        video_id = paths[index] if len(paths) > index else None
    elif host and host not in YOUTUBE_QUERY_HOSTS:
        raise QueryParseError(f"Not a YouTube domain: {host}")

    if not video_id:
        raise QueryParseError(f"No video id found: {link!r}")

    video_id = video_id[:VIDEO_ID_LENGTH]
    if not validate_id(video_id):
        raise QueryParseError(
            f"Video id ({video_id}) does not match expected format "
            f"({_VIDEO_ID_PATTERN.pattern})"
        )
    return video_id


def validate_url(link: str) -> bool:
    """Check whether a link is a parseable YouTube video URL."""
    try:
        parse_video_id(link)
    except QueryParseError:
        return False
    return True


def parse_playlist_id(url: str) -> str:
    """Extract the playlist ID from a YouTube playlist URL.

    Args:
        url: YouTube or YouTube Music URL with a list= parameter.

    Returns:
        The playlist ID string.

    Raises:
        QueryParseError: If the host is not a YouTube host or no valid
            playlist ID is present.
    """
    if not url or len(url) > MAX_URL_LENGTH:
        raise QueryParseError(f"Could not extract playlist ID from: {url!r}")

    parsed = urlparse(url.strip())
    if (parsed.hostname or "") not in YOUTUBE_QUERY_HOSTS:
        raise QueryParseError(f"Not a YouTube domain: {parsed.hostname}")

    playlist_id = parse_qs(parsed.query).get("list", [None])[0]
    if not playlist_id or not _PLAYLIST_ID_PATTERN.match(playlist_id):
        raise QueryParseError(f"Could not extract playlist ID from: {url!r}")
    return playlist_id


def is_youtube_playlist_url(url: str) -> bool:
    """Check whether a URL is a YouTube /playlist page (not a radio mix)."""
    if RADIO_PLAYLIST_MARKER in url:
        return False
    try:
        parse_playlist_id(url)
    except QueryParseError:
        return False
    return urlparse(url.strip()).path.rstrip("/") == "/playlist"


def is_youtube_video_url(url: str) -> bool:
    """Check whether a URL should be handled as a single YouTube video."""
    return RADIO_PLAYLIST_MARKER not in url and validate_url(url)


def normalize_youtube_url(url: str) -> str:
    """Strip m., music. and gaming. subdomains from a youtube.com URL."""
    return _SUBDOMAIN_PATTERN.sub(r"\1", url.strip())


# ============================================================================
# SOUNDCLOUD
# ============================================================================

SOUNDCLOUD_HOSTS = frozenset(
    {"soundcloud.com", "www.soundcloud.com", "m.soundcloud.com", "on.soundcloud.com"}
)

# First path segments under a user that are not track slugs
_SOUNDCLOUD_RESERVED = frozenset(
    {
        "albums",
        "comments",
        "followers",
        "following",
        "likes",
        "popular-tracks",
        "reposts",
        "sets",
        "tracks",
    }
)


def _soundcloud_path(url: str) -> list[str] | None:
    if not url or len(url) > MAX_URL_LENGTH:
        return None
    parsed = urlparse(url.strip())
    if parsed.scheme not in ("http", "https"):
        return None
    if (parsed.hostname or "") not in SOUNDCLOUD_HOSTS:
        return None
    return [p for p in parsed.path.split("/") if p]


def is_soundcloud_track_url(url: str) -> bool:
    """Check whether a URL is a SoundCloud track (user/slug or short link)."""
    segments = _soundcloud_path(url)
    if not segments:
        return False
    if urlparse(url.strip()).hostname == "on.soundcloud.com":
        return len(segments) == 1
    return len(segments) == 2 and segments[1] not in _SOUNDCLOUD_RESERVED


def is_soundcloud_playlist_url(url: str) -> bool:
    """Check whether a URL is a SoundCloud set (user/sets/slug)."""
    segments = _soundcloud_path(url)
    return bool(segments) and len(segments) == 3 and segments[1] == "sets"


def soundcloud_related_url(track_url: str) -> str:
    """Build the 'related tracks' page URL for a SoundCloud track."""
    base = track_url.split("?", 1)[0].rstrip("/")
    return f"{base}/recommended"


# ============================================================================
# APPLE MUSIC
# ============================================================================

APPLE_MUSIC_HOSTS = frozenset(
    {"music.apple.com", "geo.music.apple.com", "itunes.apple.com"}
)

AppleMusicKind = Literal["song", "album", "playlist"]


@dataclass(frozen=True)
class AppleMusicLink:
    """Parsed Apple Music catalog link.

    Attributes:
        kind: Content kind the link points at.
        id: Catalog ID (numeric for songs and albums, 'pl.' for playlists).
        country: Storefront country code from the path, if present.
    """

    kind: AppleMusicKind
    id: str
    country: str | None = None


def parse_apple_music_url(url: str) -> AppleMusicLink:
    """Parse an Apple Music song, album or playlist link.

    Handles ``/{cc}/song/{slug}/{id}``, ``/{cc}/album/{slug}/{id}`` (with
    ``?i={songId}`` pointing at a single song) and
    ``/{cc}/playlist/{slug}/pl.{id}``.

    Raises:
        QueryParseError: If the host is not an Apple Music host or the path
            doesn't identify catalog content.
    """
    if not url or len(url) > MAX_URL_LENGTH:
        raise QueryParseError(f"Not an Apple Music URL: {url!r}")

    parsed = urlparse(url.strip())
    if (parsed.hostname or "") not in APPLE_MUSIC_HOSTS:
        raise QueryParseError(f"Not an Apple Music domain: {parsed.hostname}")

    segments = [p for p in parsed.path.split("/") if p]
    country = None
    if segments and len(segments[0]) == 2:
        country = segments.pop(0)

    if len(segments) < 2:
        raise QueryParseError(f"Could not identify Apple Music content: {url!r}")

    kind, content_id = segments[0], segments[-1]
    song_id = parse_qs(parsed.query).get("i", [None])[0]

    if kind == "album" and song_id and song_id.isdigit():
        return AppleMusicLink(kind="song", id=song_id, country=country)
    if kind in ("song", "album") and content_id.removeprefix("id").isdigit():
        return AppleMusicLink(
            kind=kind, id=content_id.removeprefix("id"), country=country
        )
    if kind == "playlist" and content_id.startswith("pl."):
        return AppleMusicLink(kind="playlist", id=content_id, country=country)

    raise QueryParseError(f"Could not identify Apple Music content: {url!r}")


def try_parse_apple_music_url(url: str) -> AppleMusicLink | None:
    """Parse an Apple Music link, returning None instead of raising."""
    try:
        return parse_apple_music_url(url)
    except QueryParseError:
        return None
