"""Models for parsing ytmusicapi responses.

These are internal models used to parse and validate responses from
the YouTube Music API. They may change if the API changes.
"""

import re

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "Artist",
    "Thumbnail",
    "Video",
    "YouTubePlaylist",
]

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
PLAYLIST_URL = "https://www.youtube.com/playlist?list={playlist_id}"
CHANNEL_URL = "https://www.youtube.com/channel/{channel_id}"

_VIEW_COUNT_PATTERN = re.compile(r"([\d.,]+)\s*([KMB])?", re.IGNORECASE)
_VIEW_MULTIPLIERS = {"K": 1_000, "M": 1_000_000, "B": 1_000_000_000}


def _parse_view_count(views: str | None) -> int:
    """Parse abbreviated view counts like '1.2B views' or '12,345'."""
    if not views:
        return 0
    match = _VIEW_COUNT_PATTERN.search(views)
    if not match:
        return 0
    number, suffix = match.groups()
    try:
        value = float(number.replace(",", ""))
    except ValueError:
        return 0
    return int(value * _VIEW_MULTIPLIERS.get((suffix or "").upper(), 1))


class YouTubeModel(BaseModel):
    """Base model for ytmusicapi responses."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)


class Thumbnail(YouTubeModel):
    """Video/playlist thumbnail."""

    url: str
    width: int = 0
    height: int = 0


class Artist(YouTubeModel):
    """Artist or channel reference."""

    name: str
    id: str | None = None


def _largest_thumbnail(thumbnails: list[Thumbnail]) -> str | None:
    if not thumbnails:
        return None
    return max(thumbnails, key=lambda t: t.width).url


class Video(YouTubeModel):
    """Video from search results, watch playlists or playlists."""

    video_id: str = Field(alias="videoId")
    title: str
    artists: list[Artist] = Field(default_factory=list)
    thumbnails: list[Thumbnail] = Field(default_factory=list)
    duration: str | None = None
    duration_seconds: int | None = None
    views: str | None = None

    @property
    def url(self) -> str:
        """Canonical watch URL (identity key)."""
        return WATCH_URL.format(video_id=self.video_id)

    @property
    def author(self) -> str:
        """Joined artist or channel names."""
        return ", ".join(a.name for a in self.artists if a.name)

    @property
    def view_count(self) -> int:
        """Parsed view count (0 when unknown)."""
        return _parse_view_count(self.views)

    @property
    def thumbnail_url(self) -> str | None:
        """Largest available thumbnail URL."""
        return _largest_thumbnail(self.thumbnails)


class YouTubePlaylist(YouTubeModel):
    """Playlist response from get_playlist()."""

    id: str
    title: str | None = None
    author: Artist | None = None
    description: str | None = None
    thumbnails: list[Thumbnail] = Field(default_factory=list)
    tracks: list[Video] = Field(default_factory=list)

    @property
    def url(self) -> str:
        """Canonical playlist URL."""
        return PLAYLIST_URL.format(playlist_id=self.id)

    @property
    def author_url(self) -> str:
        """Channel URL of the playlist author, or empty when unknown."""
        if self.author and self.author.id:
            return CHANNEL_URL.format(channel_id=self.author.id)
        return ""

    @property
    def thumbnail_url(self) -> str | None:
        """Largest available thumbnail URL."""
        return _largest_thumbnail(self.thumbnails)
