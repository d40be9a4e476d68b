"""YouTube client over ytmusicapi."""

import logging
from collections.abc import Callable
from typing import Any, Protocol, TypeVar

from ytmusicapi import YTMusic
from ytmusicapi.exceptions import YTMusicError

from tunebridge.config import YouTubeConfig
from tunebridge.exceptions import APIError, PlaylistNotFoundError, TrackNotFoundError
from tunebridge.models.youtube import Video, YouTubePlaylist
from tunebridge.utils.cookies import cookies_to_ytmusic_auth
from tunebridge.utils.duration import format_duration, parse_duration

logger = logging.getLogger(__name__)

T = TypeVar("T")


class YouTubeClientProtocol(Protocol):
    """What the YouTube extractor needs from a client.

    Tests substitute an in-memory implementation.
    """

    def search_videos(self, query: str, limit: int | None = None) -> list[Video]: ...

    def get_video(self, video_id: str) -> Video: ...

    def get_related(self, video_id: str, limit: int) -> list[Video]: ...

    def get_playlist(
        self, playlist_id: str, limit: int | None = None
    ) -> YouTubePlaylist: ...


class YouTubeClient:
    """ytmusicapi-backed implementation of YouTubeClientProtocol.

    ytmusicapi errors surface as APIError; responses are validated into
    Video and YouTubePlaylist models.
    """

    def __init__(
        self,
        ytmusic: YTMusic | None = None,
        config: YouTubeConfig | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            ytmusic: YTMusic instance to use. Built from config if omitted.
            config: Extractor configuration. Uses defaults if not provided.
        """
        self._config = config or YouTubeConfig()
        self._ytm = ytmusic or self._build_ytmusic()

    def _build_ytmusic(self) -> YTMusic:
        cookies_path = self._config.cookies_path
        if not cookies_path:
            return YTMusic()

        auth = cookies_to_ytmusic_auth(cookies_path)
        if auth is None:
            logger.info("No SAPISID in %s, using anonymous access", cookies_path)
            return YTMusic()
        logger.info("Authenticating ytmusicapi with cookies from %s", cookies_path)
        return YTMusic(auth=auth)

    def _call(self, action: str, target: str, fn: Callable[[], T]) -> T:
        """Run a ytmusicapi call, translating its errors to APIError."""
        try:
            return fn()
        except YTMusicError as e:
            logger.warning("ytmusicapi %s failed for %r: %s", action, target, e)
            raise APIError(f"{action.capitalize()} failed: {e}") from e

    def search_videos(self, query: str, limit: int | None = None) -> list[Video]:
        """Search YouTube, in provider ranking order.

        Args:
            query: Search text.
            limit: Maximum number of results. Defaults to the configured limit.

        Raises:
            APIError: If the request fails.
        """
        limit = limit or self._config.search_limit
        logger.debug("Searching videos: %s", query)
        results = self._call(
            "search",
            query,
            lambda: self._ytm.search(
                query,
                filter=self._config.search_filter,
                limit=limit,
                ignore_spelling=self._config.ignore_spelling,
            ),
        )
        return self._parse_videos(results)[:limit]

    def get_video(self, video_id: str) -> Video:
        """Fetch one video through its watch playlist.

        Raises:
            ValueError: If video_id is blank.
            TrackNotFoundError: If the watch playlist has no tracks.
            APIError: If the request fails.
        """
        videos = self._watch_playlist(video_id, limit=1)
        if not videos:
            raise TrackNotFoundError(f"Track not found: {video_id}")
        return videos[0]

    def get_related(self, video_id: str, limit: int) -> list[Video]:
        """Fetch the radio queue YouTube builds for a video.

        The watch playlist opens with the video itself, which is skipped.
        """
        videos = self._watch_playlist(video_id, limit=limit + 1)
        return [v for v in videos if v.video_id != video_id][:limit]

    def _watch_playlist(self, video_id: str, limit: int) -> list[Video]:
        if not video_id.strip():
            raise ValueError("video_id cannot be empty")
        logger.debug("Fetching watch playlist: %s", video_id)
        data = self._call(
            "watch playlist",
            video_id,
            lambda: self._ytm.get_watch_playlist(video_id, limit=limit),
        )
        return self._parse_videos(data.get("tracks") or [])

    def get_playlist(
        self, playlist_id: str, limit: int | None = None
    ) -> YouTubePlaylist:
        """Fetch a playlist, dropping deleted or unavailable entries.

        Args:
            playlist_id: YouTube playlist ID.
            limit: Maximum number of tracks. None fetches all of them.

        Raises:
            ValueError: If playlist_id is blank.
            PlaylistNotFoundError: If the playlist is missing or malformed.
            APIError: If the request fails.
        """
        if not playlist_id.strip():
            raise ValueError("playlist_id cannot be empty")

        logger.debug("Fetching playlist: %s", playlist_id)
        try:
            data = self._call(
                "playlist",
                playlist_id,
                lambda: self._ytm.get_playlist(playlist_id, limit=limit),
            )
        except KeyError as e:
            # ytmusicapi raises KeyError on private or removed playlists
            raise PlaylistNotFoundError(f"Playlist not found: {playlist_id}") from e
        if not data:
            raise PlaylistNotFoundError(f"Playlist not found: {playlist_id}")

        raw_tracks = data.get("tracks") or []
        entries = [t for t in raw_tracks if t and t.get("isAvailable", True)]
        videos = self._parse_videos(entries)
        if len(videos) < len(raw_tracks):
            logger.debug(
                "Dropped %d unavailable entries from %s",
                len(raw_tracks) - len(videos),
                playlist_id,
            )

        return YouTubePlaylist.model_validate(
            {**data, "id": data.get("id") or playlist_id, "tracks": videos}
        )

    @staticmethod
    def _parse_videos(items: list[dict[str, Any]]) -> list[Video]:
        return [
            Video.model_validate(_normalize_video(item))
            for item in items
            if item and item.get("videoId")
        ]


def _normalize_video(item: dict[str, Any]) -> dict[str, Any]:
    """Bring search, watch and playlist item shapes to the Video layout.

    Watch playlist items use 'thumbnail' and 'length' where search results
    use 'thumbnails' and 'duration'; artists may be null.
    """
    video = dict(item)
    video["thumbnails"] = video.get("thumbnails") or video.pop("thumbnail", None) or []
    video["artists"] = video.get("artists") or []

    if not video.get("duration") and video.get("length"):
        video["duration"] = video.pop("length")
    if video.get("duration") and not video.get("duration_seconds"):
        video["duration_seconds"] = parse_duration(video["duration"])
    elif video.get("duration_seconds") and not video.get("duration"):
        video["duration"] = format_duration(video["duration_seconds"] * 1000)
    return video
