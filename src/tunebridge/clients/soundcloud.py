"""SoundCloud client backed by yt-dlp's SoundCloud extractors."""

import logging
from typing import Any, Protocol

import yt_dlp

from tunebridge.config import SoundCloudConfig
from tunebridge.exceptions import APIError, PlaylistNotFoundError, TrackNotFoundError
from tunebridge.models.soundcloud import SoundCloudPlaylist, SoundCloudTrack
from tunebridge.utils.url import soundcloud_related_url

logger = logging.getLogger(__name__)


class SoundCloudClientProtocol(Protocol):
    """Protocol for SoundCloud clients.

    This protocol enables dependency injection and testing.
    Implement this protocol to create mock clients for testing.
    """

    def search_tracks(self, query: str, limit: int | None = None) -> list[SoundCloudTrack]:
        """Search for tracks."""
        ...

    def get_track(self, url: str) -> SoundCloudTrack:
        """Fetch a track by URL."""
        ...

    def get_playlist(self, url: str) -> SoundCloudPlaylist:
        """Fetch a set by URL."""
        ...

    def get_related(self, url: str, limit: int) -> list[SoundCloudTrack]:
        """Fetch tracks related to a track."""
        ...

    def stream_url(self, url: str) -> str | None:
        """Resolve a direct stream URL for a track."""
        ...


class SoundCloudClient:
    """Production SoundCloud client.

    Uses yt-dlp for search (``scsearchN:``), track and set extraction,
    related tracks (the ``/recommended`` page) and stream URLs.
    Implements SoundCloudClientProtocol for type safety.
    """

    def __init__(self, config: SoundCloudConfig | None = None) -> None:
        self._config = config or SoundCloudConfig()

    def _build_yt_dlp_options(self, **overrides: Any) -> dict[str, Any]:
        opts: dict[str, Any] = {
            "quiet": True,
            "no_warnings": True,
            "skip_download": True,
            "color": "never",
            # Unavailable entries come back as None instead of aborting
            "ignoreerrors": True,
        }
        if self._config.proxy:
            opts["proxy"] = self._config.proxy
        if self._config.oauth_token:
            # yt-dlp's SoundCloud login takes the token as the password
            opts["username"] = "oauth"
            opts["password"] = self._config.oauth_token
        opts.update(overrides)
        return opts

    def _extract(self, url: str, **overrides: Any) -> dict[str, Any] | None:
        try:
            with yt_dlp.YoutubeDL(self._build_yt_dlp_options(**overrides)) as ydl:
                return ydl.extract_info(url, download=False)
        except yt_dlp.utils.DownloadError as e:
            logger.warning("yt-dlp error for %s: %s", url, e)
            raise APIError(f"SoundCloud request failed: {e}") from e

    def _parse_entries(self, info: dict[str, Any] | None) -> list[SoundCloudTrack]:
        entries = (info or {}).get("entries") or []
        return [SoundCloudTrack.model_validate(e) for e in entries if e]

    def search_tracks(
        self, query: str, limit: int | None = None
    ) -> list[SoundCloudTrack]:
        """Search for tracks.

        Raises:
            APIError: If the request fails.
        """
        limit = limit or self._config.search_limit
        logger.debug("Searching SoundCloud: %s", query)
        return self._parse_entries(self._extract(f"scsearch{limit}:{query}"))

    def get_track(self, url: str) -> SoundCloudTrack:
        """Fetch a track by URL.

        Raises:
            TrackNotFoundError: If the track doesn't exist or is private.
            APIError: If the request fails.
        """
        logger.debug("Fetching SoundCloud track: %s", url)
        info = self._extract(url, noplaylist=True)
        if not info or info.get("_type") == "playlist":
            raise TrackNotFoundError(f"Track not found: {url}")
        return SoundCloudTrack.model_validate(info)

    def get_playlist(self, url: str) -> SoundCloudPlaylist:
        """Fetch a set with all its tracks.

        Raises:
            PlaylistNotFoundError: If the set doesn't exist or is private.
            APIError: If the request fails.
        """
        logger.debug("Fetching SoundCloud set: %s", url)
        info = self._extract(url)
        if not info or info.get("_type") != "playlist":
            raise PlaylistNotFoundError(f"Playlist not found: {url}")

        data = dict(info)
        data["entries"] = [e for e in info.get("entries") or [] if e]
        data.setdefault("webpage_url", url)
        return SoundCloudPlaylist.model_validate(data)

    def get_related(self, url: str, limit: int) -> list[SoundCloudTrack]:
        """Fetch up to ``limit`` tracks related to a track.

        Raises:
            APIError: If the request fails.
        """
        related_url = soundcloud_related_url(url)
        logger.debug("Fetching SoundCloud related tracks: %s", related_url)
        info = self._extract(related_url, playlistend=limit)
        return self._parse_entries(info)[:limit]

    def stream_url(self, url: str) -> str | None:
        """Resolve a direct audio URL for a track.

        Returns None if no stream could be resolved.
        """
        try:
            info = self._extract(url, format="bestaudio/best", noplaylist=True)
        except APIError:
            return None
        return (info or {}).get("url")
