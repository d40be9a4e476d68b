"""Apple Music catalog client.

Songs and albums come from the public iTunes Search/Lookup API. Playlists
aren't exposed there, so they are read from the JSON-LD embedded in the
music.apple.com playlist page.
"""

from __future__ import annotations

import json
import logging
import re
import urllib.request
from importlib.metadata import version
from typing import Any, Protocol
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode

from tunebridge.config import AppleMusicConfig
from tunebridge.exceptions import APIError, PlaylistNotFoundError, TrackNotFoundError
from tunebridge.models.apple_music import AppleMusicCollection, AppleMusicSong
from tunebridge.utils.duration import parse_iso8601_duration

logger = logging.getLogger(__name__)

_VERSION = version("tunebridge")

SEARCH_URL = "https://itunes.apple.com/search"
LOOKUP_URL = "https://itunes.apple.com/lookup"
PLAYLIST_PAGE_URL = "https://music.apple.com/{country}/playlist/{playlist_id}"

_LD_JSON_PATTERN = re.compile(
    r'<script[^>]+type="application/ld\+json"[^>]*>(.*?)</script>', re.DOTALL
)
_OG_IMAGE_PATTERN = re.compile(r'<meta[^>]+property="og:image"[^>]+content="([^"]+)"')
_TRAILING_ID_PATTERN = re.compile(r"/(\d+)(?:\?|$)")


class AppleMusicClientProtocol(Protocol):
    """Protocol for Apple Music clients.

    This protocol enables dependency injection and testing.
    Implement this protocol to create mock clients for testing.
    """

    def search_songs(self, query: str, limit: int | None = None) -> list[AppleMusicSong]:
        """Search the catalog for songs."""
        ...

    def get_song(self, song_id: str, country: str | None = None) -> AppleMusicSong:
        """Fetch a song by catalog ID."""
        ...

    def get_album(self, album_id: str, country: str | None = None) -> AppleMusicCollection:
        """Fetch an album with its songs."""
        ...

    def get_playlist(
        self, playlist_id: str, country: str | None = None
    ) -> AppleMusicCollection:
        """Fetch a playlist with its songs."""
        ...


class AppleMusicClient:
    """Production Apple Music client.

    Implements AppleMusicClientProtocol for type safety.
    """

    def __init__(self, config: AppleMusicConfig | None = None) -> None:
        self._config = config or AppleMusicConfig()

    def _request(self, url: str) -> bytes:
        request = urllib.request.Request(
            url,
            headers={"User-Agent": f"tunebridge/{_VERSION}"},
        )
        try:
            with urllib.request.urlopen(request, timeout=self._config.timeout) as response:
                return response.read()
        except HTTPError as e:
            if e.code == 404:
                raise
            logger.warning("Apple Music request failed for %s: %s", url, e)
            raise APIError(f"Apple Music request failed: {e}") from e
        except (URLError, OSError, TimeoutError) as e:
            logger.warning("Apple Music request failed for %s: %s", url, e)
            raise APIError(f"Apple Music request failed: {e}") from e

    def _get_json(self, base_url: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        url = f"{base_url}?{urlencode(params)}"
        logger.debug("Apple Music request: %s", url)
        try:
            data = json.loads(self._request(url))
        except HTTPError as e:
            raise APIError(f"Apple Music request failed: {e}") from e
        except json.JSONDecodeError as e:
            raise APIError(f"Invalid Apple Music response: {e}") from e
        return data.get("results") or []

    def search_songs(
        self, query: str, limit: int | None = None
    ) -> list[AppleMusicSong]:
        """Search the catalog for songs.

        Raises:
            APIError: If the request fails.
        """
        limit = limit or self._config.search_limit
        results = self._get_json(
            SEARCH_URL,
            {
                "term": query,
                "entity": "song",
                "limit": limit,
                "country": self._config.country,
            },
        )
        songs = [
            AppleMusicSong.model_validate(r)
            for r in results
            if r.get("wrapperType") == "track" and r.get("kind") == "song"
        ]
        return songs[:limit]

    def get_song(self, song_id: str, country: str | None = None) -> AppleMusicSong:
        """Fetch a song by catalog ID.

        Raises:
            TrackNotFoundError: If no song has this ID in the storefront.
            APIError: If the request fails.
        """
        results = self._get_json(
            LOOKUP_URL, {"id": song_id, "country": country or self._config.country}
        )
        for result in results:
            if result.get("kind") == "song":
                return AppleMusicSong.model_validate(result)
        raise TrackNotFoundError(f"Track not found: {song_id}")

    def get_album(
        self, album_id: str, country: str | None = None
    ) -> AppleMusicCollection:
        """Fetch an album and its songs in disc/track order.

        Raises:
            PlaylistNotFoundError: If no album has this ID in the storefront.
            APIError: If the request fails.
        """
        results = self._get_json(
            LOOKUP_URL,
            {
                "id": album_id,
                "entity": "song",
                "country": country or self._config.country,
            },
        )
        collection = next(
            (r for r in results if r.get("wrapperType") == "collection"), None
        )
        if collection is None:
            raise PlaylistNotFoundError(f"Album not found: {album_id}")

        songs = [r for r in results if r.get("kind") == "song"]
        songs.sort(key=lambda r: (r.get("discNumber", 1), r.get("trackNumber", 0)))
        return AppleMusicCollection.model_validate({**collection, "tracks": songs})

    def get_playlist(
        self, playlist_id: str, country: str | None = None
    ) -> AppleMusicCollection:
        """Fetch a playlist from its music.apple.com page.

        Raises:
            PlaylistNotFoundError: If the page doesn't exist or carries no
                playlist data.
            APIError: If the request fails.
        """
        url = PLAYLIST_PAGE_URL.format(
            country=country or self._config.country, playlist_id=playlist_id
        )
        logger.debug("Fetching Apple Music playlist page: %s", url)
        try:
            html = self._request(url).decode("utf-8", errors="replace")
        except HTTPError as e:
            raise PlaylistNotFoundError(f"Playlist not found: {playlist_id}") from e

        data = _find_playlist_ld_json(html)
        if data is None:
            raise PlaylistNotFoundError(f"Playlist not found: {playlist_id}")

        image = _OG_IMAGE_PATTERN.search(html)
        return _parse_playlist(
            data, playlist_id, url, image.group(1) if image else None
        )


def _find_playlist_ld_json(html: str) -> dict[str, Any] | None:
    for block in _LD_JSON_PATTERN.findall(html):
        try:
            data = json.loads(block)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict) and data.get("@type") == "MusicPlaylist":
            return data
    return None


def _artist_name(value: Any) -> str:
    if isinstance(value, list):
        return ", ".join(_artist_name(v) for v in value if v)
    if isinstance(value, dict):
        return value.get("name") or ""
    return value or ""


def _parse_playlist(
    data: dict[str, Any], playlist_id: str, url: str, artwork: str | None
) -> AppleMusicCollection:
    """Normalize a JSON-LD MusicPlaylist into lookup API field names."""
    author = _artist_name(data.get("author"))
    tracks = []
    for item in data.get("track") or []:
        track_url = item.get("url")
        match = _TRAILING_ID_PATTERN.search(track_url or "")
        if not track_url or not match or not item.get("name"):
            continue
        tracks.append(
            {
                "trackId": match.group(1),
                "trackName": item["name"],
                "artistName": _artist_name(item.get("byArtist")),
                "trackTimeMillis": parse_iso8601_duration(item.get("duration")),
                "artworkUrl100": artwork,
                "trackViewUrl": track_url,
            }
        )

    return AppleMusicCollection.model_validate(
        {
            "collectionId": playlist_id,
            "collectionName": data.get("name") or playlist_id,
            "artistName": author,
            "artworkUrl100": artwork,
            "collectionViewUrl": data.get("url") or url,
            "tracks": tracks,
        }
    )
