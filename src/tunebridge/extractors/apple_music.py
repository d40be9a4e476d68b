"""Apple Music extractor.

Apple Music provides catalog metadata only. Its tracks are streamed by
bridging them to a streamable provider.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from functools import partial
from typing import TYPE_CHECKING, Any

from tunebridge.bridge import BridgeProvider, SearchBridgeProvider
from tunebridge.clients.apple_music import AppleMusicClient, AppleMusicClientProtocol
from tunebridge.config import AppleMusicConfig
from tunebridge.exceptions import TuneBridgeError
from tunebridge.extractors.base import (
    accepts_query,
    create_response,
    empty_response,
    related_response,
)
from tunebridge.models.apple_music import AppleMusicCollection, AppleMusicSong
from tunebridge.models.enums import PlaylistKind, QueryType, Source
from tunebridge.models.results import ExtractorResult, SearchContext
from tunebridge.models.track import EnrichedMetadata, Playlist, PlaylistAuthor, Track
from tunebridge.streaming import StreamOverride, negotiate_stream
from tunebridge.types import Streamable
from tunebridge.utils.duration import to_display_duration
from tunebridge.utils.url import parse_apple_music_url

if TYPE_CHECKING:
    from tunebridge.extractors.registry import ExtractorRegistry

logger = logging.getLogger(__name__)

# Extractor searched by the default bridge
DEFAULT_BRIDGE_TARGET = "youtube"

_COLLECTION_TYPES = {
    QueryType.APPLE_MUSIC_ALBUM: PlaylistKind.ALBUM,
    QueryType.APPLE_MUSIC_PLAYLIST: PlaylistKind.PLAYLIST,
}


class AppleMusicExtractor:
    """Extractor for Apple Music songs, albums, playlists and search."""

    identifier = "apple_music"
    source = Source.APPLE_MUSIC
    supported_types = frozenset(
        {
            QueryType.APPLE_MUSIC_SONG,
            QueryType.APPLE_MUSIC_ALBUM,
            QueryType.APPLE_MUSIC_PLAYLIST,
            QueryType.APPLE_MUSIC_SEARCH,
        }
    )
    single_item_type = QueryType.APPLE_MUSIC_SONG

    def __init__(
        self,
        client: AppleMusicClientProtocol | None = None,
        config: AppleMusicConfig | None = None,
    ) -> None:
        self._config = config or AppleMusicConfig()
        self._client = client
        self._registry: ExtractorRegistry | None = None
        self._stream: StreamOverride | None = None

    @property
    def client(self) -> AppleMusicClientProtocol:
        if self._client is None:
            self._client = AppleMusicClient(config=self._config)
        return self._client

    @property
    def bridge_provider(self) -> BridgeProvider | None:
        """Configured bridge, else a search bridge over the YouTube extractor."""
        if self._config.bridge_provider is not None:
            return self._config.bridge_provider
        if self._registry is None:
            return None
        target = self._registry.get(DEFAULT_BRIDGE_TARGET)
        return SearchBridgeProvider(target) if target is not None else None

    def activate(self, registry: ExtractorRegistry) -> None:
        self._registry = registry
        if self._config.create_stream is not None:
            self._stream = partial(self._config.create_stream, self)

    def deactivate(self) -> None:
        self._registry = None
        self._stream = None

    def validate(self, query: Any, query_type: QueryType | str) -> bool:
        return accepts_query(query, query_type, self.supported_types)

    def handle(self, query: str, context: SearchContext) -> ExtractorResult:
        """Resolve a song, album or playlist link, or search the catalog.

        Provider failures and malformed links return an empty result.
        """
        try:
            if context.type == QueryType.APPLE_MUSIC_SONG:
                link = parse_apple_music_url(query)
                song = self.client.get_song(link.id, link.country)
                return create_response(tracks=[self._build_track(song, context)])
            if context.type == QueryType.APPLE_MUSIC_ALBUM:
                link = parse_apple_music_url(query)
                data = self.client.get_album(link.id, link.country)
                return self._build_response(data, context)
            if context.type == QueryType.APPLE_MUSIC_PLAYLIST:
                link = parse_apple_music_url(query)
                data = self.client.get_playlist(link.id, link.country)
                return self._build_response(data, context)

            songs = self.client.search_songs(query)
        except (TuneBridgeError, ValueError) as e:
            logger.warning("Apple Music lookup failed for %r: %s", query, e)
            return empty_response()

        if not songs:
            return empty_response()
        return create_response(tracks=[self._build_track(s, context) for s in songs])

    def _build_response(
        self, data: AppleMusicCollection, context: SearchContext
    ) -> ExtractorResult:
        playlist = Playlist(
            title=data.title,
            author=PlaylistAuthor(name=data.artist, url=data.artist_url or ""),
            source=self.source,
            kind=_COLLECTION_TYPES[context.type],
            id=data.id,
            url=data.url,
            thumbnail=data.thumbnail,
            raw=data,
        )
        songs = data.tracks[: context.limit] if context.limit else data.tracks
        playlist.tracks = [
            self._build_track(song, context, playlist, fallback_author=data.artist)
            for song in songs
        ]
        return create_response(playlist=playlist, tracks=playlist.tracks)

    def _build_track(
        self,
        song: AppleMusicSong,
        context: SearchContext,
        playlist: Playlist | None = None,
        fallback_author: str = "",
    ) -> Track:
        return Track(
            title=song.title,
            author=song.artist or fallback_author,
            url=song.url,
            duration=to_display_duration(song.duration),
            source=self.source,
            query_type=self.single_item_type,
            thumbnail=song.thumbnail,
            requested_by=context.requested_by,
            raw=song,
            playlist=playlist,
            extractor=self,
            metadata_resolver=self.resolve_metadata,
        )

    def resolve_metadata(self, track: Track) -> EnrichedMetadata:
        """Deferred metadata: the catalog payload plus a fresh bridge match.

        The bridge search runs again on every call.
        """
        bridge = self.bridge_provider
        match = bridge.resolve(self, track) if bridge is not None else None
        return EnrichedMetadata(source=track.raw, bridge=match)

    def get_related_tracks(
        self, track: Track, history: Sequence[Track]
    ) -> ExtractorResult:
        """Search the catalog by author or title for related songs.

        The seed song is excluded before history filtering.
        """
        if track.query_type != self.single_item_type:
            return empty_response()

        limit = self._config.related_limit
        try:
            songs = self.client.search_songs(track.author or track.title, limit)
        except (TuneBridgeError, ValueError) as e:
            logger.warning("Related search failed for %s: %s", track.url, e)
            return empty_response()

        context = SearchContext(requested_by=track.requested_by)
        candidates = [
            self._build_track(s, context) for s in songs[:limit] if s.url != track.url
        ]
        return related_response(candidates, history)

    def stream(self, track: Track) -> Streamable:
        """Stream through the override, else through the bridge provider.

        Raises:
            BridgeError: If the bridge provider found no match.
            UnstreamableTrackError: If neither is available.
        """
        return negotiate_stream(
            track, override=self._stream, bridge=self.bridge_provider
        )
