"""SoundCloud extractor."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from functools import partial
from typing import TYPE_CHECKING, Any

from tunebridge.clients.soundcloud import SoundCloudClient, SoundCloudClientProtocol
from tunebridge.config import SoundCloudConfig
from tunebridge.exceptions import StreamError, TuneBridgeError
from tunebridge.extractors.base import (
    accepts_query,
    create_response,
    empty_response,
)
from tunebridge.lib.history import select_related
from tunebridge.models.enums import PlaylistKind, QueryType, Source
from tunebridge.models.results import ExtractorResult, SearchContext
from tunebridge.models.soundcloud import SoundCloudTrack
from tunebridge.models.track import Playlist, PlaylistAuthor, Track
from tunebridge.streaming import StreamOverride, negotiate_stream
from tunebridge.types import Streamable
from tunebridge.utils.duration import to_display_duration
from tunebridge.utils.url import is_soundcloud_playlist_url, is_soundcloud_track_url

if TYPE_CHECKING:
    from tunebridge.extractors.registry import ExtractorRegistry

logger = logging.getLogger(__name__)


class SoundCloudExtractor:
    """Extractor for SoundCloud tracks, sets and search.

    Search results and related tracks only include fully streamable
    tracks; preview-only (Go+) tracks are dropped.
    """

    identifier = "soundcloud"
    source = Source.SOUNDCLOUD
    supported_types = frozenset(
        {
            QueryType.SOUNDCLOUD,
            QueryType.SOUNDCLOUD_TRACK,
            QueryType.SOUNDCLOUD_PLAYLIST,
            QueryType.SOUNDCLOUD_SEARCH,
        }
    )
    single_item_type = QueryType.SOUNDCLOUD_TRACK

    def __init__(
        self,
        client: SoundCloudClientProtocol | None = None,
        config: SoundCloudConfig | None = None,
    ) -> None:
        self._config = config or SoundCloudConfig()
        self._client = client
        self._registry: ExtractorRegistry | None = None
        self._stream: StreamOverride | None = None

    @property
    def client(self) -> SoundCloudClientProtocol:
        if self._client is None:
            self._client = SoundCloudClient(config=self._config)
        return self._client

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
        """Resolve a track link, set link or search text.

        The generic ``soundcloud`` type is narrowed by URL shape.
        Provider failures return an empty result.
        """
        query_type = context.type
        if query_type in (QueryType.SOUNDCLOUD, QueryType.AUTO, QueryType.AUTO_SEARCH):
            if is_soundcloud_playlist_url(query):
                query_type = QueryType.SOUNDCLOUD_PLAYLIST
            elif is_soundcloud_track_url(query):
                query_type = QueryType.SOUNDCLOUD_TRACK

        try:
            if query_type == QueryType.SOUNDCLOUD_TRACK:
                data = self.client.get_track(query)
                return create_response(tracks=[self._build_track(data, context)])
            if query_type == QueryType.SOUNDCLOUD_PLAYLIST:
                return self._handle_playlist(query, context)
            return self._handle_search(query, context)
        except (TuneBridgeError, ValueError) as e:
            logger.warning("SoundCloud lookup failed for %r: %s", query, e)
            return empty_response()

    def _handle_playlist(self, query: str, context: SearchContext) -> ExtractorResult:
        data = self.client.get_playlist(query)
        playlist = Playlist(
            title=data.title,
            author=PlaylistAuthor(name=data.author, url=data.uploader_url or ""),
            source=self.source,
            kind=PlaylistKind.PLAYLIST,
            id=data.id,
            url=data.webpage_url,
            thumbnail=data.artwork_url,
            description=data.description or "",
            raw=data,
        )
        entries = data.entries[: context.limit] if context.limit else data.entries
        playlist.tracks = [self._build_track(t, context, playlist) for t in entries]
        return create_response(playlist=playlist, tracks=playlist.tracks)

    def _handle_search(self, query: str, context: SearchContext) -> ExtractorResult:
        results = self.client.search_tracks(query)
        streamable = [t for t in results if not t.is_preview]
        if not streamable:
            return empty_response()
        return create_response(
            tracks=[self._build_track(t, context) for t in streamable]
        )

    def _build_track(
        self,
        data: SoundCloudTrack,
        context: SearchContext,
        playlist: Playlist | None = None,
    ) -> Track:
        return Track(
            title=data.title,
            author=data.uploader,
            url=data.permalink_url,
            duration=to_display_duration(data.duration, unit="s"),
            source=self.source,
            query_type=self.single_item_type,
            thumbnail=data.thumbnail,
            views=data.view_count or 0,
            description=data.description or "",
            requested_by=context.requested_by,
            raw=data,
            playlist=playlist,
            extractor=self,
        )

    def get_related_tracks(
        self, track: Track, history: Sequence[Track]
    ) -> ExtractorResult:
        """Fetch recommended tracks, or search by author or title.

        Preview-only tracks are dropped before history filtering, so the
        played-everything fallback returns the streamable batch. The seed
        track is excluded before either step.
        """
        if track.query_type != self.single_item_type:
            return empty_response()

        limit = self._config.related_limit
        try:
            related = self.client.get_related(track.url, limit)
            if not related:
                related = self.client.search_tracks(track.author or track.title, limit)
        except (TuneBridgeError, ValueError) as e:
            logger.warning("Failed to fetch related tracks for %s: %s", track.url, e)
            return empty_response()

        context = SearchContext(requested_by=track.requested_by)
        candidates = [
            self._build_track(t, context)
            for t in related[:limit]
            if t.permalink_url != track.url
        ]
        streamable = [t for t in candidates if not t.raw.is_preview]
        return create_response(tracks=select_related(streamable, history))

    def stream(self, track: Track) -> Streamable:
        return negotiate_stream(track, override=self._stream, native=self._native_stream)

    def _native_stream(self, track: Track) -> Streamable:
        url = self.client.stream_url(track.url)
        if not url:
            raise StreamError("Could not extract stream for this track")
        return url
