"""YouTube extractor."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from functools import partial
from typing import TYPE_CHECKING, Any

from tunebridge.backends import StreamBackendProtocol, load_stream_backend
from tunebridge.clients.youtube import YouTubeClient, YouTubeClientProtocol
from tunebridge.config import YouTubeConfig
from tunebridge.exceptions import StreamBackendMissingError, TuneBridgeError
from tunebridge.extractors.base import (
    accepts_query,
    create_response,
    empty_response,
    related_response,
)
from tunebridge.models.enums import PlaylistKind, QueryType, Source
from tunebridge.models.results import ExtractorResult, SearchContext
from tunebridge.models.track import Playlist, PlaylistAuthor, Track
from tunebridge.models.youtube import Video
from tunebridge.streaming import StreamOverride, negotiate_stream
from tunebridge.types import Streamable
from tunebridge.utils.duration import to_display_duration
from tunebridge.utils.url import (
    RADIO_PLAYLIST_MARKER,
    is_youtube_playlist_url,
    normalize_youtube_url,
    parse_playlist_id,
    parse_video_id,
    validate_url,
)

if TYPE_CHECKING:
    from tunebridge.extractors.registry import ExtractorRegistry

logger = logging.getLogger(__name__)

UNKNOWN_AUTHOR = "Unknown artist"


class YouTubeExtractor:
    """Extractor for YouTube videos, playlists and search.

    YouTube is streamable: tracks are streamed through the configured
    backend (yt-dlp by default) unless a stream override is configured.
    """

    identifier = "youtube"
    source = Source.YOUTUBE
    supported_types = frozenset(
        {
            QueryType.YOUTUBE,
            QueryType.YOUTUBE_VIDEO,
            QueryType.YOUTUBE_PLAYLIST,
            QueryType.YOUTUBE_SEARCH,
        }
    )
    single_item_type = QueryType.YOUTUBE_VIDEO

    def __init__(
        self,
        client: YouTubeClientProtocol | None = None,
        config: YouTubeConfig | None = None,
    ) -> None:
        """Initialize the extractor.

        Args:
            client: Optional YouTube client. Created from config on first use.
            config: Optional configuration. Uses defaults if not provided.
        """
        self._config = config or YouTubeConfig()
        self._client = client
        self._registry: ExtractorRegistry | None = None
        self._stream: StreamOverride | None = None
        self._backend: StreamBackendProtocol | None = None

    @property
    def client(self) -> YouTubeClientProtocol:
        if self._client is None:
            self._client = YouTubeClient(config=self._config)
        return self._client

    @property
    def config(self) -> YouTubeConfig:
        return self._config

    # ============================================================================
    # LIFECYCLE
    # ============================================================================

    def activate(self, registry: ExtractorRegistry) -> None:
        """Record the registry and resolve the stream source."""
        self._registry = registry
        if self._config.create_stream is not None:
            self._stream = partial(self._config.create_stream, self)
            logger.debug("YouTube streams use the configured override")
            return

        self._backend = load_stream_backend(
            self._config.stream_backend,
            self._config.ytdl_options,
            self._config.cookies_path,
        )
        if self._backend is None:
            logger.warning("No stream backend available for YouTube")

    def deactivate(self) -> None:
        self._registry = None
        self._stream = None
        self._backend = None

    # ============================================================================
    # QUERIES
    # ============================================================================

    def validate(self, query: Any, query_type: QueryType | str) -> bool:
        return accepts_query(query, query_type, self.supported_types)

    def handle(self, query: str, context: SearchContext) -> ExtractorResult:
        """Resolve a video link, playlist link or search text.

        Plain video links are always fetched as a single video, whatever
        the declared type. Radio mixes (``list=RD``) are searched instead.
        Provider failures return an empty result.
        """
        query_type = context.type
        if RADIO_PLAYLIST_MARKER not in query and validate_url(query):
            query_type = QueryType.YOUTUBE_VIDEO
        elif query_type in (
            QueryType.YOUTUBE,
            QueryType.AUTO,
            QueryType.AUTO_SEARCH,
        ) and is_youtube_playlist_url(query):
            query_type = QueryType.YOUTUBE_PLAYLIST

        try:
            if query_type == QueryType.YOUTUBE_VIDEO:
                return self._handle_video(query, context)
            if query_type == QueryType.YOUTUBE_PLAYLIST:
                return self._handle_playlist(query, context)
            return self._handle_search(query, context)
        except (TuneBridgeError, ValueError) as e:
            logger.warning("YouTube lookup failed for %r: %s", query, e)
            return empty_response()

    def _handle_video(self, query: str, context: SearchContext) -> ExtractorResult:
        video = self.client.get_video(parse_video_id(query))
        return create_response(tracks=[self._build_track(video, context)])

    def _handle_playlist(self, query: str, context: SearchContext) -> ExtractorResult:
        data = self.client.get_playlist(parse_playlist_id(query), limit=context.limit)
        playlist = Playlist(
            title=data.title or data.id,
            author=PlaylistAuthor(
                name=data.author.name if data.author else UNKNOWN_AUTHOR,
                url=data.author_url,
            ),
            source=self.source,
            kind=PlaylistKind.PLAYLIST,
            id=data.id,
            url=data.url,
            thumbnail=data.thumbnail_url,
            description=data.description or "",
            raw=data,
        )
        playlist.tracks = [
            self._build_track(video, context, playlist) for video in data.tracks
        ]
        return create_response(playlist=playlist, tracks=playlist.tracks)

    def _handle_search(self, query: str, context: SearchContext) -> ExtractorResult:
        videos = self.client.search_videos(query)
        if not videos:
            return empty_response()
        return create_response(tracks=[self._build_track(v, context) for v in videos])

    def _build_track(
        self,
        video: Video,
        context: SearchContext,
        playlist: Playlist | None = None,
    ) -> Track:
        if video.duration:
            duration = to_display_duration(video.duration)
        else:
            duration = to_display_duration(video.duration_seconds, unit="s")

        return Track(
            title=video.title,
            author=video.author or UNKNOWN_AUTHOR,
            url=video.url,
            duration=duration,
            source=self.source,
            query_type=self.single_item_type,
            thumbnail=video.thumbnail_url,
            views=video.view_count,
            requested_by=context.requested_by,
            raw=video,
            playlist=playlist,
            extractor=self,
        )

    # ============================================================================
    # RELATED TRACKS
    # ============================================================================

    def get_related_tracks(
        self, track: Track, history: Sequence[Track]
    ) -> ExtractorResult:
        """Fetch the video's radio queue, or search by author or title.

        Already played tracks are skipped unless every candidate was played.
        The seed video is excluded before history filtering.
        """
        if track.query_type != self.single_item_type:
            return empty_response()

        limit = self._config.related_limit
        try:
            videos = self.client.get_related(parse_video_id(track.url), limit)
        except (TuneBridgeError, ValueError) as e:
            logger.warning("Failed to fetch related videos for %s: %s", track.url, e)
            videos = []

        if not videos:
            try:
                videos = self.client.search_videos(track.author or track.title, limit)
            except (TuneBridgeError, ValueError) as e:
                logger.warning("Related search failed for %s: %s", track.url, e)
                return empty_response()

        context = SearchContext(requested_by=track.requested_by)
        candidates = [
            self._build_track(v, context) for v in videos[:limit] if v.url != track.url
        ]
        return related_response(candidates, history)

    # ============================================================================
    # STREAMING
    # ============================================================================

    def stream(self, track: Track) -> Streamable:
        return negotiate_stream(track, override=self._stream, native=self._native_stream)

    def _native_stream(self, track: Track) -> Streamable:
        if self._backend is None:
            raise StreamBackendMissingError(
                "No stream backend available for YouTube: install 'yt-dlp' "
                "or configure create_stream"
            )
        return self._backend.stream(normalize_youtube_url(track.url))

