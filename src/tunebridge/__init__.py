"""tunebridge - Resolve music queries into tracks and playable streams.

This library resolves URLs, search text and album/playlist links from
YouTube, SoundCloud and Apple Music into source-agnostic tracks, and
resolves tracks into playable streams. Tracks from providers that can't
stream audio (Apple Music) are bridged to an equivalent track on a
streamable provider.

Examples:
    Search and stream:
    ```python
    from tunebridge import create_registry

    registry = create_registry()
    result = registry.search("https://youtu.be/dQw4w9WgXcQ")
    url = registry.stream(result.tracks[0])
    ```

    Bridge Apple Music tracks with a similarity threshold:
    ```python
    registry = create_registry(bridge_min_score=80)
    result = registry.search("https://music.apple.com/us/song/x/1440857781")
    url = registry.stream(result.tracks[0])
    print(result.tracks[0].bridge_payload.track.url)
    ```
"""

from dataclasses import replace

from tunebridge.bridge import BridgeProvider, SearchBridgeProvider
from tunebridge.classifier import classify
from tunebridge.config import AppleMusicConfig, SoundCloudConfig, YouTubeConfig
from tunebridge.exceptions import (
    APIError,
    BridgeError,
    PlaylistNotFoundError,
    QueryParseError,
    StreamBackendMissingError,
    StreamError,
    TrackNotFoundError,
    TuneBridgeError,
    UnstreamableTrackError,
)
from tunebridge.extractors import (
    AppleMusicExtractor,
    ExtractorProtocol,
    ExtractorRegistry,
    SoundCloudExtractor,
    YouTubeExtractor,
)
from tunebridge.models import (
    BridgeMatch,
    EnrichedMetadata,
    ExtractorResult,
    Playlist,
    PlaylistAuthor,
    PlaylistKind,
    QueryType,
    SearchContext,
    Source,
    Track,
)
from tunebridge.streaming import negotiate_stream


def create_registry(
    youtube: YouTubeConfig | None = None,
    soundcloud: SoundCloudConfig | None = None,
    apple_music: AppleMusicConfig | None = None,
    *,
    bridge_min_score: float | None = None,
) -> ExtractorRegistry:
    """Create a registry with the YouTube, SoundCloud and Apple Music extractors.

    This is the recommended way to set up tunebridge for library usage.
    Extractors are tried in that order for ``auto`` searches.

    Args:
        youtube: Optional YouTube configuration.
        soundcloud: Optional SoundCloud configuration.
        apple_music: Optional Apple Music configuration.
        bridge_min_score: If set and no bridge provider is configured, Apple
            Music tracks are bridged to the best YouTube candidate scoring at
            least this much instead of the top search hit.

    Returns:
        An ExtractorRegistry with all extractors activated.
    """
    registry = ExtractorRegistry()
    youtube_extractor = registry.register(YouTubeExtractor(config=youtube))
    registry.register(SoundCloudExtractor(config=soundcloud))

    apple_music = apple_music or AppleMusicConfig()
    if bridge_min_score is not None and apple_music.bridge_provider is None:
        apple_music = replace(
            apple_music,
            bridge_provider=SearchBridgeProvider(
                youtube_extractor, min_score=bridge_min_score
            ),
        )
    registry.register(AppleMusicExtractor(config=apple_music))
    return registry


__all__ = [
    "APIError",
    "AppleMusicConfig",
    "AppleMusicExtractor",
    "BridgeError",
    "BridgeMatch",
    "BridgeProvider",
    "EnrichedMetadata",
    "ExtractorProtocol",
    "ExtractorRegistry",
    "ExtractorResult",
    "Playlist",
    "PlaylistAuthor",
    "PlaylistKind",
    "PlaylistNotFoundError",
    "QueryParseError",
    "QueryType",
    "SearchBridgeProvider",
    "SearchContext",
    "SoundCloudConfig",
    "SoundCloudExtractor",
    "Source",
    "StreamBackendMissingError",
    "StreamError",
    "Track",
    "TrackNotFoundError",
    "TuneBridgeError",
    "UnstreamableTrackError",
    "YouTubeConfig",
    "YouTubeExtractor",
    "classify",
    "create_registry",
    "negotiate_stream",
]
