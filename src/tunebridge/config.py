"""Configuration for tunebridge extractors."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

from tunebridge.types import StreamFactory

if TYPE_CHECKING:
    from tunebridge.bridge import BridgeProvider

# Upper bound for related-track batches
DEFAULT_RELATED_LIMIT = 5


@dataclass(frozen=True)
class YouTubeConfig:
    """YouTube extractor configuration.

    Attributes:
        search_limit: Maximum number of search results to return.
        search_filter: ytmusicapi search filter ('videos' or 'songs').
        related_limit: Maximum number of related tracks per batch.
        ignore_spelling: Whether to ignore spelling in search queries.
        cookies_path: Optional cookies.txt for authenticated requests.
        stream_backend: Name of the streaming backend resolved on activation.
        ytdl_options: Extra yt-dlp options for the streaming backend.
        create_stream: Stream override; takes priority over the backend.
    """

    search_limit: int = 10
    search_filter: Literal["videos", "songs"] = "videos"
    related_limit: int = DEFAULT_RELATED_LIMIT
    ignore_spelling: bool = True
    cookies_path: Path | None = None
    stream_backend: str | None = "yt-dlp"
    ytdl_options: dict[str, Any] = field(default_factory=dict)
    create_stream: StreamFactory | None = None


@dataclass(frozen=True)
class SoundCloudConfig:
    """SoundCloud extractor configuration.

    Attributes:
        search_limit: Maximum number of search results to return.
        related_limit: Maximum number of related tracks per batch.
        oauth_token: Optional OAuth token (unlocks Go+ full streams).
        proxy: Optional proxy URL for all requests.
        create_stream: Stream override; takes priority over native streams.
    """

    search_limit: int = 10
    related_limit: int = DEFAULT_RELATED_LIMIT
    oauth_token: str | None = None
    proxy: str | None = None
    create_stream: StreamFactory | None = None


@dataclass(frozen=True)
class AppleMusicConfig:
    """Apple Music extractor configuration.

    Apple Music has no stream of its own. Tracks are streamed through
    ``create_stream`` if given, otherwise through a bridge provider.

    Attributes:
        country: Storefront country code for catalog lookups.
        search_limit: Maximum number of search results to return.
        related_limit: Maximum number of related tracks per batch.
        timeout: Request timeout in seconds.
        create_stream: Stream override; takes priority over bridging.
        bridge_provider: Bridge strategy. When None, a search bridge over
            the registered YouTube extractor is used.
    """

    country: str = "us"
    search_limit: int = 10
    related_limit: int = DEFAULT_RELATED_LIMIT
    timeout: float = 10.0
    create_stream: StreamFactory | None = None
    bridge_provider: BridgeProvider | None = None
