"""Result and context models passed between the host and extractors."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from tunebridge.models.enums import QueryType

if TYPE_CHECKING:
    from tunebridge.extractors.base import ExtractorProtocol
    from tunebridge.models.track import Playlist, Track


@dataclass
class ExtractorResult:
    """Uniform ``{playlist, tracks}`` envelope returned by every extractor.

    The empty value (no playlist, no tracks) signals "no results" and lets
    the host try the next extractor.

    Attributes:
        playlist: Playlist or album the tracks belong to, if any.
        tracks: Ordered tracks.
    """

    playlist: Playlist | None = None
    tracks: list[Track] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """Whether the result carries no tracks and no playlist."""
        return self.playlist is None and not self.tracks


@dataclass(frozen=True)
class BridgeMatch:
    """A streamable equivalent of a track from a non-streamable provider.

    Attributes:
        track: Matched track on the streamable provider.
        extractor: Extractor that produced ``track`` and can stream it.
        data: Opaque data from the bridge provider (e.g. a resolved stream).
        score: Similarity score (0-100) when the provider ranked candidates.
    """

    track: Track
    extractor: ExtractorProtocol
    data: Any = None
    score: float | None = None


@dataclass(frozen=True)
class SearchContext:
    """Per-call context for ``handle()``.

    Attributes:
        type: Concrete query type (already resolved by the classifier).
        requested_by: Opaque requester reference copied onto every track.
        request_options: Provider request options (e.g. ``{"limit": 50}``).
    """

    type: QueryType = QueryType.AUTO
    requested_by: Any = None
    request_options: dict[str, Any] = field(default_factory=dict)

    @property
    def limit(self) -> int | None:
        """Optional item limit for playlist fetches."""
        limit = self.request_options.get("limit")
        return int(limit) if limit else None
