"""Shared extractor contract and response helpers.

Extractors are independent classes satisfying :class:`ExtractorProtocol`;
there is no common base class.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any, Protocol

from tunebridge.lib.history import select_related
from tunebridge.models.enums import QueryType, Source
from tunebridge.models.results import ExtractorResult, SearchContext
from tunebridge.models.track import Playlist, Track
from tunebridge.types import Streamable

if TYPE_CHECKING:
    from tunebridge.extractors.registry import ExtractorRegistry

# Accepted by every extractor and resolved internally
AUTO_TYPES = frozenset({QueryType.AUTO, QueryType.AUTO_SEARCH})


class ExtractorProtocol(Protocol):
    """Capabilities every provider extractor implements.

    Attributes:
        identifier: Unique registry key.
        source: Provider the extractor serves.
        supported_types: Provider-specific query types it accepts, in
            addition to ``auto``/``autoSearch``.
        single_item_type: Query type of the tracks it produces; related
            tracks are only offered for tracks carrying this type.
    """

    identifier: str
    source: Source
    supported_types: frozenset[QueryType]
    single_item_type: QueryType

    def validate(self, query: Any, query_type: QueryType | str) -> bool:
        """Whether the extractor accepts a query of this type."""
        ...

    def activate(self, registry: ExtractorRegistry) -> None:
        """Called by the registry when the extractor is registered."""
        ...

    def deactivate(self) -> None:
        """Called by the registry when the extractor is removed."""
        ...

    def handle(self, query: str, context: SearchContext) -> ExtractorResult:
        """Resolve a query into tracks and an optional playlist."""
        ...

    def get_related_tracks(
        self, track: Track, history: Sequence[Track]
    ) -> ExtractorResult:
        """Fetch tracks related to a track, skipping played ones."""
        ...

    def stream(self, track: Track) -> Streamable:
        """Resolve a playable stream for a track."""
        ...


def accepts_query(
    query: Any, query_type: QueryType | str, supported_types: Iterable[QueryType]
) -> bool:
    """Check a query against an extractor's accepted query types.

    Non-string queries and unknown type names are rejected.
    """
    if not isinstance(query, str):
        return False
    try:
        resolved = QueryType(query_type)
    except ValueError:
        return False
    return resolved in AUTO_TYPES or resolved in supported_types


def create_response(
    playlist: Playlist | None = None, tracks: Sequence[Track] | None = None
) -> ExtractorResult:
    """Wrap extractor output in the uniform result envelope."""
    return ExtractorResult(playlist=playlist, tracks=list(tracks or []))


def empty_response() -> ExtractorResult:
    """The "no results" value."""
    return ExtractorResult(playlist=None, tracks=[])


def related_response(
    candidates: Sequence[Track], history: Sequence[Track]
) -> ExtractorResult:
    """Build a related-tracks result with history deduplication applied."""
    return create_response(tracks=select_related(candidates, history))
