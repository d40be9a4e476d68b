"""Bridging tracks from catalog providers onto streamable providers.

A bridge provider finds a track on a provider that can stream audio which
is the same recording as a track from a provider that can't.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from tunebridge.lib.matching import rank_candidates
from tunebridge.models.enums import QueryType
from tunebridge.models.results import BridgeMatch, SearchContext
from tunebridge.models.track import Track
from tunebridge.types import Streamable

if TYPE_CHECKING:
    from tunebridge.extractors.base import ExtractorProtocol

logger = logging.getLogger(__name__)


class BridgeProvider(Protocol):
    """Protocol for bridge strategies.

    Implementations must not modify the track they resolve.
    """

    def resolve(
        self, extractor: ExtractorProtocol | None, track: Track
    ) -> BridgeMatch | None:
        """Find a streamable equivalent of ``track``, or None."""
        ...

    def stream(self, match: BridgeMatch) -> Streamable:
        """Stream a resolved match."""
        ...


class SearchBridgeProvider:
    """Bridge by searching the streamable provider for title and author.

    By default the provider's top-ranked search hit is used. With
    ``min_score`` set, hits are ranked by title, artist and duration
    similarity instead and rejected below the threshold.
    """

    def __init__(
        self,
        target: ExtractorProtocol,
        *,
        min_score: float | None = None,
        search_type: QueryType = QueryType.AUTO_SEARCH,
    ) -> None:
        """Initialize the provider.

        Args:
            target: Streamable extractor to search and stream from.
            min_score: Optional similarity threshold (0-100).
            search_type: Query type used for the search request.
        """
        self._target = target
        self._min_score = min_score
        self._search_type = search_type

    @property
    def target(self) -> ExtractorProtocol:
        return self._target

    def resolve(
        self, extractor: ExtractorProtocol | None, track: Track
    ) -> BridgeMatch | None:
        """Search the target extractor for the track.

        Args:
            extractor: Extractor that produced ``track``.
            track: Track to bridge.

        Returns:
            The best match, or None if nothing acceptable was found.
        """
        query = f"{track.title} {track.author}".strip()
        logger.debug("Bridge search for %s: %s", track.url, query)

        result = self._target.handle(
            query,
            SearchContext(type=self._search_type, requested_by=track.requested_by),
        )
        candidates = [c for c in result.tracks if c.url != track.url]
        if not candidates:
            logger.debug("No bridge candidates for %s", track.url)
            return None

        if self._min_score is None:
            return BridgeMatch(track=candidates[0], extractor=self._target)

        best = rank_candidates(track, candidates)[0]
        if not best.is_acceptable(self._min_score):
            logger.debug(
                "Best bridge candidate for %s scored %.1f (< %.1f): %s",
                track.url,
                best.score,
                self._min_score,
                best.track.url,
            )
            return None
        return BridgeMatch(track=best.track, extractor=self._target, score=best.score)

    def stream(self, match: BridgeMatch) -> Streamable:
        """Stream the matched track through its own extractor."""
        return match.extractor.stream(match.track)
