"""Extractor registry.

Maps extractor identifiers to live instances. Extractors look up peers
(e.g. the bridge target) through the registry they were activated with.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from tunebridge.classifier import classify
from tunebridge.exceptions import UnstreamableTrackError
from tunebridge.extractors.base import ExtractorProtocol, empty_response
from tunebridge.models.enums import QueryType
from tunebridge.models.results import ExtractorResult, SearchContext
from tunebridge.models.track import Track
from tunebridge.types import Streamable

logger = logging.getLogger(__name__)


class ExtractorRegistry:
    """Registry of active extractors, in registration order."""

    def __init__(self) -> None:
        self._extractors: dict[str, ExtractorProtocol] = {}

    def register(self, extractor: ExtractorProtocol) -> ExtractorProtocol:
        """Register and activate an extractor.

        Registering the same instance again does nothing. A different
        instance with the same identifier replaces the old one, which is
        deactivated first.
        """
        existing = self._extractors.get(extractor.identifier)
        if existing is extractor:
            return extractor
        if existing is not None:
            logger.debug("Replacing extractor %s", extractor.identifier)
            existing.deactivate()

        self._extractors[extractor.identifier] = extractor
        extractor.activate(self)
        logger.debug("Registered extractor %s", extractor.identifier)
        return extractor

    def unregister(self, identifier: str) -> ExtractorProtocol | None:
        """Remove and deactivate an extractor. Returns it, if registered."""
        extractor = self._extractors.pop(identifier, None)
        if extractor is not None:
            extractor.deactivate()
            logger.debug("Unregistered extractor %s", identifier)
        return extractor

    def get(self, identifier: str) -> ExtractorProtocol | None:
        return self._extractors.get(identifier)

    @property
    def extractors(self) -> list[ExtractorProtocol]:
        return list(self._extractors.values())

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._extractors

    def __len__(self) -> int:
        return len(self._extractors)

    def search(
        self,
        query: str,
        query_type: QueryType | str = QueryType.AUTO,
        requested_by: Any = None,
        request_options: dict[str, Any] | None = None,
    ) -> ExtractorResult:
        """Classify a query and resolve it with the first extractor that can.

        Extractors accepting the query type are tried in registration order
        until one returns tracks.

        Raises:
            ValueError: If query_type is not a known query type.
        """
        concrete = classify(query, query_type)
        context = SearchContext(
            type=concrete,
            requested_by=requested_by,
            request_options=request_options or {},
        )

        for extractor in self.extractors:
            if not extractor.validate(query, concrete):
                continue
            result = extractor.handle(query, context)
            if result.tracks:
                return result
            logger.debug("%s found nothing for %r", extractor.identifier, query)

        return empty_response()

    def stream(self, track: Track) -> Streamable:
        """Stream a track through the extractor that produced it.

        Raises:
            UnstreamableTrackError: If the track has no extractor.
        """
        if track.extractor is None:
            raise UnstreamableTrackError(f"Track has no extractor: {track.url}")
        return track.extractor.stream(track)

    def get_related_tracks(
        self, track: Track, history: Iterable[Track] = ()
    ) -> ExtractorResult:
        """Fetch related tracks from the extractor that produced the track."""
        if track.extractor is None:
            return empty_response()
        return track.extractor.get_related_tracks(track, list(history))
