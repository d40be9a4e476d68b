"""Canonical track and playlist models.

These are the source-agnostic representations handed to the host queue.
Provider payloads are kept verbatim in ``raw`` and are never inspected by
shared code.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from tunebridge.models.enums import PlaylistKind, QueryType, Source

if TYPE_CHECKING:
    from tunebridge.extractors.base import ExtractorProtocol
    from tunebridge.models.results import BridgeMatch

logger = logging.getLogger(__name__)

MetadataResolver = Callable[["Track"], "EnrichedMetadata"]


@dataclass(frozen=True)
class EnrichedMetadata:
    """Result of a deferred metadata resolution.

    Attributes:
        source: Raw provider payload the track was built from.
        bridge: Bridge match on a streamable provider, if one was resolved.
    """

    source: Any
    bridge: BridgeMatch | None = None


@dataclass(frozen=True)
class PlaylistAuthor:
    """Playlist owner or album artist."""

    name: str
    url: str = ""


@dataclass(eq=False)
class Track:
    """A single playable item.

    ``url`` is the identity key used for history deduplication and bridge
    match exclusion. Tracks compare by identity.

    ``bridge_payload`` is the only field that changes after construction;
    use :meth:`set_bridge_payload`.
    """

    title: str
    author: str
    url: str
    duration: str
    source: Source
    query_type: QueryType
    thumbnail: str | None = None
    views: int = 0
    description: str = ""
    requested_by: Any = None
    raw: Any = field(default=None, repr=False)
    bridge_payload: BridgeMatch | None = field(default=None, repr=False)
    playlist: Playlist | None = field(default=None, repr=False)
    extractor: ExtractorProtocol | None = field(default=None, repr=False)
    metadata_resolver: MetadataResolver | None = field(default=None, repr=False)

    def request_metadata(self) -> EnrichedMetadata:
        """Run the deferred metadata resolver.

        Every call runs the resolver again. For bridged providers this
        repeats the bridge search, so the returned payload may point at a
        different, equally good match on each call while the track itself
        stays the same. A resolved bridge match is attached to the track.
        """
        if self.metadata_resolver is None:
            return EnrichedMetadata(source=self.raw)

        metadata = self.metadata_resolver(self)
        if metadata.bridge is not None:
            self.set_bridge_payload(metadata.bridge)
        return metadata

    def set_bridge_payload(self, payload: BridgeMatch) -> None:
        """Attach a bridge match after a stream or metadata resolution."""
        logger.debug("Attaching bridge payload to %s", self.url)
        self.bridge_payload = payload

    @property
    def is_bridged(self) -> bool:
        """Whether a bridge match has been attached."""
        return self.bridge_payload is not None


@dataclass(eq=False)
class Playlist:
    """An album or playlist with its ordered tracks.

    Each contained track holds a non-owning back-reference to this object.
    """

    title: str
    author: PlaylistAuthor
    source: Source
    kind: PlaylistKind
    id: str
    url: str
    thumbnail: str | None = None
    description: str = ""
    raw: Any = field(default=None, repr=False)
    tracks: list[Track] = field(default_factory=list, repr=False)

    def __len__(self) -> int:
        return len(self.tracks)
