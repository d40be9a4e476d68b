"""Data models for tunebridge.

Public API:
    Track, Playlist - Canonical, source-agnostic track containers
    ExtractorResult - Uniform ``{playlist, tracks}`` envelope
    BridgeMatch - Streamable equivalent of a catalog track
    SearchContext - Per-call context passed to extractors
    QueryType, Source, PlaylistKind - Shared vocabularies

Internal (not exported):
    youtube.py, soundcloud.py, apple_music.py - Provider payload models
"""

from tunebridge.models.enums import PlaylistKind, QueryType, Source
from tunebridge.models.results import BridgeMatch, ExtractorResult, SearchContext
from tunebridge.models.track import EnrichedMetadata, Playlist, PlaylistAuthor, Track

__all__ = [
    "BridgeMatch",
    "EnrichedMetadata",
    "ExtractorResult",
    "Playlist",
    "PlaylistAuthor",
    "PlaylistKind",
    "QueryType",
    "SearchContext",
    "Source",
    "Track",
]
