"""Query classification.

Resolves ``auto``/``autoSearch`` query types into the most specific
provider tag before dispatch. Extractors may assume the tag they receive
is already correct.
"""

import logging

from tunebridge.models.enums import QueryType
from tunebridge.utils.url import (
    is_soundcloud_playlist_url,
    is_soundcloud_track_url,
    is_youtube_playlist_url,
    is_youtube_video_url,
    try_parse_apple_music_url,
)

logger = logging.getLogger(__name__)

_APPLE_MUSIC_TAGS = {
    "song": QueryType.APPLE_MUSIC_SONG,
    "album": QueryType.APPLE_MUSIC_ALBUM,
    "playlist": QueryType.APPLE_MUSIC_PLAYLIST,
}


def detect_url_type(query: str) -> QueryType | None:
    """Find the most specific query type for a provider URL.

    Args:
        query: Raw query string.

    Returns:
        The matching provider tag, or None if the query isn't a recognized
        provider link.
    """
    query = query.strip()

    if is_youtube_playlist_url(query):
        return QueryType.YOUTUBE_PLAYLIST
    if is_youtube_video_url(query):
        return QueryType.YOUTUBE_VIDEO
    if is_soundcloud_playlist_url(query):
        return QueryType.SOUNDCLOUD_PLAYLIST
    if is_soundcloud_track_url(query):
        return QueryType.SOUNDCLOUD_TRACK
    if link := try_parse_apple_music_url(query):
        return _APPLE_MUSIC_TAGS[link.kind]
    return None


def classify(query: str, declared_type: QueryType | str = QueryType.AUTO) -> QueryType:
    """Resolve the concrete query type for a query.

    Concrete provider tags pass through unchanged. ``auto`` and
    ``autoSearch`` are upgraded to the tag matching the query's URL shape,
    or left as they are when the query isn't a recognized link.

    Args:
        query: Raw query string (URL or search text).
        declared_type: Type hint supplied by the caller.

    Returns:
        The concrete query type.

    Raises:
        ValueError: If declared_type is not a known query type.
    """
    declared = QueryType(declared_type)
    if not declared.is_auto:
        return declared

    detected = detect_url_type(query)
    if detected is None:
        return declared

    logger.debug("Classified %r as %s", query, detected)
    return detected
