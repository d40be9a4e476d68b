"""Utility functions for tunebridge.

Available via `from tunebridge.utils import ...` for power users.
Not re-exported at the top-level `tunebridge` package.
"""

from tunebridge.utils.duration import (
    format_duration,
    parse_duration,
    parse_iso8601_duration,
    to_display_duration,
)
from tunebridge.utils.url import (
    parse_apple_music_url,
    parse_playlist_id,
    parse_video_id,
    validate_id,
    validate_url,
)

__all__ = [
    "format_duration",
    "parse_apple_music_url",
    "parse_duration",
    "parse_iso8601_duration",
    "parse_playlist_id",
    "parse_video_id",
    "to_display_duration",
    "validate_id",
    "validate_url",
]
