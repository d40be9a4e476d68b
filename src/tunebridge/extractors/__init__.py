"""Provider extractors and the registry that dispatches to them."""

from tunebridge.extractors.apple_music import AppleMusicExtractor
from tunebridge.extractors.base import (
    ExtractorProtocol,
    create_response,
    empty_response,
)
from tunebridge.extractors.registry import ExtractorRegistry
from tunebridge.extractors.soundcloud import SoundCloudExtractor
from tunebridge.extractors.youtube import YouTubeExtractor

__all__ = [
    "AppleMusicExtractor",
    "ExtractorProtocol",
    "ExtractorRegistry",
    "SoundCloudExtractor",
    "YouTubeExtractor",
    "create_response",
    "empty_response",
]
