"""Provider API clients."""

from tunebridge.clients.apple_music import AppleMusicClient, AppleMusicClientProtocol
from tunebridge.clients.soundcloud import SoundCloudClient, SoundCloudClientProtocol
from tunebridge.clients.youtube import YouTubeClient, YouTubeClientProtocol

__all__ = [
    "AppleMusicClient",
    "AppleMusicClientProtocol",
    "SoundCloudClient",
    "SoundCloudClientProtocol",
    "YouTubeClient",
    "YouTubeClientProtocol",
]
