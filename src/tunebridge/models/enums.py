"""Enumerations for tunebridge domain models."""

from enum import StrEnum


class QueryType(StrEnum):
    """Shared query type vocabulary.

    Known to both the classifier and every extractor. Each extractor
    accepts a subset of these tags plus AUTO and AUTO_SEARCH. Adding a
    provider means extending this enumeration.
    """

    AUTO = "auto"
    AUTO_SEARCH = "autoSearch"

    YOUTUBE = "youtube"
    YOUTUBE_VIDEO = "youtubeVideo"
    YOUTUBE_PLAYLIST = "youtubePlaylist"
    YOUTUBE_SEARCH = "youtubeSearch"

    SOUNDCLOUD = "soundcloud"
    SOUNDCLOUD_TRACK = "soundcloudTrack"
    SOUNDCLOUD_PLAYLIST = "soundcloudPlaylist"
    SOUNDCLOUD_SEARCH = "soundcloudSearch"

    APPLE_MUSIC_SONG = "appleMusicSong"
    APPLE_MUSIC_ALBUM = "appleMusicAlbum"
    APPLE_MUSIC_PLAYLIST = "appleMusicPlaylist"
    APPLE_MUSIC_SEARCH = "appleMusicSearch"

    @property
    def is_auto(self) -> bool:
        """Whether the tag still needs to be resolved by the classifier."""
        return self in (QueryType.AUTO, QueryType.AUTO_SEARCH)


class Source(StrEnum):
    """Provider that produced a track or playlist."""

    YOUTUBE = "youtube"
    SOUNDCLOUD = "soundcloud"
    APPLE_MUSIC = "apple_music"


class PlaylistKind(StrEnum):
    """Type of track container."""

    ALBUM = "album"
    PLAYLIST = "playlist"
