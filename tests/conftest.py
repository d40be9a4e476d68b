"""Test fixtures and configuration."""

from typing import Any

import pytest
from tunebridge.config import AppleMusicConfig, SoundCloudConfig, YouTubeConfig
from tunebridge.exceptions import APIError, PlaylistNotFoundError, TrackNotFoundError
from tunebridge.extractors.apple_music import AppleMusicExtractor
from tunebridge.extractors.registry import ExtractorRegistry
from tunebridge.extractors.soundcloud import SoundCloudExtractor
from tunebridge.extractors.youtube import YouTubeExtractor
from tunebridge.models.apple_music import AppleMusicCollection, AppleMusicSong
from tunebridge.models.enums import QueryType, Source
from tunebridge.models.soundcloud import SoundCloudPlaylist, SoundCloudTrack
from tunebridge.models.track import Track
from tunebridge.models.youtube import Video, YouTubePlaylist

RICKROLL_ID = "dQw4w9WgXcQ"


# ============================================================================
# PAYLOAD FACTORIES
# ============================================================================


def make_video(
    video_id: str = RICKROLL_ID,
    title: str = "Never Gonna Give You Up",
    artist: str = "Rick Astley",
    duration: str | None = "3:33",
    duration_seconds: int | None = None,
    views: str | None = "1.5B views",
) -> Video:
    """Create a YouTube video payload."""
    return Video.model_validate(
        {
            "videoId": video_id,
            "title": title,
            "artists": [{"name": artist, "id": "UCuAXFkgsw1L7xaCfnd5JJOw"}],
            "thumbnails": [
                {"url": f"https://i.ytimg.com/vi/{video_id}/default.jpg", "width": 120},
                {"url": f"https://i.ytimg.com/vi/{video_id}/hq.jpg", "width": 480},
            ],
            "duration": duration,
            "duration_seconds": duration_seconds,
            "views": views,
        }
    )


def make_sc_track(
    track_id: int = 1001,
    title: str = "Sunset Loop",
    uploader: str = "beatmaker",
    duration: float | None = 215.0,
    preview: bool = False,
) -> SoundCloudTrack:
    """Create a SoundCloud track payload."""
    slug = title.lower().replace(" ", "-")
    format_id = "hls_mp3_128_preview" if preview else "hls_mp3_128"
    return SoundCloudTrack.model_validate(
        {
            "id": track_id,
            "title": title,
            "webpage_url": f"https://soundcloud.com/{uploader}/{slug}",
            "uploader": uploader,
            "uploader_url": f"https://soundcloud.com/{uploader}",
            "duration": duration,
            "thumbnail": f"https://i1.sndcdn.com/artworks-{track_id}-t500x500.jpg",
            "view_count": 4200,
            "formats": [{"format_id": format_id, "url": f"https://cf-hls/{track_id}"}],
        }
    )


def make_song(
    song_id: int = 1558533900,
    title: str = "Never Gonna Give You Up",
    artist: str = "Rick Astley",
    duration_ms: int | None = 213_000,
) -> AppleMusicSong:
    """Create an Apple Music song payload (iTunes lookup shape)."""
    return AppleMusicSong.model_validate(
        {
            "wrapperType": "track",
            "kind": "song",
            "trackId": song_id,
            "trackName": title,
            "artistName": artist,
            "collectionName": "Whenever You Need Somebody",
            "trackTimeMillis": duration_ms,
            "artworkUrl100": "https://is1-ssl.mzstatic.com/image/thumb/a/100x100bb.jpg",
            "trackViewUrl": f"https://music.apple.com/us/song/x/{song_id}",
        }
    )


def make_track(
    url: str = f"https://www.youtube.com/watch?v={RICKROLL_ID}",
    title: str = "Never Gonna Give You Up",
    author: str = "Rick Astley",
    duration: str = "3:33",
    source: Source = Source.YOUTUBE,
    query_type: QueryType = QueryType.YOUTUBE_VIDEO,
    **kwargs: Any,
) -> Track:
    """Create a canonical track."""
    return Track(
        title=title,
        author=author,
        url=url,
        duration=duration,
        source=source,
        query_type=query_type,
        **kwargs,
    )


# ============================================================================
# MOCK CLIENTS
# ============================================================================


class MockYouTubeClient:
    """Mock YouTube client for testing."""

    def __init__(
        self,
        videos: list[Video] | None = None,
        search_results: list[Video] | None = None,
        related: list[Video] | None = None,
        playlist: YouTubePlaylist | None = None,
        error: Exception | None = None,
    ) -> None:
        self._videos = {v.video_id: v for v in videos or []}
        self._search_results = search_results or []
        self._related = related or []
        self._playlist = playlist
        self._error = error
        self.search_calls: list[tuple[str, int | None]] = []
        self.get_video_calls: list[str] = []
        self.get_related_calls: list[tuple[str, int]] = []
        self.get_playlist_calls: list[tuple[str, int | None]] = []

    def search_videos(self, query: str, limit: int | None = None) -> list[Video]:
        self.search_calls.append((query, limit))
        if self._error:
            raise self._error
        return self._search_results[:limit] if limit else self._search_results

    def get_video(self, video_id: str) -> Video:
        self.get_video_calls.append(video_id)
        if self._error:
            raise self._error
        if video_id not in self._videos:
            raise TrackNotFoundError(f"Track not found: {video_id}")
        return self._videos[video_id]

    def get_related(self, video_id: str, limit: int) -> list[Video]:
        self.get_related_calls.append((video_id, limit))
        if self._error:
            raise self._error
        return self._related[:limit]

    def get_playlist(
        self, playlist_id: str, limit: int | None = None
    ) -> YouTubePlaylist:
        self.get_playlist_calls.append((playlist_id, limit))
        if self._error:
            raise self._error
        if self._playlist is None:
            raise PlaylistNotFoundError(f"Playlist not found: {playlist_id}")
        return self._playlist


class MockSoundCloudClient:
    """Mock SoundCloud client for testing."""

    def __init__(
        self,
        tracks: list[SoundCloudTrack] | None = None,
        search_results: list[SoundCloudTrack] | None = None,
        related: list[SoundCloudTrack] | None = None,
        playlist: SoundCloudPlaylist | None = None,
        stream_urls: dict[str, str] | None = None,
        error: Exception | None = None,
    ) -> None:
        self._tracks = {t.permalink_url: t for t in tracks or []}
        self._search_results = search_results or []
        self._related = related or []
        self._playlist = playlist
        self._stream_urls = stream_urls or {}
        self._error = error
        self.search_calls: list[tuple[str, int | None]] = []
        self.get_related_calls: list[tuple[str, int]] = []
        self.stream_url_calls: list[str] = []

    def search_tracks(
        self, query: str, limit: int | None = None
    ) -> list[SoundCloudTrack]:
        self.search_calls.append((query, limit))
        if self._error:
            raise self._error
        return self._search_results

    def get_track(self, url: str) -> SoundCloudTrack:
        if self._error:
            raise self._error
        if url not in self._tracks:
            raise TrackNotFoundError(f"Track not found: {url}")
        return self._tracks[url]

    def get_playlist(self, url: str) -> SoundCloudPlaylist:
        if self._error:
            raise self._error
        if self._playlist is None:
            raise PlaylistNotFoundError(f"Playlist not found: {url}")
        return self._playlist

    def get_related(self, url: str, limit: int) -> list[SoundCloudTrack]:
        self.get_related_calls.append((url, limit))
        if self._error:
            raise self._error
        return self._related[:limit]

    def stream_url(self, url: str) -> str | None:
        self.stream_url_calls.append(url)
        return self._stream_urls.get(url)


class MockAppleMusicClient:
    """Mock Apple Music client for testing."""

    def __init__(
        self,
        songs: list[AppleMusicSong] | None = None,
        search_results: list[AppleMusicSong] | None = None,
        album: AppleMusicCollection | None = None,
        playlist: AppleMusicCollection | None = None,
        error: Exception | None = None,
    ) -> None:
        self._songs = {s.id: s for s in songs or []}
        self._search_results = search_results or []
        self._album = album
        self._playlist = playlist
        self._error = error
        self.search_calls: list[tuple[str, int | None]] = []
        self.get_song_calls: list[tuple[str, str | None]] = []

    def search_songs(self, query: str, limit: int | None = None) -> list[AppleMusicSong]:
        self.search_calls.append((query, limit))
        if self._error:
            raise self._error
        return self._search_results

    def get_song(self, song_id: str, country: str | None = None) -> AppleMusicSong:
        self.get_song_calls.append((song_id, country))
        if self._error:
            raise self._error
        if song_id not in self._songs:
            raise TrackNotFoundError(f"Track not found: {song_id}")
        return self._songs[song_id]

    def get_album(
        self, album_id: str, country: str | None = None
    ) -> AppleMusicCollection:
        if self._error:
            raise self._error
        if self._album is None:
            raise PlaylistNotFoundError(f"Album not found: {album_id}")
        return self._album

    def get_playlist(
        self, playlist_id: str, country: str | None = None
    ) -> AppleMusicCollection:
        if self._error:
            raise self._error
        if self._playlist is None:
            raise PlaylistNotFoundError(f"Playlist not found: {playlist_id}")
        return self._playlist


class FakeStreamBackend:
    """Stream backend that returns a fixed URL per page URL."""

    name = "fake"

    def __init__(self) -> None:
        self.calls: list[str] = []

    def stream(self, url: str) -> str:
        self.calls.append(url)
        return f"https://media.example.com/audio?src={url}"


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def sample_video() -> Video:
    return make_video()


@pytest.fixture
def youtube_client(sample_video: Video) -> MockYouTubeClient:
    """YouTube client knowing one video, returning it from search."""
    return MockYouTubeClient(
        videos=[sample_video],
        search_results=[
            sample_video,
            make_video("yPYZpwSpKmA", "Together Forever", duration="3:25"),
        ],
        related=[
            make_video("yPYZpwSpKmA", "Together Forever"),
            make_video("BeyEGebJ1l4", "Whenever You Need Somebody"),
            make_video("AC3Ejf7vPEY", "She Wants to Dance with Me"),
        ],
    )


@pytest.fixture
def youtube_extractor(youtube_client: MockYouTubeClient) -> YouTubeExtractor:
    return YouTubeExtractor(client=youtube_client, config=YouTubeConfig())


@pytest.fixture
def soundcloud_client() -> MockSoundCloudClient:
    track = make_sc_track()
    return MockSoundCloudClient(
        tracks=[track],
        search_results=[track, make_sc_track(1002, "Gold Preview", preview=True)],
        related=[
            make_sc_track(2001, "Night Drive"),
            make_sc_track(2002, "Low Tide"),
        ],
        stream_urls={track.permalink_url: "https://cf-media.sndcdn.com/stream.mp3"},
    )


@pytest.fixture
def soundcloud_extractor(soundcloud_client: MockSoundCloudClient) -> SoundCloudExtractor:
    return SoundCloudExtractor(client=soundcloud_client, config=SoundCloudConfig())


@pytest.fixture
def apple_music_client() -> MockAppleMusicClient:
    song = make_song()
    return MockAppleMusicClient(
        songs=[song],
        search_results=[song, make_song(1558533901, "Together Forever")],
    )


@pytest.fixture
def apple_music_extractor(apple_music_client: MockAppleMusicClient) -> AppleMusicExtractor:
    return AppleMusicExtractor(client=apple_music_client, config=AppleMusicConfig())


@pytest.fixture
def registry(
    youtube_extractor: YouTubeExtractor,
    soundcloud_extractor: SoundCloudExtractor,
    apple_music_extractor: AppleMusicExtractor,
) -> ExtractorRegistry:
    """Registry with all three extractors and a fake YouTube stream backend."""
    registry = ExtractorRegistry()
    registry.register(youtube_extractor)
    registry.register(soundcloud_extractor)
    registry.register(apple_music_extractor)
    youtube_extractor._backend = FakeStreamBackend()
    return registry


@pytest.fixture
def api_error() -> APIError:
    return APIError("Search failed: upstream unavailable")
