"""Tests for the Apple Music extractor and track bridging."""

import io
import json
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from conftest import (
    FakeStreamBackend,
    MockAppleMusicClient,
    make_song,
    make_track,
)
from tunebridge.bridge import SearchBridgeProvider
from tunebridge.clients.apple_music import AppleMusicClient
from tunebridge.config import AppleMusicConfig
from tunebridge.exceptions import BridgeError, UnstreamableTrackError
from tunebridge.extractors.apple_music import AppleMusicExtractor
from tunebridge.extractors.registry import ExtractorRegistry
from tunebridge.extractors.youtube import YouTubeExtractor
from tunebridge.models.apple_music import AppleMusicCollection, AppleMusicSong
from tunebridge.models.enums import PlaylistKind, QueryType, Source
from tunebridge.models.results import BridgeMatch, SearchContext
from tunebridge.models.track import Track

SONG_URL = "https://music.apple.com/us/song/never-gonna-give-you-up/1558533900"
ALBUM_URL = "https://music.apple.com/gb/album/whenever-you-need-somebody/1558533890"
PLAYLIST_URL = "https://music.apple.com/us/playlist/80s-hits/pl.f4d106fed2bd41149aaacabb"


def _patch_urlopen(results: list[dict]) -> Any:
    response = MagicMock()
    response.__enter__.return_value = io.BytesIO(
        json.dumps({"results": results}).encode()
    )
    return patch(
        "tunebridge.clients.apple_music.urllib.request.urlopen", return_value=response
    )


# Song entry without trackName or trackViewUrl
MALFORMED_SONG = {"wrapperType": "track", "kind": "song", "trackId": 1}


def _collection(artist: str = "Rick Astley") -> AppleMusicCollection:
    untagged = AppleMusicSong.model_validate(
        {
            "trackId": 1558533902,
            "trackName": "Whenever You Need Somebody",
            "trackViewUrl": "https://music.apple.com/us/song/x/1558533902",
        }
    )
    return AppleMusicCollection(
        id="1558533890",
        title="Whenever You Need Somebody",
        artist=artist,
        url="https://music.apple.com/gb/album/x/1558533890",
        artwork_url="https://is1-ssl.mzstatic.com/image/thumb/b/100x100bb.jpg",
        tracks=[make_song(), untagged],
    )


def _apple_track(
    url: str = "https://music.apple.com/us/song/x/1558533900", **kwargs: Any
) -> Track:
    return make_track(
        url=url,
        source=Source.APPLE_MUSIC,
        query_type=QueryType.APPLE_MUSIC_SONG,
        **kwargs,
    )


class TestValidate:
    @pytest.mark.parametrize(
        ("query_type", "expected"),
        [
            (QueryType.AUTO, True),
            (QueryType.APPLE_MUSIC_SONG, True),
            (QueryType.APPLE_MUSIC_ALBUM, True),
            (QueryType.APPLE_MUSIC_PLAYLIST, True),
            (QueryType.APPLE_MUSIC_SEARCH, True),
            (QueryType.YOUTUBE, False),
            (QueryType.SOUNDCLOUD_SEARCH, False),
        ],
    )
    def test_membership(
        self,
        apple_music_extractor: AppleMusicExtractor,
        query_type: QueryType,
        expected: bool,
    ) -> None:
        assert apple_music_extractor.validate("query", query_type) is expected


class TestHandle:
    def test_song_link(
        self,
        apple_music_extractor: AppleMusicExtractor,
        apple_music_client: MockAppleMusicClient,
    ) -> None:
        result = apple_music_extractor.handle(
            SONG_URL, SearchContext(type=QueryType.APPLE_MUSIC_SONG)
        )

        assert result.playlist is None
        assert len(result.tracks) == 1
        track = result.tracks[0]
        assert track.title == "Never Gonna Give You Up"
        assert track.author == "Rick Astley"
        assert track.duration == "3:33"
        assert track.thumbnail == (
            "https://is1-ssl.mzstatic.com/image/thumb/a/600x600bb.jpg"
        )
        assert track.source == Source.APPLE_MUSIC
        assert track.query_type == QueryType.APPLE_MUSIC_SONG
        assert track.extractor is apple_music_extractor
        assert track.metadata_resolver is not None
        assert apple_music_client.get_song_calls == [("1558533900", "us")]

    def test_album_link(self) -> None:
        client = MockAppleMusicClient(album=_collection())
        extractor = AppleMusicExtractor(client=client)

        result = extractor.handle(
            ALBUM_URL, SearchContext(type=QueryType.APPLE_MUSIC_ALBUM)
        )

        assert result.playlist is not None
        assert result.playlist.kind == PlaylistKind.ALBUM
        assert result.playlist.author.name == "Rick Astley"
        assert result.playlist.thumbnail == (
            "https://is1-ssl.mzstatic.com/image/thumb/b/600x600bb.jpg"
        )
        assert len(result.tracks) == len(result.playlist.tracks) == 2
        assert all(t.playlist is result.playlist for t in result.tracks)

    def test_collection_tracks_fall_back_to_collection_artist(self) -> None:
        client = MockAppleMusicClient(album=_collection(artist="Various"))
        result = AppleMusicExtractor(client=client).handle(
            ALBUM_URL, SearchContext(type=QueryType.APPLE_MUSIC_ALBUM)
        )
        assert [t.author for t in result.tracks] == ["Rick Astley", "Various"]

    def test_playlist_link(self) -> None:
        client = MockAppleMusicClient(playlist=_collection(artist="Apple Music"))
        result = AppleMusicExtractor(client=client).handle(
            PLAYLIST_URL,
            SearchContext(type=QueryType.APPLE_MUSIC_PLAYLIST, request_options={"limit": 1}),
        )

        assert result.playlist is not None
        assert result.playlist.kind == PlaylistKind.PLAYLIST
        assert len(result.tracks) == 1

    def test_search(
        self,
        apple_music_extractor: AppleMusicExtractor,
        apple_music_client: MockAppleMusicClient,
    ) -> None:
        result = apple_music_extractor.handle(
            "rick astley", SearchContext(type=QueryType.APPLE_MUSIC_SEARCH)
        )
        assert [t.title for t in result.tracks] == [
            "Never Gonna Give You Up",
            "Together Forever",
        ]
        assert apple_music_client.search_calls == [("rick astley", None)]

    def test_empty_search(self) -> None:
        result = AppleMusicExtractor(client=MockAppleMusicClient()).handle(
            "nothing", SearchContext(type=QueryType.APPLE_MUSIC_SEARCH)
        )
        assert result.is_empty

    def test_malformed_link_returns_empty(
        self, apple_music_extractor: AppleMusicExtractor
    ) -> None:
        result = apple_music_extractor.handle(
            "https://example.com/song/1", SearchContext(type=QueryType.APPLE_MUSIC_SONG)
        )
        assert result.is_empty

    def test_provider_failure_returns_empty(self, api_error: Exception) -> None:
        extractor = AppleMusicExtractor(client=MockAppleMusicClient(error=api_error))
        result = extractor.handle(SONG_URL, SearchContext(type=QueryType.APPLE_MUSIC_SONG))
        assert result.is_empty

    def test_malformed_payload_returns_empty(self) -> None:
        extractor = AppleMusicExtractor(client=AppleMusicClient())
        with _patch_urlopen([MALFORMED_SONG]):
            result = extractor.handle(
                "rick astley", SearchContext(type=QueryType.APPLE_MUSIC_SEARCH)
            )
        assert result.is_empty


class TestBridgeStreaming:
    def test_stream_through_youtube_bridge(self, registry: ExtractorRegistry) -> None:
        result = registry.search(SONG_URL)
        track = result.tracks[0]
        assert track.source == Source.APPLE_MUSIC
        assert track.bridge_payload is None

        stream = registry.stream(track)

        assert stream
        assert track.bridge_payload is not None
        assert track.bridge_payload.track.source == Source.YOUTUBE
        assert track.bridge_payload.track.title == "Never Gonna Give You Up"
        assert isinstance(track.bridge_payload.extractor, YouTubeExtractor)

    def test_default_bridge_targets_youtube(
        self, registry: ExtractorRegistry, apple_music_extractor: AppleMusicExtractor
    ) -> None:
        bridge = apple_music_extractor.bridge_provider
        assert isinstance(bridge, SearchBridgeProvider)
        assert bridge.target is registry.get("youtube")

    def test_no_registry_is_unstreamable(
        self, apple_music_extractor: AppleMusicExtractor
    ) -> None:
        with pytest.raises(UnstreamableTrackError, match="AppleMusicExtractor"):
            apple_music_extractor.stream(_apple_track(extractor=apple_music_extractor))

    def test_no_youtube_extractor_is_unstreamable(
        self, apple_music_extractor: AppleMusicExtractor
    ) -> None:
        ExtractorRegistry().register(apple_music_extractor)
        assert apple_music_extractor.bridge_provider is None
        with pytest.raises(UnstreamableTrackError):
            apple_music_extractor.stream(_apple_track(extractor=apple_music_extractor))

    def test_no_match_raises_bridge_error(
        self, apple_music_client: MockAppleMusicClient
    ) -> None:
        bridge = MagicMock()
        bridge.resolve.return_value = None
        extractor = AppleMusicExtractor(
            client=apple_music_client, config=AppleMusicConfig(bridge_provider=bridge)
        )
        track = _apple_track(extractor=extractor)

        with pytest.raises(BridgeError, match="Failed to bridge this track"):
            extractor.stream(track)
        bridge.stream.assert_not_called()
        assert track.bridge_payload is None

    def test_override_skips_bridge(self, apple_music_client: MockAppleMusicClient) -> None:
        bridge = MagicMock()
        create_stream = MagicMock(return_value="https://cdn.example.com/am.opus")
        extractor = AppleMusicExtractor(
            client=apple_music_client,
            config=AppleMusicConfig(create_stream=create_stream, bridge_provider=bridge),
        )
        ExtractorRegistry().register(extractor)
        track = _apple_track(extractor=extractor)

        assert extractor.stream(track) == "https://cdn.example.com/am.opus"
        create_stream.assert_called_once_with(extractor, track.url)
        bridge.resolve.assert_not_called()
        assert track.bridge_payload is None

    def test_stream_resolves_again_each_call(self, registry: ExtractorRegistry) -> None:
        track = registry.search(SONG_URL).tracks[0]
        youtube = registry.get("youtube")
        backend = FakeStreamBackend()
        youtube._backend = backend

        registry.stream(track)
        registry.stream(track)

        assert len(backend.calls) == 2


class TestRequestMetadata:
    def test_resolves_bridge_on_every_call(
        self, apple_music_client: MockAppleMusicClient
    ) -> None:
        first = BridgeMatch(track=make_track(), extractor=MagicMock())
        second = BridgeMatch(
            track=make_track(url="https://www.youtube.com/watch?v=yPYZpwSpKmA"),
            extractor=MagicMock(),
        )
        bridge = MagicMock()
        bridge.resolve.side_effect = [first, second]
        extractor = AppleMusicExtractor(
            client=apple_music_client, config=AppleMusicConfig(bridge_provider=bridge)
        )
        track = extractor.handle(
            SONG_URL, SearchContext(type=QueryType.APPLE_MUSIC_SONG)
        ).tracks[0]

        one = track.request_metadata()
        two = track.request_metadata()

        assert bridge.resolve.call_count == 2
        assert one.bridge is first
        assert two.bridge is second
        assert one.source is two.source is track.raw
        assert track.bridge_payload is second
        assert track.title == "Never Gonna Give You Up"

    def test_without_bridge_returns_raw_payload(
        self, apple_music_extractor: AppleMusicExtractor
    ) -> None:
        track = apple_music_extractor.handle(
            SONG_URL, SearchContext(type=QueryType.APPLE_MUSIC_SONG)
        ).tracks[0]

        metadata = track.request_metadata()

        assert metadata.source is track.raw
        assert metadata.bridge is None
        assert track.bridge_payload is None


class TestRelatedTracks:
    def test_searches_by_author(
        self,
        apple_music_extractor: AppleMusicExtractor,
        apple_music_client: MockAppleMusicClient,
    ) -> None:
        result = apple_music_extractor.get_related_tracks(_apple_track(), [])
        assert [t.title for t in result.tracks] == ["Together Forever"]
        assert apple_music_client.search_calls == [("Rick Astley", 5)]

    def test_all_played_keeps_batch(
        self, apple_music_extractor: AppleMusicExtractor
    ) -> None:
        played = _apple_track(url="https://music.apple.com/us/song/x/1558533901")
        result = apple_music_extractor.get_related_tracks(_apple_track(), [played])
        assert [t.title for t in result.tracks] == ["Together Forever"]

    def test_other_query_type_returns_empty(
        self, apple_music_extractor: AppleMusicExtractor
    ) -> None:
        assert apple_music_extractor.get_related_tracks(make_track(), []).is_empty

    def test_malformed_payload_returns_empty(self) -> None:
        extractor = AppleMusicExtractor(client=AppleMusicClient())
        with _patch_urlopen([MALFORMED_SONG]):
            assert extractor.get_related_tracks(_apple_track(), []).is_empty
