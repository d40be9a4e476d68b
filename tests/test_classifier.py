"""Tests for query classification."""

import pytest
from tunebridge.classifier import classify, detect_url_type
from tunebridge.models.enums import QueryType


class TestDetectUrlType:
    @pytest.mark.parametrize(
        "query,expected",
        [
            ("https://youtu.be/dQw4w9WgXcQ", QueryType.YOUTUBE_VIDEO),
            ("https://www.youtube.com/watch?v=dQw4w9WgXcQ", QueryType.YOUTUBE_VIDEO),
            (
                "https://www.youtube.com/watch?v=dQw4w9WgXcQ&list=PLabc123",
                QueryType.YOUTUBE_VIDEO,
            ),
            ("https://www.youtube.com/playlist?list=PLabc123", QueryType.YOUTUBE_PLAYLIST),
            ("https://soundcloud.com/artist/track", QueryType.SOUNDCLOUD_TRACK),
            ("https://soundcloud.com/artist/sets/set", QueryType.SOUNDCLOUD_PLAYLIST),
            ("https://music.apple.com/us/song/x/123", QueryType.APPLE_MUSIC_SONG),
            ("https://music.apple.com/us/album/x/456", QueryType.APPLE_MUSIC_ALBUM),
            ("https://music.apple.com/us/album/x/456?i=123", QueryType.APPLE_MUSIC_SONG),
            (
                "https://music.apple.com/us/playlist/x/pl.abc123",
                QueryType.APPLE_MUSIC_PLAYLIST,
            ),
        ],
    )
    def test_detects_provider_links(self, query: str, expected: QueryType) -> None:
        assert detect_url_type(query) == expected

    @pytest.mark.parametrize(
        "query",
        [
            "never gonna give you up",
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ&list=RDdQw4w9WgXcQ",
            "https://example.com/watch?v=dQw4w9WgXcQ",
            "https://www.youtube.com/watch?v=short",
            "",
        ],
    )
    def test_unrecognized_queries_return_none(self, query: str) -> None:
        assert detect_url_type(query) is None


class TestClassify:
    def test_concrete_type_passes_through(self) -> None:
        # Even a link for another provider keeps its declared type
        result = classify("https://youtu.be/dQw4w9WgXcQ", QueryType.SOUNDCLOUD_SEARCH)
        assert result == QueryType.SOUNDCLOUD_SEARCH

    @pytest.mark.parametrize("declared", [QueryType.AUTO, QueryType.AUTO_SEARCH])
    def test_auto_link_is_upgraded(self, declared: QueryType) -> None:
        assert (
            classify("https://youtu.be/dQw4w9WgXcQ", declared) == QueryType.YOUTUBE_VIDEO
        )

    @pytest.mark.parametrize("declared", [QueryType.AUTO, QueryType.AUTO_SEARCH])
    def test_auto_search_text_is_kept(self, declared: QueryType) -> None:
        assert classify("rick astley", declared) == declared

    def test_accepts_string_type_names(self) -> None:
        assert classify("https://youtu.be/dQw4w9WgXcQ", "auto") == QueryType.YOUTUBE_VIDEO
        assert classify("anything", "appleMusicSearch") == QueryType.APPLE_MUSIC_SEARCH

    def test_radio_mix_is_never_a_single_video(self) -> None:
        url = "https://www.youtube.com/watch?v=dQw4w9WgXcQ&list=RDdQw4w9WgXcQ"
        assert classify(url, QueryType.AUTO) == QueryType.AUTO

    def test_malformed_url_does_not_raise(self) -> None:
        assert classify("https://youtu.be/", QueryType.AUTO) == QueryType.AUTO

    def test_unknown_type_raises(self) -> None:
        with pytest.raises(ValueError):
            classify("query", "spotifyTrack")
