"""Environment settings using pydantic-settings."""

from pathlib import Path
from typing import Annotated, Literal

from pydantic import BeforeValidator, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from tunebridge.config import (
    DEFAULT_RELATED_LIMIT,
    AppleMusicConfig,
    SoundCloudConfig,
    YouTubeConfig,
)

CountryCode = Annotated[
    str,
    BeforeValidator(lambda v: v.lower() if isinstance(v, str) else v),
    Field(min_length=2, max_length=2),
]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TUNEBRIDGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Shared request settings
    search_limit: int = Field(default=10, ge=1, description="Search result limit")
    related_limit: int = Field(
        default=DEFAULT_RELATED_LIMIT, ge=1, description="Related tracks per batch"
    )

    # YouTube settings
    cookies: Path | None = Field(
        default=None, description="cookies.txt for YouTube authentication"
    )
    youtube_search_filter: Literal["videos", "songs"] = Field(
        default="videos", description="ytmusicapi search filter"
    )
    stream_backend: str | None = Field(
        default="yt-dlp", description="Stream backend for YouTube"
    )

    # SoundCloud settings
    soundcloud_oauth_token: str | None = Field(
        default=None, description="SoundCloud OAuth token"
    )
    proxy: str | None = Field(default=None, description="Proxy for SoundCloud")

    # Apple Music settings
    country: CountryCode = Field(default="us", description="Apple Music storefront")
    timeout: float = Field(default=10.0, gt=0, description="Request timeout (s)")

    # Bridge settings
    bridge_min_score: float | None = Field(
        default=None,
        ge=0,
        le=100,
        description="Similarity threshold for bridge matches (top hit if unset)",
    )

    def youtube_config(self) -> YouTubeConfig:
        return YouTubeConfig(
            search_limit=self.search_limit,
            search_filter=self.youtube_search_filter,
            related_limit=self.related_limit,
            cookies_path=self.cookies,
            stream_backend=self.stream_backend,
        )

    def soundcloud_config(self) -> SoundCloudConfig:
        return SoundCloudConfig(
            search_limit=self.search_limit,
            related_limit=self.related_limit,
            oauth_token=self.soundcloud_oauth_token,
            proxy=self.proxy,
        )

    def apple_music_config(self) -> AppleMusicConfig:
        return AppleMusicConfig(
            country=self.country,
            search_limit=self.search_limit,
            related_limit=self.related_limit,
            timeout=self.timeout,
        )
