"""Models for parsing yt-dlp SoundCloud info dicts.

Internal models. Field names follow yt-dlp's info dict conventions.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = [
    "SoundCloudPlaylist",
    "SoundCloudTrack",
]


class SoundCloudModel(BaseModel):
    """Base model for yt-dlp SoundCloud responses."""

    model_config = ConfigDict(extra="ignore", frozen=True)


class SoundCloudTrack(SoundCloudModel):
    """A SoundCloud track."""

    id: str
    title: str
    webpage_url: str
    uploader: str = ""
    uploader_url: str | None = None
    duration: float | None = None  # seconds
    description: str | None = None
    thumbnail: str | None = None
    view_count: int | None = None
    formats: list[dict[str, Any]] = Field(default_factory=list, repr=False)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> str:
        """SoundCloud ids are numeric; keep them as strings."""
        return str(v)

    @property
    def permalink_url(self) -> str:
        """Canonical track URL (identity key)."""
        return self.webpage_url

    @property
    def duration_ms(self) -> int:
        """Duration in milliseconds (0 when unknown)."""
        return int((self.duration or 0) * 1000)

    @property
    def is_preview(self) -> bool:
        """Whether only a 30 second preview snippet is streamable.

        Go+ tracks played without a subscription expose preview formats only.
        A track with no formats at all is treated as not streamable.
        """
        if not self.formats:
            return True
        return all(_is_preview_format(f) for f in self.formats)


def _is_preview_format(fmt: dict[str, Any]) -> bool:
    markers = " ".join(
        str(fmt.get(key) or "") for key in ("format_id", "format_note", "url")
    ).lower()
    return "preview" in markers


class SoundCloudPlaylist(SoundCloudModel):
    """A SoundCloud set (playlist or album)."""

    id: str
    title: str
    webpage_url: str
    uploader: str | None = None
    uploader_url: str | None = None
    description: str | None = None
    thumbnail: str | None = None
    entries: list[SoundCloudTrack] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> str:
        """SoundCloud ids are numeric; keep them as strings."""
        return str(v)

    @property
    def artwork_url(self) -> str | None:
        """Playlist artwork, falling back to the first track's artwork."""
        if self.thumbnail:
            return self.thumbnail
        return self.entries[0].thumbnail if self.entries else None

    @property
    def author(self) -> str:
        """Set owner, falling back to the first track's uploader."""
        if self.uploader:
            return self.uploader
        return self.entries[0].uploader if self.entries else ""
