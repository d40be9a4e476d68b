"""Models for parsing Apple Music catalog responses.

Field aliases follow the iTunes Search/Lookup API result format. Playlist
tracks scraped from music.apple.com are normalized into the same shape by
the client before validation.
"""

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = [
    "AppleMusicCollection",
    "AppleMusicSong",
]

_ARTWORK_SIZE_PATTERN = re.compile(r"/\d+x\d+(bb|cc)?\.(jpg|png|webp)$")


def _upscale_artwork_url(url: str | None, size: int = 600) -> str | None:
    """Request a larger rendition of an mzstatic artwork URL.

    The lookup API returns 100x100 artwork; the same path serves any size
    when the trailing ``{w}x{h}bb.jpg`` segment is rewritten.
    """
    if not url:
        return None
    return _ARTWORK_SIZE_PATTERN.sub(f"/{size}x{size}bb.jpg", url)


class AppleMusicModel(BaseModel):
    """Base model for Apple Music responses."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)


class AppleMusicSong(AppleMusicModel):
    """A song in the Apple Music catalog."""

    id: str = Field(alias="trackId")
    title: str = Field(alias="trackName")
    artist: str = Field(default="", alias="artistName")
    artist_url: str | None = Field(default=None, alias="artistViewUrl")
    album: str | None = Field(default=None, alias="collectionName")
    duration: int | str | None = Field(default=None, alias="trackTimeMillis")
    artwork_url: str | None = Field(default=None, alias="artworkUrl100")
    url: str = Field(alias="trackViewUrl")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: object) -> str:
        """Catalog ids are numeric; keep them as strings."""
        return str(v)

    @property
    def thumbnail(self) -> str | None:
        """Artwork URL at display size."""
        return _upscale_artwork_url(self.artwork_url)


class AppleMusicCollection(AppleMusicModel):
    """An album or playlist with its songs."""

    id: str = Field(alias="collectionId")
    title: str = Field(alias="collectionName")
    artist: str = Field(default="", alias="artistName")
    artist_url: str | None = Field(default=None, alias="artistViewUrl")
    artwork_url: str | None = Field(default=None, alias="artworkUrl100")
    url: str = Field(alias="collectionViewUrl")
    tracks: list[AppleMusicSong] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: object) -> str:
        """Catalog ids may be numeric; keep them as strings."""
        return str(v)

    @property
    def thumbnail(self) -> str | None:
        """Artwork URL at display size."""
        return _upscale_artwork_url(self.artwork_url)
