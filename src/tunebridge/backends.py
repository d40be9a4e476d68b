"""Streaming backends used by extractors with a native stream path."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Protocol

import yt_dlp

from tunebridge.exceptions import StreamError
from tunebridge.types import Streamable

logger = logging.getLogger(__name__)


class StreamBackendProtocol(Protocol):
    """Protocol for stream backends.

    This protocol enables dependency injection and testing.
    """

    name: str

    def stream(self, url: str) -> Streamable:
        """Resolve a page URL into a playable stream."""
        ...


class YTDLPStreamBackend:
    """yt-dlp based stream resolver.

    Resolves a direct audio URL for any site yt-dlp supports. Nothing is
    downloaded.
    """

    name = "yt-dlp"

    def __init__(
        self,
        options: dict[str, Any] | None = None,
        cookies_path: Path | None = None,
    ) -> None:
        """Initialize the backend.

        Args:
            options: Extra yt-dlp options merged over the defaults.
            cookies_path: Optional cookies.txt for age-restricted content.
        """
        self._options = options or {}
        self._cookies_path = cookies_path

    def _build_yt_dlp_options(self) -> dict[str, Any]:
        opts: dict[str, Any] = {
            "format": "bestaudio/best",
            "quiet": True,
            "no_warnings": True,
            "noplaylist": True,
            "skip_download": True,
            "color": "never",  # Disable ANSI codes in error messages
        }
        if self._cookies_path and self._cookies_path.exists():
            opts["cookiefile"] = str(self._cookies_path)
        opts.update(self._options)
        return opts

    def stream(self, url: str) -> str:
        """Resolve the direct audio URL for a page URL.

        Raises:
            StreamError: If yt-dlp fails or returns no playable format.
        """
        logger.debug("Resolving stream with yt-dlp: %s", url)
        try:
            with yt_dlp.YoutubeDL(self._build_yt_dlp_options()) as ydl:
                info = ydl.extract_info(url, download=False)
        except yt_dlp.utils.DownloadError as e:
            logger.warning("yt-dlp failed to resolve %s: %s", url, e)
            raise StreamError(f"Could not extract stream: {e}") from e

        stream_url = _pick_stream_url(info or {})
        if not stream_url:
            raise StreamError(f"No playable format found for {url}")
        return stream_url


def _pick_stream_url(info: dict[str, Any]) -> str | None:
    """Pick the stream URL from a processed yt-dlp info dict.

    Single formats expose ``url`` directly. Merged selections expose
    ``requested_formats``; the audio one is preferred.
    """
    if info.get("url"):
        return info["url"]

    requested = info.get("requested_formats") or []
    for fmt in requested:
        if fmt.get("vcodec") == "none" and fmt.get("url"):
            return fmt["url"]
    for fmt in requested:
        if fmt.get("url"):
            return fmt["url"]
    return None


# Backends selectable by name through configuration
STREAM_BACKENDS: dict[str, type[YTDLPStreamBackend]] = {
    YTDLPStreamBackend.name: YTDLPStreamBackend,
}


def load_stream_backend(
    name: str | None,
    options: dict[str, Any] | None = None,
    cookies_path: Path | None = None,
) -> StreamBackendProtocol | None:
    """Resolve a stream backend by name.

    Returns None instead of raising so that activation never fails; the
    first stream() call reports the missing backend.
    """
    if not name:
        return None
    backend_cls = STREAM_BACKENDS.get(name)
    if backend_cls is None:
        logger.warning(
            "Unknown stream backend '%s' (available: %s)",
            name,
            ", ".join(STREAM_BACKENDS),
        )
        return None
    return backend_cls(options=options, cookies_path=cookies_path)
