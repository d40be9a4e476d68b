"""Stream negotiation.

Decides which of the caller override, the bridge provider or the
extractor's native stream path supplies a track's stream.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from tunebridge.exceptions import BridgeError, UnstreamableTrackError
from tunebridge.models.track import Track
from tunebridge.types import Streamable

if TYPE_CHECKING:
    from tunebridge.bridge import BridgeProvider

logger = logging.getLogger(__name__)

StreamOverride = Callable[[str], Streamable]
NativeStream = Callable[[Track], Streamable]


def negotiate_stream(
    track: Track,
    *,
    override: StreamOverride | None = None,
    bridge: BridgeProvider | None = None,
    native: NativeStream | None = None,
) -> Streamable:
    """Resolve a track's stream, first applicable source wins.

    1. ``override`` receives the track URL; the bridge is never consulted.
    2. ``bridge`` resolves an equivalent track on a streamable provider.
       The match is attached to ``track.bridge_payload`` before streaming.
    3. ``native`` streams the track directly.

    Nothing is cached: every call performs a fresh resolution.

    Args:
        track: Track to stream. Its ``extractor`` is passed to the bridge.
        override: Caller-supplied stream function bound to the extractor.
        bridge: Bridge provider for extractors without a native stream.
        native: The extractor's own stream path.

    Returns:
        A direct media URL or a readable binary stream.

    Raises:
        BridgeError: If the bridge provider found no match.
        UnstreamableTrackError: If no stream source is available.
    """
    if override is not None:
        logger.debug("Streaming %s through override", track.url)
        return override(track.url)

    if bridge is not None:
        match = bridge.resolve(track.extractor, track)
        if match is None:
            raise BridgeError("Failed to bridge this track")
        logger.debug("Bridged %s to %s", track.url, match.track.url)
        track.set_bridge_payload(match)
        return bridge.stream(match)

    if native is not None:
        return native(track)

    name = type(track.extractor).__name__ if track.extractor else "unknown"
    raise UnstreamableTrackError(f"Could not find bridge provider for '{name}'")
