"""Custom exceptions for tunebridge.

All exceptions include an HTTP status_code attribute for easy
integration with web frameworks like FastAPI.

Extractors recover from query and provider errors locally and return an
empty result instead. Only stream resolution errors are meant to reach
the caller.
"""


class TuneBridgeError(Exception):
    """Base exception for tunebridge.

    Attributes:
        status_code: HTTP status code for API error responses.
    """

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class QueryParseError(TuneBridgeError):
    """Failed to parse a provider URL.

    Raised when a link is outside the provider's host allow-list or
    doesn't contain a well-formed content identifier.
    """

    status_code: int = 400  # Bad Request


class TrackNotFoundError(TuneBridgeError):
    """Track not found or inaccessible."""

    status_code: int = 404  # Not Found


class PlaylistNotFoundError(TuneBridgeError):
    """Playlist or album not found or inaccessible."""

    status_code: int = 404  # Not Found


class APIError(TuneBridgeError):
    """Provider API error.

    Raised when the underlying provider request fails.
    """

    status_code: int = 502  # Bad Gateway (upstream failure)


class BridgeError(TuneBridgeError):
    """No equivalent track could be found on the streamable provider."""

    status_code: int = 502  # Bad Gateway


class StreamError(TuneBridgeError):
    """The native stream path of a provider produced no stream."""

    status_code: int = 502  # Bad Gateway


class StreamBackendMissingError(TuneBridgeError):
    """No streaming backend was resolvable when the extractor was activated.

    Activation itself never fails; this is raised by the first stream()
    call and names the missing capability.
    """

    status_code: int = 501  # Not Implemented


class UnstreamableTrackError(TuneBridgeError):
    """Track has no stream override, no bridge provider and no native path."""

    status_code: int = 422  # Unprocessable Entity
