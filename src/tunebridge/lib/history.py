"""Related-track deduplication against play history."""

from collections.abc import Iterable, Sequence
from typing import Protocol, TypeVar


class HasUrl(Protocol):
    """Anything carrying a track identity key."""

    @property
    def url(self) -> str: ...


T = TypeVar("T", bound=HasUrl)


def filter_history(candidates: Iterable[T], history: Iterable[HasUrl]) -> list[T]:
    """Drop candidates whose identity URL already appears in history.

    Input order is preserved.

    Args:
        candidates: Related-track candidates.
        history: Previously played tracks.

    Returns:
        Candidates not present in history.
    """
    seen = {track.url for track in history}
    return [track for track in candidates if track.url not in seen]


def select_related(candidates: Sequence[T], history: Iterable[HasUrl]) -> list[T]:
    """Filter a related batch, keeping the full batch if nothing is left.

    Falling back to the unfiltered batch keeps recommendation chains from
    dead-ending when every candidate has already been played.
    """
    unique = filter_history(candidates, history)
    return unique if unique else list(candidates)
