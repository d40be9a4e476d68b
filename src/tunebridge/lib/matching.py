"""Similarity scoring for bridge candidates.

A catalog track (title, joined author string, display duration) is compared
against tracks found on a streamable provider. Uploads on video platforms
often decorate titles ("Artist - Song (Official Video)"), so titles are
cleaned before comparison and the bracketed parts are compared separately.
"""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass

from rapidfuzz import fuzz

from tunebridge.models.track import Track
from tunebridge.utils.duration import parse_duration

logger = logging.getLogger(__name__)

# Similarity (0-100) a title or artist pair needs to count as a match
_MATCH_THRESHOLD = 70

# Share of title, artist and duration similarity in the candidate score
_WEIGHTS = (0.6, 0.3, 0.1)

# Points lost per second of duration difference
_DURATION_PENALTY_PER_SECOND = 5

# Trailing decorations added to music video uploads, e.g. "(Official Video)"
_VIDEO_DECORATION = re.compile(
    r"\s*[(\[]\s*(?:official\s+)?(?:music\s+|lyric\s+)?"
    r"(?:video|audio|visualizer|lyrics)\s*[)\]]$"
)
_BRACKETED = re.compile(r"\([^)]*\)|\[[^\]]*\]")
_WHITESPACE = re.compile(r"\s+")
_ARTIST_SEPARATORS = re.compile(
    r"\s*(?:,|;|&|/|\bfeat\.|\bft\.|\bfeat\b|\bft\b)\s*", re.IGNORECASE
)


@dataclass(frozen=True)
class TitleMatchResult:
    """Title comparison.

    ``similarity`` compares the cleaned titles, ``base_similarity`` the
    titles with bracketed parts removed. ``is_base_match`` is set when only
    the latter clears the threshold.
    """

    similarity: float
    base_similarity: float
    is_good_match: bool
    is_base_match: bool

    @property
    def best_similarity(self) -> float:
        return max(self.similarity, self.base_similarity)


@dataclass(frozen=True)
class ArtistMatchResult:
    """Best pairwise similarity between two artist sets."""

    best_score: float
    is_good_match: bool


@dataclass(frozen=True)
class CandidateScore:
    """Weighted similarity of a bridge candidate to the target track.

    Attributes:
        track: The scored candidate.
        score: Combined similarity (0-100).
        title_match: Title comparison.
        artist_match: Artist comparison.
        duration_delta: Duration difference in seconds, None when either
            duration is unknown.
    """

    track: Track
    score: float
    title_match: TitleMatchResult
    artist_match: ArtistMatchResult
    duration_delta: int | None

    def is_acceptable(self, min_score: float) -> bool:
        return self.score >= min_score


def normalize_title(title: str) -> str:
    """Lowercase a title and drop one trailing music-video decoration."""
    return _VIDEO_DECORATION.sub("", title.lower().strip()).strip()


def extract_base_title(title: str) -> str:
    """Remove every ``(...)`` and ``[...]`` group from a title.

    "neverender (feat. tame impala)" and "neverender (radio edit)" share
    the base title "neverender".
    """
    return _WHITESPACE.sub(" ", _BRACKETED.sub(" ", title)).strip()


def split_artists(author: str) -> set[str]:
    """Split a joined author string ('A, B feat. C') into artist names."""
    return {
        name for part in _ARTIST_SEPARATORS.split(author) if (name := part.strip())
    }


def strip_artist_prefix(title: str, artists: Iterable[str]) -> str:
    """Remove a leading 'Artist - ' when it names one of the given artists."""
    prefix, separator, rest = title.partition(" - ")
    if not separator:
        return title
    if match_artists(split_artists(prefix), artists).is_good_match:
        return rest
    return title


def match_title(target: str, candidate: str) -> TitleMatchResult:
    """Compare a catalog title with a candidate title.

    Bracketed suffixes often differ between sources (featured artists,
    edit names), so the titles also match when only their base titles do.
    """
    target, candidate = normalize_title(target), normalize_title(candidate)
    similarity = fuzz.ratio(target, candidate)

    target_base = extract_base_title(target)
    candidate_base = extract_base_title(candidate)
    if target_base and candidate_base:
        base_similarity = fuzz.ratio(target_base, candidate_base)
    else:
        base_similarity = similarity

    full_match = similarity >= _MATCH_THRESHOLD
    base_match = not full_match and base_similarity >= _MATCH_THRESHOLD
    return TitleMatchResult(
        similarity=similarity,
        base_similarity=base_similarity,
        is_good_match=full_match or base_match,
        is_base_match=base_match,
    )


def match_artists(
    target_artists: Iterable[str], candidate_artists: Iterable[str]
) -> ArtistMatchResult:
    """Best case-insensitive similarity over all artist pairs (0 if none)."""
    targets = {a.lower().strip() for a in target_artists if a and a.strip()}
    candidates = {a.lower().strip() for a in candidate_artists if a and a.strip()}

    best = max((fuzz.ratio(t, c) for t in targets for c in candidates), default=0.0)
    return ArtistMatchResult(best_score=best, is_good_match=best >= _MATCH_THRESHOLD)


def _duration_delta(target: Track, candidate: Track) -> int | None:
    target_seconds = parse_duration(target.duration)
    candidate_seconds = parse_duration(candidate.duration)
    if not target_seconds or not candidate_seconds:
        return None
    return abs(target_seconds - candidate_seconds)


def score_candidate(target: Track, candidate: Track) -> CandidateScore:
    """Score how likely a candidate is the same recording as the target.

    Unknown durations are not penalized.
    """
    target_artists = split_artists(target.author)
    candidate_artists = split_artists(candidate.author)

    candidate_title = strip_artist_prefix(candidate.title, target_artists)
    if candidate_title != candidate.title:
        # Prefixed uploads name the artist in the title, not the channel
        candidate_artists |= split_artists(candidate.title.partition(" - ")[0])

    title_match = match_title(target.title, candidate_title)
    artist_match = match_artists(target_artists, candidate_artists)

    delta = _duration_delta(target, candidate)
    duration_score = (
        100.0
        if delta is None
        else max(0.0, 100.0 - delta * _DURATION_PENALTY_PER_SECOND)
    )

    title_weight, artist_weight, duration_weight = _WEIGHTS
    score = (
        title_match.best_similarity * title_weight
        + artist_match.best_score * artist_weight
        + duration_score * duration_weight
    )
    logger.debug("Bridge candidate %s scored %.1f", candidate.url, score)

    return CandidateScore(
        track=candidate,
        score=score,
        title_match=title_match,
        artist_match=artist_match,
        duration_delta=delta,
    )


def rank_candidates(target: Track, candidates: Iterable[Track]) -> list[CandidateScore]:
    """Score candidates, best first.

    Candidates sharing the target's url are skipped. The sort is stable, so
    ties keep the provider's order.
    """
    scored = [
        score_candidate(target, candidate)
        for candidate in candidates
        if candidate.url != target.url
    ]
    return sorted(scored, key=lambda c: c.score, reverse=True)
