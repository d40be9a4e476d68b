"""Duration parsing and formatting utilities."""

import logging
import re

logger = logging.getLogger(__name__)

_ISO8601_DURATION_PATTERN = re.compile(
    r"^P(?:(?P<days>\d+)D)?"
    r"(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+(?:\.\d+)?)S)?)?$"
)


def format_duration(milliseconds: int | float) -> str:
    """Format a duration as 'm:ss' or 'h:mm:ss'.

    Args:
        milliseconds: Duration in milliseconds. Negative values count as 0.

    Returns:
        Human-readable duration, e.g. '3:33' or '1:02:03'.
    """
    total_seconds = max(int(milliseconds // 1000), 0)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def to_display_duration(value: int | float | str | None, *, unit: str = "ms") -> str:
    """Normalize a provider duration to a display string.

    Numbers are formatted; strings are assumed to already be display
    strings and pass through unchanged.

    Args:
        value: Duration as a number or a display string.
        unit: Unit of numeric values, 'ms' or 's'.

    Returns:
        Display duration ('0:00' when unknown).
    """
    if value is None:
        return "0:00"
    if isinstance(value, str):
        return value
    if unit == "s":
        value = value * 1000
    return format_duration(value)


def parse_duration(length: str) -> int:
    """Parse duration string like '3:00' or '1:23:45' to seconds.

    Returns 0 for unparseable formats (logs warning).
    """
    if not length:
        return 0

    try:
        parts = length.split(":")
        if len(parts) == 2:
            minutes, seconds = int(parts[0]), int(parts[1])
            return minutes * 60 + seconds
        elif len(parts) == 3:
            hours, minutes, seconds = int(parts[0]), int(parts[1]), int(parts[2])
            return hours * 3600 + minutes * 60 + seconds
        logger.warning("Unexpected duration format: %s", length)
        return 0
    except ValueError:
        logger.warning("Could not parse duration: %s", length)
        return 0


def parse_iso8601_duration(value: str | None) -> int | None:
    """Parse an ISO 8601 duration such as 'PT3M20S' to milliseconds.

    Returns None when the value is missing or not a duration.
    """
    if not value:
        return None
    match = _ISO8601_DURATION_PATTERN.match(value.strip())
    if not match or not any(match.groupdict().values()):
        return None
    parts = {k: float(v) for k, v in match.groupdict().items() if v}
    seconds = (
        parts.get("days", 0) * 86400
        + parts.get("hours", 0) * 3600
        + parts.get("minutes", 0) * 60
        + parts.get("seconds", 0)
    )
    return int(seconds * 1000)
