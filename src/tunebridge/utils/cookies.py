"""Cookie utilities for authenticated YouTube requests.

The same Netscape cookies.txt is handed to yt-dlp as ``cookiefile`` and
converted into ytmusicapi request headers here.
"""

import hashlib
import logging
import time
from http.cookiejar import LoadError, MozillaCookieJar
from pathlib import Path

logger = logging.getLogger(__name__)

# Origin for SAPISIDHASH calculation
YTM_ORIGIN = "https://music.youtube.com"

# Newer cookie name first
_SAPISID_NAMES = ("__Secure-3PAPISID", "SAPISID")


def read_cookies(cookies_path: Path) -> dict[str, str]:
    """Read a Netscape cookies.txt into a name -> value mapping.

    Returns an empty dict when the file is missing or unreadable.
    """
    jar = MozillaCookieJar(str(cookies_path))
    try:
        jar.load(ignore_discard=True, ignore_expires=True)
    except (OSError, LoadError) as e:
        logger.warning("Failed to read cookies file %s: %s", cookies_path, e)
        return {}
    return {cookie.name: cookie.value or "" for cookie in jar}


def sapisid_hash(sapisid: str, origin: str = YTM_ORIGIN) -> str:
    """Build the SAPISIDHASH authorization value for a SAPISID cookie."""
    timestamp = str(int(time.time()))
    digest = hashlib.sha1(f"{timestamp} {sapisid} {origin}".encode()).hexdigest()
    return f"SAPISIDHASH {timestamp}_{digest}"


def cookies_to_ytmusic_auth(cookies_path: Path) -> dict[str, str] | None:
    """Convert cookies.txt to ytmusicapi authentication headers.

    Args:
        cookies_path: Path to Netscape format cookies.txt file.

    Returns:
        Headers for the YTMusic() constructor, or None if the file has no
        SAPISID cookie.
    """
    if not cookies_path.exists():
        logger.debug("Cookies file not found: %s", cookies_path)
        return None

    cookies = read_cookies(cookies_path)
    sapisid = next((cookies[n] for n in _SAPISID_NAMES if cookies.get(n)), None)
    if not sapisid:
        logger.warning("No SAPISID cookie found - authentication not possible")
        return None

    return {
        "Accept": "*/*",
        "Authorization": sapisid_hash(sapisid),
        "Content-Type": "application/json",
        "X-Goog-AuthUser": "0",
        "x-origin": YTM_ORIGIN,
        "Cookie": "; ".join(f"{k}={v}" for k, v in cookies.items()),
    }
