"""
URL validation and normalization for submitted links
"""
import re
from typing import Optional, Tuple
from urllib.parse import parse_qs, unquote, urlencode, urlsplit, urlunsplit

from .errors import InvalidUrlFormatError, UrlTooLongError
from .logging_config import get_logger
from .models import CanonicalUrl

logger = get_logger("url_validator")

URL_PATTERN = re.compile(
    r"^(https?://|www\.)?[a-z0-9][-a-z0-9@:%._+~#=]{0,256}\.[a-z]{2,63}\b([-a-z0-9@:%_+.~#?&/=]*)",
    re.IGNORECASE,
)

YOUTUBE_HOSTS = {
    "youtube.com",
    "www.youtube.com",
    "m.youtube.com",
    "music.youtube.com",
    "youtu.be",
    "www.youtu.be",
}

VIDEO_ID_PARAM = "v"


def strip_www(host: str) -> str:
    return host[4:] if host.startswith("www.") else host


def normalize_video_url(host: str, path: str, query: str) -> Optional[Tuple[str, str, str]]:
    """
    Reduce a YouTube video URL to its video id.

    Examples:
        youtu.be/ID?t=10          -> www.youtube.com/watch?v=ID
        youtube.com/shorts/ID     -> www.youtube.com/watch?v=ID
        youtube.com/watch?v=ID&list=X -> www.youtube.com/watch?v=ID

    Returns (host, path, query), or None when the URL is not a direct video link.
    """
    if host not in YOUTUBE_HOSTS:
        return None

    if "youtu.be" in host:
        video_id = unquote(path.lstrip("/").split("/")[0])
    elif path.startswith("/shorts/"):
        video_id = unquote(path.split("/shorts/")[1].split("/")[0])
    else:
        values = parse_qs(query).get(VIDEO_ID_PARAM)
        video_id = values[0] if values else ""

    if not video_id:
        return None

    return "www.youtube.com", "/watch", urlencode({VIDEO_ID_PARAM: video_id})


class UrlValidator:
    """Turns raw user input into a CanonicalUrl"""

    def __init__(self, max_length: int = 2048):
        self.max_length = max_length

    def validate(self, raw: str) -> CanonicalUrl:
        """
        Validate and normalize a submitted URL.

        Raises:
            UrlTooLongError: input is longer than max_length
            InvalidUrlFormatError: input is not URL-shaped or fails strict parsing
        """
        candidate = (raw or "").strip()
        if len(candidate) > self.max_length:
            raise UrlTooLongError(self.max_length)

        match = URL_PATTERN.match(candidate)
        if not match:
            logger.warning("Invalid URL format: %s", candidate)
            raise InvalidUrlFormatError()

        candidate = match.group(0)
        if not candidate.lower().startswith(("http://", "https://")):
            candidate = f"https://{candidate}"

        try:
            parts = urlsplit(candidate)
            host = parts.hostname
            port = parts.port
        except ValueError as e:
            logger.warning("URL failed strict parsing: %s (%s)", candidate, e)
            raise InvalidUrlFormatError() from e

        if parts.scheme.lower() not in ("http", "https") or not host:
            logger.warning("URL failed strict parsing: %s", candidate)
            raise InvalidUrlFormatError()

        return self._canonicalize(parts.scheme.lower(), host.lower(), port, parts.path,
                                  parts.query, parts.fragment)

    def _canonicalize(self, scheme: str, host: str, port: Optional[int], path: str,
                      query: str, fragment: str) -> CanonicalUrl:
        video = normalize_video_url(host, path, query)
        if video:
            host, path, query = video
            scheme, port, fragment = "https", None, ""

        netloc = f"{host}:{port}" if port is not None else host
        url = urlunsplit((scheme, netloc, path, query, fragment))

        key = f"{strip_www(netloc)}{path or '/'}"
        if query:
            key = f"{key}?{query}"

        return CanonicalUrl(url=url, key=key)


def normalize_url(raw: str) -> CanonicalUrl:
    """Convenience wrapper around UrlValidator().validate()."""
    return UrlValidator().validate(raw)
