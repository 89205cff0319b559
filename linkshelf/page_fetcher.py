"""
Page fetching with a browser-like fingerprint and a fixed error taxonomy
"""
import asyncio
import socket
from typing import Dict, Optional

import aiohttp
from bs4.dammit import EncodingDetector

from .errors import (
    AccessDeniedError,
    CrawlFailureError,
    DomainNotFoundError,
    FetchError,
    FetchTimeoutError,
)
from .logging_config import get_logger

logger = get_logger("page_fetcher")

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
    "Accept-Language": "ko-KR,ko;q=0.9,en-US;q=0.8,en;q=0.7",
    "Cache-Control": "no-cache",
    "Upgrade-Insecure-Requests": "1",
}


def is_dns_failure(exc: BaseException) -> bool:
    """Check whether a connection error was caused by host resolution."""
    if isinstance(exc, aiohttp.ClientConnectorDNSError):
        return True
    return isinstance(exc, aiohttp.ClientConnectorError) and isinstance(
        getattr(exc, "os_error", None), socket.gaierror
    )


def map_fetch_error(exc: BaseException, url: str) -> FetchError:
    """Translate a transport or status failure into a FetchError subclass."""
    if is_dns_failure(exc):
        return DomainNotFoundError(url=url)
    if isinstance(exc, asyncio.TimeoutError):
        return FetchTimeoutError(url=url)
    if isinstance(exc, aiohttp.ClientResponseError) and exc.status == 403:
        return AccessDeniedError(url=url)
    return CrawlFailureError(str(exc) or type(exc).__name__, url=url)


class PageFetcher:
    """Fetches raw page markup with a single GET request (no retries)"""

    def __init__(
        self,
        timeout: float = 10.0,
        max_redirects: int = 5,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Args:
            timeout: total request timeout in seconds
            max_redirects: redirects followed before giving up
            headers: request headers, defaults to BROWSER_HEADERS
        """
        self.timeout = timeout
        self.max_redirects = max_redirects
        self.headers = dict(headers or BROWSER_HEADERS)

    async def fetch(self, url: str) -> str:
        """
        Fetch the page body.

        Raises:
            DomainNotFoundError, FetchTimeoutError, AccessDeniedError, CrawlFailureError
        """
        client_timeout = aiohttp.ClientTimeout(total=self.timeout)

        try:
            async with aiohttp.ClientSession(headers=self.headers, timeout=client_timeout) as session:
                async with session.get(
                    url,
                    allow_redirects=True,
                    max_redirects=self.max_redirects,
                ) as response:
                    response.raise_for_status()
                    body = await response.read()
                    logger.debug("Fetched %s (%d bytes, status %d)", url, len(body), response.status)
                    return self._decode(body, response.charset)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            error = map_fetch_error(e, url)
            logger.error("Failed to fetch %s: %s (%s)", url, error.message, e)
            raise error from e

    @staticmethod
    def _decode(body: bytes, charset: Optional[str]) -> str:
        """Decode with the header charset, then the <meta> charset, falling back to UTF-8."""
        charset = charset or EncodingDetector.find_declared_encoding(body, is_html=True)
        try:
            return body.decode(charset or "utf-8", errors="replace")
        except LookupError:
            return body.decode("utf-8", errors="replace")
