"""
Tests for the page fetcher against a local aiohttp server
"""

import asyncio
import socket
from unittest.mock import MagicMock, patch

import aiohttp
import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from linkshelf.errors import (
    AccessDeniedError,
    CrawlFailureError,
    DomainNotFoundError,
    FetchTimeoutError,
)
from linkshelf.page_fetcher import BROWSER_HEADERS, PageFetcher, is_dns_failure, map_fetch_error

from .fixtures import SAMPLE_ARTICLE_HTML


async def ok_handler(request):
    return web.Response(text=SAMPLE_ARTICLE_HTML, content_type="text/html")


async def forbidden_handler(request):
    return web.Response(status=403, text="Forbidden")


async def missing_handler(request):
    return web.Response(status=404, text="Not Found")


async def slow_handler(request):
    await asyncio.sleep(1)
    return web.Response(text="too late")


async def redirect_handler(request):
    raise web.HTTPFound("/ok")


async def loop_handler(request):
    raise web.HTTPFound("/loop")


async def headers_handler(request):
    return web.json_response({
        "user_agent": request.headers.get("User-Agent", ""),
        "accept_language": request.headers.get("Accept-Language", ""),
    })


async def korean_handler(request):
    body = "<html><body><p>한글 페이지</p></body></html>".encode("euc-kr")
    return web.Response(body=body, headers={"Content-Type": "text/html; charset=euc-kr"})


async def korean_meta_handler(request):
    body = (
        '<html><head><meta charset="euc-kr"></head>'
        "<body><p>한글 페이지</p></body></html>"
    ).encode("euc-kr")
    return web.Response(body=body, headers={"Content-Type": "text/html"})


@pytest.fixture
async def server():
    app = web.Application()
    app.router.add_get("/ok", ok_handler)
    app.router.add_get("/forbidden", forbidden_handler)
    app.router.add_get("/missing", missing_handler)
    app.router.add_get("/slow", slow_handler)
    app.router.add_get("/redirect", redirect_handler)
    app.router.add_get("/loop", loop_handler)
    app.router.add_get("/headers", headers_handler)
    app.router.add_get("/korean", korean_handler)
    app.router.add_get("/korean-meta", korean_meta_handler)

    test_server = TestServer(app)
    await test_server.start_server()
    yield test_server
    await test_server.close()


class TestPageFetcher:
    """Test PageFetcher.fetch"""

    async def test_fetch_success(self, server):
        """Test fetching a page returns its markup"""
        html = await PageFetcher().fetch(str(server.make_url("/ok")))

        assert "Understanding Python Generators" in html

    async def test_follows_redirects(self, server):
        """Test redirects are followed to the final page"""
        html = await PageFetcher().fetch(str(server.make_url("/redirect")))

        assert "Understanding Python Generators" in html

    async def test_sends_browser_headers(self, server):
        """Test requests carry the browser-like fingerprint"""
        body = await PageFetcher().fetch(str(server.make_url("/headers")))

        assert BROWSER_HEADERS["User-Agent"] in body
        assert "ko-KR" in body

    async def test_decodes_declared_charset(self, server):
        """Test the response charset is honored"""
        html = await PageFetcher().fetch(str(server.make_url("/korean")))

        assert "한글 페이지" in html

    async def test_decodes_meta_charset(self, server):
        """Test a <meta charset> is honored when the header has none"""
        html = await PageFetcher().fetch(str(server.make_url("/korean-meta")))

        assert "한글 페이지" in html
        assert "�" not in html

    async def test_forbidden_maps_to_access_denied(self, server):
        """Test 403 responses raise AccessDeniedError"""
        url = str(server.make_url("/forbidden"))

        with pytest.raises(AccessDeniedError) as exc_info:
            await PageFetcher().fetch(url)

        assert exc_info.value.url == url

    async def test_not_found_maps_to_crawl_failure(self, server):
        """Test other error statuses raise CrawlFailureError"""
        with pytest.raises(CrawlFailureError) as exc_info:
            await PageFetcher().fetch(str(server.make_url("/missing")))

        assert "404" in exc_info.value.detail

    async def test_timeout(self, server):
        """Test slow responses raise FetchTimeoutError"""
        fetcher = PageFetcher(timeout=0.2)

        with pytest.raises(FetchTimeoutError):
            await fetcher.fetch(str(server.make_url("/slow")))

    async def test_redirect_loop(self, server):
        """Test exceeding the redirect limit is a crawl failure"""
        fetcher = PageFetcher(max_redirects=3)

        with pytest.raises(CrawlFailureError):
            await fetcher.fetch(str(server.make_url("/loop")))

    async def test_dns_failure(self):
        """Test host resolution failures raise DomainNotFoundError"""
        dns_error = aiohttp.ClientConnectorError(
            MagicMock(host="example.invalid", port=443, ssl=True),
            socket.gaierror(-2, "Name or service not known"),
        )

        with patch("aiohttp.ClientSession.get", side_effect=dns_error):
            with pytest.raises(DomainNotFoundError) as exc_info:
                await PageFetcher().fetch("https://example.invalid/")

        assert exc_info.value.url == "https://example.invalid/"


class TestFetchErrorMapping:
    """Test map_fetch_error and is_dns_failure"""

    def test_gaierror_is_dns_failure(self):
        """Test a connector error caused by getaddrinfo counts as DNS failure"""
        error = MagicMock(spec=aiohttp.ClientConnectorError)
        error.os_error = socket.gaierror(-2, "Name or service not known")

        assert is_dns_failure(error) is True

    def test_refused_connection_is_not_dns_failure(self):
        """Test other connector errors are not DNS failures"""
        error = MagicMock(spec=aiohttp.ClientConnectorError)
        error.os_error = ConnectionRefusedError(111, "Connection refused")

        assert is_dns_failure(error) is False
        assert isinstance(map_fetch_error(error, "https://example.com"), CrawlFailureError)

    def test_timeout(self):
        """Test asyncio timeouts map to FetchTimeoutError"""
        error = map_fetch_error(asyncio.TimeoutError(), "https://example.com")

        assert isinstance(error, FetchTimeoutError)
        assert error.url == "https://example.com"

    def test_status_403(self):
        """Test a 403 status maps to AccessDeniedError"""
        exc = aiohttp.ClientResponseError(MagicMock(), (), status=403, message="Forbidden")

        assert isinstance(map_fetch_error(exc, "https://example.com"), AccessDeniedError)

    def test_status_500(self):
        """Test other statuses carry the detail in a CrawlFailureError"""
        exc = aiohttp.ClientResponseError(MagicMock(), (), status=500, message="Server Error")
        error = map_fetch_error(exc, "https://example.com")

        assert isinstance(error, CrawlFailureError)
        assert "500" in error.message
