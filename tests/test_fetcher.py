"""Tests for the HTTP fetcher and its flat-file response cache."""

import asyncio
import contextlib
import os
import socket

import pytest
from aiohttp import web

from boardscout.errors import FetchError
from boardscout.fetchers.http import FetchResult, HttpFetcher, ResponseCache

from conftest import png_bytes

URL = "https://www.getonbrd.cl/companies/acme"


def test_fetch_result_ok():
    assert FetchResult(url=URL, status=200).ok
    assert not FetchResult(url=URL, status=404, error="HTTP 404").ok
    assert not FetchResult(url=URL, status=0, error="Timeout").ok
    assert FetchResult(url=URL, content_type="text/html; charset=utf-8").is_html


def test_cache_round_trip(tmp_path):
    cache = ResponseCache(str(tmp_path / "cache"))
    cache.set(FetchResult(url=URL, status=200, text="<html>acme</html>", content_type="text/html"))

    cached = cache.get(URL)
    assert cached.from_cache
    assert cached.text == "<html>acme</html>"
    assert cache.get(URL + "/other") is None


def test_cache_skips_failures(tmp_path):
    cache = ResponseCache(str(tmp_path))
    cache.set(FetchResult(url=URL, status=500, error="HTTP 500"))
    assert cache.get(URL) is None


def test_cache_expires(tmp_path):
    cache = ResponseCache(str(tmp_path), ttl_hours=1)
    cache.set(FetchResult(url=URL, status=200, text="x"))
    path = cache._cache_path(URL)
    old = os.path.getmtime(path) - 7200
    os.utime(path, (old, old))

    assert cache.get(URL) is None
    assert not os.path.exists(path)


def test_fetcher_serves_memo_before_network():
    fetcher = HttpFetcher()
    memoized = FetchResult(url=URL, status=200, text="memo")
    fetcher._memo[URL] = memoized

    assert asyncio.run(fetcher.fetch(URL)) is memoized
    assert fetcher._session is None


@contextlib.asynccontextmanager
async def _board_server(hits):
    """Local server with a job page, a missing page and a logo."""

    async def job_page(request):
        hits.append(request.path)
        return web.Response(text="<html><h1>Backend Developer</h1></html>", content_type="text/html")

    async def missing(request):
        hits.append(request.path)
        raise web.HTTPNotFound()

    async def logo(request):
        return web.Response(body=png_bytes(), content_type="image/png")

    app = web.Application()
    app.router.add_get("/jobs/acme", job_page)
    app.router.add_get("/jobs/gone", missing)
    app.router.add_get("/logos/acme.png", logo)

    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", 0)
    await site.start()
    try:
        host, port = runner.addresses[0][:2]
        yield f"http://{host}:{port}"
    finally:
        await runner.cleanup()


def _unused_port():
    with socket.socket() as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def test_fetch_memoizes_ok_responses():
    async def run():
        hits = []
        async with _board_server(hits) as base:
            fetcher = HttpFetcher(timeout_s=5)
            try:
                first = await fetcher.fetch(f"{base}/jobs/acme")
                second = await fetcher.fetch(f"{base}/jobs/acme")
            finally:
                await fetcher.close()
        return first, second, hits

    first, second, hits = asyncio.run(run())
    assert first.ok
    assert first.is_html
    assert "Backend Developer" in first.text
    assert second is first
    assert hits == ["/jobs/acme"]


def test_fetch_http_error_not_memoized():
    async def run():
        hits = []
        async with _board_server(hits) as base:
            fetcher = HttpFetcher(timeout_s=5)
            try:
                results = [await fetcher.fetch(f"{base}/jobs/gone") for _ in range(2)]
            finally:
                await fetcher.close()
        return results, hits

    results, hits = asyncio.run(run())
    assert [(r.ok, r.status, r.error) for r in results] == [(False, 404, "HTTP 404")] * 2
    assert hits == ["/jobs/gone", "/jobs/gone"]


def test_fetch_bytes_returns_body():
    async def run():
        async with _board_server([]) as base:
            fetcher = HttpFetcher(timeout_s=5)
            try:
                return await fetcher.fetch_bytes(f"{base}/logos/acme.png")
            finally:
                await fetcher.close()

    result = asyncio.run(run())
    assert result.ok
    assert result.body == png_bytes()
    assert result.text == ""
    assert result.content_type.startswith("image/png")


def test_fetch_html_or_raise_on_missing_page():
    async def run():
        async with _board_server([]) as base:
            fetcher = HttpFetcher(timeout_s=5)
            try:
                await fetcher.fetch_html_or_raise(f"{base}/jobs/gone")
            finally:
                await fetcher.close()

    with pytest.raises(FetchError) as excinfo:
        asyncio.run(run())
    assert "HTTP 404" in str(excinfo.value)


def test_fetch_refused_connection():
    url = f"http://127.0.0.1:{_unused_port()}/jobs/acme"

    async def run():
        fetcher = HttpFetcher(timeout_s=5)
        try:
            return await fetcher.fetch(url), dict(fetcher._memo)
        finally:
            await fetcher.close()

    result, memo = asyncio.run(run())
    assert not result.ok
    assert result.status == 0
    assert result.error
    assert memo == {}
