"""
HTTP fetcher with per-URL memoization and an optional flat-file cache.

Each request is a single attempt: failures come back as a non-ok
FetchResult and the caller decides whether they matter.
"""

from __future__ import annotations

import asyncio
import hashlib
import json
import logging
import os
import time
from dataclasses import dataclass
from typing import Dict, Optional

import aiohttp

from boardscout.config import DEFAULT_USER_AGENT
from boardscout.errors import FetchError

logger = logging.getLogger(__name__)


@dataclass
class FetchResult:
    """Result of a fetch operation."""
    url: str
    status: int = 0
    text: str = ""
    body: bytes = b""
    content_type: str = ""
    error: str = ""
    from_cache: bool = False
    elapsed_ms: float = 0

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300 and not self.error

    @property
    def is_html(self) -> bool:
        return "text/html" in self.content_type.lower()


class ResponseCache:
    """
    Simple file-based cache for text responses.
    """

    def __init__(self, cache_dir: str, ttl_hours: int = 24):
        self.cache_dir = cache_dir
        self.ttl_seconds = ttl_hours * 3600
        os.makedirs(cache_dir, exist_ok=True)

    def _cache_key(self, url: str) -> str:
        return hashlib.sha256(url.encode()).hexdigest()[:32]

    def _cache_path(self, url: str) -> str:
        return os.path.join(self.cache_dir, f"{self._cache_key(url)}.json")

    def get(self, url: str) -> Optional[FetchResult]:
        """Get cached response if still fresh."""
        path = self._cache_path(url)
        if not os.path.exists(path):
            return None

        try:
            if time.time() - os.path.getmtime(path) > self.ttl_seconds:
                os.remove(path)
                return None

            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable cache entry %s: %s", path, e)
            return None

        return FetchResult(
            url=url,
            status=data.get("status", 200),
            text=data.get("text", ""),
            content_type=data.get("content_type", ""),
            from_cache=True,
        )

    def set(self, result: FetchResult) -> None:
        """Cache a successful text response."""
        if not result.ok or not result.text:
            return

        path = self._cache_path(result.url)
        data = {
            "url": result.url,
            "status": result.status,
            "text": result.text,
            "content_type": result.content_type,
        }
        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
        except OSError as e:
            logger.warning("Could not write cache entry %s: %s", path, e)


class HttpFetcher:
    """
    Async HTTP fetcher over a single aiohttp session.

    Successful responses are memoized per URL for the lifetime of the
    fetcher, so a page referenced by several jobs is requested once.
    """

    ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8"

    def __init__(
        self,
        timeout_s: int = 20,
        user_agent: str = DEFAULT_USER_AGENT,
        cache_dir: Optional[str] = None,
        cache_ttl_hours: int = 24,
    ):
        self.timeout_s = timeout_s
        self.user_agent = user_agent
        self.cache = ResponseCache(cache_dir, cache_ttl_hours) if cache_dir else None
        self._memo: Dict[str, FetchResult] = {}
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "HttpFetcher":
        await self.start()
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    async def start(self) -> None:
        """Initialize the HTTP session."""
        if self._session is None or self._session.closed:
            headers = {
                "User-Agent": self.user_agent,
                "Accept": self.ACCEPT,
            }
            self._session = aiohttp.ClientSession(
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout_s),
            )

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def _get(self, url: str, binary: bool) -> FetchResult:
        if self._session is None:
            await self.start()

        start_time = time.time()
        try:
            async with self._session.get(url, allow_redirects=True) as resp:
                content_type = resp.headers.get("Content-Type", "")
                if resp.status >= 400:
                    return FetchResult(
                        url=url,
                        status=resp.status,
                        content_type=content_type,
                        error=f"HTTP {resp.status}",
                        elapsed_ms=(time.time() - start_time) * 1000,
                    )

                if binary:
                    body = await resp.read()
                    text = ""
                else:
                    body = b""
                    text = await resp.text(errors="replace")

                return FetchResult(
                    url=url,
                    status=resp.status,
                    text=text,
                    body=body,
                    content_type=content_type,
                    elapsed_ms=(time.time() - start_time) * 1000,
                )

        except asyncio.TimeoutError:
            error = f"Timeout after {self.timeout_s}s"
        except aiohttp.ClientError as e:
            error = str(e) or type(e).__name__

        return FetchResult(url=url, error=error, elapsed_ms=(time.time() - start_time) * 1000)

    async def fetch(self, url: str, use_cache: bool = True) -> FetchResult:
        """
        Fetch a page as text. Never raises for network or HTTP errors.
        """
        if use_cache:
            if url in self._memo:
                return self._memo[url]
            if self.cache:
                cached = self.cache.get(url)
                if cached:
                    self._memo[url] = cached
                    return cached

        result = await self._get(url, binary=False)
        logger.debug("GET %s -> %s (%.0f ms)", url, result.status or result.error, result.elapsed_ms)

        if result.ok:
            self._memo[url] = result
            if use_cache and self.cache:
                self.cache.set(result)
        return result

    async def fetch_bytes(self, url: str) -> FetchResult:
        """Fetch a binary resource (e.g. an image). Memoized, never cached on disk."""
        key = f"bytes:{url}"
        if key in self._memo:
            return self._memo[key]

        result = await self._get(url, binary=True)
        logger.debug("GET %s -> %s (%.0f ms)", url, result.status or result.error, result.elapsed_ms)
        if result.ok:
            self._memo[key] = result
        return result

    async def fetch_html_or_raise(self, url: str) -> str:
        """Fetch a page whose absence makes the run pointless."""
        result = await self.fetch(url, use_cache=False)
        if not result.ok:
            raise FetchError(url, result.error or f"HTTP {result.status}")
        return result.text
