"""
Fetcher layer for BoardScout.

Provides single-attempt HTTP fetching with:
- Per-URL memoization within a session
- Optional flat-file response caching
"""

from boardscout.fetchers.http import HttpFetcher, FetchResult, ResponseCache

__all__ = ["HttpFetcher", "FetchResult", "ResponseCache"]
