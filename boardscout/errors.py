"""
Exception types raised by BoardScout.

Per-request failures inside the enrichment stage are reported through
``FetchResult`` and log messages instead; only failures that make a whole
run meaningless surface as exceptions.
"""

from __future__ import annotations


class BoardScoutError(Exception):
    """Base class for all BoardScout errors."""


class FetchError(BoardScoutError):
    """The listing page could not be retrieved."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Could not fetch {url}: {reason}")


class JobValidationError(BoardScoutError):
    """An extracted record does not satisfy the job schema."""
