"""
Entry points used by the CLI: scrape live pages or parse saved HTML, and
return either JobPosting objects or plain JSON-ready dicts.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from boardscout.config import DEFAULT_LIST_URL
from boardscout.models import DEFAULT_ORIGIN, JobPosting, ScrapeResult
from boardscout.scraper import JobScraperService


class JobController:
    """Thin facade over JobScraperService."""

    def __init__(self, scraper_service: Optional[JobScraperService] = None):
        self.scraper_service = scraper_service or JobScraperService()

    async def scrape(
        self,
        base_url: str = DEFAULT_LIST_URL,
        page: int = 1,
        limit: Optional[int] = None,
        with_details: bool = False,
        with_logo_ascii: bool = False,
    ) -> ScrapeResult:
        return await self.scraper_service.scrape_listing(
            base_url=base_url,
            page=page,
            limit=limit,
            with_details=with_details,
            with_logo_ascii=with_logo_ascii,
        )

    async def scrape_plain(self, **options: Any) -> ScrapeResult:
        """Same as scrape, with each job as a plain camelCase dict."""
        result = await self.scrape(**options)
        jobs = [job.to_plain() for job in result.jobs]
        return ScrapeResult(source=result.source, page=result.page, total=len(jobs), jobs=jobs)

    async def parse_offline_html(
        self,
        html: str,
        origin: str = DEFAULT_ORIGIN,
        limit: Optional[int] = None,
        source_url: str = DEFAULT_LIST_URL,
        with_details: bool = False,
        with_logo_ascii: bool = False,
    ) -> List[JobPosting]:
        """Parse a saved listing page; enrichment still goes to the network."""
        jobs = self.scraper_service.parse_from_html(html, origin=origin, limit=limit, source_url=source_url)
        return await self.scraper_service.attach_job_details(jobs, with_details, with_logo_ascii=with_logo_ascii)

    async def parse_offline_plain(self, html: str, **options: Any) -> List[Dict[str, Any]]:
        jobs = await self.parse_offline_html(html, **options)
        return [job.to_plain() for job in jobs]

    async def close(self) -> None:
        await self.scraper_service.close()
