"""
Scraping service for BoardScout.

Ties together the listing fetch, listing extraction and the optional
detail/profile enrichment stage into ScrapeResult objects.
"""

from __future__ import annotations

import logging
import urllib.parse
from typing import Dict, List, Optional

from boardscout.ascii_art import convert_image_url_to_ascii
from boardscout.config import DEFAULT_LIST_URL, Settings, get_settings
from boardscout.extract.company import parse_company_site
from boardscout.extract.detail import parse_detail
from boardscout.extract.listing import parse_listing
from boardscout.fetchers.http import HttpFetcher
from boardscout.models import DEFAULT_ORIGIN, JobPosting, ScrapeResult, origin_of

logger = logging.getLogger(__name__)


def build_page_url(base_url: str, page: int = 1) -> str:
    """Listing URL for a page; the page param is only set past page 1."""
    u = urllib.parse.urlsplit(base_url)
    if page and page > 1:
        q = [(k, v) for k, v in urllib.parse.parse_qsl(u.query, keep_blank_values=True) if k != "page"]
        q.append(("page", str(page)))
        u = u._replace(query=urllib.parse.urlencode(q))
    return urllib.parse.urlunsplit(u)


class JobScraperService:
    """
    Fetches and parses listing pages, then optionally walks each job's
    detail page and its company's profile page.

    Profile lookups and logo renders are memoized per URL for the lifetime
    of the service; jobs from the same company cost one profile request.
    """

    def __init__(self, fetcher: Optional[HttpFetcher] = None, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._fetcher = fetcher
        self._company_sites: Dict[str, Optional[str]] = {}
        self._logo_ascii: Dict[str, Optional[str]] = {}

    @property
    def fetcher(self) -> HttpFetcher:
        if self._fetcher is None:
            self._fetcher = HttpFetcher(
                timeout_s=self.settings.request_timeout_s,
                user_agent=self.settings.user_agent,
                cache_dir=self.settings.cache_dir,
                cache_ttl_hours=self.settings.cache_ttl_hours,
            )
        return self._fetcher

    async def close(self) -> None:
        if self._fetcher is not None:
            await self._fetcher.close()

    def parse_from_html(
        self,
        html: str,
        origin: str = DEFAULT_ORIGIN,
        limit: Optional[int] = None,
        source_url: str = DEFAULT_LIST_URL,
    ) -> List[JobPosting]:
        jobs = parse_listing(html, origin=origin, limit=limit, source_url=source_url)
        return jobs[:limit] if limit else jobs

    async def scrape_listing(
        self,
        base_url: str = DEFAULT_LIST_URL,
        page: int = 1,
        limit: Optional[int] = None,
        with_details: bool = False,
        with_logo_ascii: bool = False,
    ) -> ScrapeResult:
        """
        Scrape one listing page.

        Raises FetchError if the listing page cannot be retrieved and
        JobValidationError if an extracted record is malformed.
        """
        url = build_page_url(base_url, page)
        logger.info("Fetching listing %s", url)
        html = await self.fetcher.fetch_html_or_raise(url)

        jobs = self.parse_from_html(html, origin=origin_of(url), limit=limit, source_url=url)
        jobs = await self.attach_job_details(jobs, with_details, with_logo_ascii=with_logo_ascii)
        return ScrapeResult(source=url, page=page, total=len(jobs), jobs=jobs)

    async def attach_job_details(
        self,
        jobs: List[JobPosting],
        with_details: bool,
        with_logo_ascii: bool = False,
    ) -> List[JobPosting]:
        """
        Enrich jobs from their detail and company pages, one at a time.

        Enrichment is best-effort: a job whose pages fail keeps its listing
        data. Order and count are always preserved.
        """
        if not with_details:
            return jobs

        enriched: List[JobPosting] = []
        for job in jobs:
            try:
                enriched.append(await self._enrich_job(job, with_logo_ascii))
            except Exception as e:
                logger.warning("Could not enrich job %s: %s", job.id, e)
                enriched.append(job)
        return enriched

    async def _enrich_job(self, job: JobPosting, with_logo_ascii: bool) -> JobPosting:
        result = await self.fetcher.fetch(job.link)
        if not result.ok:
            logger.warning("Detail page for %s unavailable (%s)", job.id, result.error or result.status)
        else:
            detail = parse_detail(result.text, job.link)
            job = job.with_updates(**detail.as_updates())

        if job.company_profile_url:
            site = await self._company_site(job.company_profile_url)
            if site:
                job = job.with_updates(company_site=site)

        if with_logo_ascii:
            logo_url = job.company_logo_full or job.company_logo
            if logo_url:
                art = await self._logo(logo_url)
                if art:
                    job = job.with_updates(company_logo_ascii=art)

        return job

    async def _company_site(self, profile_url: str) -> Optional[str]:
        if profile_url not in self._company_sites:
            result = await self.fetcher.fetch(profile_url)
            site = None
            if result.ok:
                site = parse_company_site(result.text, profile_url)
            else:
                logger.warning("Company profile %s unavailable (%s)", profile_url, result.error or result.status)
            self._company_sites[profile_url] = site
        return self._company_sites[profile_url]

    async def _logo(self, logo_url: str) -> Optional[str]:
        if logo_url not in self._logo_ascii:
            self._logo_ascii[logo_url] = await convert_image_url_to_ascii(
                self.fetcher,
                logo_url,
                width=self.settings.logo_width,
                colored=self.settings.logo_colored,
            )
        return self._logo_ascii[logo_url]
