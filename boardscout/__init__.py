"""
BoardScout: structured job postings from HTML job board pages.

Parses listing pages with CSS-selector field extractors, validates each
record, and can follow every job to its detail page and company profile.
"""

__version__ = "0.3.0"

from boardscout.models import JobPosting, JobDetailSection, JobBenefit, ScrapeResult
from boardscout.scraper import JobScraperService
from boardscout.controller import JobController

__all__ = [
    "JobPosting",
    "JobDetailSection",
    "JobBenefit",
    "ScrapeResult",
    "JobScraperService",
    "JobController",
]
