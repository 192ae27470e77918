"""
Extraction utilities for BoardScout.

Provides:
- Listing page parsing into validated JobPosting records
- Detail page parsing (description, sections, apply link, perks)
- Company profile parsing (external website)
- HTML-to-text helpers
"""

from boardscout.extract.listing import parse_listing
from boardscout.extract.detail import JobDetail, parse_detail
from boardscout.extract.company import parse_company_site
from boardscout.extract.html import strip_html, extract_text_structured

__all__ = [
    "parse_listing",
    "JobDetail",
    "parse_detail",
    "parse_company_site",
    "strip_html",
    "extract_text_structured",
]
