"""
Company profile page extraction.

The only thing we want from a profile page is the company's own website,
which has to be told apart from social profiles, job boards and links back
to the board itself.
"""

from __future__ import annotations

import re
import urllib.parse
from typing import Iterable, Optional

from bs4 import BeautifulSoup, Tag

from boardscout.extract.html import make_soup
from boardscout.models import normalize_text, to_absolute_url

SITE_SELECTORS = [
    'a[itemprop="url"]',
    "a[data-company-website]",
    ".gb-company-profile__links a",
    ".company-links a",
]
SITE_TEXT_RE = re.compile(r"website|sitio web|web site|p[aá]gina web", re.IGNORECASE)

# Domains that are never a company's own site
SKIP_DOMAINS = {
    "linkedin.com", "twitter.com", "x.com", "facebook.com", "instagram.com",
    "youtube.com", "youtu.be", "github.com", "tiktok.com", "medium.com",
    "glassdoor.com", "indeed.com", "greenhouse.io", "lever.co",
    "google.com", "goo.gl", "bit.ly", "t.co",
    # The board itself, under all of its domains
    "getonbrd.cl", "getonbrd.com", "getonboard.com",
}


def get_domain(url: str) -> str:
    """Host of a URL, lowercased and without a leading www."""
    try:
        netloc = urllib.parse.urlsplit(url).netloc.lower()
    except ValueError:
        return ""
    return netloc[4:] if netloc.startswith("www.") else netloc


def is_skipped_domain(domain: str) -> bool:
    return any(domain == d or domain.endswith("." + d) for d in SKIP_DOMAINS)


def _candidates(soup: BeautifulSoup) -> Iterable[Tag]:
    for selector in SITE_SELECTORS:
        yield from soup.select(selector)
    for a in soup.find_all("a", href=True):
        if SITE_TEXT_RE.search(normalize_text(a.get_text(" "))) or SITE_TEXT_RE.search(a.get("title", "")):
            yield a


def parse_company_site(html: str, page_url: str) -> Optional[str]:
    """
    Find the external website linked from a company profile page.
    Returns None when the page only links to the board or to social sites.
    """
    soup = make_soup(html)
    board_domain = get_domain(page_url)

    for a in _candidates(soup):
        href = a.get("data-company-website") or a.get("href")
        url = to_absolute_url(href, page_url)
        if not url:
            continue
        domain = get_domain(url)
        if not domain or domain == board_domain or is_skipped_domain(domain):
            continue
        return url
    return None
