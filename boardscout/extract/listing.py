"""
Listing page extraction.

A listing page holds one ``a.gb-results-list__item`` anchor per job inside
``ul.sgb-results-list``. Each field has its own extractor so that a missing
fragment only drops that field, never the job.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from bs4 import Tag

from boardscout.config import DEFAULT_LIST_URL
from boardscout.extract.html import make_soup
from boardscout.models import (
    DEFAULT_ORIGIN,
    JobPosting,
    extract_modality,
    last_path_segment,
    normalize_text,
    now_utc_iso,
    text_or_none,
    to_absolute_url,
    unique,
)

logger = logging.getLogger(__name__)

ITEM_SELECTOR = "ul.sgb-results-list > a.gb-results-list__item"
REMOTE_RE = re.compile(r"remot", re.IGNORECASE)


def _first_text(root: Tag, selector: str) -> Optional[str]:
    node = root.select_one(selector)
    return text_or_none(node.get_text()) if node else None


def extract_title(item: Tag) -> str:
    """Bold part of the title block, falling back to the whole block."""
    title_el = item.select_one(".gb-results-list__title")
    if not title_el:
        return ""
    strong = title_el.find("strong")
    title = normalize_text(strong.get_text()) if strong else ""
    return title or normalize_text(title_el.get_text())


def extract_job_type(item: Tag) -> Optional[str]:
    return _first_text(item, ".gb-results-list__title .opacity-half")


def extract_company(item: Tag) -> Optional[str]:
    info = item.select_one(".gb-results-list__info .size0")
    if not info:
        return None
    strong = info.find("strong")
    return text_or_none(strong.get_text()) if strong else None


def extract_salary(item: Tag) -> Optional[str]:
    """Text of the money badge, minus its icon."""
    icon = item.select_one(".gb-results-list__badges .icon-money-bill")
    if not icon or icon.parent is None:
        return None
    # Work on a detached copy so the icon removal does not touch the document
    node = make_soup(str(icon.parent))
    for i in node.find_all("i"):
        i.decompose()
    return text_or_none(node.get_text())


def extract_published_at(item: Tag) -> Optional[str]:
    nodes = item.select(".gb-results-list__secondary .opacity-half.size0")
    return text_or_none(nodes[-1].get_text()) if nodes else None


def extract_badges(item: Tag) -> List[str]:
    badges = [normalize_text(b.get_text()) for b in item.select(".gb-results-list__badges .badge")]
    return [b for b in badges if b]


def extract_perks(item: Tag) -> List[str]:
    perks = [normalize_text(i.get("title", "")) for i in item.select(".gb-perks-list i")]
    return unique([p for p in perks if p])


def extract_logo(item: Tag, origin: str) -> Optional[str]:
    img = item.select_one(".gb-results-list__img")
    if not img:
        return None
    return to_absolute_url(img.get("data-src") or img.get("src"), origin)


def parse_listing_item(item: Tag, origin: str, source_url: str) -> Optional[JobPosting]:
    """
    Build a JobPosting from one listing anchor.
    Returns None for items without a title, a resolvable link or an id.
    """
    title = extract_title(item)
    if not title:
        return None

    link = to_absolute_url(item.get("href"), origin)
    if not link:
        return None
    job_id = last_path_segment(link)
    if not job_id:
        return None

    location_block = _first_text(item, ".location")
    location, modality = extract_modality(location_block)
    remote = bool(REMOTE_RE.search(location_block or "")) or item.select_one(".icon-wifi") is not None

    return JobPosting.create(
        id=job_id,
        title=title,
        company=extract_company(item),
        job_type=extract_job_type(item),
        location=location or None,
        modality=modality,
        remote=remote,
        published_at=extract_published_at(item),
        salary=extract_salary(item),
        badges=extract_badges(item),
        perks=extract_perks(item),
        link=link,
        color=item.get("data-color") or None,
        description=text_or_none(item.get("title")),
        company_logo=extract_logo(item, origin),
        source=source_url,
        scraped_at=now_utc_iso(),
    )


def parse_listing(
    html: str,
    origin: str = DEFAULT_ORIGIN,
    limit: Optional[int] = None,
    source_url: str = DEFAULT_LIST_URL,
) -> List[JobPosting]:
    """
    Extract every job summary from a listing page, in document order.

    Raises JobValidationError if an extracted record fails the schema.
    """
    soup = make_soup(html)
    jobs: List[JobPosting] = []

    for item in soup.select(ITEM_SELECTOR):
        if limit and len(jobs) >= limit:
            break
        job = parse_listing_item(item, origin, source_url)
        if job is None:
            logger.debug("Skipping listing item without title/link: %s", item.get("href"))
            continue
        jobs.append(job)

    logger.debug("Parsed %d jobs from %s", len(jobs), source_url)
    return jobs
