"""
Detail page extraction.

Pulls the full description, its headed sections, the apply link, the
detailed perks and the company links out of a single job page.
"""

from __future__ import annotations

import re
import urllib.parse
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup, NavigableString, Tag

from boardscout.extract.html import extract_text_structured, inner_html, make_soup
from boardscout.models import (
    JobBenefit,
    JobDetailSection,
    normalize_text,
    text_or_none,
    to_absolute_url,
)

APPLY_SELECTORS = ["a#apply_bottom", "a#apply_top", "a.js-apply-btn", "a[data-apply-url]"]
APPLY_TEXT_RE = re.compile(r"\b(apply|postula)", re.IGNORECASE)

DESCRIPTION_SELECTORS = ['[itemprop="description"]', "#job-body", ".gb-rich-txt", "article"]
SECTION_HEADINGS = ["h2", "h3", "h4"]

BENEFIT_SELECTOR = ".gb-perks-list li, .gb-perks-list .perk, .perk"
LOGO_SELECTOR = ".gb-company-logo__img"

# Icon font base classes that carry no meaning on their own
GENERIC_ICON_CLASSES = {"fa", "fas", "far", "fab", "fal", "icon", "material-icons"}


@dataclass
class JobDetail:
    """Fields found on a detail page. Anything not found stays None."""
    apply_url: Optional[str] = None
    detail_html: Optional[str] = None
    detail_text: Optional[str] = None
    detail_sections: Optional[List[JobDetailSection]] = None
    benefits_detailed: Optional[List[JobBenefit]] = None
    company_logo_full: Optional[str] = None
    company_profile_url: Optional[str] = None

    def as_updates(self) -> Dict[str, Any]:
        """Only the fields that were found, for JobPosting.with_updates."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def extract_apply_url(soup: BeautifulSoup, page_url: str) -> Optional[str]:
    for selector in APPLY_SELECTORS:
        a = soup.select_one(selector)
        if a is None:
            continue
        url = to_absolute_url(a.get("data-apply-url") or a.get("href"), page_url)
        if url:
            return url

    for a in soup.find_all("a", href=True):
        if APPLY_TEXT_RE.search(normalize_text(a.get_text())):
            url = to_absolute_url(a["href"], page_url)
            if url:
                return url
    return None


def find_description_root(soup: BeautifulSoup) -> Optional[Tag]:
    for selector in DESCRIPTION_SELECTORS:
        root = soup.select_one(selector)
        if root is not None:
            return root
    return None


def _is_section_break(node) -> bool:
    if not isinstance(node, Tag):
        return False
    return node.name in SECTION_HEADINGS or node.find(SECTION_HEADINGS) is not None


def extract_sections(root: Tag) -> List[JobDetailSection]:
    """
    Split a description into sections: each h2-h4 owns the sibling content
    that follows it up to the next heading.
    """
    sections: List[JobDetailSection] = []
    for heading in root.find_all(SECTION_HEADINGS):
        title = normalize_text(heading.get_text(" "))
        if not title:
            continue

        parts: List[str] = []
        for sibling in heading.next_siblings:
            if _is_section_break(sibling):
                break
            if isinstance(sibling, NavigableString):
                text = normalize_text(str(sibling))
                if text:
                    parts.append(text)
            elif isinstance(sibling, Tag):
                text = extract_text_structured(sibling, include_root=True)
                if text:
                    parts.append(text)

        content = "\n".join(parts).strip()
        if content:
            sections.append(JobDetailSection(title=title, content=content))
    return sections


def _icon_name(item: Tag) -> Optional[str]:
    icon = item.find("i")
    if icon is None:
        return None
    classes = [c for c in (icon.get("class") or []) if c not in GENERIC_ICON_CLASSES]
    for cls in classes:
        if cls.startswith("icon-"):
            return cls
    return classes[0] if classes else None


def extract_benefits(soup: BeautifulSoup) -> List[JobBenefit]:
    benefits: List[JobBenefit] = []
    seen = set()
    for item in soup.select(BENEFIT_SELECTOR):
        title_el = item.select_one("h4, strong, .perk-title")
        if title_el is not None:
            title = normalize_text(title_el.get_text(" "))
        else:
            icon = item.find("i")
            title = normalize_text(icon.get("title", "")) if icon else ""
            title = title or normalize_text(item.get_text(" "))
        if not title or title in seen:
            continue
        seen.add(title)

        desc_el = item.select_one("p, .perk-description")
        description = text_or_none(desc_el.get_text(" ")) if desc_el else None
        if description == title:
            description = None

        benefits.append(JobBenefit(title=title, description=description, icon=_icon_name(item)))
    return benefits


def extract_logo_full(soup: BeautifulSoup, page_url: str) -> Optional[str]:
    img = soup.select_one(LOGO_SELECTOR)
    if img is not None:
        url = to_absolute_url(img.get("data-src") or img.get("src"), page_url)
        if url:
            return url
    meta = soup.find("meta", property="og:image")
    if meta is not None:
        return to_absolute_url(meta.get("content"), page_url)
    return None


def extract_company_profile_url(soup: BeautifulSoup, page_url: str) -> Optional[str]:
    for a in soup.find_all("a", href=True):
        url = to_absolute_url(a["href"], page_url)
        if url and "/companies/" in urllib.parse.urlsplit(url).path:
            return url
    return None


def parse_detail(html: str, page_url: str) -> JobDetail:
    """Extract everything a detail page offers."""
    soup = make_soup(html)
    detail = JobDetail(
        apply_url=extract_apply_url(soup, page_url),
        company_logo_full=extract_logo_full(soup, page_url),
        company_profile_url=extract_company_profile_url(soup, page_url),
    )

    root = find_description_root(soup)
    if root is not None:
        detail.detail_html = inner_html(root) or None
        detail.detail_text = extract_text_structured(root) or None
        detail.detail_sections = extract_sections(root) or None

    detail.benefits_detailed = extract_benefits(soup) or None
    return detail
