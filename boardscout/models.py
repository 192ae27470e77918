"""
Core data models for BoardScout.

Provides:
- JobPosting: validated job record built from a listing page and optionally
  enriched from its detail and company profile pages
- JobDetailSection / JobBenefit: structured pieces of a detail page
- ScrapeResult: envelope returned by a scrape run
- Text and URL normalization helpers shared by the extractors
"""

from __future__ import annotations

import re
import urllib.parse
from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from boardscout.config import DEFAULT_LIST_URL
from boardscout.errors import JobValidationError

DEFAULT_ORIGIN = "{0.scheme}://{0.netloc}".format(urllib.parse.urlsplit(DEFAULT_LIST_URL))


# ----------------------------- Utilities -----------------------------

def normalize_text(s: Optional[str]) -> str:
    """Collapse whitespace and strip."""
    return re.sub(r"\s+", " ", (s or "")).strip()


def text_or_none(s: Optional[str]) -> Optional[str]:
    """Normalized text, or None when nothing is left."""
    return normalize_text(s) or None


def is_http_url(value: str) -> bool:
    """True for absolute http(s) URLs with a host."""
    try:
        u = urllib.parse.urlsplit(value)
    except ValueError:
        return False
    return u.scheme in ("http", "https") and bool(u.netloc)


def to_absolute_url(value: Optional[str], origin: str) -> Optional[str]:
    """
    Resolve a possibly relative URL against an origin.
    Returns None for empty input or anything that does not resolve to http(s).
    """
    if not value or not value.strip():
        return None
    try:
        url = urllib.parse.urljoin(origin, value.strip())
    except ValueError:
        return None
    return url if is_http_url(url) else None


def origin_of(url: str) -> str:
    """scheme://host of a URL."""
    u = urllib.parse.urlsplit(url)
    return f"{u.scheme}://{u.netloc}"


def last_path_segment(url: str) -> Optional[str]:
    """Last non-empty path segment, ignoring query and fragment."""
    segments = [p for p in urllib.parse.urlsplit(url).path.split("/") if p]
    return segments[-1] if segments else None


_MODALITY_RE = re.compile(r"\(([^)]+)\)")


def extract_modality(location_text: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """
    Split "Santiago (Hybrid)" into ("Santiago", "Hybrid").
    Only the first parenthesized group is treated as the modality.
    """
    if not location_text:
        return None, None
    match = _MODALITY_RE.search(location_text)
    location = normalize_text(_MODALITY_RE.sub("", location_text, count=1))
    modality = normalize_text(match.group(1)) if match else None
    return location, modality or None


def unique(values: List[str]) -> List[str]:
    """De-duplicate keeping first occurrence order."""
    return list(dict.fromkeys(values))


def now_utc() -> datetime:
    """Current UTC datetime."""
    return datetime.now(timezone.utc)


def now_utc_iso() -> str:
    """Current UTC time as ISO string."""
    return now_utc().isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _check_url(value: Optional[str]) -> Optional[str]:
    if value is not None and not is_http_url(value):
        raise ValueError(f"not an absolute http(s) URL: {value!r}")
    return value


# ----------------------------- Schema -----------------------------

class _Record(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )


class JobDetailSection(_Record):
    """A headed block of a job's detail page."""
    title: str
    content: str


class JobBenefit(_Record):
    """A perk as described on the detail page."""
    title: str
    description: Optional[str] = None
    icon: Optional[str] = None


class JobPosting(_Record):
    """
    Validated job record.

    Instances are immutable; enrichment produces new instances through
    ``with_updates``.
    """

    id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    company: Optional[str] = None
    job_type: Optional[str] = None
    location: Optional[str] = None
    modality: Optional[str] = None
    remote: bool
    published_at: Optional[str] = None
    salary: Optional[str] = None
    badges: List[str] = Field(default_factory=list)
    perks: List[str] = Field(default_factory=list)
    link: str
    color: Optional[str] = None
    description: Optional[str] = None

    # Company
    company_logo: Optional[str] = None
    company_logo_full: Optional[str] = None
    company_profile_url: Optional[str] = None
    company_site: Optional[str] = None
    company_logo_ascii: Optional[str] = None

    # Provenance
    source: str
    scraped_at: str

    # Detail page
    apply_url: Optional[str] = None
    detail_html: Optional[str] = None
    detail_text: Optional[str] = None
    detail_sections: Optional[List[JobDetailSection]] = None
    benefits_detailed: Optional[List[JobBenefit]] = None

    @field_validator(
        "link", "source", "company_logo", "company_logo_full",
        "company_profile_url", "company_site", "apply_url",
    )
    @classmethod
    def absolute_url(cls, v: Optional[str]) -> Optional[str]:
        return _check_url(v)

    @field_validator("perks")
    @classmethod
    def dedupe_perks(cls, v: List[str]) -> List[str]:
        return unique(v)

    @classmethod
    def create(cls, **data: Any) -> "JobPosting":
        """Validate raw fields (snake_case or camelCase) into a JobPosting."""
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise JobValidationError(f"Invalid job record: {e}") from e

    def with_updates(self, **fields: Any) -> "JobPosting":
        """Return a re-validated copy with the given fields replaced."""
        data = self.model_dump()
        data.update(fields)
        return JobPosting.create(**data)

    def to_plain(self) -> Dict[str, Any]:
        """JSON-ready dict with camelCase keys; unset optionals are omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


T = TypeVar("T")


class ScrapeResult(BaseModel, Generic[T]):
    """Envelope for a scraped (or offline-parsed) page."""
    source: str
    page: int = 1
    total: int = 0
    jobs: List[T] = Field(default_factory=list)

    def to_plain(self) -> Dict[str, Any]:
        jobs = [j.to_plain() if isinstance(j, JobPosting) else j for j in self.jobs]
        return {"source": self.source, "page": self.page, "total": len(jobs), "jobs": jobs}
