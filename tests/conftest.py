"""Pytest configuration and shared fixtures."""

import io
from typing import Dict, List, Optional

import pytest
from PIL import Image

from boardscout.config import Settings
from boardscout.errors import FetchError
from boardscout.fetchers.http import FetchResult

ORIGIN = "https://www.getonbrd.cl"
LIST_URL = f"{ORIGIN}/jobs/programacion"

LISTING_HTML = """
<html>
<body>
<ul class="sgb-results-list">
  <a class="gb-results-list__item" href="/jobs/programacion/backend-developer-acme-santiago"
     title="  Build   APIs for   payments " data-color="#ff0000">
    <img class="gb-results-list__img" data-src="/logos/acme.png" src="/placeholder.png">
    <div class="gb-results-list__info">
      <div class="gb-results-list__title">
        <strong>Backend
           Developer</strong>
        <span class="opacity-half">Full time</span>
      </div>
      <div class="size0"><strong>Acme</strong> Fintech</div>
      <span class="location">Santiago (Hybrid)</span>
    </div>
    <div class="gb-results-list__secondary">
      <div class="gb-results-list__badges">
        <span class="badge">Python</span>
        <span class="badge"><i class="icon-money-bill"></i>  $2000 - 3000   USD/month</span>
      </div>
      <span class="opacity-half size0">Senior</span>
      <span class="opacity-half size0">June 04</span>
    </div>
    <div class="gb-perks-list">
      <i title="Flexible hours"></i>
      <i title=" Flexible  hours "></i>
      <i title="Remote"></i>
      <i></i>
    </div>
  </a>
  <a class="gb-results-list__item" href="/jobs/data/data-engineer-globex/">
    <img class="gb-results-list__img" src="https://cdn.example.com/globex.png">
    <div class="gb-results-list__info">
      <div class="gb-results-list__title">Data Engineer</div>
      <span class="location">Chile</span>
      <i class="icon-wifi"></i>
    </div>
  </a>
  <a class="gb-results-list__item" href="/jobs/no-title">
    <div class="gb-results-list__title">   </div>
  </a>
  <a class="gb-results-list__item">
    <div class="gb-results-list__title"><strong>No link</strong></div>
  </a>
  <a class="gb-results-list__item" href="/jobs/frontend/frontend-dev-initech">
    <div class="gb-results-list__title"><strong>Frontend Dev</strong></div>
    <span class="location">Remote (Full remote)</span>
  </a>
</ul>
<a class="gb-results-list__item" href="/jobs/outside-list">
  <div class="gb-results-list__title"><strong>Outside</strong></div>
</a>
</body>
</html>
"""

DETAIL_HTML = """
<html>
<head><meta property="og:image" content="/og/acme.png"></head>
<body>
<img class="gb-company-logo__img" src="/logos/acme-full.png">
<a href="/companies/acme">Acme</a>
<div id="job-body" itemprop="description">
  <p>Intro paragraph.</p>
  <h3>Functions</h3>
  <ul><li>Build APIs</li><li>Review code</li></ul>
  <h3>Requirements</h3>
  <p>Python  and <strong>SQL</strong></p>
  <h3>Empty</h3>
</div>
<div class="gb-perks-list">
  <div class="perk"><i class="fa icon-clock"></i><h4>Flexible hours</h4><p>Work when you want</p></div>
  <div class="perk"><i class="icon-laptop" title="Computer provided"></i></div>
  <div class="perk"><h4>Flexible hours</h4></div>
</div>
<a id="apply_bottom" href="/jobs/backend-developer-acme-santiago/apply">Postular</a>
</body>
</html>
"""

PROFILE_HTML = """
<html><body>
<div class="gb-company-profile__links">
  <a href="https://www.linkedin.com/company/acme">LinkedIn</a>
  <a href="/jobs">Jobs</a>
  <a href="https://acme.example.com/?ref=gob">acme.example.com</a>
</div>
</body></html>
"""


class StubFetcher:
    """Stands in for HttpFetcher: serves canned pages and records requests."""

    def __init__(self, pages: Optional[Dict[str, str]] = None, images: Optional[Dict[str, bytes]] = None):
        self.pages = pages or {}
        self.images = images or {}
        self.requests: List[str] = []
        self.closed = False

    async def fetch(self, url: str, use_cache: bool = True) -> FetchResult:
        self.requests.append(url)
        if url in self.pages:
            return FetchResult(url=url, status=200, text=self.pages[url], content_type="text/html")
        return FetchResult(url=url, status=404, error="HTTP 404")

    async def fetch_bytes(self, url: str) -> FetchResult:
        self.requests.append(url)
        if url in self.images:
            return FetchResult(url=url, status=200, body=self.images[url], content_type="image/png")
        return FetchResult(url=url, status=404, error="HTTP 404")

    async def fetch_html_or_raise(self, url: str) -> str:
        result = await self.fetch(url, use_cache=False)
        if not result.ok:
            raise FetchError(url, result.error)
        return result.text

    async def close(self) -> None:
        self.closed = True


def png_bytes(size=(20, 10), color=(0, 0, 0)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def settings() -> Settings:
    return Settings(cache_dir=None, logo_width=8, logo_colored=False)


@pytest.fixture
def listing_html() -> str:
    return LISTING_HTML


@pytest.fixture
def detail_html() -> str:
    return DETAIL_HTML


@pytest.fixture
def profile_html() -> str:
    return PROFILE_HTML
