"""Tests for listing page extraction."""

import pytest

from boardscout.errors import JobValidationError
from boardscout.extract.listing import parse_listing

from conftest import LIST_URL, ORIGIN


@pytest.fixture
def jobs(listing_html):
    return parse_listing(listing_html, origin=ORIGIN, source_url=LIST_URL)


def test_only_valid_items_inside_results_list(jobs):
    assert [j.id for j in jobs] == [
        "backend-developer-acme-santiago",
        "data-engineer-globex",
        "frontend-dev-initech",
    ]


def test_full_item_fields(jobs):
    job = jobs[0]
    assert job.title == "Backend Developer"
    assert job.job_type == "Full time"
    assert job.company == "Acme"
    assert job.location == "Santiago"
    assert job.modality == "Hybrid"
    assert job.remote is False
    assert job.published_at == "June 04"
    assert job.salary == "$2000 - 3000 USD/month"
    assert job.badges == ["Python", "$2000 - 3000 USD/month"]
    assert job.perks == ["Flexible hours", "Remote"]
    assert job.link == f"{ORIGIN}/jobs/programacion/backend-developer-acme-santiago"
    assert job.color == "#ff0000"
    assert job.description == "Build APIs for payments"
    assert job.company_logo == f"{ORIGIN}/logos/acme.png"
    assert job.source == LIST_URL
    assert job.scraped_at.endswith("Z")


def test_sparse_item(jobs):
    job = jobs[1]
    assert job.title == "Data Engineer"
    assert job.company is None
    assert job.job_type is None
    assert job.salary is None
    assert job.badges == [] and job.perks == []
    assert job.company_logo == "https://cdn.example.com/globex.png"
    # Remote through the wifi icon even though the location says nothing
    assert job.location == "Chile"
    assert job.remote is True


def test_remote_from_location_text(jobs):
    job = jobs[2]
    assert job.location == "Remote"
    assert job.modality == "Full remote"
    assert job.remote is True


def test_limit_stops_early(listing_html):
    jobs = parse_listing(listing_html, origin=ORIGIN, limit=2)
    assert [j.id for j in jobs] == ["backend-developer-acme-santiago", "data-engineer-globex"]


def test_links_resolve_against_given_origin(listing_html):
    jobs = parse_listing(listing_html, origin="https://mirror.example.com", limit=1)
    assert jobs[0].link.startswith("https://mirror.example.com/jobs/")


def test_no_items():
    assert parse_listing("<html><body><p>Nothing here</p></body></html>") == []


def test_invalid_source_url_is_a_validation_error(listing_html):
    with pytest.raises(JobValidationError):
        parse_listing(listing_html, origin=ORIGIN, source_url="listing.html")
