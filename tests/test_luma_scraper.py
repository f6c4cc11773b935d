from datetime import date
from unittest.mock import Mock, patch
import os
import sys

# Ensure the project root is on the import path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from ingest.source_catalog import EventSource
from scrapers.luma_scraper import extract_jsonld_events, scrape_luma


SOURCE = EventSource(
    id="luma",
    name="Lu.ma",
    url="https://lu.ma/seattle",
    type="aggregator",
    city="Seattle",
    search_domains=["lu.ma"],
)

JSONLD_HTML = (
    '<html><body><script type="application/ld+json">'
    '{"@context":"https://schema.org","@graph":['
    '{"@type":"Event","name":"Food Fest","url":"http://b","startDate":"2026-11-02T18:00:00-08:00"},'
    '{"@type":"SocialEvent","name":"Free Yoga in the Park","url":"/yoga"},'
    '{"@type":"Organization","name":"Not an event"},'
    '{"@type":"Event","name":"   "}'
    ']}</script>'
    '<script type="application/ld+json">{not json</script>'
    '</body></html>'
)

LINKS_HTML = '<html><body><a href="/tech">Seattle Tech Meetup + Demos</a><a href="/">Home</a></body></html>'


def test_extract_jsonld_events():
    events = extract_jsonld_events(JSONLD_HTML, SOURCE.url, "October 2026")
    assert [e.title for e in events] == ["Food Fest", "Free Yoga in the Park"]
    food, yoga = events
    assert food.url == "http://b"
    assert food.date == "November 2026"
    assert food.is_free is False
    assert yoga.url == "https://lu.ma/yoga"
    assert yoga.date == "October 2026"
    assert yoga.is_free is True


def test_scrape_luma_prefers_jsonld():
    resp = Mock(text=JSONLD_HTML)
    resp.raise_for_status = lambda: None
    with patch("scrapers.fetcher.requests.get", return_value=resp):
        events = scrape_luma(SOURCE, today=date(2026, 10, 17))
    assert len(events) == 2


def test_scrape_luma_falls_back_to_links():
    resp = Mock(text=LINKS_HTML)
    resp.raise_for_status = lambda: None
    with patch("scrapers.fetcher.requests.get", return_value=resp):
        events = scrape_luma(SOURCE, month=12, year=2026)
    assert len(events) == 1
    assert events[0].title == "Seattle Tech Meetup + Demos"
    assert events[0].date == "December 2026"
