from datetime import date
from unittest.mock import Mock, patch
import os
import sys

# Ensure the project root is on the import path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from ingest.source_catalog import EventSource
from scrapers.events12_scraper import extract_link_events, month_url, scrape_events12


SOURCE = EventSource(
    id="events12",
    name="Events12.com",
    url="https://www.events12.com/seattle/",
    type="listing",
    city="Seattle",
    search_domains=["events12.com"],
)

LISTING_HTML = """
<html><body>
  <a href="/">Home</a>
  <a href="/about">   </a>
  <a href="/a">Seattle Art Walk + Gallery Night FREE</a>
  <a href="/b">Jazz Night+</a>
  <a>Northwest Folklife Festival</a>
  <a href="/c">Contact us</a>
</body></html>
"""


def fake_get(url, **kwargs):  # pylint: disable=unused-argument
    resp = Mock()
    resp.raise_for_status = lambda: None
    if url in (SOURCE.url, SOURCE.url + "october-2026/"):
        resp.text = LISTING_HTML
    else:
        raise ValueError(f"Unexpected URL {url}")
    return resp


def test_extract_link_events_applies_heuristics():
    events = extract_link_events(LISTING_HTML, "October 2026")
    titles = [e.title for e in events]
    assert titles == [
        "Seattle Art Walk + Gallery Night",
        "Jazz Night+",
        "Northwest Folklife Festival",
    ]
    assert all(e.title for e in events)
    assert all(e.date == "October 2026" for e in events)
    assert all(e.description is None and e.location is None for e in events)


def test_extract_link_events_free_flag_and_missing_href():
    events = {e.title: e for e in extract_link_events(LISTING_HTML, "October 2026")}
    assert events["Seattle Art Walk + Gallery Night"].is_free is True
    assert events["Jazz Night+"].is_free is False
    assert events["Northwest Folklife Festival"].url is None
    assert events["Jazz Night+"].url == "/b"


def test_month_url():
    assert month_url(SOURCE.url, 10, 2026) == "https://www.events12.com/seattle/october-2026/"
    assert month_url("https://www.events12.com/seattle", 1, 2025) == "https://www.events12.com/seattle/january-2025/"


def test_scrape_events12_uses_current_month():
    with patch("scrapers.fetcher.requests.get", side_effect=fake_get) as mock_get:
        events = scrape_events12(SOURCE, today=date(2026, 10, 17))
    assert mock_get.call_args[0][0] == SOURCE.url
    assert len(events) == 3
    assert events[0].date == "October 2026"


def test_scrape_events12_month_page():
    with patch("scrapers.fetcher.requests.get", side_effect=fake_get) as mock_get:
        events = scrape_events12(SOURCE, month=10, year=2026, today=date(2025, 1, 1))
    assert mock_get.call_args[0][0] == "https://www.events12.com/seattle/october-2026/"
    assert events[0].date == "October 2026"
