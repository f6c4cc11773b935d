from unittest.mock import Mock
import os
import sys

# Ensure the project root is on the import path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from ingest.schemas import EventRecord
from ingest.search_client import SearchClientError, TavilySearchClient
from scrapers.enricher import (
    discover_events,
    enrich_event,
    enrich_events_for_date,
    find_matching_result,
    merge_results,
    select_date_events,
)


def make_event(title, **kwargs):
    kwargs.setdefault("date", "October 2025")
    return EventRecord(title=title, **kwargs)


SEARCH_RESULTS = [
    {
        "title": "Seattle Symphony: Autumn Gala",
        "url": "https://www.events12.com/seattle/gala",
        "content": "The Autumn Gala returns on Friday, October 17, 2025 at Benaroya Hall, downtown.",
    },
    {
        "title": "Things to do this weekend",
        "url": "https://www.events12.com/seattle/weekend",
        "content": "Highlights include the Pumpkin Patch Party, free for kids, at Oxbow Farm.",
    },
]


def test_find_matching_result_checks_both_directions_and_snippet():
    assert find_matching_result(make_event("Autumn Gala"), SEARCH_RESULTS) is SEARCH_RESULTS[0]
    assert find_matching_result(make_event("Pumpkin Patch Party"), SEARCH_RESULTS) is SEARCH_RESULTS[1]
    longer = make_event("Things to do this weekend in Seattle")
    assert find_matching_result(longer, SEARCH_RESULTS) is SEARCH_RESULTS[1]
    assert find_matching_result(make_event("Ballet Premiere"), SEARCH_RESULTS) is None


def test_find_matching_result_first_match_wins():
    results = [
        {"title": "Gala one", "url": "u1", "content": ""},
        {"title": "Gala two", "url": "u2", "content": ""},
    ]
    assert find_matching_result(make_event("Gala"), results)["url"] == "u1"


def test_enrich_event_merges_fields_without_mutating():
    event = make_event("Pumpkin Patch Party", url="/pumpkins")
    enriched = enrich_event(event, SEARCH_RESULTS[1], relevant_date="Friday, October 17, 2025")
    assert enriched is not event
    assert event.description is None
    assert enriched.description == SEARCH_RESULTS[1]["content"][:200] + "..."
    assert enriched.location == "Oxbow Farm"
    assert enriched.url == "https://www.events12.com/seattle/weekend"
    assert enriched.is_free is True
    assert enriched.relevant_date == "Friday, October 17, 2025"


def test_enrich_event_keeps_url_when_result_has_none():
    event = make_event("Autumn Gala", url="/gala")
    enriched = enrich_event(event, {"title": "Autumn Gala", "content": "Black tie"})
    assert enriched.url == "/gala"
    assert enriched.location is None
    assert enriched.is_free is False


def test_merge_results_leaves_unmatched_events_alone():
    events = [make_event("Autumn Gala"), make_event("Ballet Premiere")]
    merged = merge_results(events, SEARCH_RESULTS)
    assert merged[0].description is not None
    assert merged[1] == events[1]


def test_select_date_events_falls_back_to_first_ten():
    events = [make_event(f"Event number {i}") for i in range(15)]
    assert select_date_events(events, "Friday, October 17, 2025") == events[:10]


def test_enrich_events_for_date_queries_provider():
    client = Mock(spec=TavilySearchClient)
    client.search.return_value = SEARCH_RESULTS
    events = [make_event("Autumn Gala"), make_event("Ballet Premiere")]

    result = enrich_events_for_date("2025-10-17", events, client, domains=["events12.com"])

    assert result.ok
    assert result.date == "Friday, October 17, 2025"
    assert [e.title for e in result.events] == ["Autumn Gala"]
    query = client.search.call_args[0][0]
    assert query == "Seattle events on Friday, October 17, 2025 events12.com"
    assert client.search.call_args[1]["include_domains"] == ["events12.com"]
    assert client.search.call_args[1]["max_results"] == 10


def test_enrich_events_for_date_degrades_on_search_failure():
    client = Mock(spec=TavilySearchClient)
    client.search.side_effect = SearchClientError("boom")
    result = enrich_events_for_date("2025-10-17", [make_event("Autumn Gala")], client)
    assert not result.ok
    assert result.events == []
    assert result.date == "2025-10-17"


def test_enrich_events_for_date_degrades_on_invalid_date():
    client = Mock(spec=TavilySearchClient)
    result = enrich_events_for_date("2025-13-99", [make_event("Autumn Gala")], client)
    assert result.date == "2025-13-99"
    assert result.events == []
    assert result.error
    client.search.assert_not_called()


def test_discover_events_dedupes_by_url():
    client = Mock(spec=TavilySearchClient)
    client.search.return_value = [
        {"title": "First", "url": "https://lu.ma/a", "content": "Free drinks at Capitol Hill"},
        {"title": "Second", "url": "https://www.eventbrite.com/b", "content": ""},
        {"title": "First again", "url": "https://lu.ma/a", "content": "Updated"},
        {"url": "https://seattle.gov/c"},
    ]

    result = discover_events(client, query="jazz", city="Seattle", category="All Categories")

    assert client.search.call_args[0][0] == "jazz in Seattle"
    assert [e.title for e in result.events] == ["First again", "Second", "No title available"]
    assert result.events[0].source == "lu.ma"
    assert result.events[1].description == "No description available."
    assert result.events[2].source == "seattle.gov"


def test_discover_events_builds_query_from_filters():
    client = Mock(spec=TavilySearchClient)
    client.search.return_value = []
    discover_events(client, city="Seattle", category="Food & Drink", start_date="2025-10-01", end_date="2025-10-31")
    assert client.search.call_args[0][0] == "events Food & Drink in Seattle from 2025-10-01 to 2025-10-31"


def test_discover_events_degrades_on_failure():
    client = Mock(spec=TavilySearchClient)
    client.search.side_effect = SearchClientError("down")
    result = discover_events(client, query="jazz")
    assert result.events == []
    assert result.error == "down"
