import pytest

from rwa_core.aggregator import failed_feeds, ingest, series_for
from rwa_core.fetcher import TabularFetcher
from rwa_core.models import Failure, FeedDescriptor, Success
from rwa_core.parser import parse
from rwa_core.schemas import get_schema

from conftest import COMMODITY_CSV, DATED_TOTAL_CSV, FakeSession


def test_partial_failure_is_isolated(connection_error):
    session = FakeSession(
        {
            "https://feeds.test/cap.csv": COMMODITY_CSV,
            "https://feeds.test/addr.csv": connection_error,
        }
    )
    descriptors = [
        FeedDescriptor("market_cap", "https://feeds.test/cap.csv", "commodity_breakdown"),
        FeedDescriptor("addresses", "https://feeds.test/addr.csv", "dated_total"),
    ]
    results = ingest(descriptors, TabularFetcher(session=session).fetch)

    assert set(results) == {"market_cap", "addresses"}
    assert isinstance(results["market_cap"], Success)
    assert len(results["market_cap"].series) == 2
    assert isinstance(results["addresses"], Failure)
    assert "refused" in results["addresses"].reason
    assert failed_feeds(results) == ["addresses"]


def test_unconfigured_feed_is_empty_without_fetching():
    calls = []

    def fetch(url):
        calls.append(url)
        return DATED_TOTAL_CSV

    results = ingest([FeedDescriptor("deposits", None, "dated_total"), FeedDescriptor("borrows", "", "dated_total")], fetch)
    assert calls == []
    assert results["deposits"].ok and results["deposits"].series.empty
    assert results["borrows"].series.fields == ("date", "total")


def test_every_feed_is_fetched_once():
    calls = []

    def fetch(url):
        calls.append(url)
        return DATED_TOTAL_CSV

    descriptors = [FeedDescriptor(f"feed{i}", f"https://feeds.test/{i}.csv", "dated_total") for i in range(5)]
    results = ingest(descriptors, fetch, max_workers=3)
    assert sorted(calls) == sorted(d.url for d in descriptors)
    assert all(r.ok for r in results.values())


def test_all_feeds_failing_still_returns_every_id():
    def fetch(url):
        raise RuntimeError("boom")

    descriptors = [FeedDescriptor("a", "https://x/a", "dated_total"), FeedDescriptor("b", "https://x/b", "dated_total")]
    results = ingest(descriptors, fetch)
    assert failed_feeds(results) == ["a", "b"]
    assert results["a"].reason == "boom"


def test_duplicate_ids_are_rejected():
    descriptors = [FeedDescriptor("a", None, "dated_total"), FeedDescriptor("a", None, "dated_total")]
    with pytest.raises(ValueError):
        ingest(descriptors, lambda url: "")


def test_unknown_schema_fails_before_fetching():
    calls = []
    with pytest.raises(KeyError):
        ingest([FeedDescriptor("a", "https://x/a", "nope")], calls.append)
    assert calls == []


def test_empty_descriptor_list():
    assert ingest([], lambda url: "") == {}


def test_series_for_failed_or_missing_feed():
    results = {
        "ok": Success(parse(DATED_TOTAL_CSV, get_schema("dated_total"))),
        "bad": Failure("boom", "dated_total"),
    }
    assert series_for(results, "ok").field_values("total") == [500, 1500]
    assert series_for(results, "bad").empty
    assert series_for(results, "bad").fields == ("date", "total")
    assert series_for(results, "missing").empty


def test_failure_empty_series_keeps_schema_fields():
    failure = Failure("boom", "commodity_breakdown")
    assert failure.series_or_empty().fields == ("date", "gold$", "silver$", "gold", "total")
    assert series_for({"cap": failure}, "cap") == failure.series_or_empty()
    assert Failure("boom").series_or_empty().fields == ()
