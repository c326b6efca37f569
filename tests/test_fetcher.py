import pytest
import requests

from rwa_core.errors import TransportError
from rwa_core.fetcher import TabularFetcher

from conftest import DATED_TOTAL_CSV, FakeResponse, FakeSession


def test_fetch_returns_body_text():
    session = FakeSession({"https://feeds.test/a.csv": DATED_TOTAL_CSV})
    fetcher = TabularFetcher(session=session, timeout=5)
    assert fetcher.fetch("https://feeds.test/a.csv") == DATED_TOTAL_CSV
    assert session.calls == [("https://feeds.test/a.csv", 5)]


def test_non_success_status_raises():
    session = FakeSession({"https://feeds.test/a.csv": FakeResponse("oops", status_code=503, reason="Unavailable")})
    with pytest.raises(TransportError) as info:
        TabularFetcher(session=session).fetch("https://feeds.test/a.csv")
    assert info.value.status == 503
    assert "HTTP 503" in str(info.value)


def test_network_fault_is_wrapped():
    session = FakeSession({"https://feeds.test/a.csv": requests.ConnectionError("refused")})
    with pytest.raises(TransportError) as info:
        TabularFetcher(session=session).fetch("https://feeds.test/a.csv")
    assert info.value.status is None
    assert isinstance(info.value.__cause__, requests.ConnectionError)


def test_context_manager_closes_session():
    session = FakeSession()
    with TabularFetcher(session=session) as fetcher:
        assert fetcher.session is session
    assert session.closed
