import pytest
import requests


class FakeResponse:
    def __init__(self, text="", status_code=200, reason="OK"):
        self.text = text
        self.status_code = status_code
        self.reason = reason
        self.encoding = None

    @property
    def ok(self):
        return self.status_code < 400


class FakeSession:
    """Stand-in for requests.Session serving canned bodies by URL."""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []
        self.closed = False

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        route = self.routes.get(url)
        if route is None:
            return FakeResponse("", status_code=404, reason="Not Found")
        if isinstance(route, Exception):
            raise route
        if isinstance(route, FakeResponse):
            return route
        return FakeResponse(route)

    def close(self):
        self.closed = True


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def connection_error():
    return requests.ConnectionError("connection refused")


DATED_TOTAL_CSV = "date,total\n2024-01-01,500\n2024-02-01,1500\n"

COMMODITY_CSV = (
    "date,total,gold$,silver$,gold\n"
    "2024-01-01,600,100,200,300\n"
    "2024-02-01,900,200,300,400\n"
)

OVERVIEW_CSV = "date,monthly,cumulative\n2024-01-01,10,10\n2024-02-01,20,30\n2024-03-01,40,70\n"
