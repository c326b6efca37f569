from rwa_core.models import Failure, Success, empty_series
from rwa_core.pages import ADVISORY, compute_kpis, compute_page
from rwa_core.parser import parse
from rwa_core.schemas import get_schema

from conftest import COMMODITY_CSV


def _commodity_results():
    return {
        "market_cap": Success(parse(COMMODITY_CSV, get_schema("commodity_breakdown"))),
        "addresses": Failure("Failed to fetch https://x (HTTP 500)", "dated_total"),
        "volume": Success(empty_series("commodity_breakdown", get_schema("commodity_breakdown").fields)),
        "holders": Success(parse("total\n1234\n", get_schema("commodity_holders"))),
    }


def test_kpi_cards():
    cards = {c["metric_id"]: c for c in compute_kpis("commodities", _commodity_results())}
    assert cards["market_cap"]["value_text"] == "$900"
    assert cards["market_cap"]["delta_text"] == "+50.00%"
    assert cards["market_cap"]["delta_window"] == {"kind": "adjacent", "periods": 1}
    assert cards["addresses"]["value"] == 0
    assert cards["addresses"]["delta"] is None
    assert cards["holders"]["value_text"] == "1.2K"
    assert cards["holders"]["has_chart"] is False


def test_page_defaults_to_first_chart_and_reports_failures():
    page = compute_page("commodities", _commodity_results())
    assert page["title"] == "Commodities"
    assert page["loading"] is False
    assert page["active_metric"] == "market_cap"
    assert [o["id"] for o in page["chart_options"]] == ["market_cap", "addresses", "volume"]
    assert len(page["series"]) == 2
    assert page["vega"] is not None
    assert page["failed_feeds"] == ["addresses"]
    assert page["advisory"] == f"{ADVISORY}: addresses"


def test_page_for_failed_metric_has_no_chart():
    page = compute_page("commodities", _commodity_results(), "addresses")
    assert page["chart"]["left_axis_label"] == "Monthly Active Addresses"
    assert page["series"] == []
    assert page["vega"] is None


def test_kpi_only_active_metric():
    page = compute_page("commodities", _commodity_results(), "holders")
    assert page["chart"] is None
    assert page["series"] == []


def test_page_without_failures_has_no_advisory():
    page = compute_page("private_credit", {})
    assert page["failed_feeds"] == []
    assert page["advisory"] is None
    assert all(card["value_text"] == "$0" for card in page["kpis"])


def test_overflowing_cell_degrades_to_zero():
    series = parse("date,value,cumulative\n2024-01-01,1e400,5\n", get_schema("overview_volume"))
    page = compute_page("overview", {"volume": Success(series)}, "volume")
    cards = {c["metric_id"]: c for c in page["kpis"]}
    assert cards["volume"]["value_text"] == "$0"
    assert page["vega"] is not None
