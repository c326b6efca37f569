"""Per-domain tables: feeds, KPI cards and chart entries.

Every dashboard page is described here as data. The engine (aggregator, KPI
summaries, chart resolution, page payloads) is shared by all of them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from rwa_core.chart_config import (
    KPI_ONLY,
    ChartEntry,
    ChartRegistry,
    ChartSeriesSpec,
    SecondaryLine,
    SeriesEntry,
)
from rwa_core.kpi import DeltaPolicy, KPIDefinition
from rwa_core.models import DashboardDomain
from rwa_core.schemas import Schema, get_schema

PRIMARY = "#2d2df1"
SECONDARY = "#17cac6"
WHITE = "#ffffffff"

ADJACENT = DeltaPolicy.adjacent()
MONTHLY_LOOKBACK = DeltaPolicy.lookback(30)
SNAPSHOT = DeltaPolicy.none()


@dataclass(frozen=True)
class FeedSpec:
    feed_id: str
    schema_id: str


@dataclass(frozen=True)
class DomainConfig:
    domain: DashboardDomain
    title: str
    feeds: Tuple[FeedSpec, ...]
    kpis: Tuple[KPIDefinition, ...]
    charts: Tuple[ChartEntry, ...]

    def feed(self, feed_id: str) -> FeedSpec:
        for f in self.feeds:
            if f.feed_id == feed_id:
                return f
        raise KeyError(f"Unknown feed {feed_id!r} for domain {self.domain.value!r}")


def _breakdown(*entries: Tuple[str, str, str]) -> Tuple[SeriesEntry, ...]:
    return tuple(SeriesEntry(key, label, color) for key, label, color in entries)


COMMODITY_ASSETS = _breakdown(("gold$", "GOLD$", PRIMARY), ("silver$", "Silver$", SECONDARY), ("gold", "Gold", WHITE))
MICROPAYMENT_ASSETS = _breakdown(("algo", "ALGO", PRIMARY), ("stable", "Stablecoins", SECONDARY), ("hafn", "HAFN", WHITE))


OVERVIEW = DomainConfig(
    domain=DashboardDomain.OVERVIEW,
    title="Overview",
    feeds=(
        FeedSpec("transactions", "overview_count"),
        FeedSpec("addresses", "overview_count"),
        FeedSpec("volume", "overview_volume"),
    ),
    kpis=(
        KPIDefinition("transactions", "Monthly Transactions", "transactions", "value", ADJACENT),
        KPIDefinition("addresses", "Monthly Active Addresses", "addresses", "value", ADJACENT),
        KPIDefinition("volume", "Monthly USDC Volume", "volume", "value", ADJACENT, "$"),
    ),
    charts=(
        ChartEntry(
            "transactions",
            "Transactions",
            "transactions",
            ChartSeriesSpec(
                left_axis_label="Monthly Transactions",
                right_axis_label="Total Transactions",
                series=(SeriesEntry("value", "Monthly Transactions", PRIMARY),),
                secondary_line=SecondaryLine("cumulative", "Total Transactions", SECONDARY),
            ),
        ),
        ChartEntry(
            "addresses",
            "Active Addresses",
            "addresses",
            ChartSeriesSpec(
                left_axis_label="Monthly Active",
                right_axis_label="Total Unique",
                series=(SeriesEntry("value", "Monthly Active", PRIMARY),),
                secondary_line=SecondaryLine("cumulative", "Total Unique", SECONDARY),
            ),
        ),
        ChartEntry(
            "volume",
            "USDC Volume",
            "volume",
            ChartSeriesSpec(
                left_axis_label="Monthly Volume ($)",
                right_axis_label="Total Volume ($)",
                series=(SeriesEntry("value", "Monthly Volume", PRIMARY),),
                secondary_line=SecondaryLine("cumulative", "Total Volume", SECONDARY),
                value_prefix="$",
            ),
        ),
    ),
)

COMMODITIES = DomainConfig(
    domain=DashboardDomain.COMMODITIES,
    title="Commodities",
    feeds=(
        FeedSpec("market_cap", "commodity_breakdown"),
        FeedSpec("addresses", "dated_total"),
        FeedSpec("volume", "commodity_breakdown"),
        FeedSpec("holders", "commodity_holders"),
    ),
    kpis=(
        KPIDefinition("market_cap", "Stablecoins Market Cap", "market_cap", "total", ADJACENT, "$"),
        KPIDefinition("addresses", "Monthly Active Addresses", "addresses", "total", ADJACENT),
        KPIDefinition("volume", "Monthly Volume", "volume", "total", ADJACENT, "$"),
        KPIDefinition("holders", "Total Stablecoin Holders", "holders", "total", SNAPSHOT),
    ),
    charts=(
        ChartEntry(
            "market_cap",
            "Market Cap",
            "market_cap",
            ChartSeriesSpec(
                left_axis_label="Market Cap ($)",
                series=COMMODITY_ASSETS,
                stacked=True,
                value_prefix="$",
            ),
        ),
        ChartEntry(
            "addresses",
            "Active Addresses",
            "addresses",
            ChartSeriesSpec(
                left_axis_label="Monthly Active Addresses",
                series=(SeriesEntry("total", "Active Addresses", PRIMARY),),
            ),
        ),
        ChartEntry(
            "volume",
            "Volume",
            "volume",
            ChartSeriesSpec(
                left_axis_label="Monthly Volume ($)",
                series=COMMODITY_ASSETS,
                stacked=True,
                value_prefix="$",
            ),
        ),
        ChartEntry("holders", "Holders", "holders", KPI_ONLY),
    ),
)

MICROPAYMENTS = DomainConfig(
    domain=DashboardDomain.MICROPAYMENTS,
    title="Micropayments",
    feeds=(
        FeedSpec("transactions", "micropayment_count"),
        FeedSpec("addresses", "micropayment_count"),
        FeedSpec("volume", "micropayment_volume"),
    ),
    kpis=(
        KPIDefinition("transactions", "Total Payments", "transactions", "total", ADJACENT),
        KPIDefinition("addresses", "Total Unique Addresses", "addresses", "total", ADJACENT),
        KPIDefinition("volume", "Total Volume", "volume", "total", ADJACENT, "$"),
    ),
    charts=(
        ChartEntry(
            "transactions",
            "Payments",
            "transactions",
            ChartSeriesSpec(
                left_axis_label="Monthly Payments",
                series=MICROPAYMENT_ASSETS,
                stacked=True,
            ),
        ),
        ChartEntry(
            "addresses",
            "Active Addresses",
            "addresses",
            ChartSeriesSpec(
                left_axis_label="Monthly Active",
                right_axis_label="Total Unique",
                series=MICROPAYMENT_ASSETS,
                stacked=True,
                secondary_line=SecondaryLine("total", "Total Unique", SECONDARY),
            ),
        ),
        ChartEntry(
            "volume",
            "Volume",
            "volume",
            ChartSeriesSpec(
                left_axis_label="Monthly Volume ($)",
                series=MICROPAYMENT_ASSETS,
                stacked=True,
                value_prefix="$",
            ),
        ),
    ),
)

PRIVATE_CREDIT = DomainConfig(
    domain=DashboardDomain.PRIVATE_CREDIT,
    title="Private Credit",
    feeds=(
        FeedSpec("deposits", "dated_total"),
        FeedSpec("borrows", "dated_total"),
    ),
    kpis=(
        KPIDefinition("deposits", "Deposits", "deposits", "total", MONTHLY_LOOKBACK, "$"),
        KPIDefinition("borrows", "Borrows", "borrows", "total", MONTHLY_LOOKBACK, "$"),
    ),
    charts=(
        ChartEntry(
            "deposits",
            "Deposits",
            "deposits",
            ChartSeriesSpec(
                left_axis_label="Deposited Amount ($)",
                series=(SeriesEntry("total", "Deposited Amount", PRIMARY),),
                stacked=True,
                value_prefix="$",
                mark="area",
            ),
        ),
        ChartEntry(
            "borrows",
            "Borrows",
            "borrows",
            ChartSeriesSpec(
                left_axis_label="Borrowed Amount ($)",
                series=(SeriesEntry("total", "Borrowed Amount", PRIMARY),),
                value_prefix="$",
                mark="area",
            ),
        ),
    ),
)

REAL_ESTATE = DomainConfig(
    domain=DashboardDomain.REAL_ESTATE,
    title="Real Estate",
    feeds=(
        FeedSpec("market_cap", "dated_total"),
        FeedSpec("addresses", "dated_total"),
        FeedSpec("volume", "real_estate_volume"),
        FeedSpec("properties", "real_estate_properties"),
    ),
    kpis=(
        KPIDefinition("market_cap", "Real Estate Market Cap", "market_cap", "total", MONTHLY_LOOKBACK, "$"),
        KPIDefinition("addresses", "Monthly Active Addresses", "addresses", "total", ADJACENT),
        KPIDefinition("volume", "Monthly Volume", "volume", "total", ADJACENT, "$"),
        KPIDefinition("properties", "Total Properties", "properties", "total", SNAPSHOT),
    ),
    charts=(
        ChartEntry(
            "market_cap",
            "Market Cap",
            "market_cap",
            ChartSeriesSpec(
                left_axis_label="Market Cap ($)",
                series=(SeriesEntry("total", "Market Cap", PRIMARY),),
                stacked=True,
                value_prefix="$",
                mark="area",
            ),
        ),
        ChartEntry(
            "addresses",
            "Active Addresses",
            "addresses",
            ChartSeriesSpec(
                left_axis_label="Monthly Active Addresses",
                series=(SeriesEntry("total", "Active Addresses", PRIMARY),),
            ),
        ),
        ChartEntry(
            "volume",
            "Monthly Volume",
            "volume",
            ChartSeriesSpec(
                left_axis_label="Monthly Volume ($)",
                series=(SeriesEntry("total", "Monthly Volume", PRIMARY),),
                stacked=True,
                value_prefix="$",
            ),
        ),
        ChartEntry(
            "properties",
            "Tokenized Properties",
            "properties",
            ChartSeriesSpec(
                left_axis_label="Total Properties",
                series=(SeriesEntry("total", "Total Tokenized Properties", PRIMARY),),
                stacked=True,
            ),
        ),
    ),
)

DOMAINS: Dict[DashboardDomain, DomainConfig] = {
    c.domain: c for c in (OVERVIEW, COMMODITIES, MICROPAYMENTS, PRIVATE_CREDIT, REAL_ESTATE)
}


def get_domain(domain: Union[str, DashboardDomain]) -> DomainConfig:
    try:
        return DOMAINS[DashboardDomain(domain)]
    except ValueError:
        raise KeyError(f"Unknown dashboard domain: {domain!r}") from None


def schema_for(domain: Union[str, DashboardDomain], feed_id: str) -> Schema:
    return get_schema(get_domain(domain).feed(feed_id).schema_id)


REGISTRY = ChartRegistry()
for _config in DOMAINS.values():
    REGISTRY.register(_config.domain, _config.charts)

_errors = REGISTRY.validate(schema_for)
if _errors:
    raise ValueError("Invalid chart tables:\n" + "\n".join(_errors))


def resolve(domain: Union[str, DashboardDomain], metric_id: str) -> Optional[ChartSeriesSpec]:
    return REGISTRY.resolve(domain, metric_id)


def chart_options(domain: Union[str, DashboardDomain]) -> List[Tuple[str, str]]:
    return REGISTRY.chart_options(domain)


def default_metric(domain: Union[str, DashboardDomain]) -> Optional[str]:
    options = chart_options(domain)
    return options[0][0] if options else None
