from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Mapping, Optional, Union

from rwa_core.aggregator import failed_feeds, series_for
from rwa_core.charts import build_chart, to_vega_spec
from rwa_core.domains import REGISTRY, chart_options, default_metric, get_domain
from rwa_core.formatting import DEFAULT_FORMATTER, NumberFormatter
from rwa_core.kpi import present_kpi, summarize
from rwa_core.models import DashboardDomain, FeedResult

ADVISORY = "Failed to load some data feeds"


def compute_kpis(
    domain: Union[str, DashboardDomain],
    results: Mapping[str, FeedResult],
    formatter: NumberFormatter = DEFAULT_FORMATTER,
) -> List[Dict[str, Any]]:
    config = get_domain(domain)
    cards: List[Dict[str, Any]] = []
    for definition in config.kpis:
        series = series_for(results, definition.feed_id)
        summary = summarize(series, definition.value_field, definition.policy, definition.metric_id)
        has_chart = REGISTRY.entry(config.domain, definition.metric_id).has_chart
        card = present_kpi(definition, summary, has_chart=has_chart, formatter=formatter)
        cards.append(
            {
                **asdict(card),
                "value": summary.current_value,
                "delta": summary.delta,
                "delta_window": asdict(summary.delta_window),
            }
        )
    return cards


def compute_page(
    domain: Union[str, DashboardDomain],
    results: Mapping[str, FeedResult],
    active_metric: Optional[str] = None,
    *,
    formatter: NumberFormatter = DEFAULT_FORMATTER,
) -> Dict[str, Any]:
    config = get_domain(domain)
    active_metric = active_metric or default_metric(config.domain)

    spec = None
    series_records: List[Dict[str, Any]] = []
    vega = None
    if active_metric is not None:
        entry = REGISTRY.entry(config.domain, active_metric)
        spec = REGISTRY.resolve(config.domain, active_metric)
        series = series_for(results, entry.feed_id)
        if spec is not None:
            series_records = series.to_records()
            chart = build_chart(spec, series, formatter)
            vega = to_vega_spec(chart) if chart is not None else None

    failed = failed_feeds(results)
    return {
        "domain": config.domain.value,
        "title": config.title,
        "loading": False,
        "kpis": compute_kpis(config.domain, results, formatter),
        "chart_options": [{"id": m, "label": label} for m, label in chart_options(config.domain)],
        "active_metric": active_metric,
        "chart": asdict(spec) if spec is not None else None,
        "series": series_records,
        "vega": vega,
        "failed_feeds": failed,
        "advisory": f"{ADVISORY}: {', '.join(failed)}" if failed else None,
    }
