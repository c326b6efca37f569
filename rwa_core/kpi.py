from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Union

from rwa_core.formatting import DEFAULT_FORMATTER, NumberFormatter
from rwa_core.models import TimeSeries

DeltaKind = Literal["adjacent", "lookback", "none"]
Number = Union[int, float]


@dataclass(frozen=True)
class DeltaPolicy:
    """Which earlier record a KPI's current value is compared against.

    - adjacent: the second-to-last record.
    - lookback: the record `periods` positions before the last one. This is a
      positional offset; a 30-period lookback on a daily feed means 30 rows,
      whatever dates those rows carry.
    - none: no comparison (point-in-time snapshot metrics).
    """

    kind: DeltaKind = "adjacent"
    periods: int = 1

    def __post_init__(self) -> None:
        if self.kind == "lookback" and self.periods < 1:
            raise ValueError("Lookback periods must be >= 1")

    @classmethod
    def adjacent(cls) -> "DeltaPolicy":
        return cls("adjacent", 1)

    @classmethod
    def lookback(cls, periods: int) -> "DeltaPolicy":
        return cls("lookback", periods)

    @classmethod
    def none(cls) -> "DeltaPolicy":
        return cls("none", 0)

    def compare_index(self, last_index: int) -> Optional[int]:
        if self.kind == "none":
            return None
        offset = 1 if self.kind == "adjacent" else self.periods
        idx = last_index - offset
        return idx if idx >= 0 else None


@dataclass(frozen=True)
class KPISummary:
    metric_id: str
    current_value: Number
    delta: Optional[float]
    delta_window: DeltaPolicy


def _numeric(value: object, field: str) -> Number:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"KPI field {field!r} is not numeric: {value!r}")
    return value


def summarize(series: TimeSeries, value_field: str, policy: DeltaPolicy, metric_id: str = "") -> KPISummary:
    metric_id = metric_id or value_field
    if series.empty:
        return KPISummary(metric_id, 0, None, policy)

    last_index = len(series) - 1
    current = _numeric(series.records[last_index][value_field], value_field)

    delta: Optional[float] = None
    compare_index = policy.compare_index(last_index)
    if compare_index is not None:
        previous = _numeric(series.records[compare_index][value_field], value_field)
        if previous:
            delta = current / previous - 1
    return KPISummary(metric_id, current, delta, policy)


@dataclass(frozen=True)
class KPIDefinition:
    metric_id: str
    label: str
    feed_id: str
    value_field: str = "total"
    policy: DeltaPolicy = DeltaPolicy()
    value_prefix: str = ""


@dataclass(frozen=True)
class KPICard:
    metric_id: str
    label: str
    value_text: str
    delta_text: Optional[str]
    delta_class: Optional[str]
    has_chart: bool


def present_kpi(
    definition: KPIDefinition,
    summary: KPISummary,
    *,
    has_chart: bool,
    formatter: NumberFormatter = DEFAULT_FORMATTER,
) -> KPICard:
    badge = formatter.delta(summary.delta)
    return KPICard(
        metric_id=definition.metric_id,
        label=definition.label,
        value_text=formatter.prefixed(definition.value_prefix, summary.current_value),
        delta_text=badge.text if badge else None,
        delta_class=badge.css_class if badge else None,
        has_chart=has_chart,
    )
