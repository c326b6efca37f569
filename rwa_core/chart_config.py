"""Declarative chart-series tables.

Each dashboard domain registers an ordered table of chart entries. Resolving a
(domain, metric) pair is a plain lookup; no per-page branching. A metric with
a headline number but nothing to plot is registered as KPI-only and resolves
to None, which is a different state from an unknown metric (an error).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Literal, Optional, Tuple, Union

from rwa_core.errors import UnknownMetricError
from rwa_core.formatting import DEFAULT_FORMATTER, Number, NumberFormatter
from rwa_core.models import DashboardDomain
from rwa_core.schemas import Schema

ChartMark = Literal["bar", "area"]


@dataclass(frozen=True)
class SeriesEntry:
    key: str
    label: str
    color: str


@dataclass(frozen=True)
class SecondaryLine:
    key: str
    label: str
    color: str


@dataclass(frozen=True)
class ChartSeriesSpec:
    left_axis_label: str
    series: Tuple[SeriesEntry, ...]
    right_axis_label: Optional[str] = None
    stacked: bool = False
    value_prefix: str = ""
    secondary_line: Optional[SecondaryLine] = None
    mark: ChartMark = "bar"

    def __post_init__(self) -> None:
        if not self.series:
            raise ValueError("A chart spec needs at least one series; register the metric as KPI-only instead")
        # Stacking a single series renders the same as not stacking it.
        if self.stacked and len(self.series) == 1:
            object.__setattr__(self, "stacked", False)
        if self.secondary_line is not None and self.right_axis_label is None:
            object.__setattr__(self, "right_axis_label", self.secondary_line.label)

    @property
    def keys(self) -> Tuple[str, ...]:
        keys = tuple(s.key for s in self.series)
        if self.secondary_line is not None:
            keys += (self.secondary_line.key,)
        return keys


class _KpiOnly:
    def __repr__(self) -> str:
        return "KPI_ONLY"


KPI_ONLY = _KpiOnly()


@dataclass(frozen=True)
class ChartEntry:
    metric_id: str
    label: str
    feed_id: str
    spec: Union[ChartSeriesSpec, _KpiOnly]

    @property
    def has_chart(self) -> bool:
        return isinstance(self.spec, ChartSeriesSpec)


def _as_domain(domain: Union[str, DashboardDomain], metric_id: str) -> DashboardDomain:
    try:
        return DashboardDomain(domain)
    except ValueError:
        raise UnknownMetricError(str(domain), metric_id) from None


class ChartRegistry:
    def __init__(self) -> None:
        self._tables: Dict[DashboardDomain, Dict[str, ChartEntry]] = {}

    def register(self, domain: Union[str, DashboardDomain], entries: Iterable[ChartEntry]) -> None:
        table: Dict[str, ChartEntry] = {}
        for entry in entries:
            if entry.metric_id in table:
                raise ValueError(f"Metric {entry.metric_id!r} registered twice for {domain}")
            table[entry.metric_id] = entry
        self._tables[DashboardDomain(domain)] = table

    def domains(self) -> List[DashboardDomain]:
        return list(self._tables)

    def entry(self, domain: Union[str, DashboardDomain], metric_id: str) -> ChartEntry:
        table = self._tables.get(_as_domain(domain, metric_id))
        if table is None or metric_id not in table:
            raise UnknownMetricError(str(getattr(domain, "value", domain)), metric_id)
        return table[metric_id]

    def resolve(self, domain: Union[str, DashboardDomain], metric_id: str) -> Optional[ChartSeriesSpec]:
        spec = self.entry(domain, metric_id).spec
        return spec if isinstance(spec, ChartSeriesSpec) else None

    def chart_options(self, domain: Union[str, DashboardDomain]) -> List[Tuple[str, str]]:
        table = self._tables.get(_as_domain(domain, ""), {})
        return [(e.metric_id, e.label) for e in table.values() if e.has_chart]

    def validate(self, schema_for: Callable[[DashboardDomain, str], Schema]) -> List[str]:
        """Check every plotted key against the fields of the feed it reads from."""
        errors: List[str] = []
        for domain, table in self._tables.items():
            for entry in table.values():
                try:
                    schema = schema_for(domain, entry.feed_id)
                except KeyError:
                    errors.append(f"{domain.value}/{entry.metric_id}: unknown feed {entry.feed_id!r}")
                    continue
                if not isinstance(entry.spec, ChartSeriesSpec):
                    continue
                if not schema.time_indexed:
                    errors.append(f"{domain.value}/{entry.metric_id}: feed {entry.feed_id!r} has no date column")
                for key in entry.spec.keys:
                    if key not in schema.fields:
                        errors.append(
                            f"{domain.value}/{entry.metric_id}: key {key!r} not in schema {schema.schema_id!r}"
                        )
        return errors


def format_value(spec: ChartSeriesSpec, n: Optional[Number], formatter: NumberFormatter = DEFAULT_FORMATTER) -> str:
    return formatter.prefixed(spec.value_prefix, n, style="tooltip")


def format_axis_tick(spec: ChartSeriesSpec, n: Optional[Number], formatter: NumberFormatter = DEFAULT_FORMATTER) -> str:
    return formatter.prefixed(spec.value_prefix, n)
