from __future__ import annotations

import json
from typing import Any, Dict, Optional

import altair as alt

from rwa_core.chart_config import ChartSeriesSpec, format_value
from rwa_core.formatting import DEFAULT_FORMATTER, NumberFormatter
from rwa_core.models import TimeSeries
from rwa_core.schemas import DATE_FIELD

alt.data_transformers.disable_max_rows()

TOOLTIP_TEXT = "tooltip_text"


def to_vega_spec(chart: alt.TopLevelMixin) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def axis_label_expr(prefix: str = "", formatter: NumberFormatter = DEFAULT_FORMATTER) -> str:
    """Vega expression for axis ticks that reads like NumberFormatter.compact.

    Tier k starts at 999.95 * 1000**(k-1) so 999_950 labels as "1M", the same
    rollover compact applies after rounding.
    """
    magnitude = "abs(datum.value)"
    head = f"{json.dumps(prefix)} + (datum.value < 0 ? '-' : '')"
    expr = f"{head} + format({magnitude}, ',.1~f')"
    for tier, suffix in enumerate(formatter.locale.compact_suffixes, start=1):
        threshold = 1000**tier - 0.05 * 1000 ** (tier - 1)
        branch = f"{head} + format({magnitude} / {1000 ** tier}, ',.1~f') + {json.dumps(suffix)}"
        expr = f"{magnitude} >= {threshold!r} ? {branch} : ({expr})"
    return expr


def build_chart(
    spec: Optional[ChartSeriesSpec],
    series: TimeSeries,
    formatter: NumberFormatter = DEFAULT_FORMATTER,
) -> Optional[alt.TopLevelMixin]:
    """Vega-Lite chart for one resolved spec, or None when there is nothing to draw."""
    if spec is None or series.empty or DATE_FIELD not in series.fields:
        return None

    frame = series.to_frame()
    keys = [s.key for s in spec.series]
    labels = {s.key: s.label for s in spec.series}
    label_expr = axis_label_expr(spec.value_prefix, formatter)

    long_df = frame.melt(id_vars=DATE_FIELD, value_vars=keys, var_name="key", value_name="amount")
    long_df["series"] = long_df["key"].map(labels)
    # Stack in declared order, not alphabetically by key.
    long_df["stack_order"] = long_df["key"].map({k: i for i, k in enumerate(keys)})
    long_df[TOOLTIP_TEXT] = long_df["amount"].map(lambda v: format_value(spec, v, formatter))

    x = alt.X(f"{DATE_FIELD}:T", title="Date", axis=alt.Axis(format="%Y-%m", grid=False))
    base = alt.Chart(long_df)
    mark = base.mark_area(opacity=0.4, line=True) if spec.mark == "area" else base.mark_bar()
    primary = mark.encode(
        x=x,
        y=alt.Y(
            "amount:Q",
            title=spec.left_axis_label,
            stack="zero" if spec.stacked else None,
            axis=alt.Axis(labelExpr=label_expr, gridDash=[3, 3]),
        ),
        color=alt.Color(
            "series:N",
            title=None,
            sort=[s.label for s in spec.series],
            scale=alt.Scale(domain=[s.label for s in spec.series], range=[s.color for s in spec.series]),
        ),
        order=alt.Order("stack_order:Q"),
        tooltip=[
            alt.Tooltip(f"{DATE_FIELD}:T", title="Date"),
            alt.Tooltip("series:N", title="Series"),
            alt.Tooltip(f"{TOOLTIP_TEXT}:N", title="Value"),
        ],
    )

    if spec.secondary_line is None:
        return primary.properties(height=400)

    line_spec = spec.secondary_line
    line_df = frame[[DATE_FIELD, line_spec.key]].copy()
    line_df[TOOLTIP_TEXT] = line_df[line_spec.key].map(lambda v: format_value(spec, v, formatter))
    line = (
        alt.Chart(line_df)
        .mark_line(point=True, color=line_spec.color, strokeWidth=3)
        .encode(
            x=x,
            y=alt.Y(
                field=line_spec.key,
                type="quantitative",
                title=spec.right_axis_label,
                axis=alt.Axis(labelExpr=label_expr, orient="right"),
            ),
            tooltip=[
                alt.Tooltip(f"{DATE_FIELD}:T", title="Date"),
                alt.Tooltip(f"{TOOLTIP_TEXT}:N", title=line_spec.label),
            ],
        )
    )
    return alt.layer(primary, line).resolve_scale(y="independent").properties(height=400)
