"""Core (UI-agnostic) dashboard logic.

This package contains:
- feed ingestion (CSV over HTTP -> typed TimeSeries)
- KPI summaries with period-over-period deltas
- declarative chart-series tables per dashboard domain
- number formatting for KPI cards, tooltips and axes
- page compute functions (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
