from __future__ import annotations

from typing import Optional


class RwaError(Exception):
    """Base class for errors raised by the dashboard core."""


class TransportError(RwaError):
    """A feed could not be retrieved (non-success status or network fault)."""

    def __init__(self, url: str, status: Optional[int] = None, reason: str = "") -> None:
        self.url = url
        self.status = status
        self.reason = reason
        detail = f"HTTP {status}" if status is not None else "transport fault"
        if reason:
            detail = f"{detail}: {reason}"
        super().__init__(f"Failed to fetch {url} ({detail})")


class UnknownMetricError(RwaError, KeyError):
    """No chart table entry exists for a (domain, metric) pair."""

    def __init__(self, domain: str, metric_id: str) -> None:
        self.domain = domain
        self.metric_id = metric_id
        super().__init__(f"Unknown metric {metric_id!r} for domain {domain!r}")

    def __str__(self) -> str:
        return self.args[0]
