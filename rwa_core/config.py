from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Union

from rwa_core.domains import get_domain
from rwa_core.models import DashboardDomain, FeedDescriptor

ENV_PREFIX = "RWA_"

DEFAULT_FETCH_TIMEOUT = 30.0
DEFAULT_MAX_WORKERS = 8
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    max_workers: int = DEFAULT_MAX_WORKERS
    log_level: str = DEFAULT_LOG_LEVEL


def _as_float(value: object, default: float) -> float:
    try:
        return float(value)  # type: ignore[arg-type]
    except Exception:
        return default


def _as_int(value: object, default: int) -> int:
    try:
        return int(value)  # type: ignore[arg-type]
    except Exception:
        return default


def normalize_settings(raw: Mapping[str, object]) -> Settings:
    fetch_timeout = _as_float(raw.get("fetch_timeout", DEFAULT_FETCH_TIMEOUT), DEFAULT_FETCH_TIMEOUT)
    fetch_timeout = max(1.0, min(300.0, fetch_timeout))

    max_workers = _as_int(raw.get("max_workers", DEFAULT_MAX_WORKERS), DEFAULT_MAX_WORKERS)
    max_workers = max(1, min(32, max_workers))

    log_level = str(raw.get("log_level") or DEFAULT_LOG_LEVEL).strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        log_level = DEFAULT_LOG_LEVEL

    return Settings(fetch_timeout=fetch_timeout, max_workers=max_workers, log_level=log_level)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if environ is None else environ
    raw = {
        "fetch_timeout": env.get(f"{ENV_PREFIX}FETCH_TIMEOUT"),
        "max_workers": env.get(f"{ENV_PREFIX}MAX_WORKERS"),
        "log_level": env.get(f"{ENV_PREFIX}LOG_LEVEL"),
    }
    return normalize_settings({k: v for k, v in raw.items() if v is not None})


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def feed_env_var(domain: Union[str, DashboardDomain], feed_id: str) -> str:
    """Environment variable holding a feed URL, e.g. RWA_REAL_ESTATE_MARKET_CAP."""
    return f"{ENV_PREFIX}{DashboardDomain(domain).value.upper()}_{feed_id.upper()}"


def _clean_url(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def feed_descriptors(
    domain: Union[str, DashboardDomain],
    environ: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, Optional[str]]] = None,
) -> List[FeedDescriptor]:
    """Descriptors for every feed of `domain`.

    URLs come from the environment unless `overrides` names the feed. A
    missing or blank URL is a valid "no source configured" state.
    """
    env = os.environ if environ is None else environ
    config = get_domain(domain)
    overrides = overrides or {}

    unknown = sorted(set(overrides) - {f.feed_id for f in config.feeds})
    if unknown:
        raise KeyError(f"Unknown feed(s) for {config.domain.value}: {unknown}")

    out: List[FeedDescriptor] = []
    for f in config.feeds:
        if f.feed_id in overrides:
            url = overrides[f.feed_id]
        else:
            url = env.get(feed_env_var(config.domain, f.feed_id))
        out.append(FeedDescriptor(id=f.feed_id, url=_clean_url(url), schema=f.schema_id))
    return out


def configured_feeds(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Dict[str, bool]]:
    return {
        d.value: {desc.id: desc.configured for desc in feed_descriptors(d, environ)}
        for d in DashboardDomain
    }
