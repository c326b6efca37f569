from __future__ import annotations

from dataclasses import asdict
import logging
import math
from typing import Dict, Mapping, Optional

import numpy as np
import pandas as pd
from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from rwa_api.schemas import ChartOptionModel, DomainModel, MetaDomainsResponse, PageRequestModel
from rwa_core.aggregator import ingest
from rwa_core.config import configure_logging, feed_descriptors, load_settings
from rwa_core.domains import DOMAINS, chart_options, get_domain, resolve
from rwa_core.fetcher import TabularFetcher
from rwa_core.models import FeedResult, Failure
from rwa_core.pages import compute_page

SETTINGS = load_settings()
configure_logging(SETTINGS)

app = FastAPI(title="RWA Dashboard API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://127.0.0.1:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def make_fetcher() -> TabularFetcher:
    return TabularFetcher(timeout=SETTINGS.fetch_timeout)


def _ingest(domain: str, overrides: Optional[Mapping[str, Optional[str]]] = None) -> Dict[str, FeedResult]:
    descriptors = feed_descriptors(domain, overrides=overrides)
    with make_fetcher() as fetcher:
        return ingest(descriptors, fetcher.fetch, max_workers=SETTINGS.max_workers)


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
                pd.Timestamp: lambda ts: ts.isoformat(),
            },
        )
    )


def _error(status_code: int, exc: Exception) -> JSONResponse:
    message = exc.args[0] if isinstance(exc, KeyError) and exc.args else str(exc)
    return JSONResponse(status_code=status_code, content={"error": str(message), "type": type(exc).__name__})


@app.get("/meta/domains")
def meta_domains():
    try:
        domains = []
        for config in DOMAINS.values():
            descriptors = feed_descriptors(config.domain)
            domains.append(
                DomainModel(
                    id=config.domain.value,
                    title=config.title,
                    chart_options=[ChartOptionModel(id=m, label=label) for m, label in chart_options(config.domain)],
                    configured_feeds={d.id: d.configured for d in descriptors},
                )
            )
        return _json(MetaDomainsResponse(domains=domains).model_dump())
    except Exception as exc:
        logger.exception("meta_domains failed")
        return _error(500, exc)


@app.post("/pages/{domain}")
def page(domain: str, request: PageRequestModel):
    try:
        get_domain(domain)
        results = _ingest(domain, overrides=request.feed_urls)
        return _json(compute_page(domain, results, request.active_metric))
    except KeyError as exc:
        return _error(404, exc)
    except Exception as exc:
        logger.exception("page %s failed", domain)
        return _error(500, exc)


@app.get("/charts/{domain}/{metric_id}")
def chart(domain: str, metric_id: str):
    try:
        spec = resolve(domain, metric_id)
        return _json({"domain": domain, "metric_id": metric_id, "chart": asdict(spec) if spec is not None else None})
    except KeyError as exc:
        return _error(404, exc)
    except Exception as exc:
        logger.exception("chart %s/%s failed", domain, metric_id)
        return _error(500, exc)


@app.get("/export/{domain}/{feed_id}")
def export_feed(domain: str, feed_id: str):
    try:
        get_domain(domain).feed(feed_id)
        descriptors = [d for d in feed_descriptors(domain) if d.id == feed_id]
        with make_fetcher() as fetcher:
            result = ingest(descriptors, fetcher.fetch)[feed_id]
    except KeyError as exc:
        return _error(404, exc)
    except Exception as exc:
        logger.exception("export %s/%s failed", domain, feed_id)
        return _error(500, exc)

    if isinstance(result, Failure):
        return JSONResponse(status_code=502, content={"error": result.reason, "type": "FeedFailure"})
    csv_bytes = result.series.to_frame().to_csv(index=False).encode("utf-8")
    filename = f"{domain}_{feed_id}.csv"
    return Response(content=csv_bytes, media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={filename}"})
