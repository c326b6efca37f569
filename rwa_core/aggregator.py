"""Concurrent fan-out/fan-in ingestion of a page's feeds.

Every feed runs independently on a worker thread and writes only its own
result slot. `ingest` returns once all of them have settled; a failing feed
becomes a Failure for its id and never affects its siblings.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, Iterable, List, Mapping, Optional

from rwa_core.fetcher import TabularFetcher
from rwa_core.models import FeedDescriptor, FeedResult, Failure, Success, TimeSeries, empty_series
from rwa_core.parser import parse
from rwa_core.schemas import Schema, get_schema

logger = logging.getLogger(__name__)

Fetch = Callable[[str], str]

DEFAULT_MAX_WORKERS = 8


def _describe(exc: BaseException) -> str:
    text = str(exc)
    return text if text else type(exc).__name__


def _load_feed(descriptor: FeedDescriptor, schema: Schema, fetch: Fetch) -> FeedResult:
    try:
        text = fetch(descriptor.url)  # type: ignore[arg-type]
        return Success(parse(text, schema))
    except Exception as exc:
        logger.warning("Feed %s failed: %s", descriptor.id, _describe(exc))
        return Failure(reason=_describe(exc), schema_id=schema.schema_id)


def ingest(
    descriptors: Iterable[FeedDescriptor],
    fetch: Optional[Fetch] = None,
    *,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> Dict[str, FeedResult]:
    descriptors = list(descriptors)
    ids = [d.id for d in descriptors]
    duplicates = sorted({i for i in ids if ids.count(i) > 1})
    if duplicates:
        raise ValueError(f"Duplicate feed ids: {duplicates}")

    # Unknown schema ids are configuration errors and fail before any fetch.
    schemas = {d.id: get_schema(d.schema) for d in descriptors}

    results: Dict[str, FeedResult] = {}
    pending = []
    for d in descriptors:
        if d.configured:
            pending.append(d)
        else:
            schema = schemas[d.id]
            results[d.id] = Success(empty_series(schema.schema_id, schema.fields))

    if pending:
        owned: Optional[TabularFetcher] = None
        if fetch is None:
            owned = TabularFetcher()
            fetch = owned.fetch
        workers = max(1, min(max_workers, len(pending)))
        try:
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="feed") as pool:
                futures = {d.id: pool.submit(_load_feed, d, schemas[d.id], fetch) for d in pending}
                for feed_id, future in futures.items():
                    results[feed_id] = future.result()
        finally:
            if owned is not None:
                owned.close()

    failed = failed_feeds(results)
    logger.info(
        "Ingested %d feed(s): %d fetched, %d failed",
        len(results),
        len(pending),
        len(failed),
    )
    return results


def failed_feeds(results: Mapping[str, FeedResult]) -> List[str]:
    return sorted(feed_id for feed_id, r in results.items() if not r.ok)


def series_for(results: Mapping[str, FeedResult], feed_id: str) -> TimeSeries:
    """Series for `feed_id`, or an empty series when it failed or was never ingested."""
    result = results.get(feed_id)
    if result is None:
        return empty_series("")
    return result.series_or_empty()
