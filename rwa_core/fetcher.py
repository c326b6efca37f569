from __future__ import annotations

import logging
from typing import Optional

import requests

from rwa_core.errors import TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class TabularFetcher:
    """One GET per feed URL; surfaces the outcome without retrying."""

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.session = session or requests.Session()
        self.timeout = timeout

    def fetch(self, url: str) -> str:
        logger.debug("GET %s", url)
        try:
            r = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise TransportError(url, reason=str(exc)) from exc
        if not r.ok:
            raise TransportError(url, status=r.status_code, reason=r.reason or "")
        r.encoding = "utf-8"
        return r.text

    __call__ = fetch

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "TabularFetcher":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
