from __future__ import annotations

import json
import logging
import os
import re
import threading
import time
from typing import Any, Dict, List, Tuple

import httpx

from .errors import MissingInputError, UpstreamUnavailable
from .record import RawSplitRecord, records_from_payload
from .timecodec import lenient_number

logger = logging.getLogger(__name__)

_SCRIPT_RE = re.compile(r"<script\b[^>]*>(.*?)</script>", re.IGNORECASE | re.DOTALL)

DEFAULT_CACHE_SECONDS = 15.0
DEFAULT_TIMEOUT = 10.0


def extract_records(html: str) -> List[Dict[str, Any]]:
    """Pull the first embedded JSON array of objects out of the page's scripts."""

    decoder = json.JSONDecoder()
    for script in _SCRIPT_RE.findall(html or ""):
        start = script.find("[")
        while start != -1:
            try:
                value, _ = decoder.raw_decode(script, start)
            except json.JSONDecodeError:
                value = None
            if isinstance(value, list) and value and all(isinstance(row, dict) for row in value):
                return value
            start = script.find("[", start + 1)

    raise MissingInputError("No split data found in provider page")


class SplitsSource:
    """Fetches raw split records from the timing provider's results page."""

    def __init__(
        self,
        source_url: str | None = None,
        cache_seconds: float | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the source.

        Args:
            source_url: Provider results page (defaults to ``SPLITS_SOURCE_URL``)
            cache_seconds: How long a fetched page is reused; 0 disables caching
            timeout: HTTP timeout in seconds
        """
        self.source_url = source_url if source_url is not None else os.getenv("SPLITS_SOURCE_URL", "")
        if cache_seconds is None:
            cache_seconds = lenient_number(os.getenv("SPLITS_CACHE_SECONDS", DEFAULT_CACHE_SECONDS))
        if timeout is None:
            timeout = lenient_number(os.getenv("SPLITS_HTTP_TIMEOUT", DEFAULT_TIMEOUT)) or DEFAULT_TIMEOUT
        self.cache_seconds = max(cache_seconds, 0.0)
        self.timeout = timeout

        self._lock = threading.Lock()
        self._cached: Tuple[float, List[RawSplitRecord]] | None = None

    def fetch_page(self) -> str:
        if not self.source_url:
            raise UpstreamUnavailable("SPLITS_SOURCE_URL is not configured")

        try:
            with httpx.Client(timeout=self.timeout, follow_redirects=True) as client:
                response = client.get(self.source_url)
                response.raise_for_status()
                return response.text
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code if exc.response is not None else "unknown"
            logger.warning("Provider page returned HTTP %s (%s)", status, self.source_url)
            raise UpstreamUnavailable(f"Provider page returned HTTP {status}") from exc
        except httpx.HTTPError as exc:
            logger.warning("Failed to fetch provider page (%s)", exc)
            raise UpstreamUnavailable("Failed to fetch provider page") from exc

    def fetch_raw_records(self) -> List[RawSplitRecord]:
        """Current raw records, reusing a recent fetch when one is cached."""
        with self._lock:
            now = time.monotonic()
            if self._cached is not None and self.cache_seconds:
                fetched_at, records = self._cached
                if now - fetched_at < self.cache_seconds:
                    return records

            rows = extract_records(self.fetch_page())
            records = records_from_payload(rows)
            logger.info("Loaded %d split records from provider", len(records))
            self._cached = (now, records)
            return records

    def clear_cache(self) -> None:
        with self._lock:
            self._cached = None
