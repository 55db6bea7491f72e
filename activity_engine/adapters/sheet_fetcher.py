"""Retrying CSV fetch with a TTL read-through cache."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from activity_engine.config import (
    CACHE_TTL_SECONDS,
    FETCH_BACKOFF_SECONDS,
    FETCH_RETRIES,
    FETCH_TIMEOUT_SECONDS,
    RETRY_STATUS_CODES,
)

logger = logging.getLogger(__name__)


class FetchError(RuntimeError):
    """Raised when the CSV source cannot be fetched after all retries."""


@dataclass
class _CacheEntry:
    value: str
    stored_at: float


class TTLCache:
    """Keyed text cache; entries older than the TTL are stale but still readable."""

    def __init__(self, ttl_seconds: float = CACHE_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, _CacheEntry] = {}

    def get(self, key: str, allow_stale: bool = False) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if allow_stale or self._clock() - entry.stored_at < self.ttl_seconds:
            return entry.value
        return None

    def set(self, key: str, value: str) -> None:
        self._entries[key] = _CacheEntry(value=value, stored_at=self._clock())

    def clear(self) -> None:
        self._entries.clear()


def build_session(retries: int = FETCH_RETRIES, backoff_factor: float = FETCH_BACKOFF_SECONDS) -> requests.Session:
    """Session that retries connection errors, 429 and 5xx with exponential backoff."""

    retry_strategy = Retry(
        total=retries,
        backoff_factor=backoff_factor,
        status_forcelist=list(RETRY_STATUS_CODES),
        allowed_methods=["GET"],
        raise_on_status=True,
    )
    adapter = HTTPAdapter(max_retries=retry_strategy)
    session = requests.Session()
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class SheetFetcher:
    """Fetch CSV text, serving stale cache content when the network fails."""

    def __init__(
        self,
        cache: Optional[TTLCache] = None,
        retries: int = FETCH_RETRIES,
        backoff_factor: float = FETCH_BACKOFF_SECONDS,
        timeout: float = FETCH_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.cache = cache
        self.timeout = timeout
        self.session = session if session is not None else build_session(retries, backoff_factor)

    def _download(self, url: str) -> str:
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise FetchError(f"Network error after retries: {exc}") from exc
        response.encoding = "utf-8"
        return response.text.lstrip("\ufeff")

    def fetch(self, url: str) -> str:
        if self.cache is not None:
            cached = self.cache.get(url)
            if cached is not None:
                logger.debug("Serving %s from cache", url)
                return cached

        try:
            text = self._download(url)
        except FetchError:
            stale = self.cache.get(url, allow_stale=True) if self.cache is not None else None
            if stale is None:
                raise
            logger.warning("Fetch failed for %s, serving stale cached data", url)
            return stale

        if self.cache is not None:
            self.cache.set(url, text)
        return text
