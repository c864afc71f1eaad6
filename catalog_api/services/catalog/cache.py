"""
In-memory TTL caches for catalog data and company keys.

Entries are whole-value replacements keyed by company slug, so concurrent
refreshes at worst repeat an upstream fetch. Entries expire by age only;
there is no size bound.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from shared.config.logging import get_logger

from catalog_api.schemas import CatalogData

logger = get_logger(__name__)

K = TypeVar("K")
V = TypeVar("V")

DEFAULT_TTL_SECONDS = 60 * 60


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    value: V
    stored_at: float


class TTLCache(Generic[K, V]):
    """
    Dict-backed cache whose entries go stale ``ttl`` seconds after storage.

    ``clock`` returns seconds and defaults to ``time.monotonic``. Tests
    inject a controllable one.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl = ttl
        self.clock = clock
        self._entries: dict[K, CacheEntry[V]] = {}

    def _is_fresh(self, entry: CacheEntry[V]) -> bool:
        return self.clock() - entry.stored_at < self.ttl

    def get(self, key: K) -> V | None:
        """Fresh value for ``key``, or ``None`` on miss or staleness."""
        entry = self._entries.get(key)
        if entry is None or not self._is_fresh(entry):
            return None
        return entry.value

    def contains(self, key: K) -> bool:
        entry = self._entries.get(key)
        return entry is not None and self._is_fresh(entry)

    def put(self, key: K, value: V) -> None:
        self._entries[key] = CacheEntry(value=value, stored_at=self.clock())

    def invalidate(self, key: K) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class CatalogCache(TTLCache[str, CatalogData]):
    """
    Catalog data per company slug.

    An empty product list is never stored, so a transient empty answer
    from Notion is retried on the next request instead of being served
    for the whole TTL.
    """

    def put(self, key: str, value: CatalogData) -> None:
        if not value.products:
            logger.info("Skipping cache for empty catalog", company_slug=key)
            return
        super().put(key, value)


class CompanyKeyCache(TTLCache[str, str]):
    """Secret key per company slug. Empty keys are cached too."""
