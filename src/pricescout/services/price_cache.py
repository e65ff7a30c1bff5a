from __future__ import annotations

import logging
import time

from pricescout.core.metrics import CACHE_HITS, CACHE_MISSES
from pricescout.domain.models import CacheEntry, ProductPricing
from pricescout.repositories.base import AbstractKeyValueStore

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "pricescout_cache_"


def normalize_query(query: str) -> str:
    return query.strip().lower()


class PriceCache:
    """
    TTL-basierter Cache für Suchergebnisse, ein Eintrag pro normalisierter Query.
    Abgelaufene Einträge werden beim Lesen entfernt (lazy purge).
    """

    def __init__(self, backend: AbstractKeyValueStore, ttl_seconds: int) -> None:
        self._backend = backend
        self._ttl_ms = ttl_seconds * 1000

    @staticmethod
    def _key(query: str) -> str:
        return CACHE_KEY_PREFIX + normalize_query(query)

    def _is_expired(self, entry: CacheEntry) -> bool:
        return (time.time() * 1000 - entry.timestamp) > self._ttl_ms

    async def get(self, query: str) -> ProductPricing | None:
        """Holt ein Ergebnis aus dem Cache, sofern vorhanden und nicht abgelaufen."""
        key = self._key(query)
        raw = await self._backend.get(key)
        if raw is None:
            CACHE_MISSES.inc()
            return None

        try:
            entry = CacheEntry.model_validate_json(raw)
        except ValueError:
            logger.exception("Cache entry %s is unreadable", key)
            CACHE_MISSES.inc()
            return None

        if self._is_expired(entry):
            await self._backend.delete(key)
            CACHE_MISSES.inc()
            return None

        CACHE_HITS.inc()
        return entry.data

    async def set(self, query: str, data: ProductPricing) -> None:
        """Speichert ein Ergebnis mit aktuellem Zeitstempel."""
        entry = CacheEntry(data=data, timestamp=int(time.time() * 1000))
        await self._backend.set(self._key(query), entry.model_dump_json(by_alias=True))

    async def clear_expired(self) -> int:
        removed = 0
        for key in await self._backend.keys(CACHE_KEY_PREFIX):
            raw = await self._backend.get(key)
            if raw is None:
                continue
            try:
                expired = self._is_expired(CacheEntry.model_validate_json(raw))
            except ValueError:
                expired = True
            if expired:
                await self._backend.delete(key)
                removed += 1
        if removed:
            logger.info("Purged %d expired cache entries", removed)
        return removed

    async def clear(self) -> None:
        for key in await self._backend.keys(CACHE_KEY_PREFIX):
            await self._backend.delete(key)
