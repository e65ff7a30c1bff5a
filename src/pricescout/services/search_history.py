from __future__ import annotations

import json
import logging

from pricescout.repositories.base import AbstractKeyValueStore
from pricescout.services.price_cache import normalize_query

logger = logging.getLogger(__name__)

SEARCH_HISTORY_KEY = "pricescout_search_history"


class SearchHistory:
    """Most-recent-first list of distinct normalized queries, bounded by limit."""

    def __init__(self, backend: AbstractKeyValueStore, limit: int = 10) -> None:
        self._backend = backend
        self._limit = limit

    @staticmethod
    def _parse(raw: str | None) -> list[str]:
        if not raw:
            return []
        try:
            history = json.loads(raw)
        except ValueError:
            logger.exception("Search history is unreadable, treating it as empty")
            return []
        if not isinstance(history, list):
            return []
        return [str(q) for q in history]

    async def get(self) -> list[str]:
        return self._parse(await self._backend.get(SEARCH_HISTORY_KEY))

    async def add(self, query: str) -> list[str]:
        normalized = normalize_query(query)
        if not normalized:
            return await self.get()

        def _prepend(raw: str | None) -> str:
            history = [q for q in self._parse(raw) if q.lower() != normalized]
            return json.dumps([normalized, *history][: self._limit])

        return self._parse(await self._backend.update(SEARCH_HISTORY_KEY, _prepend))

    async def clear(self) -> None:
        await self._backend.delete(SEARCH_HISTORY_KEY)
