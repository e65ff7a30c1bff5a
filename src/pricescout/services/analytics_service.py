# src/pricescout/services/analytics_service.py
from __future__ import annotations

import json
import logging
from collections import Counter

from pydantic import BaseModel, Field

from pricescout.domain.models import AnalyticsSummary, SearchAnalytics, now_ms, round_half_up
from pricescout.repositories.base import AbstractKeyValueStore

logger = logging.getLogger(__name__)

ANALYTICS_KEY = "pricescout_analytics"


class _AnalyticsLog(BaseModel):
    searches: list[SearchAnalytics] = Field(default_factory=list)
    last_updated: int | None = Field(default=None, alias="lastUpdated")

    model_config = {"populate_by_name": True}


class AnalyticsService:
    """
    Protokoll aller Suchen (FIFO, max_entries) plus aggregierte Kennzahlen.
    """

    def __init__(self, backend: AbstractKeyValueStore, max_entries: int = 1000) -> None:
        self._backend = backend
        self._max_entries = max_entries

    @staticmethod
    def _parse(raw: str | None) -> _AnalyticsLog:
        if not raw:
            return _AnalyticsLog()
        try:
            return _AnalyticsLog.model_validate_json(raw)
        except ValueError:
            logger.exception("Analytics log is unreadable, treating it as empty")
            return _AnalyticsLog()

    async def _load(self) -> _AnalyticsLog:
        return self._parse(await self._backend.get(ANALYTICS_KEY))

    async def track(self, event: SearchAnalytics) -> None:
        def _append(raw: str | None) -> str:
            searches = [*self._parse(raw).searches, event][-self._max_entries :]
            updated = _AnalyticsLog(searches=searches, last_updated=now_ms())
            return updated.model_dump_json(by_alias=True)

        await self._backend.update(ANALYTICS_KEY, _append)

    async def top_searches(self, limit: int = 10) -> list[str]:
        log = await self._load()
        counts = Counter(s.query for s in log.searches)
        return [query for query, _ in counts.most_common(limit)]

    async def success_rate(self) -> int:
        log = await self._load()
        if not log.searches:
            return 0
        successful = sum(1 for s in log.searches if s.success)
        return round_half_up(successful / len(log.searches) * 100)

    async def summary(self, limit: int = 10) -> AnalyticsSummary:
        log = await self._load()
        total = len(log.searches)
        average = sum(s.duration for s in log.searches) / total if total else 0.0
        return AnalyticsSummary(
            total_searches=total,
            average_search_time=round(average, 1),
            top_searches=await self.top_searches(limit),
            success_rate=await self.success_rate(),
            last_updated=log.last_updated,
        )

    async def export_json(self) -> str:
        log = await self._load()
        return json.dumps(log.model_dump(mode="json", by_alias=True), indent=2)

    async def clear(self) -> None:
        await self._backend.delete(ANALYTICS_KEY)
