# src/pricescout/api/dependencies.py
import random
from functools import lru_cache

import httpx
from fastapi import Depends

from pricescout.adapters.http_price_source import HttpPriceSourceAdapter
from pricescout.adapters.mock_prices import MockPriceGenerator
from pricescout.adapters.stub import UnconfiguredPriceSource
from pricescout.core.config import Settings, get_settings
from pricescout.domain.ports import PriceSourcePort
from pricescout.repositories.base import AbstractKeyValueStore
from pricescout.repositories.memory_store import InMemoryKeyValueStore
from pricescout.repositories.product_store import ProductStore
from pricescout.repositories.sqlite_store import SQLiteKeyValueStore
from pricescout.services.analytics_service import AnalyticsService
from pricescout.services.ingestion_service import IngestionService
from pricescout.services.price_cache import PriceCache
from pricescout.services.search_history import SearchHistory
from pricescout.services.search_service import PriceSearchService


# Shared HTTP Client (Connection Pooling)
@lru_cache
def get_http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        headers={"User-Agent": "PriceScout/1.0"},
        follow_redirects=True,
    )


# Gemeinsame Zufallsquelle für alle randomisierten Heuristiken
@lru_cache
def get_random_source() -> random.Random:
    return random.Random()


# Singleton Key-Value Backend (Initialisiert beim ersten Zugriff)
_backend: AbstractKeyValueStore | None = None


async def get_kv_store(
    settings: Settings = Depends(get_settings),
) -> AbstractKeyValueStore:
    global _backend
    if _backend is None:
        if settings.storage_backend == "memory":
            _backend = InMemoryKeyValueStore()
        else:
            store = SQLiteKeyValueStore(database_url=settings.database_url)
            await store.initialize()
            _backend = store
    return _backend


def get_product_store(
    backend: AbstractKeyValueStore = Depends(get_kv_store),
) -> ProductStore:
    return ProductStore(backend=backend)


def get_price_cache(
    backend: AbstractKeyValueStore = Depends(get_kv_store),
    settings: Settings = Depends(get_settings),
) -> PriceCache:
    return PriceCache(backend=backend, ttl_seconds=settings.cache_ttl_seconds)


def get_search_history(
    backend: AbstractKeyValueStore = Depends(get_kv_store),
    settings: Settings = Depends(get_settings),
) -> SearchHistory:
    return SearchHistory(backend=backend, limit=settings.search_history_limit)


def get_analytics_service(
    backend: AbstractKeyValueStore = Depends(get_kv_store),
    settings: Settings = Depends(get_settings),
) -> AnalyticsService:
    return AnalyticsService(backend=backend, max_entries=settings.analytics_max_entries)


def get_external_price_source(
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> PriceSourcePort:
    if not settings.external_price_api_url:
        return UnconfiguredPriceSource()
    return HttpPriceSourceAdapter(
        http_client=client,
        url=settings.external_price_api_url,
        timeout=settings.external_price_api_timeout_seconds,
    )


def get_price_generator(
    rng: random.Random = Depends(get_random_source),
) -> MockPriceGenerator:
    return MockPriceGenerator(rng=rng)


def get_ingestion_service(
    store: ProductStore = Depends(get_product_store),
    rng: random.Random = Depends(get_random_source),
) -> IngestionService:
    return IngestionService(store=store, rng=rng)


def get_search_service(
    cache: PriceCache = Depends(get_price_cache),
    store: ProductStore = Depends(get_product_store),
    history: SearchHistory = Depends(get_search_history),
    external_source: PriceSourcePort = Depends(get_external_price_source),
    generator: MockPriceGenerator = Depends(get_price_generator),
    rng: random.Random = Depends(get_random_source),
    settings: Settings = Depends(get_settings),
) -> PriceSearchService:
    return PriceSearchService(
        cache=cache,
        store=store,
        history=history,
        external_source=external_source,
        generator=generator,
        rng=rng,
        delay_range_ms=(settings.simulated_delay_min_ms, settings.simulated_delay_max_ms),
    )
