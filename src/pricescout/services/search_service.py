# src/pricescout/services/search_service.py
from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable

from pricescout.adapters.mock_prices import MockPriceGenerator
from pricescout.core.metrics import PRICE_RESOLUTIONS
from pricescout.domain.models import (
    PlatformProduct,
    PriceData,
    ProductFilters,
    ProductPricing,
    display_name,
)
from pricescout.domain.ports import (
    ExternalApiError,
    InvalidQueryError,
    NoProductsFoundError,
    PriceSourcePort,
)
from pricescout.repositories.product_store import ProductStore
from pricescout.services.price_cache import PriceCache
from pricescout.services.search_history import SearchHistory

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


def pricing_from_products(query: str, products: list[PlatformProduct]) -> ProductPricing | None:
    """Baut ein Suchergebnis aus Datenbankeinträgen (sortiert, lowest/highest neu berechnet)."""
    return ProductPricing.from_prices(display_name(query), [p.to_price_data() for p in products])


def apply_filters(prices: list[PriceData], filters: ProductFilters) -> list[PriceData]:
    """Behält nur Einträge, die alle gesetzten Filter erfüllen. None = kein Constraint."""

    def _matches(p: PriceData) -> bool:
        if filters.price_min is not None and p.price < filters.price_min:
            return False
        if filters.price_max is not None and p.price > filters.price_max:
            return False
        if filters.in_stock and not p.in_stock:
            return False
        if filters.rating is not None and p.rating < filters.rating:
            return False
        return True

    return [p for p in prices if _matches(p)]


def format_query_with_filters(query: str, filters: ProductFilters) -> str:
    """Hängt die Text-Filter (Farbe, Größe, Marke) an die Query an."""
    parts = [query.strip()]
    extras = (filters.color, filters.size, filters.brand)
    parts.extend(value.strip() for value in extras if value and value.strip())
    return " ".join(parts)


class PriceSearchService:
    """
    Resolution-Pipeline einer Suchanfrage: Cache -> Produktdatenbank -> externe Quelle
    -> Generator. Endet entweder mit einem ProductPricing oder NoProductsFoundError.
    """

    def __init__(
        self,
        cache: PriceCache,
        store: ProductStore,
        history: SearchHistory,
        external_source: PriceSourcePort,
        generator: MockPriceGenerator,
        rng: random.Random,
        delay_range_ms: tuple[int, int] = (1200, 2000),
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._cache = cache
        self._store = store
        self._history = history
        self._external = external_source
        self._generator = generator
        self._rng = rng
        self._delay_range_ms = delay_range_ms
        self._sleep = sleep

    async def search(self, query: str) -> ProductPricing:
        """
        Raises:
            InvalidQueryError: Wenn die Query leer ist.
            NoProductsFoundError: Wenn keine Stufe ein gültiges Ergebnis liefert.
        """
        query = query.strip()
        if not query:
            raise InvalidQueryError()

        # 1. Cache
        cached = await self._cache.get(query)
        if cached is not None and cached.is_valid():
            logger.info("Using cached results for: %s", query)
            await self._history.add(query)
            PRICE_RESOLUTIONS.labels(source="cache").inc()
            return cached

        # 2. Produktdatenbank
        db_products = await self._store.search(query)
        if db_products:
            db_result = pricing_from_products(query, db_products)
            if db_result is not None and db_result.is_valid():
                logger.info("Using database results for: %s", query)
                await self._remember(query, db_result)
                PRICE_RESOLUTIONS.labels(source="database").inc()
                return db_result

        # 3. Externe Quelle (mit simulierter Latenz), Fallback auf den Generator
        await self._sleep(self._simulated_delay_seconds())

        result = await self._fetch_external(query)
        source = "external"
        if result is None or not result.is_valid():
            result = self._generator.generate(query)
            source = "generated"

        if result is None or not result.is_valid():
            PRICE_RESOLUTIONS.labels(source="failed").inc()
            logger.error("Search error: no products found for %s", query)
            raise NoProductsFoundError(query)

        await self._remember(query, result)
        PRICE_RESOLUTIONS.labels(source=source).inc()
        return result

    async def search_filtered(self, query: str, filters: ProductFilters) -> ProductPricing:
        """
        Löst die um Farbe/Größe/Marke erweiterte Query auf und filtert die
        Plattformpreise nach Preis, Rating und Verfügbarkeit.
        """
        if not query.strip():
            raise InvalidQueryError()
        result = await self.search(format_query_with_filters(query, filters))
        return result.model_copy(update={"prices": apply_filters(result.prices, filters)})

    async def _fetch_external(self, query: str) -> ProductPricing | None:
        try:
            return await self._external.fetch_prices(query)
        except ExternalApiError:
            logger.exception("External price source failed for %s, using generated prices", query)
            return None

    async def _remember(self, query: str, result: ProductPricing) -> None:
        await self._cache.set(query, result)
        await self._history.add(query)

    def _simulated_delay_seconds(self) -> float:
        low, high = self._delay_range_ms
        return (low + self._rng.random() * (high - low)) / 1000
