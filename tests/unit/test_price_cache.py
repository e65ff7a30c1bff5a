import time
from unittest.mock import patch

import pytest

from pricescout.domain.models import PriceData, ProductPricing
from pricescout.repositories.memory_store import InMemoryKeyValueStore
from pricescout.services.price_cache import CACHE_KEY_PREFIX, PriceCache


def _pricing() -> ProductPricing:
    pricing = ProductPricing.from_prices(
        "Iphone 15",
        [
            PriceData(platform="Amazon", price=74479, original_price=79000, discount=6),
            PriceData(platform="Flipkart", price=72199),
        ],
    )
    assert pricing is not None
    return pricing


@pytest.mark.asyncio  # type: ignore[misc]
async def test_cache_hit_and_miss(backend: InMemoryKeyValueStore) -> None:
    cache = PriceCache(backend, ttl_seconds=60)

    # Miss
    assert await cache.get("iphone 15") is None

    # Set
    await cache.set("iphone 15", _pricing())

    # Hit, Query wird normalisiert
    assert await cache.get("  iPhone 15 ") == _pricing()


@pytest.mark.asyncio  # type: ignore[misc]
async def test_cache_ttl_expiry_purges_entry(backend: InMemoryKeyValueStore) -> None:
    ttl = 30 * 60
    cache = PriceCache(backend, ttl_seconds=ttl)

    now = time.time()
    with patch("time.time") as mock_time:
        mock_time.return_value = now
        await cache.set("iphone 15", _pricing())

        # Still valid
        mock_time.return_value = now + ttl - 1
        assert await cache.get("iphone 15") == _pricing()

        # Expired
        mock_time.return_value = now + ttl + 1
        assert await cache.get("iphone 15") is None
        assert await backend.get(CACHE_KEY_PREFIX + "iphone 15") is None


@pytest.mark.asyncio  # type: ignore[misc]
async def test_unreadable_entry_is_a_miss(backend: InMemoryKeyValueStore) -> None:
    cache = PriceCache(backend, ttl_seconds=60)
    await backend.set(CACHE_KEY_PREFIX + "lamp", "not json")

    assert await cache.get("lamp") is None


@pytest.mark.asyncio  # type: ignore[misc]
async def test_clear_expired_only_removes_stale_entries(backend: InMemoryKeyValueStore) -> None:
    cache = PriceCache(backend, ttl_seconds=60)

    now = time.time()
    with patch("time.time") as mock_time:
        mock_time.return_value = now - 120
        await cache.set("old", _pricing())
        mock_time.return_value = now
        await cache.set("fresh", _pricing())
        await backend.set(CACHE_KEY_PREFIX + "garbage", "{")

        removed = await cache.clear_expired()

    assert removed == 2
    assert await backend.keys(CACHE_KEY_PREFIX) == [CACHE_KEY_PREFIX + "fresh"]


@pytest.mark.asyncio  # type: ignore[misc]
async def test_clear_leaves_other_keys(backend: InMemoryKeyValueStore) -> None:
    cache = PriceCache(backend, ttl_seconds=60)
    await cache.set("a", _pricing())
    await backend.set("pricescout_product_db", "{}")

    await cache.clear()

    assert await backend.keys() == ["pricescout_product_db"]
