# tests/conftest.py
import random
from collections.abc import Generator
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

import pricescout.api.dependencies as _deps
from pricescout.core.config import Settings, get_settings
from pricescout.main import app
from pricescout.repositories.memory_store import InMemoryKeyValueStore
from pricescout.repositories.product_store import ProductStore


@pytest.fixture
def backend() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def store(backend: InMemoryKeyValueStore) -> ProductStore:
    return ProductStore(backend=backend)


@pytest.fixture
def rng() -> MagicMock:
    # random() = 0.5: in stock, discount gezogen, keine Extreme
    fixed = MagicMock(spec=random.Random)
    fixed.random.return_value = 0.5
    fixed.randrange.side_effect = lambda start, stop: start
    return fixed


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        storage_backend="memory",
        simulated_delay_min_ms=0,
        simulated_delay_max_ms=0,
        external_price_api_url=None,
    )


@pytest.fixture
def client(test_settings: Settings) -> Generator[TestClient, None, None]:
    # Jeder Test startet mit einem leeren In-Memory Backend
    _deps._backend = InMemoryKeyValueStore()
    app.dependency_overrides[get_settings] = lambda: test_settings
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.pop(get_settings, None)
        _deps._backend = None
