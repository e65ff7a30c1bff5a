# src/pricescout/adapters/http_price_source.py
from __future__ import annotations

import logging
import time

import httpx
from pydantic import BaseModel, Field

from pricescout.core.metrics import EXTERNAL_API_COUNT, EXTERNAL_API_DURATION
from pricescout.domain.models import PriceData, ProductPricing
from pricescout.domain.ports import ExternalApiError, PriceSourcePort

logger = logging.getLogger(__name__)

_SOURCE = "price_api"

# ---------------------------------------------------------------------------
# Interne Rohdaten-Schemas (für typisiertes Parsing der API-Response)
# ---------------------------------------------------------------------------


class _ApiProduct(BaseModel):
    """Alle Felder optional, die Aggregator-Daten sind inkonsistent."""

    platform: str | None = None
    price: float | str | None = None
    original_price: float | str | None = Field(default=None, alias="originalPrice")
    discount: int | None = None
    in_stock: bool | None = Field(default=None, alias="inStock")
    rating: float | str | None = None
    reviews: int | str | None = None
    url: str | None = None

    model_config = {"populate_by_name": True}


class _ApiResponse(BaseModel):
    product_name: str | None = Field(default=None, alias="productName")
    products: list[_ApiProduct] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


def _to_number(value: float | str | int | None) -> float:
    if value is None:
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


class HttpPriceSourceAdapter(PriceSourcePort):
    """
    Adapter für eine externe Preis-Aggregator-API.
    POST {"query": ...} an die konfigurierte URL; normalisiert die Antwort
    in ein ProductPricing.
    """

    def __init__(self, http_client: httpx.AsyncClient, url: str, timeout: float = 10.0) -> None:
        self._client = http_client
        self._url = url
        self._timeout = timeout

    async def fetch_prices(self, query: str) -> ProductPricing | None:
        started = time.perf_counter()
        try:
            response = await self._client.post(
                self._url, json={"query": query}, timeout=self._timeout
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            EXTERNAL_API_COUNT.labels(source=_SOURCE, status="error").inc()
            raise ExternalApiError(_SOURCE, str(e)) from e
        except httpx.RequestError as e:
            EXTERNAL_API_COUNT.labels(source=_SOURCE, status="error").inc()
            raise ExternalApiError(_SOURCE, f"Connection error: {e}") from e
        finally:
            EXTERNAL_API_DURATION.labels(source=_SOURCE).observe(time.perf_counter() - started)

        EXTERNAL_API_COUNT.labels(source=_SOURCE, status="ok").inc()
        try:
            raw = _ApiResponse.model_validate(response.json())
        except ValueError as e:
            raise ExternalApiError(_SOURCE, f"Malformed response: {e}") from e

        return self._normalize(raw)

    # ------------------------------------------------------------------
    # Private Normalisierungslogik
    # ------------------------------------------------------------------

    @staticmethod
    def _normalize(raw: _ApiResponse) -> ProductPricing | None:
        if not raw.products:
            return None

        prices = [
            PriceData(
                platform=p.platform or "Unknown",
                price=_to_number(p.price),
                original_price=_to_number(p.original_price) if p.original_price else None,
                discount=p.discount or None,
                in_stock=p.in_stock is not False,
                rating=_to_number(p.rating),
                reviews=int(_to_number(p.reviews)),
                url=p.url or "",
            )
            for p in raw.products
        ]
        return ProductPricing.from_prices(raw.product_name or "Product", prices)
