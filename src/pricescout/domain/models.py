# src/pricescout/domain/models.py
from __future__ import annotations

import math
import time
import uuid

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


def now_ms() -> int:
    """Epoch-Millisekunden, das Zeitformat aller persistierten Datensätze."""
    return int(time.time() * 1000)


def round_half_up(value: float) -> int:
    """Ganzzahlige Rundung mit .5 nach oben (nicht banker's rounding wie round())."""
    return math.floor(value + 0.5)


class _CamelModel(BaseModel):
    """Persistierte und ausgelieferte JSON-Dokumente verwenden camelCase-Keys."""

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


# ---------------------------------------------------------------------------
# Aggregate: PlatformProduct
# Eine Preisbeobachtung eines Produkts auf genau einer Plattform.
# ---------------------------------------------------------------------------


class PlatformProduct(_CamelModel):
    """
    Eintrag der Produktdatenbank.
    Domänen-Constraints (Preisbereich, Rating, Reviews) prüft der Record-Validator,
    damit Importe abgelehnte Datensätze melden können statt abzubrechen.
    """

    id: str = Field(default_factory=lambda: f"product-{uuid.uuid4()}")
    product_name: str
    platform: str = "Unknown"
    price: float
    original_price: float | None = None
    discount: int | None = None
    in_stock: bool = True
    rating: float = 4.0
    reviews: int = 0
    url: str = ""
    category: str = "other"
    timestamp: int = Field(default_factory=now_ms)

    model_config = {"frozen": True}

    def to_price_data(self) -> PriceData:
        return PriceData(
            platform=self.platform,
            price=self.price,
            original_price=self.original_price,
            discount=self.discount,
            in_stock=self.in_stock,
            rating=self.rating,
            reviews=self.reviews,
            url=self.url,
        )


def normalize_product_key(name: str) -> str:
    """Bucket-Key der Produktdatenbank: lowercase, ohne Whitespace."""
    return "".join(name.lower().split())


# ---------------------------------------------------------------------------
# Suchergebnis
# ---------------------------------------------------------------------------


class PriceData(_CamelModel):
    platform: str
    price: float
    original_price: float | None = None
    discount: int | None = None
    in_stock: bool = True
    rating: float = 0.0
    reviews: int = 0
    url: str = ""

    model_config = {"frozen": True}


class ProductPricing(_CamelModel):
    product_name: str
    prices: list[PriceData]
    lowest_price: float
    highest_price: float

    @classmethod
    def from_prices(cls, product_name: str, prices: list[PriceData]) -> ProductPricing | None:
        """
        Baut ein Ergebnis aus unsortierten Plattformpreisen.
        lowest = min(price), highest = max(originalPrice ?? price).
        """
        if not prices:
            return None
        ordered = sorted(prices, key=lambda p: p.price)
        return cls(
            product_name=product_name,
            prices=ordered,
            lowest_price=ordered[0].price,
            highest_price=max(
                p.original_price if p.original_price is not None else p.price for p in ordered
            ),
        )

    def is_valid(self) -> bool:
        return (
            len(self.prices) > 0
            and self.lowest_price > 0
            and self.highest_price >= self.lowest_price
        )


class CacheEntry(_CamelModel):
    data: ProductPricing
    timestamp: int = Field(default_factory=now_ms)


def display_name(query: str) -> str:
    """Produktname eines Suchergebnisses: Query mit großem Anfangsbuchstaben."""
    return query[:1].upper() + query[1:]


# ---------------------------------------------------------------------------
# Filter & Analytics
# ---------------------------------------------------------------------------


class ProductFilters(_CamelModel):
    price_min: float | None = Field(default=None, ge=0)
    price_max: float | None = Field(default=None, ge=0)
    rating: float | None = Field(default=None, ge=0, le=5)
    in_stock: bool | None = None
    color: str | None = None
    size: str | None = None
    brand: str | None = None


class SearchAnalytics(_CamelModel):
    query: str
    timestamp: int = Field(default_factory=now_ms)
    duration: float = Field(ge=0, description="Suchdauer in Millisekunden")
    result_count: int = Field(ge=0)
    filters: ProductFilters = Field(default_factory=ProductFilters)
    platform: str | None = None
    success: bool


class AnalyticsSummary(_CamelModel):
    total_searches: int
    average_search_time: float
    top_searches: list[str]
    success_rate: int
    last_updated: int | None = None


# ---------------------------------------------------------------------------
# Produktdatenbank: Statistiken & Importe
# ---------------------------------------------------------------------------


class DatabaseStats(_CamelModel):
    total_products: int = 0
    total_entries: int = 0
    platforms: list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)


class ImportReport(_CamelModel):
    accepted: int = 0
    rejected: int = 0
    unparsed: int = 0
    errors: list[str] = Field(default_factory=list)


class ImportPayload(BaseModel):
    data: str = Field(min_length=1, description="Roher Import-Inhalt (Text, JSON oder CSV)")
