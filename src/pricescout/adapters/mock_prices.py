# src/pricescout/adapters/mock_prices.py
"""
Deterministischer Preisgenerator als letzte Fallback-Stufe der Resolution-Pipeline.

Basispreis: erster Substring-Treffer in PRODUCT_BASE_PRICES (Tabellenreihenfolge),
sonst Kategorie-Default. Ein exakter Produkttreffer gewinnt immer gegen den
Kategorie-Default, auch wenn die Kategorieerkennung etwas anderes nahelegt.
"""

from __future__ import annotations

import random
import re
from dataclasses import dataclass
from urllib.parse import quote

from pricescout.domain.models import PriceData, ProductPricing, display_name, round_half_up
from pricescout.domain.ports import PriceSourcePort


@dataclass(frozen=True)
class _Platform:
    name: str
    search_url: str
    price_variation: float


ECOMMERCE_PLATFORMS = (
    _Platform("Amazon", "https://www.amazon.in/s?k=", 0.98),
    _Platform("Flipkart", "https://www.flipkart.com/search?q=", 0.95),
    _Platform("eBay", "https://www.ebay.in/sch/i.html?_nkw=", 1.02),
    _Platform("Meesho", "https://www.meesho.com/search?q=", 0.90),
    _Platform("Myntra", "https://www.myntra.com/search?q=", 0.97),
)

_ELECTRONICS = ("Amazon", "Flipkart", "eBay")
_ELECTRONICS_AND_FASHION = ("Amazon", "Flipkart", "eBay", "Myntra")
_FASHION = ("Amazon", "Myntra", "Meesho", "Flipkart")
_HOME = ("Amazon", "Flipkart", "Meesho")

PLATFORMS_BY_CATEGORY: dict[str, tuple[str, ...]] = {
    "electronics": _ELECTRONICS,
    "smartphones": _ELECTRONICS,
    "laptops": _ELECTRONICS,
    "headphones": _ELECTRONICS_AND_FASHION,
    "monitors": _ELECTRONICS,
    "keyboards": _ELECTRONICS,
    "mouse": _ELECTRONICS,
    "watches": _ELECTRONICS_AND_FASHION,
    "cameras": _ELECTRONICS,
    "tablets": _ELECTRONICS,
    "clothing": _FASHION,
    "shoes": _FASHION,
    "bags": _FASHION,
    "books": _ELECTRONICS,
    "chargers": _ELECTRONICS_AND_FASHION,
    "cables": _ELECTRONICS,
    "speakers": _ELECTRONICS_AND_FASHION,
    "furniture": _HOME,
    "home": _HOME,
    "other": _ELECTRONICS,
}

# Basispreise in INR; Schlüssel werden als Substring der Query gesucht.
PRODUCT_BASE_PRICES: dict[str, int] = {
    # Electronics & Gadgets
    "iphone 15": 75999,
    "iphone 14": 59999,
    "iphone 13": 49999,
    "samsung galaxy s24": 58999,
    "samsung galaxy s23": 45999,
    "oneplus 12": 44999,
    "realme 12": 22999,
    "poco x6": 18999,
    "macbook pro": 139999,
    "macbook air": 119999,
    "dell xps 13": 89999,
    "hp pavilion": 49999,
    "asus vivobook": 54999,
    "lenovo thinkpad": 64999,
    "sony wh-ch720": 7499,
    "bose quietcomfort": 28999,
    "airpods pro": 19999,
    "jbl flip 6": 8999,
    "samsung monitor 27": 22999,
    "lg monitor 24": 14999,
    "mechanical keyboard": 6999,
    "wireless mouse": 1999,
    "apple watch series 9": 41999,
    "fitbit versa": 15999,
    "canon eos r50": 94999,
    "sony a6400": 74999,
    "ipad air": 59999,
    "samsung galaxy tab": 34999,
    "tv 55 inch": 49999,
    "air conditioner": 34999,
    # Fashion & Accessories
    "men shirt": 999,
    "women shirt": 1299,
    "jeans": 1499,
    "nike shoes": 7999,
    "adidas shoes": 6999,
    "puma shoes": 5999,
    "sports shoes": 4999,
    "casual shoes": 2999,
    "formal shoes": 3999,
    "leather belt": 1499,
    "winter jacket": 4999,
    "summer dress": 1999,
    "track suit": 2999,
    "sports t-shirt": 999,
    "cotton socks": 399,
    # Books & Stationery
    "book": 399,
    "novels": 349,
    "self help book": 499,
    "technical books": 799,
    "notebook": 199,
    "pen set": 299,
    "pencil box": 499,
    "sketch pad": 599,
    "markers set": 399,
    "calendar": 249,
    # Home & Kitchen
    "coffee maker": 3999,
    "blender": 2999,
    "microwave": 8999,
    "water heater": 12999,
    "washing machine": 24999,
    "refrigerator": 34999,
    "cooking oil set": 1299,
    "non-stick pan": 1999,
    "utensil set": 1499,
    "plates set": 999,
    "bedsheet": 1299,
    "pillow cover": 499,
    "curtains": 1999,
    "table lamp": 1299,
    "wall clock": 999,
    # Furniture
    "gaming chair": 12999,
    "office desk": 24999,
    "wooden chair": 8999,
    "study table": 15999,
    "bookshelf": 9999,
    "shoe rack": 2999,
    "wardrobe": 19999,
    "bed frame": 14999,
    "sofa set": 34999,
    "dining table": 24999,
    # Beauty & Personal Care
    "face cream": 599,
    "shampoo": 399,
    "conditioner": 399,
    "body lotion": 499,
    "face wash": 349,
    "lipstick": 499,
    "nail polish": 299,
    "perfume": 1299,
    "deodorant": 299,
    "toothbrush": 149,
    "toothpaste": 199,
    # Sports & Fitness
    "dumbbells": 2999,
    "yoga mat": 1299,
    "resistance bands": 799,
    "skipping rope": 399,
    "cricket bat": 1999,
    "badminton racket": 1499,
    "football": 999,
    "basketball": 1299,
    "tennis racket": 3999,
    "gym bag": 1999,
    # Groceries & Food
    "rice": 150,
    "flour": 100,
    "salt": 50,
    "sugar": 100,
    "cooking oil": 200,
    "tea": 299,
    "coffee": 349,
    "milk": 100,
    "eggs": 80,
    "butter": 399,
    # Travel & Bags
    "travel bag": 2999,
    "backpack": 1999,
    "laptop bag": 1499,
    "suitcase": 3999,
    "shoulder bag": 1299,
    "crossbody bag": 999,
    "school bag": 1299,
    "hand bag": 1999,
    # Gaming
    "gaming headset": 4999,
    "gaming mouse": 2999,
    "ps5": 54999,
    "xbox series x": 49999,
    "gaming monitor": 24999,
    # Cables & Chargers
    "phone charger": 1299,
    "usb-c cable": 499,
    "micro usb cable": 399,
    "lightning cable": 599,
    "hdmi cable": 399,
    "power bank": 1999,
    "wireless charger": 1499,
    # Speakers & Audio
    "bluetooth speaker": 5999,
    "portable speaker": 3999,
    "home speaker": 8999,
    "studio monitor": 19999,
    "earbuds": 2999,
    # Miscellaneous
    "watch": 4999,
    "wall art": 999,
    "photo frame": 599,
    "plant pot": 499,
    "mirror": 1299,
    "canvas": 799,
    "umbrella": 499,
    "water bottle": 599,
    "lunch box": 799,
    "thermometer": 299,
}

MIN_BASE_PRICE = 100

DEFAULT_CATEGORY_PRICES: dict[str, int] = {
    "mobilephones": 10000,
    "smartphones": 10000,
    "laptops": 30000,
    "headphones": 2000,
    "monitors": 10000,
    "keyboards": 1000,
    "mouse": 1000,
    "watches": 1000,
    "cameras": 5000,
    "tablets": 14000,
    "clothing": 500,
    "shoes": 1000,
    "bags": 100,
    "books": 100,
    "chargers": 100,
    "cables": 100,
    "speakers": 1000,
    "furniture": 1000,
    "electronics": 15000,
}

# Query-seitige Kategorieerkennung, unabhängig vom Klassifikator der Ingestion.
_QUERY_CATEGORY_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = tuple(
    (category, re.compile(pattern))
    for category, pattern in (
        ("smartphones", r"iphone|samsung galaxy|oneplus|realme|poco"),
        ("laptops", r"laptop|macbook|dell|hp|asus|lenovo|thinkpad"),
        ("headphones", r"headphones|earbuds|airpods|jbl|bose|sony wh"),
        ("monitors", r"monitor|display"),
        ("keyboards", r"keyboard"),
        ("mouse", r"mouse"),
        ("watches", r"watch|smartwatch|apple watch|fitbit"),
        ("cameras", r"camera|dslr|eos|sony a"),
        ("tablets", r"tablet|ipad"),
        ("clothing", r"shirt|pants|dress|top|jacket|jeans"),
        ("shoes", r"shoe|sneaker|boot|nike|adidas"),
        ("bags", r"bag|backpack"),
        ("books", r"book"),
        ("chargers", r"charger|charging"),
        ("cables", r"cable|cord|usb"),
        ("speakers", r"speaker|bluetooth"),
        ("furniture", r"chair|table|desk"),
        ("home", r"lamp|pillow|bed"),
        ("electronics", r"tv|television|projector|ac|refrigerator"),
    )
)


def detect_query_category(query: str) -> str:
    lower = query.lower()
    for category, pattern in _QUERY_CATEGORY_PATTERNS:
        if pattern.search(lower):
            return category
    return "other"


def get_base_price(query: str) -> int:
    lower = query.lower()
    for product, base_price in PRODUCT_BASE_PRICES.items():
        if product in lower:
            return base_price
    category = detect_query_category(query)
    return max(MIN_BASE_PRICE, DEFAULT_CATEGORY_PRICES.get(category, MIN_BASE_PRICE))


def platforms_for_category(category: str) -> list[_Platform]:
    names = PLATFORMS_BY_CATEGORY.get(category, PLATFORMS_BY_CATEGORY["other"])
    return [p for p in ECOMMERCE_PLATFORMS if p.name in names]


class MockPriceGenerator(PriceSourcePort):
    """Synthesizes plausible per-platform prices from the built-in tables."""

    def __init__(self, rng: random.Random) -> None:
        self._rng = rng

    async def fetch_prices(self, query: str) -> ProductPricing | None:
        return self.generate(query)

    def generate(self, query: str) -> ProductPricing | None:
        if not query or not query.strip():
            return None

        category = detect_query_category(query)
        base_price = get_base_price(query)
        prices = [self._platform_price(p, base_price, query) for p in platforms_for_category(category)]
        return ProductPricing.from_prices(display_name(query), prices)

    def _platform_price(self, platform: _Platform, base_price: int, query: str) -> PriceData:
        price = round_half_up(base_price * platform.price_variation)

        # Rabatt von 3-14% in ~60% der Fälle
        has_discount = self._rng.random() > 0.4
        discount = self._rng.randrange(3, 15) if has_discount else 0
        original_price = round_half_up(price / (1 - discount / 100)) if has_discount else None

        return PriceData(
            platform=platform.name,
            price=price,
            original_price=original_price,
            discount=discount or None,
            in_stock=self._rng.random() > 0.12,
            rating=round(self._rng.random() * 0.8 + 4.0, 1),
            reviews=self._rng.randrange(150, 8150),
            url=platform.search_url + quote(query, safe=""),
        )
