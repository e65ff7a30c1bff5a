# src/pricescout/services/extractors.py
"""
Feld-Extraktoren für unstrukturierte Produkttexte.

Jeder Extraktor bekommt eine rohe Textzeile und liefert den Wert eines einzelnen
Felds oder None. Ein Extraktor wirft nie; None heißt "nicht gefunden".
"""

from __future__ import annotations

import random
import re

MAX_PRICE = 10_000_000

# Plattform-Tokens, die vor der Namensextraktion entfernt werden
_NAME_NOISE_TOKENS = ("amazon", "flipkart", "ebay", "meesho", "myntra", "product", "item")
_NAME_NOISE_PATTERN = re.compile("|".join(_NAME_NOISE_TOKENS), re.IGNORECASE)
_NAME_PATTERN = re.compile(
    r"^\s*([A-Za-z0-9\s\-.]+?)(?:\s*(?:₹|\$|price|rs|rupees|₨))", re.IGNORECASE
)
_NAME_FALLBACK_LENGTH = 50

PLATFORMS = ("Amazon", "Flipkart", "eBay", "Meesho", "Myntra", "Croma", "Snapdeal")

_PRICE_PATTERNS = (
    re.compile(r"₹\s*(\d+[,\d]*)", re.IGNORECASE),
    re.compile(r"\$\s*(\d+[,\d]*)", re.IGNORECASE),
    re.compile(r"rs\.?\s*(\d+[,\d]*)", re.IGNORECASE),
    re.compile(r"rupees?\s*(\d+[,\d]*)", re.IGNORECASE),
    re.compile(r"price\s*:?\s*(\d+[,\d]*)", re.IGNORECASE),
    re.compile(r"cost\s*:?\s*(\d+[,\d]*)", re.IGNORECASE),
    re.compile(r"(?:^|\s)(\d+[,\d]*)(?:\s|$)"),
)

_CURRENCY = r"(?:₹|rs\.?|\$)?"
_ORIGINAL_PRICE_PATTERNS = (
    re.compile(rf"mrp\s*:?\s*{_CURRENCY}\s*(\d+[,\d]*)", re.IGNORECASE),
    re.compile(rf"original\s*(?:price)?\s*:?\s*{_CURRENCY}\s*(\d+[,\d]*)", re.IGNORECASE),
    re.compile(rf"list price\s*:?\s*{_CURRENCY}\s*(\d+[,\d]*)", re.IGNORECASE),
)

_IN_STOCK_PATTERN = re.compile(r"in stock|available|in hand|ready to ship", re.IGNORECASE)
_OUT_OF_STOCK_PATTERN = re.compile(
    r"out of stock|unavailable|not available|coming soon", re.IGNORECASE
)
UNKNOWN_STOCK_OUT_THRESHOLD = 0.15

_RATING_PATTERNS = (
    re.compile(r"rating\s*:?\s*(\d+\.?\d*)\s*(?:/5|star)", re.IGNORECASE),
    re.compile(r"(\d+\.?\d*)\s*(?:out of 5|/5|stars?)", re.IGNORECASE),
)
_STAR_GLYPH = "★"

_REVIEW_PATTERNS = (
    re.compile(r"(\d+)\s*(?:customer\s*)?reviews?", re.IGNORECASE),
    re.compile(r"(\d+)\s*(?:people\s*)?(?:found|rated)", re.IGNORECASE),
    re.compile(r"reviews?\s*:?\s*(\d+)", re.IGNORECASE),
)

_URL_PATTERN = re.compile(r"(https?://\S+)")


def _parse_amount(raw: str) -> float | None:
    try:
        return float(raw.replace(",", ""))
    except ValueError:
        return None


def _first_amount(text: str, patterns: tuple[re.Pattern[str], ...]) -> float | None:
    for pattern in patterns:
        match = pattern.search(text)
        if not match:
            continue
        amount = _parse_amount(match.group(1))
        if amount is not None and 0 < amount < MAX_PRICE:
            return amount
    return None


def extract_product_name(text: str) -> str | None:
    cleaned = _NAME_NOISE_PATTERN.sub("", text)

    match = _NAME_PATTERN.search(cleaned)
    if match:
        name = match.group(1).strip()
        if name:
            return name

    return cleaned[:_NAME_FALLBACK_LENGTH].strip() or None


def extract_platform(text: str) -> str | None:
    lower = text.lower()
    for platform in PLATFORMS:
        if platform.lower() in lower:
            return platform
    return None


def extract_price(text: str) -> float | None:
    """Erster Treffer der Preis-Patterns (in Reihenfolge) mit Wert in (0, 10.000.000)."""
    return _first_amount(text, _PRICE_PATTERNS)


def extract_original_price(text: str) -> float | None:
    """MRP / Original- / Listenpreis, gleiche Wertebereichsregel wie extract_price."""
    return _first_amount(text, _ORIGINAL_PRICE_PATTERNS)


def extract_stock_status(text: str, rng: random.Random) -> bool:
    """
    "Out of stock" schlägt "in stock". Ohne expliziten Hinweis entscheidet der
    injizierte Zufallsgenerator (in stock mit Wahrscheinlichkeit 0.85).
    """
    if _OUT_OF_STOCK_PATTERN.search(text):
        return False
    if _IN_STOCK_PATTERN.search(text):
        return True
    return rng.random() > UNKNOWN_STOCK_OUT_THRESHOLD


def extract_rating(text: str) -> float | None:
    for pattern in _RATING_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        try:
            rating = float(match.group(1))
        except ValueError:
            continue
        if 1 <= rating <= 5:
            return rating

    stars = text.count(_STAR_GLYPH)
    if stars > 0:
        return float(min(5, stars))

    return None


def extract_reviews(text: str) -> int | None:
    for pattern in _REVIEW_PATTERNS:
        match = pattern.search(text)
        if match:
            reviews = int(match.group(1))
            if reviews >= 0:
                return reviews
    return None


def extract_url(text: str) -> str | None:
    match = _URL_PATTERN.search(text)
    return match.group(1) if match else None
