# src/pricescout/services/record_assembler.py
from __future__ import annotations

import logging
import random

from pricescout.domain.models import PlatformProduct, round_half_up
from pricescout.services import extractors
from pricescout.services.categorizer import classify_category

logger = logging.getLogger(__name__)

DEFAULT_PLATFORM = "Unknown"
DEFAULT_RATING = 4.0
DEFAULT_REVIEWS = 0
MIN_NAME_LENGTH = 3


def compute_discount(price: float, original_price: float | None) -> int | None:
    """Rabatt in Prozent, nur wenn der Originalpreis über dem Preis liegt."""
    if original_price is None or original_price <= price:
        return None
    return round_half_up((original_price - price) / original_price * 100)


def assemble_product(text: str, rng: random.Random) -> PlatformProduct | None:
    """
    Baut aus einer Textzeile einen Kandidaten-Datensatz.
    Name und Preis sind Pflicht; fehlt eines davon, liefert die Funktion None.
    """
    name = extractors.extract_product_name(text)
    if not name:
        logger.warning("Could not extract product name from %r", text)
        return None

    price = extractors.extract_price(text)
    if price is None:
        logger.warning("Could not extract price from %r", text)
        return None

    original_price = extractors.extract_original_price(text)
    if original_price is not None and original_price < price:
        original_price = None
    rating = extractors.extract_rating(text)
    reviews = extractors.extract_reviews(text)

    return PlatformProduct(
        product_name=name,
        platform=extractors.extract_platform(text) or DEFAULT_PLATFORM,
        price=price,
        original_price=original_price,
        discount=compute_discount(price, original_price),
        in_stock=extractors.extract_stock_status(text, rng),
        rating=rating if rating is not None else DEFAULT_RATING,
        reviews=reviews if reviews is not None else DEFAULT_REVIEWS,
        url=extractors.extract_url(text) or "",
        category=classify_category(name),
    )


def validate_product(product: PlatformProduct) -> list[str]:
    """Returns one error string per violated constraint; empty means accepted."""
    errors: list[str] = []

    if len(product.product_name) < MIN_NAME_LENGTH:
        errors.append("Invalid product name")

    if product.price <= 0 or product.price > extractors.MAX_PRICE:
        errors.append("Price out of reasonable range")

    if product.rating < 1 or product.rating > 5:
        errors.append("Rating must be between 1-5")

    if product.reviews < 0:
        errors.append("Reviews cannot be negative")

    return errors
