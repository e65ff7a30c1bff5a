import pytest

from pricescout.services.extractors import (
    extract_original_price,
    extract_platform,
    extract_price,
    extract_product_name,
    extract_rating,
    extract_reviews,
    extract_stock_status,
    extract_url,
)

_LISTING = "Amazon iPhone 15 price: 75000 rating 4.5/5 200 reviews in stock https://a.co/x"


# ---------------------------------------------------------------------------
# Name
# ---------------------------------------------------------------------------


def test_name_strips_platform_and_stops_at_price_marker() -> None:
    assert extract_product_name(_LISTING) == "iPhone 15"


def test_name_stops_at_currency_symbol() -> None:
    assert extract_product_name("Flipkart Nike Shoes ₹7,999") == "Nike Shoes"


def test_name_falls_back_to_first_50_characters() -> None:
    text = "A very long description without any marker that keeps going and going"
    assert extract_product_name(text) == text[:50].strip()


def test_name_empty_after_stripping_returns_none() -> None:
    assert extract_product_name("  amazon  ") is None


# ---------------------------------------------------------------------------
# Platform
# ---------------------------------------------------------------------------


def test_platform_case_insensitive() -> None:
    assert extract_platform("bought on FLIPKART yesterday") == "Flipkart"


def test_platform_first_in_list_wins() -> None:
    # Amazon steht in der Liste vor eBay
    assert extract_platform("ebay vs amazon") == "Amazon"


def test_platform_missing() -> None:
    assert extract_platform("local shop listing") is None


# ---------------------------------------------------------------------------
# Price
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Phone ₹ 12,499 only", 12499),
        ("Headphones $199", 199),
        ("Jeans Rs. 1,499", 1499),
        ("Lamp rupees 800", 800),
        ("Price: 75000", 75000),
        ("cost 450 today", 450),
        ("Kettle 2499 great deal", 2499),
    ],
)
def test_price_patterns(text: str, expected: float) -> None:
    assert extract_price(text) == expected


def test_price_rejects_zero_and_out_of_range() -> None:
    assert extract_price("Gift price: 0") is None
    assert extract_price("Yacht ₹10,000,000") is None


def test_price_falls_through_to_next_pattern() -> None:
    # ₹0 ist ungültig, der Label-Treffer zählt
    assert extract_price("Deal ₹0 price: 300") == 300


def test_price_missing() -> None:
    assert extract_price("No numbers here at all") is None


# ---------------------------------------------------------------------------
# Original price
# ---------------------------------------------------------------------------


def test_original_price_mrp() -> None:
    assert extract_original_price("Shoes price 2999 MRP: ₹3,999") == 3999


def test_original_price_list_price() -> None:
    assert extract_original_price("Lamp list price ₹1500") == 1500


def test_original_price_requires_label() -> None:
    assert extract_original_price("Shoes ₹2999") is None


# ---------------------------------------------------------------------------
# Stock
# ---------------------------------------------------------------------------


def test_out_of_stock_wins_over_in_stock(rng) -> None:
    assert extract_stock_status("in stock soon, currently out of stock", rng) is False
    rng.random.assert_not_called()


def test_unavailable_is_not_read_as_available(rng) -> None:
    assert extract_stock_status("currently unavailable", rng) is False


def test_in_stock_phrase(rng) -> None:
    assert extract_stock_status("Ready to ship today", rng) is True
    rng.random.assert_not_called()


def test_stock_fallback_uses_random_source(rng) -> None:
    rng.random.return_value = 0.5
    assert extract_stock_status("no hint", rng) is True

    rng.random.return_value = 0.1
    assert extract_stock_status("no hint", rng) is False


# ---------------------------------------------------------------------------
# Rating, Reviews, URL
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("rating: 4.2/5", 4.2),
        ("rated 3.5 out of 5", 3.5),
        ("4 stars overall", 4.0),
        ("★★★", 3.0),
        ("★★★★★★★", 5.0),
    ],
)
def test_rating_patterns(text: str, expected: float) -> None:
    assert extract_rating(text) == expected


def test_rating_out_of_range_is_ignored() -> None:
    assert extract_rating("rating: 7/5") is None


def test_reviews_patterns() -> None:
    assert extract_reviews("1200 customer reviews") == 1200
    assert extract_reviews("35 people rated this") == 35
    assert extract_reviews("Reviews: 88") == 88
    assert extract_reviews("nothing") is None


def test_url_first_token() -> None:
    assert extract_url("see https://a.co/x and http://b.co/y") == "https://a.co/x"
    assert extract_url("no link") is None
