import pytest

from pricescout.adapters.mock_prices import (
    MockPriceGenerator,
    detect_query_category,
    get_base_price,
    platforms_for_category,
)


@pytest.mark.parametrize(
    ("query", "expected"),
    [
        ("iPhone 15 Pro", "smartphones"),
        ("gaming keyboard", "keyboards"),
        ("leather backpack", "bags"),
        ("garden gnome", "other"),
    ],
)
def test_detect_query_category(query: str, expected: str) -> None:
    assert detect_query_category(query) == expected


def test_exact_product_match_beats_category_default() -> None:
    # "macbook pro" steht in der Produkttabelle, Kategorie-Default wäre 30000
    assert get_base_price("Apple MacBook Pro 14") == 139999


def test_first_table_hit_wins() -> None:
    # "book" steht vor "notebook" in der Tabelle
    assert get_base_price("notebook") == 399


def test_category_default_and_floor() -> None:
    assert get_base_price("some laptop") == 30000
    assert get_base_price("garden gnome") == 100


def test_platform_availability_by_category() -> None:
    assert [p.name for p in platforms_for_category("shoes")] == [
        "Amazon",
        "Flipkart",
        "Meesho",
        "Myntra",
    ]
    assert [p.name for p in platforms_for_category("unknown")] == ["Amazon", "Flipkart", "eBay"]


def test_generate_applies_platform_multipliers(rng) -> None:
    generator = MockPriceGenerator(rng)

    result = generator.generate("iphone 15")

    assert result is not None
    assert result.product_name == "Iphone 15"
    assert [p.platform for p in result.prices] == ["Flipkart", "Amazon", "eBay"]
    assert [p.price for p in result.prices] == [72199, 74479, 77519]
    # random()=0.5 -> Rabatt gezogen, randrange -> 3%
    assert all(p.discount == 3 for p in result.prices)
    assert result.lowest_price == 72199
    assert result.highest_price == max(p.original_price for p in result.prices)
    assert result.prices[0].url == "https://www.flipkart.com/search?q=iphone%2015"
    assert result.is_valid()


def test_generate_without_discount(rng) -> None:
    rng.random.return_value = 0.2
    generator = MockPriceGenerator(rng)

    result = generator.generate("wireless mouse")

    assert result is not None
    assert all(p.original_price is None and p.discount is None for p in result.prices)
    assert result.highest_price == max(p.price for p in result.prices)


def test_generate_blank_query(rng) -> None:
    assert MockPriceGenerator(rng).generate("  ") is None


def test_price_ties_round_half_up(rng) -> None:
    # 150 * 0.95 = 142.5
    result = MockPriceGenerator(rng).generate("rice")

    assert result is not None
    assert [(p.platform, p.price) for p in result.prices] == [
        ("Flipkart", 143),
        ("Amazon", 147),
        ("eBay", 153),
    ]
    assert result.prices[0].original_price == 147
