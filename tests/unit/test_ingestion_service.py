import json

import pytest

from pricescout.domain.ports import ImportFormatError
from pricescout.repositories.product_store import ProductStore
from pricescout.services.ingestion_service import IngestionService


@pytest.fixture
def service(store: ProductStore, rng) -> IngestionService:
    return IngestionService(store=store, rng=rng)


@pytest.mark.asyncio  # type: ignore[misc]
async def test_text_batch_drops_line_without_price(
    service: IngestionService, store: ProductStore
) -> None:
    raw = (
        "Amazon iPhone 15 price: 75000 in stock\n"
        "\n"
        "Just a gadget description\n"
        "Flipkart Nike Shoes ₹7,999 rating 4.1/5\n"
    )

    report = await service.import_text(raw)

    assert report.accepted == 2
    assert report.unparsed == 1
    assert report.rejected == 0
    db = await store.get_database()
    assert set(db) == {"iphone15", "nikeshoes"}
    assert len(db["iphone15"]) == 1
    assert db["nikeshoes"][0].platform == "Flipkart"


@pytest.mark.asyncio  # type: ignore[misc]
async def test_text_batch_rejects_invalid_records(
    service: IngestionService, store: ProductStore
) -> None:
    # Name "TV" ist zu kurz
    report = await service.import_text("TV price: 30000\nSmart Watch price: 4999")

    assert report.accepted == 1
    assert report.rejected == 1
    assert report.errors == ["TV: Invalid product name"]
    assert list(await store.get_database()) == ["smartwatch"]


@pytest.mark.asyncio  # type: ignore[misc]
async def test_empty_batch_is_a_no_op(service: IngestionService, backend) -> None:
    report = await service.import_text("nothing to see here\n\n")

    assert report.accepted == 0
    assert await backend.keys() == []


@pytest.mark.asyncio  # type: ignore[misc]
async def test_reimport_accumulates(service: IngestionService, store: ProductStore) -> None:
    await service.import_text("Amazon iPhone 15 price: 75000")
    await service.import_text("Flipkart iPhone 15 price: 74000")

    products = await store.get_products("iPhone 15")

    assert products is not None
    assert [p.platform for p in products] == ["Amazon", "Flipkart"]


# ---------------------------------------------------------------------------
# JSON / CSV
# ---------------------------------------------------------------------------


@pytest.mark.asyncio  # type: ignore[misc]
async def test_json_import(service: IngestionService, store: ProductStore) -> None:
    payload = json.dumps(
        [
            {"productName": "Coffee Maker", "platform": "Amazon", "price": 3999, "category": "home"},
            {"productName": "Coffee Maker", "platform": "Meesho", "price": -1},
            {"platform": "eBay"},
        ]
    )

    report = await service.import_json(payload)

    assert report.accepted == 1
    assert report.rejected == 1
    assert report.unparsed == 1
    products = await store.get_products("coffee maker")
    assert products is not None and products[0].category == "home"


@pytest.mark.asyncio  # type: ignore[misc]
async def test_json_import_rejects_malformed_payload(service: IngestionService) -> None:
    with pytest.raises(ImportFormatError):
        await service.import_json("{not json")
    with pytest.raises(ImportFormatError):
        await service.import_json('{"productName": "x"}')


@pytest.mark.asyncio  # type: ignore[misc]
async def test_csv_import_with_header(service: IngestionService, store: ProductStore) -> None:
    raw = (
        "productName,platform,price,originalPrice,discount,inStock,rating,reviews,url,category\n"
        "MacBook Pro,Amazon,139999,149999,7,true,4.6,1200,https://a.co/mbp,laptops\n"
        "MacBook Pro,eBay,141000,,,false,4.4,300,https://e.co/mbp\n"
        "too,few,columns\n"
    )

    report = await service.import_csv(raw)

    assert report.accepted == 2
    products = await store.get_products("MacBook Pro")
    assert products is not None
    assert products[0].original_price == 149999
    assert products[0].in_stock is True
    assert products[1].original_price is None
    assert products[1].in_stock is False
    assert products[1].category == "other"


@pytest.mark.asyncio  # type: ignore[misc]
async def test_csv_import_without_header(service: IngestionService, store: ProductStore) -> None:
    report = await service.import_csv("Yoga Mat,Myntra,1299,,,true,4.2,50,https://m.co/ym")

    assert report.accepted == 1
    assert await store.get_products("yoga mat") is not None


@pytest.mark.asyncio  # type: ignore[misc]
async def test_csv_import_reports_bad_numbers(service: IngestionService) -> None:
    report = await service.import_csv("Yoga Mat,Myntra,cheap,,,true,4.2,50,https://m.co/ym")

    assert report.accepted == 0
    assert report.unparsed == 1


@pytest.mark.asyncio  # type: ignore[misc]
async def test_load_sample_data(service: IngestionService, store: ProductStore) -> None:
    report = await service.load_sample_data()

    assert report.accepted == 25
    stats = await store.stats()
    assert stats.total_products == 5
    assert stats.total_entries == 25
    assert set(stats.platforms) == {"Amazon", "Flipkart", "eBay", "Meesho", "Myntra"}
