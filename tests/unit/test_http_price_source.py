from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from pricescout.adapters.http_price_source import HttpPriceSourceAdapter
from pricescout.adapters.stub import UnconfiguredPriceSource
from pricescout.domain.ports import ExternalApiError

_API_RESPONSE = {
    "productName": "Nike Shoes",
    "products": [
        {"platform": "Myntra", "price": "6999", "originalPrice": 7999, "rating": 4.3},
        {"price": 6499, "inStock": False, "reviews": "120", "url": "https://x.co/n"},
    ],
}


def _client_returning(payload: dict) -> AsyncMock:
    mock_response = MagicMock(spec=httpx.Response)
    mock_response.status_code = 200
    mock_response.json.return_value = payload
    mock_response.raise_for_status = MagicMock()

    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.post.return_value = mock_response
    return mock_client


@pytest.mark.asyncio  # type: ignore[misc]
async def test_http_source_normalizes_response() -> None:
    client = _client_returning(_API_RESPONSE)
    adapter = HttpPriceSourceAdapter(http_client=client, url="https://prices.example/search")

    result = await adapter.fetch_prices("nike shoes")

    client.post.assert_called_once_with(
        "https://prices.example/search", json={"query": "nike shoes"}, timeout=10.0
    )
    assert result is not None
    assert result.product_name == "Nike Shoes"
    assert [p.platform for p in result.prices] == ["Unknown", "Myntra"]
    assert result.prices[0].in_stock is False
    assert result.prices[0].reviews == 120
    assert result.prices[1].in_stock is True
    assert result.lowest_price == 6499
    assert result.highest_price == 7999


@pytest.mark.asyncio  # type: ignore[misc]
async def test_http_source_empty_products_is_absent() -> None:
    adapter = HttpPriceSourceAdapter(http_client=_client_returning({"products": []}), url="u")

    assert await adapter.fetch_prices("x") is None


@pytest.mark.asyncio  # type: ignore[misc]
async def test_http_source_raises_on_connection_error() -> None:
    client = AsyncMock(spec=httpx.AsyncClient)
    client.post.side_effect = httpx.ConnectError("refused")
    adapter = HttpPriceSourceAdapter(http_client=client, url="https://prices.example/search")

    with pytest.raises(ExternalApiError):
        await adapter.fetch_prices("lamp")


@pytest.mark.asyncio  # type: ignore[misc]
async def test_unconfigured_source_returns_none() -> None:
    assert await UnconfiguredPriceSource().fetch_prices("iphone") is None
