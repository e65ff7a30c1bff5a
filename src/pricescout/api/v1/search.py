# src/pricescout/api/v1/search.py
import time
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from pricescout.api.dependencies import (
    get_analytics_service,
    get_price_cache,
    get_search_history,
    get_search_service,
)
from pricescout.core.rate_limit import limiter, search_rate_limit
from pricescout.domain.models import ProductFilters, ProductPricing, SearchAnalytics
from pricescout.domain.ports import InvalidQueryError, NoProductsFoundError
from pricescout.services.analytics_service import AnalyticsService
from pricescout.services.price_cache import PriceCache
from pricescout.services.search_history import SearchHistory
from pricescout.services.search_service import PriceSearchService

router = APIRouter(prefix="/search", tags=["Search"])

SearchServiceDep = Annotated[PriceSearchService, Depends(get_search_service)]
AnalyticsDep = Annotated[AnalyticsService, Depends(get_analytics_service)]
HistoryDep = Annotated[SearchHistory, Depends(get_search_history)]
CacheDep = Annotated[PriceCache, Depends(get_price_cache)]


@router.get("", response_model=ProductPricing, response_model_by_alias=True)
@limiter.limit(search_rate_limit)
async def search_prices(
    request: Request,
    service: SearchServiceDep,
    analytics: AnalyticsDep,
    q: str,
    price_min: float | None = Query(None, alias="priceMin", ge=0),
    price_max: float | None = Query(None, alias="priceMax", ge=0),
    rating: float | None = Query(None, ge=0, le=5),
    in_stock: bool | None = Query(None, alias="inStock"),
    color: str | None = Query(None, max_length=50),
    size: str | None = Query(None, max_length=50),
    brand: str | None = Query(None, max_length=50),
) -> ProductPricing:
    """
    Vergleicht Preise über alle Plattformen: Cache, Produktdatenbank, externe Quelle.
    """
    filters = ProductFilters(
        price_min=price_min,
        price_max=price_max,
        rating=rating,
        in_stock=in_stock,
        color=color,
        size=size,
        brand=brand,
    )
    started = time.perf_counter()
    try:
        result = await service.search_filtered(q, filters)
    except InvalidQueryError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except NoProductsFoundError as e:
        await analytics.track(
            SearchAnalytics(
                query=q.strip(),
                duration=(time.perf_counter() - started) * 1000,
                result_count=0,
                filters=filters,
                success=False,
            )
        )
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    await analytics.track(
        SearchAnalytics(
            query=q.strip(),
            duration=(time.perf_counter() - started) * 1000,
            result_count=len(result.prices),
            filters=filters,
            success=True,
        )
    )
    return result


@router.get("/history", response_model=list[str])
async def get_history(history: HistoryDep) -> list[str]:
    return await history.get()


@router.delete("/cache", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cache(cache: CacheDep, history: HistoryDep) -> None:
    """Entfernt alle Cache-Einträge und den Suchverlauf."""
    await cache.clear()
    await history.clear()
