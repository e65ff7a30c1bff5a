from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from pricescout.api.dependencies import get_analytics_service
from pricescout.domain.models import AnalyticsSummary
from pricescout.services.analytics_service import AnalyticsService

router = APIRouter(prefix="/analytics", tags=["Analytics"])

AnalyticsDep = Annotated[AnalyticsService, Depends(get_analytics_service)]


@router.get("", response_model=AnalyticsSummary, response_model_by_alias=True)
async def get_summary(
    service: AnalyticsDep,
    limit: int = Query(10, ge=1, le=50),
) -> AnalyticsSummary:
    return await service.summary(limit)


@router.get("/export")
async def export_analytics(service: AnalyticsDep) -> Response:
    return Response(content=await service.export_json(), media_type="application/json")


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_analytics(service: AnalyticsDep) -> None:
    await service.clear()
