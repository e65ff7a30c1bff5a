from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status

from pricescout.api.dependencies import get_ingestion_service, get_product_store
from pricescout.domain.models import DatabaseStats, ImportPayload, ImportReport, PlatformProduct
from pricescout.domain.ports import ImportFormatError
from pricescout.repositories.product_store import ProductStore
from pricescout.services.ingestion_service import IngestionService

router = APIRouter(prefix="/products", tags=["Products"])

StoreDep = Annotated[ProductStore, Depends(get_product_store)]
IngestionDep = Annotated[IngestionService, Depends(get_ingestion_service)]


@router.post("/import/text", response_model=ImportReport, response_model_by_alias=True)
async def import_text(service: IngestionDep, payload: ImportPayload) -> ImportReport:
    """
    Extrahiert Produktdatensätze aus Freitext, eine Zeile pro Datensatz.
    """
    return await service.import_text(payload.data)


@router.post("/import/json", response_model=ImportReport, response_model_by_alias=True)
async def import_json(service: IngestionDep, payload: ImportPayload) -> ImportReport:
    try:
        return await service.import_json(payload.data)
    except ImportFormatError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/import/csv", response_model=ImportReport, response_model_by_alias=True)
async def import_csv(service: IngestionDep, payload: ImportPayload) -> ImportReport:
    try:
        return await service.import_csv(payload.data)
    except ImportFormatError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/sample", response_model=ImportReport, response_model_by_alias=True)
async def load_sample_data(service: IngestionDep) -> ImportReport:
    return await service.load_sample_data()


@router.get("/export")
async def export_database(store: StoreDep) -> Response:
    return Response(
        content=await store.export_json(),
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="pricescout_products.json"'},
    )


@router.get("/stats", response_model=DatabaseStats, response_model_by_alias=True)
async def database_stats(store: StoreDep) -> DatabaseStats:
    return await store.stats()


@router.get("/search", response_model=list[PlatformProduct], response_model_by_alias=True)
async def search_database(store: StoreDep, q: str) -> list[PlatformProduct]:
    return await store.search(q)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_database(store: StoreDep) -> None:
    await store.clear()
