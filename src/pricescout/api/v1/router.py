# src/pricescout/api/v1/router.py
from fastapi import APIRouter

from pricescout.api.v1 import analytics, products, search

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(search.router)
api_router.include_router(products.router)
api_router.include_router(analytics.router)
