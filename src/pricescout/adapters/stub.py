# src/pricescout/adapters/stub.py
from __future__ import annotations

from pricescout.domain.models import ProductPricing
from pricescout.domain.ports import PriceSourcePort


class UnconfiguredPriceSource(PriceSourcePort):
    """
    Platzhalter, solange keine echte Preis-API konfiguriert ist.
    Liefert immer None, die Pipeline fällt dann auf den Generator zurück.
    """

    async def fetch_prices(self, query: str) -> ProductPricing | None:
        return None
