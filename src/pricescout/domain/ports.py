# src/pricescout/domain/ports.py
from abc import ABC, abstractmethod

from pricescout.domain.models import ProductPricing


class PriceSourcePort(ABC):
    """
    Abstrakte Schnittstelle für externe Preisquellen.
    Die Resolution-Pipeline kennt ausschließlich dieses Interface.
    """

    @abstractmethod
    async def fetch_prices(self, query: str) -> ProductPricing | None:
        """
        Liefert Plattformpreise für eine Suchanfrage oder None, wenn die Quelle
        nichts kennt.

        Raises:
            ExternalApiError: Bei Kommunikationsproblemen mit der externen API.
        """
        ...


# ---------------------------------------------------------------------------
# Custom Domain Exceptions
# ---------------------------------------------------------------------------


class InvalidQueryError(Exception):
    def __init__(self, detail: str = "Please enter a product name"):
        super().__init__(detail)
        self.detail = detail


class NoProductsFoundError(Exception):
    def __init__(self, query: str):
        super().__init__(f'No products found for "{query}". Try another search.')
        self.query = query


class ExternalApiError(Exception):
    def __init__(self, source: str, detail: str):
        super().__init__(f"External API error from '{source}': {detail}")
        self.source = source
        self.detail = detail


class ImportFormatError(Exception):
    def __init__(self, fmt: str, detail: str):
        super().__init__(f"Invalid {fmt} format: {detail}")
        self.format = fmt
        self.detail = detail
