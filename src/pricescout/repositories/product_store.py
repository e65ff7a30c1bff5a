# src/pricescout/repositories/product_store.py
from __future__ import annotations

import json
import logging

from pydantic import TypeAdapter

from pricescout.domain.models import DatabaseStats, PlatformProduct, normalize_product_key
from pricescout.repositories.base import AbstractKeyValueStore

logger = logging.getLogger(__name__)

DB_KEY = "pricescout_product_db"

_DATABASE_ADAPTER = TypeAdapter(dict[str, list[PlatformProduct]])

ProductDatabase = dict[str, list[PlatformProduct]]


class ProductStore:
    """
    Produktdatenbank: normalisierter Produktname -> Plattformbeobachtungen.

    Der gesamte Bestand liegt als ein JSON-Dokument unter DB_KEY im injizierten
    Key-Value-Backend. Jede schreibende Operation ist ein atomares read-modify-write
    (AbstractKeyValueStore.update) auf diesem Dokument. Lese- oder Parse-Fehler
    degradieren zu einer leeren Datenbank.
    """

    def __init__(self, backend: AbstractKeyValueStore) -> None:
        self._backend = backend

    @staticmethod
    def _parse(raw: str | None) -> ProductDatabase:
        if not raw:
            return {}
        try:
            return _DATABASE_ADAPTER.validate_json(raw)
        except ValueError:
            logger.exception("Product database is unreadable, treating it as empty")
            return {}

    @staticmethod
    def _dump(db: ProductDatabase) -> str:
        return _DATABASE_ADAPTER.dump_json(db, by_alias=True).decode()

    async def get_database(self) -> ProductDatabase:
        return self._parse(await self._backend.get(DB_KEY))

    async def save_products(self, product_name: str, products: list[PlatformProduct]) -> None:
        """
        Ersetzt den kompletten Bucket eines Produkts.

        Raises:
            ValueError: Wenn ein Produktname nicht auf den Bucket-Key normalisiert.
        """
        product_key = normalize_product_key(product_name)
        foreign = [
            p.product_name for p in products if normalize_product_key(p.product_name) != product_key
        ]
        if foreign:
            raise ValueError(f"Products {foreign} do not belong to bucket '{product_key}'")

        def _replace(raw: str | None) -> str:
            db = self._parse(raw)
            db[product_key] = list(products)
            return self._dump(db)

        await self._backend.update(DB_KEY, _replace)
        logger.info("Saved %d products for: %s", len(products), product_key)

    async def get_products(self, product_name: str) -> list[PlatformProduct] | None:
        db = await self.get_database()
        return db.get(normalize_product_key(product_name))

    async def search(self, query: str) -> list[PlatformProduct]:
        """Alle Einträge, deren Name oder Kategorie die Query (case-insensitive) enthält."""
        query_lower = query.lower()
        db = await self.get_database()
        return [
            p
            for products in db.values()
            for p in products
            if query_lower in p.product_name.lower() or query_lower in p.category.lower()
        ]

    async def by_category(self, category: str) -> list[PlatformProduct]:
        db = await self.get_database()
        return [
            p
            for products in db.values()
            for p in products
            if p.category.lower() == category.lower()
        ]

    async def by_platform(self, platform: str) -> list[PlatformProduct]:
        db = await self.get_database()
        return [
            p
            for products in db.values()
            for p in products
            if p.platform.lower() == platform.lower()
        ]

    async def batch_import(self, products: list[PlatformProduct]) -> int:
        """
        Hängt Produkte an den Bucket ihres normalisierten Namens an.
        Kein Dedup, kein Überschreiben: wiederholte Importe akkumulieren.
        """
        if not products:
            return 0

        def _append(raw: str | None) -> str:
            db = self._parse(raw)
            for product in products:
                db.setdefault(normalize_product_key(product.product_name), []).append(product)
            return self._dump(db)

        await self._backend.update(DB_KEY, _append)
        logger.info("Imported %d products into database", len(products))
        return len(products)

    async def export_json(self) -> str:
        db = await self.get_database()
        return json.dumps(_DATABASE_ADAPTER.dump_python(db, mode="json", by_alias=True), indent=2)

    async def clear(self) -> None:
        await self._backend.delete(DB_KEY)
        logger.info("Database cleared")

    async def stats(self) -> DatabaseStats:
        db = await self.get_database()
        platforms: dict[str, None] = {}
        categories: dict[str, None] = {}
        total_entries = 0
        for products in db.values():
            total_entries += len(products)
            for p in products:
                platforms.setdefault(p.platform)
                categories.setdefault(p.category)
        return DatabaseStats(
            total_products=len(db),
            total_entries=total_entries,
            platforms=list(platforms),
            categories=list(categories),
        )
