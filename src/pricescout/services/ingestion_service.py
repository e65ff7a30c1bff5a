# src/pricescout/services/ingestion_service.py
from __future__ import annotations

import csv
import io
import json
import logging
import random

from pydantic import ValidationError

from pricescout.core.metrics import INGESTED_RECORDS
from pricescout.domain.models import ImportReport, PlatformProduct, now_ms, round_half_up
from pricescout.domain.ports import ImportFormatError
from pricescout.repositories.product_store import ProductStore
from pricescout.services.record_assembler import assemble_product, validate_product

logger = logging.getLogger(__name__)

_CSV_MIN_COLUMNS = 9
_CSV_HEADER_MARKER = "productName"

_SAMPLE_PLATFORMS = ("Amazon", "Flipkart", "eBay", "Meesho", "Myntra")
_SAMPLE_PRODUCTS = (
    ("iPhone 15", "smartphones", 75999),
    ("Samsung Galaxy S24", "smartphones", 58999),
    ("MacBook Pro", "laptops", 139999),
    ("Nike Shoes", "shoes", 7999),
    ("Coffee Maker", "home", 3999),
)


class IngestionService:
    """
    Batch-Import in die Produktdatenbank.

    Freitext wird zeilenweise extrahiert und validiert; JSON- und CSV-Importe
    laufen durch denselben Validator. Nur akzeptierte Datensätze werden an die
    Buckets ihres normalisierten Namens angehängt.
    """

    def __init__(self, store: ProductStore, rng: random.Random) -> None:
        self._store = store
        self._rng = rng

    async def import_text(self, raw: str) -> ImportReport:
        report = ImportReport()
        candidates: list[PlatformProduct] = []

        for line in raw.split("\n"):
            if not line.strip():
                continue
            product = assemble_product(line, self._rng)
            if product is None:
                report.unparsed += 1
                report.errors.append(f"Could not extract name and price from: {line.strip()}")
                continue
            candidates.append(product)

        await self._store_valid(candidates, report)
        INGESTED_RECORDS.labels(outcome="unparsed").inc(report.unparsed)
        return report

    async def import_json(self, raw: str) -> ImportReport:
        try:
            items = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ImportFormatError("JSON", str(e)) from e
        if not isinstance(items, list):
            raise ImportFormatError("JSON", "expected an array of products")

        report = ImportReport()
        candidates: list[PlatformProduct] = []
        for index, item in enumerate(items):
            try:
                candidates.append(PlatformProduct.model_validate(item))
            except ValidationError as e:
                report.unparsed += 1
                report.errors.append(f"Item {index}: {e.error_count()} invalid field(s)")

        await self._store_valid(candidates, report)
        INGESTED_RECORDS.labels(outcome="unparsed").inc(report.unparsed)
        return report

    async def import_csv(self, raw: str) -> ImportReport:
        """
        Spalten: productName,platform,price,originalPrice,discount,inStock,rating,
        reviews,url[,category]. Eine Kopfzeile wird am Spaltennamen productName erkannt.
        """
        lines = [line for line in raw.split("\n") if line.strip()]
        if not lines:
            raise ImportFormatError("CSV", "no rows")

        start = 1 if _CSV_HEADER_MARKER in lines[0] else 0
        report = ImportReport()
        candidates: list[PlatformProduct] = []
        timestamp = now_ms()

        for row_number, row in enumerate(csv.reader(lines[start:]), start=start + 1):
            if len(row) < _CSV_MIN_COLUMNS:
                continue
            cells = [cell.strip() for cell in row]
            try:
                candidates.append(
                    PlatformProduct(
                        id=f"{timestamp}-{row_number}",
                        product_name=cells[0],
                        platform=cells[1],
                        price=float(cells[2]),
                        original_price=float(cells[3]) if cells[3] else None,
                        discount=int(float(cells[4])) if cells[4] else None,
                        in_stock=cells[5].lower() == "true",
                        rating=float(cells[6]),
                        reviews=int(float(cells[7])),
                        url=cells[8],
                        category=cells[9] if len(cells) > 9 and cells[9] else "other",
                        timestamp=timestamp,
                    )
                )
            except ValueError as e:
                report.unparsed += 1
                report.errors.append(f"Row {row_number}: {e}")

        await self._store_valid(candidates, report)
        INGESTED_RECORDS.labels(outcome="unparsed").inc(report.unparsed)
        return report

    def generate_sample_data(self) -> list[PlatformProduct]:
        samples: list[PlatformProduct] = []
        timestamp = now_ms()
        for name, category, base_price in _SAMPLE_PRODUCTS:
            for platform in _SAMPLE_PLATFORMS:
                discount = self._rng.randrange(3, 18)
                price = round_half_up(base_price * (0.85 + self._rng.random() * 0.2))
                has_discount = self._rng.random() > 0.3
                samples.append(
                    PlatformProduct(
                        id=f"{name}-{platform}-{timestamp}",
                        product_name=name,
                        platform=platform,
                        price=price,
                        original_price=round_half_up(price / (1 - discount / 100)),
                        discount=discount if has_discount else None,
                        in_stock=self._rng.random() > 0.15,
                        rating=round(self._rng.random() * 0.8 + 4.0, 1),
                        reviews=self._rng.randrange(150, 8150),
                        url=f"https://{platform.lower()}.com/search?q={name}",
                        category=category,
                        timestamp=timestamp,
                    )
                )
        return samples

    async def load_sample_data(self) -> ImportReport:
        samples = self.generate_sample_data()
        report = ImportReport()
        await self._store_valid(samples, report)
        logger.info("Sample data loaded successfully")
        return report

    async def _store_valid(self, candidates: list[PlatformProduct], report: ImportReport) -> None:
        accepted: list[PlatformProduct] = []
        for product in candidates:
            errors = validate_product(product)
            if errors:
                logger.warning("Validation errors for %s: %s", product.product_name, errors)
                report.rejected += 1
                report.errors.extend(f"{product.product_name}: {error}" for error in errors)
                continue
            accepted.append(product)

        report.accepted = len(accepted)
        INGESTED_RECORDS.labels(outcome="accepted").inc(report.accepted)
        INGESTED_RECORDS.labels(outcome="rejected").inc(report.rejected)

        if not accepted:
            logger.warning("No valid products to import")
            return

        await self._store.batch_import(accepted)
        logger.info("Successfully imported %d validated products", len(accepted))
