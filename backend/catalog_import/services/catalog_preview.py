"""Read-only dry run of a catalog file: parse, normalize, validate, group."""

from __future__ import annotations

import logging

from catalog_import.api.schemas.catalog_import import (
    Finding,
    NormalizedRow,
    PreviewResult,
    Severity,
)
from catalog_import.services.grouping import group_rows
from catalog_import.services.row_validator import (
    CatalogLookup,
    ValidationBatch,
    row_number,
    validate_row,
)
from catalog_import.utils.csv_normalizer import normalize_row
from catalog_import.utils.csv_reader import CatalogParseError, parse_catalog_file

logger = logging.getLogger(__name__)


def _unique(values: list[str]) -> list[str]:
    return list(dict.fromkeys(values))


def preview_import(data: bytes, store: CatalogLookup | None = None) -> PreviewResult:
    """Report what importing `data` would do without writing anything.

    The store, when given, is only read: SKU existence and category/collection
    resolution become warnings.
    """
    try:
        raw_rows = parse_catalog_file(data)
    except CatalogParseError as e:
        logger.warning(f"Catalog preview rejected unreadable file: {e}")
        return PreviewResult(
            success=False,
            blocking_errors=[
                Finding(row=0, field="file", message=str(e), type=Severity.BLOCKING)
            ],
        )

    rows: list[NormalizedRow] = [normalize_row(raw) for raw in raw_rows]

    batch = ValidationBatch()
    findings: list[Finding] = []
    for index, row in enumerate(rows):
        findings.extend(validate_row(row, row_number(index), batch, store))

    groups = group_rows(rows, findings)

    blocking_errors = [f for f in findings if f.is_blocking]
    warnings = [f for f in findings if not f.is_blocking]
    invalid_rows = len({f.row for f in blocking_errors})

    categories = _unique([c for group in groups for c in group.categories])
    collections = _unique([c for group in groups for c in group.collections])

    logger.info(
        f"Catalog preview: {len(rows)} rows, {len(groups)} products, "
        f"{len(blocking_errors)} blocking, {len(warnings)} warnings"
    )

    return PreviewResult(
        success=not blocking_errors,
        total_rows=len(rows),
        valid_rows=len(rows) - invalid_rows,
        invalid_rows=invalid_rows,
        product_groups=groups,
        total_products=len(groups),
        total_variants=len(rows),
        total_categories=len(categories),
        total_collections=len(collections),
        total_inventory_items=sum(len(group.variants) for group in groups),
        unique_categories=categories,
        unique_collections=collections,
        blocking_errors=blocking_errors,
        warnings=warnings,
    )
