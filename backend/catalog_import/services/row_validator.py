"""Structural and business-rule checks for normalized catalog rows."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Protocol

from catalog_import.api.schemas.catalog_import import Finding, NormalizedRow, Severity


# Header occupies row 1 of the file; data row i (0-based) is shown as i + 2
FIRST_DATA_ROW = 2

REQUIRED_FIELDS = ("handle", "title", "variant_title", "sku", "price", "quantity")

HANDLE_RE = re.compile(r"^[a-z0-9-]+$")
SKU_RE = re.compile(r"^[A-Z0-9]{3,5}-[A-Z]{3}-[A-Z0-9]{4,6}-[A-Z]{2,4}-[A-Z0-9]{1,3}$")

# Column limits: Numeric(12, 2) prices and 32-bit integer stock
MAX_PRICE = Decimal("9999999999.99")
MAX_QUANTITY = 2**31 - 1


class CatalogLookup(Protocol):
    """Read-only slice of the store the validator consults."""

    def find_variant_by_sku(self, sku: str) -> Any: ...

    def find_category_by_ref(self, ref: str) -> Any: ...

    def find_collection_by_ref(self, ref: str) -> Any: ...


@dataclass
class ValidationBatch:
    """State shared by every row of one file.

    Rows must be validated in file order against the same batch so that the
    second occurrence of a SKU is the one reported as a duplicate.
    """

    seen_skus: set[str] = field(default_factory=set)
    checked_refs: set[tuple[str, str]] = field(default_factory=set)

    def claim_sku(self, sku: str) -> bool:
        """Record the SKU; False if an earlier row already used it."""
        if sku in self.seen_skus:
            return False
        self.seen_skus.add(sku)
        return True

    def first_check(self, kind: str, ref: str) -> bool:
        key = (kind, ref.strip().lower())
        if key in self.checked_refs:
            return False
        self.checked_refs.add(key)
        return True


def row_number(index: int) -> int:
    return index + FIRST_DATA_ROW


def validate_row(
    row: NormalizedRow,
    row_num: int,
    batch: ValidationBatch,
    store: CatalogLookup | None = None,
) -> list[Finding]:
    """Return every finding for one row; rules are all evaluated, none short-circuit."""
    findings: list[Finding] = []

    def blocking(field_name: str, message: str) -> None:
        findings.append(Finding(row=row_num, field=field_name, message=message, type=Severity.BLOCKING))

    def warning(field_name: str, message: str) -> None:
        findings.append(Finding(row=row_num, field=field_name, message=message, type=Severity.WARNING))

    for required in REQUIRED_FIELDS:
        if required not in row.present:
            blocking(required, f"{required} is required")

    if row.handle and not HANDLE_RE.match(row.handle):
        blocking("handle", "Handle must contain only lowercase letters, numbers, and hyphens")

    if row.sku:
        if not batch.claim_sku(row.sku):
            blocking("sku", f"Duplicate SKU: {row.sku}")

        if not SKU_RE.match(row.sku):
            warning(
                "sku",
                "SKU format recommended: BRAND-CAT-PRODUCT-VAR "
                f"(e.g., DUDE-TSH-OXFRD-BLK-M). Current: {row.sku}",
            )

        if row.sku_generated:
            warning("sku", f"SKU was blank and has been generated from category, size and color: {row.sku}")

        if store is not None and store.find_variant_by_sku(row.sku) is not None:
            warning("sku", f"SKU already exists in database: {row.sku} (will be updated)")

    if row.price <= 0:
        blocking("price", "Price must be greater than 0")
    elif row.price > MAX_PRICE:
        blocking("price", f"Price cannot exceed {MAX_PRICE}")

    if row.quantity < 0:
        blocking("quantity", "Quantity cannot be negative")
    elif row.quantity > MAX_QUANTITY:
        blocking("quantity", f"Quantity cannot exceed {MAX_QUANTITY}")

    if row.allow_backorder and not row.manage_inventory:
        warning("allow_backorder", "Backorder cannot be enabled when inventory is not managed")

    if not row.thumbnail:
        warning("thumbnail", "Product thumbnail is missing")

    if store is not None:
        for ref in row.categories:
            if batch.first_check("category", ref) and store.find_category_by_ref(ref) is None:
                warning("categories", f"Category not found and will not be linked: {ref}")
        for ref in row.collections:
            if batch.first_check("collection", ref) and store.find_collection_by_ref(ref) is None:
                warning("collections", f"Collection not found and will not be linked: {ref}")

    return findings
