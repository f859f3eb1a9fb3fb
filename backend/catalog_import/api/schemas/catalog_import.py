"""Pydantic models shared by the import pipeline and its HTTP endpoints."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

RawRow = dict[str, str]


class ProductStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class Severity(str, Enum):
    BLOCKING = "blocking"
    WARNING = "warning"


class Highlight(BaseModel):
    label: str
    value: str


class VariantOption(BaseModel):
    name: str
    # Color options may carry a decoded JSON object, e.g. {"name": "Black", "code": "#000"}
    value: str | dict[str, Any]


class NormalizedRow(BaseModel):
    """One canonical catalog row, independent of the column scheme it came from."""

    handle: str = ""
    title: str = ""
    subtitle: str | None = None
    description: str | None = None
    status: ProductStatus = ProductStatus.DRAFT
    thumbnail: str | None = None
    highlights: list[Highlight] = Field(default_factory=list)
    variant_title: str = ""
    sku: str = ""
    discountable: bool = False
    manage_inventory: bool = False
    allow_backorder: bool = False
    price: Decimal = Decimal("0")
    quantity: int = 0
    variant_images: list[str] = Field(default_factory=list)
    collections: list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    options: list[VariantOption] = Field(default_factory=list)
    present: frozenset[str] = Field(
        default_factory=frozenset,
        description="Canonical fields whose source column held a non-blank value",
    )
    sku_generated: bool = False


class Finding(BaseModel):
    row: int = Field(..., description="Human-visible file row (header is row 1)")
    field: str
    message: str
    type: Severity

    @property
    def is_blocking(self) -> bool:
        return self.type is Severity.BLOCKING


class VariantSpec(BaseModel):
    title: str
    sku: str
    price: Decimal
    quantity: int
    manage_inventory: bool = False
    allow_backorder: bool = False
    images: list[str] = Field(default_factory=list)
    options: list[VariantOption] = Field(default_factory=list)


class ProductGroup(BaseModel):
    """All rows sharing one handle; the unit of import and of failure."""

    handle: str
    title: str
    subtitle: str | None = None
    description: str | None = None
    status: ProductStatus = ProductStatus.DRAFT
    thumbnail: str | None = None
    highlights: list[Highlight] = Field(default_factory=list)
    discountable: bool = False
    collections: list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    variants: list[VariantSpec] = Field(default_factory=list)
    errors: list[Finding] = Field(default_factory=list)
    warnings: list[Finding] = Field(default_factory=list)


class PreviewResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
    total_rows: int = 0
    valid_rows: int = 0
    invalid_rows: int = 0
    product_groups: list[ProductGroup] = Field(default_factory=list)
    total_products: int = 0
    total_variants: int = 0
    total_categories: int = 0
    total_collections: int = 0
    total_inventory_items: int = 0
    unique_categories: list[str] = Field(default_factory=list)
    unique_collections: list[str] = Field(default_factory=list)
    blocking_errors: list[Finding] = Field(default_factory=list)
    warnings: list[Finding] = Field(default_factory=list)


class ImportFailure(BaseModel):
    product_handle: str
    message: str
    details: str | None = None


class ImportWarning(BaseModel):
    product_handle: str
    message: str


class ImportResult(BaseModel):
    success: bool = True
    products_created: int = 0
    products_updated: int = 0
    variants_created: int = 0
    variants_updated: int = 0
    inventory_updated: int = 0
    categories_linked: int = 0
    collections_linked: int = 0
    tags_linked: int = 0
    failed: int = Field(0, description="Number of product groups that were not imported")
    errors: list[ImportFailure] = Field(default_factory=list)
    warnings: list[ImportWarning] = Field(default_factory=list)
    duration_ms: int = 0


class ExecuteImportRequest(BaseModel):
    product_groups: list[ProductGroup] = Field(..., description="Groups returned by preview, possibly edited")
