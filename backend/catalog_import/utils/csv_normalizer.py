"""Map current and legacy catalog column schemes onto one canonical row."""

from __future__ import annotations

import json
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from catalog_import.api.schemas.catalog_import import (
    Highlight,
    NormalizedRow,
    ProductStatus,
    RawRow,
    VariantOption,
)

# Canonical field -> accepted column names, current scheme first
COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "handle": ("product_handle", "Product Handle"),
    "title": ("product_title", "Product Title"),
    "subtitle": ("product_subtitle", "Product Subtitle"),
    "description": ("product_description", "Product Description"),
    "status": ("product_status", "Product Status"),
    "thumbnail": ("product_thumbnail", "Product Thumbnail"),
    "variant_images": ("product_variant_images",),
    "variant_title": ("product_variant_title", "Variant Title"),
    "sku": ("product_variant_sku", "Variant Sku"),
    "discountable": ("product_discountable", "Product Discountable"),
    "manage_inventory": ("variant_manage_inventory", "Variant Manage Inventory"),
    "allow_backorder": ("variant_allow_backorder", "Variant Allow Backorder"),
    "price": ("variant_price", "Variant Price INR"),
    "quantity": ("variant_quantity", "variant_inventory_stock", "inventory quantity"),
}

HIGHLIGHT_SLOTS = 2
OPTION_SLOTS = 2
NUMBERED_TAXONOMY_SLOTS = 5

# Prices are stored as Numeric(12, 2)
PRICE_QUANTUM = Decimal("0.01")

TRUE_VALUES = frozenset({"true", "1", "yes"})
PUBLISHED_VALUES = frozenset({"published", "active"})

# Brand and line segments used when a variant row leaves its SKU blank
GENERATED_SKU_INFIX = "DUDE-FZT"

_NON_NUMERIC = re.compile(r"[^0-9.\-]")


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in TRUE_VALUES


def parse_number(value: Any) -> Decimal:
    """Keep only digits, dots and minus signs, then parse; garbage becomes 0."""
    if value is None:
        return Decimal("0")
    cleaned = _NON_NUMERIC.sub("", str(value))
    try:
        number = Decimal(cleaned)
    except InvalidOperation:
        return Decimal("0")
    return number if number.is_finite() else Decimal("0")


def parse_price(value: Any) -> Decimal:
    """parse_number rounded half-up to whole cents."""
    number = parse_number(value)
    try:
        return number.quantize(PRICE_QUANTUM, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return number


def parse_list(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def parse_status(value: str | None) -> ProductStatus:
    if value and value.strip().lower() in PUBLISHED_VALUES:
        return ProductStatus.PUBLISHED
    return ProductStatus.DRAFT


def parse_option_value(value: str) -> str | dict[str, Any]:
    """Decode `{...}` option values (color swatches) and fall back to the raw text."""
    if value.startswith("{") and value.endswith("}"):
        try:
            decoded = json.loads(value)
        except ValueError:
            return value
        if isinstance(decoded, dict):
            return decoded
    return value


def _cell(row: RawRow, column: str) -> str:
    value = row.get(column)
    return value.strip() if isinstance(value, str) else ""


def _first(row: RawRow, columns: tuple[str, ...]) -> str:
    for column in columns:
        value = _cell(row, column)
        if value:
            return value
    return ""


def _numbered(row: RawRow, prefix: str) -> list[str]:
    values = (_cell(row, f"{prefix}_{i}") for i in range(1, NUMBERED_TAXONOMY_SLOTS + 1))
    return [value for value in values if value]


def _collections(row: RawRow) -> list[str]:
    numbered = _numbered(row, "collection")
    if numbered:
        return numbered
    collections = parse_list(_cell(row, "collections")) or parse_list(_cell(row, "Product Collection Id"))
    for column in ("collection", "Collection"):
        collections.extend(parse_list(_cell(row, column)))
    return collections


def _categories(row: RawRow) -> list[str]:
    numbered = _numbered(row, "category")
    if numbered:
        return numbered
    categories = parse_list(_cell(row, "categories"))
    for column in ("category", "Category"):
        categories.extend(parse_list(_cell(row, column)))
    return categories


def _tags(row: RawRow) -> list[str]:
    tags = _numbered(row, "tag")
    if tags:
        return tags
    tags = parse_list(_cell(row, "tags"))
    for column in ("Product Tag 1", "Product Tag 2"):
        value = _cell(row, column)
        if value:
            tags.append(value)
    return tags


def _highlights(row: RawRow) -> list[Highlight]:
    highlights = []
    for slot in range(1, HIGHLIGHT_SLOTS + 1):
        label = _cell(row, f"product_highlight_{slot}_label")
        value = _cell(row, f"product_highlight_{slot}_value")
        if label and value:
            highlights.append(Highlight(label=label, value=value))
    return highlights


def _options(row: RawRow) -> list[VariantOption]:
    options = []
    for slot in range(1, OPTION_SLOTS + 1):
        name = _first(row, (f"variant_option_{slot}_name", f"Variant Option {slot} Name"))
        value = _first(row, (f"variant_option_{slot}_value", f"Variant Option {slot} Value"))
        if name and value:
            options.append(VariantOption(name=name, value=parse_option_value(value)))
    return options


def _option_text(options: list[VariantOption], name: str) -> str:
    for option in options:
        if option.name.lower() != name:
            continue
        if isinstance(option.value, dict):
            return str(option.value.get("name") or "")
        return option.value
    return ""


def generate_sku(categories: list[str], options: list[VariantOption]) -> str:
    """Build CATEGORY-DUDE-FZT-SIZE-COLOR, or "" when any part is missing."""
    category = categories[0] if categories else ""
    size = _option_text(options, "size")
    color = _option_text(options, "color")
    if not (category and size and color):
        return ""
    return "-".join([category, GENERATED_SKU_INFIX, size, color]).upper()


def normalize_row(row: RawRow) -> NormalizedRow:
    """Build the canonical row; never raises, unreadable values degrade to empty/0/False."""
    values = {field: _first(row, columns) for field, columns in COLUMN_ALIASES.items()}
    present = {field for field, value in values.items() if value}

    categories = _categories(row)
    options = _options(row)

    sku = values["sku"]
    sku_generated = False
    if not sku:
        sku = generate_sku(categories, options)
        if sku:
            sku_generated = True
            present.add("sku")

    return NormalizedRow(
        handle=values["handle"],
        title=values["title"],
        subtitle=values["subtitle"] or None,
        description=values["description"] or None,
        status=parse_status(values["status"]),
        thumbnail=values["thumbnail"] or None,
        highlights=_highlights(row),
        variant_title=values["variant_title"],
        sku=sku,
        discountable=parse_bool(values["discountable"]),
        manage_inventory=parse_bool(values["manage_inventory"]),
        allow_backorder=parse_bool(values["allow_backorder"]),
        price=parse_price(values["price"]),
        quantity=int(parse_number(values["quantity"])),
        variant_images=parse_list(values["variant_images"]),
        collections=_collections(row),
        categories=categories,
        tags=_tags(row),
        options=options,
        present=frozenset(present),
        sku_generated=sku_generated,
    )
