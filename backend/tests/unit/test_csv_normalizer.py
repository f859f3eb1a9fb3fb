from __future__ import annotations

from decimal import Decimal

import pytest

from catalog_import.api.schemas.catalog_import import Highlight, ProductStatus
from catalog_import.utils.csv_normalizer import (
    generate_sku,
    normalize_row,
    parse_bool,
    parse_list,
    parse_number,
    parse_price,
    parse_option_value,
    parse_status,
)


@pytest.mark.parametrize("value", ["TRUE", "1", "yes", " Yes ", "true"])
def test_truthy_strings(value: str) -> None:
    assert parse_bool(value) is True


@pytest.mark.parametrize("value", ["false", "", "no", "0", "y", None])
def test_falsy_strings(value) -> None:
    assert parse_bool(value) is False


@pytest.mark.parametrize(
    "value, expected",
    [
        ("1999", Decimal("1999")),
        ("₹1,999.50", Decimal("1999.50")),
        ("-5", Decimal("-5")),
        ("0.01", Decimal("0.01")),
        ("abc", Decimal("0")),
        ("", Decimal("0")),
        ("1.2.3", Decimal("0")),
        ("--", Decimal("0")),
    ],
)
def test_parse_number(value: str, expected: Decimal) -> None:
    assert parse_number(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [("0.001", Decimal("0.00")), ("0.005", Decimal("0.01")), ("19.995", Decimal("20.00")), ("1,499", Decimal("1499.00"))],
)
def test_parse_price_rounds_to_cents(value: str, expected: Decimal) -> None:
    assert parse_price(value) == expected


def test_normalized_price_matches_stored_precision() -> None:
    assert normalize_row({"variant_price": "0.001"}).price == Decimal("0.00")


def test_parse_list_trims_and_drops_empties() -> None:
    assert parse_list(" a, b ,,c ,") == ["a", "b", "c"]
    assert parse_list("") == []
    assert parse_list(None) == []


@pytest.mark.parametrize(
    "value, expected",
    [
        ("published", ProductStatus.PUBLISHED),
        ("ACTIVE", ProductStatus.PUBLISHED),
        ("draft", ProductStatus.DRAFT),
        ("archived", ProductStatus.DRAFT),
        ("", ProductStatus.DRAFT),
    ],
)
def test_parse_status(value: str, expected: ProductStatus) -> None:
    assert parse_status(value) is expected


def test_option_value_json_object_is_decoded() -> None:
    assert parse_option_value('{"name": "Black", "code": "#000000"}') == {"name": "Black", "code": "#000000"}
    assert parse_option_value("{not json}") == "{not json}"
    assert parse_option_value("M") == "M"


def test_current_column_scheme() -> None:
    row = normalize_row(
        {
            "product_handle": "oxford-shirt",
            "product_title": "Oxford Formal Shirt",
            "product_status": "published",
            "product_variant_title": "M / Black",
            "product_variant_sku": "DUDE-SHT-OXFRD-BLK-M",
            "variant_price": "1999",
            "variant_quantity": "100",
            "variant_manage_inventory": "TRUE",
            "product_variant_images": "a.jpg, b.jpg",
        }
    )

    assert row.handle == "oxford-shirt"
    assert row.status is ProductStatus.PUBLISHED
    assert row.price == Decimal("1999")
    assert row.quantity == 100
    assert row.manage_inventory is True
    assert row.allow_backorder is False
    assert row.variant_images == ["a.jpg", "b.jpg"]
    assert row.subtitle is None
    assert {"handle", "title", "variant_title", "sku", "price", "quantity"} <= row.present


def test_legacy_column_scheme() -> None:
    row = normalize_row(
        {
            "Product Handle": "oxford-shirt",
            "Product Title": "Oxford",
            "Variant Title": "M",
            "Variant Sku": "DUDE-SHT-OXFRD-BLK-M",
            "Variant Price INR": "1,499",
            "inventory quantity": "7",
            "Variant Manage Inventory": "yes",
            "Product Tag 1": "Cotton",
            "Product Tag 2": "Formal",
            "Product Collection Id": "summer, sale",
            "collection": "clearance",
            "Category": "Shirts, Formal",
        }
    )

    assert row.title == "Oxford"
    assert row.sku == "DUDE-SHT-OXFRD-BLK-M"
    assert row.price == Decimal("1499")
    assert row.quantity == 7
    assert row.manage_inventory is True
    assert row.tags == ["Cotton", "Formal"]
    assert row.collections == ["summer", "sale", "clearance"]
    assert row.categories == ["Shirts", "Formal"]


def test_first_non_empty_column_wins() -> None:
    row = normalize_row({"product_title": "  ", "Product Title": "Legacy title"})

    assert row.title == "Legacy title"


def test_quantity_truncates_to_integer() -> None:
    assert normalize_row({"variant_quantity": "12.9"}).quantity == 12


def test_blank_values_are_not_present() -> None:
    row = normalize_row({"product_handle": "x", "variant_price": "", "variant_quantity": "0"})

    assert "price" not in row.present
    assert "quantity" in row.present
    assert row.price == Decimal("0")


def test_highlights_need_label_and_value() -> None:
    row = normalize_row(
        {
            "product_highlight_1_label": "Fabric",
            "product_highlight_1_value": "",
            "product_highlight_2_label": "Fit",
            "product_highlight_2_value": "Slim",
        }
    )

    assert row.highlights == [Highlight(label="Fit", value="Slim")]


def test_options_in_slot_order_from_either_scheme() -> None:
    row = normalize_row(
        {
            "variant_option_1_name": "Size",
            "variant_option_1_value": "M",
            "Variant Option 2 Name": "Color",
            "Variant Option 2 Value": '{"name": "Black"}',
        }
    )

    assert [option.name for option in row.options] == ["Size", "Color"]
    assert row.options[1].value == {"name": "Black"}


def test_numbered_taxonomy_columns_win_over_lists() -> None:
    row = normalize_row(
        {
            "category_1": "Shirts",
            "category_3": "Formal",
            "categories": "Ignored",
            "tag_1": "New Drops",
            "tags": "Ignored",
            "collection_2": "summer",
        }
    )

    assert row.categories == ["Shirts", "Formal"]
    assert row.tags == ["New Drops"]
    assert row.collections == ["summer"]


def test_blank_sku_is_generated_from_category_size_and_color() -> None:
    row = normalize_row(
        {
            "category_1": "Shirts",
            "variant_option_1_name": "Size",
            "variant_option_1_value": "m",
            "variant_option_2_name": "Color",
            "variant_option_2_value": '{"name": "Black", "code": "#000000"}',
        }
    )

    assert row.sku == "SHIRTS-DUDE-FZT-M-BLACK"
    assert row.sku_generated is True
    assert "sku" in row.present


def test_sku_not_generated_without_all_parts() -> None:
    row = normalize_row({"category_1": "Shirts", "variant_option_1_name": "Size", "variant_option_1_value": "M"})

    assert row.sku == ""
    assert row.sku_generated is False
    assert generate_sku([], []) == ""


def test_garbage_never_raises() -> None:
    row = normalize_row({"variant_price": "free!", "variant_quantity": "lots", "product_status": None})

    assert row.price == Decimal("0")
    assert row.quantity == 0
    assert row.status is ProductStatus.DRAFT
