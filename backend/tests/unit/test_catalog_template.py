from __future__ import annotations

from catalog_import.services.catalog_preview import preview_import
from catalog_import.services.catalog_template import TEMPLATE_HEADERS, generate_template
from catalog_import.utils.csv_reader import parse_catalog_file


def test_template_has_header_and_two_variant_rows() -> None:
    rows = parse_catalog_file(generate_template().encode("utf-8"))

    assert list(rows[0]) == TEMPLATE_HEADERS
    assert len(rows) == 2
    assert {row["product_handle"] for row in rows} == {"oxford-shirt"}


def test_template_previews_cleanly() -> None:
    result = preview_import(generate_template().encode("utf-8"))

    assert result.success is True
    assert result.total_products == 1
    assert result.total_variants == 2
    assert result.warnings == []
    group = result.product_groups[0]
    assert [v.sku for v in group.variants] == ["DUDE-SHT-OXFRD-BLK-M", "DUDE-SHT-OXFRD-BLK-L"]
    assert group.variants[0].options[1].value == {"name": "Black", "code": "#000000"}
    assert group.categories == ["Shirts", "Formal"]
    assert group.tags == ["New Drops", "Cotton", "Formal Wear"]
