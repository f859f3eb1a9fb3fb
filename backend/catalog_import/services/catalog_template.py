"""Downloadable starter CSV for bulk catalog imports."""

from __future__ import annotations

import csv
import io

TEMPLATE_HEADERS = [
    "product_handle",
    "product_title",
    "product_subtitle",
    "product_description",
    "product_status",
    "product_thumbnail",
    "product_variant_images",
    "product_highlight_1_label",
    "product_highlight_1_value",
    "product_highlight_2_label",
    "product_highlight_2_value",
    "product_variant_title",
    "product_variant_sku",
    "product_discountable",
    "variant_manage_inventory",
    "variant_allow_backorder",
    "variant_price",
    "variant_quantity",
    "variant_option_1_name",
    "variant_option_1_value",
    "variant_option_2_name",
    "variant_option_2_value",
    "collection_1",
    "collection_2",
    "category_1",
    "category_2",
    "tag_1",
    "tag_2",
    "tag_3",
]

_SHARED = {
    "product_handle": "oxford-shirt",
    "product_title": "Oxford Formal Shirt",
    "product_subtitle": "Premium Cotton Shirt",
    "product_description": "Classic oxford formal shirt made from 100% cotton",
    "product_status": "published",
    "product_thumbnail": "https://example.com/images/oxford-shirt.jpg",
    "product_highlight_1_label": "Fabric",
    "product_highlight_1_value": "100% Cotton",
    "product_highlight_2_label": "Fit",
    "product_highlight_2_value": "Slim Fit",
    "product_discountable": "TRUE",
    "variant_manage_inventory": "TRUE",
    "variant_allow_backorder": "FALSE",
    "variant_price": "1999",
    "variant_quantity": "100",
    "variant_option_1_name": "Size",
    "variant_option_2_name": "Color",
    "variant_option_2_value": '{"name": "Black", "code": "#000000"}',
    "collection_1": "formal-wear",
    "collection_2": "new-arrivals",
    "category_1": "Shirts",
    "category_2": "Formal",
    "tag_1": "New Drops",
    "tag_2": "Cotton",
    "tag_3": "Formal Wear",
}

TEMPLATE_ROWS = [
    {
        **_SHARED,
        "product_variant_images": "https://example.com/images/oxford-shirt-1.jpg,https://example.com/images/oxford-shirt-2.jpg",
        "product_variant_title": "M / Black",
        "product_variant_sku": "DUDE-SHT-OXFRD-BLK-M",
        "variant_option_1_value": "M",
    },
    {
        **_SHARED,
        "product_variant_images": "https://example.com/images/oxford-shirt-3.jpg,https://example.com/images/oxford-shirt-4.jpg",
        "product_variant_title": "L / Black",
        "product_variant_sku": "DUDE-SHT-OXFRD-BLK-L",
        "variant_option_1_value": "L",
    },
]


def generate_template() -> str:
    """Header row plus two variant rows of one product."""
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=TEMPLATE_HEADERS, lineterminator="\n")
    writer.writeheader()
    writer.writerows(TEMPLATE_ROWS)
    return buffer.getvalue()
