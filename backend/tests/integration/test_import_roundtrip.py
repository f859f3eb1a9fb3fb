from __future__ import annotations

from decimal import Decimal

from sqlalchemy import func, select

from conftest import OXFORD_ROW, make_csv, oxford_rows

from catalog_import.db.models import (
    Category,
    InventoryItem,
    Product,
    ProductCategory,
    ProductTagAssignment,
    ProductVariant,
)
from catalog_import.services.catalog_preview import preview_import
from catalog_import.services.catalog_template import generate_template
from catalog_import.services.import_executor import execute_import


def _count(session, model) -> int:
    return session.scalar(select(func.count()).select_from(model))


def test_preview_then_import_oxford_shirt(catalog_store, db_session) -> None:
    preview = preview_import(make_csv(oxford_rows()), catalog_store)
    assert preview.success is True

    result = execute_import(preview.product_groups, catalog_store)

    assert result.success is True
    assert result.products_created == 1
    assert result.variants_created == 2
    assert result.inventory_updated == 2
    product = db_session.scalars(select(Product)).one()
    assert product.slug == "oxford-shirt"
    assert product.status == "published"
    assert product.price == Decimal("1999")
    assert _count(db_session, ProductVariant) == 2
    assert _count(db_session, InventoryItem) == 2


def test_reimport_updates_in_place(catalog_store, db_session) -> None:
    execute_import(preview_import(make_csv(oxford_rows())).product_groups, catalog_store)

    changed = [{**row, "variant_quantity": "7", "product_title": "Oxford Shirt v2"} for row in oxford_rows()]
    preview = preview_import(make_csv(changed), catalog_store)
    result = execute_import(preview.product_groups, catalog_store)

    assert [w.message for w in preview.warnings if w.field == "sku"] == [
        "SKU already exists in database: DUDE-SHT-OXFRD-BLK-M (will be updated)",
        "SKU already exists in database: DUDE-SHT-OXFRD-BLK-L (will be updated)",
    ]
    assert result.products_created == 0
    assert result.products_updated == 1
    assert result.variants_updated == 2
    assert _count(db_session, Product) == 1
    assert _count(db_session, ProductVariant) == 2
    assert db_session.scalars(select(Product)).one().title == "Oxford Shirt v2"
    assert {item.quantity for item in db_session.scalars(select(InventoryItem))} == {7}


def test_blocked_and_failing_groups_leave_others_intact(catalog_store, db_session) -> None:
    rows = [
        {**OXFORD_ROW, "product_handle": "good-one", "product_variant_sku": "DUDE-SHT-GOODA-BLK-M"},
        {**OXFORD_ROW, "product_handle": "bad-price", "product_variant_sku": "DUDE-SHT-BADPR-BLK-M", "variant_price": "0"},
        {**OXFORD_ROW, "product_handle": "good-two", "product_variant_sku": "DUDE-SHT-GOODB-BLK-M"},
    ]
    preview = preview_import(make_csv(rows), catalog_store)

    result = execute_import(preview.product_groups, catalog_store)

    assert result.products_created == 2
    assert result.failed == 1
    assert result.errors[0].product_handle == "bad-price"
    assert sorted(p.slug for p in db_session.scalars(select(Product))) == ["good-one", "good-two"]


def test_template_import_links_taxonomy(catalog_store, db_session) -> None:
    db_session.add(Category(name="Shirts", slug="shirts"))
    db_session.commit()

    preview = preview_import(generate_template().encode("utf-8"), catalog_store)
    result = execute_import(preview.product_groups, catalog_store)

    assert "Category not found and will not be linked: Formal" in [w.message for w in preview.warnings]
    assert result.success is True
    assert result.categories_linked == 1
    assert result.tags_linked == 3
    assert _count(db_session, ProductCategory) == 1
    assert _count(db_session, ProductTagAssignment) == 3
    assert {w.message for w in result.warnings} >= {"Category not found: Formal"}


def test_sub_cent_price_is_blocked_before_it_reaches_the_store(catalog_store, db_session) -> None:
    preview = preview_import(make_csv([{**OXFORD_ROW, "variant_price": "0.001"}]), catalog_store)

    assert preview.success is False
    assert [f.message for f in preview.blocking_errors] == ["Price must be greater than 0"]

    result = execute_import(preview.product_groups, catalog_store)

    assert result.failed == 1
    assert _count(db_session, ProductVariant) == 0


def test_oversized_quantity_is_blocked_at_preview(catalog_store, db_session) -> None:
    preview = preview_import(make_csv([{**OXFORD_ROW, "variant_quantity": "9" * 40}]), catalog_store)

    assert preview.success is False
    assert execute_import(preview.product_groups, catalog_store).failed == 1
    assert _count(db_session, Product) == 0
