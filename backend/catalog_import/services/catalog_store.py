"""Relational store access used by catalog preview and import."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from catalog_import.db.models import (
    Category,
    Collection,
    InventoryItem,
    Product,
    ProductImage,
    ProductTag,
    ProductVariant,
)

logger = logging.getLogger(__name__)

_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)


def slugify(value: str) -> str:
    return re.sub(r"\s+", "-", value.strip().lower())


class SqlAlchemyCatalogStore:
    """Catalog reads and writes over one SQLAlchemy session.

    Writes keyed by a unique column (primary image, inventory record, tag,
    join rows) are single INSERT ... ON CONFLICT statements. Products and
    variants are looked up first because the caller needs to know whether
    each one was created or updated.
    """

    def __init__(self, session: Session):
        self.session = session

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Commit everything written inside the block, or roll it all back."""
        try:
            yield
            self.session.commit()
        except Exception:
            logger.debug("Rolling back catalog transaction")
            self.session.rollback()
            raise

    def _insert(self, model: Any):
        dialect = self.session.get_bind().dialect.name
        if dialect == "postgresql":
            return pg_insert(model)
        if dialect == "sqlite":
            return sqlite_insert(model)
        raise NotImplementedError(f"Upserts are not supported on the {dialect} dialect")

    # Products

    def find_product_by_handle(self, handle: str) -> Product | None:
        return self.session.scalars(select(Product).where(Product.slug == handle).limit(1)).first()

    def create_product(
        self,
        *,
        handle: str,
        title: str,
        subtitle: str | None,
        description: str | None,
        status: str,
        price: Decimal,
        discountable: bool,
        highlights: list[dict[str, str]] | None = None,
    ) -> Product:
        product = Product(
            slug=handle,
            title=title,
            subtitle=subtitle,
            description=description,
            status=status,
            price=price,
            discountable=discountable,
            highlights=highlights or None,
        )
        self.session.add(product)
        self.session.flush()
        return product

    def update_product(
        self,
        product: Product,
        *,
        title: str,
        subtitle: str | None,
        description: str | None,
        status: str,
    ) -> None:
        product.title = title
        product.subtitle = subtitle
        product.description = description
        product.status = status
        product.updated_at = datetime.now(timezone.utc)
        self.session.flush()

    def upsert_primary_image(self, product_id: str, image_url: str) -> None:
        stmt = self._insert(ProductImage).values(
            product_id=product_id, image_url=image_url, is_primary=True, sort_order=0
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["product_id"],
            set_={"image_url": image_url, "is_primary": True, "sort_order": 0},
        )
        self.session.execute(stmt)

    # Variants and inventory

    def find_variant_by_sku(self, sku: str) -> ProductVariant | None:
        return self.session.scalars(
            select(ProductVariant).where(ProductVariant.sku == sku).limit(1)
        ).first()

    def create_variant(
        self,
        product_id: str,
        *,
        name: str,
        sku: str,
        price: Decimal,
        stock: int,
        images: list[str] | None = None,
        options: list[dict[str, Any]] | None = None,
    ) -> ProductVariant:
        variant = ProductVariant(
            product_id=product_id,
            name=name,
            sku=sku,
            price=price,
            stock=stock,
            active=True,
            images=images or None,
            options=options or None,
        )
        self.session.add(variant)
        self.session.flush()
        return variant

    def update_variant(
        self, variant: ProductVariant, *, name: str, price: Decimal, stock: int
    ) -> None:
        variant.name = name
        variant.price = price
        variant.stock = stock
        variant.active = True
        variant.updated_at = datetime.now(timezone.utc)
        self.session.flush()

    def upsert_inventory_record(
        self,
        variant_id: str,
        *,
        sku: str,
        quantity: int,
        track_quantity: bool,
        allow_backorders: bool,
    ) -> None:
        values = {
            "sku": sku,
            "quantity": quantity,
            "available_quantity": quantity,
            "track_quantity": track_quantity,
            "allow_backorders": allow_backorders,
        }
        stmt = self._insert(InventoryItem).values(variant_id=variant_id, **values)
        stmt = stmt.on_conflict_do_update(
            index_elements=["variant_id"],
            set_={**values, "updated_at": func.now()},
        )
        self.session.execute(stmt)

    # Taxonomy

    def find_category_by_ref(self, ref: str) -> Category | None:
        return self._find_by_ref(Category, Category.name, ref)

    def find_collection_by_ref(self, ref: str) -> Collection | None:
        return self._find_by_ref(Collection, Collection.title, ref)

    def _find_by_ref(self, model: Any, label_column: Any, ref: str):
        """Resolve a slug, a case-insensitive name/title, or a UUID."""
        found = self.session.scalars(
            select(model).where(model.slug == slugify(ref)).limit(1)
        ).first()
        if found is None:
            found = self.session.scalars(
                select(model).where(func.lower(label_column) == ref.strip().lower()).limit(1)
            ).first()
        if found is None and _UUID_RE.match(ref.strip()):
            found = self.session.get(model, ref.strip().lower())
        return found

    def find_or_create_tag(self, name: str) -> ProductTag:
        slug = slugify(name)
        stmt = self._insert(ProductTag).values(name=name.strip(), slug=slug)
        self.session.execute(stmt.on_conflict_do_nothing(index_elements=["slug"]))
        return self.session.scalars(select(ProductTag).where(ProductTag.slug == slug)).one()

    def upsert_join(self, model: Any, *, ignore_duplicate: bool = True, **keys: str) -> bool:
        """Insert a join row; returns False when it already existed."""
        stmt = self._insert(model).values(**keys)
        if ignore_duplicate:
            stmt = stmt.on_conflict_do_nothing()
        result = self.session.execute(stmt)
        return bool(result.rowcount)
