"""Create-or-update import of previewed product groups."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Protocol

from catalog_import.api.schemas.catalog_import import (
    ImportFailure,
    ImportResult,
    ImportWarning,
    ProductGroup,
)
from catalog_import.db.models import (
    ProductCategory,
    ProductCollection,
    ProductTagAssignment,
)
from catalog_import.services.row_validator import CatalogLookup

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, ImportResult], None]


class CatalogStore(CatalogLookup, Protocol):
    """Store surface the executor writes through."""

    def transaction(self) -> AbstractContextManager[None]: ...

    def find_product_by_handle(self, handle: str) -> Any: ...

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
    ) -> Any: ...

    def update_product(
        self, product: Any, *, title: str, subtitle: str | None, description: str | None, status: str
    ) -> None: ...

    def upsert_primary_image(self, product_id: str, image_url: str) -> None: ...

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
    ) -> Any: ...

    def update_variant(self, variant: Any, *, name: str, price: Decimal, stock: int) -> None: ...

    def upsert_inventory_record(
        self, variant_id: str, *, sku: str, quantity: int, track_quantity: bool, allow_backorders: bool
    ) -> None: ...

    def find_or_create_tag(self, name: str) -> Any: ...

    def upsert_join(self, model: Any, *, ignore_duplicate: bool = True, **keys: str) -> bool: ...


@dataclass
class GroupOutcome:
    """Result of importing one product group; failures carry `error`."""

    handle: str
    error: ImportFailure | None = None
    product_created: bool = False
    variants_created: int = 0
    variants_updated: int = 0
    inventory_updated: int = 0
    categories_linked: int = 0
    collections_linked: int = 0
    tags_linked: int = 0
    warnings: list[ImportWarning] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, handle: str, message: str, details: str | None = None) -> "GroupOutcome":
        return cls(handle=handle, error=ImportFailure(product_handle=handle, message=message, details=details))


def fold_outcome(result: ImportResult, outcome: GroupOutcome) -> None:
    """Add one group's outcome to the running totals."""
    if not outcome.ok:
        result.failed += 1
        result.errors.append(outcome.error)
        result.success = False
        return
    if outcome.product_created:
        result.products_created += 1
    else:
        result.products_updated += 1
    result.variants_created += outcome.variants_created
    result.variants_updated += outcome.variants_updated
    result.inventory_updated += outcome.inventory_updated
    result.categories_linked += outcome.categories_linked
    result.collections_linked += outcome.collections_linked
    result.tags_linked += outcome.tags_linked
    result.warnings.extend(outcome.warnings)


class CatalogImportExecutor:
    """Import product groups one at a time, each in its own transaction.

    A group that fails (blocking findings, or any exception while writing)
    is reported and rolled back; groups before and after it are unaffected.
    """

    def __init__(self, store: CatalogStore, progress_callback: ProgressCallback | None = None):
        self.store = store
        self.progress_callback = progress_callback

    def execute(self, groups: list[ProductGroup]) -> ImportResult:
        started = time.monotonic()
        result = ImportResult()

        for position, group in enumerate(groups, start=1):
            fold_outcome(result, self._run_group(group))
            if self.progress_callback is not None:
                self.progress_callback(position, len(groups), result)

        result.duration_ms = int((time.monotonic() - started) * 1000)
        logger.info(
            f"Catalog import finished in {result.duration_ms}ms: "
            f"{result.products_created} products created, {result.products_updated} updated, "
            f"{result.variants_created} variants created, {result.variants_updated} updated, "
            f"{result.failed} failed"
        )
        return result

    def _run_group(self, group: ProductGroup) -> GroupOutcome:
        # Any blocking finding skips the group, whichever list carries it
        blocking = [f for f in group.errors + group.warnings if f.is_blocking]
        if blocking:
            logger.info(f"Skipping product {group.handle}: {len(blocking)} blocking finding(s)")
            return GroupOutcome.failed(
                group.handle,
                "Skipped due to validation errors",
                ", ".join(finding.message for finding in blocking),
            )

        try:
            with self.store.transaction():
                return self.import_one_product(group)
        except Exception as e:
            logger.error(f"Import failed for product {group.handle}: {e}", exc_info=True)
            return GroupOutcome.failed(group.handle, str(e) or type(e).__name__)

    def import_one_product(self, group: ProductGroup) -> GroupOutcome:
        if not group.variants:
            raise ValueError(f"Product {group.handle} has no variants")

        outcome = GroupOutcome(handle=group.handle)
        store = self.store

        product = store.find_product_by_handle(group.handle)
        if product is not None:
            store.update_product(
                product,
                title=group.title,
                subtitle=group.subtitle,
                description=group.description,
                status=group.status.value,
            )
        else:
            product = store.create_product(
                handle=group.handle,
                title=group.title,
                subtitle=group.subtitle,
                description=group.description,
                status=group.status.value,
                price=min(variant.price for variant in group.variants),
                discountable=group.discountable,
                highlights=[h.model_dump() for h in group.highlights],
            )
            outcome.product_created = True

        if group.thumbnail:
            store.upsert_primary_image(product.id, group.thumbnail)

        for variant in group.variants:
            existing = store.find_variant_by_sku(variant.sku)
            if existing is not None:
                store.update_variant(
                    existing, name=variant.title, price=variant.price, stock=variant.quantity
                )
                variant_id = existing.id
                outcome.variants_updated += 1
            else:
                created = store.create_variant(
                    product.id,
                    name=variant.title,
                    sku=variant.sku,
                    price=variant.price,
                    stock=variant.quantity,
                    images=list(variant.images),
                    options=[option.model_dump() for option in variant.options],
                )
                variant_id = created.id
                outcome.variants_created += 1
            store.upsert_inventory_record(
                variant_id,
                sku=variant.sku,
                quantity=variant.quantity,
                track_quantity=variant.manage_inventory,
                allow_backorders=variant.allow_backorder,
            )
            outcome.inventory_updated += 1

        for ref in group.categories:
            category = store.find_category_by_ref(ref)
            if category is None:
                outcome.warnings.append(
                    ImportWarning(product_handle=group.handle, message=f"Category not found: {ref}")
                )
                continue
            store.upsert_join(ProductCategory, product_id=product.id, category_id=category.id)
            outcome.categories_linked += 1

        for ref in group.collections:
            collection = store.find_collection_by_ref(ref)
            if collection is None:
                outcome.warnings.append(
                    ImportWarning(product_handle=group.handle, message=f"Collection not found: {ref}")
                )
                continue
            store.upsert_join(ProductCollection, product_id=product.id, collection_id=collection.id)
            outcome.collections_linked += 1

        for name in group.tags:
            tag = store.find_or_create_tag(name)
            store.upsert_join(ProductTagAssignment, product_id=product.id, tag_id=tag.id)
            outcome.tags_linked += 1

        logger.debug(
            f"Imported product {group.handle}: created={outcome.product_created} "
            f"variants +{outcome.variants_created}/~{outcome.variants_updated}"
        )
        return outcome


def execute_import(
    groups: list[ProductGroup], store: CatalogStore, progress_callback: ProgressCallback | None = None
) -> ImportResult:
    """Import every group that carries no blocking finding."""
    return CatalogImportExecutor(store, progress_callback).execute(groups)
