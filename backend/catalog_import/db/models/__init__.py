"""Database models package."""
from catalog_import.db.models.catalog import (
    Category,
    Collection,
    InventoryItem,
    Product,
    ProductCategory,
    ProductCollection,
    ProductImage,
    ProductTag,
    ProductTagAssignment,
    ProductVariant,
)
from catalog_import.db.models.import_job import ImportJob

__all__ = [
    "Category",
    "Collection",
    "ImportJob",
    "InventoryItem",
    "Product",
    "ProductCategory",
    "ProductCollection",
    "ProductImage",
    "ProductTag",
    "ProductTagAssignment",
    "ProductVariant",
]
