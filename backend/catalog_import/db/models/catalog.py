"""SQLAlchemy models for the catalog tables touched by bulk imports."""

import uuid

from sqlalchemy import (
    Boolean,
    Column,
    ForeignKey,
    Integer,
    JSON,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import DateTime

from catalog_import.db.base import Base

JSONType = JSON().with_variant(JSONB, "postgresql")


def _uuid() -> str:
    return str(uuid.uuid4())


class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=_uuid)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    title = Column(String(255), nullable=False)
    subtitle = Column(String(255))
    description = Column(Text)
    status = Column(String(16), nullable=False, default="draft")
    price = Column(Numeric(12, 2), nullable=False, default=0)
    discountable = Column(Boolean, nullable=False, default=True)
    highlights = Column(JSONType)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class ProductImage(Base):
    __tablename__ = "product_images"

    id = Column(String(36), primary_key=True, default=_uuid)
    # One primary image per product; bulk import upserts on this key
    product_id = Column(
        String(36),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    image_url = Column(Text, nullable=False)
    is_primary = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)


class ProductVariant(Base):
    __tablename__ = "product_variants"

    id = Column(String(36), primary_key=True, default=_uuid)
    product_id = Column(
        String(36), ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    )
    name = Column(String(255), nullable=False)
    sku = Column(String(64), nullable=False, unique=True, index=True)
    price = Column(Numeric(12, 2), nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    active = Column(Boolean, nullable=False, default=True)
    images = Column(JSONType)
    options = Column(JSONType)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class InventoryItem(Base):
    __tablename__ = "inventory_items"

    id = Column(String(36), primary_key=True, default=_uuid)
    variant_id = Column(
        String(36),
        ForeignKey("product_variants.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    sku = Column(String(64), nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    available_quantity = Column(Integer, nullable=False, default=0)
    track_quantity = Column(Boolean, nullable=False, default=True)
    allow_backorders = Column(Boolean, nullable=False, default=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class Category(Base):
    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)


class Collection(Base):
    __tablename__ = "collections"

    id = Column(String(36), primary_key=True, default=_uuid)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)


class ProductTag(Base):
    __tablename__ = "product_tags"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)


class ProductCategory(Base):
    __tablename__ = "product_categories"

    product_id = Column(
        String(36), ForeignKey("products.id", ondelete="CASCADE"), primary_key=True
    )
    category_id = Column(
        String(36), ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True
    )


class ProductCollection(Base):
    __tablename__ = "product_collections"

    product_id = Column(
        String(36), ForeignKey("products.id", ondelete="CASCADE"), primary_key=True
    )
    collection_id = Column(
        String(36), ForeignKey("collections.id", ondelete="CASCADE"), primary_key=True
    )


class ProductTagAssignment(Base):
    __tablename__ = "product_tag_assignments"

    product_id = Column(
        String(36), ForeignKey("products.id", ondelete="CASCADE"), primary_key=True
    )
    tag_id = Column(
        String(36), ForeignKey("product_tags.id", ondelete="CASCADE"), primary_key=True
    )
