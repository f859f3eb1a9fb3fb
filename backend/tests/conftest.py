# Shared pytest fixtures
from __future__ import annotations

import csv
import io
import os
import uuid
from contextlib import contextmanager
from decimal import Decimal
from types import SimpleNamespace

# Point settings at SQLite before any application module builds its engine
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import catalog_import.db.models  # noqa: F401  registers tables
from catalog_import.db.base import Base
from catalog_import.services.catalog_store import SqlAlchemyCatalogStore

OXFORD_ROW = {
    "product_handle": "oxford-shirt",
    "product_title": "Oxford Formal Shirt",
    "product_description": "Classic oxford formal shirt",
    "product_status": "published",
    "product_variant_title": "M / Black",
    "product_variant_sku": "DUDE-SHT-OXFRD-BLK-M",
    "variant_price": "1999",
    "variant_quantity": "100",
    "variant_manage_inventory": "TRUE",
}


def make_csv(rows: list[dict[str, str]]) -> bytes:
    """Render rows as CSV bytes using the union of their keys as header."""
    headers: list[str] = []
    for row in rows:
        for key in row:
            if key not in headers:
                headers.append(key)
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=headers, lineterminator="\n")
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue().encode("utf-8")


def oxford_rows() -> list[dict[str, str]]:
    return [
        dict(OXFORD_ROW),
        {**OXFORD_ROW, "product_variant_title": "L / Black", "product_variant_sku": "DUDE-SHT-OXFRD-BLK-L"},
    ]


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture()
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def catalog_store(db_session) -> SqlAlchemyCatalogStore:
    return SqlAlchemyCatalogStore(db_session)


class FakeCatalogStore:
    """In-memory stand-in for the store collaborator surface."""

    def __init__(self):
        self.products: dict[str, SimpleNamespace] = {}
        self.variants: dict[str, SimpleNamespace] = {}
        self.inventory: dict[str, dict] = {}
        self.images: dict[str, str] = {}
        self.categories: dict[str, SimpleNamespace] = {}
        self.collections: dict[str, SimpleNamespace] = {}
        self.tags: dict[str, SimpleNamespace] = {}
        self.joins: set[tuple] = set()
        self.commits = 0
        self.rollbacks = 0

    @contextmanager
    def transaction(self):
        try:
            yield
            self.commits += 1
        except Exception:
            self.rollbacks += 1
            raise

    def add_category(self, slug: str) -> SimpleNamespace:
        category = SimpleNamespace(id=str(uuid.uuid4()), slug=slug)
        self.categories[slug] = category
        return category

    def find_product_by_handle(self, handle):
        return self.products.get(handle)

    def create_product(self, *, handle, title, subtitle, description, status, price, discountable, highlights=None):
        product = SimpleNamespace(
            id=str(uuid.uuid4()), slug=handle, title=title, subtitle=subtitle,
            description=description, status=status, price=Decimal(price),
        )
        self.products[handle] = product
        return product

    def update_product(self, product, *, title, subtitle, description, status):
        product.title, product.subtitle = title, subtitle
        product.description, product.status = description, status

    def upsert_primary_image(self, product_id, image_url):
        self.images[product_id] = image_url

    def find_variant_by_sku(self, sku):
        return self.variants.get(sku)

    def create_variant(self, product_id, *, name, sku, price, stock, images=None, options=None):
        variant = SimpleNamespace(id=str(uuid.uuid4()), product_id=product_id, name=name, sku=sku, price=price, stock=stock)
        self.variants[sku] = variant
        return variant

    def update_variant(self, variant, *, name, price, stock):
        variant.name, variant.price, variant.stock = name, price, stock

    def upsert_inventory_record(self, variant_id, *, sku, quantity, track_quantity, allow_backorders):
        self.inventory[variant_id] = {
            "sku": sku,
            "quantity": quantity,
            "track_quantity": track_quantity,
            "allow_backorders": allow_backorders,
        }

    def find_category_by_ref(self, ref):
        return self.categories.get(ref)

    def find_collection_by_ref(self, ref):
        return self.collections.get(ref)

    def find_or_create_tag(self, name):
        return self.tags.setdefault(name, SimpleNamespace(id=str(uuid.uuid4()), name=name))

    def upsert_join(self, model, *, ignore_duplicate=True, **keys):
        key = (model.__tablename__, tuple(sorted(keys.items())))
        if key in self.joins:
            return False
        self.joins.add(key)
        return True


@pytest.fixture()
def fake_store() -> FakeCatalogStore:
    return FakeCatalogStore()
