"""Database session and catalog store dependencies."""

from collections.abc import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from catalog_import.db.session import get_db
from catalog_import.services.catalog_store import SqlAlchemyCatalogStore


def get_session() -> Generator[Session, None, None]:
    """FastAPI dependency that yields a managed SQLAlchemy session."""
    yield from get_db()


def get_catalog_store(db: Session = Depends(get_session)) -> SqlAlchemyCatalogStore:
    return SqlAlchemyCatalogStore(db)
