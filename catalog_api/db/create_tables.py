"""Utility script to prepare the configured store (SQL tables or Mongo unique index)."""
from __future__ import annotations

from pymongo.errors import PyMongoError
from sqlalchemy.exc import SQLAlchemyError

from catalog_api.core.config import get_settings
from catalog_api.repositories.base import StoreError
from catalog_api.repositories.factory import build_stores


def create_all() -> None:
    stores = build_stores(get_settings())
    try:
        stores.bootstrap()
    finally:
        stores.close()


if __name__ == "__main__":
    try:
        create_all()
        print("Store prepared successfully.")
    except (SQLAlchemyError, PyMongoError, StoreError) as exc:
        raise SystemExit(f"Failed to prepare store: {exc}") from exc
