"""Document collection backed by MongoDB (pymongo)."""
from __future__ import annotations

from typing import Any, Mapping

from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError as MongoDuplicateKeyError, PyMongoError

from catalog_api.core.config import Settings
from .base import DuplicateKeyError, StoreError


def connect(settings: Settings) -> MongoClient:
    """Client whose calls are bounded by the configured timeout."""
    return MongoClient(
        settings.mongo_uri,
        serverSelectionTimeoutMS=settings.db_timeout_ms,
        connectTimeoutMS=settings.db_timeout_ms,
        socketTimeoutMS=settings.db_timeout_ms,
    )


class MongoCollection:
    """Thin adapter from a pymongo Collection to the collection capability."""

    def __init__(self, collection: Collection):
        self.collection = collection

    def ensure_unique_index(self, field: str) -> None:
        try:
            self.collection.create_index([(field, ASCENDING)], unique=True)
        except PyMongoError as exc:
            raise StoreError(str(exc)) from exc

    def insert_one(self, document: Mapping[str, Any]) -> Any:
        try:
            return self.collection.insert_one(dict(document)).inserted_id
        except MongoDuplicateKeyError as exc:
            raise DuplicateKeyError(str(exc)) from exc
        except PyMongoError as exc:
            raise StoreError(str(exc)) from exc

    def find(self, filter: Mapping[str, Any]) -> list[dict[str, Any]]:
        try:
            return list(self.collection.find(dict(filter)))
        except PyMongoError as exc:
            raise StoreError(str(exc)) from exc

    def find_one(self, filter: Mapping[str, Any]) -> dict[str, Any] | None:
        try:
            return self.collection.find_one(dict(filter))
        except PyMongoError as exc:
            raise StoreError(str(exc)) from exc

    def update_one(self, filter: Mapping[str, Any], fields: Mapping[str, Any]) -> int:
        values = {k: v for k, v in fields.items() if k != "_id"}
        try:
            return self.collection.update_one(dict(filter), {"$set": values}).matched_count
        except MongoDuplicateKeyError as exc:
            raise DuplicateKeyError(str(exc)) from exc
        except PyMongoError as exc:
            raise StoreError(str(exc)) from exc

    def delete_one(self, filter: Mapping[str, Any]) -> int:
        try:
            return self.collection.delete_one(dict(filter)).deleted_count
        except PyMongoError as exc:
            raise StoreError(str(exc)) from exc
