from __future__ import annotations

from types import SimpleNamespace

import pytest
from pymongo.errors import DuplicateKeyError as MongoDuplicateKeyError, ServerSelectionTimeoutError

from catalog_api.repositories.base import DuplicateKeyError, StoreError
from catalog_api.repositories.mongo_store import MongoCollection


class StubCollection:
    """Records calls the way pymongo's Collection would receive them."""

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.calls = []

    def _record(self, name, *args, **kwargs):
        self.calls.append((name, args, kwargs))
        if self.error:
            raise self.error

    def insert_one(self, doc):
        self._record("insert_one", doc)
        return SimpleNamespace(inserted_id="new-id")

    def find(self, filter):
        self._record("find", filter)
        return iter([{"_id": 1}])

    def find_one(self, filter):
        self._record("find_one", filter)
        return None

    def update_one(self, filter, update):
        self._record("update_one", filter, update)
        return SimpleNamespace(matched_count=1)

    def delete_one(self, filter):
        self._record("delete_one", filter)
        return SimpleNamespace(deleted_count=0)

    def create_index(self, keys, **kwargs):
        self._record("create_index", keys, **kwargs)


def test_operations_delegate_to_pymongo():
    stub = StubCollection()
    col = MongoCollection(stub)
    assert col.insert_one({"a": 1}) == "new-id"
    assert col.find({"a": 1}) == [{"_id": 1}]
    assert col.find_one({"a": 1}) is None
    assert col.update_one({"_id": 1}, {"_id": 2, "a": 3}) == 1
    assert col.delete_one({"_id": 1}) == 0
    col.ensure_unique_index("username")

    assert stub.calls[3] == ("update_one", ({"_id": 1}, {"$set": {"a": 3}}), {})
    assert stub.calls[5] == ("create_index", ([("username", 1)],), {"unique": True})


def test_driver_errors_are_translated():
    col = MongoCollection(StubCollection(ServerSelectionTimeoutError("no servers")))
    for call in (lambda: col.find({}), lambda: col.find_one({}), lambda: col.delete_one({})):
        with pytest.raises(StoreError):
            call()

    dup = MongoCollection(StubCollection(MongoDuplicateKeyError("E11000")))
    with pytest.raises(DuplicateKeyError):
        dup.insert_one({"username": "a@gmail.com"})
