from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Mapping

import pytest

# Make the catalog_api package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from catalog_api.core.config import Settings  # noqa: E402
from catalog_api.db import session as db_session  # noqa: E402
from catalog_api.repositories.base import StoreError  # noqa: E402
from catalog_api.repositories.factory import build_stores  # noqa: E402


@pytest.fixture()
def settings(tmp_path) -> Settings:
    """SQL backend on a temporary SQLite file, with a cheap Argon2 cost."""
    return Settings(
        store_backend="sql",
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        jwt_token_secret="test-secret",
        hash_time_cost=1,
        hash_memory_cost=1024,
        hash_parallelism=1,
    )


@pytest.fixture()
def stores(settings):
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]
    built = build_stores(settings)
    built.bootstrap()

    yield built

    built.close()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


class FlakyStore:
    """Delegates to a real store but raises StoreError for the listed operations."""

    def __init__(self, inner, fail_on=(), fail_after: int = 0):
        self.inner = inner
        self.fail_on = set(fail_on)
        self.fail_after = fail_after
        self.calls: dict[str, int] = {}

    def _call(self, op: str, *args):
        count = self.calls.get(op, 0)
        self.calls[op] = count + 1
        if op in self.fail_on and count >= self.fail_after:
            raise StoreError(f"{op} exploded")
        return getattr(self.inner, op)(*args)

    def insert_one(self, document: Mapping[str, Any]):
        return self._call("insert_one", document)

    def find(self, filter):
        return self._call("find", filter)

    def find_one(self, filter):
        return self._call("find_one", filter)

    def update_one(self, filter, fields):
        return self._call("update_one", filter, fields)

    def delete_one(self, filter):
        return self._call("delete_one", filter)


@pytest.fixture()
def flaky():
    return FlakyStore
