"""The narrow collection capability services depend on."""
from __future__ import annotations

from typing import Any, Mapping, Protocol


class StoreError(Exception):
    """Any failure reported by the underlying persistence driver."""


class DuplicateKeyError(StoreError):
    """A write violated a unique index."""


class CollectionStore(Protocol):
    """Insert / find / find-one / update / delete over one document collection."""

    def insert_one(self, document: Mapping[str, Any]) -> Any:
        """Insert and return the document identifier."""

    def find(self, filter: Mapping[str, Any]) -> list[dict[str, Any]]:
        ...

    def find_one(self, filter: Mapping[str, Any]) -> dict[str, Any] | None:
        ...

    def update_one(self, filter: Mapping[str, Any], fields: Mapping[str, Any]) -> int:
        """Set `fields` on the first match and return the matched count."""

    def delete_one(self, filter: Mapping[str, Any]) -> int:
        """Return the deleted count (0 or 1)."""
