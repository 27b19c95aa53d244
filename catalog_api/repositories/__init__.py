"""
Persistence adapters.

Services depend only on the CollectionStore capability (insert, find,
find-one, update, delete); MongoDB and SQL drivers implement it.
"""

from .base import CollectionStore, DuplicateKeyError, StoreError

__all__ = ["CollectionStore", "DuplicateKeyError", "StoreError"]
