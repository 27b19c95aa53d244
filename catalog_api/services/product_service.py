"""
Product catalog use cases: list, fetch, bulk create, overlay update, delete.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from catalog_api.core.errors import (
    DecodeFailed,
    InsertFailed,
    NotFound,
    PersistFailed,
    QueryFailed,
    ValidationFailed,
)
from catalog_api.domain.filters import ID_FIELD, build_filter, parse_object_id
from catalog_api.domain.products import Product, apply_patch
from catalog_api.domain.validation import validate_product
from catalog_api.repositories.base import CollectionStore, StoreError

logger = logging.getLogger(__name__)


class ProductService:
    """CRUD over product documents held in a CollectionStore."""

    def __init__(self, store: CollectionStore):
        self.store = store

    # -------------------------------------- helpers --------------------------------------
    def _decode(self, doc: Mapping[str, Any]) -> Product:
        try:
            return Product.from_document(doc)
        except (KeyError, TypeError, ValueError) as exc:
            logger.error("Unable to decode product document %s: %s", doc.get(ID_FIELD), exc)
            raise DecodeFailed() from exc

    def _find_one(self, filter: Mapping[str, Any]) -> Mapping[str, Any]:
        try:
            doc = self.store.find_one(filter)
        except StoreError as exc:
            logger.error("Unable to find the product: %s", exc)
            raise QueryFailed("Unable to find the product") from exc
        if doc is None:
            raise NotFound()
        return doc

    # -------------------------------------- reads --------------------------------------
    def list_products(self, params: Mapping[str, Any]) -> list[Product]:
        filter = build_filter(params)
        try:
            docs = self.store.find(filter)
        except StoreError as exc:
            logger.error("Unable to find the products: %s", exc)
            raise QueryFailed() from exc
        return [self._decode(doc) for doc in docs]

    def get_product(self, product_id: str) -> Product:
        doc_id = parse_object_id(product_id)
        return self._decode(self._find_one({ID_FIELD: doc_id}))

    # -------------------------------------- writes --------------------------------------
    def create_products(self, payloads: Sequence[Mapping[str, Any]]) -> list[str]:
        """
        Validate every payload, then insert them one by one with fresh identifiers.

        The first failed insert aborts the batch and no identifiers are
        returned; documents inserted before it stay in the store.
        """
        products = []
        for index, payload in enumerate(payloads):
            violations = validate_product(payload)
            if violations:
                logger.warning("Unable to validate product #%d: %s", index, violations)
                raise ValidationFailed(violations)
            products.append(Product.from_payload(payload))

        inserted: list[str] = []
        for product in products:
            try:
                doc_id = self.store.insert_one(product.to_document())
            except StoreError as exc:
                logger.error("Unable to insert to database: %s (%d inserted before failure)", exc, len(inserted))
                raise InsertFailed() from exc
            inserted.append(str(doc_id))
        return inserted

    def update_product(self, product_id: str, patch: Mapping[str, Any]) -> Product:
        doc_id = parse_object_id(product_id)
        filter = {ID_FIELD: doc_id}
        existing = self._decode(self._find_one(filter))

        merged = apply_patch(existing.fields(), patch)
        violations = validate_product(merged)
        if violations:
            logger.warning("Unable to validate merged product %s: %s", doc_id, violations)
            raise ValidationFailed(violations)

        product = Product.from_payload(merged)
        product.id = doc_id
        try:
            matched = self.store.update_one(filter, product.fields())
        except StoreError as exc:
            logger.error("Unable to update the product %s: %s", doc_id, exc)
            raise PersistFailed("Unable to update the product") from exc
        if not matched:
            # removed between read and write
            raise NotFound()
        return product

    def delete_product(self, product_id: str) -> int:
        doc_id = parse_object_id(product_id)
        try:
            return self.store.delete_one({ID_FIELD: doc_id})
        except StoreError as exc:
            logger.error("Unable to delete the product %s: %s", doc_id, exc)
            raise PersistFailed("Unable to delete the product") from exc
