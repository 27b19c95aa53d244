"""Product entity, its document codec and the overlay merge used by updates."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from bson import ObjectId
from bson.errors import InvalidId

PRODUCT_FIELDS = (
    "product_name",
    "price",
    "currency",
    "discount",
    "vendor",
    "accessories",
    "is_essential",
)
IMMUTABLE_FIELDS = {"id", "_id"}


@dataclass
class Product:
    product_name: str
    price: int
    currency: str
    vendor: str
    discount: int = 0
    accessories: list[str] = field(default_factory=list)
    is_essential: bool = False
    id: ObjectId | None = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Product":
        """Decode a stored document; raises KeyError/TypeError/ValueError on bad shape."""
        raw_id = doc.get("_id")
        try:
            doc_id = ObjectId(str(raw_id)) if raw_id is not None else None
        except InvalidId as exc:
            raise ValueError(f"not an ObjectId: {raw_id!r}") from exc
        return cls(
            id=doc_id,
            product_name=str(doc["product_name"]),
            price=int(doc["price"]),
            currency=str(doc["currency"]),
            vendor=str(doc["vendor"]),
            discount=int(doc.get("discount") or 0),
            accessories=[str(a) for a in (doc.get("accessories") or [])],
            is_essential=bool(doc.get("is_essential", False)),
        )

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "Product":
        """Build from already validated input; any caller-supplied id is dropped."""
        values = {k: data[k] for k in PRODUCT_FIELDS if data.get(k) is not None}
        return cls(**values)

    def fields(self) -> dict[str, Any]:
        """Attribute values keyed by document name, without the identifier."""
        return {
            "product_name": self.product_name,
            "price": self.price,
            "currency": self.currency,
            "discount": self.discount,
            "accessories": list(self.accessories),
            "vendor": self.vendor,
            "is_essential": self.is_essential,
        }

    def to_document(self) -> dict[str, Any]:
        doc = self.fields()
        if not doc["accessories"]:
            del doc["accessories"]
        if self.id is not None:
            doc["_id"] = self.id
        return doc

    def to_public(self) -> dict[str, Any]:
        body = {"id": str(self.id) if self.id is not None else None}
        body.update(self.fields())
        return body


def apply_patch(existing: Mapping[str, Any], patch: Mapping[str, Any]) -> dict[str, Any]:
    """
    Overlay merge: keys present in `patch` replace those in `existing`,
    keys absent from `patch` keep their existing value. Identifier keys
    in the patch are ignored.
    """
    merged = dict(existing)
    for key, value in patch.items():
        if key in IMMUTABLE_FIELDS:
            continue
        merged[key] = value
    return merged
