"""Turn query-string constraints into exact-match store filters."""
from __future__ import annotations

from typing import Any, Mapping

from bson import ObjectId
from bson.errors import InvalidId

from catalog_api.core.errors import InvalidIdentifier

ID_FIELD = "_id"
ID_ALIASES = {"id", "_id"}


def parse_object_id(value: Any) -> ObjectId:
    """Parse a hex string into an ObjectId or raise InvalidIdentifier."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError) as exc:
        raise InvalidIdentifier() from exc


def build_filter(params: Mapping[str, Any]) -> dict[str, Any]:
    """
    Build a filter matching documents where every listed field equals the given value.

    Multi-valued parameters (lists) contribute only their first value.
    `id`/`_id` are parsed into the document identifier.
    """
    result: dict[str, Any] = {}
    for key, value in params.items():
        if isinstance(value, (list, tuple)):
            if not value:
                continue
            value = value[0]
        if key in ID_ALIASES:
            result[ID_FIELD] = parse_object_id(value)
        else:
            result[key] = value
    return result
