"""Document collection backed by a single SQLAlchemy table (local dev and tests)."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

from bson import ObjectId
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from catalog_api.db.models import Document
from catalog_api.db.session import get_session
from .base import DuplicateKeyError, StoreError

ID_FIELD = "_id"


def _matches(doc: Mapping[str, Any], filter: Mapping[str, Any]) -> bool:
    for key, expected in filter.items():
        if key == ID_FIELD:
            continue
        if doc.get(key) != expected:
            return False
    return True


class SQLCollection:
    """Implements the collection capability with JSON rows in the `documents` table."""

    def __init__(self, database_url: str, name: str, unique_field: str | None = None):
        self.database_url = database_url
        self.name = name
        self.unique_field = unique_field

    # -------------------------- helpers --------------------------
    def _to_doc(self, row: Document) -> dict[str, Any]:
        doc = dict(row.data or {})
        # ids supplied by other writers are returned as stored
        doc[ID_FIELD] = ObjectId(row.doc_id) if ObjectId.is_valid(row.doc_id) else row.doc_id
        return doc

    def _unique_key(self, data: Mapping[str, Any]) -> str | None:
        if not self.unique_field:
            return None
        value = data.get(self.unique_field)
        return None if value is None else str(value)

    def _rows(self, session, filter: Mapping[str, Any]) -> list[Document]:
        stmt = select(Document).where(Document.collection == self.name)
        if ID_FIELD in filter:
            stmt = stmt.where(Document.doc_id == str(filter[ID_FIELD]))
        if self.unique_field and filter.get(self.unique_field) is not None:
            stmt = stmt.where(Document.unique_key == str(filter[self.unique_field]))
        stmt = stmt.order_by(Document.created_at, Document.doc_id)
        rows = session.execute(stmt).scalars().all()
        return [row for row in rows if _matches(row.data or {}, filter)]

    # -------------------------- capability --------------------------
    def insert_one(self, document: Mapping[str, Any]) -> ObjectId:
        data = {k: v for k, v in document.items() if k != ID_FIELD}
        doc_id = document.get(ID_FIELD) or ObjectId()
        try:
            with get_session(self.database_url) as session:
                session.add(
                    Document(
                        collection=self.name,
                        doc_id=str(doc_id),
                        data=data,
                        unique_key=self._unique_key(data),
                        created_at=datetime.now(timezone.utc),
                    )
                )
                session.commit()
        except IntegrityError as exc:
            raise DuplicateKeyError(str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc
        return doc_id

    def find(self, filter: Mapping[str, Any]) -> list[dict[str, Any]]:
        try:
            with get_session(self.database_url) as session:
                return [self._to_doc(row) for row in self._rows(session, filter)]
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

    def find_one(self, filter: Mapping[str, Any]) -> dict[str, Any] | None:
        try:
            with get_session(self.database_url) as session:
                for row in self._rows(session, filter):
                    return self._to_doc(row)
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc
        return None

    def update_one(self, filter: Mapping[str, Any], fields: Mapping[str, Any]) -> int:
        try:
            with get_session(self.database_url) as session:
                for row in self._rows(session, filter):
                    data = dict(row.data or {})
                    data.update({k: v for k, v in fields.items() if k != ID_FIELD})
                    row.data = data
                    row.unique_key = self._unique_key(data)
                    row.updated_at = datetime.now(timezone.utc)
                    session.commit()
                    return 1
        except IntegrityError as exc:
            raise DuplicateKeyError(str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc
        return 0

    def delete_one(self, filter: Mapping[str, Any]) -> int:
        try:
            with get_session(self.database_url) as session:
                for row in self._rows(session, filter):
                    stmt = delete(Document).where(
                        Document.collection == self.name, Document.doc_id == row.doc_id
                    )
                    session.execute(stmt)
                    session.commit()
                    return 1
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc
        return 0
