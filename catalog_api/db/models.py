"""SQLAlchemy table backing the document collections."""
from __future__ import annotations

from sqlalchemy import JSON, Column, DateTime, String, UniqueConstraint, func

from .session import Base


class Document(Base):
    __tablename__ = "documents"
    __table_args__ = (UniqueConstraint("collection", "unique_key", name="uq_documents_collection_key"),)

    collection = Column(String(64), primary_key=True)
    doc_id = Column(String(24), primary_key=True)
    data = Column(JSON, nullable=False, default=dict)
    # value of the collection's unique field, if it has one (e.g. users.username)
    unique_key = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
