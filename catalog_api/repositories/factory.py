"""Build the products/users collection stores for the configured backend."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable
import logging

from catalog_api.core.config import Settings
from catalog_api.db.session import Base, get_engine
from catalog_api.db import models  # noqa: F401  # ensure models are imported for metadata
from .base import CollectionStore
from .mongo_store import MongoCollection, connect
from .sql_store import SQLCollection

logger = logging.getLogger(__name__)

USERS_UNIQUE_FIELD = "username"


def _noop() -> None:
    return None


@dataclass
class Stores:
    products: CollectionStore
    users: CollectionStore
    bootstrap: Callable[[], None] = field(default=_noop)
    close: Callable[[], None] = field(default=_noop)


def _mongo_stores(settings: Settings) -> Stores:
    client = connect(settings)
    db = client[settings.db_name]
    products = MongoCollection(db[settings.products_collection])
    users = MongoCollection(db[settings.users_collection])

    def bootstrap() -> None:
        users.ensure_unique_index(USERS_UNIQUE_FIELD)
        logger.info("Unique index on %s.%s ensured", settings.users_collection, USERS_UNIQUE_FIELD)

    return Stores(products=products, users=users, bootstrap=bootstrap, close=client.close)


def _sql_stores(settings: Settings) -> Stores:
    url = settings.database_url

    def bootstrap() -> None:
        Base.metadata.create_all(bind=get_engine(url))
        logger.info("SQL document tables ready")

    return Stores(
        products=SQLCollection(url, settings.products_collection),
        users=SQLCollection(url, settings.users_collection, unique_field=USERS_UNIQUE_FIELD),
        bootstrap=bootstrap,
        close=lambda: get_engine(url).dispose(),
    )


def build_stores(settings: Settings) -> Stores:
    if settings.store_backend == "sql":
        return _sql_stores(settings)
    if settings.store_backend == "mongo":
        return _mongo_stores(settings)
    raise RuntimeError(f"Unknown STORE_BACKEND: {settings.store_backend!r}")
