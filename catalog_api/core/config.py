"""
Configuration helpers for the catalog backend.

Settings are read from the environment once and handed to the app factory,
services and stores explicitly; nothing below mutates after startup.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str = "dev"
    host: str = "localhost"
    port: int = 8080
    db_host: str = "localhost"
    db_port: int = 27017
    db_name: str = "tronics"
    products_collection: str = "products"
    users_collection: str = "users"
    store_backend: str = "mongo"
    database_url: str = ""
    db_timeout_ms: int = 5000
    jwt_token_secret: str = "abrakadabra"
    token_ttl_seconds: int = 900
    token_header: str = "x-auth-token"
    body_limit_bytes: int = 1024 * 1024
    hash_time_cost: int = 2
    hash_memory_cost: int = 19456
    hash_parallelism: int = 1
    conceal_unknown_users: bool = False
    log_level: str = "INFO"

    @property
    def mongo_uri(self) -> str:
        return f"mongodb://{self.db_host}:{self.db_port}"


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        host=os.getenv("HOST", "localhost"),
        port=_int(os.getenv("MY_APP_PORT", "8080"), 8080),
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=_int(os.getenv("DB_PORT", "27017"), 27017),
        db_name=os.getenv("DB_NAME", "tronics"),
        products_collection=os.getenv("PRODUCTS_COL_NAME", "products"),
        users_collection=os.getenv("USERS_COL_NAME", "users"),
        store_backend=(os.getenv("STORE_BACKEND") or "mongo").lower(),
        database_url=os.getenv("DATABASE_URL", ""),
        db_timeout_ms=_int(os.getenv("DB_TIMEOUT_MS", "5000"), 5000),
        jwt_token_secret=os.getenv("JWT_TOKEN_SECRET", "abrakadabra"),
        token_ttl_seconds=_int(os.getenv("TOKEN_TTL_SECONDS", "900"), 900),
        token_header=(os.getenv("TOKEN_HEADER") or "x-auth-token").lower(),
        body_limit_bytes=_int(os.getenv("BODY_LIMIT_BYTES", "1048576"), 1024 * 1024),
        hash_time_cost=_int(os.getenv("HASH_TIME_COST", "2"), 2),
        hash_memory_cost=_int(os.getenv("HASH_MEMORY_COST", "19456"), 19456),
        hash_parallelism=_int(os.getenv("HASH_PARALLELISM", "1"), 1),
        conceal_unknown_users=_bool(os.getenv("CONCEAL_UNKNOWN_USERS"), False),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
