"""
High-level use cases for the catalog API.

Routers (FastAPI endpoints) call these services instead of touching the
collection stores directly; services raise typed errors from
catalog_api.core.errors.
"""
