"""Entry point for uvicorn/gunicorn: `uvicorn catalog_api.app_factory:create_app --factory`."""
from catalog_api.app import create_app

__all__ = ["create_app"]
