from __future__ import annotations

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalog_api.core.config import Settings, get_settings
from catalog_api.core.errors import ServiceError
from catalog_api.core.logging import setup_logging
from catalog_api.core.middleware import (
    AccessLogMiddleware,
    BodySizeLimitMiddleware,
    CorrelationIdMiddleware,
)
from catalog_api.core.security import CredentialHasher
from catalog_api.core.tokens import TokenManager
from catalog_api.repositories.factory import Stores, build_stores
from catalog_api.routers import products as products_router
from catalog_api.routers import users as users_router
from catalog_api.services.authorization import AuthorizationGate
from catalog_api.services.product_service import ProductService
from catalog_api.services.user_service import UserService

logger = logging.getLogger(__name__)


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc)
        return JSONResponse({"message": exc.message}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def payload_error_handler(request: Request, exc: RequestValidationError):
        logger.warning("Unable to parse request payload: %s", exc.errors())
        return JSONResponse({"message": "Unable to parse the request payload"}, status_code=422)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse({"message": str(exc.detail)}, status_code=exc.status_code, headers=exc.headers)


def create_app(settings: Settings | None = None, stores: Stores | None = None) -> FastAPI:
    """Wire settings, stores and services into a FastAPI application."""
    settings = settings or get_settings()
    setup_logging(settings)
    stores = stores or build_stores(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        stores.bootstrap()
        logger.info("Listening on %s:%s", settings.host, settings.port)
        try:
            yield
        finally:
            stores.close()

    app = FastAPI(title="Catalog API", lifespan=lifespan)

    tokens = TokenManager(settings)
    app.state.settings = settings
    app.state.gate = AuthorizationGate(tokens)
    app.state.product_service = ProductService(stores.products)
    app.state.user_service = UserService(
        store=stores.users,
        hasher=CredentialHasher(settings),
        tokens=tokens,
        conceal_unknown_users=settings.conceal_unknown_users,
    )

    # outermost last: correlation id must be set before the access log runs
    app.add_middleware(BodySizeLimitMiddleware, limit=settings.body_limit_bytes)
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    _install_error_handlers(app)
    app.include_router(products_router.router)
    app.include_router(users_router.router)
    return app
