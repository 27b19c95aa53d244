from __future__ import annotations

from fastapi import Request

from catalog_api.core.tokens import Claims
from catalog_api.services.authorization import AuthorizationGate
from catalog_api.services.product_service import ProductService
from catalog_api.services.user_service import UserService


def _state(request: Request, name: str):
    value = getattr(getattr(request.app, "state", None), name, None)
    if value is None:
        raise RuntimeError(f"{name} is not configured")
    return value


def get_product_service(request: Request) -> ProductService:
    return _state(request, "product_service")


def get_user_service(request: Request) -> UserService:
    return _state(request, "user_service")


def _token_header(request: Request) -> str | None:
    settings = _state(request, "settings")
    return request.headers.get(settings.token_header)


def require_token(request: Request) -> Claims:
    """Any valid, unexpired token."""
    gate: AuthorizationGate = _state(request, "gate")
    return gate.check(_token_header(request))


def require_admin(request: Request) -> Claims:
    """A valid token whose `authorized` claim is true."""
    gate: AuthorizationGate = _state(request, "gate")
    return gate.check(_token_header(request), require_admin=True)
