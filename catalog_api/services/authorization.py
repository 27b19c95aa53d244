"""Bearer-token gate in front of privileged product operations."""
from __future__ import annotations

import logging

from catalog_api.core.errors import Forbidden, TokenMalformed
from catalog_api.core.tokens import Claims, TokenManager

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def extract_bearer(header_value: str | None) -> str:
    """Return the token from a `Bearer <token>` header value."""
    value = (header_value or "").strip()
    if not value.startswith(BEARER_PREFIX):
        raise TokenMalformed("Missing or malformed bearer token")
    token = value[len(BEARER_PREFIX):].strip()
    if not token:
        raise TokenMalformed("Missing or malformed bearer token")
    return token


class AuthorizationGate:
    """Checks a previously issued token; never looks at credentials."""

    def __init__(self, tokens: TokenManager):
        self.tokens = tokens

    def check(self, header_value: str | None, *, require_admin: bool = False) -> Claims:
        token = extract_bearer(header_value)
        claims = self.tokens.verify(token)
        if require_admin and not claims.authorized:
            logger.warning("User %s is not authorized for an admin operation", claims.user_id)
            raise Forbidden()
        return claims
