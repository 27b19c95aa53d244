"""Signed, time-limited claim tokens (HS256 JWT)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
import logging

import jwt

from .config import Settings
from .errors import TokenExpired, TokenMalformed, TokenSigningFailed

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


@dataclass(frozen=True)
class Claims:
    authorized: bool
    user_id: str
    expiry: datetime

    def to_payload(self) -> dict:
        return {
            "authorized": self.authorized,
            "user_id": self.user_id,
            "exp": int(self.expiry.timestamp()),
        }

    @classmethod
    def from_payload(cls, payload: dict) -> "Claims":
        authorized = payload.get("authorized")
        user_id = payload.get("user_id")
        exp = payload.get("exp")
        if not isinstance(authorized, bool) or not isinstance(user_id, str) or not isinstance(exp, (int, float)):
            raise TokenMalformed()
        return cls(
            authorized=authorized,
            user_id=user_id,
            expiry=datetime.fromtimestamp(exp, tz=timezone.utc),
        )


class TokenManager:
    """Issues and verifies claim tokens with a single signing secret."""

    def __init__(self, settings: Settings):
        self._secret = settings.jwt_token_secret
        self.ttl = timedelta(seconds=settings.token_ttl_seconds)

    def claims_for(self, user_id: str, authorized: bool, now: datetime | None = None) -> Claims:
        now = now or datetime.now(timezone.utc)
        return Claims(authorized=authorized, user_id=user_id, expiry=now + self.ttl)

    def issue(self, claims: Claims) -> str:
        if not self._secret:
            logger.error("Unable to generate the token: signing secret is empty")
            raise TokenSigningFailed()
        try:
            return jwt.encode(claims.to_payload(), self._secret, algorithm=ALGORITHM)
        except (jwt.PyJWTError, TypeError, ValueError) as exc:
            logger.error("Unable to generate the token: %s", exc)
            raise TokenSigningFailed() from exc

    def verify(self, token: str) -> Claims:
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require": ["exp"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpired() from exc
        except jwt.PyJWTError as exc:
            raise TokenMalformed() from exc
        return Claims.from_payload(payload)
