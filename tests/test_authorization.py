from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from catalog_api.core.errors import Forbidden, TokenExpired, TokenMalformed
from catalog_api.core.tokens import Claims, TokenManager
from catalog_api.services.authorization import AuthorizationGate, extract_bearer


@pytest.fixture()
def tokens(settings):
    return TokenManager(settings)


@pytest.fixture()
def gate(tokens):
    return AuthorizationGate(tokens)


@pytest.mark.parametrize("header", [None, "", "Bearer", "Bearer ", "Token abc", "bearer abc"])
def test_malformed_headers(header):
    with pytest.raises(TokenMalformed):
        extract_bearer(header)


def test_extracts_token():
    assert extract_bearer("Bearer abc.def.ghi") == "abc.def.ghi"


def test_any_valid_token_passes_without_admin(gate, tokens):
    token = tokens.issue(tokens.claims_for("a@gmail.com", authorized=False))
    assert gate.check(f"Bearer {token}").user_id == "a@gmail.com"


def test_admin_requires_authorized_claim(gate, tokens):
    user_token = tokens.issue(tokens.claims_for("a@gmail.com", authorized=False))
    with pytest.raises(Forbidden):
        gate.check(f"Bearer {user_token}", require_admin=True)

    admin_token = tokens.issue(tokens.claims_for("root@gmail.com", authorized=True))
    assert gate.check(f"Bearer {admin_token}", require_admin=True).authorized is True


def test_expired_and_forged_tokens(gate, tokens):
    expired = tokens.issue(
        Claims(authorized=True, user_id="a@gmail.com", expiry=datetime.now(timezone.utc) - timedelta(seconds=5))
    )
    with pytest.raises(TokenExpired):
        gate.check(f"Bearer {expired}", require_admin=True)
    with pytest.raises(TokenMalformed):
        gate.check("Bearer not.a.token")
