#!/usr/bin/env python3
"""
Register an account with the admin claim directly in the configured store.

Usage:
  python scripts/add_admin.py --username admin@example.org [--password ...]
"""
from __future__ import annotations

import argparse
import secrets
import sys

from catalog_api.core.config import get_settings
from catalog_api.core.errors import ServiceError, ValidationFailed
from catalog_api.core.security import CredentialHasher
from catalog_api.core.tokens import TokenManager
from catalog_api.domain.validation import validate_credentials
from catalog_api.repositories.factory import build_stores
from catalog_api.services.user_service import UserService


def gen_password(length: int = 16) -> str:
    return secrets.token_urlsafe(length)[:length]


def main() -> None:
    ap = argparse.ArgumentParser(description="Create an admin account")
    ap.add_argument("--username", required=True, help="Account email")
    ap.add_argument("--password", help="Password (default: random 16 chars)")
    args = ap.parse_args()

    username = (args.username or "").strip()
    password = args.password or gen_password()
    violations = validate_credentials({"username": username, "password": password})
    if violations:
        raise ValidationFailed(violations)

    settings = get_settings()
    stores = build_stores(settings)
    try:
        stores.bootstrap()
        svc = UserService(
            store=stores.users,
            hasher=CredentialHasher(settings),
            tokens=TokenManager(settings),
        )
        svc.register(username, password, is_admin=True)
    finally:
        stores.close()

    print("OK: admin created")
    print(f"  Username: {username}")
    if not args.password:
        print(f"  Password: {password}")


if __name__ == "__main__":
    try:
        main()
    except ServiceError as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc.message}\n")
        raise SystemExit(1)
