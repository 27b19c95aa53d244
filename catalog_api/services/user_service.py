"""
Account registration, authentication and token issuance.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from catalog_api.core.errors import (
    InvalidCredentials,
    LookupFailed,
    PersistFailed,
    UserExists,
    UserNotFound,
)
from catalog_api.core.security import CredentialHasher
from catalog_api.core.tokens import TokenManager
from catalog_api.domain.users import User
from catalog_api.repositories.base import CollectionStore, DuplicateKeyError, StoreError

logger = logging.getLogger(__name__)

USERNAME_FIELD = "username"


@dataclass
class UserService:
    """Handles registration, login and token issuance against the users collection."""

    store: CollectionStore
    hasher: CredentialHasher
    tokens: TokenManager
    conceal_unknown_users: bool = False

    # -------------------------------------- helpers --------------------------------------
    def _lookup(self, email: str) -> User | None:
        try:
            doc = self.store.find_one({USERNAME_FIELD: email})
        except StoreError as exc:
            logger.error("Unable to look up user %s: %s", email, exc)
            raise LookupFailed() from exc
        if doc is None:
            return None
        try:
            return User.from_document(doc)
        except (KeyError, TypeError, ValueError) as exc:
            logger.error("Unable to decode retrieved user %s: %s", email, exc)
            raise LookupFailed("Unable to decode retrieved user") from exc

    # -------------------------------------- registration --------------------------------------
    def register(self, email: str, password: str, is_admin: bool = False) -> User:
        if self._lookup(email) is not None:
            logger.warning("User by %s already exists", email)
            raise UserExists()

        user = User(email=email, password_hash=self.hasher.hash(password), is_admin=is_admin)
        try:
            self.store.insert_one(user.to_document())
        except DuplicateKeyError as exc:
            # lost the race against a concurrent registration; the unique index caught it
            logger.warning("User by %s already exists (unique index): %s", email, exc)
            raise UserExists() from exc
        except StoreError as exc:
            logger.error("Unable to insert the user %s: %s", email, exc)
            raise PersistFailed("Unable to create the user") from exc
        logger.info("Registered user %s", email)
        return user.without_secret()

    # -------------------------------------- login --------------------------------------
    def authenticate(self, email: str, password: str) -> User:
        stored = self._lookup(email)
        if stored is None:
            logger.info("User %s does not exist", email)
            if self.conceal_unknown_users:
                raise InvalidCredentials()
            raise UserNotFound()
        if not self.hasher.verify(password, stored.password_hash):
            logger.info("Invalid credentials for %s", email)
            raise InvalidCredentials()
        return stored.without_secret()

    def issue_token(self, user: User) -> str:
        claims = self.tokens.claims_for(user_id=user.email, authorized=user.is_admin)
        return self.tokens.issue(claims)
