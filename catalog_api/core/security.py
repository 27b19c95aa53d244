"""Security helpers (hashing and verification)."""

from __future__ import annotations

from argon2 import PasswordHasher, exceptions as argon_exc

from .config import Settings
from .errors import MalformedHash


class CredentialHasher:
    """One-way password hashing with a fixed Argon2 work factor."""

    def __init__(self, settings: Settings):
        self._ph = PasswordHasher(
            time_cost=settings.hash_time_cost,
            memory_cost=settings.hash_memory_cost,
            parallelism=settings.hash_parallelism,
        )

    def hash(self, plaintext: str) -> str:
        return self._ph.hash(plaintext)

    def check(self, plaintext: str, stored_hash: str | None) -> bool:
        """Like verify, but raises MalformedHash when the stored value is not an Argon2 hash."""
        try:
            return self._ph.verify(stored_hash or "", plaintext)
        except argon_exc.VerifyMismatchError:
            return False
        except argon_exc.InvalidHashError as exc:
            raise MalformedHash() from exc
        except argon_exc.VerificationError:
            return False

    def verify(self, plaintext: str, stored_hash: str | None) -> bool:
        # a malformed hash reads exactly like a wrong password to the caller
        try:
            return self.check(plaintext, stored_hash)
        except MalformedHash:
            return False
