"""User entity and its document codec."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass
class User:
    email: str
    password_hash: str = ""
    is_admin: bool = False

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "User":
        return cls(
            email=str(doc["username"]),
            password_hash=str(doc.get("password") or ""),
            is_admin=bool(doc.get("isadmin", False)),
        )

    def to_document(self) -> dict[str, Any]:
        return {"username": self.email, "password": self.password_hash, "isadmin": self.is_admin}

    def without_secret(self) -> "User":
        return User(email=self.email, password_hash="", is_admin=self.is_admin)

    def to_public(self) -> dict[str, Any]:
        # the password hash never leaves the service boundary
        return {"username": self.email}
