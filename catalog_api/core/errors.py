"""Typed errors raised by services and mapped to HTTP responses by the app."""

from __future__ import annotations

from typing import Sequence


class ServiceError(Exception):
    """Base class for every error that reaches the HTTP boundary."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# -------------------------- caller faults --------------------------
class InvalidIdentifier(ServiceError):
    status_code = 400
    default_message = "Unable to convert to ObjectID"


class ValidationFailed(ServiceError):
    status_code = 400
    default_message = "Unable to validate request payload"

    def __init__(self, violations: Sequence, message: str | None = None):
        self.violations = list(violations)
        fields = ", ".join(v.field for v in self.violations)
        if message is None and fields:
            message = f"{self.default_message}: {fields}"
        super().__init__(message)


class NotFound(ServiceError):
    status_code = 404
    default_message = "Unable to find the product"


class UserNotFound(NotFound):
    default_message = "Invalid credentials"


class UserExists(ServiceError):
    status_code = 400
    default_message = "User already exists"


class InvalidCredentials(ServiceError):
    status_code = 401
    default_message = "Invalid credentials"


class Forbidden(ServiceError):
    status_code = 403
    default_message = "Not authorized"


class TokenMalformed(ServiceError):
    status_code = 401
    default_message = "Unable to parse token"


class TokenExpired(ServiceError):
    status_code = 401
    default_message = "Token has expired"


class PayloadTooLarge(ServiceError):
    status_code = 413
    default_message = "Request payload too large"


# -------------------------- server faults --------------------------
class TokenSigningFailed(ServiceError):
    default_message = "Unable to generate the token"


class MalformedHash(ServiceError):
    default_message = "Stored password hash is malformed"


class QueryFailed(ServiceError):
    default_message = "Unable to find the products"


class DecodeFailed(ServiceError):
    default_message = "Unable to parse retrieved products"


class InsertFailed(ServiceError):
    default_message = "Unable to insert to database"


class PersistFailed(ServiceError):
    default_message = "Unable to persist the document"


class LookupFailed(ServiceError):
    default_message = "Unable to look up the user"
