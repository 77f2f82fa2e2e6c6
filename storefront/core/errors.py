# storefront/core/errors.py
"""
Error taxonomy.

Repositories and the token service raise the domain errors below; services
translate them into `ApiError`, which the exception handler in `main.py`
renders as `{"error": ..., "code": ...}`.
"""

from typing import Any


class StorefrontError(Exception):
    """Base class for every domain error raised by the stores."""


class ValidationError(StorefrontError):
    """Malformed or missing input."""


class InvalidArgument(ValidationError):
    """An identifier that is not a positive integer."""


class PasswordTooLongError(ValidationError):
    """Password over bcrypt's 72-byte input limit."""


class DuplicateEmailError(StorefrontError):
    """Email already registered."""


class InvalidToken(StorefrontError):
    """Missing, expired, malformed or unresolvable token."""


class StoreError(StorefrontError):
    """Underlying database failure; message is the driver's text."""


class ApiError(Exception):
    """
    HTTP-facing error raised by services and routers.

    Rendered as:
        {"error": error, "code": code}            (code omitted when None)
        {"error": ..., "code": ..., "details": ...} (when details is set)
    """

    def __init__(
        self,
        status_code: int,
        error: str,
        code: str | None = None,
        details: str | None = None,
    ):
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.code = code
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.error}
        if self.code is not None:
            body["code"] = self.code
        if self.details is not None:
            body["details"] = self.details
        return body
